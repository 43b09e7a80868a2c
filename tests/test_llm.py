"""Unit tests for provider clients and error classification."""

import json
import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import openai

from agent_orchestrator.core.errors import ConfigurationError, ExecutionErrorKind
from agent_orchestrator.core.llm import (
    AnthropicLLMClient,
    AzureOpenAILLMClient,
    LLMProvider,
    ModelSettings,
    OpenAILLMClient,
    classify_error,
    create_llm_client,
    is_reasoning_model,
)


class TestCreateClient(unittest.TestCase):

    def test_requires_api_key(self):
        with self.assertRaises(ConfigurationError):
            create_llm_client(ModelSettings(provider=LLMProvider.OPENAI, model="gpt-4.1"))

    def test_azure_requires_endpoint(self):
        settings = ModelSettings(provider=LLMProvider.AZURE, model="gpt-4.1", api_key="key")

        with self.assertRaises(ConfigurationError):
            create_llm_client(settings)

    def test_builds_provider_client(self):
        openai_client = create_llm_client(
            ModelSettings(provider=LLMProvider.OPENAI, model="gpt-4.1", api_key="sk-test")
        )
        azure_client = create_llm_client(ModelSettings(
            provider=LLMProvider.AZURE,
            model="gpt-4.1",
            api_key="key",
            base_url="https://example.openai.azure.com/",
            api_version="2024-02-01",
        ))
        claude_client = create_llm_client(
            ModelSettings(provider=LLMProvider.ANTHROPIC, model="claude-sonnet-4-20250514", api_key="key")
        )

        self.assertIsInstance(openai_client, OpenAILLMClient)
        self.assertIsInstance(azure_client, AzureOpenAILLMClient)
        self.assertEqual(azure_client.default_model, "gpt-4.1")
        self.assertIsInstance(claude_client, AnthropicLLMClient)

    def test_new_client_per_call(self):
        settings = ModelSettings(provider=LLMProvider.OPENAI, model="gpt-4.1", api_key="sk-test")

        self.assertIsNot(create_llm_client(settings), create_llm_client(settings))


class TestReasoningModels(unittest.TestCase):

    def test_o_series_names(self):
        self.assertTrue(is_reasoning_model(LLMProvider.AZURE, "o4-mini"))
        self.assertTrue(is_reasoning_model(LLMProvider.OPENAI, "o3"))
        self.assertFalse(is_reasoning_model(LLMProvider.OPENAI, "gpt-4.1"))
        self.assertFalse(is_reasoning_model(LLMProvider.ANTHROPIC, "o4-mini"))
        self.assertFalse(is_reasoning_model(LLMProvider.OPENAI, None))


class TestClassifyError(unittest.TestCase):

    def test_connection_error_is_transport(self):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")

        self.assertEqual(classify_error(openai.APIConnectionError(request=request)), ExecutionErrorKind.TRANSPORT)

    def test_authentication_error_is_configuration(self):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        response = httpx.Response(401, request=request)
        error = openai.AuthenticationError("bad key", response=response, body=None)

        self.assertEqual(classify_error(error), ExecutionErrorKind.CONFIGURATION)

    def test_server_error_is_model(self):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        response = httpx.Response(500, request=request)
        error = openai.InternalServerError("overloaded", response=response, body=None)

        self.assertEqual(classify_error(error), ExecutionErrorKind.MODEL)

    def test_other_errors_are_unknown(self):
        self.assertEqual(classify_error(KeyError("choices")), ExecutionErrorKind.UNKNOWN)
        self.assertEqual(classify_error(ConfigurationError("no key")), ExecutionErrorKind.CONFIGURATION)


class TestAnthropicClient(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.client = AnthropicLLMClient(api_key="key", default_model="claude-sonnet-4-20250514")
        self.client.client = SimpleNamespace(messages=SimpleNamespace(create=AsyncMock()))

    def claude_response(self, *blocks, stop_reason="end_turn"):
        return SimpleNamespace(
            content=list(blocks),
            stop_reason=stop_reason,
            model="claude-sonnet-4-20250514",
            usage=SimpleNamespace(input_tokens=10, output_tokens=5),
        )

    async def test_converts_messages_and_tools(self):
        self.client.client.messages.create.return_value = self.claude_response(
            SimpleNamespace(type="tool_use", id="tu_1", name="web_search", input={"query": "wind"})
        )

        response = await self.client.chat.completions.create(
            model="claude-sonnet-4-20250514",
            messages=[
                {"role": "system", "content": "You search the web."},
                {"role": "user", "content": "Search term: wind"},
            ],
            tools=[{
                "type": "function",
                "function": {"name": "web_search", "description": "Search", "parameters": {"type": "object"}},
            }],
            tool_choice="required",
            response_format={"type": "json_object"},
        )

        request = self.client.client.messages.create.call_args.kwargs
        self.assertEqual(request["system"], "You search the web.")
        self.assertEqual(request["messages"], [{"role": "user", "content": "Search term: wind"}])
        self.assertEqual(request["tools"][0]["input_schema"], {"type": "object"})
        self.assertEqual(request["tool_choice"], {"type": "any"})
        self.assertNotIn("response_format", request)

        call = response.choices[0].message.tool_calls[0]
        self.assertEqual(call.function.name, "web_search")
        self.assertEqual(json.loads(call.function.arguments), {"query": "wind"})

    async def test_tool_turns_become_content_blocks(self):
        self.client.client.messages.create.return_value = self.claude_response(
            SimpleNamespace(type="text", text="Wind is growing.")
        )

        response = await self.client.create(messages=[
            {"role": "user", "content": "Search term: wind"},
            {
                "role": "assistant",
                "content": None,
                "tool_calls": [{
                    "id": "tu_1",
                    "type": "function",
                    "function": {"name": "web_search", "arguments": "{\"query\": \"wind\"}"},
                }],
            },
            {"role": "tool", "content": "{\"results\": []}", "tool_call_id": "tu_1"},
        ])

        messages = self.client.client.messages.create.call_args.kwargs["messages"]
        self.assertEqual(messages[1]["content"][0]["type"], "tool_use")
        self.assertEqual(messages[1]["content"][0]["input"], {"query": "wind"})
        self.assertEqual(messages[2]["role"], "user")
        self.assertEqual(messages[2]["content"][0]["tool_use_id"], "tu_1")
        self.assertEqual(response.choices[0].message.content, "Wind is growing.")
        self.assertIsNone(response.choices[0].message.tool_calls)


if __name__ == "__main__":
    unittest.main()
