"""
LLM provider abstraction supporting Azure OpenAI, OpenAI and Claude (Anthropic).

Every client exposes the OpenAI-compatible ``chat.completions.create`` surface.
Clients are cheap to build and are created fresh for each agent invocation:

    from agent_orchestrator.core.llm import ModelSettings, LLMProvider, create_llm_client

    settings = ModelSettings(provider=LLMProvider.OPENAI, model="gpt-4.1", api_key="...")
    client = create_llm_client(settings)
"""

import json
import re
import logging
from enum import Enum
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from dataclasses import dataclass

from .errors import ConfigurationError, ExecutionErrorKind

logger = logging.getLogger(__name__)

DEFAULT_AZURE_API_VERSION = "2024-02-01"


class LLMProvider(Enum):
    AZURE = "azure"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


@dataclass(frozen=True)
class ModelSettings:
    """Everything needed to build a client for one model."""
    provider: LLMProvider = LLMProvider.OPENAI
    model: str = "gpt-4.1"
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    api_version: Optional[str] = None
    # o-series models take max_completion_tokens and only the default temperature.
    reasoning: bool = False

    def __repr__(self) -> str:
        # Keep keys out of logs and tracebacks.
        return (
            f"ModelSettings(provider={self.provider.value!r}, model={self.model!r}, "
            f"base_url={self.base_url!r}, reasoning={self.reasoning!r})"
        )


class AnthropicLLMClient:
    """Wrapper for Anthropic's Claude API with OpenAI-compatible interface."""

    def __init__(self, api_key: str, default_model: str, base_url: Optional[str] = None):
        from anthropic import AsyncAnthropic

        if base_url:
            self.client = AsyncAnthropic(api_key=api_key, base_url=base_url)
        else:
            self.client = AsyncAnthropic(api_key=api_key)
        self.default_model = default_model
        self.chat = self  # For compatibility with OpenAI interface
        self.completions = self

    async def create(
        self,
        model: Optional[str] = None,
        messages: List[Dict[str, Any]] = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
        tools: Optional[List[Dict]] = None,
        tool_choice: Optional[str] = None,
        **kwargs
    ) -> Any:
        """Create a chat completion using Claude."""
        # response_format has no Claude counterpart; the schema travels in the system prompt.
        kwargs.pop("response_format", None)

        system_content = ""
        chat_messages = []

        for msg in messages or []:
            role = msg.get("role", "user")
            content = msg.get("content") or ""

            if role == "system":
                system_content += content + "\n"
            elif role == "tool":
                # Claude expects tool results as user messages with tool_result blocks
                chat_messages.append({
                    "role": "user",
                    "content": [
                        {
                            "type": "tool_result",
                            "tool_use_id": msg.get("tool_call_id", "unknown"),
                            "content": content if isinstance(content, str) else json.dumps(content)
                        }
                    ]
                })
            elif role == "assistant" and msg.get("tool_calls"):
                content_blocks = []
                if content:
                    content_blocks.append({"type": "text", "text": content})
                for tc in msg["tool_calls"]:
                    arguments = tc["function"]["arguments"]
                    content_blocks.append({
                        "type": "tool_use",
                        "id": tc["id"],
                        "name": tc["function"]["name"],
                        "input": json.loads(arguments) if isinstance(arguments, str) else arguments
                    })
                chat_messages.append({"role": "assistant", "content": content_blocks})
            else:
                chat_messages.append({"role": role, "content": content})

        request_kwargs = {
            "model": model or self.default_model,
            "max_tokens": max_tokens,
            "messages": chat_messages,
            "temperature": temperature,
        }

        if system_content:
            request_kwargs["system"] = system_content.strip()

        if tools:
            claude_tools = []
            for tool in tools:
                if tool.get("type") == "function":
                    func = tool["function"]
                    claude_tools.append({
                        "name": func["name"],
                        "description": func.get("description", ""),
                        "input_schema": func.get("parameters", {"type": "object", "properties": {}})
                    })
            if claude_tools:
                request_kwargs["tools"] = claude_tools
                if tool_choice == "required":
                    request_kwargs["tool_choice"] = {"type": "any"}

        response = await self.client.messages.create(**request_kwargs)
        return self._convert_response(response)

    def _convert_response(self, response: Any) -> Any:
        """Convert Anthropic response to OpenAI-compatible format."""
        text_content = ""
        tool_calls = []

        for block in response.content:
            if getattr(block, "type", None) == "tool_use":
                tool_calls.append(SimpleNamespace(
                    id=block.id,
                    type="function",
                    function=SimpleNamespace(name=block.name, arguments=json.dumps(block.input)),
                ))
            elif hasattr(block, "text"):
                text_content += block.text

        message = SimpleNamespace(
            content=text_content,
            tool_calls=tool_calls or None,
            role="assistant",
        )
        choice = SimpleNamespace(message=message, finish_reason=response.stop_reason)
        return SimpleNamespace(
            choices=[choice],
            model=response.model,
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens,
            },
        )


class OpenAILLMClient:
    """Wrapper for OpenAI API."""

    def __init__(self, api_key: str, default_model: str, base_url: Optional[str] = None):
        from openai import AsyncOpenAI
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.default_model = default_model
        self.chat = self.client.chat
        self.completions = self.client.chat.completions


class AzureOpenAILLMClient:
    """Wrapper for Azure OpenAI deployments (deployment name == model name)."""

    def __init__(self, api_key: str, endpoint: str, deployment: str, api_version: str):
        from openai import AsyncAzureOpenAI
        self.client = AsyncAzureOpenAI(
            api_key=api_key,
            azure_endpoint=endpoint,
            azure_deployment=deployment,
            api_version=api_version,
        )
        self.default_model = deployment
        self.chat = self.client.chat
        self.completions = self.client.chat.completions


def create_llm_client(settings: ModelSettings) -> Any:
    """
    Create an LLM client for the given settings.

    A new client is returned on every call; callers must not cache it across
    concurrent invocations.

    Raises:
        ConfigurationError: when a credential the provider needs is missing.
    """
    if not settings.api_key:
        raise ConfigurationError(
            f"No API key configured for provider '{settings.provider.value}'",
            missing=["api_key"],
        )

    logger.debug("Creating %s client for model %s", settings.provider.value, settings.model)

    if settings.provider == LLMProvider.ANTHROPIC:
        return AnthropicLLMClient(
            api_key=settings.api_key,
            default_model=settings.model,
            base_url=settings.base_url,
        )

    if settings.provider == LLMProvider.OPENAI:
        return OpenAILLMClient(
            api_key=settings.api_key,
            default_model=settings.model,
            base_url=settings.base_url,
        )

    if settings.provider == LLMProvider.AZURE:
        if not settings.base_url:
            raise ConfigurationError("Azure endpoint is not configured", missing=["base_url"])
        return AzureOpenAILLMClient(
            api_key=settings.api_key,
            endpoint=settings.base_url,
            deployment=settings.model,
            api_version=settings.api_version or DEFAULT_AZURE_API_VERSION,
        )

    raise ConfigurationError(f"Unknown provider: {settings.provider}")


def classify_error(exc: BaseException) -> ExecutionErrorKind:
    """Map an SDK exception onto an ExecutionErrorKind."""
    if isinstance(exc, ConfigurationError):
        return ExecutionErrorKind.CONFIGURATION

    import anthropic
    import openai

    if isinstance(exc, (openai.AuthenticationError, anthropic.AuthenticationError,
                        openai.PermissionDeniedError, anthropic.PermissionDeniedError)):
        return ExecutionErrorKind.CONFIGURATION
    if isinstance(exc, (openai.APIConnectionError, anthropic.APIConnectionError)):
        return ExecutionErrorKind.TRANSPORT
    if isinstance(exc, (openai.APIError, anthropic.APIError)):
        return ExecutionErrorKind.MODEL
    return ExecutionErrorKind.UNKNOWN


def get_default_model(provider: LLMProvider) -> str:
    """Get the default model for a provider."""
    defaults = {
        LLMProvider.AZURE: "gpt-4.1",
        LLMProvider.OPENAI: "gpt-4.1",
        LLMProvider.ANTHROPIC: "claude-sonnet-4-20250514",
    }
    return defaults.get(provider, "gpt-4.1")


def is_reasoning_model(provider: LLMProvider, model: Optional[str]) -> bool:
    """True for OpenAI o-series models (o1, o3, o4-mini, ...)."""
    if provider == LLMProvider.ANTHROPIC or not model:
        return False
    return re.match(r"^o\d", model.lower()) is not None
