"""Unit tests for environment configuration."""

import os
import unittest
from unittest.mock import patch

from agent_orchestrator.config import CODING, GENERAL, Config
from agent_orchestrator.core.errors import ConfigurationError
from agent_orchestrator.core.llm import LLMProvider

AZURE_ENV = {
    "AZURE_BASE_URL": "https://example.openai.azure.com/",
    "AZURE_API_KEY": "azure-key",
    "AZURE_MODEL_NAME": "gpt-4.1",
    "AZURE_MODEL_NAME_O4_MINI": "o4-mini",
}


class TestConfigFromEnv(unittest.TestCase):

    @patch.dict(os.environ, AZURE_ENV, clear=True)
    def test_azure_detected_from_key(self):
        config = Config.from_env()

        self.assertEqual(config.provider, LLMProvider.AZURE)
        settings = config.model_settings()
        self.assertEqual(settings.model, "gpt-4.1")
        self.assertEqual(settings.base_url, "https://example.openai.azure.com/")
        self.assertEqual(settings.api_version, "2024-02-01")

    @patch.dict(os.environ, AZURE_ENV, clear=True)
    def test_coding_agent_uses_its_own_deployment(self):
        config = Config.from_env()

        self.assertEqual(config.model_settings(CODING).model, "o4-mini")
        self.assertEqual(config.model_settings(GENERAL).model, "gpt-4.1")
        self.assertTrue(config.model_settings(CODING).reasoning)
        self.assertFalse(config.model_settings(GENERAL).reasoning)

    @patch.dict(os.environ, {"AZURE_API_KEY": "azure-key"}, clear=True)
    def test_missing_azure_variables_are_named(self):
        config = Config.from_env()

        with self.assertRaises(ConfigurationError) as ctx:
            config.model_settings()

        self.assertEqual(ctx.exception.missing, ["AZURE_BASE_URL", "AZURE_MODEL_NAME"])
        self.assertIn("Please set: AZURE_BASE_URL, AZURE_MODEL_NAME", str(ctx.exception))

    @patch.dict(os.environ, {"AZURE_API_KEY": "azure-key"}, clear=True)
    def test_missing_settings_covers_both_purposes(self):
        config = Config.from_env()

        self.assertEqual(
            config.missing_settings(),
            ["AZURE_BASE_URL", "AZURE_MODEL_NAME", "AZURE_MODEL_NAME_O4_MINI"]
        )
        self.assertFalse(config.validate())

    @patch.dict(os.environ, {"ANTHROPIC_API_KEY": "claude-key"}, clear=True)
    def test_anthropic_detected_with_default_model(self):
        config = Config.from_env()

        settings = config.model_settings()
        self.assertEqual(settings.provider, LLMProvider.ANTHROPIC)
        self.assertEqual(settings.model, "claude-sonnet-4-20250514")
        self.assertTrue(config.validate())

    @patch.dict(os.environ, {"OPENAI_API_KEY": "sk-test", "CODING_MODEL": "o4-mini"}, clear=True)
    def test_openai_models(self):
        config = Config.from_env()

        self.assertEqual(config.model_settings().model, "gpt-4.1")
        self.assertEqual(config.model_settings(CODING).model, "o4-mini")
        self.assertFalse(config.model_settings().reasoning)
        self.assertTrue(config.model_settings(CODING).reasoning)

    @patch.dict(os.environ, {"LLM_PROVIDER": "openai"}, clear=True)
    def test_explicit_provider_without_key(self):
        config = Config.from_env()

        with self.assertRaises(ConfigurationError) as ctx:
            config.model_settings()

        self.assertEqual(ctx.exception.missing, ["OPENAI_API_KEY"])

    @patch.dict(os.environ, {"LLM_PROVIDER": "mistral", "OPENAI_API_KEY": "sk-test"}, clear=True)
    def test_unknown_provider(self):
        config = Config.from_env()

        with self.assertRaises(ConfigurationError):
            config.model_settings()
        self.assertEqual(config.missing_settings(), ["LLM_PROVIDER"])

    @patch.dict(os.environ, {
        "MIN_SEARCHES": "3",
        "MAX_SEARCHES": "8",
        "SEARCH_CONCURRENCY": "4",
        "MAX_TURNS": "6",
        "LOG_LEVEL": "debug",
    }, clear=True)
    def test_pipeline_settings(self):
        config = Config.from_env()

        self.assertEqual(config.min_searches, 3)
        self.assertEqual(config.max_searches, 8)
        self.assertEqual(config.search_concurrency, 4)
        self.assertEqual(config.max_turns, 6)
        self.assertEqual(config.log_level, "DEBUG")

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        config = Config.from_env()

        self.assertEqual(config.llm_provider, "azure")
        self.assertEqual(config.min_searches, 5)
        self.assertEqual(config.max_searches, 20)
        self.assertEqual(config.search_concurrency, 0)
        self.assertIsNone(config.tavily_api_key)

    def test_repr_hides_api_key(self):
        config = Config(llm_provider="openai", openai_api_key="sk-secret")

        self.assertNotIn("sk-secret", repr(config.model_settings()))


if __name__ == "__main__":
    unittest.main()
