"""
Configuration for the agent orchestrator.

Environment Variables:
    LLM_PROVIDER             - Optional: azure, openai or anthropic (auto-detected)
    AZURE_BASE_URL           - Azure OpenAI endpoint
    AZURE_API_KEY            - Azure OpenAI key
    AZURE_API_VERSION        - Optional: Azure API version (default: 2024-02-01)
    AZURE_MODEL_NAME         - Azure deployment used by planner/search/writer/triage agents
    AZURE_MODEL_NAME_O4_MINI - Azure deployment used by the coding agent
    OPENAI_API_KEY           - OpenAI key (when not using Azure)
    ANTHROPIC_API_KEY        - Anthropic/Claude key (when not using Azure)
    LLM_MODEL                - Optional: model for OpenAI/Anthropic providers
    CODING_MODEL             - Optional: coding model for OpenAI/Anthropic providers
    TAVILY_API_KEY           - Optional: Tavily key for web search (mock results if unset)
    MIN_SEARCHES / MAX_SEARCHES - Optional: accepted research plan size (default 5..20)
    SEARCH_CONCURRENCY       - Optional: cap on concurrent searches (default 0 = no cap)
    MAX_TURNS                - Optional: reasoning turns per agent invocation (default 10)
    LOG_LEVEL                - Optional: logging level (default INFO)

Create a .env file in the project root with:

    AZURE_BASE_URL=https://your-resource.openai.azure.com/
    AZURE_API_KEY=your-key
    AZURE_MODEL_NAME=gpt-4.1
    AZURE_MODEL_NAME_O4_MINI=o4-mini
    TAVILY_API_KEY=tvly-your-key-here
"""

import os
from dataclasses import dataclass
from typing import List, Optional

from .core.errors import ConfigurationError
from .core.llm import (
    DEFAULT_AZURE_API_VERSION,
    LLMProvider,
    ModelSettings,
    get_default_model,
    is_reasoning_model,
)

GENERAL = "general"
CODING = "coding"


@dataclass
class Config:
    """Application configuration."""

    llm_provider: str = "azure"
    llm_model: Optional[str] = None
    coding_model: Optional[str] = None

    # Azure OpenAI
    azure_base_url: Optional[str] = None
    azure_api_key: Optional[str] = None
    azure_api_version: str = DEFAULT_AZURE_API_VERSION
    azure_model_name: Optional[str] = None
    azure_coding_model_name: Optional[str] = None

    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    tavily_api_key: Optional[str] = None

    # Research pipeline
    min_searches: int = 5
    max_searches: int = 20
    search_concurrency: int = 0
    max_turns: int = 10

    log_level: str = "INFO"

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        azure_key = os.getenv("AZURE_API_KEY")
        anthropic_key = os.getenv("ANTHROPIC_API_KEY")
        openai_key = os.getenv("OPENAI_API_KEY")

        # Auto-detect provider based on available keys
        if azure_key:
            provider = "azure"
        elif anthropic_key:
            provider = "anthropic"
        elif openai_key:
            provider = "openai"
        else:
            provider = "azure"

        return cls(
            llm_provider=os.getenv("LLM_PROVIDER", provider).lower(),
            llm_model=os.getenv("LLM_MODEL"),
            coding_model=os.getenv("CODING_MODEL"),
            azure_base_url=os.getenv("AZURE_BASE_URL"),
            azure_api_key=azure_key,
            azure_api_version=os.getenv("AZURE_API_VERSION", DEFAULT_AZURE_API_VERSION),
            azure_model_name=os.getenv("AZURE_MODEL_NAME"),
            azure_coding_model_name=os.getenv("AZURE_MODEL_NAME_O4_MINI"),
            openai_api_key=openai_key,
            anthropic_api_key=anthropic_key,
            tavily_api_key=os.getenv("TAVILY_API_KEY"),
            min_searches=int(os.getenv("MIN_SEARCHES", "5")),
            max_searches=int(os.getenv("MAX_SEARCHES", "20")),
            search_concurrency=int(os.getenv("SEARCH_CONCURRENCY", "0")),
            max_turns=int(os.getenv("MAX_TURNS", "10")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            api_host=os.getenv("API_HOST", "0.0.0.0"),
            api_port=int(os.getenv("API_PORT", "8000")),
        )

    @property
    def provider(self) -> LLMProvider:
        try:
            return LLMProvider(self.llm_provider)
        except ValueError:
            raise ConfigurationError(
                f"Unknown LLM_PROVIDER '{self.llm_provider}'. "
                f"Expected one of: {', '.join(p.value for p in LLMProvider)}",
                missing=["LLM_PROVIDER"],
            ) from None

    def model_settings(self, purpose: str = GENERAL) -> ModelSettings:
        """
        Build the model settings for an agent.

        Args:
            purpose: GENERAL for planner/search/writer/triage/documentation
                agents, CODING for the coding agent.

        Raises:
            ConfigurationError: naming every missing environment variable.
        """
        provider = self.provider
        coding = purpose == CODING

        if provider == LLMProvider.AZURE:
            model_var = "AZURE_MODEL_NAME_O4_MINI" if coding else "AZURE_MODEL_NAME"
            model = self.azure_coding_model_name if coding else self.azure_model_name
            missing = [
                name for name, value in (
                    ("AZURE_BASE_URL", self.azure_base_url),
                    ("AZURE_API_KEY", self.azure_api_key),
                    (model_var, model),
                )
                if not value
            ]
            if missing:
                raise ConfigurationError(
                    "Azure environment variables not configured. Please set: "
                    + ", ".join(missing),
                    missing=missing,
                )
            return ModelSettings(
                provider=provider,
                model=model,
                api_key=self.azure_api_key,
                base_url=self.azure_base_url,
                api_version=self.azure_api_version,
                # AZURE_MODEL_NAME_O4_MINI always names an o-series deployment.
                reasoning=coding or is_reasoning_model(provider, model),
            )

        if provider == LLMProvider.ANTHROPIC:
            key_var, api_key = "ANTHROPIC_API_KEY", self.anthropic_api_key
        else:
            key_var, api_key = "OPENAI_API_KEY", self.openai_api_key

        if not api_key:
            raise ConfigurationError(f"{key_var} is required", missing=[key_var])

        model = (self.coding_model if coding else None) or self.llm_model or get_default_model(provider)
        return ModelSettings(
            provider=provider,
            model=model,
            api_key=api_key,
            reasoning=is_reasoning_model(provider, model),
        )

    def missing_settings(self) -> List[str]:
        """Environment variables that still need to be set, without raising."""
        missing: List[str] = []
        for purpose in (GENERAL, CODING):
            try:
                self.model_settings(purpose)
            except ConfigurationError as e:
                missing.extend(name for name in e.missing if name not in missing)
        return missing

    def validate(self) -> bool:
        """Check if required configuration is present."""
        return not self.missing_settings()


# Global config instance
config = Config.from_env()
