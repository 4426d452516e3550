"""Provider configuration management."""

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from resume_builder.core.config import Settings


@dataclass
class ProviderConfig:
    """Configuration handed to an LLM provider at construction time.

    Attributes:
        llm_provider: Which LLM provider to use ("claude", "openai", "gemini", "mock").
        anthropic_api_key: Anthropic API key.
        openai_api_key: OpenAI API key.
        google_api_key: Google AI API key.
        claude_model_routing: Override model routing for Claude.
        openai_model_routing: Override model routing for OpenAI.
        gemini_model_routing: Override model routing for Gemini.
        default_max_tokens: Default max output tokens.
        default_temperature: Default sampling temperature.
    """

    # Provider selection
    llm_provider: str = "claude"

    # API keys
    anthropic_api_key: str | None = None
    openai_api_key: str | None = None
    google_api_key: str | None = None

    # Model routing (can override defaults)
    claude_model_routing: dict[str, str] | None = None
    openai_model_routing: dict[str, str] | None = None
    gemini_model_routing: dict[str, str] | None = None

    # Defaults
    default_max_tokens: int = 1000
    default_temperature: float = 0.7

    @classmethod
    def from_env(cls) -> "ProviderConfig":
        """Load configuration from environment variables.

        Returns:
            ProviderConfig instance with values from environment.
        """
        return cls(
            llm_provider=os.getenv("LLM_PROVIDER", "claude"),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY"),
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            google_api_key=os.getenv("GOOGLE_API_KEY"),
            default_max_tokens=int(os.getenv("COMPLETION_MAX_TOKENS", "1000")),
            default_temperature=float(os.getenv("COMPLETION_TEMPERATURE", "0.7")),
        )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ProviderConfig":
        """Build provider configuration from validated application settings.

        Args:
            settings: Application settings.

        Returns:
            ProviderConfig mirroring the provider-related settings.
        """
        return cls(
            llm_provider=settings.llm_provider,
            anthropic_api_key=settings.anthropic_api_key or None,
            openai_api_key=settings.openai_api_key or None,
            google_api_key=settings.google_api_key or None,
            default_max_tokens=settings.completion_max_tokens,
            default_temperature=settings.completion_temperature,
        )
