"""Application configuration loaded from environment variables.

Settings for the HTTP layer, the text-completion provider and the interview
guardrails. Uses pydantic-settings for validation and .env file support.
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

KNOWN_LLM_PROVIDERS = ("claude", "openai", "gemini", "mock")

# Provider name → settings attribute holding its API key
_PROVIDER_KEY_FIELDS = {
    "claude": "anthropic_api_key",
    "openai": "openai_api_key",
    "gemini": "google_api_key",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    # API
    # 0.0.0.0 binds to all network interfaces (required for Docker containers)
    api_host: str = "0.0.0.0"  # nosec B104
    api_port: int = 8000

    # CORS
    # Default allows localhost:3000 for the web client during development
    allowed_origins: list[str] = ["http://localhost:3000"]

    # LLM Providers
    llm_provider: str = "claude"
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    google_api_key: str = ""

    # Completion call
    completion_temperature: float = 0.7
    completion_max_tokens: int = 1000

    # Interview guardrails
    confidence_threshold: float = 0.7
    max_follow_ups: int = 3
    max_multi_entry_follow_ups: int = 5
    default_language: str = "en"

    @model_validator(mode="after")
    def check_interview_settings(self) -> "Settings":
        """Validate guardrail and deployment settings.

        Checks:
        - Confidence threshold must lie in [0, 1]
        - Follow-up limits must be positive
        - LLM provider must be a known name
        - CORS must not use wildcard origin
        - Real providers need an API key in production
        """
        if not 0.0 <= self.confidence_threshold <= 1.0:
            msg = (
                "CONFIDENCE_THRESHOLD must be between 0 and 1. "
                f"Got: {self.confidence_threshold}"
            )
            raise ValueError(msg)

        if self.max_follow_ups <= 0 or self.max_multi_entry_follow_ups <= 0:
            msg = (
                "MAX_FOLLOW_UPS and MAX_MULTI_ENTRY_FOLLOW_UPS must be positive. "
                f"Got: {self.max_follow_ups}, {self.max_multi_entry_follow_ups}"
            )
            raise ValueError(msg)

        if self.llm_provider not in KNOWN_LLM_PROVIDERS:
            msg = (
                f"LLM_PROVIDER must be one of {', '.join(KNOWN_LLM_PROVIDERS)}. "
                f"Got: {self.llm_provider!r}"
            )
            raise ValueError(msg)

        if "*" in self.allowed_origins:
            msg = (
                "ALLOWED_ORIGINS must not contain '*' (wildcard). "
                "List the web client origins explicitly."
            )
            raise ValueError(msg)

        if self.environment == "production":
            key_field = _PROVIDER_KEY_FIELDS.get(self.llm_provider)
            if key_field and not getattr(self, key_field):
                msg = (
                    f"{key_field.upper()} must be set when LLM_PROVIDER="
                    f"{self.llm_provider} in production."
                )
                raise ValueError(msg)

        return self


settings = Settings()
