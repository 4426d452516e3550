"""Provider factory.

Builds a fresh provider per call. The application creates one at startup
and injects it; there is no module-level provider cache.
"""

from resume_builder.providers.config import ProviderConfig
from resume_builder.providers.llm.base import LLMProvider
from resume_builder.providers.llm.claude_adapter import ClaudeAdapter
from resume_builder.providers.llm.gemini_adapter import GeminiAdapter
from resume_builder.providers.llm.mock_adapter import MockLLMProvider
from resume_builder.providers.llm.openai_adapter import OpenAIAdapter


def create_llm_provider(config: ProviderConfig | None = None) -> LLMProvider:
    """Create the LLM provider selected by ``config.llm_provider``.

    Args:
        config: Provider configuration. Loaded from the environment if None.

    Returns:
        LLMProvider instance.

    Raises:
        ValueError: If the configured provider is unknown.
    """
    if config is None:
        config = ProviderConfig.from_env()

    if config.llm_provider == "claude":
        return ClaudeAdapter(config)
    if config.llm_provider == "openai":
        return OpenAIAdapter(config)
    if config.llm_provider == "gemini":
        return GeminiAdapter(config)
    if config.llm_provider == "mock":
        return MockLLMProvider()
    raise ValueError(f"Unknown LLM provider: {config.llm_provider}")
