"""Provider abstraction layer.

Exports:
    Error classes for provider error handling
    ProviderConfig for configuration
    CompletionClient for the interview's completion contract
    Factory function for provider instances
"""

from resume_builder.providers.completion import (
    Completion,
    CompletionClient,
    Message,
    TokenUsage,
)
from resume_builder.providers.config import ProviderConfig
from resume_builder.providers.errors import (
    AuthenticationError,
    ContentFilterError,
    ContextLengthError,
    ModelNotFoundError,
    ProviderError,
    RateLimitError,
    TransientError,
)
from resume_builder.providers.factory import create_llm_provider

__all__ = [
    # Config
    "ProviderConfig",
    # Completion contract
    "Completion",
    "CompletionClient",
    "Message",
    "TokenUsage",
    # Errors
    "ProviderError",
    "RateLimitError",
    "AuthenticationError",
    "ModelNotFoundError",
    "ContentFilterError",
    "ContextLengthError",
    "TransientError",
    # Factory
    "create_llm_provider",
]
