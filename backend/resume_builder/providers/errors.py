"""Provider error taxonomy.

Adapters map SDK-specific exceptions onto these classes so the interview
orchestrator can catch every completion failure with a single
``except ProviderError`` and degrade to rule-based extraction.
"""

__all__ = [
    "ProviderError",
    "RateLimitError",
    "AuthenticationError",
    "ModelNotFoundError",
    "ContentFilterError",
    "ContextLengthError",
    "TransientError",
]


class ProviderError(Exception):
    """Base class for all provider errors."""

    pass


class RateLimitError(ProviderError):
    """Rate limit exceeded.

    Carries the provider's retry-after hint when one was sent, so callers
    can surface it even though the interview itself never retries.
    """

    def __init__(self, message: str, retry_after_seconds: float | None = None):
        """Initialize RateLimitError.

        Args:
            message: Error description from the provider.
            retry_after_seconds: Optional hint from provider on when to retry.
        """
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds


class AuthenticationError(ProviderError):
    """Invalid or expired API key."""

    pass


class ModelNotFoundError(ProviderError):
    """Requested model doesn't exist or isn't accessible."""

    pass


class ContentFilterError(ProviderError):
    """Content blocked by provider's safety filter."""

    pass


class ContextLengthError(ProviderError):
    """Input exceeded model's context window.

    Long interviews can hit this once the history grows large.
    """

    pass


class TransientError(ProviderError):
    """Temporary failure (network, server overload, timeout)."""

    pass
