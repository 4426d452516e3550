"""Claude/Anthropic LLM adapter."""

import contextlib
import time
from collections.abc import AsyncGenerator
from typing import TYPE_CHECKING

import anthropic
import structlog
from anthropic import AsyncAnthropic

from resume_builder.providers.errors import (
    AuthenticationError,
    ContentFilterError,
    ContextLengthError,
    ModelNotFoundError,
    ProviderError,
    RateLimitError,
    TransientError,
)
from resume_builder.providers.llm.base import (
    LLMMessage,
    LLMProvider,
    LLMResponse,
    TaskType,
)

if TYPE_CHECKING:
    from resume_builder.providers.config import ProviderConfig

logger = structlog.get_logger()


# Interview turns need instruction-following on the data block protocol;
# standalone extraction is short and high volume.
DEFAULT_CLAUDE_ROUTING: dict[str, str] = {
    "interview_turn": "claude-3-5-sonnet-20241022",
    "extraction": "claude-3-5-haiku-20241022",
}

# Fallback if task type not in routing table
DEFAULT_CLAUDE_MODEL = "claude-3-5-sonnet-20241022"


def _classify_claude_error(error: Exception) -> ProviderError:
    """Map Claude/Anthropic exceptions to internal error taxonomy.

    Returns a ProviderError subclass instance (does not raise).
    The caller is responsible for raising via ``raise _classify_claude_error(e) from e``.
    """
    if isinstance(error, anthropic.RateLimitError):
        retry_after = None
        if error.response is not None:
            retry_header = error.response.headers.get("retry-after")
            if retry_header is not None:
                with contextlib.suppress(ValueError):
                    retry_after = float(retry_header)
        return RateLimitError(str(error), retry_after_seconds=retry_after)

    if isinstance(error, anthropic.AuthenticationError):
        return AuthenticationError(str(error))

    if isinstance(error, anthropic.NotFoundError):
        return ModelNotFoundError(str(error))

    if isinstance(error, anthropic.BadRequestError):
        error_msg = str(error).lower()
        if "context_length" in error_msg or "prompt is too long" in error_msg:
            return ContextLengthError(str(error))
        if "content_policy" in error_msg:
            return ContentFilterError(str(error))
        return ProviderError(str(error))

    if isinstance(error, (anthropic.APIConnectionError, anthropic.InternalServerError)):
        return TransientError(str(error))

    return ProviderError(str(error))


def _split_system_message(
    messages: list[LLMMessage],
) -> tuple[str | None, list[dict]]:
    """Separate the system prompt from the conversation turns.

    Anthropic takes the system prompt as a top-level argument rather than
    as a message.
    """
    system_msg = None
    api_messages: list[dict] = []
    for msg in messages:
        if msg.role == "system":
            system_msg = msg.content
        else:
            api_messages.append({"role": msg.role, "content": msg.content})
    return system_msg, api_messages


class ClaudeAdapter(LLMProvider):
    """Claude adapter using Anthropic SDK."""

    @property
    def provider_name(self) -> str:
        """Return 'claude' for logging."""
        return "claude"

    def __init__(self, config: "ProviderConfig") -> None:
        """Initialize Claude adapter.

        Args:
            config: Provider configuration with Anthropic API key.
        """
        super().__init__(config)
        self.client = AsyncAnthropic(api_key=config.anthropic_api_key)
        # Config routing overrides defaults
        self.model_routing = {**DEFAULT_CLAUDE_ROUTING}
        if config.claude_model_routing:
            self.model_routing.update(config.claude_model_routing)

    async def complete(
        self,
        messages: list[LLMMessage],
        task: TaskType,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Generate completion using Claude.

        Args:
            messages: Conversation history as list of LLMMessage.
            task: Task type for model routing.
            max_tokens: Override default max tokens.
            temperature: Override default temperature.

        Returns:
            LLMResponse with the concatenated text blocks.
        """
        model = self.get_model_for_task(task)
        system_msg, api_messages = _split_system_message(messages)

        logger.info(
            "llm_request_start",
            provider="claude",
            model=model,
            task=task.value,
            message_count=len(messages),
        )

        start_time = time.monotonic()

        try:
            response = await self.client.messages.create(
                model=model,
                max_tokens=max_tokens
                if max_tokens is not None
                else self.config.default_max_tokens,
                temperature=temperature
                if temperature is not None
                else self.config.default_temperature,
                system=system_msg or anthropic.NOT_GIVEN,
                messages=api_messages,  # type: ignore[arg-type]
            )
        except anthropic.APIError as e:
            logger.error(
                "llm_request_failed",
                provider="claude",
                model=model,
                task=task.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise _classify_claude_error(e) from e

        latency_ms = (time.monotonic() - start_time) * 1000
        text_blocks = [block.text for block in response.content if block.type == "text"]
        content = "".join(text_blocks) if text_blocks else None

        logger.info(
            "llm_request_complete",
            provider="claude",
            model=model,
            task=task.value,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            latency_ms=latency_ms,
        )

        return LLMResponse(
            content=content,
            model=model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            finish_reason=response.stop_reason or "unknown",
            latency_ms=latency_ms,
        )

    async def stream(
        self,
        messages: list[LLMMessage],
        task: TaskType,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> AsyncGenerator[str, None]:
        """Stream completion using Claude.

        Args:
            messages: Conversation history as list of LLMMessage.
            task: Task type for model routing.
            max_tokens: Override default max tokens.
            temperature: Override default temperature.

        Yields:
            Content chunks as they arrive.
        """
        model = self.get_model_for_task(task)
        system_msg, api_messages = _split_system_message(messages)

        logger.info(
            "llm_request_start",
            provider="claude",
            model=model,
            task=task.value,
            message_count=len(messages),
        )

        try:
            async with self.client.messages.stream(
                model=model,
                max_tokens=max_tokens
                if max_tokens is not None
                else self.config.default_max_tokens,
                temperature=temperature
                if temperature is not None
                else self.config.default_temperature,
                system=system_msg or anthropic.NOT_GIVEN,
                messages=api_messages,  # type: ignore[arg-type]
            ) as stream:
                async for text in stream.text_stream:
                    yield text
        except anthropic.APIError as e:
            logger.error(
                "llm_request_failed",
                provider="claude",
                model=model,
                task=task.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise _classify_claude_error(e) from e

    def get_model_for_task(self, task: TaskType) -> str:
        """Get model for task using routing table.

        Args:
            task: The task type to get the model for.

        Returns:
            Model identifier string.
        """
        return self.model_routing.get(task.value, DEFAULT_CLAUDE_MODEL)
