"""Google Gemini LLM adapter.

Uses the unified google-genai SDK.
"""

import time
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

import structlog
from google import genai
from google.genai import types

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


DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"

DEFAULT_GEMINI_ROUTING: dict[str, str] = {
    "interview_turn": DEFAULT_GEMINI_MODEL,
    "extraction": DEFAULT_GEMINI_MODEL,
}


def _classify_gemini_error(error: Exception) -> ProviderError:
    """Map Gemini exceptions to internal error taxonomy.

    The SDK surfaces most failures as generic API errors, so classification
    goes by message text.
    """
    error_msg = str(error).lower()
    if "resource" in error_msg and "exhausted" in error_msg:
        return RateLimitError(str(error))
    if "permission" in error_msg or "unauthenticated" in error_msg:
        return AuthenticationError(str(error))
    if "not found" in error_msg and "model" in error_msg:
        return ModelNotFoundError(str(error))
    if "context" in error_msg or "token" in error_msg:
        return ContextLengthError(str(error))
    if "safety" in error_msg or "blocked" in error_msg:
        return ContentFilterError(str(error))
    if "unavailable" in error_msg or "503" in error_msg or "timeout" in error_msg:
        return TransientError(str(error))
    return ProviderError(str(error))


def _convert_gemini_messages(
    messages: list[LLMMessage],
) -> tuple[str | None, list[types.Content]]:
    """Convert LLMMessages to Gemini contents, extracting the system instruction.

    Gemini names the assistant role "model".
    """
    system_instruction = None
    contents: list[types.Content] = []
    for msg in messages:
        if msg.role == "system":
            system_instruction = msg.content
            continue
        role = "model" if msg.role == "assistant" else msg.role
        contents.append(types.Content(role=role, parts=[types.Part(text=msg.content)]))
    return system_instruction, contents


def _response_text(response: object) -> tuple[str | None, str]:
    """Return (text, finish_reason) from the first candidate."""
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return None, "UNKNOWN"
    candidate = candidates[0]
    finish_reason = candidate.finish_reason.name if candidate.finish_reason else "UNKNOWN"
    if not candidate.content or not candidate.content.parts:
        return None, finish_reason
    texts = [part.text for part in candidate.content.parts if part.text]
    return ("".join(texts) if texts else None), finish_reason


class GeminiAdapter(LLMProvider):
    """Google Gemini adapter using unified google-genai SDK."""

    @property
    def provider_name(self) -> str:
        """Return 'gemini' for logging."""
        return "gemini"

    def __init__(self, config: "ProviderConfig") -> None:
        """Initialize Gemini adapter.

        Args:
            config: Provider configuration with Google API key.
        """
        super().__init__(config)
        self.client = genai.Client(api_key=config.google_api_key)
        self.model_routing = {**DEFAULT_GEMINI_ROUTING}
        if config.gemini_model_routing:
            self.model_routing.update(config.gemini_model_routing)

    def _generation_config(
        self,
        system_instruction: str | None,
        max_tokens: int | None,
        temperature: float | None,
    ) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            max_output_tokens=max_tokens
            if max_tokens is not None
            else self.config.default_max_tokens,
            temperature=temperature
            if temperature is not None
            else self.config.default_temperature,
            system_instruction=system_instruction,
        )

    async def complete(
        self,
        messages: list[LLMMessage],
        task: TaskType,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Generate completion using Gemini."""
        model_name = self.get_model_for_task(task)
        system_instruction, contents = _convert_gemini_messages(messages)
        gen_config = self._generation_config(system_instruction, max_tokens, temperature)

        logger.info(
            "llm_request_start",
            provider="gemini",
            model=model_name,
            task=task.value,
            message_count=len(messages),
        )

        start_time = time.monotonic()

        try:
            response = await self.client.aio.models.generate_content(
                model=model_name,
                contents=contents,  # type: ignore[arg-type]
                config=gen_config,
            )
        except Exception as e:
            logger.error(
                "llm_request_failed",
                provider="gemini",
                model=model_name,
                task=task.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise _classify_gemini_error(e) from e

        latency_ms = (time.monotonic() - start_time) * 1000
        content, finish_reason = _response_text(response)
        usage = response.usage_metadata
        input_tokens = (usage.prompt_token_count or 0) if usage else 0
        output_tokens = (usage.candidates_token_count or 0) if usage else 0

        logger.info(
            "llm_request_complete",
            provider="gemini",
            model=model_name,
            task=task.value,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            latency_ms=latency_ms,
        )

        return LLMResponse(
            content=content,
            model=model_name,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            finish_reason=finish_reason,
            latency_ms=latency_ms,
        )

    async def stream(  # type: ignore[override]
        self,
        messages: list[LLMMessage],
        task: TaskType,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        """Stream completion using Gemini."""
        model_name = self.get_model_for_task(task)
        system_instruction, contents = _convert_gemini_messages(messages)
        gen_config = self._generation_config(system_instruction, max_tokens, temperature)

        logger.info(
            "llm_request_start",
            provider="gemini",
            model=model_name,
            task=task.value,
            message_count=len(messages),
        )

        try:
            chunks = await self.client.aio.models.generate_content_stream(
                model=model_name,
                contents=contents,  # type: ignore[arg-type]
                config=gen_config,
            )
            async for chunk in chunks:
                if chunk.text:
                    yield chunk.text
        except Exception as e:
            logger.error(
                "llm_request_failed",
                provider="gemini",
                model=model_name,
                task=task.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise _classify_gemini_error(e) from e

    def get_model_for_task(self, task: TaskType) -> str:
        """Get model for task using routing table."""
        return self.model_routing.get(task.value, DEFAULT_GEMINI_MODEL)
