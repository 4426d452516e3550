"""Tests for the OpenAI LLM adapter.

Tests the OpenAIAdapter implementation with a mocked OpenAI client.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import openai
import pytest

from resume_builder.providers.config import ProviderConfig
from resume_builder.providers.errors import ContentFilterError, RateLimitError
from resume_builder.providers.llm.base import LLMMessage, TaskType
from resume_builder.providers.llm.openai_adapter import OpenAIAdapter

_ADAPTER_CLIENT = "resume_builder.providers.llm.openai_adapter.AsyncOpenAI"


@pytest.fixture
def config():
    """Create a test provider config for OpenAI."""
    return ProviderConfig(llm_provider="openai", openai_api_key="test-openai-key")


@pytest.fixture
def mock_openai_response():
    """Create a mock chat-completions response."""
    response = MagicMock()
    choice = MagicMock()
    choice.message.content = "What city and state do you live in?"
    choice.finish_reason = "stop"
    response.choices = [choice]
    response.usage = MagicMock(prompt_tokens=12, completion_tokens=8)
    return response


class TestOpenAIAdapter:
    """Tests for OpenAIAdapter.complete()."""

    def test_init_creates_client(self, config) -> None:
        """The SDK client is built from the configured key."""
        with patch(_ADAPTER_CLIENT) as mock_client:
            adapter = OpenAIAdapter(config)
            mock_client.assert_called_once_with(api_key="test-openai-key")
            assert adapter.provider_name == "openai"
            assert adapter.get_model_for_task(TaskType.EXTRACTION) == "gpt-4o-mini"

    @pytest.mark.asyncio
    async def test_system_prompt_stays_in_messages(self, config, mock_openai_response) -> None:
        """OpenAI receives the system prompt as the first message."""
        with patch(_ADAPTER_CLIENT) as mock_client_cls:
            mock_client = AsyncMock()
            mock_client.chat.completions.create = AsyncMock(return_value=mock_openai_response)
            mock_client_cls.return_value = mock_client
            adapter = OpenAIAdapter(config)

            response = await adapter.complete(
                [
                    LLMMessage(role="system", content="Prompt"),
                    LLMMessage(role="user", content="Austin"),
                ],
                TaskType.INTERVIEW_TURN,
            )

            call_kwargs = mock_client.chat.completions.create.call_args.kwargs
            assert call_kwargs["model"] == "gpt-4o"
            assert call_kwargs["messages"] == [
                {"role": "system", "content": "Prompt"},
                {"role": "user", "content": "Austin"},
            ]
            assert response.content == "What city and state do you live in?"
            assert response.input_tokens == 12
            assert response.output_tokens == 8

    @pytest.mark.asyncio
    async def test_missing_usage_counts_zero(self, config, mock_openai_response) -> None:
        """Responses without usage report zero tokens."""
        mock_openai_response.usage = None
        with patch(_ADAPTER_CLIENT) as mock_client_cls:
            mock_client = AsyncMock()
            mock_client.chat.completions.create = AsyncMock(return_value=mock_openai_response)
            mock_client_cls.return_value = mock_client
            adapter = OpenAIAdapter(config)

            response = await adapter.complete(
                [LLMMessage(role="user", content="Hi")], TaskType.INTERVIEW_TURN
            )

            assert response.input_tokens == 0
            assert response.output_tokens == 0

    @pytest.mark.asyncio
    async def test_rate_limit_error_mapped(self, config) -> None:
        """SDK rate limits map to RateLimitError."""
        error = openai.RateLimitError(
            message="Rate limit exceeded",
            response=MagicMock(status_code=429, headers={}),
            body=None,
        )
        with patch(_ADAPTER_CLIENT) as mock_client_cls:
            mock_client = AsyncMock()
            mock_client.chat.completions.create = AsyncMock(side_effect=error)
            mock_client_cls.return_value = mock_client
            adapter = OpenAIAdapter(config)

            with pytest.raises(RateLimitError) as exc_info:
                await adapter.complete(
                    [LLMMessage(role="user", content="Hi")], TaskType.INTERVIEW_TURN
                )

            assert exc_info.value.retry_after_seconds is None

    @pytest.mark.asyncio
    async def test_content_filter_mapped(self, config) -> None:
        """Policy rejections map to ContentFilterError."""
        error = openai.BadRequestError(
            message="content_filter triggered",
            response=MagicMock(status_code=400, headers={}),
            body=None,
        )
        with patch(_ADAPTER_CLIENT) as mock_client_cls:
            mock_client = AsyncMock()
            mock_client.chat.completions.create = AsyncMock(side_effect=error)
            mock_client_cls.return_value = mock_client
            adapter = OpenAIAdapter(config)

            with pytest.raises(ContentFilterError):
                await adapter.complete(
                    [LLMMessage(role="user", content="Hi")], TaskType.INTERVIEW_TURN
                )
