"""Tests for the mock LLM provider.

Tests verify:
- Reply lookup order: queued, per-task, default
- Simulated failures
- Call recording for assertions
"""

import pytest

from resume_builder.providers.errors import TransientError
from resume_builder.providers.llm.base import LLMMessage, TaskType
from resume_builder.providers.llm.mock_adapter import MockLLMProvider

_MESSAGES = [LLMMessage(role="user", content="Hi")]


class TestMockLLMProvider:
    """Tests for MockLLMProvider."""

    @pytest.mark.asyncio
    async def test_default_response(self):
        """Without configuration the task name is echoed."""
        provider = MockLLMProvider()
        response = await provider.complete(_MESSAGES, TaskType.INTERVIEW_TURN)
        assert response.content == "Mock response for interview_turn"
        assert response.model == "mock-model"

    @pytest.mark.asyncio
    async def test_queued_before_per_task(self):
        """Queued replies are consumed first, in order."""
        provider = MockLLMProvider({TaskType.INTERVIEW_TURN: "configured"})
        provider.queue_response("first")
        provider.queue_response("second")

        contents = [
            (await provider.complete(_MESSAGES, TaskType.INTERVIEW_TURN)).content
            for _ in range(3)
        ]

        assert contents == ["first", "second", "configured"]

    @pytest.mark.asyncio
    async def test_set_response(self):
        """Per-task responses can be updated."""
        provider = MockLLMProvider()
        provider.set_response(TaskType.EXTRACTION, "extracted")
        response = await provider.complete(_MESSAGES, TaskType.EXTRACTION)
        assert response.content == "extracted"

    @pytest.mark.asyncio
    async def test_fail_with(self):
        """A configured error is raised until cleared."""
        provider = MockLLMProvider()
        provider.fail_with(TransientError("down"))
        with pytest.raises(TransientError):
            await provider.complete(_MESSAGES, TaskType.INTERVIEW_TURN)

        provider.fail_with(None)
        response = await provider.complete(_MESSAGES, TaskType.INTERVIEW_TURN)
        assert response.content is not None

    @pytest.mark.asyncio
    async def test_records_calls(self):
        """Every call is recorded with its arguments."""
        provider = MockLLMProvider()
        await provider.complete(_MESSAGES, TaskType.INTERVIEW_TURN, max_tokens=5)

        assert provider.last_task is TaskType.INTERVIEW_TURN
        assert provider.calls[0]["messages"] == _MESSAGES
        assert provider.calls[0]["kwargs"] == {"max_tokens": 5, "temperature": None}
        provider.assert_called_with_task(TaskType.INTERVIEW_TURN)
        with pytest.raises(AssertionError):
            provider.assert_called_with_task(TaskType.EXTRACTION)

    @pytest.mark.asyncio
    async def test_stream_yields_words(self):
        """Streaming splits the reply into words."""
        provider = MockLLMProvider()
        provider.queue_response("Hello there")
        chunks = [chunk async for chunk in provider.stream(_MESSAGES, TaskType.INTERVIEW_TURN)]
        assert chunks == ["Hello ", "there "]
