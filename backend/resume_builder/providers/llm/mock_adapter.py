"""Mock LLM provider for testing.

MockLLMProvider lets the orchestrator be exercised without hitting real
LLM APIs, including scripted multi-turn replies and simulated failures.
"""

from collections.abc import AsyncIterator
from typing import Any

from resume_builder.providers.errors import ProviderError
from resume_builder.providers.llm.base import (
    LLMMessage,
    LLMProvider,
    LLMResponse,
    TaskType,
)


class MockLLMProvider(LLMProvider):
    """Mock provider for testing.

    Reply lookup order: the next queued reply (``queue_response``), then the
    per-task response, then a default "Mock response for {task}" string.

    Attributes:
        responses: Pre-configured responses keyed by TaskType.
        queued: Replies returned one per call, in order, before ``responses``.
        error: When set, every call raises this error instead of replying.
        calls: Record of all method invocations for test assertions.
        last_task: The most recent TaskType used in a call.
    """

    @property
    def provider_name(self) -> str:
        """Return 'mock' for testing."""
        return "mock"

    def __init__(self, responses: dict[TaskType, str] | None = None) -> None:
        """Initialize mock provider with optional pre-configured responses.

        Args:
            responses: Dict mapping TaskType to response content.
        """
        # No config needed for the mock
        self.responses: dict[TaskType, str] = dict(responses) if responses else {}
        self.queued: list[str] = []
        self.error: ProviderError | None = None
        self.calls: list[dict[str, Any]] = []
        self.last_task: TaskType | None = None

    def set_response(self, task: TaskType, content: str) -> None:
        """Set or update the response for a specific task type.

        Args:
            task: The TaskType to configure.
            content: The response content to return for this task.
        """
        self.responses[task] = content

    def queue_response(self, content: str) -> None:
        """Queue a one-shot reply returned by the next call."""
        self.queued.append(content)

    def fail_with(self, error: ProviderError | None) -> None:
        """Make every subsequent call raise ``error`` (None clears it)."""
        self.error = error

    def _next_content(self, task: TaskType) -> str:
        if self.error is not None:
            raise self.error
        if self.queued:
            return self.queued.pop(0)
        return self.responses.get(task, f"Mock response for {task.value}")

    async def complete(
        self,
        messages: list[LLMMessage],
        task: TaskType,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Generate a mock completion.

        Args:
            messages: Conversation history as list of LLMMessage.
            task: Task type for response lookup.
            max_tokens: Ignored (recorded in kwargs).
            temperature: Ignored (recorded in kwargs).

        Returns:
            LLMResponse with configured or default content.

        Raises:
            ProviderError: When a failure was configured via ``fail_with``.
        """
        self.calls.append(
            {
                "method": "complete",
                "messages": messages,
                "task": task,
                "kwargs": {
                    "max_tokens": max_tokens,
                    "temperature": temperature,
                },
            }
        )
        self.last_task = task

        content = self._next_content(task)

        return LLMResponse(
            content=content,
            model="mock-model",
            input_tokens=100,
            output_tokens=50,
            finish_reason="stop",
            latency_ms=10,
        )

    async def stream(  # type: ignore[override]
        self,
        messages: list[LLMMessage],
        task: TaskType,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        """Generate a mock streaming completion, word by word."""
        self.calls.append(
            {
                "method": "stream",
                "messages": messages,
                "task": task,
                "kwargs": {
                    "max_tokens": max_tokens,
                    "temperature": temperature,
                },
            }
        )
        self.last_task = task

        content = self._next_content(task)
        for word in content.split():
            yield word + " "

    def get_model_for_task(self, _task: TaskType) -> str:
        """Return 'mock-model' for any task."""
        return "mock-model"

    def assert_called_with_task(self, task: TaskType) -> None:
        """Test helper to verify a task was called.

        Args:
            task: The TaskType that should have been called.

        Raises:
            AssertionError: If the task was not called.
        """
        tasks_called = [c["task"] for c in self.calls]
        assert task in tasks_called, f"Expected {task}, got {tasks_called}"
