"""Text-completion collaborator used by the interview orchestrator.

The orchestrator needs exactly one operation: system prompt + history in,
assistant text + token usage out. CompletionClient provides that over any
injected LLMProvider, so the orchestrator never touches provider types or
routing.
"""

from dataclasses import dataclass, field
from typing import Literal, TypedDict

from resume_builder.providers.llm.base import LLMMessage, LLMProvider, TaskType


class Message(TypedDict):
    """One conversation message as exchanged with the web client."""

    role: Literal["system", "user", "assistant"]
    content: str


@dataclass
class TokenUsage:
    """Token counts for one completion call."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class Completion:
    """Assistant text plus usage for one call."""

    text: str
    usage: TokenUsage = field(default_factory=TokenUsage)


class CompletionClient:
    """Explicitly constructed completion client.

    Args:
        provider: LLM provider performing the call.
        temperature: Sampling temperature for interview turns.
        max_tokens: Output token cap for interview turns.
    """

    def __init__(
        self,
        provider: LLMProvider,
        *,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> None:
        self.provider = provider
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def complete(self, system_prompt: str, history: list[Message]) -> Completion:
        """Run one completion call.

        Args:
            system_prompt: Full system prompt, including the data contract.
            history: Prior turns plus the current user message. Any "system"
                entries in the history are dropped; the system prompt wins.

        Returns:
            Completion with the raw assistant text (data block included).

        Raises:
            ProviderError: When the provider call fails.
        """
        messages = [LLMMessage(role="system", content=system_prompt)]
        messages.extend(
            LLMMessage(role=m["role"], content=m["content"])
            for m in history
            if m["role"] != "system"
        )
        response = await self.provider.complete(
            messages,
            TaskType.INTERVIEW_TURN,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        usage = TokenUsage(
            prompt_tokens=response.input_tokens,
            completion_tokens=response.output_tokens,
            total_tokens=response.input_tokens + response.output_tokens,
        )
        return Completion(text=response.content or "", usage=usage)
