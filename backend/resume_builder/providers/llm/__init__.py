"""LLM provider interface and adapters."""

from resume_builder.providers.llm.base import (
    LLMMessage,
    LLMProvider,
    LLMResponse,
    TaskType,
)
from resume_builder.providers.llm.claude_adapter import ClaudeAdapter
from resume_builder.providers.llm.gemini_adapter import GeminiAdapter
from resume_builder.providers.llm.mock_adapter import MockLLMProvider
from resume_builder.providers.llm.openai_adapter import OpenAIAdapter

__all__ = [
    # Base types
    "LLMMessage",
    "LLMProvider",
    "LLMResponse",
    "TaskType",
    # Adapters
    "ClaudeAdapter",
    "GeminiAdapter",
    "MockLLMProvider",
    "OpenAIAdapter",
]
