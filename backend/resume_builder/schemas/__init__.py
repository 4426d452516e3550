"""Pydantic request/response schemas for API endpoints."""

from resume_builder.schemas.interview import (
    ChatMessage,
    CreateSessionRequest,
    FieldValue,
    QuestionSummary,
    SendMessageRequest,
    SessionSnapshot,
    TokenUsageSchema,
    TurnResponse,
)

__all__ = [
    # Requests
    "CreateSessionRequest",
    "SendMessageRequest",
    # Responses
    "ChatMessage",
    "FieldValue",
    "QuestionSummary",
    "SessionSnapshot",
    "TokenUsageSchema",
    "TurnResponse",
]
