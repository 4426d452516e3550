"""Interview API request/response schemas.

Session snapshots and turn results use snake_case keys; the resume
record inside them keeps its camelCase field names, which are the data
contract shared with the model and the web client.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from resume_builder.interview.guided import GuidedReply
from resume_builder.interview.orchestrator import TurnResult
from resume_builder.interview.prompts import SUPPORTED_LANGUAGES
from resume_builder.interview.questions import QuestionDefinition
from resume_builder.interview.state import AiAssistedState, ConversationState, GuidedState

_MAX_MESSAGE_LENGTH = 5000

# =============================================================================
# Request Schemas
# =============================================================================


class CreateSessionRequest(BaseModel):
    """Request body for POST /interview/sessions.

    Attributes:
        mode: "guided" walks the question catalog; "ai" chats with the model.
        language: Interview language code.
    """

    model_config = ConfigDict(extra="forbid")

    mode: Literal["guided", "ai"] = "guided"
    language: str | None = None

    @field_validator("language")
    @classmethod
    def language_supported(cls, v: str | None) -> str | None:
        """Validate the language code is supported."""
        if v is not None and v not in SUPPORTED_LANGUAGES:
            msg = f"Unsupported language: {v}"
            raise ValueError(msg)
        return v


class SendMessageRequest(BaseModel):
    """Request body for POST /interview/sessions/{id}/messages."""

    model_config = ConfigDict(extra="forbid")

    message: str = Field(..., max_length=_MAX_MESSAGE_LENGTH)

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from the message."""
        if isinstance(v, str):
            return v.strip()
        return v


# =============================================================================
# Response Schemas
# =============================================================================


class QuestionSummary(BaseModel):
    """One guided-mode question as exposed to clients."""

    id: str
    category: str
    question: str
    field_path: str
    input_kind: str
    is_required: bool
    options: list[str] = Field(default_factory=list)
    placeholder: str | None = None

    @classmethod
    def from_definition(cls, definition: QuestionDefinition) -> "QuestionSummary":
        return cls(
            id=definition.id,
            category=definition.category.value,
            question=definition.text,
            field_path=definition.field_path,
            input_kind=definition.input_kind.value,
            is_required=definition.is_required,
            options=list(definition.options),
            placeholder=definition.placeholder,
        )


class ChatMessage(BaseModel):
    """One visible AI-mode history entry."""

    role: str
    content: str


class SessionSnapshot(BaseModel):
    """Current state of an interview session."""

    session_id: str
    mode: str
    language: str
    current_section: str
    follow_up_count: int
    is_complete: bool
    resume_record: dict[str, Any]
    current_question: QuestionSummary | None = None
    messages: list[ChatMessage] = Field(default_factory=list)
    created_at: datetime

    @classmethod
    def from_state(
        cls, state: ConversationState, question: QuestionDefinition | None = None
    ) -> "SessionSnapshot":
        """Build a snapshot; ``question`` is the guided question awaiting an answer."""
        messages: list[ChatMessage] = []
        if isinstance(state, AiAssistedState):
            messages = [ChatMessage(role=m["role"], content=m["content"]) for m in state.history]
        return cls(
            session_id=state.session_id,
            mode=state.mode.value,
            language=state.language,
            current_section=state.section_state.current_section.value,
            follow_up_count=state.section_state.follow_up_count,
            is_complete=state.is_complete,
            resume_record=state.resume_record,
            current_question=QuestionSummary.from_definition(question) if question else None,
            messages=messages,
            created_at=state.created_at,
        )


class FieldValue(BaseModel):
    """A field proposal produced by a turn."""

    path: str
    value: Any
    confidence: float


class TokenUsageSchema(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class TurnResponse(BaseModel):
    """Result of one message, in either mode.

    Attributes:
        messages: Assistant messages to show, in order.
        fields: Field values produced by the turn.
        suggested_section: Section the interview moved to (AI mode).
        follow_up_needed: The interview stays in the section (AI mode).
        confidence: Mean confidence of the fields (AI mode).
        usage: Token usage of the model call (AI mode).
        special_content: Extra payload such as the email guide.
        is_complete: The interview is finished.
        session: Snapshot after the turn.
    """

    messages: list[str]
    fields: list[FieldValue] = Field(default_factory=list)
    suggested_section: str | None = None
    follow_up_needed: bool = False
    confidence: float | None = None
    usage: TokenUsageSchema | None = None
    special_content: dict[str, Any] | None = None
    is_complete: bool = False
    session: SessionSnapshot

    @classmethod
    def from_turn(cls, result: TurnResult, state: AiAssistedState) -> "TurnResponse":
        return cls(
            messages=[result.assistant_message],
            fields=[
                FieldValue(path=p["path"], value=p.get("value"), confidence=p["confidence"])
                for p in result.extracted_fields
            ],
            suggested_section=(
                result.suggested_section.value if result.suggested_section else None
            ),
            follow_up_needed=result.follow_up_needed,
            confidence=result.confidence,
            usage=TokenUsageSchema(
                prompt_tokens=result.usage.prompt_tokens,
                completion_tokens=result.usage.completion_tokens,
                total_tokens=result.usage.total_tokens,
            ),
            special_content=result.special_content,
            is_complete=result.is_complete,
            session=SessionSnapshot.from_state(state),
        )

    @classmethod
    def from_guided(cls, reply: GuidedReply, state: GuidedState) -> "TurnResponse":
        return cls(
            messages=reply.messages,
            fields=[
                FieldValue(path=p["path"], value=p.get("value"), confidence=p["confidence"])
                for p in reply.fields
            ],
            special_content=reply.special_content,
            is_complete=reply.is_complete,
            session=SessionSnapshot.from_state(state, reply.question),
        )
