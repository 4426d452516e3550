"""Conversation state.

A session is either guided (walks the question catalog) or AI-assisted
(model chat loop with guardrails). Both carry the resume record and the
section state; everything else is mode-specific:

    ConversationState = GuidedState | AiAssistedState

Callers branch on the concrete type (or ``mode``) instead of checking
optional fields.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from resume_builder.interview.sections import Section
from resume_builder.providers.completion import Message

UserTone = Literal["confident", "uncertain", "frustrated", "neutral"]


class InterviewMode(str, Enum):
    """Interview modes."""

    GUIDED = "guided"
    AI = "ai"


# =============================================================================
# Shared State
# =============================================================================


@dataclass
class SectionState:
    """Where the interview currently is.

    Attributes:
        current_section: Section being collected.
        follow_up_count: Turns spent in ``current_section``; reset to 0 on
            every section change.
        section_confirmed: Gate answers given so far, by section.
        entry_indexes: Current entry of each multi-entry section.
    """

    current_section: Section = Section.LANGUAGE
    follow_up_count: int = 0
    section_confirmed: dict[str, bool] = field(default_factory=dict)
    entry_indexes: dict[str, int] = field(default_factory=dict)

    def entry_index(self, section: Section | str) -> int:
        return self.entry_indexes.get(Section(section).value, 0)

    def next_entry(self, section: Section | str) -> int:
        """Advance ``section`` to a new entry and return its index."""
        key = Section(section).value
        self.entry_indexes[key] = self.entry_indexes.get(key, 0) + 1
        return self.entry_indexes[key]

    def move_to(self, section: Section | str) -> bool:
        """Switch sections; returns True if the section changed."""
        target = Section(section)
        if target is self.current_section:
            return False
        self.current_section = target
        self.follow_up_count = 0
        return True

    def record_turn(self, suggested_section: Section | str | None) -> None:
        """Advance after a turn: change section, or count a follow-up."""
        if suggested_section is None or not self.move_to(suggested_section):
            self.follow_up_count += 1


@dataclass
class ConversationContext:
    """Soft context carried across AI turns.

    Owned by the orchestrator and updated once per turn; classifiers never
    read it.
    """

    mentioned_entities: list[str] = field(default_factory=list)
    answered_topics: list[str] = field(default_factory=list)
    user_tone: UserTone = "neutral"
    follow_up_counts: dict[str, int] = field(default_factory=dict)


# =============================================================================
# Mode Variants
# =============================================================================


def _now() -> datetime:
    return datetime.now(UTC)


@dataclass
class GuidedState:
    """Guided-mode session.

    Attributes:
        current_question_id: Question awaiting an answer, or None when the
            interview is complete.
    """

    session_id: str
    language: str = "en"
    resume_record: dict[str, Any] = field(default_factory=dict)
    section_state: SectionState = field(default_factory=SectionState)
    current_question_id: str | None = None
    is_complete: bool = False
    created_at: datetime = field(default_factory=_now)
    mode: Literal[InterviewMode.GUIDED] = InterviewMode.GUIDED


@dataclass
class AiAssistedState:
    """AI-mode session.

    Attributes:
        history: Visible conversation so far (data blocks removed).
        context: Soft context for prompt building.
    """

    session_id: str
    language: str = "en"
    resume_record: dict[str, Any] = field(default_factory=dict)
    section_state: SectionState = field(default_factory=SectionState)
    history: list[Message] = field(default_factory=list)
    context: ConversationContext = field(default_factory=ConversationContext)
    is_complete: bool = False
    created_at: datetime = field(default_factory=_now)
    mode: Literal[InterviewMode.AI] = InterviewMode.AI

    @property
    def last_assistant_message(self) -> str:
        for message in reversed(self.history):
            if message["role"] == "assistant":
                return message["content"]
        return ""


ConversationState = GuidedState | AiAssistedState
