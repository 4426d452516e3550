"""In-memory session registry.

Holds one ConversationState per session id. The registry is created by
the application factory and injected into route handlers; it is not a
module-level global.

Turns for one session must not interleave (each turn reads and rewrites
the whole state), so callers take ``registry.lock(session_id)`` around a
turn.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass

from resume_builder.interview.state import (
    AiAssistedState,
    ConversationState,
    GuidedState,
    InterviewMode,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionNotFound:
    """Lookup result for an unknown session id."""

    session_id: str


class SessionRegistry:
    """Session store keyed by session id."""

    def __init__(self) -> None:
        self._sessions: dict[str, ConversationState] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def create(self, mode: InterviewMode | str, language: str = "en") -> ConversationState:
        """Create and store a new session.

        Args:
            mode: "guided" or "ai".
            language: Interview language code.

        Returns:
            The new state.

        Raises:
            ValueError: If ``mode`` is not a known interview mode.
        """
        session_id = str(uuid.uuid4())
        state: ConversationState
        if InterviewMode(mode) is InterviewMode.GUIDED:
            state = GuidedState(session_id=session_id, language=language)
        else:
            state = AiAssistedState(session_id=session_id, language=language)
        self._sessions[session_id] = state
        self._locks[session_id] = asyncio.Lock()
        logger.info("Created %s session %s", state.mode.value, session_id)
        return state

    def get(self, session_id: str) -> ConversationState | SessionNotFound:
        """Look up a session; never raises."""
        state = self._sessions.get(session_id)
        if state is None:
            return SessionNotFound(session_id)
        return state

    def save(self, state: ConversationState) -> bool:
        """Replace the stored state of an existing session.

        A session deleted while its turn was running stays deleted.

        Returns:
            True if the session was still registered.
        """
        if state.session_id not in self._sessions:
            logger.info("Dropped save for deleted session %s", state.session_id)
            return False
        self._sessions[state.session_id] = state
        return True

    def delete(self, session_id: str) -> bool:
        """Remove a session.

        Returns:
            True if the session existed.
        """
        self._locks.pop(session_id, None)
        if self._sessions.pop(session_id, None) is None:
            return False
        logger.info("Deleted session %s", session_id)
        return True

    def lock(self, session_id: str) -> asyncio.Lock:
        """Per-session lock serializing turns."""
        return self._locks.setdefault(session_id, asyncio.Lock())
