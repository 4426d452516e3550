"""Interview API router.

This module provides:
- POST /sessions: Start a guided or AI-assisted interview
- GET /sessions/{session_id}: Current session snapshot
- POST /sessions/{session_id}/messages: Answer the current question
- DELETE /sessions/{session_id}: Discard a session
- GET /questions: The guided-mode question catalog
"""

import structlog
from fastapi import APIRouter, Response, status

from resume_builder.api.deps import AppSettings, Guided, Orchestrator, Registry
from resume_builder.core.errors import InvalidStateError, NotFoundError, ValidationError
from resume_builder.core.responses import DataResponse
from resume_builder.interview.guided import InterviewFinishedError
from resume_builder.interview.questions import QUESTIONS, get_question
from resume_builder.interview.sessions import SessionNotFound
from resume_builder.interview.state import ConversationState, GuidedState
from resume_builder.schemas.interview import (
    CreateSessionRequest,
    QuestionSummary,
    SendMessageRequest,
    SessionSnapshot,
    TurnResponse,
)

logger = structlog.get_logger()

router = APIRouter()


def _get_session(registry: Registry, session_id: str) -> ConversationState:
    """Fetch a session or raise 404."""
    state = registry.get(session_id)
    if isinstance(state, SessionNotFound):
        raise NotFoundError("Session", state.session_id)
    return state


def _snapshot(state: ConversationState) -> SessionSnapshot:
    question = None
    if isinstance(state, GuidedState) and state.current_question_id is not None:
        question = get_question(state.current_question_id)
    return SessionSnapshot.from_state(state, question)


# =============================================================================
# Sessions
# =============================================================================


@router.post("/sessions", status_code=status.HTTP_201_CREATED)
async def create_session(
    body: CreateSessionRequest,
    registry: Registry,
    orchestrator: Orchestrator,
    guided: Guided,
    app_settings: AppSettings,
) -> DataResponse[TurnResponse]:
    """Start an interview.

    Guided sessions open on the first catalog question; AI sessions open
    on the language question.

    Args:
        body: Mode and optional language.

    Returns:
        DataResponse with the opening message and session snapshot.
    """
    state = registry.create(body.mode, body.language or app_settings.default_language)

    if isinstance(state, GuidedState):
        reply = guided.start(state)
        response = TurnResponse.from_guided(reply, state)
    else:
        greeting = orchestrator.start(state)
        response = TurnResponse(messages=[greeting], session=SessionSnapshot.from_state(state))

    logger.info(
        "interview_session_created",
        session_id=state.session_id,
        mode=state.mode.value,
        language=state.language,
    )
    return DataResponse(data=response)


@router.get("/sessions/{session_id}")
async def get_session(session_id: str, registry: Registry) -> DataResponse[SessionSnapshot]:
    """Get the current state of a session.

    Raises:
        NotFoundError: If the session does not exist.
    """
    return DataResponse(data=_snapshot(_get_session(registry, session_id)))


@router.post("/sessions/{session_id}/messages")
async def send_message(
    session_id: str,
    body: SendMessageRequest,
    registry: Registry,
    orchestrator: Orchestrator,
    guided: Guided,
) -> DataResponse[TurnResponse]:
    """Send the user's reply and get the next assistant turn.

    Turns for one session are serialized; a second request waits for the
    first to finish.

    Args:
        session_id: Session to answer in.
        body: The user's message.

    Returns:
        DataResponse with the turn result and updated snapshot.

    Raises:
        NotFoundError: If the session does not exist.
        ValidationError: If an AI-mode message is empty.
        InvalidStateError: If the interview is already complete.
    """
    state = _get_session(registry, session_id)

    async with registry.lock(session_id):
        if isinstance(state, GuidedState):
            try:
                reply = guided.answer(state, body.message)
            except InterviewFinishedError as exc:
                raise InvalidStateError(str(exc)) from exc
            response = TurnResponse.from_guided(reply, state)
        else:
            if state.is_complete:
                raise InvalidStateError("Interview is already complete")
            if not body.message:
                raise ValidationError("Message must not be empty")
            result = await orchestrator.process_turn(state, body.message)
            response = TurnResponse.from_turn(result, state)
        registry.save(state)

    logger.info(
        "interview_turn_processed",
        session_id=session_id,
        mode=state.mode.value,
        section=state.section_state.current_section.value,
        fields=len(response.fields),
        is_complete=response.is_complete,
    )
    return DataResponse(data=response)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str, registry: Registry) -> Response:
    """Discard a session.

    Raises:
        NotFoundError: If the session does not exist.
    """
    if not registry.delete(session_id):
        raise NotFoundError("Session", session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Question Catalog
# =============================================================================


@router.get("/questions")
async def list_questions() -> DataResponse[list[QuestionSummary]]:
    """List the guided-mode question catalog in order."""
    return DataResponse(data=[QuestionSummary.from_definition(q) for q in QUESTIONS])
