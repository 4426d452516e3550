"""AI-mode turn orchestrator.

One user message runs through a LangGraph pipeline:

    classify_turn → build_prompt → call_model → extract_fields →
        [route_validation]
        ├─ "validate" → validate_response → enforce_protocol
        └─ "skip" → enforce_protocol        (model call failed)

    enforce_protocol → apply_flows → finalize → END

The model proposes; deterministic code has the last word. Gate denials,
the skills chain and the multi-entry loop replace the model's wording
with canonical text, so the interview advances even when the model
drifts or the provider is down.

The graph is built per orchestrator around an injected CompletionClient;
there is no module-level graph instance.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, TypedDict

from langgraph.graph import END, StateGraph

from resume_builder.core.llm_sanitization import sanitize_llm_input
from resume_builder.interview.context import build_context_summary, update_context
from resume_builder.interview.contradiction import (
    ContradictionResult,
    check_existing_entries,
    detect_contradiction,
)
from resume_builder.interview.email_guide import (
    build_email_guide_content,
    suggest_professional_emails,
)
from resume_builder.interview.entries import advance_multi_entry
from resume_builder.interview.extraction import (
    ExtractedData,
    clean_ai_response,
    fallback_extract_data,
    parse_extracted_data,
)
from resume_builder.interview.intents import (
    detect_asked_add_another,
    detect_escape_phrase,
    detect_export_intent,
    detect_frustration,
    detect_no_email,
    detect_user_said_no_to_section,
    detect_user_said_yes_to_section,
    is_yes_no_response,
)
from resume_builder.interview.paths import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    FieldProposal,
    apply_extracted_fields,
    get_value,
)
from resume_builder.interview.prompts import (
    EMAIL_HELP_HINT,
    EXPORT_HINT,
    FOLLOW_UP_LIMIT_HINT,
    FRUSTRATION_HINT,
    MOVE_ON_HINT,
    build_contradiction_hint,
    build_email_suggestions_hint,
    build_said_yes_hint,
    build_section_entry_hint,
    build_system_prompt,
    needs_section_entry_hint,
)
from resume_builder.interview.sections import (
    EXPORT_READY_MESSAGE,
    REQUIRED_FIRST_MESSAGES,
    SECTION_ADVANCE_MAP,
    SECTION_ARRAY_KEYS,
    SECTION_FLAG_MAP,
    SECTION_TRANSITION_MESSAGES,
    Section,
    get_next_section,
    resolve_answering_section,
    should_ask_follow_up,
)
from resume_builder.interview.skills import (
    SKILLS_FLAG_MAP,
    SkillsPhase,
    advance_skills_chain,
    detect_skills_question_phase,
    detect_skills_sub_category,
)
from resume_builder.interview.state import AiAssistedState, ConversationContext
from resume_builder.interview.validator import validate_ai_response
from resume_builder.providers.completion import CompletionClient, Message, TokenUsage
from resume_builder.providers.errors import ProviderError

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = """**What language would you like to use?**

English | Español | Français | Deutsch | Português
中文 | 日本語 | 한국어 | العربية | हिन्दी

Just type your preferred language!"""

FALLBACK_MESSAGE = (
    "I'm sorry, I had trouble understanding that. Could you please rephrase or try again?"
)

EDUCATION_YEAR_QUESTION = (
    "Great! What year did you graduate from your program? (Or are you still studying?)"
)

_FLAG_CONFIDENCE = 0.95
_DEFAULT_CONFIDENCE = 0.5

_FLAG_SECTIONS = {flag: section for section, flag in SECTION_FLAG_MAP.items()}
_ARRAY_FLAG_PATHS = {
    array_key: SECTION_FLAG_MAP[section] for section, array_key in SECTION_ARRAY_KEYS.items()
}


class TurnState(TypedDict, total=False):
    """State flowing through the turn graph.

    Inputs are set by ``InterviewOrchestrator.process_turn``; every node
    returns a new dict with its outputs added.
    """

    # Inputs
    user_message: str
    history: list[Message]
    record: dict[str, Any]
    current_section: Section
    follow_up_count: int
    language: str
    context: ConversationContext
    entry_index: int
    max_follow_ups: int
    max_multi_entry_follow_ups: int

    # Classification
    last_assistant_message: str
    actual_section: Section
    first_turn: bool
    user_said_no: bool
    user_said_yes: bool
    wants_to_move_on: bool
    seems_frustrated: bool
    needs_email_help: bool
    wants_to_export: bool
    contradiction: ContradictionResult
    additional_context: str
    system_prompt: str

    # Model
    raw_response: str
    usage: TokenUsage
    completion_failed: bool

    # Outcome
    assistant_message: str
    extracted: ExtractedData
    new_entry: bool
    special_content: dict[str, Any] | None
    confidence: float


@dataclass
class TurnResult:
    """What one AI turn produced.

    Attributes:
        assistant_message: Reply shown to the user (no data block).
        extracted_fields: Proposals offered for merging this turn.
        suggested_section: Section the interview moves to, if any.
        is_complete: The user is done and the resume can be exported.
        special_content: Extra payload for the client (email guide).
        follow_up_needed: The interview stays in the current section.
        confidence: Mean confidence of the extracted fields.
        usage: Token usage of the completion call.
    """

    assistant_message: str
    extracted_fields: list[FieldProposal] = field(default_factory=list)
    suggested_section: Section | None = None
    is_complete: bool = False
    special_content: dict[str, Any] | None = None
    follow_up_needed: bool = False
    confidence: float = _DEFAULT_CONFIDENCE
    usage: TokenUsage = field(default_factory=TokenUsage)


# =============================================================================
# Helpers
# =============================================================================


def _last_assistant_message(history: list[Message]) -> str:
    for message in reversed(history):
        if message["role"] == "assistant":
            return message["content"]
    return ""


def _as_section(value: str | None) -> Section | None:
    if not value:
        return None
    try:
        return Section(value)
    except ValueError:
        logger.debug("Ignoring unknown suggested section %r", value)
        return None


def _has_field(fields: list[FieldProposal], path: str) -> bool:
    return any(proposal.get("path") == path for proposal in fields)


def _mean_confidence(fields: list[FieldProposal]) -> float:
    if not fields:
        return _DEFAULT_CONFIDENCE
    return sum(proposal.get("confidence", 0.0) for proposal in fields) / len(fields)


def _asks_field_of_study(message: str) -> bool:
    lower = message.lower()
    return "?" in message and any(
        phrase in lower for phrase in ("field of study", "what did you study", "major")
    )


def _known_field_of_study(state: TurnState) -> bool:
    entry_path = f"education[{state.get('entry_index', 0)}].fieldOfStudy"
    if get_value(state["record"], entry_path):
        return True
    return any(
        proposal.get("path", "").endswith(".fieldOfStudy") and proposal.get("value")
        for proposal in state["extracted"].fields
    )


# =============================================================================
# Node Functions
# =============================================================================


def classify_turn_node(state: TurnState) -> TurnState:
    """Run the intent classifiers over the user's message.

    The section is taken from the assistant's last question when it is
    recognizable, which tolerates a client whose section state lags one
    turn behind.
    """
    user_message = state["user_message"]
    last_message = _last_assistant_message(state.get("history", []))
    current = Section(state["current_section"])
    follow_up_count = state.get("follow_up_count", 0)

    actual = resolve_answering_section(last_message, current, follow_up_count)
    required = REQUIRED_FIRST_MESSAGES.get(actual)
    at_gate = bool(required) and required in last_message
    first_turn = at_gate or (actual is current and follow_up_count == 0)
    gate_count = 0 if first_turn else max(follow_up_count, 1)

    # An "add another?" answer is never a section-level yes/no
    answering_add_another = detect_asked_add_another(last_message, actual)
    user_said_no = not answering_add_another and detect_user_said_no_to_section(
        user_message, actual, gate_count
    )
    user_said_yes = not answering_add_another and detect_user_said_yes_to_section(
        user_message, actual, gate_count
    )

    if user_said_no and actual in SECTION_ARRAY_KEYS:
        # Declining a section that already has entries asks keep-or-remove
        contradiction = check_existing_entries(SECTION_ARRAY_KEYS[actual], state["record"])
        user_said_no = not contradiction.is_contradiction
    elif user_said_no:
        contradiction = ContradictionResult()
    else:
        contradiction = detect_contradiction(user_message, state["record"])
    wants_to_export = current in (Section.REVIEW, Section.COMPLETE) and detect_export_intent(
        user_message
    )

    logger.info(
        "Classified turn: section=%s first_turn=%s said_no=%s said_yes=%s",
        actual.value,
        first_turn,
        user_said_no,
        user_said_yes,
    )

    return {
        **state,
        "last_assistant_message": last_message,
        "actual_section": actual,
        "first_turn": first_turn,
        "user_said_no": user_said_no,
        "user_said_yes": user_said_yes,
        "wants_to_move_on": detect_escape_phrase(user_message),
        "seems_frustrated": detect_frustration(user_message),
        "needs_email_help": detect_no_email(user_message),
        "wants_to_export": wants_to_export,
        "contradiction": contradiction,
    }


def build_prompt_node(state: TurnState) -> TurnState:
    """Assemble turn hints and the system prompt."""
    section = state["actual_section"]
    follow_up_count = 0 if state["first_turn"] else state.get("follow_up_count", 0)
    hints = []

    summary = build_context_summary(
        state.get("context") or ConversationContext(), state["record"]
    )
    if summary:
        hints.append(summary)
    if state["wants_to_move_on"]:
        hints.append(MOVE_ON_HINT)
    if state["seems_frustrated"]:
        hints.append(FRUSTRATION_HINT)
    if state["needs_email_help"]:
        hints.append(EMAIL_HELP_HINT)
        full_name = get_value(state["record"], "personalInfo.fullName")
        if isinstance(full_name, str):
            suggestions = suggest_professional_emails(full_name)
            if suggestions:
                hints.append(build_email_suggestions_hint(suggestions))

    contradiction = state["contradiction"]
    if contradiction.is_contradiction and contradiction.existing_data_summary:
        hints.append(
            build_contradiction_hint(
                contradiction.section or section.value,
                contradiction.existing_data_summary,
            )
        )
    if state["wants_to_export"]:
        hints.append(EXPORT_HINT)
    if not should_ask_follow_up(
        section,
        follow_up_count,
        state.get("max_follow_ups", 3),
        state.get("max_multi_entry_follow_ups", 5),
    ):
        hints.append(FOLLOW_UP_LIMIT_HINT)
    if (
        needs_section_entry_hint(section, follow_up_count)
        and not state["user_said_no"]
        and not state["user_said_yes"]
        and not contradiction.is_contradiction
        and is_yes_no_response(state["user_message"]) is None
    ):
        hints.append(build_section_entry_hint(section))
    if state["user_said_yes"]:
        hints.append(build_said_yes_hint(section))

    additional_context = "\n\n".join(hints)
    return {
        **state,
        "additional_context": additional_context,
        "system_prompt": build_system_prompt(
            section, state.get("language", "en"), additional_context or None
        ),
    }


def extract_fields_node(state: TurnState) -> TurnState:
    """Parse the data block, falling back to rule-based extraction.

    The fallback runs when the block is missing or carries no fields. A
    block that parsed keeps its own suggested section and follow-up flag;
    only its fields are filled from the fallback. Nothing is extracted
    from a denial that conflicts with existing entries.
    """
    raw = state.get("raw_response", "")
    extracted = parse_extracted_data(raw)

    if extracted is None or not extracted.fields:
        fallback = fallback_extract_data(
            state["user_message"],
            state["actual_section"],
            state["last_assistant_message"],
            state.get("entry_index", 0),
        )
        fields = [] if state["contradiction"].is_contradiction else list(fallback.fields)
        if extracted is None:
            extracted = ExtractedData(
                fields=fields,
                suggested_section=(
                    fallback.suggested_section.value if fallback.suggested_section else None
                ),
            )
        else:
            extracted = replace(extracted, fields=fields)
        if fields or extracted.suggested_section:
            logger.info(
                "Using fallback extraction: %d field(s), suggested=%s",
                len(fields),
                extracted.suggested_section,
            )

    message = (
        FALLBACK_MESSAGE if state.get("completion_failed") else clean_ai_response(raw)
    )
    return {**state, "extracted": extracted, "assistant_message": message}


def validate_response_node(state: TurnState) -> TurnState:
    """Replace a model reply that breaks the section-entry protocol."""
    if state["contradiction"].is_contradiction:
        return state
    section = state["actual_section"]
    # Skills denials are handled by the sub-category chain
    said_no = state["user_said_no"] and section is not Section.SKILLS
    result = validate_ai_response(
        state["assistant_message"],
        section,
        0 if state["first_turn"] else max(state.get("follow_up_count", 0), 1),
        said_no,
        state["user_said_yes"],
    )
    if result.is_valid or not result.corrected_response:
        return state

    logger.warning("Corrected model reply in %s: %s", section.value, result.violation)
    return {**state, "assistant_message": result.corrected_response}


def enforce_protocol_node(state: TurnState) -> TurnState:
    """Apply gate denials, escape requests and gate assent."""
    section = state["actual_section"]
    extracted = state["extracted"]
    message = state["assistant_message"]
    fields = list(extracted.fields)
    suggested = extracted.suggested_section
    follow_up_needed = extracted.follow_up_needed

    if state["user_said_no"] and section is not Section.SKILLS:
        message = SECTION_TRANSITION_MESSAGES[section]
        suggested = suggested or SECTION_ADVANCE_MAP[section].value
        flag = SECTION_FLAG_MAP[section]
        fields = [proposal for proposal in fields if proposal.get("path") != flag]
        fields.append(FieldProposal(path=flag, value=False, confidence=_FLAG_CONFIDENCE))
        follow_up_needed = False
        logger.info("Section %s declined; advancing to %s", section.value, suggested)

    elif state["contradiction"].is_contradiction:
        # Keep-or-remove question must be answered before leaving
        suggested = None
        follow_up_needed = True
        denied_flag = _ARRAY_FLAG_PATHS.get(state["contradiction"].section or "")
        fields = [
            proposal
            for proposal in fields
            if not (proposal.get("path") == denied_flag and proposal.get("value") is False)
        ]

    elif state["wants_to_move_on"] and not suggested:
        record = state["record"]
        suggested = get_next_section(
            section,
            record.get("hasWorkExperience"),
            record.get("hasVolunteering"),
            record.get("hasReferences"),
        ).value

    if state["user_said_yes"]:
        follow_up_needed = True

    if state["wants_to_export"] and state.get("completion_failed"):
        message = EXPORT_READY_MESSAGE

    return {
        **state,
        "assistant_message": message,
        "extracted": replace(
            extracted,
            fields=fields,
            suggested_section=suggested,
            follow_up_needed=follow_up_needed,
        ),
    }


def apply_flows_node(state: TurnState) -> TurnState:
    """Force the skills chain, the multi-entry loop and the education skip."""
    section = state["actual_section"]
    extracted = state["extracted"]
    message = state["assistant_message"]
    fields = list(extracted.fields)
    suggested = extracted.suggested_section
    follow_up_needed = extracted.follow_up_needed
    last_message = state["last_assistant_message"]
    user_message = state["user_message"]
    new_entry = False

    if section is Section.SKILLS:
        step = advance_skills_chain(last_message, user_message)
        if step is not None:
            message = step.message
            suggested = step.suggested_section.value if step.suggested_section else None
            follow_up_needed = step.suggested_section is None
            sub_category = detect_skills_sub_category(last_message)
            answer = is_yes_no_response(user_message)
            if (
                sub_category is not None
                and answer is not None
                and detect_skills_question_phase(last_message) is SkillsPhase.GATE
            ):
                flag = SKILLS_FLAG_MAP[sub_category]
                if not _has_field(fields, flag):
                    fields.append(
                        FieldProposal(
                            path=flag, value=answer == "yes", confidence=_FLAG_CONFIDENCE
                        )
                    )

    elif not state["user_said_no"] and not state["contradiction"].is_contradiction:
        step = advance_multi_entry(section, last_message, user_message, message)
        if step is not None:
            message = step.message
            new_entry = step.new_entry
            if step.suggested_section is not None:
                suggested = step.suggested_section.value
            elif new_entry:
                suggested = None
            follow_up_needed = step.suggested_section is None

    if (
        section is Section.EDUCATION
        and _asks_field_of_study(message)
        and _known_field_of_study({**state, "extracted": replace(extracted, fields=fields)})
    ):
        message = EDUCATION_YEAR_QUESTION

    return {
        **state,
        "assistant_message": message,
        "new_entry": new_entry,
        "extracted": replace(
            extracted,
            fields=fields,
            suggested_section=suggested,
            follow_up_needed=follow_up_needed,
        ),
    }


def finalize_node(state: TurnState) -> TurnState:
    """Attach special content and the turn confidence."""
    extracted = state["extracted"]
    special_content = None
    if state["needs_email_help"] or extracted.special_content == "email_guide":
        special_content = build_email_guide_content(state.get("language", "en"))

    return {
        **state,
        "special_content": special_content,
        "confidence": _mean_confidence(extracted.fields),
    }


# =============================================================================
# Routing Functions
# =============================================================================


def route_validation(state: TurnState) -> str:
    """Skip response validation when the model produced nothing.

    Returns:
        "skip" after a failed completion call, else "validate".
    """
    if state.get("completion_failed"):
        return "skip"
    return "validate"


# =============================================================================
# Graph Construction
# =============================================================================


def create_turn_graph(client: CompletionClient) -> StateGraph:
    """Create the turn graph around ``client``.

    Graph structure:
        classify_turn → build_prompt → call_model → extract_fields →
            [route_validation]
            ├─ "validate" → validate_response → enforce_protocol
            └─ "skip" → enforce_protocol
        enforce_protocol → apply_flows → finalize → END

    Args:
        client: Completion client used by the call_model node.

    Returns:
        Configured StateGraph (not compiled).
    """

    async def call_model_node(state: TurnState) -> TurnState:
        """Call the model; a provider failure degrades to the fallback reply."""
        try:
            completion = await client.complete(state["system_prompt"], state["history"])
        except ProviderError as exc:
            logger.warning("Completion failed, using fallback reply: %s", exc)
            return {
                **state,
                "raw_response": "",
                "usage": TokenUsage(),
                "completion_failed": True,
            }
        return {
            **state,
            "raw_response": completion.text,
            "usage": completion.usage,
            "completion_failed": False,
        }

    graph = StateGraph(TurnState)

    graph.add_node("classify_turn", classify_turn_node)
    graph.add_node("build_prompt", build_prompt_node)
    graph.add_node("call_model", call_model_node)
    graph.add_node("extract_fields", extract_fields_node)
    graph.add_node("validate_response", validate_response_node)
    graph.add_node("enforce_protocol", enforce_protocol_node)
    graph.add_node("apply_flows", apply_flows_node)
    graph.add_node("finalize", finalize_node)

    graph.set_entry_point("classify_turn")
    graph.add_edge("classify_turn", "build_prompt")
    graph.add_edge("build_prompt", "call_model")
    graph.add_edge("call_model", "extract_fields")
    graph.add_conditional_edges(
        "extract_fields",
        route_validation,
        {
            "validate": "validate_response",
            "skip": "enforce_protocol",
        },
    )
    graph.add_edge("validate_response", "enforce_protocol")
    graph.add_edge("enforce_protocol", "apply_flows")
    graph.add_edge("apply_flows", "finalize")
    graph.add_edge("finalize", END)

    return graph


# =============================================================================
# Orchestrator
# =============================================================================


class InterviewOrchestrator:
    """Runs AI-mode turns against a session state.

    Args:
        client: Completion client for model calls.
        confidence_threshold: Minimum proposal confidence to merge.
        max_follow_ups: Follow-up limit for single-entry sections.
        max_multi_entry_follow_ups: Follow-up limit for work and education.
    """

    def __init__(
        self,
        client: CompletionClient,
        *,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        max_follow_ups: int = 3,
        max_multi_entry_follow_ups: int = 5,
    ) -> None:
        self.client = client
        self.confidence_threshold = confidence_threshold
        self.max_follow_ups = max_follow_ups
        self.max_multi_entry_follow_ups = max_multi_entry_follow_ups
        self._graph = create_turn_graph(client).compile()

    def _initial_state(
        self,
        user_message: str,
        history: list[Message],
        record: dict[str, Any],
        current_section: Section | str,
        follow_up_count: int,
        language: str,
        context: ConversationContext | None,
        entry_index: int,
    ) -> TurnState:
        safe_message = sanitize_llm_input(user_message)
        return {
            "user_message": safe_message,
            "history": [*history, Message(role="user", content=safe_message)],
            "record": record,
            "current_section": Section(current_section),
            "follow_up_count": follow_up_count,
            "language": language,
            "context": context or ConversationContext(),
            "entry_index": entry_index,
            "max_follow_ups": self.max_follow_ups,
            "max_multi_entry_follow_ups": self.max_multi_entry_follow_ups,
        }

    def start(self, state: AiAssistedState) -> str:
        """Open an AI session with the language question.

        Only an empty history gets the welcome; restarting an active
        session returns its last assistant message.
        """
        if state.history:
            return state.last_assistant_message
        state.history.append(Message(role="assistant", content=WELCOME_MESSAGE))
        return WELCOME_MESSAGE

    async def run_turn(
        self,
        user_message: str,
        history: list[Message],
        record: dict[str, Any],
        current_section: Section | str,
        follow_up_count: int = 0,
        *,
        language: str = "en",
        context: ConversationContext | None = None,
        entry_index: int = 0,
    ) -> TurnResult:
        """Run the graph for one message without touching any session.

        Args:
            user_message: The user's reply.
            history: Prior turns, without the current message.
            record: Current partial resume record.
            current_section: Section the client believes it is in.
            follow_up_count: Turns already spent in that section.
            language: Response language code.
            context: Soft conversation context.
            entry_index: Current entry of the multi-entry section.

        Returns:
            TurnResult for the turn.
        """
        final_state = await self._graph.ainvoke(
            self._initial_state(
                user_message,
                history,
                record,
                current_section,
                follow_up_count,
                language,
                context,
                entry_index,
            )
        )
        return self._to_result(final_state)

    async def process_turn(self, state: AiAssistedState, user_message: str) -> TurnResult:
        """Run one turn and apply its outcome to ``state``.

        Merges confident proposals into the record, advances the section
        state and entry index, updates the soft context and appends both
        messages to the history.

        Args:
            state: Session state (updated in place).
            user_message: The user's reply.

        Returns:
            TurnResult for the turn.
        """
        section_state = state.section_state
        answering = resolve_answering_section(
            state.last_assistant_message,
            section_state.current_section,
            section_state.follow_up_count,
        )
        final_state = await self._graph.ainvoke(
            self._initial_state(
                user_message,
                state.history,
                state.resume_record,
                section_state.current_section,
                section_state.follow_up_count,
                state.language,
                state.context,
                section_state.entry_index(answering),
            )
        )
        result = self._to_result(final_state)
        actual: Section = final_state["actual_section"]

        state.resume_record = apply_extracted_fields(
            state.resume_record, result.extracted_fields, self.confidence_threshold
        )
        for proposal in result.extracted_fields:
            gated = _FLAG_SECTIONS.get(proposal.get("path", ""))
            if gated is not None and isinstance(proposal.get("value"), bool):
                section_state.section_confirmed[gated.value] = proposal["value"]

        if final_state.get("new_entry"):
            section_state.next_entry(actual)
        section_state.move_to(actual)
        section_state.record_turn(result.suggested_section)

        merged = [
            proposal
            for proposal in result.extracted_fields
            if proposal.get("confidence", 0) >= self.confidence_threshold
        ]
        state.context = update_context(
            state.context,
            user_message,
            merged,
            actual.value,
            section_state.follow_up_count,
        )
        state.history = [
            *final_state["history"],
            Message(role="assistant", content=result.assistant_message),
        ]
        if result.is_complete:
            state.is_complete = True

        logger.info(
            "Processed turn for session %s: section=%s fields=%d",
            state.session_id,
            section_state.current_section.value,
            len(result.extracted_fields),
        )
        return result

    @staticmethod
    def _to_result(final_state: TurnState) -> TurnResult:
        extracted = final_state["extracted"]
        return TurnResult(
            assistant_message=final_state["assistant_message"],
            extracted_fields=list(extracted.fields),
            suggested_section=_as_section(extracted.suggested_section),
            is_complete=final_state["wants_to_export"] or extracted.is_complete,
            special_content=final_state.get("special_content"),
            follow_up_needed=extracted.follow_up_needed,
            confidence=final_state.get("confidence", _DEFAULT_CONFIDENCE),
            usage=final_state.get("usage") or TokenUsage(),
        )
