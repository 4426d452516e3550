"""Interview engine for the resume builder.

Two modes share one resume record and section state:

    guided: walks a fixed question catalog; no model calls
    ai: a LangGraph turn pipeline around a text-completion client, with
        deterministic guardrails that correct the model's replies

Modules:
    sections: Section graph, gate flags and canonical wording
    skills: Skills sub-category chain
    intents: Intent classifiers for user and assistant messages
    extraction: Data-block parsing and rule-based fallback extraction
    paths: Field paths and the copy-on-write merge
    contradiction: Denials that conflict with collected entries
    validator: Section-entry protocol checks for model replies
    entries: Multi-entry "add another?" loop
    prompts: System prompt and turn hints
    context: Soft conversation context
    state: Conversation state variants
    orchestrator: AI-mode turn graph
    questions: Guided-mode question catalog
    guided: Guided-mode engine
    sessions: In-memory session registry
"""

from resume_builder.interview.contradiction import ContradictionResult, detect_contradiction
from resume_builder.interview.extraction import (
    ExtractedData,
    clean_ai_response,
    fallback_extract_data,
    parse_extracted_data,
)
from resume_builder.interview.guided import GuidedInterview, GuidedReply, InterviewFinishedError
from resume_builder.interview.intents import (
    detect_escape_phrase,
    detect_frustration,
    detect_no_email,
    detect_user_said_no_to_section,
    detect_user_said_yes_to_section,
    is_gate_question,
    is_yes_no_response,
)
from resume_builder.interview.orchestrator import (
    InterviewOrchestrator,
    TurnResult,
    create_turn_graph,
)
from resume_builder.interview.paths import (
    FieldProposal,
    apply_extracted_fields,
    get_value,
    parse_path,
    set_value,
)
from resume_builder.interview.questions import (
    QUESTIONS,
    SECTION_COMPLETE,
    QuestionDefinition,
    next_question,
)
from resume_builder.interview.sections import Section, get_next_section
from resume_builder.interview.sessions import SessionNotFound, SessionRegistry
from resume_builder.interview.state import (
    AiAssistedState,
    ConversationContext,
    ConversationState,
    GuidedState,
    InterviewMode,
    SectionState,
)
from resume_builder.interview.validator import ValidationResult, validate_ai_response

__all__ = [
    # Sections
    "Section",
    "get_next_section",
    # Classifiers
    "is_yes_no_response",
    "is_gate_question",
    "detect_escape_phrase",
    "detect_frustration",
    "detect_no_email",
    "detect_user_said_no_to_section",
    "detect_user_said_yes_to_section",
    # Extraction and merge
    "ExtractedData",
    "FieldProposal",
    "parse_extracted_data",
    "clean_ai_response",
    "fallback_extract_data",
    "parse_path",
    "get_value",
    "set_value",
    "apply_extracted_fields",
    # Guardrails
    "ContradictionResult",
    "detect_contradiction",
    "ValidationResult",
    "validate_ai_response",
    # State
    "InterviewMode",
    "SectionState",
    "ConversationContext",
    "GuidedState",
    "AiAssistedState",
    "ConversationState",
    # AI mode
    "InterviewOrchestrator",
    "TurnResult",
    "create_turn_graph",
    # Guided mode
    "QUESTIONS",
    "SECTION_COMPLETE",
    "QuestionDefinition",
    "next_question",
    "GuidedInterview",
    "GuidedReply",
    "InterviewFinishedError",
    # Sessions
    "SessionRegistry",
    "SessionNotFound",
]
