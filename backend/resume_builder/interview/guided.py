"""Guided-mode interview engine.

Walks the question catalog one answer at a time without calling a model:

    answer → special handling (email help, add-another, edit request) →
        parse value(s) → merge → next unskipped question

Answers are stored with full confidence. Some answers carry more than
was asked ("cashier at Walmart", "Jan 2020 - Present"); the extra value
is written to the sibling field and that field's question is skipped.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from resume_builder.core.formatters import (
    expand_degree_abbreviation,
    format_city_state,
    format_phone_number,
    title_case,
)
from resume_builder.interview.email_guide import build_email_guide_content
from resume_builder.interview.extraction import LANGUAGE_CODES
from resume_builder.interview.intents import (
    detect_no_email,
    detect_user_wants_another,
    is_yes_no_response,
)
from resume_builder.interview.paths import FieldProposal, apply_extracted_fields, with_entry_index
from resume_builder.interview.questions import (
    ADD_MORE_SECTION_MAP,
    SECTION_COMPLETE,
    TEMPLATE_STYLES,
    InputKind,
    QuestionDefinition,
    first_question,
    following_question,
    get_question,
    next_question,
)
from resume_builder.interview.sections import MULTI_ENTRY_SECTIONS, SECTION_FLAG_MAP, Section
from resume_builder.interview.skills import split_list
from resume_builder.interview.state import GuidedState

logger = logging.getLogger(__name__)

# Answers that steer the flow but are not part of the resume
_TRANSIENT_FIELDS = frozenset(
    {
        "ready",
        "confirmGenerate",
        "complete",
        "addMoreWork",
        "addMoreEducation",
        "addMoreVolunteering",
        "addMoreReferences",
    }
)

_ENTRY_LABELS: dict[Section, str] = {
    Section.WORK: "work experience",
    Section.EDUCATION: "education",
    Section.VOLUNTEERING: "volunteer experience",
    Section.REFERENCES: "reference",
}

_FIELD_LABELS = {"jobTitle": "job title", "companyName": "company", "endDate": "end date"}

_GATE_FLAGS = {flag: section for section, flag in SECTION_FLAG_MAP.items()}

_TITLE_AT_COMPANY = re.compile(r"^(.+?)\s+at\s+(.+)$", re.IGNORECASE)
_DATE_RANGE = re.compile(
    r"(\w+\s*\d{4}|\d{4})\s*(?:to|-|–)\s*(\w+\s*\d{4}|\d{4}|present|current)",
    re.IGNORECASE,
)
_LANGUAGE_WITH_LEVEL = re.compile(r"^(.+?)\s*\((.+?)\)\s*$")

EMAIL_HELP_MESSAGE = (
    "No problem! Having a professional email is important for job applications. "
    "Let me help you create one - it's free and only takes a few minutes."
)
EMAIL_RETURN_MESSAGE = "Once you've created your email, come back and type it here:"
EDIT_MESSAGE = (
    "No problem! Let's go back and make some changes. I'll take you back to your "
    "personal information - you can update anything from there."
)
EXPORT_MESSAGE = (
    "Your resume is complete and ready to download! You can get it as a PDF for most "
    "job applications, or as a Word document if you need to make further edits."
)
PREVIEW_MESSAGE = "Here's a preview of your resume! Take a look at how it turned out:"
FINISHED_MESSAGE = (
    "Congratulations! You've completed all the questions. "
    "Let me generate your professional resume now..."
)
REQUIRED_ANSWER_MESSAGE = "Please enter an answer so we can continue."
TEMPLATE_CHOICE_MESSAGE = "Please type 1, 2, or 3 to choose a style."


class InterviewFinishedError(Exception):
    """Raised when an answer arrives for a completed guided interview."""


@dataclass
class GuidedReply:
    """Outcome of one guided-mode answer.

    Attributes:
        messages: Assistant messages to show, in order.
        question: Question now awaiting an answer, or None when finished.
        fields: Values stored this turn.
        special_content: Extra payload (email guide) for the client.
        is_complete: The interview is finished.
    """

    messages: list[str]
    question: QuestionDefinition | None = None
    fields: list[FieldProposal] = field(default_factory=list)
    special_content: dict[str, Any] | None = None
    is_complete: bool = False


# =============================================================================
# Answer Parsing
# =============================================================================


def parse_language_choice(text: str) -> str | None:
    """Map "Español", "spanish" or "es" to a supported language code."""
    lower = text.strip().lower()
    if lower in LANGUAGE_CODES:
        return LANGUAGE_CODES[lower]
    for part in re.split(r"[\s/()|,]+", lower):
        if len(part) > 2 and part in LANGUAGE_CODES:
            return LANGUAGE_CODES[part]
    return None


def parse_language_list(text: str, default_proficiency: str = "conversational") -> list[dict[str, str]]:
    """Parse "English (native), Spanish" into language entries."""
    entries = []
    for item in split_list(text):
        match = _LANGUAGE_WITH_LEVEL.match(item)
        if match:
            entries.append(
                {"language": match.group(1).strip(), "proficiency": match.group(2).strip()}
            )
        else:
            entries.append({"language": item, "proficiency": default_proficiency})
    return entries


def parse_title_at_company(text: str) -> tuple[str, str] | None:
    """Split "line cook at dennys" into ("Line Cook", "Dennys")."""
    match = _TITLE_AT_COMPANY.match(text.strip())
    if not match:
        return None
    return title_case(match.group(1).strip()), title_case(match.group(2).strip())


def parse_date_range(text: str) -> tuple[str, str] | None:
    """Split "Jan 2020 - Present" into ("Jan 2020", "Present")."""
    match = _DATE_RANGE.search(text)
    if not match:
        return None
    start, end = match.group(1).strip(), match.group(2).strip()
    if end.lower() in ("present", "current"):
        end = "Present"
    return start, end


def parse_template_choice(text: str) -> str | None:
    lower = text.strip().lower()
    if lower in ("1", "2", "3"):
        return TEMPLATE_STYLES[int(lower) - 1]
    for style in TEMPLATE_STYLES:
        if style in lower:
            return style
    return None


def _sibling(path: str, leaf: str) -> str:
    return f"{path.rsplit('.', 1)[0]}.{leaf}"


def parse_answer(question: QuestionDefinition, path: str, text: str) -> list[FieldProposal]:
    """Turn one answer into field values.

    Args:
        question: Question being answered.
        path: The question's field path at the current entry index.
        text: Trimmed answer text.

    Returns:
        Proposals; the first is the asked field, any others are siblings
        found in the same answer.
    """

    def value(at: str, val: Any) -> FieldProposal:
        return FieldProposal(path=at, value=val, confidence=1.0)

    if question.input_kind is InputKind.CONFIRM:
        return [value(path, is_yes_no_response(text) == "yes")]

    leaf = path.rsplit(".", 1)[-1]

    if path == "skills.languages":
        return [value(path, parse_language_list(text))]
    if path.startswith("skills."):
        return [value(path, split_list(text))]

    if leaf in ("companyName", "jobTitle"):
        split = parse_title_at_company(text)
        if split:
            title, company = split
            if leaf == "companyName":
                return [value(path, company), value(_sibling(path, "jobTitle"), title)]
            return [value(path, title), value(_sibling(path, "companyName"), company)]

    if leaf == "startDate":
        dates = parse_date_range(text)
        if dates:
            start, end = dates
            return [value(path, start), value(_sibling(path, "endDate"), end)]

    if path == "personalInfo.phone":
        return [value(path, format_phone_number(text))]
    if path == "personalInfo.city" or leaf == "location":
        return [value(path, format_city_state(text))]
    if leaf == "degree":
        return [value(path, expand_degree_abbreviation(text))]
    if path.startswith("references[") and leaf == "phone" and "@" in text:
        return [value(_sibling(path, "email"), text)]

    return [value(path, text)]


# =============================================================================
# Engine
# =============================================================================


class GuidedInterview:
    """Drives a ``GuidedState`` through the question catalog."""

    def start(self, state: GuidedState) -> GuidedReply:
        """Point the session at its first question."""
        question = first_question(state.resume_record)
        state.current_question_id = question.id
        state.section_state.move_to(question.category)
        return GuidedReply(messages=[question.text], question=question)

    def answer(self, state: GuidedState, text: str) -> GuidedReply:
        """Process the answer to the current question.

        Args:
            state: Session state (updated in place).
            text: The user's answer.

        Returns:
            GuidedReply with the next question.

        Raises:
            InterviewFinishedError: If the interview is already complete.
        """
        if state.is_complete or state.current_question_id is None:
            raise InterviewFinishedError(state.session_id)

        question = get_question(state.current_question_id)
        answer = (text or "").strip()

        if not answer:
            if question.is_required:
                return GuidedReply(
                    messages=[REQUIRED_ANSWER_MESSAGE, question.text], question=question
                )
            return self._advance(state, question, [], [])

        if question.id == "complete":
            return self._finish_or_edit(state, answer)

        if question.id == "personal_email" and "@" not in answer and detect_no_email(answer):
            return GuidedReply(
                messages=[EMAIL_HELP_MESSAGE, EMAIL_RETURN_MESSAGE],
                question=question,
                special_content=build_email_guide_content(state.language),
            )

        target = ADD_MORE_SECTION_MAP.get(question.id)
        if target is not None and detect_user_wants_another(answer):
            state.section_state.next_entry(target.section)
            first = get_question(target.first_question_id)
            state.current_question_id = first.id
            state.section_state.follow_up_count += 1
            logger.info("Adding another %s entry", target.section.value)
            return GuidedReply(
                messages=[f"Great! Let's add another {_ENTRY_LABELS[target.section]}.", first.text],
                question=first,
            )

        if question.id == "language_select":
            state.language = parse_language_choice(answer) or "en"
            proposals = [FieldProposal(path="language", value=state.language, confidence=1.0)]
        elif question.id == "review_template":
            style = parse_template_choice(answer)
            if style is None:
                return GuidedReply(messages=[TEMPLATE_CHOICE_MESSAGE], question=question)
            proposals = [FieldProposal(path="templateStyle", value=style, confidence=1.0)]
        elif question.field_path in _TRANSIENT_FIELDS:
            proposals = []
        else:
            proposals = parse_answer(question, self._entry_path(state, question), answer)

        state.resume_record = apply_extracted_fields(state.resume_record, proposals, 0.0)
        for proposal in proposals:
            gated = _GATE_FLAGS.get(proposal["path"])
            if gated is not None:
                state.section_state.section_confirmed[gated.value] = bool(proposal["value"])

        messages = []
        extra = proposals[1:]
        if extra:
            noted = ", ".join(
                f"{_FIELD_LABELS.get(p['path'].rsplit('.', 1)[-1], p['path'])}: {p['value']}"
                for p in extra
            )
            messages.append(
                f"Got it! I also noted your {noted}. Let me continue with the next question."
            )
        if question.id == "review_confirm" and is_yes_no_response(answer) == "yes":
            messages.append(PREVIEW_MESSAGE)

        return self._advance(state, question, proposals, messages)

    @staticmethod
    def _entry_path(state: GuidedState, question: QuestionDefinition) -> str:
        if question.category in MULTI_ENTRY_SECTIONS:
            return with_entry_index(
                question.field_path, state.section_state.entry_index(question.category)
            )
        return question.field_path

    def _advance(
        self,
        state: GuidedState,
        question: QuestionDefinition,
        proposals: list[FieldProposal],
        messages: list[str],
    ) -> GuidedReply:
        filled = {proposal["path"] for proposal in proposals[1:]}
        current_id = question.id
        while True:
            candidate = next_question(state.resume_record, current_id)
            if candidate == SECTION_COMPLETE:
                candidate = following_question(state.resume_record, current_id)
            if candidate is None:
                return self._complete(state, proposals, [*messages, FINISHED_MESSAGE])
            # Sibling values from this answer already fill the question
            if self._entry_path(state, candidate) in filled:
                current_id = candidate.id
                continue
            break

        if candidate.category is not question.category:
            logger.info(
                "Guided section change: %s -> %s",
                question.category.value,
                candidate.category.value,
            )
        state.current_question_id = candidate.id
        state.section_state.record_turn(candidate.category)
        return GuidedReply(
            messages=[*messages, candidate.text], question=candidate, fields=proposals
        )

    def _finish_or_edit(self, state: GuidedState, answer: str) -> GuidedReply:
        lower = answer.lower()
        wants_changes = is_yes_no_response(answer) == "yes" or any(
            word in lower for word in ("change", "edit")
        )
        if wants_changes:
            restart = get_question("personal_name")
            state.current_question_id = restart.id
            state.section_state.move_to(restart.category)
            return GuidedReply(messages=[EDIT_MESSAGE, restart.text], question=restart)
        return self._complete(state, [], [EXPORT_MESSAGE])

    @staticmethod
    def _complete(
        state: GuidedState, proposals: list[FieldProposal], messages: list[str]
    ) -> GuidedReply:
        state.current_question_id = None
        state.is_complete = True
        state.section_state.move_to(Section.COMPLETE)
        logger.info("Guided interview %s complete", state.session_id)
        return GuidedReply(messages=messages, fields=proposals, is_complete=True)
