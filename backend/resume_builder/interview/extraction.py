"""Field extraction engine.

Two sources of field proposals per turn:

1. The model's reply, which should end with an
   ``<extracted_data>{json}</extracted_data>`` block (parse_extracted_data).
2. A deterministic fallback keyed off the assistant's last question, used
   when the block is missing or malformed (fallback_extract_data).

The fallback is gate-aware: a bare yes/no answer to a gate question only
ever produces the section's boolean flag, never a content field.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from resume_builder.core.formatters import (
    expand_degree_abbreviation,
    format_city_state,
    format_phone_number,
)
from resume_builder.interview.intents import (
    detect_asked_add_another,
    is_current_job_response,
    is_gate_question,
    is_yes_no_response,
)
from resume_builder.interview.paths import FieldProposal
from resume_builder.interview.sections import Section
from resume_builder.interview.skills import (
    SKILLS_FLAG_MAP,
    SKILLS_VALUE_PATHS,
    SkillsSubCategory,
    parse_spoken_languages,
    split_list,
)

logger = logging.getLogger(__name__)

_DATA_BLOCK = re.compile(r"<extracted_data>([\s\S]*?)</extracted_data>")
_EMAIL = re.compile(r"[\w.-]+@[\w.-]+\.\w+")
_PHONE = re.compile(r"[\d\s()+-]{7,}")
_DEGREE_WITH_FIELD = re.compile(r"^(.+?)\s+in\s+(.+)$", re.IGNORECASE)

LANGUAGE_CODES: dict[str, str] = {
    "english": "en",
    "en": "en",
    "español": "es",
    "espanol": "es",
    "spanish": "es",
    "es": "es",
    "français": "fr",
    "francais": "fr",
    "french": "fr",
    "fr": "fr",
    "deutsch": "de",
    "german": "de",
    "de": "de",
    "português": "pt",
    "portugues": "pt",
    "portuguese": "pt",
    "pt": "pt",
    "中文": "zh",
    "chinese": "zh",
    "zh": "zh",
    "日本語": "ja",
    "japanese": "ja",
    "ja": "ja",
    "한국어": "ko",
    "korean": "ko",
    "ko": "ko",
    "العربية": "ar",
    "arabic": "ar",
    "ar": "ar",
    "हिन्दी": "hi",
    "hindi": "hi",
    "hi": "hi",
}


# =============================================================================
# Model Output
# =============================================================================


@dataclass
class ExtractedData:
    """Parsed ``<extracted_data>`` block.

    Attributes:
        fields: Field proposals, in model order.
        suggested_section: Section the model wants to move to, if any.
        follow_up_needed: Model intends to stay in the section.
        special_content: Special content marker (only "email_guide" is used).
        is_complete: Model considers the resume complete.
    """

    fields: list[FieldProposal] = field(default_factory=list)
    suggested_section: str | None = None
    follow_up_needed: bool = False
    special_content: str | None = None
    is_complete: bool = False


def _coerce_proposal(raw: Any) -> FieldProposal | None:
    if not isinstance(raw, dict) or not isinstance(raw.get("path"), str):
        return None
    try:
        confidence = float(raw.get("confidence", 0))
    except (TypeError, ValueError):
        confidence = 0.0
    proposal = FieldProposal(path=raw["path"], value=raw.get("value"), confidence=confidence)
    if raw.get("clear") is True:
        proposal["clear"] = True
    return proposal


def parse_extracted_data(assistant_text: str) -> ExtractedData | None:
    """Parse the first ``<extracted_data>`` block in a model reply.

    Args:
        assistant_text: Raw model output.

    Returns:
        ExtractedData with defaults for missing keys, or None if there is
        no block or its body is not a JSON object.
    """
    match = _DATA_BLOCK.search(assistant_text or "")
    if not match:
        return None

    try:
        data = json.loads(match.group(1).strip())
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse extracted data: %s", e)
        return None
    if not isinstance(data, dict):
        logger.warning("Extracted data is not a JSON object")
        return None

    raw_fields = data.get("fields") or []
    if not isinstance(raw_fields, list):
        raw_fields = []
    proposals = []
    for raw in raw_fields:
        proposal = _coerce_proposal(raw)
        if proposal is not None:
            proposals.append(proposal)

    return ExtractedData(
        fields=proposals,
        suggested_section=data.get("suggestedSection") or None,
        follow_up_needed=bool(data.get("followUpNeeded", False)),
        special_content=data.get("specialContent") or None,
        is_complete=bool(data.get("isComplete", False)),
    )


def clean_ai_response(assistant_text: str) -> str:
    """Remove every ``<extracted_data>`` block and trim whitespace."""
    return _DATA_BLOCK.sub("", assistant_text or "").strip()


# =============================================================================
# Fallback Extraction
# =============================================================================


@dataclass
class FallbackExtraction:
    """Deterministic extraction result for one turn."""

    fields: list[FieldProposal] = field(default_factory=list)
    suggested_section: Section | None = None

    def add(self, path: str, value: Any, confidence: float) -> None:
        self.fields.append(FieldProposal(path=path, value=value, confidence=confidence))

    def add_flag(self, path: str, answer: str | None, on_no: Section | None = None) -> None:
        """Record a gate answer as a boolean flag."""
        if answer == "yes":
            self.add(path, True, 0.95)
        elif answer == "no":
            self.add(path, False, 0.95)
            if on_no is not None:
                self.suggested_section = on_no


@dataclass
class _Turn:
    """Normalized inputs shared by the per-section extractors."""

    message: str
    lower_message: str
    question: str
    answer: str | None
    is_gate: bool
    entry_index: int
    asked_add_another: bool

    def entry_path(self, array_key: str, leaf: str) -> str:
        return f"{array_key}[{self.entry_index}].{leaf}"

    def asked(self, *phrases: str) -> bool:
        return any(phrase in self.question for phrase in phrases)

    def asked_gate(self, *phrases: str) -> bool:
        return self.asked(*phrases) and (self.asked("yes or no") or self.is_gate)


def _extract_language(turn: _Turn, result: FallbackExtraction) -> None:
    code = LANGUAGE_CODES.get(turn.lower_message)
    if code:
        result.add("language", code, 0.95)
        result.suggested_section = Section.INTRO


def _extract_personal(turn: _Turn, result: FallbackExtraction) -> None:
    message = turn.message
    if turn.asked("full name", "your name"):
        if "@" not in message and not message.isdigit() and len(message) > 1:
            result.add("personalInfo.fullName", message, 0.9)
            result.suggested_section = Section.PERSONAL

    if turn.asked("email"):
        email = _EMAIL.search(message)
        if email:
            result.add("personalInfo.email", email.group(0), 0.95)

    if turn.asked("phone"):
        phone = _PHONE.search(message)
        if phone:
            result.add("personalInfo.phone", format_phone_number(phone.group(0).strip()), 0.9)

    if turn.asked("city", "location", "live"):
        if len(message) > 2 and "@" not in message:
            result.add("personalInfo.city", format_city_state(message), 0.85)


def _extract_work(turn: _Turn, result: FallbackExtraction) -> None:
    if turn.asked_add_another:
        if turn.answer == "no":
            result.suggested_section = Section.EDUCATION
        return

    if turn.asked_gate("work experience", "any jobs"):
        result.add_flag("hasWorkExperience", turn.answer, on_no=Section.EDUCATION)
        return

    current_path = turn.entry_path("workExperience", "isCurrentJob")
    if turn.asked("still work", "current job", "is this your current", "still there"):
        if turn.answer == "yes" or is_current_job_response(turn.message):
            result.add(current_path, True, 0.9)
        elif turn.answer == "no":
            result.add(current_path, False, 0.9)
        return

    if turn.answer is not None:
        return

    message = turn.message
    if turn.asked("company", "work for", "employer"):
        result.add(turn.entry_path("workExperience", "companyName"), message, 0.85)
    elif turn.asked("job title", "position") or (
        turn.asked("role") and not turn.asked("volunteer")
    ):
        result.add(turn.entry_path("workExperience", "jobTitle"), message, 0.85)
    elif turn.asked("start", "begin", "when did you join"):
        result.add(turn.entry_path("workExperience", "startDate"), message, 0.8)
    elif turn.asked("end", "leave", "when did you stop"):
        if is_current_job_response(message):
            result.add(current_path, True, 0.9)
        else:
            result.add(turn.entry_path("workExperience", "endDate"), message, 0.8)
    elif turn.asked("location", "where", "city") and turn.asked("job", "work", "position"):
        result.add(turn.entry_path("workExperience", "location"), message, 0.8)
    elif turn.asked("responsibilit", "duties", "what did you do", "main tasks"):
        result.add(turn.entry_path("workExperience", "responsibilities"), message, 0.85)


def _extract_education(turn: _Turn, result: FallbackExtraction) -> None:
    if turn.asked_add_another:
        if turn.answer == "no":
            result.suggested_section = Section.VOLUNTEERING
        return

    if turn.asked_gate("education", "school"):
        result.add_flag("hasEducation", turn.answer, on_no=Section.VOLUNTEERING)
        return

    studying_path = turn.entry_path("education", "isCurrentlyStudying")
    if turn.asked("still studying", "currently enrolled", "are you still"):
        if turn.answer is not None:
            result.add(studying_path, turn.answer == "yes", 0.9)
        return

    if turn.answer is not None:
        return

    message = turn.message
    if turn.asked("degree", "diploma", "certificate", "qualification"):
        match = _DEGREE_WITH_FIELD.match(message)
        if match and not match.group(2).strip().isdigit():
            result.add(
                turn.entry_path("education", "degree"),
                expand_degree_abbreviation(match.group(1).strip()),
                0.9,
            )
            result.add(turn.entry_path("education", "fieldOfStudy"), match.group(2).strip(), 0.9)
        else:
            result.add(
                turn.entry_path("education", "degree"),
                expand_degree_abbreviation(message),
                0.85,
            )
    elif turn.asked("school", "university", "college", "institution"):
        result.add(turn.entry_path("education", "schoolName"), message, 0.85)
    elif turn.asked("study", "major", "field", "subject"):
        result.add(turn.entry_path("education", "fieldOfStudy"), message, 0.85)
    elif turn.asked("graduate", "finish", "complete", "year"):
        lower = turn.lower_message
        if "current" in lower or "still" in lower or "studying" in lower:
            result.add(studying_path, True, 0.9)
        else:
            result.add(turn.entry_path("education", "endYear"), message, 0.8)


def _extract_volunteering(turn: _Turn, result: FallbackExtraction) -> None:
    if turn.asked_add_another:
        if turn.answer == "no":
            result.suggested_section = Section.SKILLS
        return

    if turn.asked_gate("volunteer"):
        result.add_flag("hasVolunteering", turn.answer, on_no=Section.SKILLS)
        return

    if turn.answer is not None:
        return

    message = turn.message
    if turn.asked("organization", "where did you volunteer"):
        result.add(turn.entry_path("volunteering", "organizationName"), message, 0.85)
    elif turn.asked("role", "position", "title"):
        result.add(turn.entry_path("volunteering", "role"), message, 0.85)
    elif turn.asked("responsibilit", "what did you do", "duties"):
        result.add(turn.entry_path("volunteering", "responsibilities"), message, 0.85)
    elif turn.asked("when", "date", "time period"):
        result.add(turn.entry_path("volunteering", "startDate"), message, 0.8)


# Question phrases per sub-category: (gate phrases, detail phrases)
_SKILLS_QUESTION_PHRASES: list[tuple[SkillsSubCategory, tuple[str, ...], tuple[str, ...]]] = [
    (
        SkillsSubCategory.TECHNICAL,
        ("technical skill",),
        ("technical skill", "what software", "what tools", "what technologies"),
    ),
    (
        SkillsSubCategory.CERTIFICATIONS,
        ("certification",),
        ("certification", "license"),
    ),
    (
        SkillsSubCategory.LANGUAGES,
        ("speak any languages", "languages you'd like"),
        ("what language", "proficiency", "languages do you speak"),
    ),
    (
        SkillsSubCategory.SOFT_SKILLS,
        ("soft skill", "personal strength"),
        ("soft skill", "strength", "personal qualities"),
    ),
]


def _extract_skills(turn: _Turn, result: FallbackExtraction) -> None:
    for sub_category, gate_phrases, detail_phrases in _SKILLS_QUESTION_PHRASES:
        if turn.asked_gate(*gate_phrases):
            on_no = Section.REFERENCES if sub_category is SkillsSubCategory.SOFT_SKILLS else None
            result.add_flag(SKILLS_FLAG_MAP[sub_category], turn.answer, on_no=on_no)
            return
        if turn.asked(*detail_phrases):
            if turn.answer is not None:
                return
            if sub_category is SkillsSubCategory.LANGUAGES:
                languages = parse_spoken_languages(turn.message)
                if languages:
                    result.add(SKILLS_VALUE_PATHS[sub_category], languages, 0.8)
            else:
                items = split_list(turn.message)
                if items:
                    result.add(SKILLS_VALUE_PATHS[sub_category], items, 0.85)
            return


def _extract_references(turn: _Turn, result: FallbackExtraction) -> None:
    upon_request = "upon request" in turn.lower_message

    if turn.asked_add_another:
        if turn.answer == "no":
            result.suggested_section = Section.REVIEW
        return

    if turn.asked_gate("reference"):
        declined = turn.answer == "no" or upon_request or "available" in turn.lower_message
        if turn.answer == "yes":
            result.add("hasReferences", True, 0.95)
        elif declined:
            result.add("hasReferences", False, 0.95)
            if upon_request or "available" in turn.lower_message:
                result.add("referencesUponRequest", True, 0.9)
            result.suggested_section = Section.REVIEW
        return

    if upon_request:
        result.add("referencesUponRequest", True, 0.9)
        return

    if turn.answer is not None:
        return

    message = turn.message
    if turn.asked("name") and turn.asked("reference"):
        result.add(turn.entry_path("references", "name"), message, 0.85)
    elif turn.asked("title", "position"):
        result.add(turn.entry_path("references", "jobTitle"), message, 0.85)
    elif turn.asked("company", "organization"):
        result.add(turn.entry_path("references", "company"), message, 0.85)
    elif turn.asked("phone", "number"):
        phone = _PHONE.search(message)
        if phone:
            result.add(
                turn.entry_path("references", "phone"),
                format_phone_number(phone.group(0).strip()),
                0.9,
            )
    elif turn.asked("email"):
        email = _EMAIL.search(message)
        if email:
            result.add(turn.entry_path("references", "email"), email.group(0), 0.95)
    elif turn.asked("relationship", "know"):
        result.add(turn.entry_path("references", "relationship"), message, 0.8)


_SECTION_EXTRACTORS = {
    Section.WORK: _extract_work,
    Section.EDUCATION: _extract_education,
    Section.VOLUNTEERING: _extract_volunteering,
    Section.SKILLS: _extract_skills,
    Section.REFERENCES: _extract_references,
}

_PERSONAL_SECTIONS = (Section.LANGUAGE, Section.INTRO, Section.PERSONAL)


def fallback_extract_data(
    user_message: str,
    section: Section | str,
    last_assistant_message: str,
    entry_index: int = 0,
) -> FallbackExtraction:
    """Derive field proposals without the model.

    Args:
        user_message: The user's reply.
        section: Section the reply belongs to.
        last_assistant_message: The question being answered.
        entry_index: Entry of the current multi-entry section that detail
            answers are written to.

    Returns:
        FallbackExtraction. Gate answers yield only their boolean flag
        (plus a suggested section on "no"); bare yes/no replies to detail
        questions yield nothing.
    """
    message = (user_message or "").strip()
    result = FallbackExtraction()
    if not message:
        return result

    try:
        section = Section(section)
    except ValueError:
        return result

    turn = _Turn(
        message=message,
        lower_message=message.lower(),
        question=(last_assistant_message or "").lower(),
        answer=is_yes_no_response(message),
        is_gate=is_gate_question(last_assistant_message or ""),
        entry_index=entry_index,
        asked_add_another=detect_asked_add_another(last_assistant_message or "", section),
    )

    if section is Section.LANGUAGE:
        _extract_language(turn, result)
    if section in _PERSONAL_SECTIONS:
        _extract_personal(turn, result)

    extractor = _SECTION_EXTRACTORS.get(section)
    if extractor is not None:
        extractor(turn, result)
    return result
