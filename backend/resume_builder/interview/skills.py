"""Skills sub-category chain.

The skills section asks four gated sub-categories in a fixed order:

    technical → certifications → languages → soft skills → (references)

Each sub-category has a gate question ("... (Yes or No)") and, on yes, a
detail question. A "no" at any gate only advances the chain; the skills
section is left only after the soft-skills step.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from resume_builder.interview.intents import is_yes_no_response
from resume_builder.interview.sections import REQUIRED_FIRST_MESSAGES, Section

SkillsAnswer = Literal["yes", "no", "details"]


class SkillsSubCategory(str, Enum):
    """Sub-categories of the skills section, plus the DONE sentinel."""

    TECHNICAL = "technical"
    CERTIFICATIONS = "certifications"
    LANGUAGES = "languages"
    SOFT_SKILLS = "softSkills"
    DONE = "done"


class SkillsPhase(str, Enum):
    """Which question of a sub-category was asked."""

    GATE = "gate"
    DETAIL = "detail"


SKILLS_SUB_CATEGORY_ORDER: list[SkillsSubCategory] = [
    SkillsSubCategory.TECHNICAL,
    SkillsSubCategory.CERTIFICATIONS,
    SkillsSubCategory.LANGUAGES,
    SkillsSubCategory.SOFT_SKILLS,
]

SKILLS_SUB_CATEGORY_QUESTIONS: dict[SkillsSubCategory, str] = {
    SkillsSubCategory.TECHNICAL: REQUIRED_FIRST_MESSAGES[Section.SKILLS],
    SkillsSubCategory.CERTIFICATIONS: (
        "**Do you have any certifications or licenses? (Yes or No)**"
    ),
    SkillsSubCategory.LANGUAGES: (
        "**Do you speak any languages you'd like to include on your resume? (Yes or No)**"
    ),
    SkillsSubCategory.SOFT_SKILLS: "**Would you like to highlight any soft skills? (Yes or No)**",
}

SKILLS_DETAIL_QUESTIONS: dict[SkillsSubCategory, str] = {
    SkillsSubCategory.TECHNICAL: (
        "**What technical skills do you have?** "
        "(List them separated by commas, e.g., Excel, Python, Adobe Photoshop)"
    ),
    SkillsSubCategory.CERTIFICATIONS: (
        "**What certifications or licenses do you have?** (List them separated by commas)"
    ),
    SkillsSubCategory.LANGUAGES: (
        "**What languages do you speak?** (List them with proficiency, e.g., Spanish - fluent)"
    ),
    SkillsSubCategory.SOFT_SKILLS: (
        "**What soft skills would you like to highlight?** "
        "(e.g., leadership, teamwork, communication)"
    ),
}

# Gate flag written when the user answers a sub-category gate
SKILLS_FLAG_MAP: dict[SkillsSubCategory, str] = {
    SkillsSubCategory.TECHNICAL: "hasTechnicalSkills",
    SkillsSubCategory.CERTIFICATIONS: "hasCertifications",
    SkillsSubCategory.LANGUAGES: "hasLanguages",
    SkillsSubCategory.SOFT_SKILLS: "hasSoftSkills",
}

# Record path holding each sub-category's list
SKILLS_VALUE_PATHS: dict[SkillsSubCategory, str] = {
    SkillsSubCategory.TECHNICAL: "skills.technicalSkills",
    SkillsSubCategory.CERTIFICATIONS: "skills.certifications",
    SkillsSubCategory.LANGUAGES: "skills.languages",
    SkillsSubCategory.SOFT_SKILLS: "skills.softSkills",
}

_SUB_CATEGORY_MARKERS: list[tuple[SkillsSubCategory, tuple[str, ...]]] = [
    (SkillsSubCategory.TECHNICAL, ("technical skills", "software you'd like to highlight")),
    (SkillsSubCategory.CERTIFICATIONS, ("certifications or licenses", "certifications")),
    (
        SkillsSubCategory.LANGUAGES,
        (
            "languages you'd like to include",
            "speak any languages",
            "what languages do you speak",
        ),
    ),
    (SkillsSubCategory.SOFT_SKILLS, ("soft skills", "highlight any soft skills")),
]

_DETAIL_MARKERS = (
    "what technical skills",
    "what certifications",
    "what languages do you speak",
    "what soft skills",
)

_PROFICIENCY = re.compile(r"(native|fluent|advanced|intermediate|basic|beginner)", re.IGNORECASE)
_PROFICIENCY_STRIP = re.compile(
    r"(native|fluent|advanced|intermediate|basic|beginner|\(|\)|-)", re.IGNORECASE
)


# =============================================================================
# Detection
# =============================================================================


def detect_skills_sub_category(last_assistant_message: str) -> SkillsSubCategory | None:
    """Find which sub-category the assistant's last message asked about."""
    lower = (last_assistant_message or "").lower()
    for sub_category, markers in _SUB_CATEGORY_MARKERS:
        if any(marker in lower for marker in markers):
            return sub_category
    return None


def detect_skills_question_phase(last_assistant_message: str) -> SkillsPhase | None:
    """Tell a sub-category gate question from its detail question."""
    lower = (last_assistant_message or "").lower()
    if "(yes or no)" in lower:
        return SkillsPhase.GATE
    if any(marker in lower for marker in _DETAIL_MARKERS):
        return SkillsPhase.DETAIL
    return None


def detect_skills_sub_category_answer(user_message: str) -> SkillsAnswer | None:
    """Classify a reply inside the skills chain.

    Returns:
        "yes" or "no" for bare answers, "details" for any other reply
        longer than five characters, else None.
    """
    answer = is_yes_no_response(user_message or "")
    if answer is not None:
        return answer
    trimmed = (user_message or "").strip()
    if len(trimmed) > 5:
        return "details"
    return None


def get_next_skills_sub_category(current: SkillsSubCategory) -> SkillsSubCategory:
    """Sub-category after ``current``; DONE after soft skills."""
    try:
        index = SKILLS_SUB_CATEGORY_ORDER.index(current)
    except ValueError:
        return SkillsSubCategory.DONE
    if index + 1 >= len(SKILLS_SUB_CATEGORY_ORDER):
        return SkillsSubCategory.DONE
    return SKILLS_SUB_CATEGORY_ORDER[index + 1]


# =============================================================================
# Chain Enforcement
# =============================================================================


@dataclass
class SkillsStep:
    """Forced reply produced by the skills chain for one turn.

    Attributes:
        message: Replacement assistant message.
        suggested_section: Section to move to, or None to stay in skills.
    """

    message: str
    suggested_section: Section | None = None


def advance_skills_chain(last_assistant_message: str, user_message: str) -> SkillsStep | None:
    """Compute the next chain question after the user's reply.

    Args:
        last_assistant_message: The question the user is answering.
        user_message: The user's reply.

    Returns:
        The forced next step, or None when the last message was not a
        recognizable skills question or a gate reply is neither yes nor no.
    """
    sub_category = detect_skills_sub_category(last_assistant_message)
    phase = detect_skills_question_phase(last_assistant_message)
    if sub_category is None or phase is None:
        return None

    references_gate = REQUIRED_FIRST_MESSAGES[Section.REFERENCES]
    following = get_next_skills_sub_category(sub_category)

    if phase is SkillsPhase.GATE:
        answer = detect_skills_sub_category_answer(user_message)
        if answer == "yes":
            return SkillsStep(f"Great! {SKILLS_DETAIL_QUESTIONS[sub_category]}")
        if answer == "no":
            if following is SkillsSubCategory.DONE:
                return SkillsStep(f"No problem! {references_gate}", Section.REFERENCES)
            return SkillsStep(f"No problem! {SKILLS_SUB_CATEGORY_QUESTIONS[following]}")
        # Content typed straight at a gate is left to the model
        return None

    # Any reply to a detail question closes the sub-category
    if following is SkillsSubCategory.DONE:
        return SkillsStep(f"Great! {references_gate}", Section.REFERENCES)
    return SkillsStep(
        f"Great, I've recorded those! {SKILLS_SUB_CATEGORY_QUESTIONS[following]}"
    )


# =============================================================================
# Value Parsing
# =============================================================================


def split_list(text: str) -> list[str]:
    """Split a comma/semicolon separated answer into trimmed items."""
    return [item.strip() for item in re.split(r"[,;]", text or "") if item.strip()]


def parse_spoken_languages(text: str, default_proficiency: str = "Fluent") -> list[dict[str, Any]]:
    """Parse "Spanish - fluent, English (native)" into language entries.

    Args:
        text: Comma-separated languages with optional proficiency words.
        default_proficiency: Used when an item names no proficiency.

    Returns:
        ``[{"language": ..., "proficiency": ...}]``; items that are only a
        proficiency word are dropped.
    """
    languages = []
    for item in split_list(text):
        match = _PROFICIENCY.search(item)
        proficiency = match.group(1) if match else default_proficiency
        language = " ".join(_PROFICIENCY_STRIP.sub("", item).split())
        if language:
            languages.append({"language": language, "proficiency": proficiency})
    return languages
