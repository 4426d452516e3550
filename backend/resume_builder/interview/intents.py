"""Intent classifiers for interview turns.

Every classifier is a pure function of one message. The phrase lists are
kept in a single declarative table (INTENT_RULES) of
``{id, category, patterns}`` rows evaluated by one matcher, so each
category can be unit-tested on its own and extended without touching
control flow.

Only ``is_gate_question`` and the "asked ..." helpers inspect the
assistant's last message; everything else classifies the user's reply.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Literal

from resume_builder.interview.sections import GATED_SECTIONS, Section

YesNo = Literal["yes", "no"]

# =============================================================================
# Rule Table
# =============================================================================


class IntentCategory(str, Enum):
    """Categories of the rule table."""

    YES = "yes"
    NO = "no"
    SECTION_YES = "section_yes"
    SECTION_NO = "section_no"
    ESCAPE = "escape"
    FRUSTRATION = "frustration"
    NO_EMAIL = "no_email"
    NO_WORK_EXPERIENCE = "no_work_experience"
    EXPORT = "export"
    CURRENT_JOB = "current_job"
    GATE_QUESTION = "gate_question"
    WANTS_ANOTHER = "wants_another"
    DONE_WITH_ENTRIES = "done_with_entries"
    SELECTED_SUGGESTIONS = "selected_suggestions"
    ASKED_RESPONSIBILITIES = "asked_responsibilities"


@dataclass(frozen=True)
class IntentRule:
    """One row of the rule table.

    Attributes:
        id: Stable identifier, reported by ``match_intents``.
        category: Category the rule votes for.
        patterns: Regexes searched case-insensitively; any hit matches.
    """

    id: str
    category: IntentCategory
    patterns: tuple[re.Pattern[str], ...]


def _rule(rule_id: str, category: IntentCategory, *patterns: str) -> IntentRule:
    return IntentRule(
        id=rule_id,
        category=category,
        patterns=tuple(re.compile(p, re.IGNORECASE) for p in patterns),
    )


INTENT_RULES: list[IntentRule] = [
    # Bare yes/no replies. Anchored so content answers never match.
    _rule(
        "yes_reply",
        IntentCategory.YES,
        r"^(yes|yeah|yep|yup|sure|definitely|absolutely|i do|i have|y|ok|okay)$",
    ),
    _rule(
        "no_reply",
        IntentCategory.NO,
        r"^(no|nope|nah|none|nothing|skip|n/a|n|not really)$",
    ),
    # Section-level assent/denial phrasings beyond the bare words
    _rule(
        "section_yes",
        IntentCategory.SECTION_YES,
        r"^of course$",
        r"^yes,?\s*(i do|i have|please)$",
    ),
    _rule(
        "section_no",
        IntentCategory.SECTION_NO,
        r"^no,?\s*(thanks|thank you)$",
        r"^i (don'?t|do not|dont) have (any|that)",
        r"^i have no\b",
    ),
    _rule(
        "escape",
        IntentCategory.ESCAPE,
        r"move on",
        r"\bskip( this)?\b",
        r"\bnext( question)?\b",
        r"that'?s (enough|all|it)",
        r"let'?s continue",
        r"nothing (else|more)",
        r"\bno more\b",
        r"i'?m done( with this)?",
        r"can we move",
    ),
    _rule(
        "frustration",
        IntentCategory.FRUSTRATION,
        r"i (already|just) (said|told)",
        r"why (are you|do you keep) asking",
        r"stop asking",
        r"this is (taking|too)",
        r"i don'?t (know|understand)",
        r"can'?t (you|we) just",
        r"forget it",
        r"never ?mind",
    ),
    _rule(
        "no_email",
        IntentCategory.NO_EMAIL,
        r"don'?t have (an? )?email",
        r"no email",
        r"i need (to )?(get|create|make) (an? )?email",
        r"don'?t (have|use) email",
        r"what'?s (an )?email",
        r"how do i (get|make|create) (an )?email",
        r"i'?m not sure (how|what) email",
        r"never had (an )?email",
    ),
    _rule(
        "no_work_experience",
        IntentCategory.NO_WORK_EXPERIENCE,
        r"no work experience",
        r"(this is|it'?s) my first job",
        r"never (had a |worked)",
        r"just (graduated|finished school)",
        r"looking for (my )?first",
        r"haven'?t worked (before|yet)",
    ),
    _rule(
        "export",
        IntentCategory.EXPORT,
        r"\bpdf\b",
        r"download",
        r"export",
        r"generate.*resume",
        r"create.*resume",
        r"ready to (download|export|generate)",
        r"get my resume",
        r"\bfinish(ed)?\b",
        r"\bdone\b",
        r"\bword\b",
        r"\bdocx?\b",
    ),
    _rule(
        "current_job",
        IntentCategory.CURRENT_JOB,
        r"\bcurrent",
        r"\bpresent\b",
        r"\bstill\b",
        r"\byes\b",
        r"\bi am\b",
        r"\bi'?m still\b",
    ),
    # Evaluated against the assistant's last message with markdown removed
    _rule(
        "gate_question",
        IntentCategory.GATE_QUESTION,
        r"\(yes or no\)",
        r"yes or no\?",
        r"do you have any .+\?$",
        r"do you have another .+\?$",
        r"would you like to .+\?$",
        r"is this your current (job|position)\?",
        r"are you still (working|studying|there)\b",
        r"are you still .+\?$",
        r"do you speak any languages",
    ),
    _rule(
        "wants_another",
        IntentCategory.WANTS_ANOTHER,
        r"^(yes|yeah|yep|yup|sure|definitely|i do|one more|another)$",
    ),
    _rule(
        "done_with_entries",
        IntentCategory.DONE_WITH_ENTRIES,
        r"^(no|nope|nah|none|that'?s (it|all)|i'?m done|no more|nothing)$",
    ),
    _rule(
        "selected_suggestions",
        IntentCategory.SELECTED_SUGGESTIONS,
        r"use\s+(\d+|all|some|those|these|them)",
        r"^(perfect|great|good|fine|those work|those are good)",
        r"i('ll| will)?\s*(take|pick|use|go with)",
    ),
    _rule(
        "asked_responsibilities",
        IntentCategory.ASKED_RESPONSIBILITIES,
        r"responsibilit",
        r"duties",
        r"what did you do",
        r"would you like to use these",
        r"use these or modify",
        r"modify them",
        r"would you like these",
        r"from this list",
        r"include any specific",
        r"want to add more",
        # Last detail field of a reference entry
        r"relationship",
    ),
]

_RULES_BY_CATEGORY: dict[IntentCategory, list[IntentRule]] = {}
for _r in INTENT_RULES:
    _RULES_BY_CATEGORY.setdefault(_r.category, []).append(_r)


def normalize_reply(text: str) -> str:
    """Trim, lowercase and drop one trailing period or exclamation mark."""
    normalized = (text or "").strip().lower()
    if normalized.endswith((".", "!")):
        normalized = normalized[:-1].rstrip()
    return normalized


def match_intents(text: str, category: IntentCategory) -> list[str]:
    """Return the ids of every rule in ``category`` that matches ``text``.

    Args:
        text: Message to classify (already normalized if the category's
            patterns are anchored).
        category: Rule category to evaluate.

    Returns:
        Matching rule ids, in table order.
    """
    return [
        rule.id
        for rule in _RULES_BY_CATEGORY.get(category, [])
        if any(pattern.search(text) for pattern in rule.patterns)
    ]


def matches(text: str, category: IntentCategory) -> bool:
    """Check whether any rule of ``category`` matches ``text``."""
    return bool(match_intents(text, category))


# =============================================================================
# User Reply Classifiers
# =============================================================================


def is_yes_no_response(text: str) -> YesNo | None:
    """Classify a bare yes/no reply.

    Only whole-message matches count: "Yes Bank" or "None of your business
    school" are content, not answers.

    Args:
        text: User reply.

    Returns:
        "yes", "no", or None for anything else.
    """
    normalized = normalize_reply(text)
    if matches(normalized, IntentCategory.YES):
        return "yes"
    if matches(normalized, IntentCategory.NO):
        return "no"
    return None


def detect_escape_phrase(text: str) -> bool:
    """User wants to move on ("skip", "that's enough", "move on")."""
    return matches(text, IntentCategory.ESCAPE)


def detect_frustration(text: str) -> bool:
    """User sounds frustrated ("I already said that", "stop asking")."""
    return matches(text, IntentCategory.FRUSTRATION)


def detect_no_email(text: str) -> bool:
    """User has no email address or needs help making one."""
    return matches(text, IntentCategory.NO_EMAIL)


def detect_no_work_experience(text: str) -> bool:
    """User says this is their first job or they never worked."""
    return matches(text, IntentCategory.NO_WORK_EXPERIENCE)


def detect_export_intent(text: str) -> bool:
    """User asks to download or finish the resume."""
    return matches(text, IntentCategory.EXPORT)


def is_current_job_response(text: str) -> bool:
    """Reply to "is this your current job?" / "when did you leave?" means still there."""
    return matches(text, IntentCategory.CURRENT_JOB)


def detect_user_wants_another(text: str) -> bool:
    """Reply to an add-another question asks for one more entry."""
    return matches(normalize_reply(text), IntentCategory.WANTS_ANOTHER)


def detect_user_done_with_entries(text: str) -> bool:
    """Reply to an add-another question closes the section."""
    return matches(normalize_reply(text), IntentCategory.DONE_WITH_ENTRIES)


def detect_provided_responsibilities(text: str) -> bool:
    """User answered a responsibilities question with content or a selection.

    A selection of suggested items ("use 1 and 3", "those work") counts, as
    does any reply longer than 15 characters that is not a bare yes/no.
    """
    normalized = normalize_reply(text)
    if matches(normalized, IntentCategory.SELECTED_SUGGESTIONS):
        return True
    return len(normalized) > 15 and is_yes_no_response(normalized) is None


def detect_user_said_no_to_section(
    text: str,
    section: Section | str | None,
    follow_up_count: int,
) -> bool:
    """Check whether the user declined a gated section at its gate.

    Only the first turn of a gated section counts. A "no" later in the
    section ("no middle name") must never be taken as a section denial.

    Args:
        text: User reply.
        section: Section the gate question belonged to.
        follow_up_count: Turns already spent in that section.

    Returns:
        True if this is a section-level "no".
    """
    if follow_up_count != 0 or section not in GATED_SECTIONS:
        return False
    normalized = normalize_reply(text)
    return is_yes_no_response(normalized) == "no" or matches(
        normalized, IntentCategory.SECTION_NO
    )


def detect_user_said_yes_to_section(
    text: str,
    section: Section | str | None,
    follow_up_count: int,
) -> bool:
    """Check whether the user accepted a gated section at its gate."""
    if follow_up_count != 0 or section not in GATED_SECTIONS:
        return False
    normalized = normalize_reply(text)
    return is_yes_no_response(normalized) == "yes" or matches(
        normalized, IntentCategory.SECTION_YES
    )


# =============================================================================
# Assistant Message Classifiers
# =============================================================================


def _strip_markdown(message: str) -> str:
    return re.sub(r"[*_`]", "", message or "").strip()


def is_gate_question(last_assistant_message: str) -> bool:
    """Check whether the assistant's last message was a yes/no gate question.

    True for an explicit "(Yes or No)" / "yes or no?" marker, or for the
    structural templates "Do you have any …?", "Would you like to …?",
    "Is this your current …?" and "Are you still …?". Detail questions
    such as "What company did you work for?" are not gates.
    """
    text = _strip_markdown(last_assistant_message)
    if not text:
        return False
    return any(
        pattern.search(line)
        for line in text.splitlines()
        for rule in _RULES_BY_CATEGORY[IntentCategory.GATE_QUESTION]
        for pattern in rule.patterns
    )


def detect_asked_for_responsibilities(last_assistant_message: str) -> bool:
    """Assistant asked for the last detail field of an entry."""
    return matches(last_assistant_message or "", IntentCategory.ASKED_RESPONSIBILITIES)


_ADD_ANOTHER_MARKERS: dict[Section, tuple[str, ...]] = {
    Section.WORK: (
        "another job",
        "other job",
        "other work experience",
        "another work experience",
        "more work experience",
    ),
    Section.EDUCATION: (
        "other education",
        "another school",
        "another degree",
        "more education",
    ),
    Section.VOLUNTEERING: (
        "other volunteer",
        "another volunteer",
        "more volunteer",
    ),
    Section.REFERENCES: (
        "another reference",
        "other reference",
        "more reference",
    ),
}


def detect_asked_add_another(
    last_assistant_message: str, section: Section | str | None
) -> bool:
    """Assistant asked whether to add another entry to ``section``."""
    markers = _ADD_ANOTHER_MARKERS.get(section, ())  # type: ignore[call-overload]
    lower = (last_assistant_message or "").lower()
    return any(marker in lower for marker in markers)
