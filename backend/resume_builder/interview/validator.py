"""Response validator.

Checks a candidate assistant message against the interview protocol and
substitutes the canonical message when a rule is broken. Rules, first
violation wins:

1. First message in a gated section must contain the section's exact
   yes/no question, with at most a short lead-in.
2. After a section-level "no", the reply may only acknowledge and
   transition; it must not ask another free-form question.

Follow-up turns (count > 0) pass through unchecked.
"""

import re
from dataclasses import dataclass

from resume_builder.interview.sections import (
    REQUIRED_FIRST_MESSAGES,
    SECTION_TRANSITION_MESSAGES,
    Section,
)

MAX_LEAD_IN_LENGTH = 50

_ALLOWED_TRANSITION_QUESTIONS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"would you like to keep",
        r"did you mean",
        r"\(Yes or No\)",
        r"Yes or No",
    )
)


@dataclass
class ValidationResult:
    """Validation outcome.

    Attributes:
        is_valid: Whether the candidate obeys the protocol.
        violation: Description of the broken rule.
        corrected_response: Full replacement text when invalid.
    """

    is_valid: bool
    violation: str | None = None
    corrected_response: str | None = None


def _section_key(section: Section | str) -> Section | None:
    try:
        return Section(section)
    except ValueError:
        return None


def validate_ai_response(
    candidate: str,
    section: Section | str,
    follow_up_count: int,
    user_said_no: bool,
    user_said_yes: bool = False,
) -> ValidationResult:
    """Validate a model reply for the current section and turn.

    Args:
        candidate: Assistant text with the data block already removed.
        section: Section the turn belongs to.
        follow_up_count: Turns already spent in the section.
        user_said_no: The user declined the section at its gate.
        user_said_yes: The user accepted the section at its gate.

    Returns:
        ValidationResult.
    """
    key = _section_key(section)
    required = REQUIRED_FIRST_MESSAGES.get(key) if key else None
    transition = SECTION_TRANSITION_MESSAGES.get(key) if key else None

    if follow_up_count == 0 and required:
        if user_said_no:
            other_questions = [
                question
                for other, question in REQUIRED_FIRST_MESSAGES.items()
                if other is not key
            ]
            if any(question in candidate for question in other_questions):
                return ValidationResult(
                    is_valid=False,
                    violation=(
                        "When user says no, only acknowledge and transition. "
                        "Don't ask next section's question in same message."
                    ),
                    corrected_response=transition,
                )
            return ValidationResult(is_valid=True)

        if user_said_yes:
            return ValidationResult(is_valid=True)

        if required not in candidate:
            return ValidationResult(
                is_valid=False,
                violation=f"First message in {key.value} must contain the yes/no question",
                corrected_response=required,
            )

        lead_in = candidate[: candidate.index(required)].strip()
        if len(lead_in) > MAX_LEAD_IN_LENGTH:
            return ValidationResult(
                is_valid=False,
                violation=f"Too much intro text before the yes/no question in {key.value}",
                corrected_response=required,
            )

    if user_said_no and transition:
        has_question = "?" in candidate
        allowed = any(pattern.search(candidate) for pattern in _ALLOWED_TRANSITION_QUESTIONS)
        if has_question and not allowed:
            return ValidationResult(
                is_valid=False,
                violation=(
                    "Transition response should only ask the next section's yes/no "
                    f"question. User said no to {key.value}."
                ),
                corrected_response=transition,
            )

    return ValidationResult(is_valid=True)
