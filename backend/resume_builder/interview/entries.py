"""Multi-entry loop for work, education, volunteering and references.

Each entry is collected field by field until the last detail question
(responsibilities, or relationship for references), after which the user
is asked whether to add another entry:

    first detail → … → last detail → add another?
        yes → first detail (entry index + 1)
        no  → next section (canonical transition message)

The section is only left through the "no" edge.
"""

from dataclasses import dataclass

from resume_builder.interview.intents import (
    detect_asked_add_another,
    detect_asked_for_responsibilities,
    detect_provided_responsibilities,
    detect_user_done_with_entries,
    detect_user_wants_another,
)
from resume_builder.interview.sections import (
    MULTI_ENTRY_SECTIONS,
    SECTION_ADVANCE_MAP,
    SECTION_TRANSITION_MESSAGES,
    Section,
)

ADD_ANOTHER_QUESTIONS: dict[Section, str] = {
    Section.WORK: "**Do you have another job you'd like to add? (Yes or No)**",
    Section.EDUCATION: "**Do you have any other education to add? (Yes or No)**",
    Section.VOLUNTEERING: "**Do you have any other volunteer experience? (Yes or No)**",
    Section.REFERENCES: "**Do you have another reference you'd like to add? (Yes or No)**",
}

FIRST_DETAIL_QUESTIONS: dict[Section, str] = {
    Section.WORK: "**What company did you work for?**",
    Section.EDUCATION: "**What school did you attend?**",
    Section.VOLUNTEERING: "**What organization did you volunteer with?**",
    Section.REFERENCES: "**What is your reference's full name?**",
}

RECORDED_PREFIX = "Great! I've recorded that information."


@dataclass
class MultiEntryStep:
    """Forced reply produced by the multi-entry loop.

    Attributes:
        message: Replacement assistant message.
        suggested_section: Next section when the user is done, else None.
        new_entry: The user asked for another entry; the entry index
            advances by one.
    """

    message: str
    suggested_section: Section | None = None
    new_entry: bool = False


def advance_multi_entry(
    section: Section | str,
    last_assistant_message: str,
    user_message: str,
    candidate: str,
) -> MultiEntryStep | None:
    """Apply the loop transitions for one turn.

    Args:
        section: Section the turn belongs to.
        last_assistant_message: The question the user answered.
        user_message: The user's reply.
        candidate: Assistant reply produced so far this turn.

    Returns:
        The forced step, or None when no loop transition applies.
    """
    if section not in MULTI_ENTRY_SECTIONS:
        return None
    section = Section(section)

    asked_add_another = detect_asked_add_another(last_assistant_message, section)

    if asked_add_another:
        if detect_user_wants_another(user_message):
            return MultiEntryStep(f"Great! {FIRST_DETAIL_QUESTIONS[section]}", new_entry=True)
        if detect_user_done_with_entries(user_message):
            return MultiEntryStep(
                SECTION_TRANSITION_MESSAGES[section],
                suggested_section=SECTION_ADVANCE_MAP[section],
            )
        return None

    if detect_asked_for_responsibilities(last_assistant_message) and (
        detect_provided_responsibilities(user_message)
    ):
        if not detect_asked_add_another(candidate, section):
            return MultiEntryStep(f"{RECORDED_PREFIX}\n\n{ADD_ANOTHER_QUESTIONS[section]}")
    return None
