"""Section graph for the resume interview.

The interview walks a fixed category order:

    language → intro → personal → work → education → volunteering →
        → skills → references → review → complete

Five sections are gated by a yes/no question on entry (work, education,
volunteering, skills, references). A "no" at the gate writes the section's
gate flag as False and advances along SECTION_ADVANCE_MAP; the canonical
wording of gate questions and transitions lives here because the response
validator enforces it byte-for-byte.
"""

import re
from enum import Enum

# =============================================================================
# Sections
# =============================================================================


class Section(str, Enum):
    """Interview sections in canonical order."""

    LANGUAGE = "language"
    INTRO = "intro"
    PERSONAL = "personal"
    WORK = "work"
    EDUCATION = "education"
    VOLUNTEERING = "volunteering"
    SKILLS = "skills"
    REFERENCES = "references"
    REVIEW = "review"
    COMPLETE = "complete"


SECTION_ORDER: list[Section] = list(Section)

GATED_SECTIONS: frozenset[Section] = frozenset(
    {
        Section.WORK,
        Section.EDUCATION,
        Section.VOLUNTEERING,
        Section.SKILLS,
        Section.REFERENCES,
    }
)

# Sections whose data is an array of entries looped via "add another?"
MULTI_ENTRY_SECTIONS: frozenset[Section] = frozenset(
    {
        Section.WORK,
        Section.EDUCATION,
        Section.VOLUNTEERING,
        Section.REFERENCES,
    }
)

# Record key holding each multi-entry section's array
SECTION_ARRAY_KEYS: dict[Section, str] = {
    Section.WORK: "workExperience",
    Section.EDUCATION: "education",
    Section.VOLUNTEERING: "volunteering",
    Section.REFERENCES: "references",
}

# Gate flag written when the user answers the section's yes/no question.
# Skills is gated by its first sub-category (technical skills).
SECTION_FLAG_MAP: dict[Section, str] = {
    Section.WORK: "hasWorkExperience",
    Section.EDUCATION: "hasEducation",
    Section.VOLUNTEERING: "hasVolunteering",
    Section.SKILLS: "hasTechnicalSkills",
    Section.REFERENCES: "hasReferences",
}

# Fixed successor taken when the user declines a gated section
SECTION_ADVANCE_MAP: dict[Section, Section] = {
    Section.WORK: Section.EDUCATION,
    Section.EDUCATION: Section.VOLUNTEERING,
    Section.VOLUNTEERING: Section.SKILLS,
    Section.SKILLS: Section.REFERENCES,
    Section.REFERENCES: Section.REVIEW,
}

# =============================================================================
# Canonical Wording
# =============================================================================

REQUIRED_FIRST_MESSAGES: dict[Section, str] = {
    Section.WORK: "**Do you have any work experience you'd like to include? (Yes or No)**",
    Section.EDUCATION: "**Do you have any education you'd like to include? (Yes or No)**",
    Section.VOLUNTEERING: (
        "**Do you have any volunteer experience you'd like to include? (Yes or No)**"
    ),
    Section.SKILLS: (
        "**Do you have any technical skills (software, tools, technologies) "
        "you'd like to highlight? (Yes or No)**"
    ),
    Section.REFERENCES: "**Would you like to add professional references? (Yes or No)**",
}

SECTION_TRANSITION_MESSAGES: dict[Section, str] = {
    Section.WORK: (
        "That's totally fine! Let's move on to your education. "
        + REQUIRED_FIRST_MESSAGES[Section.EDUCATION]
    ),
    Section.EDUCATION: (
        "That's perfectly fine! " + REQUIRED_FIRST_MESSAGES[Section.VOLUNTEERING]
    ),
    Section.VOLUNTEERING: (
        "That's perfectly fine! " + REQUIRED_FIRST_MESSAGES[Section.SKILLS]
    ),
    Section.SKILLS: "No problem! " + REQUIRED_FIRST_MESSAGES[Section.REFERENCES],
    Section.REFERENCES: "That's fine! Let me review what we have so far.",
}

EXPORT_READY_MESSAGE = (
    "Your resume is ready! Click the 'View & Download Resume' button below "
    "to preview and download it."
)

# =============================================================================
# Navigation
# =============================================================================


def get_next_section(
    current: Section | str,
    has_work_experience: bool | None = None,
    has_volunteering: bool | None = None,
    has_references: bool | None = None,
) -> Section:
    """Get the section after ``current`` in canonical order.

    Sections whose gate flag is explicitly False are skipped. Unset flags
    (None) do not skip: the section still has to ask its gate question.

    Args:
        current: Current section.
        has_work_experience: Work gate flag from the record.
        has_volunteering: Volunteering gate flag from the record.
        has_references: References gate flag from the record.

    Returns:
        The next section, or COMPLETE after the last one or for an
        unknown section.
    """
    try:
        index = SECTION_ORDER.index(Section(current))
    except ValueError:
        return Section.COMPLETE

    skipped = {
        Section.WORK: has_work_experience is False,
        Section.VOLUNTEERING: has_volunteering is False,
        Section.REFERENCES: has_references is False,
    }
    for candidate in SECTION_ORDER[index + 1 :]:
        if not skipped.get(candidate, False):
            return candidate
    return Section.COMPLETE


def should_ask_follow_up(
    section: Section | str,
    follow_up_count: int,
    max_follow_ups: int = 3,
    max_multi_entry_follow_ups: int = 5,
) -> bool:
    """Check whether another follow-up question is allowed in ``section``.

    Work and education collect several fields per entry, so they get the
    larger limit.
    """
    if section in (Section.WORK, Section.EDUCATION):
        return follow_up_count < max_multi_entry_follow_ups
    return follow_up_count < max_follow_ups


# =============================================================================
# Section Detection
# =============================================================================

# Ordered: the first section whose phrase appears in the assistant's last
# message wins. References come first because reference questions also ask
# about a company or organization; volunteering comes before work because
# volunteer questions also mention "role" and "responsibilities".
_SECTION_MARKERS: list[tuple[Section, tuple[str, ...]]] = [
    (
        Section.REFERENCES,
        (
            "add professional references",
            "another reference",
            "other reference",
            "reference's",
            "reference name",
            "reference contact",
            "your reference",
            "do they work",
            "their job title",
            "their phone",
            "their email",
            "relationship to you",
        ),
    ),
    (
        Section.VOLUNTEERING,
        (
            "volunteer experience",
            "do you have any volunteer",
            "include any volunteer",
            "what organization",
            "volunteer role",
            "another volunteer",
            "other volunteer",
            "as a volunteer",
        ),
    ),
    (
        Section.EDUCATION,
        (
            "do you have any education",
            "include any education",
            "what school",
            "what degree",
            "field of study",
            "another school",
            "other education",
            "still studying",
        ),
    ),
    (
        Section.WORK,
        (
            "do you have any work experience",
            "include any work experience",
            "what company",
            "the company",
            "company you work",
            "job title",
            "when did you start",
            "is this your current",
            "current job",
            "still work",
            "another job",
            "other jobs",
            "other job",
            "other work experience",
        ),
    ),
    (
        Section.SKILLS,
        (
            "technical skills",
            "software you'd like to highlight",
            "certifications or licenses",
            "certifications",
            "speak any languages",
            "languages you'd like to include",
            "what languages do you speak",
            "soft skills",
            "personal strengths",
        ),
    ),
]

_VOLUNTEER_DETAIL = re.compile(r"volunteer.*(what did you do|responsibilit|role)", re.DOTALL)
_JOB_DETAIL = re.compile(r"(job|work).*responsibilit", re.DOTALL)


def detect_section_from_message(message: str) -> Section | None:
    """Infer which section an assistant message belongs to.

    The web client's notion of the current section can lag behind the
    conversation (the model may already have moved on), so the orchestrator
    trusts the last question actually asked.

    Args:
        message: The assistant's last message.

    Returns:
        The section the message is asking about, or None if unclear.
    """
    lower = message.lower()
    if _VOLUNTEER_DETAIL.search(lower):
        return Section.VOLUNTEERING
    for section, markers in _SECTION_MARKERS:
        if any(marker in lower for marker in markers):
            return section
    if _JOB_DETAIL.search(lower):
        return Section.WORK
    return None


def resolve_answering_section(
    last_message: str,
    current: Section | str,
    follow_up_count: int,
) -> Section:
    """Decide which section the user's reply is answering.

    Detail questions inside a multi-entry loop often mention words that
    belong to another section (a reference's company, a volunteer's role).
    While a loop is in progress the current section is kept unless the
    message carries another section's gate question or transition.

    Args:
        last_message: The assistant's last message.
        current: The section the session is in.
        follow_up_count: Follow-ups already asked in the current section.

    Returns:
        The section the reply belongs to.
    """
    current = Section(current)
    detected = detect_section_from_message(last_message)
    if detected is None or detected is current:
        return current
    if current in MULTI_ENTRY_SECTIONS and follow_up_count > 0:
        plain = _plain(last_message)
        canonical = (*REQUIRED_FIRST_MESSAGES.values(), *SECTION_TRANSITION_MESSAGES.values())
        if not any(_plain(text) in plain for text in canonical):
            return current
    return detected


def _plain(text: str) -> str:
    return text.replace("**", "").lower()
