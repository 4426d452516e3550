"""Guided-mode question catalog.

An ordered, immutable list of question definitions. Each definition names
the record field its answer fills and a skip predicate over the partial
record; guided mode walks the list forward, skipping questions whose
predicate holds.

Multi-entry questions address entry 0 (``workExperience[0].companyName``);
the guided engine rewrites the index to the entry being collected.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final, Literal

from resume_builder.interview.prompts import SUPPORTED_LANGUAGES
from resume_builder.interview.sections import Section

SkipPredicate = Callable[[dict[str, Any]], bool]

SECTION_COMPLETE: Final = "section-complete"
SectionComplete = Literal["section-complete"]


class InputKind(str, Enum):
    """How the client should collect an answer."""

    TEXT = "text"
    EMAIL = "email"
    PHONE = "phone"
    CONFIRM = "confirm"
    SELECT = "select"
    TEXTAREA = "textarea"


@dataclass(frozen=True)
class QuestionDefinition:
    """One guided-mode question.

    Attributes:
        id: Stable question id.
        category: Section the question belongs to.
        text: Question shown to the user.
        field_path: Record path the answer is stored at.
        input_kind: Input widget kind.
        is_required: Whether an answer is expected.
        skip: Predicate over the record; True skips the question.
        options: Choices for select questions.
        placeholder: Example answer.
    """

    id: str
    category: Section
    text: str
    field_path: str
    input_kind: InputKind = InputKind.TEXT
    is_required: bool = True
    skip: SkipPredicate | None = None
    options: tuple[str, ...] = ()
    placeholder: str | None = None

    def should_skip(self, record: dict[str, Any]) -> bool:
        return self.skip is not None and self.skip(record)


@dataclass(frozen=True)
class AddMoreTarget:
    """Where an "add another?" question loops back to."""

    first_question_id: str
    section: Section


# =============================================================================
# Skip Predicates
# =============================================================================


def _flag_is_false(flag: str) -> SkipPredicate:
    return lambda record: record.get(flag) is False


def _last_entry(record: dict[str, Any], array_key: str) -> dict[str, Any]:
    entries = record.get(array_key)
    if isinstance(entries, list) and entries and isinstance(entries[-1], dict):
        return entries[-1]
    return {}


def _no_work(record: dict[str, Any]) -> bool:
    return record.get("hasWorkExperience") is False


def _still_at_job(record: dict[str, Any]) -> bool:
    return _no_work(record) or _last_entry(record, "workExperience").get("isCurrentJob") is True


def _still_studying(record: dict[str, Any]) -> bool:
    return _last_entry(record, "education").get("isCurrentlyStudying") is True


def _no_volunteering(record: dict[str, Any]) -> bool:
    return record.get("hasVolunteering") is False


def _no_reference_details(record: dict[str, Any]) -> bool:
    return record.get("hasReferences") is False or record.get("referencesUponRequest") is True


# =============================================================================
# Catalog
# =============================================================================

_LANGUAGE_PROMPT = (
    "**What language would you like to use?**\n\n"
    "English | Espanol | Francais | Deutsch | Portugues\n"
    "中文 | 日本語 | 한국어 | العربية | हिन्दी\n\n"
    "Just type your preferred language!"
)

TEMPLATE_STYLES = ("classic", "modern", "professional")

QUESTIONS: tuple[QuestionDefinition, ...] = (
    # Language
    QuestionDefinition(
        "language_select",
        Section.LANGUAGE,
        _LANGUAGE_PROMPT,
        "language",
        InputKind.SELECT,
        options=tuple(SUPPORTED_LANGUAGES.values()),
    ),
    # Introduction
    QuestionDefinition(
        "intro_welcome",
        Section.INTRO,
        "Hello! I'm here to help you create a professional resume. I'll ask you some "
        "questions one at a time, and I'll help make your experience sound great to "
        "employers. Let's start with some basic information about you. Ready to begin?",
        "ready",
        InputKind.CONFIRM,
    ),
    # Personal information
    QuestionDefinition(
        "personal_name",
        Section.PERSONAL,
        "What is your full name? (This will appear at the top of your resume)",
        "personalInfo.fullName",
        placeholder="e.g., John Smith",
    ),
    QuestionDefinition(
        "personal_email",
        Section.PERSONAL,
        "What is your email address? (Employers will use this to contact you)",
        "personalInfo.email",
        InputKind.EMAIL,
        placeholder="e.g., john.smith@email.com",
    ),
    QuestionDefinition(
        "personal_phone",
        Section.PERSONAL,
        "What is your phone number?",
        "personalInfo.phone",
        InputKind.PHONE,
        placeholder="e.g., (555) 123-4567",
    ),
    QuestionDefinition(
        "personal_city",
        Section.PERSONAL,
        "What city do you live in? (You can skip your full address for privacy)",
        "personalInfo.city",
        is_required=False,
        placeholder="e.g., New York, NY",
    ),
    QuestionDefinition(
        "personal_zipcode",
        Section.PERSONAL,
        "What is your zip code? (Optional - some employers like to know your general area)",
        "personalInfo.zipCode",
        is_required=False,
        placeholder="e.g., 10001",
    ),
    # Work experience
    QuestionDefinition(
        "work_has_experience",
        Section.WORK,
        "Do you have any work experience you'd like to include? "
        "(This can include part-time jobs, internships, or freelance work)",
        "hasWorkExperience",
        InputKind.CONFIRM,
    ),
    QuestionDefinition(
        "work_company_1",
        Section.WORK,
        "Great! Let's start with your most recent job. "
        "What company or organization did you work for?",
        "workExperience[0].companyName",
        skip=_no_work,
        placeholder="e.g., ABC Company",
    ),
    QuestionDefinition(
        "work_title_1",
        Section.WORK,
        "What was your job title at this company?",
        "workExperience[0].jobTitle",
        skip=_no_work,
        placeholder="e.g., Sales Associate, Customer Service Rep",
    ),
    QuestionDefinition(
        "work_location_1",
        Section.WORK,
        "Where was this job located? (City, State or Country)",
        "workExperience[0].location",
        skip=_no_work,
        placeholder="e.g., Chicago, IL",
    ),
    QuestionDefinition(
        "work_start_1",
        Section.WORK,
        "When did you start this job? (Month and year)",
        "workExperience[0].startDate",
        skip=_no_work,
        placeholder="e.g., January 2022 or 01/2022",
    ),
    QuestionDefinition(
        "work_current_1",
        Section.WORK,
        "Do you still work here?",
        "workExperience[0].isCurrentJob",
        InputKind.CONFIRM,
        skip=_no_work,
    ),
    QuestionDefinition(
        "work_end_1",
        Section.WORK,
        "When did you leave this job? (Month and year)",
        "workExperience[0].endDate",
        skip=_still_at_job,
        placeholder="e.g., December 2023 or 12/2023",
    ),
    QuestionDefinition(
        "work_responsibilities_1",
        Section.WORK,
        "Describe **2-3 key responsibilities** at this job. Try to include:\n\n"
        "• What you did (your main tasks)\n"
        "• How you did it (tools, methods, or skills used)\n"
        "• Results achieved (numbers, improvements, or outcomes if possible)\n\n"
        "Don't worry about making it sound perfect - I'll help polish it!",
        "workExperience[0].responsibilities",
        InputKind.TEXTAREA,
        skip=_no_work,
    ),
    QuestionDefinition(
        "work_add_more",
        Section.WORK,
        "Would you like to add another job? "
        "(It's recommended to add at least 2-3 jobs if you have them)",
        "addMoreWork",
        InputKind.CONFIRM,
        skip=_no_work,
    ),
    # Education
    QuestionDefinition(
        "education_school",
        Section.EDUCATION,
        "Now let's talk about your education. What school did you attend most recently? "
        "(High school counts too!)",
        "education[0].schoolName",
        placeholder="e.g., Lincoln High School or State University",
    ),
    QuestionDefinition(
        "education_degree",
        Section.EDUCATION,
        "What degree or diploma did you receive (or are working toward)?",
        "education[0].degree",
        placeholder="e.g., High School Diploma, Associate Degree, Bachelor of Science",
    ),
    QuestionDefinition(
        "education_field",
        Section.EDUCATION,
        "What was your field of study or major? (You can skip this if it doesn't apply)",
        "education[0].fieldOfStudy",
        is_required=False,
        placeholder="e.g., Business, Computer Science, General Studies",
    ),
    QuestionDefinition(
        "education_current",
        Section.EDUCATION,
        "Are you currently studying here?",
        "education[0].isCurrentlyStudying",
        InputKind.CONFIRM,
    ),
    QuestionDefinition(
        "education_start",
        Section.EDUCATION,
        "What year did you start?",
        "education[0].startYear",
        placeholder="e.g., 2020",
    ),
    QuestionDefinition(
        "education_end",
        Section.EDUCATION,
        "What year did you graduate (or expect to graduate)?",
        "education[0].endYear",
        skip=_still_studying,
        placeholder="e.g., 2024",
    ),
    QuestionDefinition(
        "education_add_more",
        Section.EDUCATION,
        "Would you like to add another school or degree? "
        "(e.g., another college, certification program, or high school)",
        "addMoreEducation",
        InputKind.CONFIRM,
    ),
    # Volunteering
    QuestionDefinition(
        "volunteering_has",
        Section.VOLUNTEERING,
        "Have you done any volunteer work? This can look great on a resume, "
        "especially if you're just starting your career!",
        "hasVolunteering",
        InputKind.CONFIRM,
    ),
    QuestionDefinition(
        "volunteering_org",
        Section.VOLUNTEERING,
        "What organization did you volunteer with?",
        "volunteering[0].organizationName",
        skip=_no_volunteering,
        placeholder="e.g., Local Food Bank, Community Center",
    ),
    QuestionDefinition(
        "volunteering_role",
        Section.VOLUNTEERING,
        "What was your role or what did you do there?",
        "volunteering[0].role",
        skip=_no_volunteering,
        placeholder="e.g., Food Distribution Volunteer",
    ),
    QuestionDefinition(
        "volunteering_dates",
        Section.VOLUNTEERING,
        "When did you volunteer there? (Start date - end date, or just the year)",
        "volunteering[0].startDate",
        skip=_no_volunteering,
        placeholder="e.g., 2022 - 2023 or June 2022 - Present",
    ),
    QuestionDefinition(
        "volunteering_responsibilities",
        Section.VOLUNTEERING,
        "Describe **2-3 things you did** as a volunteer. Include:\n\n"
        "• Your main tasks and activities\n"
        "• Any impact or results (people helped, events organized, etc.)\n"
        "• Skills you used or developed",
        "volunteering[0].responsibilities",
        InputKind.TEXTAREA,
        skip=_no_volunteering,
    ),
    QuestionDefinition(
        "volunteering_add_more",
        Section.VOLUNTEERING,
        "Would you like to add another volunteer experience?",
        "addMoreVolunteering",
        InputKind.CONFIRM,
        skip=_no_volunteering,
    ),
    # Skills
    QuestionDefinition(
        "skills_has_technical",
        Section.SKILLS,
        "Do you have any technical or job-related skills? "
        "(Computer skills, equipment you can use, software you know, etc.)",
        "hasTechnicalSkills",
        InputKind.CONFIRM,
    ),
    QuestionDefinition(
        "skills_technical",
        Section.SKILLS,
        "List your **top 3-5 technical skills**. These are specific, job-related "
        "abilities like:\n\n"
        "• Software (Excel, QuickBooks, Photoshop)\n"
        "• Equipment (forklift, POS systems, medical devices)\n"
        "• Technical abilities (data entry, bookkeeping, programming)\n\n"
        "Separate each skill with a comma.",
        "skills.technicalSkills",
        InputKind.TEXTAREA,
        is_required=False,
        skip=_flag_is_false("hasTechnicalSkills"),
    ),
    QuestionDefinition(
        "skills_has_certifications",
        Section.SKILLS,
        "Do you have any certifications or licenses? "
        "(Things like CPR, forklift license, food handler's card, etc.)",
        "hasCertifications",
        InputKind.CONFIRM,
    ),
    QuestionDefinition(
        "skills_certifications",
        Section.SKILLS,
        "What certifications or licenses do you have?",
        "skills.certifications",
        is_required=False,
        skip=_flag_is_false("hasCertifications"),
        placeholder="e.g., CPR Certified, Food Handler Card, Driver License",
    ),
    QuestionDefinition(
        "skills_has_languages",
        Section.SKILLS,
        "Do you speak any languages other than English?",
        "hasLanguages",
        InputKind.CONFIRM,
    ),
    QuestionDefinition(
        "skills_languages",
        Section.SKILLS,
        "What languages do you speak?",
        "skills.languages",
        InputKind.TEXTAREA,
        is_required=False,
        skip=_flag_is_false("hasLanguages"),
        placeholder="e.g., Spanish (fluent), French (conversational)",
    ),
    QuestionDefinition(
        "skills_has_soft",
        Section.SKILLS,
        "Would you like to highlight any personal strengths?",
        "hasSoftSkills",
        InputKind.CONFIRM,
    ),
    QuestionDefinition(
        "skills_soft",
        Section.SKILLS,
        "List **3-5 soft skills** (personal strengths that make you good at your job):\n\n"
        "• Communication: leadership, teamwork, customer service\n"
        "• Work ethic: reliable, punctual, detail-oriented\n"
        "• Problem-solving: analytical thinking, adaptability, creativity\n\n"
        "Separate each with a comma.",
        "skills.softSkills",
        InputKind.TEXTAREA,
        is_required=False,
        skip=_flag_is_false("hasSoftSkills"),
    ),
    # References
    QuestionDefinition(
        "references_has",
        Section.REFERENCES,
        "Would you like to add references? "
        "(People who can recommend you, like former bosses or teachers)",
        "hasReferences",
        InputKind.CONFIRM,
    ),
    QuestionDefinition(
        "references_note",
        Section.REFERENCES,
        "Note: Many people prefer to write 'References available upon request' instead "
        "of listing contacts. Would you like to do that instead?",
        "referencesUponRequest",
        InputKind.CONFIRM,
        skip=_flag_is_false("hasReferences"),
    ),
    QuestionDefinition(
        "reference_name",
        Section.REFERENCES,
        "What is your reference's name?",
        "references[0].name",
        skip=_no_reference_details,
        placeholder="e.g., Jane Doe",
    ),
    QuestionDefinition(
        "reference_title",
        Section.REFERENCES,
        "What is their job title?",
        "references[0].jobTitle",
        skip=_no_reference_details,
        placeholder="e.g., Store Manager",
    ),
    QuestionDefinition(
        "reference_company",
        Section.REFERENCES,
        "What company do they work at?",
        "references[0].company",
        skip=_no_reference_details,
        placeholder="e.g., ABC Company",
    ),
    QuestionDefinition(
        "reference_contact",
        Section.REFERENCES,
        "What is their phone number or email?",
        "references[0].phone",
        skip=_no_reference_details,
        placeholder="e.g., (555) 123-4567 or jane@email.com",
    ),
    QuestionDefinition(
        "reference_relationship",
        Section.REFERENCES,
        "What is your relationship to this person?",
        "references[0].relationship",
        skip=_no_reference_details,
        placeholder="e.g., Former Supervisor, Manager, Teacher",
    ),
    QuestionDefinition(
        "references_add_more",
        Section.REFERENCES,
        "Would you like to add another reference? (Most employers like to see 2-3 references)",
        "addMoreReferences",
        InputKind.CONFIRM,
        skip=_no_reference_details,
    ),
    # Review
    QuestionDefinition(
        "review_template",
        Section.REVIEW,
        "Great job! Now let's choose how your resume will look. "
        "Which style would you prefer?\n\n"
        "1. **Classic** - Traditional and professional, works great for any industry\n"
        "2. **Modern** - Clean and contemporary with a fresh look\n"
        "3. **Professional** - Compact and efficient, fits more information\n\n"
        "Just type 1, 2, or 3:",
        "templateStyle",
        InputKind.SELECT,
        options=TEMPLATE_STYLES,
    ),
    QuestionDefinition(
        "review_confirm",
        Section.REVIEW,
        "I'm now going to create your resume! I'll improve the descriptions you gave me "
        "to make them sound more professional and attractive to employers. "
        "Ready to generate your resume?",
        "confirmGenerate",
        InputKind.CONFIRM,
    ),
    # Complete
    QuestionDefinition(
        "complete",
        Section.COMPLETE,
        "Your resume is ready! You can download it as a PDF or Word document. "
        "Would you like to make any changes?",
        "complete",
        InputKind.CONFIRM,
        is_required=False,
    ),
)

ADD_MORE_SECTION_MAP: dict[str, AddMoreTarget] = {
    "work_add_more": AddMoreTarget("work_company_1", Section.WORK),
    "education_add_more": AddMoreTarget("education_school", Section.EDUCATION),
    "volunteering_add_more": AddMoreTarget("volunteering_org", Section.VOLUNTEERING),
    "references_add_more": AddMoreTarget("reference_name", Section.REFERENCES),
}

_INDEX_BY_ID = {question.id: index for index, question in enumerate(QUESTIONS)}


# =============================================================================
# Navigation
# =============================================================================


def question_index(question_id: str) -> int:
    """Position of ``question_id`` in the catalog.

    Raises:
        KeyError: If the id is unknown.
    """
    return _INDEX_BY_ID[question_id]


def get_question(question_id: str) -> QuestionDefinition:
    """Look up a question by id.

    Raises:
        KeyError: If the id is unknown.
    """
    return QUESTIONS[question_index(question_id)]


def first_question(record: dict[str, Any] | None = None) -> QuestionDefinition:
    """The first question not skipped for ``record``."""
    record = record or {}
    for question in QUESTIONS:
        if not question.should_skip(record):
            return question
    return QUESTIONS[-1]


def following_question(
    record: dict[str, Any], current_question_id: str
) -> QuestionDefinition | None:
    """The next unskipped question after ``current_question_id`` in any section.

    Returns:
        The question, or None when the catalog is exhausted.
    """
    for question in QUESTIONS[question_index(current_question_id) + 1 :]:
        if not question.should_skip(record):
            return question
    return None


def next_question(
    record: dict[str, Any], current_question_id: str
) -> QuestionDefinition | SectionComplete:
    """The next question of the current section.

    Args:
        record: Current partial resume record.
        current_question_id: Question just answered.

    Returns:
        The next unskipped question in the same section, or
        ``SECTION_COMPLETE`` when the section has no questions left.

    Raises:
        KeyError: If ``current_question_id`` is unknown.
    """
    current = get_question(current_question_id)
    following = following_question(record, current_question_id)
    if following is None or following.category is not current.category:
        return SECTION_COMPLETE
    return following
