"""Tests for the response validator.

Tests verify:
- The first message of a gated section must carry the exact gate question
- Long lead-ins before the gate question are corrected
- After a section-level "no" only an acknowledgement and transition pass
- Follow-up turns and ungated sections pass through
"""

import pytest

from resume_builder.interview.sections import (
    REQUIRED_FIRST_MESSAGES,
    SECTION_TRANSITION_MESSAGES,
    Section,
)
from resume_builder.interview.validator import MAX_LEAD_IN_LENGTH, validate_ai_response

WORK_GATE = REQUIRED_FIRST_MESSAGES[Section.WORK]
EDUCATION_GATE = REQUIRED_FIRST_MESSAGES[Section.EDUCATION]


class TestFirstMessageRule:
    """Tests for the gate-question requirement."""

    def test_exact_gate_question_is_valid(self):
        """The canonical question alone passes."""
        result = validate_ai_response(WORK_GATE, Section.WORK, 0, user_said_no=False)
        assert result.is_valid is True
        assert result.corrected_response is None

    def test_short_lead_in_is_valid(self):
        """A brief acknowledgement before the question passes."""
        result = validate_ai_response(f"Thanks, Ana! {WORK_GATE}", Section.WORK, 0, False)
        assert result.is_valid is True

    def test_paraphrased_gate_is_corrected(self):
        """A reworded gate question is replaced with the canonical one."""
        result = validate_ai_response(
            "Have you ever had a job before?", Section.WORK, 0, user_said_no=False
        )
        assert result.is_valid is False
        assert result.corrected_response == WORK_GATE
        assert "must contain the yes/no question" in result.violation

    def test_long_lead_in_is_corrected(self):
        """Too much text before the gate question is replaced."""
        lead_in = "x" * (MAX_LEAD_IN_LENGTH + 1)
        result = validate_ai_response(f"{lead_in} {WORK_GATE}", Section.WORK, 0, False)
        assert result.is_valid is False
        assert result.corrected_response == WORK_GATE

    def test_lead_in_at_limit_is_valid(self):
        """A lead-in of exactly the limit passes."""
        lead_in = "x" * MAX_LEAD_IN_LENGTH
        result = validate_ai_response(f"{lead_in} {WORK_GATE}", Section.WORK, 0, False)
        assert result.is_valid is True

    def test_user_said_yes_skips_gate_check(self):
        """After a yes, the reply asks details and needs no gate."""
        result = validate_ai_response(
            "Great! What company did you work for?",
            Section.WORK,
            0,
            user_said_no=False,
            user_said_yes=True,
        )
        assert result.is_valid is True

    @pytest.mark.parametrize("section", [Section.PERSONAL, Section.REVIEW, "hobbies"])
    def test_ungated_sections_pass(self, section):
        """Sections without a gate are never corrected."""
        result = validate_ai_response("What is your phone number?", section, 0, False)
        assert result.is_valid is True

    def test_follow_up_turn_passes(self):
        """Turns after the first are not checked against the gate."""
        result = validate_ai_response("What was your job title?", Section.WORK, 2, False)
        assert result.is_valid is True


class TestSaidNoRule:
    """Tests for the transition-only rule after a section-level no."""

    def test_acknowledgement_is_valid(self):
        """A plain acknowledgement passes."""
        result = validate_ai_response(
            "No problem, let's keep going.", Section.WORK, 0, user_said_no=True
        )
        assert result.is_valid is True

    def test_next_gate_in_same_message_is_corrected(self):
        """Asking another section's gate is replaced with the transition."""
        result = validate_ai_response(
            f"That's okay! {EDUCATION_GATE}", Section.WORK, 0, user_said_no=True
        )
        assert result.is_valid is False
        assert result.corrected_response == SECTION_TRANSITION_MESSAGES[Section.WORK]

    def test_free_form_question_later_in_section_is_corrected(self):
        """A free-form question after a no is replaced with the transition."""
        result = validate_ai_response(
            "What school did you attend?", Section.EDUCATION, 1, user_said_no=True
        )
        assert result.is_valid is False
        assert result.corrected_response == SECTION_TRANSITION_MESSAGES[Section.EDUCATION]

    @pytest.mark.parametrize(
        "candidate",
        [
            "Would you like to keep your existing entries?",
            "Did you mean your last job?",
            "Okay! Anything else? (Yes or No)",
        ],
    )
    def test_allowed_questions_after_no(self, candidate):
        """Clarifying and yes/no questions are allowed after a no."""
        result = validate_ai_response(candidate, Section.EDUCATION, 1, user_said_no=True)
        assert result.is_valid is True
