"""Tests for interview intent classifiers.

Tests verify:
- Bare yes/no classification only matches whole replies
- Section-level yes/no only counts on the first turn of a gated section
- Escape, frustration, email, export and current-job phrasing
- Assistant message classifiers (gate questions, add-another, responsibilities)
- The rule table reports matching rule ids
"""

import pytest

from resume_builder.interview.intents import (
    INTENT_RULES,
    IntentCategory,
    detect_asked_add_another,
    detect_asked_for_responsibilities,
    detect_escape_phrase,
    detect_export_intent,
    detect_frustration,
    detect_no_email,
    detect_no_work_experience,
    detect_provided_responsibilities,
    detect_user_done_with_entries,
    detect_user_said_no_to_section,
    detect_user_said_yes_to_section,
    detect_user_wants_another,
    is_current_job_response,
    is_gate_question,
    is_yes_no_response,
    match_intents,
    normalize_reply,
)
from resume_builder.interview.sections import REQUIRED_FIRST_MESSAGES, Section

# =============================================================================
# Rule Table
# =============================================================================


class TestRuleTable:
    """Tests for the declarative rule table."""

    def test_rule_ids_are_unique(self):
        """Every rule has its own id."""
        ids = [rule.id for rule in INTENT_RULES]
        assert len(ids) == len(set(ids))

    def test_every_category_has_a_rule(self):
        """Each category is backed by at least one rule."""
        categories = {rule.category for rule in INTENT_RULES}
        assert categories == set(IntentCategory)

    def test_match_intents_reports_rule_ids(self):
        """match_intents returns the ids of matching rules."""
        assert match_intents("let's move on", IntentCategory.ESCAPE) == ["escape"]

    def test_match_intents_empty_when_nothing_matches(self):
        """Non-matching text yields no ids."""
        assert match_intents("my name is Ana", IntentCategory.ESCAPE) == []


class TestNormalizeReply:
    """Tests for normalize_reply."""

    def test_trims_lowercases_and_drops_trailing_punctuation(self):
        """Whitespace, case and one trailing mark are removed."""
        assert normalize_reply("  Yes!  ") == "yes"

    def test_only_one_trailing_mark_is_dropped(self):
        """Only a single trailing period is stripped."""
        assert normalize_reply("ok..") == "ok."

    def test_none_becomes_empty(self):
        """A missing reply normalizes to the empty string."""
        assert normalize_reply(None) == ""  # type: ignore[arg-type]


# =============================================================================
# Yes / No
# =============================================================================


class TestIsYesNoResponse:
    """Tests for is_yes_no_response."""

    @pytest.mark.parametrize("reply", ["yes", "Yes.", "yeah", "Sure!", "ok", "I do", "y"])
    def test_yes_replies(self, reply):
        """Bare assent is classified as yes."""
        assert is_yes_no_response(reply) == "yes"

    @pytest.mark.parametrize("reply", ["no", "Nope!", "nah", "none", "N/A", "not really", "skip"])
    def test_no_replies(self, reply):
        """Bare denial is classified as no."""
        assert is_yes_no_response(reply) == "no"

    @pytest.mark.parametrize(
        "reply",
        ["Yes Bank", "None of your business school", "I worked at Target", "", "noodles"],
    )
    def test_content_is_not_yes_or_no(self, reply):
        """Replies that only start with yes/no words are content."""
        assert is_yes_no_response(reply) is None


class TestSectionYesNo:
    """Tests for section-level yes/no detection."""

    def test_no_at_work_gate_is_section_denial(self):
        """A bare no on the first work turn declines the section."""
        assert detect_user_said_no_to_section("no", Section.WORK, 0) is True

    @pytest.mark.parametrize("reply", ["No, thanks", "I don't have any", "I have no references"])
    def test_phrased_denials(self, reply):
        """Longer denial phrasings count at the gate."""
        assert detect_user_said_no_to_section(reply, Section.REFERENCES, 0) is True

    def test_no_after_first_turn_is_not_denial(self):
        """'No' deeper in the section is an answer, not a denial."""
        assert detect_user_said_no_to_section("no", Section.WORK, 1) is False

    def test_no_in_ungated_section_is_not_denial(self):
        """Personal info has no gate, so 'no' never declines it."""
        assert detect_user_said_no_to_section("no", Section.PERSONAL, 0) is False

    def test_no_without_section_is_not_denial(self):
        """An unknown section never yields a denial."""
        assert detect_user_said_no_to_section("no", None, 0) is False

    @pytest.mark.parametrize("reply", ["yes", "Of course!", "Yes, please", "yes i do"])
    def test_yes_at_gate(self, reply):
        """Assent phrasings at the gate accept the section."""
        assert detect_user_said_yes_to_section(reply, Section.EDUCATION, 0) is True

    def test_yes_after_first_turn_is_not_section_yes(self):
        """'Yes' later in a section answers a detail question."""
        assert detect_user_said_yes_to_section("yes", Section.EDUCATION, 2) is False

    def test_content_at_gate_is_neither(self):
        """A content answer at the gate is neither yes nor no."""
        assert detect_user_said_yes_to_section("I worked at Target", Section.WORK, 0) is False
        assert detect_user_said_no_to_section("I worked at Target", Section.WORK, 0) is False


# =============================================================================
# User Intents
# =============================================================================


class TestUserIntents:
    """Tests for escape, frustration, email and export phrasing."""

    @pytest.mark.parametrize("reply", ["Let's move on", "skip this", "that's enough", "I'm done"])
    def test_escape_phrases(self, reply):
        """Move-on phrasing is detected anywhere in the reply."""
        assert detect_escape_phrase(reply) is True

    def test_plain_answer_is_not_escape(self):
        """A regular answer is not an escape."""
        assert detect_escape_phrase("My name is Ana Lopez") is False

    @pytest.mark.parametrize(
        "reply", ["I already told you that", "Why do you keep asking?", "never mind", "forget it"]
    )
    def test_frustration(self, reply):
        """Frustrated phrasing is detected."""
        assert detect_frustration(reply) is True

    @pytest.mark.parametrize(
        "reply", ["I don't have an email", "no email", "How do I make an email?"]
    )
    def test_no_email(self, reply):
        """Missing-email phrasing is detected."""
        assert detect_no_email(reply) is True

    def test_email_address_is_not_no_email(self):
        """Giving an address is not a request for help."""
        assert detect_no_email("ana@example.com") is False

    @pytest.mark.parametrize("reply", ["This is my first job", "I never worked", "I just graduated"])
    def test_no_work_experience(self, reply):
        """First-job phrasing is detected."""
        assert detect_no_work_experience(reply) is True

    @pytest.mark.parametrize("reply", ["Can I download it?", "make it a PDF", "I'm finished"])
    def test_export_intent(self, reply):
        """Download and finish phrasing is export intent."""
        assert detect_export_intent(reply) is True

    def test_current_job_response(self):
        """'Still there' means the job is current."""
        assert is_current_job_response("I'm still there") is True
        assert is_current_job_response("I left in 2020") is False


class TestMultiEntryReplies:
    """Tests for replies to add-another questions."""

    @pytest.mark.parametrize("reply", ["yes", "Yep!", "one more", "another"])
    def test_wants_another(self, reply):
        """Assent to add-another asks for a new entry."""
        assert detect_user_wants_another(reply) is True

    @pytest.mark.parametrize("reply", ["no", "That's it", "that's all", "I'm done", "no more"])
    def test_done_with_entries(self, reply):
        """Closing phrases end the loop."""
        assert detect_user_done_with_entries(reply) is True

    def test_detail_answer_is_neither(self):
        """A content answer is neither another nor done."""
        assert detect_user_wants_another("Cashier at Target") is False
        assert detect_user_done_with_entries("Cashier at Target") is False

    def test_selection_of_suggestions_counts_as_responsibilities(self):
        """Selecting suggested bullets counts as answering."""
        assert detect_provided_responsibilities("use 1 and 3") is True
        assert detect_provided_responsibilities("Those work") is True

    def test_long_answer_counts_as_responsibilities(self):
        """A substantive description counts as answering."""
        assert detect_provided_responsibilities("I greeted customers and ran the register") is True

    def test_short_yes_is_not_responsibilities(self):
        """A bare yes does not provide responsibilities."""
        assert detect_provided_responsibilities("yes") is False


# =============================================================================
# Assistant Message Classifiers
# =============================================================================


class TestIsGateQuestion:
    """Tests for is_gate_question."""

    @pytest.mark.parametrize("section", sorted(REQUIRED_FIRST_MESSAGES))
    def test_canonical_gates(self, section):
        """Every canonical gate question is a gate."""
        assert is_gate_question(REQUIRED_FIRST_MESSAGES[section]) is True

    @pytest.mark.parametrize(
        "message",
        [
            "Is this your current job?",
            "Are you still studying there?",
            "Great! Would you like to add another job?",
        ],
    )
    def test_structural_gates(self, message):
        """Structural yes/no templates are gates."""
        assert is_gate_question(message) is True

    def test_gate_on_later_line(self):
        """A gate on its own line after an acknowledgement still counts."""
        message = "Thanks, that's helpful!\nDo you have any other jobs to add?"
        assert is_gate_question(message) is True

    @pytest.mark.parametrize(
        "message", ["What company did you work for?", "What is your full name?", ""]
    )
    def test_detail_questions_are_not_gates(self, message):
        """Open detail questions are not gates."""
        assert is_gate_question(message) is False


class TestAssistantAsked:
    """Tests for add-another and responsibilities detection."""

    def test_asked_add_another_in_matching_section(self):
        """Add-another wording is matched per section."""
        message = "Do you have another job you'd like to add?"
        assert detect_asked_add_another(message, Section.WORK) is True
        assert detect_asked_add_another(message, Section.EDUCATION) is False

    def test_asked_add_another_unknown_section(self):
        """Sections without entries never ask add-another."""
        assert detect_asked_add_another("Another job?", Section.SKILLS) is False

    def test_asked_for_responsibilities(self):
        """Responsibilities and reference relationship questions are last-field questions."""
        assert detect_asked_for_responsibilities("What were your main responsibilities?") is True
        assert detect_asked_for_responsibilities("What is their relationship to you?") is True
        assert detect_asked_for_responsibilities("What is your job title?") is False
