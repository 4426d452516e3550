"""Tests for the skills sub-category chain.

Tests verify:
- Sub-category and phase detection from the assistant's question
- Chain order technical → certifications → languages → soft skills → references
- A "no" at a sub-category gate advances the chain, not the section
- Only the last sub-category leaves the skills section
- List and spoken-language parsing
"""

import pytest

from resume_builder.interview.sections import REQUIRED_FIRST_MESSAGES, Section
from resume_builder.interview.skills import (
    SKILLS_DETAIL_QUESTIONS,
    SKILLS_SUB_CATEGORY_ORDER,
    SKILLS_SUB_CATEGORY_QUESTIONS,
    SkillsPhase,
    SkillsSubCategory,
    advance_skills_chain,
    detect_skills_question_phase,
    detect_skills_sub_category,
    detect_skills_sub_category_answer,
    get_next_skills_sub_category,
    parse_spoken_languages,
    split_list,
)

REFERENCES_GATE = REQUIRED_FIRST_MESSAGES[Section.REFERENCES]

# =============================================================================
# Detection
# =============================================================================


class TestDetection:
    """Tests for sub-category and phase detection."""

    @pytest.mark.parametrize("sub_category", SKILLS_SUB_CATEGORY_ORDER)
    def test_gate_questions(self, sub_category):
        """Each gate question maps to its sub-category and the gate phase."""
        question = SKILLS_SUB_CATEGORY_QUESTIONS[sub_category]
        assert detect_skills_sub_category(question) is sub_category
        assert detect_skills_question_phase(question) is SkillsPhase.GATE

    @pytest.mark.parametrize("sub_category", SKILLS_SUB_CATEGORY_ORDER)
    def test_detail_questions(self, sub_category):
        """Each detail question maps to its sub-category and the detail phase."""
        question = SKILLS_DETAIL_QUESTIONS[sub_category]
        assert detect_skills_sub_category(question) is sub_category
        assert detect_skills_question_phase(question) is SkillsPhase.DETAIL

    def test_technical_gate_is_the_section_gate(self):
        """The skills section opens on the technical-skills gate."""
        assert (
            SKILLS_SUB_CATEGORY_QUESTIONS[SkillsSubCategory.TECHNICAL]
            == REQUIRED_FIRST_MESSAGES[Section.SKILLS]
        )

    def test_unrelated_message(self):
        """Non-skills messages have no sub-category or phase."""
        assert detect_skills_sub_category("What is your name?") is None
        assert detect_skills_question_phase("What is your name?") is None

    @pytest.mark.parametrize(
        ("reply", "expected"),
        [
            ("yes", "yes"),
            ("Yes.", "yes"),
            ("I have", "yes"),
            ("ok", "yes"),
            ("Okay!", "yes"),
            ("none", "no"),
            ("Not really", "no"),
            ("Excel and Word", "details"),
            ("hmm", None),
        ],
    )
    def test_answer_classification(self, reply, expected):
        """Replies are yes, no, details or unclear."""
        assert detect_skills_sub_category_answer(reply) == expected


class TestNextSubCategory:
    """Tests for get_next_skills_sub_category."""

    def test_chain_order(self):
        """Each sub-category is followed by the next in order."""
        chain = [SkillsSubCategory.TECHNICAL]
        while chain[-1] is not SkillsSubCategory.DONE:
            chain.append(get_next_skills_sub_category(chain[-1]))
        assert chain == [*SKILLS_SUB_CATEGORY_ORDER, SkillsSubCategory.DONE]

    def test_done_stays_done(self):
        """DONE has no successor."""
        assert get_next_skills_sub_category(SkillsSubCategory.DONE) is SkillsSubCategory.DONE


# =============================================================================
# Chain Enforcement
# =============================================================================


class TestAdvanceSkillsChain:
    """Tests for advance_skills_chain."""

    def test_yes_at_gate_asks_detail(self):
        """Yes at a gate asks the same sub-category's detail question."""
        step = advance_skills_chain(
            SKILLS_SUB_CATEGORY_QUESTIONS[SkillsSubCategory.TECHNICAL], "yes"
        )
        assert step is not None
        assert step.message == f"Great! {SKILLS_DETAIL_QUESTIONS[SkillsSubCategory.TECHNICAL]}"
        assert step.suggested_section is None

    def test_no_at_technical_gate_asks_certifications(self):
        """No at the technical gate stays in skills and asks certifications."""
        step = advance_skills_chain(
            SKILLS_SUB_CATEGORY_QUESTIONS[SkillsSubCategory.TECHNICAL], "no"
        )
        assert step is not None
        assert step.message == (
            f"No problem! {SKILLS_SUB_CATEGORY_QUESTIONS[SkillsSubCategory.CERTIFICATIONS]}"
        )
        assert step.suggested_section is None

    def test_no_at_soft_skills_gate_moves_to_references(self):
        """No at the last gate leaves skills for the references gate."""
        step = advance_skills_chain(
            SKILLS_SUB_CATEGORY_QUESTIONS[SkillsSubCategory.SOFT_SKILLS], "nope"
        )
        assert step is not None
        assert step.message == f"No problem! {REFERENCES_GATE}"
        assert step.suggested_section is Section.REFERENCES

    def test_detail_answer_advances_chain(self):
        """Any detail answer closes the sub-category."""
        step = advance_skills_chain(
            SKILLS_DETAIL_QUESTIONS[SkillsSubCategory.CERTIFICATIONS], "CPR, Food Handler"
        )
        assert step is not None
        assert step.message == (
            "Great, I've recorded those! "
            f"{SKILLS_SUB_CATEGORY_QUESTIONS[SkillsSubCategory.LANGUAGES]}"
        )
        assert step.suggested_section is None

    def test_last_detail_answer_moves_to_references(self):
        """The soft-skills detail answer leaves skills."""
        step = advance_skills_chain(
            SKILLS_DETAIL_QUESTIONS[SkillsSubCategory.SOFT_SKILLS], "teamwork, patience"
        )
        assert step is not None
        assert step.message == f"Great! {REFERENCES_GATE}"
        assert step.suggested_section is Section.REFERENCES

    def test_content_at_gate_is_left_to_model(self):
        """Details typed at a gate produce no forced step."""
        step = advance_skills_chain(
            SKILLS_SUB_CATEGORY_QUESTIONS[SkillsSubCategory.LANGUAGES], "Spanish and English"
        )
        assert step is None

    def test_unrecognized_question(self):
        """A non-skills question produces no step."""
        assert advance_skills_chain("What is your email?", "no") is None

    def test_okay_at_gate_asks_detail(self):
        """"Okay" counts as yes at a sub-category gate."""
        step = advance_skills_chain(
            SKILLS_SUB_CATEGORY_QUESTIONS[SkillsSubCategory.CERTIFICATIONS], "okay"
        )
        assert step is not None
        assert step.message == (
            f"Great! {SKILLS_DETAIL_QUESTIONS[SkillsSubCategory.CERTIFICATIONS]}"
        )

    def test_four_noes_visit_every_gate_then_references(self):
        """Declining every sub-category asks each gate once, then references."""
        question = SKILLS_SUB_CATEGORY_QUESTIONS[SkillsSubCategory.TECHNICAL]
        asked = [question]
        steps = []
        for _ in SKILLS_SUB_CATEGORY_ORDER:
            step = advance_skills_chain(question, "no")
            assert step is not None
            steps.append(step)
            question = step.message
            asked.append(question)

        assert [detect_skills_sub_category(q) for q in asked[:4]] == SKILLS_SUB_CATEGORY_ORDER
        assert all(step.suggested_section is None for step in steps[:3])
        assert steps[-1].suggested_section is Section.REFERENCES
        assert asked[-1] == f"No problem! {REFERENCES_GATE}"


# =============================================================================
# Value Parsing
# =============================================================================


class TestParsing:
    """Tests for list and language parsing."""

    def test_split_list(self):
        """Commas and semicolons separate items; blanks are dropped."""
        assert split_list("Excel, Word; ,Python") == ["Excel", "Word", "Python"]

    def test_split_list_empty(self):
        """Empty text yields no items."""
        assert split_list("") == []

    def test_parse_spoken_languages(self):
        """Proficiency words are pulled out of each item."""
        assert parse_spoken_languages("Spanish - fluent, English (native), French") == [
            {"language": "Spanish", "proficiency": "fluent"},
            {"language": "English", "proficiency": "native"},
            {"language": "French", "proficiency": "Fluent"},
        ]

    def test_proficiency_only_items_are_dropped(self):
        """An item that is only a proficiency word names no language."""
        assert parse_spoken_languages("fluent") == []

    def test_custom_default_proficiency(self):
        """Items without a proficiency get the given default."""
        assert parse_spoken_languages("Tagalog", default_proficiency="Conversational") == [
            {"language": "Tagalog", "proficiency": "Conversational"}
        ]
