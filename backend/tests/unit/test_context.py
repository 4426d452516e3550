"""Tests for AI-mode conversation context.

Tests verify:
- User tone estimation
- Context updates record topics, entities and follow-up counts without mutation
- The context summary rendered into the prompt
"""

import pytest

from resume_builder.interview.context import (
    build_context_summary,
    detect_user_tone,
    update_context,
)
from resume_builder.interview.state import ConversationContext


def make_proposal(path, value, confidence=0.9):
    """Create a merged field proposal."""
    return {"path": path, "value": value, "confidence": confidence}


class TestDetectUserTone:
    """Tests for detect_user_tone."""

    @pytest.mark.parametrize(
        ("text", "tone"),
        [
            ("I already told you that", "frustrated"),
            ("I think it was around 2019", "uncertain"),
            ("Definitely, I was the lead", "confident"),
            ("Target", "neutral"),
        ],
    )
    def test_tones(self, text, tone):
        """Replies map to a tone."""
        assert detect_user_tone(text) == tone


class TestUpdateContext:
    """Tests for update_context."""

    def test_records_topics_entities_and_counts(self):
        """Merged fields add topics and named entities."""
        context = update_context(
            ConversationContext(),
            "It was Target",
            [
                make_proposal("personalInfo.fullName", "Ana Lopez"),
                make_proposal("workExperience[0].companyName", "Target"),
                make_proposal("workExperience[0].jobTitle", "Cashier"),
            ],
            "work",
            2,
        )
        assert context.answered_topics == ["personalInfo", "workExperience"]
        assert context.mentioned_entities == ["Ana Lopez", "Target"]
        assert context.follow_up_counts == {"work": 2}
        assert context.user_tone == "neutral"

    def test_does_not_mutate_input(self):
        """The previous context is left unchanged."""
        before = ConversationContext(mentioned_entities=["Target"])
        update_context(before, "ok", [make_proposal("education[0].schoolName", "ACC")], "education", 1)
        assert before == ConversationContext(mentioned_entities=["Target"])

    def test_repeated_entity_moves_to_end(self):
        """A re-mentioned entity becomes the most recent."""
        before = ConversationContext(mentioned_entities=["Target", "Ana Lopez"])
        context = update_context(
            before, "Target again", [make_proposal("workExperience[1].companyName", "Target")], "work", 0
        )
        assert context.mentioned_entities == ["Ana Lopez", "Target"]

    def test_entities_are_capped(self):
        """Only the most recent entities are kept."""
        before = ConversationContext(mentioned_entities=[f"Company {i}" for i in range(20)])
        context = update_context(
            before, "ok", [make_proposal("workExperience[0].companyName", "Newest")], "work", 0
        )
        assert len(context.mentioned_entities) == 20
        assert context.mentioned_entities[-1] == "Newest"
        assert "Company 0" not in context.mentioned_entities

    def test_non_string_values_are_not_entities(self):
        """Flags and lists are never entities."""
        context = update_context(
            ConversationContext(), "yes", [make_proposal("hasWorkExperience", True)], "work", 0
        )
        assert context.mentioned_entities == []
        assert context.answered_topics == ["hasWorkExperience"]

    def test_tone_follows_latest_reply(self):
        """The tone is taken from the current reply."""
        context = update_context(
            ConversationContext(user_tone="frustrated"), "Definitely!", [], "personal", 1
        )
        assert context.user_tone == "confident"


class TestBuildContextSummary:
    """Tests for build_context_summary."""

    def test_full_summary(self):
        """Every available highlight is rendered on its own line."""
        context = ConversationContext(
            mentioned_entities=["Target"],
            answered_topics=["personalInfo", "workExperience"],
            user_tone="uncertain",
        )
        record = {
            "personalInfo": {"fullName": "Ana Lopez"},
            "workExperience": [{"companyName": "Target"}, {"companyName": "Walmart"}],
            "education": [{"schoolName": "ACC"}],
        }
        assert build_context_summary(context, record).splitlines() == [
            "Topics already covered: personalInfo, workExperience",
            "Names/companies mentioned: Target",
            "User's name: Ana Lopez",
            "Work experiences collected: 2",
            "Education entries collected: 1",
            "User seems uncertain - adjust tone accordingly",
        ]

    def test_empty(self):
        """A fresh context and record render nothing."""
        assert build_context_summary(ConversationContext(), {}) == ""
