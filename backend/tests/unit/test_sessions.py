"""Tests for conversation state and the session registry.

Tests verify:
- SectionState section moves, follow-up counting and entry indexes
- Mode-specific state variants
- Registry create/get/save/delete and per-session locks
"""

import pytest

from resume_builder.interview.sections import Section
from resume_builder.interview.sessions import SessionNotFound, SessionRegistry
from resume_builder.interview.state import (
    AiAssistedState,
    GuidedState,
    InterviewMode,
    SectionState,
)

# =============================================================================
# SectionState
# =============================================================================


class TestSectionState:
    """Tests for SectionState."""

    def test_defaults(self):
        """A new interview starts at the language section."""
        state = SectionState()
        assert state.current_section is Section.LANGUAGE
        assert state.follow_up_count == 0

    def test_move_to_resets_follow_ups(self):
        """Changing section resets the counter."""
        state = SectionState(current_section=Section.PERSONAL, follow_up_count=3)
        assert state.move_to("work") is True
        assert state.current_section is Section.WORK
        assert state.follow_up_count == 0

    def test_move_to_same_section(self):
        """Moving to the current section changes nothing."""
        state = SectionState(current_section=Section.WORK, follow_up_count=2)
        assert state.move_to(Section.WORK) is False
        assert state.follow_up_count == 2

    @pytest.mark.parametrize("suggested", [None, Section.PERSONAL])
    def test_record_turn_counts_follow_up(self, suggested):
        """No change of section counts one follow-up."""
        state = SectionState(current_section=Section.PERSONAL)
        state.record_turn(suggested)
        assert state.follow_up_count == 1

    def test_record_turn_moves(self):
        """A new section resets the count to zero."""
        state = SectionState(current_section=Section.PERSONAL, follow_up_count=4)
        state.record_turn(Section.WORK)
        assert state.current_section is Section.WORK
        assert state.follow_up_count == 0

    def test_entry_indexes(self):
        """Each multi-entry section tracks its own entry."""
        state = SectionState()
        assert state.entry_index(Section.WORK) == 0
        assert state.next_entry("work") == 1
        assert state.next_entry(Section.WORK) == 2
        assert state.entry_index(Section.EDUCATION) == 0

    def test_unknown_section_rejected(self):
        """Section names are validated."""
        with pytest.raises(ValueError):
            SectionState().move_to("hobbies")


class TestStateVariants:
    """Tests for GuidedState and AiAssistedState."""

    def test_modes(self):
        """Each variant carries its mode."""
        assert GuidedState(session_id="g").mode is InterviewMode.GUIDED
        assert AiAssistedState(session_id="a").mode is InterviewMode.AI

    def test_last_assistant_message(self):
        """The most recent assistant message is returned."""
        state = AiAssistedState(
            session_id="a",
            history=[
                {"role": "assistant", "content": "Hi!"},
                {"role": "user", "content": "English"},
                {"role": "assistant", "content": "What is your name?"},
                {"role": "user", "content": "Ana"},
            ],
        )
        assert state.last_assistant_message == "What is your name?"
        assert AiAssistedState(session_id="b").last_assistant_message == ""

    def test_states_do_not_share_records(self):
        """Defaults are per-instance."""
        first, second = GuidedState(session_id="1"), GuidedState(session_id="2")
        first.resume_record["language"] = "es"
        assert second.resume_record == {}


# =============================================================================
# SessionRegistry
# =============================================================================


class TestSessionRegistry:
    """Tests for SessionRegistry."""

    def test_create_guided_and_ai(self):
        """The mode picks the state variant."""
        registry = SessionRegistry()
        guided = registry.create("guided", "es")
        ai = registry.create(InterviewMode.AI)
        assert isinstance(guided, GuidedState)
        assert guided.language == "es"
        assert isinstance(ai, AiAssistedState)
        assert guided.session_id != ai.session_id
        assert len(registry) == 2
        assert guided.session_id in registry

    def test_create_unknown_mode(self):
        """Unknown modes raise ValueError."""
        with pytest.raises(ValueError):
            SessionRegistry().create("freeform")

    def test_get_unknown_returns_not_found(self):
        """Lookups never raise."""
        assert SessionRegistry().get("missing") == SessionNotFound("missing")

    def test_save_replaces_state(self):
        """Saving stores the state under its id."""
        registry = SessionRegistry()
        state = registry.create("ai")
        replacement = AiAssistedState(session_id=state.session_id, language="fr")
        assert registry.save(replacement) is True
        assert registry.get(state.session_id) is replacement

    def test_save_after_delete_does_not_resurrect(self):
        """A session deleted mid-turn is not re-inserted by the save."""
        registry = SessionRegistry()
        state = registry.create("ai")
        registry.delete(state.session_id)

        assert registry.save(state) is False
        assert state.session_id not in registry
        assert isinstance(registry.get(state.session_id), SessionNotFound)

    def test_delete(self):
        """Deleting reports whether the session existed."""
        registry = SessionRegistry()
        state = registry.create("guided")
        assert registry.delete(state.session_id) is True
        assert registry.delete(state.session_id) is False
        assert isinstance(registry.get(state.session_id), SessionNotFound)

    @pytest.mark.asyncio
    async def test_lock_is_per_session(self):
        """Each session has one lock; other sessions are independent."""
        registry = SessionRegistry()
        first = registry.create("ai")
        second = registry.create("ai")
        assert registry.lock(first.session_id) is registry.lock(first.session_id)
        async with registry.lock(first.session_id):
            assert registry.lock(first.session_id).locked()
            assert not registry.lock(second.session_id).locked()
