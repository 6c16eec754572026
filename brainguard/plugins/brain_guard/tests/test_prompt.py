"""Tests for per-session prompt injection."""

import pytest

from ..prompt import INITIAL_PROMPT, REMINDER_PROMPT, SessionPromptTracker


class TestSessionPromptTracker:
    """Tests for SessionPromptTracker."""

    def test_first_turn_gets_initial_prompt(self):
        """Test that a session's first turn gets the full methodology."""
        tracker = SessionPromptTracker()
        assert tracker.next_prompt("s1") == INITIAL_PROMPT

    def test_reminder_schedule(self):
        """Test turns 0, 10, 20 get prompts and the others get nothing."""
        tracker = SessionPromptTracker(reminder_interval=10)

        prompts = [tracker.next_prompt("s1") for _ in range(21)]

        assert prompts[0] == INITIAL_PROMPT
        assert prompts[10] == REMINDER_PROMPT
        assert prompts[20] == REMINDER_PROMPT
        assert [i for i, p in enumerate(prompts) if p is None] == [
            i for i in range(21) if i not in (0, 10, 20)
        ]

    def test_sessions_are_independent(self):
        """Test that each session keeps its own turn counter."""
        tracker = SessionPromptTracker(reminder_interval=2)

        assert tracker.next_prompt("a") == INITIAL_PROMPT
        assert tracker.next_prompt("a") is None
        assert tracker.next_prompt("b") == INITIAL_PROMPT
        assert tracker.next_prompt("a") == REMINDER_PROMPT

    def test_interval_of_one(self):
        """Test that an interval of 1 reminds on every later turn."""
        tracker = SessionPromptTracker(reminder_interval=1)

        assert tracker.next_prompt("s") == INITIAL_PROMPT
        assert tracker.next_prompt("s") == REMINDER_PROMPT
        assert tracker.next_prompt("s") == REMINDER_PROMPT

    def test_missing_key_uses_default_bucket(self):
        """Test that a missing session key shares the default bucket."""
        tracker = SessionPromptTracker()

        assert tracker.next_prompt(None) == INITIAL_PROMPT
        assert tracker.next_prompt() is None
        assert tracker.active_sessions() == ["default"]

    def test_end_session_resets_counter(self):
        """Test that ending a session forgets its counter."""
        tracker = SessionPromptTracker()
        tracker.next_prompt("s1")
        tracker.next_prompt("s1")

        tracker.end_session("s1")

        assert "s1" not in tracker.active_sessions()
        assert tracker.next_prompt("s1") == INITIAL_PROMPT

    def test_end_unknown_session(self):
        """Test that ending an unknown session is a no-op."""
        SessionPromptTracker().end_session("never-seen")

    def test_clear(self):
        """Test that clear() forgets every session."""
        tracker = SessionPromptTracker()
        tracker.next_prompt("a")
        tracker.next_prompt("b")

        tracker.clear()

        assert tracker.active_sessions() == []

    def test_invalid_interval(self):
        """Test that a non-positive interval is rejected."""
        with pytest.raises(ValueError):
            SessionPromptTracker(reminder_interval=0)


def test_initial_prompt_mentions_every_pattern():
    """Test that the initial prompt names every pattern and the tool."""
    for kind in ("delegation", "no_reflection", "repetitive", "vocabulary", "clarity"):
        assert kind in INITIAL_PROMPT
    assert "brain_guard" in INITIAL_PROMPT
