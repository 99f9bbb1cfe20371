"""Unit tests for CurrentSessionTracker."""

from ollama_chat.services.session_tracker import CurrentSessionTracker


class TestCurrentSessionTracker:
    """Pointer semantics."""

    def test_starts_empty(self) -> None:
        assert CurrentSessionTracker().get() is None

    def test_set_and_get(self) -> None:
        tracker = CurrentSessionTracker()
        tracker.set(3)
        assert tracker.get() == 3

    def test_set_accepts_unvalidated_ids(self) -> None:
        tracker = CurrentSessionTracker()
        tracker.set(999)
        assert tracker.get() == 999

    def test_clear(self) -> None:
        tracker = CurrentSessionTracker(session_id=5)
        tracker.clear()
        assert tracker.get() is None
