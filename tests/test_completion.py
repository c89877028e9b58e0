"""
Tests for reporting exercise completion to the progress store.
"""

from InlineBlanks.completion import ExerciseCompletionBridge
from InlineBlanks.progress import InMemoryProgressStore


class _RecordingStore(InMemoryProgressStore):
    def __init__(self):
        super().__init__()
        self.calls = []

    def mark_exercise_complete(self, exercise_id, context_key):
        self.calls.append((exercise_id, context_key))
        super().mark_exercise_complete(exercise_id, context_key)


class TestExerciseCompletionBridge:
    """Tests for ExerciseCompletionBridge."""

    def test_fires_once_across_repeated_evaluations(self):
        store = _RecordingStore()
        bridge = ExerciseCompletionBridge(store)
        bridge.mount("ex-1", "/lesson")

        assert bridge.evaluate(True) is True
        assert bridge.evaluate(True) is False
        assert bridge.evaluate(False) is False
        assert bridge.evaluate(True) is False

        assert store.calls == [("ex-1", "/lesson")]
        assert bridge.is_completed

    def test_not_correct_does_nothing(self):
        store = _RecordingStore()
        bridge = ExerciseCompletionBridge(store)
        bridge.mount("ex-1")

        assert bridge.evaluate(False) is False
        assert store.calls == []
        assert not bridge.is_completed

    def test_deferred_until_id_is_known(self):
        store = _RecordingStore()
        bridge = ExerciseCompletionBridge(store)

        assert bridge.evaluate(True) is False
        bridge.mount("ex-1", "/lesson")
        assert bridge.evaluate(True) is True
        assert store.calls == [("ex-1", "/lesson")]

    def test_already_complete_in_store_is_not_reported_again(self):
        store = _RecordingStore()
        store.completed["ex-1"] = "/lesson"
        bridge = ExerciseCompletionBridge(store)
        bridge.mount("ex-1", "/lesson")

        assert bridge.is_completed
        assert bridge.evaluate(True) is False
        assert store.calls == []

    def test_remounting_same_id_keeps_flag(self):
        store = _RecordingStore()
        bridge = ExerciseCompletionBridge(store)
        bridge.mount("ex-1")
        bridge.evaluate(True)

        bridge.mount("ex-1")
        bridge.evaluate(True)
        assert len(store.calls) == 1

    def test_new_id_can_complete_again(self):
        store = _RecordingStore()
        bridge = ExerciseCompletionBridge(store)
        bridge.mount("ex-1")
        bridge.evaluate(True)

        bridge.mount("ex-2")
        assert not bridge.is_completed
        bridge.evaluate(True)
        assert [call[0] for call in store.calls] == ["ex-1", "ex-2"]
