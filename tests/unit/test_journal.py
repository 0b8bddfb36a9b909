"""Tests for nested atomic execution frames."""

import pytest

from cpamm.events import EventLog
from cpamm.journal import Journal
from cpamm.models.events import PoolCreated

ASSET = "0x" + "0a" * 20
POOL = "0x" + "90" * 20


class Counter:
    """Minimal journaled state holder."""

    def __init__(self) -> None:
        self.value = 0

    def snapshot(self) -> int:
        return self.value

    def restore(self, state: int) -> None:
        self.value = state


def created() -> PoolCreated:
    return PoolCreated(asset=ASSET, pool=POOL)


class TestAtomic:
    def test_commit_keeps_changes(self):
        journal, counter = Journal(), Counter()
        with journal.atomic([counter]):
            counter.value = 5
        assert counter.value == 5
        assert journal.depth == 0

    def test_failure_restores(self):
        journal, counter = Journal(), Counter()
        with pytest.raises(KeyError):
            with journal.atomic([counter]):
                counter.value = 5
                raise KeyError("boom")
        assert counter.value == 0
        assert journal.depth == 0

    def test_inner_failure_only_reverts_inner(self):
        journal, outer, inner = Journal(), Counter(), Counter()
        with journal.atomic([outer]):
            outer.value = 1
            with pytest.raises(ValueError):
                with journal.atomic([inner]):
                    inner.value = 2
                    raise ValueError
        assert (outer.value, inner.value) == (1, 0)

    def test_outer_failure_reverts_committed_inner(self):
        journal, outer, inner = Journal(), Counter(), Counter()
        with pytest.raises(ValueError):
            with journal.atomic([outer]):
                outer.value = 1
                with journal.atomic([inner]):
                    inner.value = 2
                raise ValueError
        assert (outer.value, inner.value) == (0, 0)

    def test_shared_participant_restored_to_outer_state(self):
        journal, counter = Journal(), Counter()
        with pytest.raises(ValueError):
            with journal.atomic([counter]):
                counter.value = 1
                with journal.atomic([counter]):
                    counter.value = 2
                raise ValueError
        assert counter.value == 0

    def test_tracked_participant_restored(self):
        journal, tracked, touched = Journal(), Counter(), Counter()
        journal.track(tracked)
        journal.track(tracked)
        with pytest.raises(ValueError):
            with journal.atomic([touched]):
                tracked.value = 3
                touched.value = 4
                raise ValueError
        assert (tracked.value, touched.value) == (0, 0)


class TestEvents:
    def test_published_on_outermost_commit(self):
        journal, log = Journal(), EventLog()
        with journal.atomic([]):
            with journal.atomic([]):
                journal.emit(log, created())
            assert len(log) == 0
        assert len(log) == 1

    def test_dropped_on_failure(self):
        journal, log = Journal(), EventLog()
        with pytest.raises(ValueError):
            with journal.atomic([]):
                with journal.atomic([]):
                    journal.emit(log, created())
                raise ValueError
        assert len(log) == 0

    def test_emit_outside_frame_publishes(self):
        journal, log = Journal(), EventLog()
        journal.emit(log, created())
        assert log.records() == [created()]
