"""Nested all-or-nothing execution frames shared by every pool.

Each pool operation opens a frame that snapshots the state holders it
touches, together with every holder tracked by the journal (the deployed
ledgers, the registry and the environment), because receive hooks can run
arbitrary calls in the middle of an operation. A failing frame restores
them. A committing frame hands its snapshots and buffered events to the
enclosing frame, so when an outer operation fails after a nested call into
another pool has succeeded, the nested pool's changes are undone too.
Events reach the event logs only when the outermost frame commits.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from cpamm.events import EventLog
    from cpamm.ledger.base import Journaled
    from cpamm.models.events import Event


@dataclass
class _Frame:
    saved: dict[int, tuple[Journaled, Any]] = field(default_factory=dict)
    events: list[tuple[EventLog, Event]] = field(default_factory=list)


class Journal:
    """Stack of open execution frames."""

    def __init__(self) -> None:
        self._frames: list[_Frame] = []
        self._tracked: list[Journaled] = []

    @property
    def depth(self) -> int:
        return len(self._frames)

    def track(self, participant: Journaled) -> None:
        """Include participant in every frame opened from now on."""
        if all(p is not participant for p in self._tracked):
            self._tracked.append(participant)

    @contextmanager
    def atomic(self, participants: Iterable[Journaled]) -> Iterator[None]:
        frame = _Frame()
        for participant in [*participants, *self._tracked]:
            frame.saved.setdefault(id(participant), (participant, participant.snapshot()))
        self._frames.append(frame)
        try:
            yield
        except BaseException:
            for participant, state in reversed(list(frame.saved.values())):
                participant.restore(state)
            raise
        finally:
            self._frames.pop()

        if self._frames:
            parent = self._frames[-1]
            for key, entry in frame.saved.items():
                parent.saved.setdefault(key, entry)
            parent.events.extend(frame.events)
        else:
            for log, event in frame.events:
                log.publish(event)

    def emit(self, log: EventLog, event: Event) -> None:
        """Buffer an event in the current frame (publish now if none is open)."""
        if self._frames:
            self._frames[-1].events.append((log, event))
        else:
            log.publish(event)
