"""Append-only event log with subscriber callbacks."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from cpamm.models.events import Event

logger = structlog.get_logger()

Subscriber = Callable[[Event], None]


class EventLog:
    """Records events in emission order and fans them out to subscribers.

    Pools buffer their events while an operation is in flight and only
    publish them here once the operation has committed, so observers never
    see events from a rolled-back call.
    """

    def __init__(self) -> None:
        self._records: list[Event] = []
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: Event) -> None:
        self._records.append(event)
        logger.info("event_published", **event.model_dump(mode="json"))
        for callback in list(self._subscribers):
            callback(event)

    def records(self, name: str | None = None) -> list[Event]:
        """All published events, optionally filtered by event name."""
        if name is None:
            return list(self._records)
        return [e for e in self._records if e.name == name]

    def __len__(self) -> int:
        return len(self._records)
