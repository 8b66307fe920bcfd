"""Fake event emitter for testing."""

from __future__ import annotations

from failover_monitor.domain.events import FailoverEvent, FailoverEventType


class FakeEventEmitter:
    """Fake implementation of EventEmitterPort that captures events."""

    def __init__(self) -> None:
        self._events: list[FailoverEvent] = []

    def emit(self, event: FailoverEvent) -> None:
        """Record emitted event."""
        self._events.append(event)

    @property
    def events(self) -> list[FailoverEvent]:
        """Return a copy of captured events."""
        return list(self._events)

    def types(self) -> list[FailoverEventType]:
        """Return the types of captured events in order."""
        return [event.event_type for event in self._events]

    def clear(self) -> None:
        """Clear captured events."""
        self._events.clear()
