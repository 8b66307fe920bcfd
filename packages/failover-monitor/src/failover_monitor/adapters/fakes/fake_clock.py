"""Fake time provider for deterministic tests."""

from __future__ import annotations


class FakeClock:
    """Manually advanced implementation of TimeProvider.

    Example:
        >>> clock = FakeClock(start=1_000.0)
        >>> clock.advance(10)
        >>> clock.get_time_seconds()
        1010.0
    """

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        """Initialize the clock at a fixed Unix timestamp."""
        self._now = float(start)

    def get_time_seconds(self) -> float:
        """Return the current fake time."""
        return self._now

    def advance(self, seconds: float) -> None:
        """Move the clock forward (or backward, with a negative value)."""
        self._now += seconds

    def set(self, timestamp: float) -> None:
        """Jump to an absolute timestamp."""
        self._now = float(timestamp)
