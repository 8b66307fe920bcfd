"""Fake health probe for testing."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from failover_monitor.domain.health import HealthStatus


@dataclass(frozen=True)
class ProbeCall:
    """Record of a single probe() call.

    Attributes:
        base_url: Instance that was probed.
        timeout: Timeout passed by the caller.
    """

    base_url: str
    timeout: float


class FakeHealthProbe:
    """Fake implementation of HealthProbePort with per-instance outcomes.

    Each instance has a standing health (healthy unless changed) and an
    optional queue of scripted outcomes consumed first, one per probe.

    Example:
        >>> probe = FakeHealthProbe()
        >>> probe.set_healthy("http://primary:8080", False)
        >>> probe.probe("http://primary:8080", 5.0).is_healthy
        False
    """

    def __init__(self) -> None:
        self._standing: dict[str, bool] = {}
        self._scripted: dict[str, deque[bool]] = {}
        self._calls: list[ProbeCall] = []

    def probe(self, base_url: str, timeout: float) -> HealthStatus:
        """Return the next scripted outcome, or the standing health."""
        self._calls.append(ProbeCall(base_url=base_url, timeout=timeout))

        queue = self._scripted.get(base_url)
        if queue:
            healthy = queue.popleft()
        else:
            healthy = self._standing.get(base_url, True)

        if healthy:
            return HealthStatus.healthy()
        return HealthStatus.unhealthy("fake outage")

    def set_healthy(self, base_url: str, healthy: bool) -> None:
        """Set the standing health of an instance."""
        self._standing[base_url] = healthy

    def script(self, base_url: str, *outcomes: bool) -> None:
        """Queue outcomes returned by the next probes of an instance."""
        self._scripted.setdefault(base_url, deque()).extend(outcomes)

    @property
    def calls(self) -> list[ProbeCall]:
        """Return a copy of all recorded probe calls."""
        return list(self._calls)

    def calls_for(self, base_url: str) -> int:
        """Return how many times an instance was probed."""
        return sum(1 for call in self._calls if call.base_url == base_url)

    def clear_calls(self) -> None:
        """Clear the recorded calls."""
        self._calls.clear()
