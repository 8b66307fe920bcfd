"""Fake metrics adapter for testing.

Provides a test double for MetricsPort that records all metric updates
for assertion in tests.
"""

from __future__ import annotations

from dataclasses import dataclass

from failover_monitor.domain.cluster import InstanceRole


@dataclass(frozen=True)
class MetricCall:
    """Record of a single metric update.

    Attributes:
        metric_name: Name of the metric that was updated.
        value: Value that was set (None for counter increments).
    """

    metric_name: str
    value: int | str | None = None


class FakeMetricsAdapter:
    """Fake implementation of MetricsPort for testing.

    Records all metric updates for later assertion. Provides methods
    to inspect current gauge values, counter totals and call history.
    """

    def __init__(self) -> None:
        """Initialize with no recorded state."""
        self.current_primary: InstanceRole | None = None
        self.consecutive_failures: int | None = None
        self.promotions = 0
        self.restorations = 0
        self.dual_outages = 0
        self._calls: list[MetricCall] = []

    @property
    def calls(self) -> list[MetricCall]:
        """Return a copy of all metric update calls in order."""
        return list(self._calls)

    def set_current_primary(self, designee: InstanceRole) -> None:
        self.current_primary = designee
        self._calls.append(MetricCall("current_primary", designee.value))

    def set_consecutive_failures(self, count: int) -> None:
        self.consecutive_failures = count
        self._calls.append(MetricCall("consecutive_failures", count))

    def record_promotion(self) -> None:
        self.promotions += 1
        self._calls.append(MetricCall("promotions"))

    def record_restoration(self) -> None:
        self.restorations += 1
        self._calls.append(MetricCall("restorations"))

    def record_dual_outage(self) -> None:
        self.dual_outages += 1
        self._calls.append(MetricCall("dual_outages"))

    def reset(self) -> None:
        """Reset all state and calls."""
        self.__init__()  # type: ignore[misc]
