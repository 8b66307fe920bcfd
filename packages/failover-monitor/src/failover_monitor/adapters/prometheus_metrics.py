"""Prometheus metrics adapter for the failover monitor.

Implements MetricsPort using prometheus-client library.
Gracefully handles missing prometheus-client (raises ImportError at init).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from failover_monitor.domain.cluster import InstanceRole

if TYPE_CHECKING:
    from prometheus_client import CollectorRegistry, Counter, Gauge


class PrometheusMetricsAdapter:
    """Prometheus implementation of MetricsPort.

    All metric names use a configurable prefix (default 'failover_monitor_').

    This adapter requires prometheus-client to be installed:
        pip install failover-monitor[metrics]

    Example:
        >>> adapter = PrometheusMetricsAdapter(prefix="agents_failover")
        >>> adapter.set_current_primary(InstanceRole.SECONDARY)
        >>> adapter.record_promotion()

    Raises:
        ImportError: If prometheus-client is not installed.
    """

    def __init__(
        self,
        prefix: str = "failover_monitor",
        registry: CollectorRegistry | None = None,
    ) -> None:
        """Initialize Prometheus gauges and counters.

        Args:
            prefix: Metric name prefix. Defaults to "failover_monitor".
            registry: Registry to register metrics with. Defaults to the
                     global prometheus-client registry.

        Raises:
            ImportError: If prometheus-client is not installed.
        """
        # Import here to make prometheus-client optional
        from prometheus_client import REGISTRY, Counter, Gauge

        registry = registry if registry is not None else REGISTRY

        self._current_primary: Gauge = Gauge(
            f"{prefix}_current_primary",
            "Designated primary: 1=original primary, 0=secondary",
            registry=registry,
        )
        self._consecutive_failures: Gauge = Gauge(
            f"{prefix}_consecutive_failures",
            "Consecutive failed health probes of the primary",
            registry=registry,
        )
        self._promotions: Counter = Counter(
            f"{prefix}_promotions",
            "Promotions of the secondary to primary",
            registry=registry,
        )
        self._restorations: Counter = Counter(
            f"{prefix}_restorations",
            "Restorations of the original primary",
            registry=registry,
        )
        self._dual_outages: Counter = Counter(
            f"{prefix}_dual_outages",
            "Promotions skipped because the secondary was unhealthy too",
            registry=registry,
        )

    def set_current_primary(self, designee: InstanceRole) -> None:
        """Set designee gauge: 1 for PRIMARY, 0 for SECONDARY."""
        self._current_primary.set(1 if designee == InstanceRole.PRIMARY else 0)

    def set_consecutive_failures(self, count: int) -> None:
        self._consecutive_failures.set(count)

    def record_promotion(self) -> None:
        self._promotions.inc()

    def record_restoration(self) -> None:
        self._restorations.inc()

    def record_dual_outage(self) -> None:
        self._dual_outages.inc()
