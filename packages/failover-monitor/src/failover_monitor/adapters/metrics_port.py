"""Port interface and no-op implementation for metrics collection.

Metrics ports follow fire-and-forget semantics: implementations may
buffer, sample, or drop metrics as needed. No exceptions should propagate.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from failover_monitor.domain.cluster import InstanceRole


@runtime_checkable
class MetricsPort(Protocol):
    """Port interface for metrics collection.

    Contract:
        - All methods are fire-and-forget (no return value, no exceptions)
        - set_* methods update gauges, record_* methods increment counters
        - Implementations may no-op if metrics are disabled
    """

    def set_current_primary(self, designee: InstanceRole) -> None:
        """Set the designee gauge (1 = original primary, 0 = secondary)."""
        ...

    def set_consecutive_failures(self, count: int) -> None:
        """Set the consecutive primary failures gauge."""
        ...

    def record_promotion(self) -> None:
        """Count a promotion of the secondary."""
        ...

    def record_restoration(self) -> None:
        """Count a restoration of the original primary."""
        ...

    def record_dual_outage(self) -> None:
        """Count a promotion skipped because both instances were down."""
        ...


class NoOpMetricsAdapter:
    """No-operation metrics adapter for when metrics are disabled.

    All methods are no-ops. This allows use cases to unconditionally
    call metrics methods without checking if metrics are enabled.
    """

    def set_current_primary(self, designee: InstanceRole) -> None:
        """No-op."""
        pass

    def set_consecutive_failures(self, count: int) -> None:
        """No-op."""
        pass

    def record_promotion(self) -> None:
        """No-op."""
        pass

    def record_restoration(self) -> None:
        """No-op."""
        pass

    def record_dual_outage(self) -> None:
        """No-op."""
        pass
