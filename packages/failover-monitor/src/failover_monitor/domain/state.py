"""In-process monitor state owned by the failover state machine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from failover_monitor.domain.cluster import InstanceRole


class MonitorPhase(Enum):
    """Phases of the failover state machine.

    State Machine:
        MONITORING_PRIMARY -> FAILOVER_ARMED: primary probe fails
        FAILOVER_ARMED -> MONITORING_PRIMARY: primary recovers, or threshold
            reached while the secondary is also down
        FAILOVER_ARMED -> PROMOTED_SECONDARY: threshold reached, secondary healthy
        PROMOTED_SECONDARY -> MONITORING_SECONDARY_AS_PRIMARY: same tick
        MONITORING_SECONDARY_AS_PRIMARY -> RESTORE_GRACE: original primary healthy
        RESTORE_GRACE -> MONITORING_SECONDARY_AS_PRIMARY: primary fails in grace
        RESTORE_GRACE -> MONITORING_PRIMARY: grace period elapsed
    """

    MONITORING_PRIMARY = "monitoring_primary"
    FAILOVER_ARMED = "failover_armed"
    PROMOTED_SECONDARY = "promoted_secondary"
    MONITORING_SECONDARY_AS_PRIMARY = "monitoring_secondary_as_primary"
    RESTORE_GRACE = "restore_grace"


@dataclass
class MonitorState:
    """Mutable counters and timers of one monitor process.

    Never shared across threads: only the monitor loop's single execution
    context mutates it, so no locking is needed. Durable facts live in the
    coordination store, not here.

    Attributes:
        phase: Current state machine phase.
        designee: Instance currently serving as primary.
        consecutive_failures: Failed probes of the primary in the current window.
        failure_window_start: Timestamp of the first failure in the window.
        restore_grace_start: Timestamp the restore grace period began.
    """

    phase: MonitorPhase = MonitorPhase.MONITORING_PRIMARY
    designee: InstanceRole = InstanceRole.PRIMARY
    consecutive_failures: int = 0
    failure_window_start: float | None = None
    restore_grace_start: float | None = None

    @classmethod
    def for_designee(cls, designee: InstanceRole) -> MonitorState:
        """Build the initial state for a known designee."""
        if designee == InstanceRole.SECONDARY:
            return cls(
                phase=MonitorPhase.MONITORING_SECONDARY_AS_PRIMARY,
                designee=InstanceRole.SECONDARY,
            )
        return cls()

    def record_failure(self, now: float) -> None:
        """Count a failed primary probe, opening the window if needed."""
        self.consecutive_failures += 1
        if self.failure_window_start is None:
            self.failure_window_start = now

    def reset_failures(self) -> None:
        """Clear the failure counter and window."""
        self.consecutive_failures = 0
        self.failure_window_start = None

    def failure_window_elapsed(self, now: float) -> float:
        """Seconds since the first failure of the window (0 if no window)."""
        if self.failure_window_start is None:
            return 0.0
        return now - self.failure_window_start

    def restore_grace_elapsed(self, now: float) -> float:
        """Seconds since the restore grace period began (0 if not started)."""
        if self.restore_grace_start is None:
            return 0.0
        return now - self.restore_grace_start
