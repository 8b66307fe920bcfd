"""FailoverStateMachine use case deciding promotion and restoration."""

from __future__ import annotations

import logging

from failover_monitor.adapters.metrics_port import MetricsPort, NoOpMetricsAdapter
from failover_monitor.adapters.ports import (
    ControlPlanePort,
    CoordinationStorePort,
    EventEmitterPort,
    HealthProbePort,
    RealTimeProvider,
    TimeProvider,
)
from failover_monitor.domain.cluster import (
    FAILOVER_REASON_HEALTH_CHECK,
    ClusterStatus,
    InstanceRole,
    MonitorTelemetry,
)
from failover_monitor.domain.events import FailoverEvent, FailoverEventType
from failover_monitor.domain.exceptions import MonitorConfigError, StoreUnavailableError
from failover_monitor.domain.settings import MonitorSettings
from failover_monitor.domain.state import MonitorPhase, MonitorState

logger = logging.getLogger(__name__)

# CRITICAL_ALERT is the operator escalation signal
_LEVELS: dict[FailoverEventType, int] = {
    FailoverEventType.PROMOTED_SECONDARY: logging.WARNING,
    FailoverEventType.RESTORED_PRIMARY: logging.INFO,
    FailoverEventType.DUAL_OUTAGE: logging.ERROR,
    FailoverEventType.CRITICAL_ALERT: logging.CRITICAL,
    FailoverEventType.RESTORE_GRACE_STARTED: logging.INFO,
    FailoverEventType.RESTORE_CANCELLED: logging.WARNING,
}

_MESSAGES: dict[FailoverEventType, str] = {
    FailoverEventType.PROMOTED_SECONDARY: "FAILOVER: secondary promoted to primary",
    FailoverEventType.RESTORED_PRIMARY: "RESTORE: primary instance restored",
    FailoverEventType.DUAL_OUTAGE: "Secondary instance also unhealthy, cannot fail over",
    FailoverEventType.CRITICAL_ALERT: "CRITICAL: current primary is unhealthy",
    FailoverEventType.RESTORE_GRACE_STARTED: (
        "Primary instance is healthy again, restore grace period started"
    ),
    FailoverEventType.RESTORE_CANCELLED: "Restore cancelled",
}


class FailoverStateMachine:
    """Decides when to promote the secondary and when to restore the primary.

    One call to evaluate() is one monitor tick. Per tick it probes the
    instance(s) relevant to the current phase, updates the in-memory
    MonitorState, applies at most one transition and publishes telemetry.

    Transition rules:
        - Primary healthy while monitoring it: reset counters.
        - Primary unhealthy: count the failure, arm failover.
        - Armed and (failures >= max_consecutive_failures or failure window
          >= failover_timeout): promote the secondary if it is healthy,
          otherwise report a dual outage and start counting again. An
          unverified secondary is never promoted.
        - Secondary serving as primary and unhealthy: emit a critical alert.
          There is no second hop.
        - Secondary healthy and original primary healthy: start the restore
          grace period. Any primary failure during it cancels restoration.
        - Grace period elapsed with the primary healthy: restore it.

    Store failures never abort a tick. A cluster status write that fails is
    kept pending and retried at the start of the next ticks, so decisions
    reach the store in the order they were taken.

    Thread safety:
        Not thread-safe. The monitor loop is the only caller and runs one
        evaluation at a time.
    """

    def __init__(
        self,
        settings: MonitorSettings,
        probe: HealthProbePort,
        store: CoordinationStorePort,
        control_plane: ControlPlanePort,
        clock: TimeProvider | None = None,
        events: EventEmitterPort | None = None,
        metrics: MetricsPort | None = None,
    ) -> None:
        """Initialize the state machine in MONITORING_PRIMARY.

        Args:
            settings: Monitor configuration (URLs, thresholds, timeouts).
            probe: Port probing instance health.
            store: Port to the coordination store.
            control_plane: Port sending directives to instances.
            clock: Time source. Defaults to the system clock.
            events: Optional event emitter for failover decisions.
            metrics: Optional metrics port. Defaults to no-op.
        """
        self._settings = settings
        self._probe = probe
        self._store = store
        self._control_plane = control_plane
        self._clock = clock or RealTimeProvider()
        self._events = events
        self._metrics = metrics or NoOpMetricsAdapter()
        self._state = MonitorState()
        self._pending_status: dict[str, str] = {}
        self._pending_removals: set[str] = set()
        self._last_check: float | None = None

    @property
    def state(self) -> MonitorState:
        """Current in-process state."""
        return self._state

    @property
    def phase(self) -> MonitorPhase:
        """Current state machine phase."""
        return self._state.phase

    @property
    def pending_status(self) -> dict[str, str]:
        """Cluster status fields decided but not yet written to the store."""
        return dict(self._pending_status)

    def hydrate(self) -> MonitorState:
        """Load the designee from the coordination store.

        If the store says the secondary is primary, monitoring resumes in
        MONITORING_SECONDARY_AS_PRIMARY instead of probing the wrong
        instance. An unreachable store or unreadable record keeps the
        default initial state.

        Status writes still pending from an earlier period of control are
        dropped: the store is authoritative again once it is re-read.

        Returns:
            The state the machine starts from.
        """
        if self._pending_status or self._pending_removals:
            logger.warning(
                f"Dropping unwritten cluster status update {self._pending_status}"
            )
            self._pending_status = {}
            self._pending_removals = set()

        try:
            status = self._store.get_cluster_status()
        except StoreUnavailableError as e:
            logger.warning(
                f"Cannot read cluster status at startup ({e.message}); "
                f"assuming the primary instance is active"
            )
            return self._state
        except MonitorConfigError as e:
            logger.warning(
                f"Stored cluster status is unreadable ({e}); "
                f"assuming the primary instance is active"
            )
            return self._state

        if status is None:
            logger.info("No cluster status stored yet; monitoring the primary")
            return self._state

        self._state = MonitorState.for_designee(status.primary_instance)
        logger.info(
            f"Resuming with {status.primary_instance.value} instance as primary "
            f"(phase {self._state.phase.value})"
        )
        self._metrics.set_current_primary(self._state.designee)
        return self._state

    def evaluate(self) -> MonitorPhase:
        """Run one tick of the state machine.

        Returns:
            The phase after the tick.
        """
        now = self._clock.get_time_seconds()
        self._flush_pending_status()

        phase = self._state.phase
        if phase in (MonitorPhase.MONITORING_PRIMARY, MonitorPhase.FAILOVER_ARMED):
            self._evaluate_primary(now)
        elif phase == MonitorPhase.MONITORING_SECONDARY_AS_PRIMARY:
            self._evaluate_secondary_as_primary(now)
        elif phase == MonitorPhase.RESTORE_GRACE:
            self._evaluate_restore_grace(now)

        self._publish_telemetry(now)
        return self._state.phase

    def _evaluate_primary(self, now: float) -> None:
        settings = self._settings
        state = self._state

        health = self._probe.probe(settings.primary_url, settings.probe_timeout)
        if health.is_healthy:
            if state.phase == MonitorPhase.FAILOVER_ARMED:
                logger.info(
                    f"Primary recovered after {state.consecutive_failures} failed check(s)"
                )
            state.reset_failures()
            state.phase = MonitorPhase.MONITORING_PRIMARY
            return

        state.record_failure(now)
        state.phase = MonitorPhase.FAILOVER_ARMED
        logger.warning(
            f"Primary health check failed (attempt {state.consecutive_failures}/"
            f"{settings.max_consecutive_failures}): {health.error}"
        )

        if not self._failover_due(now):
            return

        secondary = self._probe.probe(settings.secondary_url, settings.probe_timeout)
        if secondary.is_healthy:
            self._promote(now)
            return

        self._emit(
            FailoverEventType.DUAL_OUTAGE,
            now,
            reason=f"secondary also unhealthy: {secondary.error}",
        )
        self._metrics.record_dual_outage()
        state.reset_failures()
        state.phase = MonitorPhase.MONITORING_PRIMARY

    def _failover_due(self, now: float) -> bool:
        state = self._state
        return (
            state.consecutive_failures >= self._settings.max_consecutive_failures
            or state.failure_window_elapsed(now) >= self._settings.failover_timeout
        )

    def _promote(self, now: float) -> None:
        state = self._state
        failures = state.consecutive_failures
        elapsed = state.failure_window_elapsed(now)
        state.phase = MonitorPhase.PROMOTED_SECONDARY

        self._control_plane.promote(self._settings.secondary_url)
        self._write_status(ClusterStatus.promoted(now, FAILOVER_REASON_HEALTH_CHECK))

        state.designee = InstanceRole.SECONDARY
        state.reset_failures()
        state.restore_grace_start = None
        state.phase = MonitorPhase.MONITORING_SECONDARY_AS_PRIMARY

        self._metrics.record_promotion()
        self._emit(
            FailoverEventType.PROMOTED_SECONDARY,
            now,
            reason=f"{FAILOVER_REASON_HEALTH_CHECK} "
            f"({failures} failure(s) over {elapsed:.0f}s)",
        )

    def _evaluate_secondary_as_primary(self, now: float) -> None:
        settings = self._settings

        secondary = self._probe.probe(settings.secondary_url, settings.probe_timeout)
        if not secondary.is_healthy:
            self._emit(
                FailoverEventType.CRITICAL_ALERT,
                now,
                reason=f"current primary (secondary instance) is unhealthy: "
                f"{secondary.error}",
            )
            return

        primary = self._probe.probe(settings.primary_url, settings.probe_timeout)
        if primary.is_healthy:
            self._state.restore_grace_start = now
            self._state.phase = MonitorPhase.RESTORE_GRACE
            self._emit(FailoverEventType.RESTORE_GRACE_STARTED, now)

    def _evaluate_restore_grace(self, now: float) -> None:
        settings = self._settings
        state = self._state

        primary = self._probe.probe(settings.primary_url, settings.probe_timeout)
        if not primary.is_healthy:
            state.restore_grace_start = None
            state.phase = MonitorPhase.MONITORING_SECONDARY_AS_PRIMARY
            self._emit(
                FailoverEventType.RESTORE_CANCELLED,
                now,
                reason=f"primary failed during grace period: {primary.error}",
            )
            return

        if state.restore_grace_elapsed(now) >= settings.restore_grace_period:
            self._restore(now)

    def _restore(self, now: float) -> None:
        self._control_plane.activate(self._settings.primary_url)
        self._control_plane.demote_to_standby(self._settings.secondary_url)
        self._write_status(ClusterStatus.restored(now))

        self._state = MonitorState()
        self._metrics.record_restoration()
        self._emit(FailoverEventType.RESTORED_PRIMARY, now)

    def _write_status(self, status: ClusterStatus) -> None:
        """Queue a cluster status update and try to write it right away."""
        fields = status.to_fields()
        for name in status.removed_fields():
            self._pending_status.pop(name, None)
            self._pending_removals.add(name)
        self._pending_removals.difference_update(fields)
        self._pending_status.update(fields)
        self._flush_pending_status()

    def _flush_pending_status(self) -> None:
        if not self._pending_status and not self._pending_removals:
            return
        try:
            self._store.set_cluster_status(
                self._pending_status, remove=sorted(self._pending_removals)
            )
        except StoreUnavailableError as e:
            logger.warning(
                f"Cluster status update deferred, store unavailable: {e.message}"
            )
            return
        logger.info(f"Cluster status updated: {self._pending_status}")
        self._pending_status = {}
        self._pending_removals = set()

    def _publish_telemetry(self, now: float) -> None:
        # last_check must not move backwards even if the wall clock does
        if self._last_check is not None:
            now = max(now, self._last_check)
        self._last_check = now

        state = self._state
        self._metrics.set_current_primary(state.designee)
        self._metrics.set_consecutive_failures(state.consecutive_failures)

        telemetry = MonitorTelemetry(
            last_check=now,
            current_primary=state.designee,
            consecutive_failures=state.consecutive_failures,
        )
        try:
            self._store.set_telemetry(telemetry.to_fields())
        except StoreUnavailableError as e:
            logger.warning(f"Telemetry not written, store unavailable: {e.message}")

    def _emit(
        self, event_type: FailoverEventType, now: float, reason: str | None = None
    ) -> None:
        """Log a decision and hand it to the event emitter, if any."""
        message = f"{_MESSAGES[event_type]} (designee={self._state.designee.value})"
        if reason:
            message = f"{message}: {reason}"
        logger.log(_LEVELS[event_type], message)

        if self._events is None:
            return
        self._events.emit(
            FailoverEvent(
                event_type=event_type,
                designee=self._state.designee,
                timestamp=now,
                reason=reason,
            )
        )
