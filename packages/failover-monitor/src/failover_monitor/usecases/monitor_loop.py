"""Monitor loop driving the failover state machine at a fixed interval."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Protocol

from failover_monitor.adapters.ports import CoordinationStorePort
from failover_monitor.domain.exceptions import StoreUnavailableError
from failover_monitor.domain.state import MonitorPhase, MonitorState

logger = logging.getLogger(__name__)


class Evaluator(Protocol):
    """What the loop needs from the state machine."""

    def hydrate(self) -> MonitorState: ...

    def evaluate(self) -> MonitorPhase: ...


class MonitorLoop:
    """Fixed-interval scheduler for FailoverStateMachine evaluations.

    Runs exactly one evaluation at a time in the caller's thread. run()
    waits on a cancellation event between ticks, so stop() (from a signal
    handler or another thread) ends the loop without waiting out the
    interval. Tests drive tick() directly.

    When lease_ttl is positive, every tick first takes or renews the
    single-writer lease in the coordination store. A monitor that does not
    hold the lease skips evaluation entirely, and a monitor that (re)gains
    it hydrates its state from the store before acting.
    """

    def __init__(
        self,
        state_machine: Evaluator,
        store: CoordinationStorePort,
        poll_interval: float = 10.0,
        lease_ttl: float = 0.0,
        monitor_id: str = "failover-monitor",
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the loop.

        Args:
            state_machine: The evaluator invoked once per tick.
            store: Coordination store used for the lease.
            poll_interval: Seconds between tick starts. Defaults to 10.0.
            lease_ttl: Lease lifetime in seconds. 0 disables the lease.
            monitor_id: Lease holder identity of this process.
            monotonic: Monotonic clock used for scheduling (injectable).
        """
        self._state_machine = state_machine
        self._store = store
        self._poll_interval = poll_interval
        self._lease_ttl = lease_ttl
        self._monitor_id = monitor_id
        self._monotonic = monotonic
        self._stop_event = threading.Event()
        self._hydrated = False
        self._holds_lease = False
        self.ticks = 0

    @property
    def holds_lease(self) -> bool:
        """True if this monitor held the lease at its last tick."""
        return self._holds_lease

    def stop(self) -> None:
        """Request the loop to stop after the current tick."""
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        """True once stop() has been called."""
        return self._stop_event.is_set()

    def tick(self) -> MonitorPhase | None:
        """Run one evaluation, if this monitor may act.

        Returns:
            The phase after the evaluation, or None if the tick was skipped
            because another monitor holds the lease or the lease could not
            be checked.
        """
        if self._lease_ttl > 0 and not self._check_lease():
            return None

        if not self._hydrated:
            self._state_machine.hydrate()
            self._hydrated = True

        self.ticks += 1
        return self._state_machine.evaluate()

    def _check_lease(self) -> bool:
        try:
            held = self._store.acquire_lease(self._monitor_id, self._lease_ttl)
        except StoreUnavailableError as e:
            logger.warning(f"Cannot check monitor lease, skipping tick: {e.message}")
            return False

        if held and not self._holds_lease:
            logger.info(f"Monitor lease acquired by {self._monitor_id}")
            # State may have moved on while another monitor was in charge
            self._hydrated = False
        elif not held and self._holds_lease:
            logger.warning(
                f"Monitor lease lost by {self._monitor_id}; standing by"
            )
        elif not held:
            logger.debug("Monitor lease held by another monitor; standing by")

        self._holds_lease = held
        return held

    def run(self) -> None:
        """Tick every poll_interval seconds until stop() is called.

        Exceptions escaping a tick are logged and the loop keeps going: no
        single failure is fatal to the monitor.
        """
        logger.info(
            f"Starting failover monitor loop (interval {self._poll_interval}s, "
            f"lease {'disabled' if self._lease_ttl <= 0 else f'{self._lease_ttl}s'})"
        )
        next_tick = self._monotonic()

        while not self._stop_event.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("Monitor tick failed; continuing")

            next_tick += self._poll_interval
            delay = next_tick - self._monotonic()
            if delay < 0:
                logger.warning(
                    f"Monitor tick overran the {self._poll_interval}s interval "
                    f"by {-delay:.1f}s"
                )
                next_tick = self._monotonic()
                delay = 0.0
            self._stop_event.wait(delay)

        logger.info("Failover monitor loop stopped")
