"""Unit tests for MonitorLoop use case."""

from __future__ import annotations

import logging
from typing import Callable

import pytest

from failover_monitor.adapters.fakes import (
    FakeClock,
    FakeCoordinationStore,
    FakeHealthProbe,
)
from failover_monitor.domain.cluster import InstanceRole
from failover_monitor.domain.settings import MonitorSettings
from failover_monitor.domain.state import MonitorPhase, MonitorState
from failover_monitor.usecases.failover_state_machine import FailoverStateMachine
from failover_monitor.usecases.monitor_loop import MonitorLoop


class StubEvaluator:
    """Counts hydrate() and evaluate() calls, optionally running a hook."""

    def __init__(self, on_evaluate: Callable[[int], None] | None = None) -> None:
        self.hydrations = 0
        self.evaluations = 0
        self._on_evaluate = on_evaluate

    def hydrate(self) -> MonitorState:
        self.hydrations += 1
        return MonitorState()

    def evaluate(self) -> MonitorPhase:
        self.evaluations += 1
        if self._on_evaluate is not None:
            self._on_evaluate(self.evaluations)
        return MonitorPhase.MONITORING_PRIMARY


class SteppingClock:
    """Monotonic clock advancing a fixed step on every read."""

    def __init__(self, step: float = 0.0) -> None:
        self.now = 0.0
        self._step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self._step
        return value


@pytest.fixture
def store() -> FakeCoordinationStore:
    return FakeCoordinationStore()


@pytest.mark.tier(1)
@pytest.mark.tra("UseCase.MonitorLoop")
class TestTickWithoutLease:
    """tick() with the lease disabled."""

    def test_first_tick_hydrates_then_evaluates(self, store) -> None:
        evaluator = StubEvaluator()
        loop = MonitorLoop(evaluator, store, lease_ttl=0)

        assert loop.tick() == MonitorPhase.MONITORING_PRIMARY
        assert evaluator.hydrations == 1
        assert evaluator.evaluations == 1
        assert loop.ticks == 1

    def test_hydrates_only_once(self, store) -> None:
        evaluator = StubEvaluator()
        loop = MonitorLoop(evaluator, store, lease_ttl=0)

        loop.tick()
        loop.tick()
        loop.tick()

        assert evaluator.hydrations == 1
        assert evaluator.evaluations == 3

    def test_lease_untouched(self, store) -> None:
        loop = MonitorLoop(StubEvaluator(), store, lease_ttl=0)

        loop.tick()

        assert store.lease_holder is None
        assert not loop.holds_lease


@pytest.mark.tier(1)
@pytest.mark.tra("UseCase.MonitorLoop")
class TestTickWithLease:
    """tick() with the single-writer lease enabled."""

    def test_acquires_free_lease(self, store) -> None:
        evaluator = StubEvaluator()
        loop = MonitorLoop(evaluator, store, lease_ttl=30, monitor_id="monitor-a")

        assert loop.tick() == MonitorPhase.MONITORING_PRIMARY
        assert store.lease_holder == "monitor-a"
        assert loop.holds_lease

    def test_skips_tick_when_lease_held_elsewhere(self, store) -> None:
        store.lease_holder = "monitor-b"
        evaluator = StubEvaluator()
        loop = MonitorLoop(evaluator, store, lease_ttl=30, monitor_id="monitor-a")

        assert loop.tick() is None
        assert evaluator.hydrations == 0
        assert evaluator.evaluations == 0
        assert loop.ticks == 0

    def test_skips_tick_when_store_unavailable(self, store) -> None:
        store.set_available(False)
        evaluator = StubEvaluator()
        loop = MonitorLoop(evaluator, store, lease_ttl=30, monitor_id="monitor-a")

        assert loop.tick() is None
        assert evaluator.evaluations == 0

    def test_rehydrates_after_regaining_lease(self, store) -> None:
        evaluator = StubEvaluator()
        loop = MonitorLoop(evaluator, store, lease_ttl=30, monitor_id="monitor-a")

        loop.tick()
        store.lease_holder = "monitor-b"
        assert loop.tick() is None
        assert not loop.holds_lease
        store.expire_lease()
        loop.tick()

        assert evaluator.hydrations == 2
        assert evaluator.evaluations == 2

    def test_renewal_does_not_rehydrate(self, store) -> None:
        evaluator = StubEvaluator()
        loop = MonitorLoop(evaluator, store, lease_ttl=30, monitor_id="monitor-a")

        loop.tick()
        loop.tick()

        assert evaluator.hydrations == 1


@pytest.mark.tier(1)
@pytest.mark.tra("UseCase.MonitorLoop")
class TestRun:
    """run() scheduling and cancellation."""

    def test_stop_before_run_returns_immediately(self, store) -> None:
        evaluator = StubEvaluator()
        loop = MonitorLoop(evaluator, store, lease_ttl=0)
        loop.stop()

        loop.run()

        assert loop.stopped
        assert evaluator.evaluations == 0

    def test_runs_until_stopped(self, store) -> None:
        loop: MonitorLoop

        def stop_after_three(count: int) -> None:
            if count == 3:
                loop.stop()

        evaluator = StubEvaluator(on_evaluate=stop_after_three)
        loop = MonitorLoop(
            evaluator, store, poll_interval=0.01, lease_ttl=0, monotonic=SteppingClock()
        )

        loop.run()

        assert evaluator.evaluations == 3

    def test_tick_exception_does_not_end_loop(self, store, caplog) -> None:
        loop: MonitorLoop

        def fail_first(count: int) -> None:
            if count == 1:
                raise RuntimeError("boom")
            loop.stop()

        evaluator = StubEvaluator(on_evaluate=fail_first)
        loop = MonitorLoop(
            evaluator, store, poll_interval=0.01, lease_ttl=0, monotonic=SteppingClock()
        )

        with caplog.at_level(logging.ERROR):
            loop.run()

        assert evaluator.evaluations == 2
        assert "Monitor tick failed" in caplog.text

    def test_overrun_is_logged(self, store, caplog) -> None:
        loop: MonitorLoop

        def stop_after_two(count: int) -> None:
            if count == 2:
                loop.stop()

        evaluator = StubEvaluator(on_evaluate=stop_after_two)
        loop = MonitorLoop(
            evaluator,
            store,
            poll_interval=10.0,
            lease_ttl=0,
            monotonic=SteppingClock(step=15.0),
        )

        with caplog.at_level(logging.WARNING):
            loop.run()

        assert "overran" in caplog.text


@pytest.mark.tier(1)
@pytest.mark.tra("UseCase.MonitorLoop")
class TestLeaseHandoverWithStateMachine:
    """Lease loss and recovery with a real FailoverStateMachine."""

    def test_unwritten_promotion_dropped_after_lease_handover(
        self,
        machine: FailoverStateMachine,
        probe: FakeHealthProbe,
        store: FakeCoordinationStore,
        clock: FakeClock,
        settings: MonitorSettings,
    ) -> None:
        loop = MonitorLoop(machine, store, lease_ttl=30, monitor_id="monitor-a")
        store.fail_operation("set_cluster_status")
        probe.set_healthy(settings.primary_url, False)
        for _ in range(settings.max_consecutive_failures):
            loop.tick()
            clock.advance(settings.poll_interval)
        assert machine.pending_status["primary_instance"] == "secondary"

        # Another monitor takes over and restores the primary
        store.lease_holder = "monitor-b"
        assert loop.tick() is None
        store.status = {"primary_instance": "primary"}
        store.fail_operation("set_cluster_status", failing=False)
        probe.set_healthy(settings.primary_url, True)
        store.expire_lease()
        clock.advance(settings.poll_interval)

        assert loop.tick() == MonitorPhase.MONITORING_PRIMARY
        assert store.status == {"primary_instance": "primary"}
        assert machine.pending_status == {}
        assert machine.state.designee == InstanceRole.PRIMARY
        assert store.telemetry["current_primary"] == "primary"

    def test_store_record_read_after_lease_regained(
        self,
        machine: FailoverStateMachine,
        store: FakeCoordinationStore,
        settings: MonitorSettings,
        probe: FakeHealthProbe,
    ) -> None:
        loop = MonitorLoop(machine, store, lease_ttl=30, monitor_id="monitor-a")
        loop.tick()
        store.lease_holder = "monitor-b"
        loop.tick()
        store.status = {"primary_instance": "secondary"}
        store.expire_lease()
        probe.set_healthy(settings.primary_url, False)
        probe.clear_calls()

        assert loop.tick() == MonitorPhase.MONITORING_SECONDARY_AS_PRIMARY
        assert probe.calls[0].base_url == settings.secondary_url
