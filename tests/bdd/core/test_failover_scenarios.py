"""BDD step definitions for failover.feature.

Drives the FailoverStateMachine with fake probes, store and control plane.
"""

from __future__ import annotations

from typing import Any

import pytest
from pytest_bdd import given, parsers, scenario, then, when

from failover_monitor.adapters.fakes import (
    DirectiveCall,
    FakeClock,
    FakeControlPlane,
    FakeCoordinationStore,
    FakeEventEmitter,
    FakeHealthProbe,
)
from failover_monitor.domain.cluster import parse_timestamp
from failover_monitor.domain.events import FailoverEventType
from failover_monitor.domain.settings import MonitorSettings
from failover_monitor.domain.state import MonitorPhase
from failover_monitor.usecases.failover_state_machine import FailoverStateMachine

# Type alias for BDD context dict
Context = dict[str, Any]

FEATURE = "../../features/core/failover.feature"
PRIMARY_URL = "http://primary:8080"
SECONDARY_URL = "http://secondary:8080"


# ----- Scenarios (linked to feature file) -----


@pytest.mark.tier(1)
@pytest.mark.tra("UseCase.FailoverStateMachine")
@scenario(FEATURE, "Secondary is promoted after consecutive primary failures")
def test_promotion_after_consecutive_failures() -> None:
    pass


@pytest.mark.tier(1)
@pytest.mark.tra("UseCase.FailoverStateMachine")
@scenario(FEATURE, "Secondary is promoted when the failover timeout elapses")
def test_promotion_after_timeout() -> None:
    pass


@pytest.mark.tier(1)
@pytest.mark.tra("UseCase.FailoverStateMachine")
@scenario(FEATURE, "No promotion while both instances are down")
def test_no_promotion_during_dual_outage() -> None:
    pass


@pytest.mark.tier(1)
@pytest.mark.tra("UseCase.FailoverStateMachine")
@scenario(FEATURE, "Primary is restored after the grace period")
def test_restoration_after_grace_period() -> None:
    pass


@pytest.mark.tier(1)
@pytest.mark.tra("UseCase.FailoverStateMachine")
@scenario(FEATURE, "Flapping primary is not restored")
def test_flapping_primary_not_restored() -> None:
    pass


@pytest.mark.tier(1)
@pytest.mark.tra("UseCase.FailoverStateMachine")
@scenario(FEATURE, "Restarted monitor resumes from the stored designee")
def test_restart_resumes_from_store() -> None:
    pass


@pytest.mark.tier(1)
@pytest.mark.tra("UseCase.FailoverStateMachine")
@scenario(FEATURE, "Promotion is recorded once the store comes back")
def test_promotion_reconciled_with_store() -> None:
    pass


# ----- Fixtures -----


@pytest.fixture
def context() -> Context:
    """Shared context for passing state between steps."""
    return {
        "clock": FakeClock(),
        "probe": FakeHealthProbe(),
        "store": FakeCoordinationStore(),
        "control_plane": FakeControlPlane(),
        "events": FakeEventEmitter(),
        "machine": None,
    }


# ----- Background step -----


@given(
    parsers.parse(
        "a monitor with {failures:d} allowed failures, a {timeout:d} second "
        "failover timeout and a {grace:d} second grace period"
    )
)
def given_monitor(context: Context, failures: int, timeout: int, grace: int) -> None:
    settings = MonitorSettings(
        primary_url=PRIMARY_URL,
        secondary_url=SECONDARY_URL,
        store_url="redis://redis:6379",
        max_consecutive_failures=failures,
        failover_timeout=timeout,
        restore_grace_period=grace,
    )
    context["settings"] = settings
    context["machine"] = FailoverStateMachine(
        settings=settings,
        probe=context["probe"],
        store=context["store"],
        control_plane=context["control_plane"],
        clock=context["clock"],
        events=context["events"],
    )


# ----- Health steps -----


@given("the primary is unhealthy")
@when("the primary is unhealthy")
def primary_unhealthy(context: Context) -> None:
    context["probe"].set_healthy(PRIMARY_URL, False)


@given("the primary is healthy")
def primary_healthy(context: Context) -> None:
    context["probe"].set_healthy(PRIMARY_URL, True)


@given("the secondary is unhealthy")
def secondary_unhealthy(context: Context) -> None:
    context["probe"].set_healthy(SECONDARY_URL, False)


@given("the secondary was promoted")
def secondary_was_promoted(context: Context) -> None:
    context["probe"].set_healthy(PRIMARY_URL, False)
    _advance(context, 3, 10)
    assert context["machine"].phase == MonitorPhase.MONITORING_SECONDARY_AS_PRIMARY


# ----- Store steps -----


@given("the store says the secondary is primary")
def store_says_secondary(context: Context) -> None:
    context["store"].status = {"primary_instance": "secondary"}


@given("the store is unavailable")
def store_unavailable(context: Context) -> None:
    context["store"].set_available(False)


@when("the store becomes available")
def store_available(context: Context) -> None:
    context["store"].set_available(True)


# ----- Monitor steps -----


@when(parsers.parse("the monitor runs {count:d} ticks {interval:d} seconds apart"))
def run_ticks(context: Context, count: int, interval: int) -> None:
    _advance(context, count, interval)


def _advance(context: Context, count: int, interval: int) -> None:
    for _ in range(count):
        context["machine"].evaluate()
        context["clock"].advance(interval)


@when("the monitor starts")
def monitor_starts(context: Context) -> None:
    context["machine"].hydrate()


# ----- Outcome steps -----


@then(parsers.parse("the cluster status names the {role} as primary"))
def status_names(context: Context, role: str) -> None:
    assert context["store"].status["primary_instance"] == role


@then("the secondary received a promote directive")
def promote_directive_sent(context: Context) -> None:
    assert DirectiveCall("promote", SECONDARY_URL) in context["control_plane"].calls


@then("no cluster status was written")
def no_status_written(context: Context) -> None:
    assert context["store"].status_writes == []


@then("a dual outage was reported")
def dual_outage_reported(context: Context) -> None:
    assert FailoverEventType.DUAL_OUTAGE in context["events"].types()


@then("the monitor is watching the primary again")
def watching_primary(context: Context) -> None:
    assert context["machine"].phase == MonitorPhase.MONITORING_PRIMARY


@then("the monitor is watching the secondary as primary")
def watching_secondary(context: Context) -> None:
    assert context["machine"].phase == MonitorPhase.MONITORING_SECONDARY_AS_PRIMARY


@then("the restore time is later than the failover time")
def restore_after_failover(context: Context) -> None:
    status = context["store"].status
    assert parse_timestamp(status["restore_time"]) > parse_timestamp(
        status["failover_time"]
    )


@then("restoration was cancelled")
def restoration_cancelled(context: Context) -> None:
    assert FailoverEventType.RESTORE_CANCELLED in context["events"].types()
