"""Shared fixtures for failover-monitor core unit tests."""

from __future__ import annotations

import pytest

from failover_monitor.adapters.fakes import (
    FakeClock,
    FakeControlPlane,
    FakeCoordinationStore,
    FakeEventEmitter,
    FakeHealthProbe,
    FakeMetricsAdapter,
)
from failover_monitor.domain.settings import MonitorSettings
from failover_monitor.usecases.failover_state_machine import FailoverStateMachine

PRIMARY_URL = "http://primary:8080"
SECONDARY_URL = "http://secondary:8080"


@pytest.fixture
def settings() -> MonitorSettings:
    """Default settings: 3 failures / 30s timeout, 10s poll, 30s grace."""
    return MonitorSettings(
        primary_url=PRIMARY_URL,
        secondary_url=SECONDARY_URL,
        store_url="redis://redis:6379",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(start=1_700_000_000.0)


@pytest.fixture
def probe() -> FakeHealthProbe:
    return FakeHealthProbe()


@pytest.fixture
def store() -> FakeCoordinationStore:
    return FakeCoordinationStore()


@pytest.fixture
def control_plane() -> FakeControlPlane:
    return FakeControlPlane()


@pytest.fixture
def events() -> FakeEventEmitter:
    return FakeEventEmitter()


@pytest.fixture
def metrics() -> FakeMetricsAdapter:
    return FakeMetricsAdapter()


@pytest.fixture
def machine(
    settings: MonitorSettings,
    probe: FakeHealthProbe,
    store: FakeCoordinationStore,
    control_plane: FakeControlPlane,
    clock: FakeClock,
    events: FakeEventEmitter,
    metrics: FakeMetricsAdapter,
) -> FailoverStateMachine:
    """State machine wired to fakes, starting in MONITORING_PRIMARY."""
    return FailoverStateMachine(
        settings=settings,
        probe=probe,
        store=store,
        control_plane=control_plane,
        clock=clock,
        events=events,
        metrics=metrics,
    )
