"""Fake adapters for testing.

This module provides test doubles for port interfaces, enabling
deterministic testing without real I/O operations.
"""

from failover_monitor.adapters.fakes.fake_clock import FakeClock
from failover_monitor.adapters.fakes.fake_control_plane import (
    DirectiveCall,
    FakeControlPlane,
)
from failover_monitor.adapters.fakes.fake_coordination_store import (
    FakeCoordinationStore,
)
from failover_monitor.adapters.fakes.fake_event_emitter import FakeEventEmitter
from failover_monitor.adapters.fakes.fake_health_probe import (
    FakeHealthProbe,
    ProbeCall,
)
from failover_monitor.adapters.fakes.fake_metrics import FakeMetricsAdapter, MetricCall

__all__ = [
    "FakeClock",
    "DirectiveCall",
    "FakeControlPlane",
    "FakeCoordinationStore",
    "FakeEventEmitter",
    "FakeHealthProbe",
    "ProbeCall",
    "FakeMetricsAdapter",
    "MetricCall",
]
