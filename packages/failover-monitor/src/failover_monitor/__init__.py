"""failover-monitor: primary/secondary failover controller."""

__version__ = "0.1.0"

from failover_monitor.domain.cluster import ClusterStatus, InstanceRole
from failover_monitor.domain.exceptions import (
    MonitorConfigError,
    StoreUnavailableError,
)
from failover_monitor.domain.settings import MonitorSettings
from failover_monitor.domain.state import MonitorPhase
from failover_monitor.usecases.failover_state_machine import FailoverStateMachine
from failover_monitor.usecases.monitor_loop import MonitorLoop

__all__ = [
    "ClusterStatus",
    "InstanceRole",
    "MonitorConfigError",
    "StoreUnavailableError",
    "MonitorSettings",
    "MonitorPhase",
    "FailoverStateMachine",
    "MonitorLoop",
]
