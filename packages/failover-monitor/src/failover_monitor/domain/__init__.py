"""Domain layer: Entities with zero external dependencies."""

from failover_monitor.domain.cluster import (
    ClusterStatus,
    InstanceRole,
    MonitorTelemetry,
)
from failover_monitor.domain.events import FailoverEvent, FailoverEventType
from failover_monitor.domain.exceptions import (
    DirectiveError,
    MonitorConfigError,
    MonitorError,
    StoreUnavailableError,
)
from failover_monitor.domain.health import HealthStatus
from failover_monitor.domain.retry import RetryPolicy
from failover_monitor.domain.settings import MonitorSettings
from failover_monitor.domain.state import MonitorPhase, MonitorState

__all__ = [
    "ClusterStatus",
    "InstanceRole",
    "MonitorTelemetry",
    "FailoverEvent",
    "FailoverEventType",
    "DirectiveError",
    "MonitorConfigError",
    "MonitorError",
    "StoreUnavailableError",
    "HealthStatus",
    "RetryPolicy",
    "MonitorSettings",
    "MonitorPhase",
    "MonitorState",
]
