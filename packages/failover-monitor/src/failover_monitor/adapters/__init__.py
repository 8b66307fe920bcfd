"""Interface adapters: ports plus HTTP, Redis and metrics adapters."""

from failover_monitor.adapters.ports import (
    ControlPlanePort,
    CoordinationStorePort,
    EventEmitterPort,
    HealthProbePort,
    RealTimeProvider,
    TimeProvider,
)
from failover_monitor.adapters.httpx_control_plane import HTTPXControlPlane
from failover_monitor.adapters.httpx_health_probe import HTTPXHealthProbe
from failover_monitor.adapters.metrics_port import MetricsPort, NoOpMetricsAdapter
from failover_monitor.adapters.redis_coordination_store import RedisCoordinationStore

__all__ = [
    "ControlPlanePort",
    "CoordinationStorePort",
    "EventEmitterPort",
    "HealthProbePort",
    "RealTimeProvider",
    "TimeProvider",
    "HTTPXControlPlane",
    "HTTPXHealthProbe",
    "MetricsPort",
    "NoOpMetricsAdapter",
    "RedisCoordinationStore",
]
