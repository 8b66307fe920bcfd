"""Factory functions wiring the failover monitor from settings.

Handles the optional prometheus-client dependency gracefully.
"""

from __future__ import annotations

from failover_monitor.adapters.httpx_control_plane import HTTPXControlPlane
from failover_monitor.adapters.httpx_health_probe import HTTPXHealthProbe
from failover_monitor.adapters.metrics_port import MetricsPort, NoOpMetricsAdapter
from failover_monitor.adapters.ports import EventEmitterPort
from failover_monitor.adapters.redis_coordination_store import RedisCoordinationStore
from failover_monitor.domain.retry import RetryPolicy
from failover_monitor.domain.settings import MonitorSettings
from failover_monitor.usecases.failover_state_machine import FailoverStateMachine
from failover_monitor.usecases.monitor_loop import MonitorLoop


class PrometheusNotInstalledError(ImportError):
    """Raised when metrics are enabled but prometheus-client is not installed.

    Install with: pip install failover-monitor[metrics]
    """

    def __init__(self) -> None:
        super().__init__(
            "prometheus-client is not installed. "
            "Install with: pip install failover-monitor[metrics]"
        )


def create_metrics(settings: MonitorSettings) -> MetricsPort:
    """Create the metrics adapter for the given settings.

    Returns:
        PrometheusMetricsAdapter when metrics_port is set, NoOpMetricsAdapter
        otherwise.

    Raises:
        PrometheusNotInstalledError: If metrics are enabled but
            prometheus-client is not installed.
    """
    if settings.metrics_port is None:
        return NoOpMetricsAdapter()

    try:
        from failover_monitor.adapters.prometheus_metrics import (
            PrometheusMetricsAdapter,
        )

        return PrometheusMetricsAdapter()
    except ImportError as exc:
        raise PrometheusNotInstalledError() from exc


def create_monitor_loop(
    settings: MonitorSettings,
    metrics: MetricsPort | None = None,
    events: EventEmitterPort | None = None,
) -> MonitorLoop:
    """Create a MonitorLoop with HTTPX and Redis adapters.

    Args:
        settings: Validated monitor settings.
        metrics: Metrics port. Defaults to create_metrics(settings).
        events: Optional observer of failover decisions.

    Returns:
        A MonitorLoop ready to run().

    Example:
        >>> settings = load_settings()
        >>> loop = create_monitor_loop(settings)
        >>> loop.run()
    """
    store = RedisCoordinationStore.from_url(
        settings.store_url,
        key_prefix=settings.store_key_prefix,
        timeout=settings.probe_timeout,
    )
    state_machine = FailoverStateMachine(
        settings=settings,
        probe=HTTPXHealthProbe(health_path=settings.health_path),
        store=store,
        control_plane=HTTPXControlPlane(
            cluster_path=settings.cluster_path,
            timeout=settings.directive_timeout,
            retry_policy=RetryPolicy(max_retries=settings.directive_retries),
        ),
        events=events,
        metrics=metrics if metrics is not None else create_metrics(settings),
    )
    return MonitorLoop(
        state_machine=state_machine,
        store=store,
        poll_interval=settings.poll_interval,
        lease_ttl=settings.lease_ttl,
        monitor_id=settings.monitor_id,
    )
