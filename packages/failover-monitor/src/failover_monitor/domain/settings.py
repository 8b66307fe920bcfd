"""Failover monitor settings domain entity."""

from __future__ import annotations

import math
from dataclasses import dataclass
from urllib.parse import urlparse

from failover_monitor.domain.exceptions import MonitorConfigError


@dataclass(frozen=True)
class MonitorSettings:
    """Failover monitor configuration.

    Domain entity with zero external dependencies. All durations are in
    seconds.

    Attributes:
        primary_url: Base URL of the original primary instance.
        secondary_url: Base URL of the standby instance.
        store_url: Connection string of the coordination store.
        failover_timeout: Seconds of continuous failure after which the
            secondary is promoted even below the failure threshold.
        poll_interval: Seconds between two evaluations of the monitor loop.
        max_consecutive_failures: Failed primary probes that trigger promotion.
        restore_grace_period: Seconds the original primary must stay healthy
            before it is restored.
        probe_timeout: Timeout of a single health probe.
        directive_timeout: Timeout of a single control-plane directive.
        directive_retries: Extra attempts for an undelivered directive.
        health_path: Path of the health endpoint on each instance.
        cluster_path: Path prefix of the control-plane directives.
        store_key_prefix: Prefix of the coordination store keys.
        lease_ttl: TTL of the single-writer lease. 0 disables the lease.
        monitor_id: Identity used as the lease holder.
        metrics_port: Port of the Prometheus exporter, or None to disable it.
    """

    primary_url: str
    secondary_url: str
    store_url: str
    failover_timeout: float = 30.0
    poll_interval: float = 10.0
    max_consecutive_failures: int = 3
    restore_grace_period: float = 30.0
    probe_timeout: float = 5.0
    directive_timeout: float = 5.0
    directive_retries: int = 0
    health_path: str = "/health"
    cluster_path: str = "/cluster"
    store_key_prefix: str = "agent:cluster"
    lease_ttl: float = 30.0
    monitor_id: str = "failover-monitor"
    metrics_port: int | None = None

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        self._validate_urls()
        self._validate_durations()
        self._validate_counts()
        self._validate_paths()
        self._validate_identity()

    def _validate_urls(self) -> None:
        """Validate instance URLs are absolute http(s) URLs and distinct."""
        for name, value in (
            ("primary_url", self.primary_url),
            ("secondary_url", self.secondary_url),
        ):
            parsed = urlparse(value)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise MonitorConfigError(
                    f"{name} must be an absolute http(s) URL, got: {value!r}"
                )

        if self.primary_url.rstrip("/") == self.secondary_url.rstrip("/"):
            raise MonitorConfigError("primary_url and secondary_url must differ")

        if not self.store_url or not self.store_url.strip():
            raise MonitorConfigError("store_url cannot be empty")

    def _validate_durations(self) -> None:
        """Validate that timing values are finite and positive (lease may be zero)."""
        for name, value in (
            ("failover_timeout", self.failover_timeout),
            ("poll_interval", self.poll_interval),
            ("restore_grace_period", self.restore_grace_period),
            ("probe_timeout", self.probe_timeout),
            ("directive_timeout", self.directive_timeout),
        ):
            if not math.isfinite(value) or value <= 0:
                raise MonitorConfigError(f"{name} must be positive, got: {value}")

        if not math.isfinite(self.lease_ttl):
            raise MonitorConfigError(f"lease_ttl must be finite, got: {self.lease_ttl}")
        if self.lease_ttl < 0:
            raise MonitorConfigError("lease_ttl cannot be negative")

        if 0 < self.lease_ttl <= self.poll_interval:
            raise MonitorConfigError(
                f"lease_ttl must exceed poll_interval ({self.poll_interval}), "
                f"got: {self.lease_ttl}"
            )

    def _validate_counts(self) -> None:
        if self.max_consecutive_failures < 1:
            raise MonitorConfigError("max_consecutive_failures must be at least 1")

        if self.directive_retries < 0:
            raise MonitorConfigError("directive_retries cannot be negative")

        if self.metrics_port is not None and not 0 < self.metrics_port < 65536:
            raise MonitorConfigError(
                f"metrics_port must be between 1 and 65535, got: {self.metrics_port}"
            )

    def _validate_paths(self) -> None:
        """Validate endpoint paths are absolute."""
        for name, value in (
            ("health_path", self.health_path),
            ("cluster_path", self.cluster_path),
        ):
            if not value.startswith("/"):
                raise MonitorConfigError(f"{name} must start with '/', got: {value!r}")

    def _validate_identity(self) -> None:
        if not self.monitor_id or not self.monitor_id.strip():
            raise MonitorConfigError("monitor_id cannot be empty or whitespace-only")

        if not self.store_key_prefix or not self.store_key_prefix.strip():
            raise MonitorConfigError("store_key_prefix cannot be empty")

    @property
    def lease_enabled(self) -> bool:
        """Return True if the single-writer lease is in use."""
        return self.lease_ttl > 0
