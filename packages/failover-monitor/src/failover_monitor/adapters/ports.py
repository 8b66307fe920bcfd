"""Port interfaces for the failover monitor.

Ports define the contracts that adapters must implement.
These are Protocol classes (structural subtyping) for flexible testing.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Iterable, Mapping, Protocol, runtime_checkable

if TYPE_CHECKING:
    from failover_monitor.domain.cluster import ClusterStatus
    from failover_monitor.domain.events import FailoverEvent
    from failover_monitor.domain.health import HealthStatus


@runtime_checkable
class HealthProbePort(Protocol):
    """Port interface for instance liveness probes.

    Contract:
        - probe() performs exactly one bounded-timeout request
        - Network errors, timeouts and non-2xx responses all map to unhealthy
        - probe() never raises and never retries
    """

    def probe(self, base_url: str, timeout: float) -> HealthStatus:
        """Probe the health endpoint of an instance.

        Args:
            base_url: Base URL of the instance (e.g., "http://primary:8080").
            timeout: Upper bound of the request in seconds.

        Returns:
            HealthStatus, healthy or unhealthy.
        """
        ...


@runtime_checkable
class CoordinationStorePort(Protocol):
    """Port interface for the shared coordination store.

    The store keeps two flat string records: the authoritative cluster status
    and the monitor telemetry. Writes are field-level upserts without
    compare-and-swap, so at most one writer should act at a time (see
    acquire_lease()).

    Contract:
        - Every method raises StoreUnavailableError if the store cannot be reached
        - set_* methods only touch the given fields (and, for the cluster
          status, the fields named in remove)
    """

    def get_cluster_status(self) -> ClusterStatus | None:
        """Read the cluster status record.

        Returns:
            The decoded record, or None if it was never written.

        Raises:
            StoreUnavailableError: If the store cannot be reached.
        """
        ...

    def set_cluster_status(
        self, fields: Mapping[str, str], remove: Iterable[str] = ()
    ) -> None:
        """Upsert fields of the cluster status record.

        Args:
            fields: Fields to write.
            remove: Field names to delete in the same atomic update.

        Raises:
            StoreUnavailableError: If the store cannot be reached.
        """
        ...

    def set_telemetry(self, fields: Mapping[str, str]) -> None:
        """Upsert fields of the monitor telemetry record.

        Raises:
            StoreUnavailableError: If the store cannot be reached.
        """
        ...

    def acquire_lease(self, holder_id: str, ttl_seconds: float) -> bool:
        """Take or renew the single-writer lease.

        Args:
            holder_id: Identity of the monitor asking for the lease.
            ttl_seconds: Lease lifetime. Renewing resets it.

        Returns:
            True if holder_id now holds the lease, False if another holder does.

        Raises:
            StoreUnavailableError: If the store cannot be reached.
        """
        ...


@runtime_checkable
class ControlPlanePort(Protocol):
    """Port interface for control-plane directives sent to instances.

    Contract:
        - Directives are best-effort: failures are logged, never raised
        - Each call is bounded by the adapter's timeout and retry policy
        - The return value only reports delivery; callers must not depend on it
          for the correctness of their own state
    """

    def promote(self, base_url: str) -> bool:
        """Ask a standby instance to take over as primary."""
        ...

    def demote_to_standby(self, base_url: str) -> bool:
        """Ask an instance to return to standby mode."""
        ...

    def activate(self, base_url: str) -> bool:
        """Ask the original primary to resume active mode."""
        ...


@runtime_checkable
class EventEmitterPort(Protocol):
    """Port interface for emitting failover events.

    Contract:
        - emit(event) delivers the event to all registered observers
        - emit() is fire-and-forget (no return value, no exceptions propagated)
    """

    def emit(self, event: FailoverEvent) -> None:
        """Emit a failover event to observers.

        Args:
            event: The FailoverEvent to emit.
        """
        ...


@runtime_checkable
class TimeProvider(Protocol):
    """Port interface for time operations.

    Implementations provide the current time as a Unix timestamp. This
    abstraction lets tests drive the state machine with a fake clock.

    Contract:
        - get_time_seconds() returns current Unix timestamp as float
        - Returned value must be non-negative
    """

    def get_time_seconds(self) -> float:
        """Return current Unix timestamp in seconds."""
        ...


class RealTimeProvider:
    """Default implementation: provides real system time.

    Uses time.time() to return the current Unix timestamp.
    """

    def get_time_seconds(self) -> float:
        """Return current Unix timestamp in seconds."""
        return time.time()
