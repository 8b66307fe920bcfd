"""Fake coordination store for testing."""

from __future__ import annotations

from typing import Iterable, Mapping

from failover_monitor.domain.cluster import ClusterStatus
from failover_monitor.domain.exceptions import StoreUnavailableError


class FakeCoordinationStore:
    """In-memory implementation of CoordinationStorePort.

    Keeps both records as plain string dicts, records every write, and can
    be switched into an unavailable mode to exercise error handling, either
    entirely or per operation. The lease ignores TTL expiry unless
    expire_lease() is called.

    Example:
        >>> store = FakeCoordinationStore()
        >>> store.set_cluster_status({"primary_instance": "secondary"})
        >>> store.status["primary_instance"]
        'secondary'
    """

    def __init__(self) -> None:
        self.status: dict[str, str] = {}
        self.telemetry: dict[str, str] = {}
        self.status_writes: list[dict[str, str]] = []
        self.status_removals: list[tuple[str, ...]] = []
        self.telemetry_writes: list[dict[str, str]] = []
        self.lease_holder: str | None = None
        self._available = True
        self._failing: set[str] = set()

    def set_available(self, available: bool) -> None:
        """Make every subsequent call succeed (True) or fail (False)."""
        self._available = available

    def fail_operation(self, operation: str, failing: bool = True) -> None:
        """Make calls to one operation (e.g., "set_cluster_status") fail."""
        if failing:
            self._failing.add(operation)
        else:
            self._failing.discard(operation)

    def expire_lease(self) -> None:
        """Drop the current lease holder, as a TTL expiry would."""
        self.lease_holder = None

    def _check_available(self, operation: str) -> None:
        if not self._available or operation in self._failing:
            raise StoreUnavailableError(
                "fake store is unavailable", operation=operation
            )

    def get_cluster_status(self) -> ClusterStatus | None:
        """Decode the status record, or None if never written."""
        self._check_available("get_cluster_status")
        if "primary_instance" not in self.status:
            return None
        return ClusterStatus.from_fields(self.status)

    def set_cluster_status(
        self, fields: Mapping[str, str], remove: Iterable[str] = ()
    ) -> None:
        """Delete the removed fields, upsert status fields and record the write."""
        self._check_available("set_cluster_status")
        removed = tuple(name for name in remove if name not in fields)
        for name in removed:
            self.status.pop(name, None)
        self.status.update(fields)
        self.status_writes.append(dict(fields))
        if removed:
            self.status_removals.append(removed)

    def set_telemetry(self, fields: Mapping[str, str]) -> None:
        """Upsert telemetry fields and record the write."""
        self._check_available("set_telemetry")
        self.telemetry.update(fields)
        self.telemetry_writes.append(dict(fields))

    def acquire_lease(self, holder_id: str, ttl_seconds: float) -> bool:
        """Grant the lease to the first holder until it expires."""
        self._check_available("acquire_lease")
        if self.lease_holder is None:
            self.lease_holder = holder_id
        return self.lease_holder == holder_id
