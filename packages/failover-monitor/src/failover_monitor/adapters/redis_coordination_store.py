"""Redis implementation of the CoordinationStorePort.

Layout (with the default "agent:cluster" prefix):
    agent:cluster:status        hash: primary_instance, failover_time,
                                      failover_reason, restore_time
    agent:cluster:monitor       hash: last_check, current_primary,
                                      consecutive_failures
    agent:cluster:monitor:lease string: holder id, with a TTL
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

import redis

from failover_monitor.adapters.ports import CoordinationStorePort
from failover_monitor.domain.cluster import ClusterStatus
from failover_monitor.domain.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


def _decode(value: Any) -> Any:
    """Decode bytes returned by clients created without decode_responses."""
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


class RedisCoordinationStore:
    """Coordination store backed by Redis hashes.

    Every redis.RedisError is re-raised as StoreUnavailableError so callers
    handle a single error kind. Writes are HSET upserts (last write wins);
    a status write that removes fields runs HDEL and HSET in one transaction.
    """

    def __init__(self, client: redis.Redis, key_prefix: str = "agent:cluster") -> None:
        """Initialize the store.

        Args:
            client: Redis client. Responses may be bytes or str.
            key_prefix: Prefix of all keys used by the monitor.
        """
        self._client = client
        self.status_key = f"{key_prefix}:status"
        self.telemetry_key = f"{key_prefix}:monitor"
        self.lease_key = f"{key_prefix}:monitor:lease"

    @classmethod
    def from_url(
        cls,
        url: str,
        key_prefix: str = "agent:cluster",
        timeout: float = 5.0,
    ) -> RedisCoordinationStore:
        """Create a store from a redis:// connection string.

        Args:
            url: Redis connection string (e.g., "redis://redis:6379/0").
            key_prefix: Prefix of all keys used by the monitor.
            timeout: Socket connect and read timeout in seconds.
        """
        client = redis.Redis.from_url(
            url,
            socket_timeout=timeout,
            socket_connect_timeout=timeout,
            decode_responses=True,
        )
        return cls(client, key_prefix=key_prefix)

    def get_cluster_status(self) -> ClusterStatus | None:
        """Read the cluster status hash.

        Returns:
            The decoded record, or None if the hash does not exist.

        Raises:
            StoreUnavailableError: If Redis cannot be reached.
            MonitorConfigError: If the stored record cannot be decoded.
        """
        try:
            raw = self._client.hgetall(self.status_key)
        except redis.RedisError as e:
            raise StoreUnavailableError(
                f"cannot read {self.status_key}: {e}",
                operation="get_cluster_status",
                original_error=e,
            ) from e

        fields = {_decode(k): _decode(v) for k, v in raw.items()}
        if "primary_instance" not in fields:
            return None
        return ClusterStatus.from_fields(fields)

    def set_cluster_status(
        self, fields: Mapping[str, str], remove: Iterable[str] = ()
    ) -> None:
        """Upsert fields of the cluster status hash.

        Fields named in remove are deleted with HDEL in the same MULTI/EXEC
        transaction as the HSET.
        """
        removed = [name for name in remove if name not in fields]
        if not removed:
            self._hset(self.status_key, fields, "set_cluster_status")
            return

        try:
            pipe = self._client.pipeline(transaction=True)
            pipe.hdel(self.status_key, *removed)
            if fields:
                pipe.hset(self.status_key, mapping=dict(fields))
            pipe.execute()
        except redis.RedisError as e:
            raise StoreUnavailableError(
                f"cannot write {self.status_key}: {e}",
                operation="set_cluster_status",
                original_error=e,
            ) from e
        logger.debug(
            f"Wrote {sorted(fields)} and removed {removed} from {self.status_key}"
        )

    def set_telemetry(self, fields: Mapping[str, str]) -> None:
        """Upsert fields of the monitor telemetry hash."""
        self._hset(self.telemetry_key, fields, "set_telemetry")

    def acquire_lease(self, holder_id: str, ttl_seconds: float) -> bool:
        """Take the lease with SET NX PX, or renew it if already held.

        Returns:
            True if holder_id holds the lease after the call.

        Raises:
            StoreUnavailableError: If Redis cannot be reached.
        """
        ttl_ms = max(1, int(ttl_seconds * 1000))
        try:
            if self._client.set(self.lease_key, holder_id, nx=True, px=ttl_ms):
                return True
            if _decode(self._client.get(self.lease_key)) == holder_id:
                self._client.pexpire(self.lease_key, ttl_ms)
                return True
            return False
        except redis.RedisError as e:
            raise StoreUnavailableError(
                f"cannot acquire lease {self.lease_key}: {e}",
                operation="acquire_lease",
                original_error=e,
            ) from e

    def _hset(self, key: str, fields: Mapping[str, str], operation: str) -> None:
        if not fields:
            return
        try:
            self._client.hset(key, mapping=dict(fields))
        except redis.RedisError as e:
            raise StoreUnavailableError(
                f"cannot write {key}: {e}",
                operation=operation,
                original_error=e,
            ) from e
        logger.debug(f"Wrote {sorted(fields)} to {key}")


# Runtime protocol check
assert isinstance(RedisCoordinationStore(redis.Redis()), CoordinationStorePort)
