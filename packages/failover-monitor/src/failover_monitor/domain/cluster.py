"""Cluster membership value objects persisted in the coordination store.

The coordination store holds string values only. Timestamps are ISO-8601 in
UTC with seconds precision, roles are "primary" / "secondary" and counters are
decimal strings. Conversion to and from that wire form lives here so adapters
only move flat string mappings around.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Mapping

from failover_monitor.domain.exceptions import MonitorConfigError

FAILOVER_REASON_HEALTH_CHECK = "primary_health_check_failed"


class InstanceRole(Enum):
    """Physical instance that can be designated as the authoritative primary.

    Attributes:
        PRIMARY: The original primary instance.
        SECONDARY: The standby instance eligible for promotion.
    """

    PRIMARY = "primary"
    SECONDARY = "secondary"

    @classmethod
    def parse(cls, value: str) -> InstanceRole:
        """Parse a role from its wire value.

        Raises:
            MonitorConfigError: If the value is not a known role.
        """
        try:
            return cls(value.strip().lower())
        except ValueError as e:
            raise MonitorConfigError(
                f"instance role must be 'primary' or 'secondary', got: {value!r}"
            ) from e


def format_timestamp(seconds: float) -> str:
    """Format a Unix timestamp as an ISO-8601 UTC string."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc).isoformat(
        timespec="seconds"
    )


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp written by format_timestamp().

    Raises:
        MonitorConfigError: If the value is not a valid ISO-8601 timestamp.
    """
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise MonitorConfigError(f"invalid ISO-8601 timestamp: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class ClusterStatus:
    """Authoritative record of which instance serves as primary.

    Single logical record, last-write-wins. A partial instance (e.g., one
    built by promoted()) serializes only the fields it carries, which is how
    transitions perform field-level upserts.

    Attributes:
        primary_instance: The instance currently designated as primary.
        failover_time: When the secondary was last promoted.
        failover_reason: Short code explaining the last promotion.
        restore_time: When the original primary was last restored.
    """

    primary_instance: InstanceRole
    failover_time: datetime | None = None
    failover_reason: str | None = None
    restore_time: datetime | None = None

    @classmethod
    def promoted(
        cls, at: float, reason: str = FAILOVER_REASON_HEALTH_CHECK
    ) -> ClusterStatus:
        """Build the partial status written when the secondary is promoted."""
        return cls(
            primary_instance=InstanceRole.SECONDARY,
            failover_time=datetime.fromtimestamp(at, tz=timezone.utc),
            failover_reason=reason,
        )

    @classmethod
    def restored(cls, at: float) -> ClusterStatus:
        """Build the partial status written when the primary is restored."""
        return cls(
            primary_instance=InstanceRole.PRIMARY,
            restore_time=datetime.fromtimestamp(at, tz=timezone.utc),
        )

    @classmethod
    def from_fields(cls, fields: Mapping[str, str]) -> ClusterStatus:
        """Decode a status record from its string fields.

        Raises:
            MonitorConfigError: If primary_instance is missing or any field
                cannot be decoded.
        """
        if "primary_instance" not in fields:
            raise MonitorConfigError("cluster status is missing primary_instance")

        failover_time = fields.get("failover_time")
        restore_time = fields.get("restore_time")
        return cls(
            primary_instance=InstanceRole.parse(fields["primary_instance"]),
            failover_time=parse_timestamp(failover_time) if failover_time else None,
            failover_reason=fields.get("failover_reason") or None,
            restore_time=parse_timestamp(restore_time) if restore_time else None,
        )

    def to_fields(self) -> dict[str, str]:
        """Encode the fields this record carries as strings."""
        fields = {"primary_instance": self.primary_instance.value}
        if self.failover_time is not None:
            fields["failover_time"] = self.failover_time.isoformat(timespec="seconds")
        if self.failover_reason is not None:
            fields["failover_reason"] = self.failover_reason
        if self.restore_time is not None:
            fields["restore_time"] = self.restore_time.isoformat(timespec="seconds")
        return fields

    def removed_fields(self) -> tuple[str, ...]:
        """Names of stored fields a write of this record deletes.

        A promotion opens a new failover cycle: the restore_time left by the
        previous restoration would predate the new failover_time.
        """
        if self.primary_instance == InstanceRole.SECONDARY and self.restore_time is None:
            return ("restore_time",)
        return ()


@dataclass(frozen=True)
class MonitorTelemetry:
    """Per-tick liveness signal of the monitor. Not authoritative for routing.

    Attributes:
        last_check: Unix timestamp of the tick that produced this record.
        current_primary: The designee at the end of the tick.
        consecutive_failures: Failure count at the end of the tick.
    """

    last_check: float
    current_primary: InstanceRole
    consecutive_failures: int

    def __post_init__(self) -> None:
        """Validate telemetry values."""
        if self.consecutive_failures < 0:
            raise MonitorConfigError("consecutive_failures cannot be negative")

    def to_fields(self) -> dict[str, str]:
        """Encode the telemetry record as strings."""
        return {
            "last_check": format_timestamp(self.last_check),
            "current_primary": self.current_primary.value,
            "consecutive_failures": str(self.consecutive_failures),
        }
