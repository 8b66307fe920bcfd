"""Domain events for failover monitor transitions.

Events are immutable value objects representing decisions taken by the
failover state machine. They follow the frozen dataclass pattern used
throughout the domain layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from failover_monitor.domain.cluster import InstanceRole


class FailoverEventType(Enum):
    """Types of events emitted by the failover state machine.

    Attributes:
        PROMOTED_SECONDARY: The secondary was promoted to primary.
        RESTORED_PRIMARY: The original primary was restored.
        DUAL_OUTAGE: Promotion was due but the secondary was unhealthy too.
        CRITICAL_ALERT: The promoted secondary is unhealthy. Needs operators.
        RESTORE_GRACE_STARTED: The original primary is healthy again and the
            anti-flap grace period began.
        RESTORE_CANCELLED: The original primary failed during the grace period.
    """

    PROMOTED_SECONDARY = "promoted_secondary"
    RESTORED_PRIMARY = "restored_primary"
    DUAL_OUTAGE = "dual_outage"
    CRITICAL_ALERT = "critical_alert"
    RESTORE_GRACE_STARTED = "restore_grace_started"
    RESTORE_CANCELLED = "restore_cancelled"


@dataclass(frozen=True)
class FailoverEvent:
    """Immutable event describing one failover decision.

    Attributes:
        event_type: The type of event that occurred.
        designee: The instance serving as primary after the decision.
        timestamp: Unix timestamp of the tick that produced the event.
        reason: Optional human-readable reason for the event.
    """

    event_type: FailoverEventType
    designee: InstanceRole
    timestamp: float
    reason: str | None = None
