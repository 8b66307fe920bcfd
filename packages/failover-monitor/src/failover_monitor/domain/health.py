"""Health status domain value object."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from failover_monitor.domain.exceptions import MonitorConfigError


@dataclass(frozen=True)
class HealthStatus:
    """Outcome of a single liveness probe against an instance.

    A probe always resolves to exactly one of two states:
    - healthy: the health endpoint answered 2xx within the timeout
    - unhealthy: network error, timeout, or non-2xx response

    This is a domain value object with zero external dependencies.

    Attributes:
        state: Either "healthy" or "unhealthy".
        error: Optional reason for an unhealthy outcome, used for logging.
    """

    state: Literal["healthy", "unhealthy"]
    error: str | None = None

    def __post_init__(self) -> None:
        """Validate health state after initialization."""
        self._validate_state()

    def _validate_state(self) -> None:
        """Validate that state is one of the allowed values."""
        valid_states = ("healthy", "unhealthy")
        if self.state not in valid_states:
            raise MonitorConfigError(
                f"health state must be one of {valid_states}, got: {self.state!r}"
            )

    @property
    def is_healthy(self) -> bool:
        """Return True if the probed instance is healthy."""
        return self.state == "healthy"

    @classmethod
    def healthy(cls) -> HealthStatus:
        """Build a healthy status."""
        return cls(state="healthy")

    @classmethod
    def unhealthy(cls, error: str | None = None) -> HealthStatus:
        """Build an unhealthy status with an optional reason."""
        return cls(state="unhealthy", error=error)
