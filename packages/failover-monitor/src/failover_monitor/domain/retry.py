"""Retry policy for best-effort control-plane directives."""

from __future__ import annotations

from dataclasses import dataclass

from failover_monitor.domain.exceptions import MonitorConfigError


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry with exponential backoff.

    The default performs no retries: a directive is sent once and a failure
    is only logged. Retries stay bounded because every backoff delays the
    monitor tick that issued the directive.

    Attributes:
        max_retries: Extra attempts after the first one. Must be non-negative.
        backoff_base: Delay before the first retry. Doubles on every retry.
        max_backoff: Upper bound of a single delay.
    """

    max_retries: int = 0
    backoff_base: float = 0.5
    max_backoff: float = 5.0

    def __post_init__(self) -> None:
        """Validate retry policy configuration."""
        if self.max_retries < 0:
            raise MonitorConfigError("max_retries cannot be negative")
        if self.backoff_base <= 0:
            raise MonitorConfigError("backoff_base must be positive")
        if self.max_backoff < self.backoff_base:
            raise MonitorConfigError("max_backoff cannot be below backoff_base")

    @property
    def max_attempts(self) -> int:
        """Total number of attempts, the first one included."""
        return self.max_retries + 1

    def backoff_for(self, retry: int) -> float:
        """Delay in seconds before the given retry (0-indexed)."""
        return float(min(self.backoff_base * (2**retry), self.max_backoff))

    def should_retry(self, attempt: int) -> bool:
        """Return True if another attempt may follow the given one (0-indexed)."""
        return attempt < self.max_retries
