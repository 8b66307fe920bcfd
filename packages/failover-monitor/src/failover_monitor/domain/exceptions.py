"""Domain exceptions.

Exception hierarchy:
- MonitorError: Base exception for the failover monitor.
  - MonitorConfigError: Invalid configuration. Fatal at startup only.
  - StoreUnavailableError: The coordination store could not be reached.
    Non-fatal inside the monitor loop.
  - DirectiveError: A control-plane directive was not delivered.
    Raised per attempt by the control-plane adapter and converted into a
    logged failure; never escapes the adapter.

Probe failures are not exceptions: they are reported as unhealthy
HealthStatus values.
"""

from __future__ import annotations


class MonitorError(Exception):
    """Base exception for all failover monitor errors."""

    pass


class MonitorConfigError(MonitorError):
    """Raised when monitor configuration is invalid.

    Raised by domain value objects (e.g., MonitorSettings) and by the
    settings loader when environment values cannot be parsed.
    """

    pass


class StoreUnavailableError(MonitorError):
    """Raised when the coordination store cannot be read or written.

    Attributes:
        message: Human-readable error description.
        operation: Store operation that failed (e.g., "set_cluster_status").
        original_error: The underlying client exception, if any.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize StoreUnavailableError.

        Args:
            message: Human-readable error description.
            operation: Store operation that failed.
            original_error: The underlying exception that caused the failure.
        """
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.original_error = original_error


class DirectiveError(MonitorError):
    """Raised when a control-plane directive attempt fails.

    Attributes:
        message: Human-readable error description.
        url: Target URL of the directive.
        status_code: HTTP status returned by the instance, if a response arrived.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.status_code = status_code
