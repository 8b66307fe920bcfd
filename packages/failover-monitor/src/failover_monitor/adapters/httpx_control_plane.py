"""HTTPX-based implementation of the ControlPlanePort.

Directives are POST requests to {base_url}{cluster_path}/<directive>. They are
best-effort: the coordination store record written by the state machine is
the authoritative decision, directives only nudge the instances.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

import httpx

from failover_monitor.adapters.ports import ControlPlanePort
from failover_monitor.domain.exceptions import DirectiveError
from failover_monitor.domain.retry import RetryPolicy

logger = logging.getLogger(__name__)


class HTTPXControlPlane:
    """HTTPX-based adapter issuing promote/standby/activate directives.

    Every attempt is bounded by the configured timeout. Undelivered
    directives are retried according to the RetryPolicy (no retries by
    default) and then logged. Nothing is raised to the caller.
    """

    def __init__(
        self,
        cluster_path: str = "/cluster",
        timeout: float = 5.0,
        retry_policy: RetryPolicy | None = None,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the HTTPX control-plane adapter.

        Args:
            cluster_path: Path prefix of the directive endpoints.
            timeout: Timeout of a single attempt in seconds. Defaults to 5.0.
            retry_policy: Retry policy for undelivered directives.
                         Defaults to a single attempt.
            client: Optional httpx.Client for dependency injection (testing).
                   If not provided, a new client is created per attempt.
            sleep: Function used to wait between attempts (injectable for tests).
        """
        self._cluster_path = cluster_path.rstrip("/")
        self._timeout = timeout
        self._retry_policy = retry_policy or RetryPolicy()
        self._client = client
        self._sleep = sleep

    def promote(self, base_url: str) -> bool:
        """Ask a standby instance to take over as primary."""
        return self._send(base_url, "promote")

    def demote_to_standby(self, base_url: str) -> bool:
        """Ask an instance to return to standby mode."""
        return self._send(base_url, "standby")

    def activate(self, base_url: str) -> bool:
        """Ask the original primary to resume active mode."""
        return self._send(base_url, "activate")

    def _send(self, base_url: str, directive: str) -> bool:
        """Deliver one directive, retrying per policy.

        Returns:
            True if an attempt got a 2xx answer, False otherwise.
        """
        url = f"{base_url.rstrip('/')}{self._cluster_path}/{directive}"

        attempt = 0
        while True:
            try:
                self._post(url)
                logger.info(f"Directive '{directive}' delivered to {base_url}")
                return True
            except DirectiveError as e:
                if not self._retry_policy.should_retry(attempt):
                    logger.warning(
                        f"Directive '{directive}' to {base_url} not delivered "
                        f"after {attempt + 1} attempt(s): {e.message}"
                    )
                    return False
                delay = self._retry_policy.backoff_for(attempt)
                logger.debug(
                    f"Directive '{directive}' attempt {attempt + 1} failed "
                    f"({e.message}); retrying in {delay}s"
                )
                self._sleep(delay)
                attempt += 1

    def _post(self, url: str) -> None:
        """Perform one attempt.

        Raises:
            DirectiveError: On transport error, timeout or non-2xx status.
        """
        try:
            if self._client is not None:
                response = self._client.post(url, timeout=self._timeout)
            else:
                with httpx.Client() as client:
                    response = client.post(url, timeout=self._timeout)
        except httpx.TimeoutException as e:
            raise DirectiveError(f"timeout after {self._timeout}s", url=url) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise DirectiveError(f"{type(e).__name__}: {e}", url=url) from e

        if not response.is_success:
            raise DirectiveError(
                f"HTTP {response.status_code}",
                url=url,
                status_code=response.status_code,
            )


# Runtime protocol check
assert isinstance(HTTPXControlPlane(), ControlPlanePort)
