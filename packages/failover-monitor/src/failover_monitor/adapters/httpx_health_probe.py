"""HTTPX-based implementation of the HealthProbePort.

This adapter uses httpx to issue one bounded liveness request per probe.
"""

from __future__ import annotations

import logging

import httpx

from failover_monitor.adapters.ports import HealthProbePort
from failover_monitor.domain.health import HealthStatus

logger = logging.getLogger(__name__)


class HTTPXHealthProbe:
    """HTTPX-based adapter probing an instance's health endpoint.

    A 2xx answer within the timeout is healthy. Transport errors, timeouts
    and any other status are unhealthy. No exception escapes probe().
    """

    def __init__(
        self,
        health_path: str = "/health",
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the HTTPX health probe.

        Args:
            health_path: Path of the health endpoint. Defaults to "/health".
            client: Optional httpx.Client for dependency injection (testing).
                   If not provided, a new client is created per probe.
        """
        self._health_path = health_path
        self._client = client

    def probe(self, base_url: str, timeout: float) -> HealthStatus:
        """Probe the health endpoint of an instance.

        Args:
            base_url: Base URL of the instance (e.g., "http://primary:8080").
            timeout: Upper bound of the request in seconds.

        Returns:
            HealthStatus.healthy() on 2xx, HealthStatus.unhealthy() otherwise.
        """
        url = base_url.rstrip("/") + self._health_path
        try:
            if self._client is not None:
                response = self._client.get(url, timeout=timeout)
            else:
                with httpx.Client() as client:
                    response = client.get(url, timeout=timeout)
        except httpx.TimeoutException:
            logger.debug(f"Health probe to {url} timed out after {timeout}s")
            return HealthStatus.unhealthy(f"timeout after {timeout}s")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug(f"Health probe to {url} failed: {e}")
            return HealthStatus.unhealthy(f"{type(e).__name__}: {e}")

        if not response.is_success:
            return HealthStatus.unhealthy(f"HTTP {response.status_code}")

        return HealthStatus.healthy()


# Runtime protocol check
assert isinstance(HTTPXHealthProbe(), HealthProbePort)
