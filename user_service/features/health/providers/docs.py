"""GET the Swagger UI over the public URL, with basic auth when docs are protected.

Only registered outside production.
"""

from __future__ import annotations

import logging

import httpx

from user_service.core.schemas.common import HealthStatus
from user_service.core.security import create_basic_auth_headers

from .protocol import HealthCheckResult, Timer

logger = logging.getLogger(__name__)


class ApiDocsHealthProvider:
    """Healthy on HTTP 200 from ``url``.

    ``transport`` replaces the network in tests (``httpx.MockTransport``).
    """

    name = "api_docs"

    def __init__(
        self,
        url: str,
        *,
        username: str | None = None,
        password: str | None = None,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._headers: dict[str, str] = {}
        if username is not None and password is not None:
            self._headers = create_basic_auth_headers(username, password)
        self._timeout = timeout
        self._transport = transport

    async def check_health(self) -> HealthCheckResult:
        timer = Timer()
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._url, headers=self._headers, follow_redirects=True)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("API docs health check failed", extra={"url": self._url, "error": str(exc)})
            return HealthCheckResult(
                HealthStatus.UNHEALTHY,
                f"Connection failed: {exc}",
                timer.elapsed_ms(),
                {"url": self._url, "error": str(exc)},
            )

        metadata = {"url": self._url, "status_code": response.status_code}
        if response.status_code == httpx.codes.OK:
            return HealthCheckResult(HealthStatus.HEALTHY, "API docs reachable", timer.elapsed_ms(), metadata)
        return HealthCheckResult(
            HealthStatus.UNHEALTHY, f"HTTP {response.status_code}", timer.elapsed_ms(), metadata,
        )
