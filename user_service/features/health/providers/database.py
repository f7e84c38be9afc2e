"""``SELECT 1`` through the Database handle; slow answers count as DEGRADED."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from user_service.core.schemas.common import HealthStatus

from .protocol import DEGRADED_LATENCY_THRESHOLD_MS, HealthCheckResult, Timer

if TYPE_CHECKING:
    from user_service.infra.database import Database

logger = logging.getLogger(__name__)


class DatabaseHealthProvider:
    name = "database"

    def __init__(
        self,
        database: Database,
        timeout: float = 2.0,
        latency_threshold_ms: float = DEGRADED_LATENCY_THRESHOLD_MS,
    ) -> None:
        self._database = database
        self._timeout = timeout
        self._latency_threshold_ms = latency_threshold_ms

    async def check_health(self) -> HealthCheckResult:
        timer = Timer()
        try:
            await self._database.ping(timeout=self._timeout)
        except TimeoutError:
            logger.warning("Database health check timed out", extra={"timeout": self._timeout})
            return HealthCheckResult(
                HealthStatus.UNHEALTHY, f"Timeout after {self._timeout}s", timer.elapsed_ms(), {"error": "timeout"},
            )
        except Exception as exc:
            logger.warning("Database health check failed", extra={"error": str(exc)})
            return HealthCheckResult(
                HealthStatus.UNHEALTHY, f"Connection failed: {exc}", timer.elapsed_ms(), {"error": str(exc)},
            )

        latency_ms = timer.elapsed_ms()
        if latency_ms > self._latency_threshold_ms:
            return HealthCheckResult(HealthStatus.DEGRADED, f"High latency: {latency_ms:.2f}ms", latency_ms)
        return HealthCheckResult(HealthStatus.HEALTHY, "Database operational", latency_ms)
