"""Maps ``MessageBroker.check_health()`` onto a health result."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from user_service.core.schemas.common import HealthStatus

from .protocol import HealthCheckResult, Timer

if TYPE_CHECKING:
    from user_service.infra.messaging import MessageBroker

logger = logging.getLogger(__name__)


class RabbitMQHealthProvider:
    name = "messaging"

    def __init__(self, broker: MessageBroker, timeout: float = 5.0) -> None:
        self._broker = broker
        self._timeout = timeout

    async def check_health(self) -> HealthCheckResult:
        timer = Timer()
        try:
            info = await self._broker.check_health(timeout=self._timeout)
        except Exception as exc:
            logger.warning("RabbitMQ health check failed", extra={"error": str(exc)})
            return HealthCheckResult(
                HealthStatus.UNHEALTHY, f"Broker health check error: {exc}", timer.elapsed_ms(), {"error": str(exc)},
            )

        state = info.get("state", "unknown")
        connected = bool(info.get("is_connected", False))
        reason = info.get("reason")

        match info.get("status"):
            case "healthy" if connected:
                status, message = HealthStatus.HEALTHY, f"Messaging broker operational (state: {state})"
            case "unavailable":
                status, message = HealthStatus.UNHEALTHY, f"Messaging broker unavailable: {reason or 'not configured'}"
            case _:
                status, message = HealthStatus.UNHEALTHY, f"Messaging broker unhealthy: {reason or 'unknown error'}"

        return HealthCheckResult(
            status,
            message,
            timer.elapsed_ms(),
            {"connection_state": state, "is_connected": connected, "reason": reason},
        )
