"""RabbitMQ broker handle using FastStream.

The broker is constructed explicitly from RabbitSettings, started in the
application lifespan and probed by the health check. Startup is bounded by
``RABBIT_CONNECTION_TIMEOUT`` so an unreachable broker never blocks boot.
"""

from __future__ import annotations

import asyncio
import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from faststream.rabbit import RabbitBroker

if TYPE_CHECKING:
    from user_service.core.settings.rabbit import RabbitSettings

logger = logging.getLogger(__name__)


class ConnectionState(StrEnum):
    """Connection states for the RabbitMQ broker."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"


class MessageBroker:
    """Lifecycle and health wrapper around a FastStream RabbitBroker.

    Example:
        broker = MessageBroker(get_rabbit_settings())
        await broker.start()
        health = await broker.check_health()
        await broker.stop()
    """

    def __init__(self, settings: RabbitSettings, *, broker: RabbitBroker | None = None) -> None:
        self.settings = settings
        self.state = ConnectionState.DISCONNECTED
        self._broker = broker
        if self._broker is None and settings.is_configured:
            self._broker = RabbitBroker(
                settings.url,
                logger=logger,
                client_properties={"connection_name": settings.connection_name},
            )

    @property
    def broker(self) -> RabbitBroker | None:
        return self._broker

    @property
    def enabled(self) -> bool:
        return self._broker is not None

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    async def start(self) -> None:
        """Connect to RabbitMQ.

        Raises:
            ConnectionError: If the connection does not complete within
                the configured timeout.
        """
        if self._broker is None:
            logger.warning("RabbitMQ not configured, skipping broker startup")
            return

        timeout = self.settings.connection_timeout
        logger.info(
            "Starting RabbitMQ broker",
            extra={"host": self.settings.host, "connection_timeout": timeout},
        )
        self.state = ConnectionState.CONNECTING
        try:
            await asyncio.wait_for(self._broker.start(), timeout=timeout)
        except TimeoutError:
            self.state = ConnectionState.FAILED
            error_msg = f"RabbitMQ connection timeout after {timeout}s"
            logger.error(error_msg, extra={"host": self.settings.host})
            raise ConnectionError(error_msg) from None
        except Exception:
            self.state = ConnectionState.FAILED
            logger.exception("Failed to start RabbitMQ broker", extra={"host": self.settings.host})
            raise

        self.state = ConnectionState.CONNECTED
        logger.info("RabbitMQ broker started")

    async def stop(self) -> None:
        """Close the connection. Errors are logged, never raised."""
        if self._broker is None or self.state is ConnectionState.DISCONNECTED:
            return

        try:
            await self._broker.close()
            logger.info("RabbitMQ broker stopped")
        except Exception:
            logger.exception("Error stopping RabbitMQ broker")
        finally:
            self.state = ConnectionState.DISCONNECTED

    async def check_health(self, timeout: float | None = None) -> dict[str, Any]:
        """Round-trip probe of the broker connection.

        Returns:
            Dictionary containing:
                - status: "healthy", "unhealthy" or "unavailable"
                - state: ConnectionState value
                - is_connected: Boolean connection status
                - reason: Why the broker is not healthy, when it is not
        """
        if self._broker is None:
            return {
                "status": "unavailable",
                "state": ConnectionState.DISCONNECTED.value,
                "is_connected": False,
                "reason": "rabbitmq_not_configured",
            }

        if self.state is not ConnectionState.CONNECTED:
            return {
                "status": "unhealthy",
                "state": self.state.value,
                "is_connected": False,
                "reason": "broker_not_running",
            }

        probe_timeout = timeout if timeout is not None else self.settings.health_check_timeout
        try:
            alive = await self._broker.ping(timeout=probe_timeout)
        except Exception as e:
            logger.warning("RabbitMQ ping failed", extra={"error": str(e)})
            return {
                "status": "unhealthy",
                "state": ConnectionState.FAILED.value,
                "is_connected": False,
                "reason": str(e),
            }

        if not alive:
            return {
                "status": "unhealthy",
                "state": ConnectionState.DISCONNECTED.value,
                "is_connected": False,
                "reason": "ping_failed",
            }
        return {
            "status": "healthy",
            "state": ConnectionState.CONNECTED.value,
            "is_connected": True,
            "reason": None,
        }
