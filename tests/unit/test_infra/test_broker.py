"""Unit tests for the MessageBroker lifecycle and health probe."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from user_service.core.settings import RabbitSettings
from user_service.infra.messaging import ConnectionState, MessageBroker


@pytest.fixture
def rabbit_settings() -> RabbitSettings:
    return RabbitSettings(enabled=True, connection_timeout=1.0, health_check_timeout=1.0)


@pytest.fixture
def fake_broker() -> MagicMock:
    broker = MagicMock()
    broker.start = AsyncMock()
    broker.close = AsyncMock()
    broker.ping = AsyncMock(return_value=True)
    return broker


class TestLifecycle:
    def test_disabled_settings_build_no_broker(self):
        broker = MessageBroker(RabbitSettings(enabled=False))

        assert broker.enabled is False
        assert broker.broker is None

    def test_enabled_settings_build_rabbit_broker(self, rabbit_settings: RabbitSettings):
        from faststream.rabbit import RabbitBroker

        broker = MessageBroker(rabbit_settings)

        assert isinstance(broker.broker, RabbitBroker)

    async def test_start_and_stop(self, rabbit_settings: RabbitSettings, fake_broker: MagicMock):
        broker = MessageBroker(rabbit_settings, broker=fake_broker)

        await broker.start()
        assert broker.is_connected is True
        fake_broker.start.assert_awaited_once()

        await broker.stop()
        assert broker.state is ConnectionState.DISCONNECTED
        fake_broker.close.assert_awaited_once()

    async def test_start_timeout_raises_connection_error(
        self, rabbit_settings: RabbitSettings, fake_broker: MagicMock,
    ):
        async def hang() -> None:
            await asyncio.sleep(10)

        fake_broker.start = AsyncMock(side_effect=hang)
        broker = MessageBroker(rabbit_settings, broker=fake_broker)

        with pytest.raises(ConnectionError, match="timeout"):
            await broker.start()
        assert broker.state is ConnectionState.FAILED

    async def test_stop_swallows_close_errors(
        self, rabbit_settings: RabbitSettings, fake_broker: MagicMock,
    ):
        fake_broker.close = AsyncMock(side_effect=RuntimeError("channel closed"))
        broker = MessageBroker(rabbit_settings, broker=fake_broker)
        await broker.start()

        await broker.stop()

        assert broker.state is ConnectionState.DISCONNECTED


class TestCheckHealth:
    async def test_unconfigured(self):
        health = await MessageBroker(RabbitSettings(enabled=False)).check_health()

        assert health["status"] == "unavailable"
        assert health["reason"] == "rabbitmq_not_configured"

    async def test_not_started(self, rabbit_settings: RabbitSettings, fake_broker: MagicMock):
        health = await MessageBroker(rabbit_settings, broker=fake_broker).check_health()

        assert health["status"] == "unhealthy"
        assert health["reason"] == "broker_not_running"
        fake_broker.ping.assert_not_awaited()

    async def test_ping_ok(self, rabbit_settings: RabbitSettings, fake_broker: MagicMock):
        broker = MessageBroker(rabbit_settings, broker=fake_broker)
        await broker.start()

        health = await broker.check_health(timeout=0.5)

        assert health == {
            "status": "healthy",
            "state": "connected",
            "is_connected": True,
            "reason": None,
        }
        fake_broker.ping.assert_awaited_once_with(timeout=0.5)

    async def test_ping_false(self, rabbit_settings: RabbitSettings, fake_broker: MagicMock):
        fake_broker.ping = AsyncMock(return_value=False)
        broker = MessageBroker(rabbit_settings, broker=fake_broker)
        await broker.start()

        health = await broker.check_health()

        assert health["status"] == "unhealthy"
        assert health["reason"] == "ping_failed"

    async def test_ping_error(self, rabbit_settings: RabbitSettings, fake_broker: MagicMock):
        fake_broker.ping = AsyncMock(side_effect=OSError("connection reset"))
        broker = MessageBroker(rabbit_settings, broker=fake_broker)
        await broker.start()

        health = await broker.check_health()

        assert health["status"] == "unhealthy"
        assert health["reason"] == "connection reset"
