"""Unit tests for the database, messaging and API docs health providers."""

from __future__ import annotations

import asyncio
import base64
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from pydantic import SecretStr

from user_service.core.schemas.common import HealthStatus
from user_service.core.settings import (
    AppSettings,
    HealthCheckSettings,
    PostgresSettings,
    RabbitSettings,
    Settings,
)
from user_service.features.health.providers import (
    ApiDocsHealthProvider,
    DatabaseHealthProvider,
    RabbitMQHealthProvider,
)
from user_service.features.health.service import build_health_aggregator


class TestDatabaseHealthProvider:
    async def test_healthy(self, database):
        result = await DatabaseHealthProvider(database, timeout=1.0).check_health()

        assert result.status is HealthStatus.HEALTHY
        assert result.message == "Database operational"

    async def test_slow_database_is_degraded(self, database):
        result = await DatabaseHealthProvider(database, latency_threshold_ms=0.0).check_health()

        assert result.status is HealthStatus.DEGRADED

    async def test_timeout(self):
        async def hang(timeout=None):
            async with asyncio.timeout(timeout):
                await asyncio.sleep(1)

        database = MagicMock()
        database.ping = hang

        result = await DatabaseHealthProvider(database, timeout=0.01).check_health()

        assert result.status is HealthStatus.UNHEALTHY
        assert result.metadata == {"error": "timeout"}

    async def test_unconnected_handle_is_unhealthy(self):
        from user_service.infra.database import Database

        result = await DatabaseHealthProvider(Database("sqlite+aiosqlite://")).check_health()

        assert result.status is HealthStatus.UNHEALTHY
        assert "not connected" in result.message


class TestRabbitMQHealthProvider:
    @pytest.mark.parametrize(
        ("info", "expected"),
        [
            ({"status": "healthy", "state": "connected", "is_connected": True}, HealthStatus.HEALTHY),
            ({"status": "unhealthy", "state": "failed", "is_connected": False}, HealthStatus.UNHEALTHY),
            ({"status": "unavailable", "state": "disconnected", "is_connected": False}, HealthStatus.UNHEALTHY),
        ],
    )
    async def test_maps_broker_status(self, info, expected):
        broker = MagicMock()
        broker.check_health = AsyncMock(return_value=info)

        result = await RabbitMQHealthProvider(broker, timeout=2.0).check_health()

        assert result.status is expected
        broker.check_health.assert_awaited_once_with(timeout=2.0)

    async def test_probe_error(self):
        broker = MagicMock()
        broker.check_health = AsyncMock(side_effect=RuntimeError("socket closed"))

        result = await RabbitMQHealthProvider(broker).check_health()

        assert result.status is HealthStatus.UNHEALTHY
        assert result.metadata["error"] == "socket closed"


class TestApiDocsHealthProvider:
    async def test_sends_basic_auth(self):
        seen: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("authorization", "")
            return httpx.Response(200, text="<html>docs</html>")

        provider = ApiDocsHealthProvider(
            "http://svc/docs",
            username="docs",
            password="s3cret",
            transport=httpx.MockTransport(handler),
        )

        result = await provider.check_health()

        assert result.status is HealthStatus.HEALTHY
        assert base64.b64decode(seen["auth"].removeprefix("Basic ")) == b"docs:s3cret"

    async def test_no_credentials_sends_no_auth(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert "authorization" not in request.headers
            return httpx.Response(200)

        provider = ApiDocsHealthProvider("http://svc/docs", transport=httpx.MockTransport(handler))

        assert (await provider.check_health()).status is HealthStatus.HEALTHY

    async def test_rejected_credentials_unhealthy(self):
        provider = ApiDocsHealthProvider(
            "http://svc/docs",
            username="docs",
            password="wrong",
            transport=httpx.MockTransport(lambda request: httpx.Response(401)),
        )

        result = await provider.check_health()

        assert result.status is HealthStatus.UNHEALTHY
        assert result.metadata["status_code"] == 401

    async def test_connection_error_unhealthy(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        provider = ApiDocsHealthProvider("http://svc/docs", transport=httpx.MockTransport(handler))

        assert (await provider.check_health()).status is HealthStatus.UNHEALTHY


class TestBuildHealthAggregator:
    def _settings(self, **app_kwargs) -> Settings:
        return Settings(
            app=AppSettings(**app_kwargs),
            db=PostgresSettings(enabled=False),
            rabbit=RabbitSettings(enabled=False),
            health=HealthCheckSettings(docs_probe_enabled=True),
        )

    def test_docs_probe_outside_production(self, database):
        aggregator = build_health_aggregator(
            self._settings(environment="staging", docs_username="d", docs_password=SecretStr("p")),
            database=database,
            broker=None,
        )

        assert aggregator.list_providers() == ["database", "api_docs"]

    def test_no_docs_probe_in_production(self, database):
        aggregator = build_health_aggregator(
            self._settings(environment="production"), database=database, broker=None,
        )

        assert aggregator.list_providers() == ["database"]

    def test_no_docs_probe_when_docs_disabled(self):
        aggregator = build_health_aggregator(
            self._settings(environment="development", disable_docs=True), database=None, broker=None,
        )

        assert aggregator.list_providers() == []

    def test_enabled_broker_registered(self):
        from user_service.infra.messaging import MessageBroker

        broker = MessageBroker(RabbitSettings(enabled=True), broker=MagicMock())
        aggregator = build_health_aggregator(
            self._settings(environment="production"), database=None, broker=broker,
        )

        assert aggregator.list_providers() == ["messaging"]
