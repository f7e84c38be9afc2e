"""Health endpoint tests against the in-memory database."""

from __future__ import annotations

from httpx import AsyncClient


class TestHealthEndpoints:
    async def test_health_is_healthy(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] in {"healthy", "degraded"}
        assert body["environment"] == "test"
        assert set(body["checks"]) == {"database"}
        assert body["checks"]["database"]["healthy"] is True

    async def test_health_is_503_when_database_is_down(self, client: AsyncClient, database):
        await database.disconnect()

        response = await client.get("/health", params={"force_refresh": True})

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "unhealthy"
        assert body["checks"]["database"]["healthy"] is False

    async def test_liveness(self, client: AsyncClient):
        response = await client.get("/health/live")

        assert response.status_code == 200
        assert response.json()["alive"] is True

    async def test_liveness_ignores_database(self, client: AsyncClient, database):
        await database.disconnect()

        response = await client.get("/health/live")

        assert response.status_code == 200

    async def test_readiness(self, client: AsyncClient):
        response = await client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["checks"] == {"database": True}

    async def test_readiness_is_503_when_database_is_down(self, client: AsyncClient, database):
        await database.disconnect()

        response = await client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["ready"] is False

    async def test_request_id_echoed(self, client: AsyncClient):
        response = await client.get("/health/live", headers={"X-Request-ID": "probe-1"})

        assert response.headers["X-Request-ID"] == "probe-1"
