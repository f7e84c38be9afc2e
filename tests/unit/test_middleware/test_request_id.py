"""Unit tests for RequestIDMiddleware."""

from __future__ import annotations

import uuid

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from user_service.app.middleware.request_id import RequestIDMiddleware
from user_service.infra.logging import get_log_context


class TestRequestIDMiddleware:
    @pytest.fixture
    def app(self) -> FastAPI:
        app = FastAPI()
        app.add_middleware(RequestIDMiddleware)

        @app.get("/test")
        async def endpoint(request: Request):
            return {
                "state_id": request.state.request_id,
                "log_context": get_log_context(),
            }

        return app

    @pytest.fixture
    async def client(self, app: FastAPI):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac

    async def test_generates_request_id_when_not_provided(self, client: AsyncClient):
        response = await client.get("/test")

        request_id = response.headers["x-request-id"]
        assert uuid.UUID(request_id)
        assert response.json()["state_id"] == request_id

    async def test_preserves_existing_request_id(self, client: AsyncClient):
        response = await client.get("/test", headers={"X-Request-ID": "upstream-123"})

        assert response.headers["x-request-id"] == "upstream-123"
        assert response.json()["state_id"] == "upstream-123"

    async def test_request_id_in_log_context(self, client: AsyncClient):
        response = await client.get("/test", headers={"X-Request-ID": "ctx-1"})

        assert response.json()["log_context"] == {"request_id": "ctx-1"}

    async def test_log_context_cleared_after_request(self, client: AsyncClient):
        await client.get("/test", headers={"X-Request-ID": "ctx-2"})

        assert "request_id" not in get_log_context()
