"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: explicit Settings with every external dependency off
    - Database Fixtures: in-memory SQLite Database handle, sessions, user factory
    - Application Fixtures: FastAPI app wired to the test database, HTTP client
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncSession

    from user_service.core.settings import Settings
    from user_service.features.users.models import User
    from user_service.infra.database import Database

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DB_ENABLED", "false")
os.environ.setdefault("RABBIT_ENABLED", "false")
os.environ.setdefault("HEALTH_DOCS_PROBE_ENABLED", "false")
os.environ.setdefault("LOG_JSON", "false")

BASE_TIME = datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)

UserFactory = Callable[..., Awaitable["User"]]


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture
def settings() -> Settings:
    """Settings for an app without database, broker or docs probe."""
    from user_service.core.settings import (
        AppSettings,
        GraphQLSettings,
        HealthCheckSettings,
        LoggingSettings,
        PostgresSettings,
        RabbitSettings,
        Settings,
    )

    return Settings(
        app=AppSettings(environment="test"),
        db=PostgresSettings(enabled=False),
        rabbit=RabbitSettings(enabled=False),
        logging=LoggingSettings(),
        health=HealthCheckSettings(docs_probe_enabled=False, cache_ttl_seconds=0),
        graphql=GraphQLSettings(),
    )


@pytest.fixture(autouse=True)
def _clear_settings_caches():
    from user_service.core.settings import clear_all_caches

    clear_all_caches()
    yield
    clear_all_caches()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def database() -> AsyncGenerator[Database]:
    """Connected in-memory SQLite handle with all tables created.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    from user_service.infra.database import Database

    db = Database(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await db.connect()
    await db.create_all()
    try:
        yield db
    finally:
        await db.disconnect()


@pytest.fixture
async def session(database: Database) -> AsyncGenerator[AsyncSession]:
    async with database.session() as s:
        yield s


@pytest.fixture
def make_user(session: AsyncSession) -> UserFactory:
    """Factory inserting users with deterministic ids and timestamps.

    Example:
        alice = await make_user("alice", n=1, created_at=BASE_TIME)
    """
    from user_service.features.users.models import User, UserRole

    counter = iter(range(1, 10_000))

    async def _make(
        username: str,
        *,
        n: int | None = None,
        created_at: datetime | None = None,
        deleted: bool = False,
        role: UserRole = UserRole.USER,
    ) -> User:
        seq = n if n is not None else next(counter)
        user = User(
            id=UUID(int=seq),
            username=username,
            email=f"{username}@example.com",
            role=role,
            created_at=created_at or BASE_TIME,
            updated_at=created_at or BASE_TIME,
            deleted_at=BASE_TIME if deleted else None,
        )
        session.add(user)
        await session.flush()
        return user

    return _make


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app(settings: Settings, database: Database) -> FastAPI:
    """Application wired to the test database.

    httpx's ASGITransport does not run the lifespan, so the resources it
    would attach are set on app.state here.
    """
    from user_service.app.main import create_app
    from user_service.features.health.service import build_health_aggregator

    application = create_app(settings)
    application.state.database = database
    application.state.broker = None
    application.state.health_aggregator = build_health_aggregator(
        settings, database=database, broker=None,
    )
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def seed_users(database: Database) -> list[User]:
    """Five committed users, user-1 oldest, user-5 newest."""
    from datetime import timedelta

    from user_service.features.users.models import User

    users = [
        User(
            id=UUID(int=i),
            username=f"user-{i}",
            email=f"user-{i}@example.com",
            created_at=BASE_TIME + timedelta(minutes=i),
            updated_at=BASE_TIME + timedelta(minutes=i),
        )
        for i in range(1, 6)
    ]
    async with database.session() as s:
        s.add_all(users)
    return users
