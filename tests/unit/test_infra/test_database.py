"""Unit tests for the explicit Database handle."""

from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlalchemy.pool import StaticPool

from user_service.core.database import DatabaseNotConnectedError
from user_service.core.settings import PostgresSettings
from user_service.infra.database import Database
from user_service.utils.retry import RetryError


def _memory_db(**kwargs) -> Database:
    return Database(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        **kwargs,
    )


class TestLifecycle:
    async def test_connect_and_disconnect(self):
        db = _memory_db()
        assert db.is_connected is False

        await db.connect()
        assert db.is_connected is True
        await db.ping(timeout=1.0)

        await db.disconnect()
        assert db.is_connected is False

    async def test_unconnected_handle_refuses_sessions(self):
        db = _memory_db()

        with pytest.raises(DatabaseNotConnectedError):
            async with db.session():
                pass

        with pytest.raises(DatabaseNotConnectedError):
            _ = db.engine

    async def test_connect_failure_is_retried_then_raised(self, tmp_path):
        bad_path = tmp_path / "missing" / "dir" / "db.sqlite"
        db = Database(f"sqlite+aiosqlite:///{bad_path}", retry_attempts=2, retry_delay=0.01)

        with pytest.raises(RetryError) as exc_info:
            await db.connect()

        assert exc_info.value.attempts == 2
        assert db.is_connected is False

    def test_from_settings(self):
        settings = PostgresSettings(dsn="sqlite+aiosqlite:///:memory:", startup_retry_attempts=4)

        db = Database.from_settings(settings, echo=True)

        assert db.url == "sqlite+aiosqlite:///:memory:"
        assert db.retry_attempts == 4

    def test_safe_url_hides_password(self):
        db = Database("postgresql+psycopg://svc:hunter2@db:5432/users")

        assert "hunter2" not in db.safe_url


class TestSessions:
    async def test_commit_on_success(self, database: Database):
        async with database.session() as session:
            await session.execute(text("CREATE TABLE t (x INTEGER)"))
            await session.execute(text("INSERT INTO t VALUES (1)"))

        async with database.session() as session:
            count = (await session.execute(text("SELECT COUNT(*) FROM t"))).scalar_one()

        assert count == 1

    async def test_rollback_on_error(self, database: Database):
        async with database.session() as session:
            await session.execute(text("CREATE TABLE r (x INTEGER)"))

        with pytest.raises(RuntimeError):
            async with database.session() as session:
                await session.execute(text("INSERT INTO r VALUES (1)"))
                raise RuntimeError("abort")

        async with database.session() as session:
            count = (await session.execute(text("SELECT COUNT(*) FROM r"))).scalar_one()

        assert count == 0
