"""Explicit database handle over the async SQLAlchemy engine.

The handle is built once per process, connected in the application
lifespan, disposed on shutdown and handed to request code through
FastAPI dependencies. Nothing in the package reaches for a module-level
engine.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from user_service.core.database.base import Base
from user_service.core.database.exceptions import DatabaseNotConnectedError
from user_service.utils.retry import retry

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from user_service.core.settings.postgres import PostgresSettings

logger = logging.getLogger(__name__)


class Database:
    """Engine plus session factory with an explicit connect/disconnect lifecycle.

    Example:
        database = Database.from_settings(get_db_settings())
        await database.connect()
        async with database.session() as session:
            users = await repo.list_active(session)
        await database.disconnect()
    """

    def __init__(
        self,
        url: str,
        *,
        retry_attempts: int = 1,
        retry_delay: float = 1.0,
        retry_timeout: float | None = None,
        **engine_kwargs: Any,
    ) -> None:
        self.url = url
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay
        self.retry_timeout = retry_timeout
        self._engine_kwargs = engine_kwargs
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def from_settings(cls, settings: PostgresSettings, *, echo: bool | None = None) -> Database:
        """Build a handle from DB_ settings; ``echo`` overrides DB_ECHO (e.g. in debug mode)."""
        engine_kwargs = settings.sqlalchemy_engine_kwargs()
        if echo is not None:
            engine_kwargs["echo"] = echo
        return cls(
            settings.url,
            retry_attempts=settings.startup_retry_attempts,
            retry_delay=settings.startup_retry_delay,
            retry_timeout=settings.startup_retry_timeout,
            **engine_kwargs,
        )

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise DatabaseNotConnectedError
        return self._engine

    @property
    def safe_url(self) -> str:
        """Connection URL with the password masked, for logs."""
        if self._engine is not None:
            return self._engine.url.render_as_string(hide_password=True)
        return self.url.split("@")[-1]

    async def connect(self) -> None:
        """Create the engine and verify connectivity with a round-trip query.

        Retries with exponential backoff per the configured attempts; the
        engine is disposed again if every attempt fails.

        Raises:
            RetryError: If the database stays unreachable.
        """
        if self._engine is not None:
            return

        self._engine = create_async_engine(self.url, **self._engine_kwargs)
        self._sessionmaker = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        logger.info(
            "Connecting to database",
            extra={"url": self.safe_url, "max_attempts": self.retry_attempts},
        )

        probe = retry(
            max_attempts=self.retry_attempts,
            initial_delay=self.retry_delay,
            max_delay=30.0,
            stop_after_delay=self.retry_timeout,
        )(self.ping)

        try:
            await probe()
        except Exception:
            logger.exception("Failed to connect to database", extra={"url": self.safe_url})
            await self.disconnect()
            raise

        logger.info("Database connection established", extra={"url": self.safe_url})

    async def disconnect(self) -> None:
        """Dispose the engine; a no-op when not connected."""
        if self._engine is None:
            return

        engine, self._engine, self._sessionmaker = self._engine, None, None
        await engine.dispose()
        logger.info("Database connection closed")

    async def ping(self, timeout: float | None = None) -> None:
        """Run ``SELECT 1``; raises on failure or when ``timeout`` elapses."""
        async with asyncio.timeout(timeout):
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """One session per unit of work: commit on success, roll back on error.

        Example:
            async with database.session() as session:
                await service.delete_user(session, user_id, ctx)
        """
        if self._sessionmaker is None:
            raise DatabaseNotConnectedError

        async with self._sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except BaseException:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create all tables known to the declarative metadata (dev/test only)."""
        import user_service.features.users.models  # noqa: F401  # register mappers

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
