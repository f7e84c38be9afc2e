"""Application lifespan management.

Startup Order:
1. Logging
2. Database handle - conditional on configuration
3. Messaging (RabbitMQ) - conditional on configuration
4. Health aggregator - wired to whatever started

Shutdown Order: Reverse of startup.

Every resource is stored on ``app.state`` so request code reaches it through
dependencies rather than module globals.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from user_service.core.settings import get_settings
from user_service.features.health.service import build_health_aggregator
from user_service.infra.database import Database
from user_service.infra.logging import setup_logging
from user_service.infra.messaging import MessageBroker

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

    from user_service.core.settings import Settings

logger = logging.getLogger(__name__)


async def _startup_database(settings: Settings) -> Database | None:
    """Open the Database handle.

    Returns the handle even when the first connection fails and the
    database is optional, so health checks can report it.
    """
    db = settings.db
    if not db.is_configured:
        logger.warning("Database not configured, user endpoints will answer 503")
        return None

    database = Database.from_settings(db)
    try:
        await database.connect()
        logger.info("Database connection initialized", extra={"url": database.safe_url})
    except Exception as e:
        if db.startup_require_db:
            logger.exception(
                "Database required but unavailable, failing startup",
                extra={"error": str(e), "startup_require_db": True},
            )
            raise
        logger.warning(
            "Database unavailable, continuing in degraded mode",
            extra={"error": str(e), "startup_require_db": False},
        )
    return database


async def _startup_messaging(settings: Settings) -> MessageBroker | None:
    rabbit = settings.rabbit
    if not rabbit.is_configured:
        return None

    broker = MessageBroker(rabbit)
    try:
        await broker.start()
    except (ConnectionError, OSError) as e:
        if rabbit.startup_require_rabbit:
            logger.exception(
                "RabbitMQ required but unavailable, failing startup",
                extra={"startup_require_rabbit": True},
            )
            raise
        logger.warning(
            "RabbitMQ unavailable, continuing in degraded mode",
            extra={"error": str(e), "startup_require_rabbit": False},
        )
    return broker


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start resources, yield to serve requests, then release them."""
    settings: Settings = getattr(app.state, "settings", None) or get_settings()

    setup_logging(log_settings=settings.logging, force=True)
    logger.info(
        "Application starting",
        extra={
            "service": settings.app.service_name,
            "version": settings.app.version,
            "environment": settings.app.environment,
        },
    )

    database = await _startup_database(settings)
    try:
        broker = await _startup_messaging(settings)
    except BaseException:
        if database is not None:
            await database.disconnect()
        raise

    app.state.database = database
    app.state.broker = broker
    app.state.health_aggregator = build_health_aggregator(
        settings, database=database, broker=broker,
    )

    try:
        yield
    finally:
        logger.info("Application shutting down")
        if broker is not None:
            await broker.stop()
        if database is not None:
            await database.disconnect()
        logger.info("Application shutdown complete")
