"""Database dependencies for FastAPI route handlers.

The ``Database`` handle is created in the application lifespan and kept on
``app.state.database``; routes never reach for a module-level engine.

Usage:
    from user_service.core.dependencies.database import get_db_session

    @router.get("/users")
    async def list_users(session: Annotated[AsyncSession, Depends(get_db_session)]):
        ...

CLI commands and scripts open their own handle:
    database = Database.from_settings(get_db_settings())
    await database.connect()
    async with database.session() as session:
        ...
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from user_service.core.database import DatabaseNotConnectedError
from user_service.infra.database import Database


def get_database(request: Request) -> Database:
    """Return the application's Database handle.

    Raises:
        DatabaseNotConnectedError: If the lifespan did not attach one.
    """
    database: Database | None = getattr(request.app.state, "database", None)
    if database is None:
        raise DatabaseNotConnectedError()
    return database


async def get_db_session(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency for a database session.

    Commits when the handler returns, rolls back if it raises.
    """
    async with database.session() as session:
        yield session


DatabaseDep = Annotated[Database, Depends(get_database)]
SessionDep = Annotated[AsyncSession, Depends(get_db_session)]
