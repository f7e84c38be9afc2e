"""Alembic environment for the users schema.

The URL comes from the ``DB_*`` / ``DATABASE_URL`` settings, so
``alembic upgrade head`` and ``user-service db upgrade`` migrate the same
database the service connects to. Online runs go through the async engine;
SQLite gets batch mode for ALTER support.
"""

from __future__ import annotations

import asyncio
from logging.config import fileConfig
from typing import TYPE_CHECKING, Any

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

import user_service.features.users.models  # noqa: F401  (registers the users table)
from user_service.core.database.base import Base
from user_service.core.settings import get_db_settings

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

db_settings = get_db_settings()
if db_settings.is_configured:
    # escape "%" for ConfigParser interpolation
    config.set_main_option("sqlalchemy.url", db_settings.url.replace("%", "%%"))

SYSTEM_SCHEMAS = frozenset({"pg_catalog", "information_schema"})


def include_object(obj: Any, name: str | None, type_: str, reflected: bool, compare_to: Any) -> bool:
    if type_ == "table" and name == "alembic_version":
        return False
    return getattr(obj, "schema", None) not in SYSTEM_SCHEMAS


def skip_empty_revision(migration_context: Any, revision: Any, directives: list[Any]) -> None:
    """Autogenerate writes no file when the models match the database."""
    if not getattr(config.cmd_opts, "autogenerate", False) or not directives:
        return
    ops = directives[0].upgrade_ops
    if ops is not None and ops.is_empty():
        directives.clear()


def configure_options() -> dict[str, Any]:
    return {
        "target_metadata": Base.metadata,
        "compare_type": True,
        "include_object": include_object,
    }


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **configure_options(),
    )
    with context.begin_transaction():
        context.run_migrations()


def migrate(connection: Connection) -> None:
    context.configure(
        connection=connection,
        render_as_batch=connection.dialect.name == "sqlite",
        process_revision_directives=skip_empty_revision,
        **configure_options(),
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    try:
        async with engine.connect() as connection:
            await connection.run_sync(migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
