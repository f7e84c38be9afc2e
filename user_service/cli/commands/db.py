"""Database management commands.

Usage:
    # Check connectivity
    user-service db ping

    # Apply all pending migrations
    user-service db upgrade

    # Create tables straight from the model metadata (development only)
    user-service db create-tables
"""

from __future__ import annotations

import time
from pathlib import Path

import click

from user_service.cli.utils import coro, error, header, info, success
from user_service.core.settings import get_db_settings
from user_service.infra.database import Database


def _alembic_config(config_path: str):
    from alembic.config import Config

    if not Path(config_path).exists():
        raise click.BadParameter(f"{config_path} not found", param_hint="--config")
    return Config(config_path)


@click.group(name="db")
def db() -> None:
    """Database management commands."""


@db.command()
@coro
async def ping() -> None:
    """Connect to the database and run a probe query."""
    database = Database.from_settings(get_db_settings())
    info(f"Connecting to {database.safe_url}")

    try:
        started = time.perf_counter()
        await database.connect()
        await database.ping()
        elapsed_ms = (time.perf_counter() - started) * 1000
        success(f"Database reachable ({elapsed_ms:.1f}ms)")
    except Exception as e:
        error(f"Database unreachable: {e}")
        raise click.Abort from e
    finally:
        await database.disconnect()


@db.command()
@click.argument("revision", default="head")
@click.option(
    "--config",
    "config_path",
    default="alembic.ini",
    show_default=True,
    help="Path to the alembic configuration file",
)
def upgrade(revision: str, config_path: str) -> None:
    """Apply database migrations up to REVISION (default: head)."""
    from alembic import command

    info(f"Upgrading database to: {revision}")
    config = _alembic_config(config_path)

    try:
        command.upgrade(config, revision)
    except Exception as e:
        error(f"Migration failed: {e}")
        raise click.Abort from e

    success(f"Database upgraded to {revision}")


@db.command(name="create-tables")
@coro
async def create_tables() -> None:
    """Create all tables from the model metadata.

    Meant for development and tests; production databases are managed
    with ``db upgrade``.
    """
    header("Creating tables")
    database = Database.from_settings(get_db_settings())

    try:
        await database.connect()
        await database.create_all()
    except Exception as e:
        error(f"Failed to create tables: {e}")
        raise click.Abort from e
    finally:
        await database.disconnect()

    success("Tables created")
