"""User management commands.

This module provides CLI commands for managing users:
- Seed an admin and a regular test user
- List non-deleted users as a table or JSON
"""

from __future__ import annotations

import json

import click

from user_service.cli.utils import coro, error, header, info, success, warning
from user_service.core.settings import get_db_settings
from user_service.features.users.models import UserRole
from user_service.features.users.repository import get_user_repository
from user_service.features.users.schemas import UserCreate, UserResponse
from user_service.features.users.service import UserService
from user_service.infra.database import Database

SEED_USERS: tuple[UserCreate, ...] = (
    UserCreate(
        username="admin",
        email="admin@example.com",
        role=UserRole.ADMIN,
        is_email_verified=True,
        first_name="Admin",
        last_name="User",
        display_username="Admin",
    ),
    UserCreate(
        username="testuser",
        email="test@example.com",
        role=UserRole.USER,
        is_email_verified=True,
        first_name="Test",
        last_name="User",
        display_username="Test User",
    ),
)


@click.group(name="users")
def users() -> None:
    """User management commands."""


@users.command()
@coro
async def seed() -> None:
    """Insert the admin and test users unless they already exist."""
    header("Seeding users")
    database = Database.from_settings(get_db_settings())
    repo = get_user_repository()
    created = 0

    try:
        await database.connect()
        async with database.session() as session:
            service = UserService(session, repo)
            for payload in SEED_USERS:
                if await repo.find_by_username(session, payload.username) is not None:
                    warning(f"User '{payload.username}' already exists, skipping")
                    continue
                user = await service.create_user(payload)
                info(f"Created {user.role} '{user.username}' ({user.id})")
                created += 1
    except Exception as e:
        error(f"Seeding failed: {e}")
        raise click.Abort from e
    finally:
        await database.disconnect()

    success(f"Seeded {created} user(s)")


@users.command(name="list")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    show_default=True,
    help="Output format",
)
@coro
async def list_users(output_format: str) -> None:
    """List non-deleted users, newest first."""
    database = Database.from_settings(get_db_settings())

    try:
        await database.connect()
        async with database.session() as session:
            rows = await UserService(session).list_all_users()
            records = [UserResponse.model_validate(row) for row in rows]
    except Exception as e:
        error(f"Failed to list users: {e}")
        raise click.Abort from e
    finally:
        await database.disconnect()

    if output_format == "json":
        click.echo(json.dumps([r.model_dump(mode="json") for r in records], indent=2))
        return

    if not records:
        info("No users found")
        return

    header(f"Users ({len(records)})")
    click.echo(f"{'ID':<38} {'USERNAME':<20} {'EMAIL':<30} {'ROLE':<6} CREATED")
    click.echo("-" * 110)
    for r in records:
        click.echo(
            f"{r.id!s:<38} {r.username:<20} {r.email:<30} {r.role:<6} "
            f"{r.created_at:%Y-%m-%d %H:%M}"
        )
