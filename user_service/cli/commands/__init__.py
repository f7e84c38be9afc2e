"""CLI command groups."""

from user_service.cli.commands.db import db
from user_service.cli.commands.users import users

__all__ = ["db", "users"]
