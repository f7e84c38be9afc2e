"""Command-line interface for user-service management."""

from user_service.cli.main import cli

__all__ = ["cli"]
