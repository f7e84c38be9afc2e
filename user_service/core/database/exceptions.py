"""Errors raised by the database layer instead of raw SQLAlchemy ones."""

from __future__ import annotations

from typing import Any


class RepositoryError(Exception):
    """Base class; ``details`` are appended to the message as ``key=value`` pairs."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        pairs = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} ({pairs})"


class NotFoundError(RepositoryError):
    """No ``model_name`` row matched ``identifier``, e.g. ``{"id": UUID(...)}``."""

    def __init__(self, model_name: str, identifier: dict[str, Any]) -> None:
        self.model_name = model_name
        self.identifier = identifier
        lookup = " and ".join(f"{key}={value}" for key, value in identifier.items())
        super().__init__(f"{model_name} not found with {lookup}")


class DatabaseNotConnectedError(RepositoryError):
    """A session was requested before ``Database.connect()`` succeeded."""

    def __init__(self) -> None:
        super().__init__("Database handle is not connected; call connect() first")
