"""Database infrastructure: the explicit async engine/session handle."""

from user_service.infra.database.session import Database

__all__ = ["Database"]
