"""Core database package: declarative base, mixins, repository and errors.

Base Classes and Mixins:
    - Base: Declarative base with constraint naming convention
    - UUIDPKMixin: UUID v4 primary key
    - TimestampMixin: created_at, updated_at tracking
    - SoftDeleteMixin: deleted_at / deleted_by soft delete support

Repository:
    - BaseRepository[T]: Generic CRUD with explicit session passing
    - SearchResult[T]: Offset page container
    - KeysetResult[T]: Keyset page container
"""

from user_service.core.database.base import (
    NAMING_CONVENTION,
    Base,
    SoftDeleteMixin,
    TimestampMixin,
    UUIDPKMixin,
)
from user_service.core.database.exceptions import (
    DatabaseNotConnectedError,
    NotFoundError,
    RepositoryError,
)
from user_service.core.database.repository import BaseRepository, KeysetResult, SearchResult

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "BaseRepository",
    "DatabaseNotConnectedError",
    "KeysetResult",
    "NotFoundError",
    "RepositoryError",
    "SearchResult",
    "SoftDeleteMixin",
    "TimestampMixin",
    "UUIDPKMixin",
]
