"""Declarative base and column mixins shared by every model.

Example:
    class User(Base, UUIDPKMixin, TimestampMixin, SoftDeleteMixin):
        __tablename__ = "users"
        email: Mapped[str] = mapped_column(String(255), unique=True)
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, MetaData, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func

# Constraint names Alembic migrations rely on
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class UUIDPKMixin:
    """Random UUID primary key, generated client-side."""

    __allow_unmapped__ = True

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)


class TimestampMixin:
    """``created_at`` and ``updated_at`` in UTC.

    Set from Python on ORM writes; the server defaults only matter for rows
    inserted with plain SQL.
    """

    __allow_unmapped__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )


class SoftDeleteMixin:
    """Reversible deletion: a row with ``deleted_at`` set is hidden from listings.

    Nothing filters automatically; queries add
    ``Model.deleted_at.is_(None)`` themselves.
    """

    __allow_unmapped__ = True

    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), index=True, default=None)
    deleted_by: Mapped[str | None] = mapped_column(String(255), doc="Actor that deleted the row")
