"""SQLAlchemy models for the users feature."""

from __future__ import annotations

import enum

from sqlalchemy import Boolean, Enum, Index, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from user_service.core.database import Base, SoftDeleteMixin, TimestampMixin, UUIDPKMixin


class UserRole(enum.StrEnum):
    USER = "user"
    ADMIN = "admin"


class User(Base, UUIDPKMixin, TimestampMixin, SoftDeleteMixin):
    """Registered user.

    Rows are soft-deleted only. Listings order by (created_at DESC, id DESC)
    and the composite index below backs that order.
    """

    __tablename__ = "users"
    __table_args__ = (Index("ix_users_created_at_id", "created_at", "id"),)

    username: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False,
    )
    display_username: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False,
    )
    is_email_verified: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False,
    )
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        default=UserRole.USER,
        server_default=UserRole.USER.value,
        nullable=False,
    )
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    image: Mapped[str | None] = mapped_column(String(2048), nullable=True, comment="Avatar URL")
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    two_factor_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r})>"
