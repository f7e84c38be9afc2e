"""Pydantic schemas for the users API."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from user_service.features.users.models import UserRole


class UserResponse(BaseModel):
    """Public representation of a user.

    Example:
        ```json
        {
            "id": "123e4567-e89b-12d3-a456-426614174000",
            "username": "alice",
            "email": "alice@example.com",
            "role": "user",
            "first_name": "Alice",
            "last_name": "Liddell",
            "created_at": "2025-01-01T00:00:00Z",
            "updated_at": "2025-01-01T00:00:00Z"
        }
        ```
    """

    id: UUID
    username: str
    display_username: str | None = None
    email: str
    is_email_verified: bool
    role: UserRole
    first_name: str | None = None
    last_name: str | None = None
    image: str | None = None
    bio: str | None = None
    two_factor_enabled: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserProfileUpdate(BaseModel):
    """Partial profile update; omitted fields are left untouched.

    Example:
        ```json
        {"username": "alice2", "first_name": "Alice"}
        ```
    """

    username: str | None = Field(
        None, min_length=3, max_length=255, pattern=r"^[A-Za-z0-9_.-]+$",
    )
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    image: str | None = Field(None, max_length=2048, description="Avatar URL")
    bio: str | None = None


class UserCreate(BaseModel):
    """Fields accepted when provisioning a user (seed command, admin tooling)."""

    username: str = Field(..., min_length=3, max_length=255, pattern=r"^[A-Za-z0-9_.-]+$")
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    role: UserRole = UserRole.USER
    is_email_verified: bool = False
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    display_username: str | None = Field(None, max_length=255)


class UserDeletedResponse(BaseModel):
    """Result of a soft delete.

    ``already_deleted`` is true when the call was a no-op on a row that had
    been deleted before.
    """

    message: str
    id: UUID
    deleted_at: datetime
    already_deleted: bool = False
