"""Strawberry types for users and their paginated listings."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from user_service.core.database import KeysetResult, SearchResult
    from user_service.features.users.models import User


@strawberry.type(description="A registered user")
class UserType:
    id: UUID
    username: str
    display_username: str | None
    email: str
    is_email_verified: bool
    role: str
    first_name: str | None
    last_name: str | None
    image: str | None
    bio: str | None
    two_factor_enabled: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, user: User) -> UserType:
        return cls(
            id=user.id,
            username=user.username,
            display_username=user.display_username,
            email=user.email,
            is_email_verified=user.is_email_verified,
            role=str(user.role),
            first_name=user.first_name,
            last_name=user.last_name,
            image=user.image,
            bio=user.bio,
            two_factor_enabled=user.two_factor_enabled,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


@strawberry.type
class OffsetPageInfo:
    page_number: int
    page_size: int
    total_count: int
    total_pages: int
    has_next: bool


@strawberry.type
class CursorPageInfo:
    limit: int
    count: int
    start_cursor: str | None
    end_cursor: str | None
    has_more: bool
    next_cursor: str | None


@strawberry.type(description="Offset page of users, newest first")
class UserPage:
    data: list[UserType]
    pagination: OffsetPageInfo

    @classmethod
    def from_result(cls, result: SearchResult[User]) -> UserPage:
        return cls(
            data=[UserType.from_model(u) for u in result.items],
            pagination=OffsetPageInfo(
                page_number=result.page,
                page_size=result.limit,
                total_count=result.total,
                total_pages=result.pages,
                has_next=result.has_next,
            ),
        )


@strawberry.type(description="Cursor page of users, newest first")
class UserCursorPage:
    data: list[UserType]
    pagination: CursorPageInfo

    @classmethod
    def from_result(cls, result: KeysetResult[User]) -> UserCursorPage:
        return cls(
            data=[UserType.from_model(u) for u in result.items],
            pagination=CursorPageInfo(
                limit=result.limit,
                count=len(result.items),
                start_cursor=result.start_cursor,
                end_cursor=result.end_cursor,
                has_more=result.has_more,
                next_cursor=result.next_cursor,
            ),
        )


@strawberry.input(description="Partial profile update; omitted fields are unchanged")
class UserProfileInput:
    username: str | None = strawberry.UNSET
    first_name: str | None = strawberry.UNSET
    last_name: str | None = strawberry.UNSET
    image: str | None = strawberry.UNSET
    bio: str | None = strawberry.UNSET

    def to_payload(self) -> dict[str, str | None]:
        """Only the fields the client actually sent."""
        return {
            name: value
            for name, value in vars(self).items()
            if value is not strawberry.UNSET
        }


@strawberry.type
class DeleteUserPayload:
    id: UUID
    deleted_at: datetime
    already_deleted: bool
