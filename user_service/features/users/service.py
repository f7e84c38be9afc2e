"""Service layer for the users feature."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError

from user_service.core.database import NotFoundError
from user_service.core.exceptions import (
    BadRequestException,
    ConflictException,
    NotFoundException,
)
from user_service.core.pagination import CursorDirection
from user_service.features.users.models import User
from user_service.features.users.repository import UserRepository, get_user_repository
from user_service.infra.logging import get_lazy_logger
from user_service.utils import apply_updates

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from user_service.core.context import RequestContext
    from user_service.core.database import KeysetResult, SearchResult
    from user_service.core.pagination import CursorPageQuery, OffsetPageQuery
    from user_service.features.users.schemas import UserCreate, UserProfileUpdate


# Standard logger for INFO/WARNING/ERROR
logger = logging.getLogger(__name__)
# Lazy logger for DEBUG (zero overhead when DEBUG disabled)
lazy_logger = get_lazy_logger(__name__)

PROFILE_FIELDS = ["username", "first_name", "last_name", "image", "bio"]


def _username_taken(username: str) -> ConflictException:
    return ConflictException(
        detail=f"Username '{username}' is already taken",
        type="username-taken",
        extra={"username": username},
    )


def _email_taken(email: str) -> ConflictException:
    return ConflictException(
        detail=f"Email '{email}' is already registered",
        type="email-taken",
        extra={"email": email},
    )


class UserService:
    """Service for user management operations.

    Handles business logic for:
    - Offset and cursor listings of active users
    - Soft delete and restore
    - Profile updates with username uniqueness
    """

    def __init__(
        self,
        session: AsyncSession,
        repo: UserRepository | None = None,
    ) -> None:
        """Initialize the user service.

        Args:
            session: Database session for operations
            repo: User repository (optional, uses default if not provided)
        """
        self._session = session
        self._repo = repo or get_user_repository()

    async def list_users_offset(self, query: OffsetPageQuery) -> SearchResult[User]:
        """Page through active users, newest first.

        Runs a count and a list query; ``has_next`` is derived from the count.
        """
        result = await self._repo.paginate_offset(
            self._session, limit=query.limit, offset=query.offset,
        )
        lazy_logger.debug(
            lambda: f"service.list_users_offset(page={query.page}, limit={query.limit}) "
            f"-> {len(result.items)}/{result.total}",
        )
        return result

    async def list_users_cursor(self, query: CursorPageQuery) -> KeysetResult[User]:
        """Page through active users after an anchor row.

        An ``after_cursor`` naming no row is treated as absent and the first
        page is returned.

        Raises:
            BadRequestException: If ``before_cursor`` is supplied.
        """
        if query.direction is CursorDirection.BACKWARD:
            raise BadRequestException(
                detail="Backward pagination with before_cursor is not supported; use after_cursor",
                type="unsupported-cursor-direction",
                extra={"before_cursor": str(query.before_cursor)},
            )

        anchor = None
        if query.after_cursor is not None:
            anchor = await self._repo.find_anchor(self._session, query.after_cursor)
            if anchor is None:
                lazy_logger.debug(
                    lambda: f"service.list_users_cursor: unknown cursor {query.after_cursor}, "
                    "starting from the first page",
                )

        result = await self._repo.paginate_cursor(self._session, anchor=anchor, limit=query.limit)
        lazy_logger.debug(
            lambda: f"service.list_users_cursor(after={query.after_cursor}, limit={query.limit}) "
            f"-> {len(result.items)} users, has_more={result.has_more}",
        )
        return result

    async def list_all_users(self) -> Sequence[User]:
        return await self._repo.list_active(self._session)

    async def get_user(self, user_id: UUID) -> User:
        """Get an active user by ID.

        Raises:
            NotFoundException: If the user does not exist or is deleted
        """
        user = await self._repo.get_active(self._session, user_id)
        if user is None:
            raise NotFoundException(
                detail=f"User with id {user_id} not found",
                type="user-not-found",
                extra={"user_id": str(user_id)},
            )
        return user

    async def _get_any(self, user_id: UUID) -> User:
        try:
            return await self._repo.get_or_raise(self._session, user_id)
        except NotFoundError as exc:
            raise NotFoundException(
                detail=f"User with id {user_id} not found",
                type="user-not-found",
                extra={"user_id": str(user_id)},
            ) from exc

    async def delete_user(self, user_id: UUID, ctx: RequestContext) -> tuple[User, bool]:
        """Soft-delete a user.

        Deleting an already-deleted user succeeds without touching the row,
        so the original ``deleted_at`` is kept.

        Returns:
            Tuple of (user, changed). ``changed`` is False for a repeated delete.

        Raises:
            NotFoundException: If no user has this id
        """
        user = await self._get_any(user_id)
        changed = await self._repo.soft_delete(self._session, user, deleted_by=ctx.actor)

        if changed:
            logger.info(
                "User deleted",
                extra={"user_id": str(user_id), "deleted_by": ctx.actor, "request_id": ctx.request_id},
            )
        else:
            lazy_logger.debug(lambda: f"service.delete_user({user_id}) -> already deleted")
        return user, changed

    async def restore_user(self, user_id: UUID, ctx: RequestContext) -> User:
        """Undo a soft delete. Restoring a live user is a no-op.

        Raises:
            NotFoundException: If no user has this id
        """
        user = await self._get_any(user_id)
        if await self._repo.restore(self._session, user):
            logger.info(
                "User restored",
                extra={"user_id": str(user_id), "restored_by": ctx.actor, "request_id": ctx.request_id},
            )
        return user

    async def update_user_profile(
        self,
        user_id: UUID,
        payload: UserProfileUpdate,
        ctx: RequestContext,
    ) -> User:
        """Apply a partial profile update.

        Raises:
            NotFoundException: If the user does not exist or is deleted
            ConflictException: If the new username belongs to another user
        """
        user = await self.get_user(user_id)

        if payload.username is not None and payload.username != user.username:
            existing = await self._repo.find_by_username(self._session, payload.username)
            if existing is not None and existing.id != user.id:
                raise _username_taken(payload.username)

        # username is not nullable; an explicit null leaves it unchanged
        result = apply_updates(
            user,
            payload,
            fields=PROFILE_FIELDS,
            exclude={"username"} if payload.username is None else None,
        )
        if result.applied:
            username = user.username
            try:
                await self._session.flush()
            except IntegrityError as exc:
                # another request took the username after the check above
                raise _username_taken(username) from exc
            await self._session.refresh(user)
            logger.info(
                "User profile updated",
                extra={
                    "user_id": str(user_id),
                    "fields": sorted(result.changes),
                    "updated_by": ctx.actor,
                    "request_id": ctx.request_id,
                },
            )
        return user

    async def create_user(self, payload: UserCreate) -> User:
        """Insert a user row.

        Raises:
            ConflictException: If the username or email is already registered
        """
        if await self._repo.find_by_username(self._session, payload.username) is not None:
            raise _username_taken(payload.username)
        if await self._repo.find_by_email(self._session, payload.email) is not None:
            raise _email_taken(payload.email)

        try:
            user = await self._repo.create(self._session, User(**payload.model_dump()))
        except IntegrityError as exc:
            if "email" in str(exc.orig):
                raise _email_taken(payload.email) from exc
            raise _username_taken(payload.username) from exc
        logger.info("User created", extra={"user_id": str(user.id), "username": user.username})
        return user
