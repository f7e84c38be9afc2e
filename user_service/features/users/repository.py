"""Repository for the users feature."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import select

from user_service.core.database.repository import BaseRepository, KeysetResult, SearchResult
from user_service.features.users.models import User

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession


# Listing order shared by offset and cursor pagination.
LISTING_ORDER = ((User.created_at, "desc"), (User.id, "desc"))


class UserRepository(BaseRepository[User]):
    """Repository for User model.

    Inherits from BaseRepository:
        - get(session, id) -> User | None
        - get_or_raise(session, id) -> User
        - get_by(session, attr, value) -> User | None
        - search(session, statement, limit, offset) -> SearchResult[User]
        - paginate_keyset(session, statement, ...) -> KeysetResult[User]
        - create(session, instance) -> User
        - soft_delete(session, instance, deleted_by) -> bool
        - restore(session, instance) -> bool

    Feature-specific methods below.
    """

    def __init__(self) -> None:
        super().__init__(User)

    @staticmethod
    def active_listing() -> Select[tuple[User]]:
        """Non-deleted users in listing order."""
        return (
            select(User)
            .where(User.deleted_at.is_(None))
            .order_by(*(col.desc() for col, _ in LISTING_ORDER))
        )

    async def get_active(self, session: AsyncSession, user_id: UUID) -> User | None:
        """Get a user by id unless it has been soft-deleted."""
        stmt = select(User).where(User.id == user_id, User.deleted_at.is_(None))
        user = (await session.execute(stmt)).scalar_one_or_none()

        self._lazy.debug(lambda: f"db.get_active({user_id}) -> {user is not None}")
        return user

    async def find_by_username(self, session: AsyncSession, username: str) -> User | None:
        return await self.get_by(session, User.username, username)

    async def find_by_email(self, session: AsyncSession, email: str) -> User | None:
        return await self.get_by(session, User.email, email)

    async def find_anchor(self, session: AsyncSession, cursor: UUID) -> dict[str, Any] | None:
        """Resolve a cursor id to its sort key values.

        The lookup ignores soft-delete state so a page boundary stays stable
        when the anchor row is deleted between requests.

        Returns:
            ``{"created_at": ..., "id": ...}`` or None when no row has that id.
        """
        stmt = select(User.created_at, User.id).where(User.id == cursor)
        row = (await session.execute(stmt)).one_or_none()
        if row is None:
            self._lazy.debug(lambda: f"db.find_anchor({cursor}) -> not found")
            return None
        return {"created_at": row.created_at, "id": row.id}

    async def paginate_offset(
        self,
        session: AsyncSession,
        *,
        limit: int,
        offset: int,
    ) -> SearchResult[User]:
        """Count then slice the active users, newest first."""
        return await self.search(session, self.active_listing(), limit=limit, offset=offset)

    async def paginate_cursor(
        self,
        session: AsyncSession,
        *,
        anchor: dict[str, Any] | None,
        limit: int,
    ) -> KeysetResult[User]:
        """Fetch active users strictly after ``anchor`` in listing order."""
        stmt = select(User).where(User.deleted_at.is_(None))
        return await self.paginate_keyset(
            session, stmt, order_by=LISTING_ORDER, anchor=anchor, limit=limit,
        )

    async def list_active(self, session: AsyncSession) -> Sequence[User]:
        """All active users in listing order, unpaginated."""
        result = await session.execute(self.active_listing())
        users = result.scalars().all()

        self._lazy.debug(lambda: f"db.list_active -> {len(users)} users")
        return users


_user_repository: UserRepository | None = None


def get_user_repository() -> UserRepository:
    """Get the UserRepository singleton.

    Usage in FastAPI routes:
        from user_service.features.users.repository import (
            UserRepository,
            get_user_repository,
        )

        @router.get("/{user_id}")
        async def get_user(
            user_id: UUID,
            session: AsyncSession = Depends(get_db_session),
            repo: UserRepository = Depends(get_user_repository),
        ):
            return await repo.get_or_raise(session, user_id)
    """
    global _user_repository
    if _user_repository is None:
        _user_repository = UserRepository()
    return _user_repository
