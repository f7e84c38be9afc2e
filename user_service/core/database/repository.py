"""Generic repository over an ``AsyncSession`` passed in on every call.

Feature repositories subclass it for their own queries and get primary key
lookups, offset search with a total, keyset paging and soft delete.

Example:
    class UserRepository(BaseRepository[User]):
        async def find_by_email(self, session: AsyncSession, email: str) -> User | None:
            return await self.get_by(session, User.email, email)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import Select, func, select

from user_service.core.database.exceptions import NotFoundError
from user_service.core.pagination.filters import KeysetFilter, SortDirection
from user_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class SearchResult(Generic[T]):
    """One LIMIT/OFFSET slice plus the total row count."""

    items: Sequence[T]
    total: int
    limit: int
    offset: int

    @property
    def page(self) -> int:
        """1-based page number of ``offset``."""
        return self.offset // self.limit + 1 if self.limit else 1

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 1

    @property
    def has_next(self) -> bool:
        return self.offset + self.limit < self.total


@dataclass(slots=True, frozen=True)
class KeysetResult(Generic[T]):
    """Rows after an anchor; ``has_more`` is set when row ``limit + 1`` existed."""

    items: Sequence[T]
    limit: int
    has_more: bool

    def _id_at(self, index: int) -> str | None:
        return str(self.items[index].id) if self.items else None  # type: ignore[attr-defined]

    @property
    def start_cursor(self) -> str | None:
        return self._id_at(0)

    @property
    def end_cursor(self) -> str | None:
        return self._id_at(-1)

    @property
    def next_cursor(self) -> str | None:
        return self.end_cursor if self.has_more else None


class BaseRepository(Generic[T]):
    __slots__ = ("_lazy", "_logger", "model")

    def __init__(self, model: type[T]) -> None:
        self.model = model
        name = f"repository.{model.__name__}"
        self._logger = logging.getLogger(name)
        # DEBUG lines are built lazily; INFO and up go through _logger
        self._lazy = get_lazy_logger(name)

    def _log_change(self, message: str, instance: T, **fields: Any) -> None:
        self._logger.info(
            message,
            extra={"entity": self.model.__name__, "id": str(getattr(instance, "id", None)), **fields},
        )

    async def get(self, session: AsyncSession, id: Any) -> T | None:  # noqa: A002
        """Primary key lookup that ignores the soft-delete marker."""
        instance = await session.get(self.model, id)
        self._lazy.debug(lambda: f"db.get: {self.model.__name__}({id}) -> {instance is not None}")
        return instance

    async def get_or_raise(self, session: AsyncSession, id: Any) -> T:  # noqa: A002
        instance = await self.get(session, id)
        if instance is None:
            raise NotFoundError(self.model.__name__, {"id": id})
        return instance

    async def get_by(
        self,
        session: AsyncSession,
        attr: InstrumentedAttribute[Any],
        value: Any,
    ) -> T | None:
        instance = (await session.execute(select(self.model).where(attr == value))).scalar_one_or_none()
        self._lazy.debug(
            lambda: f"db.get_by: {self.model.__name__}.{attr.key}={value!r} -> {instance is not None}"
        )
        return instance

    async def search(
        self,
        session: AsyncSession,
        statement: Select[tuple[T]],
        *,
        limit: int = 20,
        offset: int = 0,
    ) -> SearchResult[T]:
        """COUNT the filtered statement, then fetch one slice of it.

        The two reads are separate statements, so a concurrent write can
        leave ``total`` one page behind the slice.
        """
        counted = select(func.count()).select_from(statement.order_by(None).subquery())
        total = (await session.execute(counted)).scalar_one()
        items = (await session.execute(statement.limit(limit).offset(offset))).scalars().all()

        self._lazy.debug(
            lambda: f"db.search: {self.model.__name__}(limit={limit}, offset={offset}) -> {len(items)}/{total}"
        )
        return SearchResult(items=items, total=total, limit=limit, offset=offset)

    async def paginate_keyset(
        self,
        session: AsyncSession,
        statement: Select[tuple[T]],
        *,
        order_by: Sequence[tuple[InstrumentedAttribute[Any], SortDirection]],
        anchor: Mapping[str, Any] | None,
        limit: int,
    ) -> KeysetResult[T]:
        """Rows strictly after ``anchor`` in ``order_by`` order; no anchor means the first page."""
        paginated = KeysetFilter(order_by=order_by, anchor=anchor, limit=limit).apply(statement)
        rows = (await session.execute(paginated)).scalars().all()
        has_more = len(rows) > limit
        page = rows[:limit]

        self._lazy.debug(
            lambda: f"db.paginate_keyset: {self.model.__name__}(limit={limit}, anchored={anchor is not None}) "
            f"-> {len(page)}, has_more={has_more}"
        )
        return KeysetResult(items=page, limit=limit, has_more=has_more)

    async def create(self, session: AsyncSession, instance: T) -> T:
        """Add and flush, then refresh so server defaults are loaded."""
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        self._lazy.debug(lambda: f"db.create: {self.model.__name__}(id={getattr(instance, 'id', None)})")
        return instance

    async def soft_delete(
        self,
        session: AsyncSession,
        instance: T,
        *,
        deleted_by: str | None = None,
    ) -> bool:
        """Stamp ``deleted_at``; False when it was already set, which keeps the first stamp."""
        if instance.deleted_at is not None:  # type: ignore[attr-defined]
            return False

        instance.deleted_at = datetime.now(UTC)  # type: ignore[attr-defined]
        instance.deleted_by = deleted_by  # type: ignore[attr-defined]
        await session.flush()
        self._log_change("Entity soft-deleted", instance, deleted_by=deleted_by)
        return True

    async def restore(self, session: AsyncSession, instance: T) -> bool:
        """Clear ``deleted_at``; False when the row was live."""
        if instance.deleted_at is None:  # type: ignore[attr-defined]
            return False

        instance.deleted_at = None  # type: ignore[attr-defined]
        instance.deleted_by = None  # type: ignore[attr-defined]
        await session.flush()
        self._log_change("Entity restored", instance)
        return True
