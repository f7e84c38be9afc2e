"""Pagination response schemas.

Two listing styles share the ``{"data": [...], "pagination": {...}}`` shape:

1. Offset pages: page number, page size, total count, has_next.
2. Cursor pages: start/end cursors (row ids), has_more and a ready-to-use
   next_cursor.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from user_service.core.database.repository import KeysetResult, SearchResult

T = TypeVar("T")


class OffsetPageMeta(BaseModel):
    """Metadata of an offset (page-number) listing."""

    page_number: int = Field(ge=1, description="Current page (1-based)")
    page_size: int = Field(ge=1, description="Requested page size")
    total_count: int = Field(ge=0, description="Total number of matching rows")
    total_pages: int = Field(ge=0, description="Number of pages at this page size")
    has_next: bool = Field(description="Whether a further page exists")

    @classmethod
    def from_result(cls, result: SearchResult[Any]) -> OffsetPageMeta:
        return cls(
            page_number=result.page,
            page_size=result.limit,
            total_count=result.total,
            total_pages=result.pages,
            has_next=result.has_next,
        )


class CursorPageMeta(BaseModel):
    """Metadata of a keyset (cursor) listing."""

    limit: int = Field(ge=1, description="Requested page size")
    count: int = Field(ge=0, description="Number of rows in this page")
    start_cursor: str | None = Field(default=None, description="Id of the first row")
    end_cursor: str | None = Field(default=None, description="Id of the last row")
    has_more: bool = Field(description="Whether rows exist after end_cursor")
    next_cursor: str | None = Field(
        default=None,
        description="Value to pass as after_cursor for the next page (null on the last page)",
    )

    @classmethod
    def from_result(cls, result: KeysetResult[Any]) -> CursorPageMeta:
        return cls(
            limit=result.limit,
            count=len(result.items),
            start_cursor=result.start_cursor,
            end_cursor=result.end_cursor,
            has_more=result.has_more,
            next_cursor=result.next_cursor,
        )


class OffsetPage(BaseModel, Generic[T]):
    """Offset-paginated response.

    Example response:
        {
            "data": [{"id": "...", "username": "alice"}],
            "pagination": {"page_number": 1, "page_size": 20, "total_count": 1, ...}
        }
    """

    data: list[T] = Field(description="Rows of the current page")
    pagination: OffsetPageMeta


class CursorPage(BaseModel, Generic[T]):
    """Cursor-paginated response.

    Example response:
        {
            "data": [{"id": "...", "username": "alice"}],
            "pagination": {"limit": 20, "count": 1, "has_more": false, ...}
        }
    """

    data: list[T] = Field(description="Rows of the current page")
    pagination: CursorPageMeta
