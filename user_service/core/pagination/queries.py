"""Query configuration for offset and cursor pagination.

Each listing operation takes one of these frozen structs instead of a loose
option bag; construction validates the bounds so every caller (REST,
GraphQL, CLI) gets the same errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID

from user_service.core.exceptions import ValidationException

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100


class CursorDirection(StrEnum):
    FORWARD = "forward"
    BACKWARD = "backward"


def _check_limit(limit: int) -> None:
    if not 1 <= limit <= MAX_LIMIT:
        raise ValidationException(
            detail=f"limit must be between 1 and {MAX_LIMIT}",
            extra={"field": "limit", "value": limit},
        )


@dataclass(frozen=True, slots=True)
class OffsetPageQuery:
    """Page-number pagination request.

    Attributes:
        page: 1-based page number.
        limit: Page size.
    """

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationException(
                detail="page must be greater than or equal to 1",
                extra={"field": "page", "value": self.page},
            )
        _check_limit(self.limit)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True, slots=True)
class CursorPageQuery:
    """Keyset pagination request anchored on a row id.

    Attributes:
        limit: Maximum number of rows to return.
        after_cursor: Id of the row after which the page starts.
        before_cursor: Id of the row before which the page ends.
    """

    limit: int = DEFAULT_LIMIT
    after_cursor: UUID | None = None
    before_cursor: UUID | None = None

    def __post_init__(self) -> None:
        _check_limit(self.limit)
        if self.after_cursor is not None and self.before_cursor is not None:
            raise ValidationException(
                detail="after_cursor and before_cursor are mutually exclusive",
                extra={"field": "before_cursor"},
            )

    @property
    def direction(self) -> CursorDirection:
        if self.before_cursor is not None:
            return CursorDirection.BACKWARD
        return CursorDirection.FORWARD
