"""Offset and keyset pagination.

- Query structs (OffsetPageQuery, CursorPageQuery) validate requests
- KeysetFilter seeks past an anchor row in a total order
- OffsetPage / CursorPage are the response envelopes

Usage:
    query = CursorPageQuery(limit=20, after_cursor=last_seen_id)
    result = await repo.paginate_cursor(session, query)
"""

from user_service.core.pagination.filters import KeysetFilter
from user_service.core.pagination.queries import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_LIMIT,
    CursorDirection,
    CursorPageQuery,
    OffsetPageQuery,
)
from user_service.core.pagination.schemas import (
    CursorPage,
    CursorPageMeta,
    OffsetPage,
    OffsetPageMeta,
)

__all__ = [
    "DEFAULT_LIMIT",
    "DEFAULT_PAGE",
    "MAX_LIMIT",
    "CursorDirection",
    "CursorPage",
    "CursorPageMeta",
    "CursorPageQuery",
    "KeysetFilter",
    "OffsetPage",
    "OffsetPageMeta",
    "OffsetPageQuery",
]
