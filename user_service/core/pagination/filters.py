"""Keyset (seek) filter for SQLAlchemy queries.

Instead of OFFSET, the page start is expressed as a WHERE condition on the
sort key of an anchor row, which stays correct when rows are inserted
between requests.

How it works:
    For ORDER BY created_at DESC, id DESC with the anchor at (t1, id1):
    WHERE (created_at < t1) OR (created_at = t1 AND id < id1)

The trailing id column makes the order total, so rows sharing a timestamp
are neither skipped nor repeated across pages.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import Select, and_, or_

if TYPE_CHECKING:
    from sqlalchemy.orm import InstrumentedAttribute

SortDirection = Literal["asc", "desc"]


class KeysetFilter:
    """Apply keyset pagination to a SQLAlchemy select.

    Example:
        stmt = select(User).where(User.deleted_at.is_(None))
        stmt = KeysetFilter(
            order_by=[(User.created_at, "desc"), (User.id, "desc")],
            anchor={"created_at": anchor_ts, "id": anchor_id},
            limit=20,
        ).apply(stmt)

    The filter adds the seek condition (when an anchor is given), the
    ORDER BY clause and a LIMIT of ``limit + 1`` so that the caller can
    detect whether another page exists.

    Attributes:
        order_by: (column, direction) pairs; the last column must be unique.
        anchor: Sort-key values of the anchor row keyed by column name,
            or None for the first page.
        limit: Page size.
    """

    def __init__(
        self,
        order_by: Sequence[tuple[InstrumentedAttribute[Any], SortDirection]],
        anchor: Mapping[str, Any] | None,
        limit: int,
    ) -> None:
        self.order_by = list(order_by)
        self.anchor = anchor
        self.limit = limit

    def apply(self, statement: Select[Any]) -> Select[Any]:
        statement = self._apply_ordering(statement)
        if self.anchor is not None:
            statement = statement.where(self.seek_condition())
        return statement.limit(self.limit + 1)

    def _apply_ordering(self, statement: Select[Any]) -> Select[Any]:
        for column, direction in self.order_by:
            statement = statement.order_by(column.desc() if direction == "desc" else column.asc())
        return statement

    def seek_condition(self) -> Any:
        """Build the compound condition selecting rows strictly after the anchor.

        For columns (a, b, c) with anchor values (v1, v2, v3):
            (a op v1) OR
            (a = v1 AND b op v2) OR
            (a = v1 AND b = v2 AND c op v3)

        where 'op' is < for descending and > for ascending columns.
        """
        if self.anchor is None:
            msg = "seek_condition() requires an anchor"
            raise ValueError(msg)

        or_conditions = []
        for i, (column, direction) in enumerate(self.order_by):
            value = self.anchor[column.key]
            compare = column < value if direction == "desc" else column > value

            eq_conditions = [
                prev_column == self.anchor[prev_column.key]
                for prev_column, _ in self.order_by[:i]
            ]
            or_conditions.append(and_(*eq_conditions, compare) if eq_conditions else compare)

        return or_(*or_conditions)
