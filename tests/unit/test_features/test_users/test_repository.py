"""Repository tests for listing order, offset and keyset pagination."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import UUID

import pytest

from user_service.features.users.repository import UserRepository, get_user_repository

T1 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)
T2 = T1 + timedelta(hours=1)


@pytest.fixture
def repo() -> UserRepository:
    return get_user_repository()


def _names(users) -> list[str]:
    return [u.username for u in users]


class TestActiveListing:
    async def test_newest_first_with_id_tiebreak(self, session, make_user, repo):
        await make_user("old", n=1, created_at=T1)
        await make_user("tie-low", n=2, created_at=T2)
        await make_user("tie-high", n=3, created_at=T2)

        users = await repo.list_active(session)

        assert _names(users) == ["tie-high", "tie-low", "old"]

    async def test_deleted_users_never_listed(self, session, make_user, repo):
        await make_user("alive", n=1)
        await make_user("gone", n=2, deleted=True)

        assert _names(await repo.list_active(session)) == ["alive"]
        assert await repo.get_active(session, UUID(int=2)) is None
        assert (await repo.get(session, UUID(int=2))).username == "gone"


class TestOffsetPagination:
    async def test_count_then_slice(self, session, make_user, repo):
        for i in range(1, 6):
            await make_user(f"user-{i}", n=i, created_at=T1 + timedelta(minutes=i))
        await make_user("deleted", n=99, deleted=True)

        result = await repo.paginate_offset(session, limit=2, offset=2)

        assert result.total == 5
        assert _names(result.items) == ["user-3", "user-2"]
        assert result.has_next is True
        assert result.page == 2

    async def test_empty_table(self, session, repo):
        result = await repo.paginate_offset(session, limit=20, offset=0)

        assert result.total == 0
        assert list(result.items) == []
        assert result.has_next is False


class TestKeysetPagination:
    async def test_duplicate_timestamps_resolved_by_id(self, session, make_user, repo):
        # (T2, "b") is the anchor; "a" shares its timestamp with a lower id
        await make_user("c", n=1, created_at=T1)
        await make_user("a", n=2, created_at=T2)
        await make_user("b", n=3, created_at=T2)

        anchor = await repo.find_anchor(session, UUID(int=3))
        result = await repo.paginate_cursor(session, anchor=anchor, limit=10)

        assert _names(result.items) == ["a", "c"]
        assert result.has_more is False

    async def test_has_more_from_extra_row(self, session, make_user, repo):
        for i in range(1, 4):
            await make_user(f"u{i}", n=i, created_at=T1 + timedelta(minutes=i))

        result = await repo.paginate_cursor(session, anchor=None, limit=2)

        assert _names(result.items) == ["u3", "u2"]
        assert result.has_more is True
        assert result.next_cursor == str(UUID(int=2))

    async def test_pages_cover_every_row_once(self, session, make_user, repo):
        for i in range(1, 8):
            # Pairs of rows share a timestamp
            await make_user(f"u{i}", n=i, created_at=T1 + timedelta(minutes=i // 2))

        seen: list[str] = []
        anchor = None
        while True:
            page = await repo.paginate_cursor(session, anchor=anchor, limit=3)
            seen.extend(_names(page.items))
            if not page.has_more:
                break
            anchor = await repo.find_anchor(session, UUID(page.next_cursor))

        assert sorted(seen) == sorted(f"u{i}" for i in range(1, 8))
        assert len(seen) == 7

    async def test_deleted_anchor_still_seeks(self, session, make_user, repo):
        await make_user("first", n=1, created_at=T1)
        await make_user("anchor", n=2, created_at=T2, deleted=True)

        anchor = await repo.find_anchor(session, UUID(int=2))
        result = await repo.paginate_cursor(session, anchor=anchor, limit=10)

        assert anchor is not None
        assert _names(result.items) == ["first"]

    async def test_deleted_row_inside_page_is_skipped(self, session, make_user, repo):
        for i in range(1, 6):
            await make_user(f"u{i}", n=i, created_at=T1 + timedelta(minutes=i), deleted=i == 4)

        anchor = await repo.find_anchor(session, UUID(int=5))
        result = await repo.paginate_cursor(session, anchor=anchor, limit=2)

        assert _names(result.items) == ["u3", "u2"]
        assert result.has_more is True

    async def test_first_page_skips_deleted_rows(self, session, make_user, repo):
        for i in range(1, 5):
            await make_user(f"u{i}", n=i, created_at=T1 + timedelta(minutes=i), deleted=i in (2, 4))

        result = await repo.paginate_cursor(session, anchor=None, limit=2)

        assert _names(result.items) == ["u3", "u1"]
        assert result.has_more is False
        assert result.next_cursor is None

    async def test_unknown_anchor(self, session, repo):
        assert await repo.find_anchor(session, UUID(int=404)) is None


class TestRepeatableReads:
    """Without writes in between, the same page query returns the same rows."""

    @pytest.fixture(autouse=True)
    async def users(self, make_user):
        for i in range(1, 8):
            await make_user(f"u{i}", n=i, created_at=T1 + timedelta(minutes=i // 2), deleted=i == 5)

    async def test_offset_page_is_repeatable(self, session, repo):
        first = await repo.paginate_offset(session, limit=3, offset=3)
        second = await repo.paginate_offset(session, limit=3, offset=3)

        assert [u.id for u in first.items] == [u.id for u in second.items]
        assert first.total == second.total == 6

    async def test_cursor_page_is_repeatable(self, session, repo):
        anchor = await repo.find_anchor(session, UUID(int=6))

        first = await repo.paginate_cursor(session, anchor=anchor, limit=3)
        second = await repo.paginate_cursor(session, anchor=anchor, limit=3)

        assert [u.id for u in first.items] == [u.id for u in second.items]
        assert first.has_more == second.has_more


class TestSoftDelete:
    async def test_repeat_delete_keeps_first_timestamp(self, session, make_user, repo):
        user = await make_user("victim", n=1)

        assert await repo.soft_delete(session, user, deleted_by="admin") is True
        first_deleted_at = user.deleted_at

        assert await repo.soft_delete(session, user, deleted_by="someone-else") is False
        assert user.deleted_at == first_deleted_at
        assert user.deleted_by == "admin"

    async def test_restore(self, session, make_user, repo):
        user = await make_user("back", n=1, deleted=True)

        assert await repo.restore(session, user) is True
        assert user.deleted_at is None
        assert await repo.restore(session, user) is False
