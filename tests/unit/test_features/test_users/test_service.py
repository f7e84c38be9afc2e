"""Service tests: business rules for listings, soft delete and profile updates."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from uuid import UUID

import pytest

from user_service.core.context import RequestContext
from user_service.core.exceptions import (
    BadRequestException,
    ConflictException,
    NotFoundException,
)
from user_service.core.pagination import CursorPageQuery, OffsetPageQuery
from user_service.features.users.models import UserRole
from user_service.features.users.repository import UserRepository
from user_service.features.users.schemas import UserCreate, UserProfileUpdate
from user_service.features.users.service import UserService

T1 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)
ACTOR = UUID(int=1000)


class LateWriterRepository(UserRepository):
    """Lookups that miss a row another transaction commits right after them."""

    async def find_by_username(self, session, username):
        return None

    async def find_by_email(self, session, email):
        return None


@pytest.fixture
def service(session) -> UserService:
    return UserService(session)


@pytest.fixture
def ctx() -> RequestContext:
    return RequestContext(request_id="req-1", user_id=ACTOR)


class TestListings:
    async def test_offset_page(self, service, make_user):
        for i in range(1, 4):
            await make_user(f"user-{i}", n=i, created_at=T1 + timedelta(minutes=i))

        result = await service.list_users_offset(OffsetPageQuery(page=1, limit=2))

        assert [u.username for u in result.items] == ["user-3", "user-2"]
        assert result.total == 3
        assert result.has_next is True

    async def test_cursor_page_follows_next_cursor(self, service, make_user):
        for i in range(1, 4):
            await make_user(f"user-{i}", n=i, created_at=T1 + timedelta(minutes=i))

        first = await service.list_users_cursor(CursorPageQuery(limit=2))
        second = await service.list_users_cursor(
            CursorPageQuery(limit=2, after_cursor=UUID(first.next_cursor)),
        )

        assert [u.username for u in second.items] == ["user-1"]
        assert second.has_more is False

    async def test_unknown_cursor_degrades_to_first_page(
        self, service, make_user, caplog: pytest.LogCaptureFixture,
    ):
        await make_user("only", n=1)

        with caplog.at_level(logging.DEBUG, logger="user_service.features.users.service"):
            result = await service.list_users_cursor(
                CursorPageQuery(limit=5, after_cursor=UUID(int=404)),
            )

        assert [u.username for u in result.items] == ["only"]
        assert any("unknown cursor" in r.getMessage() for r in caplog.records)

    async def test_before_cursor_rejected(self, service):
        with pytest.raises(BadRequestException) as exc_info:
            await service.list_users_cursor(CursorPageQuery(before_cursor=UUID(int=1)))

        assert exc_info.value.status_code == 400
        assert exc_info.value.type == "unsupported-cursor-direction"


class TestGetUser:
    async def test_deleted_user_is_not_found(self, service, make_user):
        await make_user("gone", n=1, deleted=True)

        with pytest.raises(NotFoundException) as exc_info:
            await service.get_user(UUID(int=1))

        assert exc_info.value.type == "user-not-found"


class TestDeleteUser:
    async def test_delete_records_actor(self, service, make_user, ctx):
        await make_user("victim", n=1)

        user, changed = await service.delete_user(UUID(int=1), ctx)

        assert changed is True
        assert user.deleted_at is not None
        assert user.deleted_by == str(ACTOR)

    async def test_second_delete_is_noop(self, service, make_user, ctx):
        await make_user("victim", n=1)
        user, _ = await service.delete_user(UUID(int=1), ctx)
        first_deleted_at = user.deleted_at

        again, changed = await service.delete_user(UUID(int=1), RequestContext.system())

        assert changed is False
        assert again.deleted_at == first_deleted_at
        assert again.deleted_by == str(ACTOR)

    async def test_unknown_user(self, service, ctx):
        with pytest.raises(NotFoundException):
            await service.delete_user(UUID(int=404), ctx)

    async def test_deleted_user_disappears_from_listings(self, service, make_user, ctx):
        await make_user("keep", n=1)
        await make_user("drop", n=2)

        await service.delete_user(UUID(int=2), ctx)

        assert [u.username for u in await service.list_all_users()] == ["keep"]


class TestRestoreUser:
    async def test_restore_makes_user_visible(self, service, make_user, ctx):
        await make_user("back", n=1, deleted=True)

        user = await service.restore_user(UUID(int=1), ctx)

        assert user.deleted_at is None
        assert (await service.get_user(UUID(int=1))).username == "back"

    async def test_restore_live_user_is_noop(self, service, make_user, ctx):
        await make_user("live", n=1)

        user = await service.restore_user(UUID(int=1), ctx)

        assert user.deleted_at is None


class TestUpdateProfile:
    async def test_only_sent_fields_change(self, service, make_user, ctx):
        user = await make_user("alice", n=1)
        user.last_name = "Liddell"

        updated = await service.update_user_profile(
            UUID(int=1), UserProfileUpdate(first_name="Alice"), ctx,
        )

        assert updated.first_name == "Alice"
        assert updated.last_name == "Liddell"

    async def test_explicit_null_clears_optional_field(self, service, make_user, ctx):
        user = await make_user("alice", n=1)
        user.bio = "hello"

        updated = await service.update_user_profile(
            UUID(int=1), UserProfileUpdate.model_validate({"bio": None}), ctx,
        )

        assert updated.bio is None

    async def test_null_username_keeps_username(self, service, make_user, ctx):
        await make_user("alice", n=1)

        updated = await service.update_user_profile(
            UUID(int=1), UserProfileUpdate.model_validate({"username": None}), ctx,
        )

        assert updated.username == "alice"

    async def test_taken_username_conflicts(self, service, make_user, ctx):
        await make_user("alice", n=1)
        await make_user("bob", n=2)

        with pytest.raises(ConflictException) as exc_info:
            await service.update_user_profile(
                UUID(int=1), UserProfileUpdate(username="bob"), ctx,
            )

        assert exc_info.value.type == "username-taken"

    async def test_username_taken_between_check_and_flush(self, session, make_user, ctx):
        await make_user("alice", n=1)
        await make_user("bob", n=2)
        service = UserService(session, repo=LateWriterRepository())

        with pytest.raises(ConflictException) as exc_info:
            await service.update_user_profile(
                UUID(int=1), UserProfileUpdate(username="bob"), ctx,
            )
        await session.rollback()

        assert exc_info.value.status_code == 409
        assert exc_info.value.type == "username-taken"
        assert exc_info.value.extra == {"username": "bob"}

    async def test_same_username_is_not_a_conflict(self, service, make_user, ctx):
        await make_user("alice", n=1)

        updated = await service.update_user_profile(
            UUID(int=1), UserProfileUpdate(username="alice", first_name="A"), ctx,
        )

        assert updated.first_name == "A"

    async def test_deleted_user_cannot_be_updated(self, service, make_user, ctx):
        await make_user("gone", n=1, deleted=True)

        with pytest.raises(NotFoundException):
            await service.update_user_profile(UUID(int=1), UserProfileUpdate(bio="x"), ctx)


class TestCreateUser:
    async def test_create(self, service):
        user = await service.create_user(
            UserCreate(username="admin", email="admin@example.com", role=UserRole.ADMIN),
        )

        assert user.id is not None
        assert user.role is UserRole.ADMIN
        assert user.is_email_verified is False

    async def test_duplicate_email_conflicts(self, service, make_user):
        await make_user("alice", n=1)

        with pytest.raises(ConflictException) as exc_info:
            await service.create_user(UserCreate(username="alice2", email="alice@example.com"))

        assert exc_info.value.type == "email-taken"

    async def test_username_taken_between_check_and_insert(self, session, make_user):
        await make_user("alice", n=1)
        service = UserService(session, repo=LateWriterRepository())

        with pytest.raises(ConflictException) as exc_info:
            await service.create_user(UserCreate(username="alice", email="other@example.com"))
        await session.rollback()

        assert exc_info.value.type == "username-taken"

    async def test_email_taken_between_check_and_insert(self, session, make_user):
        await make_user("alice", n=1)
        service = UserService(session, repo=LateWriterRepository())

        with pytest.raises(ConflictException) as exc_info:
            await service.create_user(UserCreate(username="alice2", email="alice@example.com"))
        await session.rollback()

        assert exc_info.value.type == "email-taken"
        assert "INSERT" not in exc_info.value.detail
