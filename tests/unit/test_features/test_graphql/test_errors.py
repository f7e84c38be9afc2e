"""Unit tests for GraphQL error translation, masking and input handling."""

from __future__ import annotations

import pytest
from graphql import GraphQLError

from user_service.core.exceptions import ConflictException, NotFoundException
from user_service.features.graphql.errors import (
    is_user_facing_error,
    to_graphql_error,
    translate_app_errors,
)
from user_service.features.graphql.schema import create_schema
from user_service.features.graphql.types import UserProfileInput


def test_app_exception_becomes_coded_error():
    error = to_graphql_error(
        ConflictException(detail="taken", type="username-taken", extra={"username": "bob"}),
    )

    assert error.message == "taken"
    assert error.extensions == {"code": "username-taken", "status": 409, "username": "bob"}


async def test_decorator_translates_app_errors():
    @translate_app_errors
    async def resolver() -> None:
        raise NotFoundException(detail="User with id 1 not found", type="user-not-found")

    with pytest.raises(GraphQLError) as exc_info:
        await resolver()

    assert exc_info.value.extensions["code"] == "user-not-found"


async def test_decorator_leaves_other_errors_alone():
    @translate_app_errors
    async def resolver() -> None:
        raise RuntimeError("internal")

    with pytest.raises(RuntimeError):
        await resolver()


class TestUserFacing:
    def test_coded_errors_are_user_facing(self):
        assert is_user_facing_error(GraphQLError("x", extensions={"code": "c"}))

    def test_query_errors_are_user_facing(self):
        assert is_user_facing_error(GraphQLError("Cannot query field 'nope'"))

    def test_wrapped_exceptions_are_internal(self):
        error = GraphQLError("boom", original_error=RuntimeError("boom"))

        assert not is_user_facing_error(error)


class TestProfileInput:
    def test_only_sent_fields_in_payload(self):
        assert UserProfileInput(first_name="Ann").to_payload() == {"first_name": "Ann"}

    def test_explicit_null_kept(self):
        assert UserProfileInput(bio=None).to_payload() == {"bio": None}


class TestSchema:
    def test_schema_exposes_user_operations(self):
        sdl = str(create_schema(mask_errors=False))

        for field in ("users(", "usersCursor(", "user(", "deleteUser(", "restoreUser(", "updateUserProfile("):
            assert field in sdl

    async def test_production_masks_internal_errors(self):
        schema = create_schema(mask_errors=True)
        # No context: the resolver fails on attribute access
        result = await schema.execute('{ user(id: "00000000-0000-0000-0000-000000000001") { id } }')

        assert result.errors is not None
        assert result.errors[0].message == "Unexpected error."
