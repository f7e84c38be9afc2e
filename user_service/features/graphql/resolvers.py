"""Query and mutation resolvers for users.

Resolvers call the same UserService as the REST routes, with the
request-scoped session and RequestContext taken from the GraphQL context.
"""

from __future__ import annotations

import logging
from uuid import UUID

import strawberry
from graphql import GraphQLError
from pydantic import ValidationError as PydanticValidationError
from strawberry.types import Info

from user_service.core.pagination import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    CursorPageQuery,
    OffsetPageQuery,
)
from user_service.features.graphql.context import GraphQLContext
from user_service.features.graphql.errors import translate_app_errors
from user_service.features.graphql.types import (
    DeleteUserPayload,
    UserCursorPage,
    UserPage,
    UserProfileInput,
    UserType,
)
from user_service.features.users.schemas import UserProfileUpdate
from user_service.features.users.service import UserService

logger = logging.getLogger(__name__)


def _service(info: Info[GraphQLContext, None]) -> UserService:
    return UserService(info.context.session)


@strawberry.type
class Query:
    @strawberry.field(description="Offset page of active users, newest first")
    @translate_app_errors
    async def users(
        self,
        info: Info[GraphQLContext, None],
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> UserPage:
        result = await _service(info).list_users_offset(OffsetPageQuery(page=page, limit=limit))
        return UserPage.from_result(result)

    @strawberry.field(description="Cursor page of active users after after_cursor")
    @translate_app_errors
    async def users_cursor(
        self,
        info: Info[GraphQLContext, None],
        after_cursor: UUID | None = None,
        before_cursor: UUID | None = None,
        limit: int = DEFAULT_LIMIT,
    ) -> UserCursorPage:
        query = CursorPageQuery(limit=limit, after_cursor=after_cursor, before_cursor=before_cursor)
        result = await _service(info).list_users_cursor(query)
        return UserCursorPage.from_result(result)

    @strawberry.field(description="A single active user")
    @translate_app_errors
    async def user(self, info: Info[GraphQLContext, None], id: UUID) -> UserType:  # noqa: A002
        return UserType.from_model(await _service(info).get_user(id))


@strawberry.type
class Mutation:
    @strawberry.mutation(description="Soft-delete a user; repeating it is a no-op")
    @translate_app_errors
    async def delete_user(
        self,
        info: Info[GraphQLContext, None],
        id: UUID,  # noqa: A002
    ) -> DeleteUserPayload:
        user, changed = await _service(info).delete_user(id, info.context.request_context)
        return DeleteUserPayload(id=user.id, deleted_at=user.deleted_at, already_deleted=not changed)

    @strawberry.mutation(description="Undo a soft delete")
    @translate_app_errors
    async def restore_user(self, info: Info[GraphQLContext, None], id: UUID) -> UserType:  # noqa: A002
        user = await _service(info).restore_user(id, info.context.request_context)
        return UserType.from_model(user)

    @strawberry.mutation(description="Partial profile update")
    @translate_app_errors
    async def update_user_profile(
        self,
        info: Info[GraphQLContext, None],
        id: UUID,  # noqa: A002
        input: UserProfileInput,  # noqa: A002
    ) -> UserType:
        try:
            payload = UserProfileUpdate.model_validate(input.to_payload())
        except PydanticValidationError as exc:
            raise GraphQLError(
                "Invalid profile input",
                extensions={
                    "code": "validation-error",
                    "status": 422,
                    "errors": [
                        {"field": ".".join(str(p) for p in e["loc"]), "message": e["msg"]}
                        for e in exc.errors()
                    ],
                },
            ) from exc

        user = await _service(info).update_user_profile(id, payload, info.context.request_context)
        return UserType.from_model(user)
