"""API router for the users feature.

Endpoints:
    GET    /users                    - Offset page of active users
    GET    /users/cursor             - Cursor page of active users
    GET    /users/me                 - The caller's own user
    PATCH  /users/me                 - Update the caller's own profile
    GET    /users/{user_id}          - A single active user
    PATCH  /users/{user_id}          - Update a user's profile
    DELETE /users/{user_id}          - Soft-delete a user
    POST   /users/{user_id}/restore  - Undo a soft delete

Listings are ordered newest first (created_at DESC, id DESC) and never
include soft-deleted users.

Example Usage:
    # First page, then follow the cursor
    GET /users/cursor?limit=20
    GET /users/cursor?limit=20&after_cursor={pagination.next_cursor}
"""

from __future__ import annotations

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from user_service.core.dependencies import ContextDep, CurrentUserIdDep
from user_service.core.pagination import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_LIMIT,
    CursorPage,
    CursorPageMeta,
    CursorPageQuery,
    OffsetPage,
    OffsetPageMeta,
    OffsetPageQuery,
)
from user_service.core.schemas.error import ProblemDetail
from user_service.features.users.dependencies import UserServiceDep
from user_service.features.users.schemas import (
    UserDeletedResponse,
    UserProfileUpdate,
    UserResponse,
)

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ProblemDetail, "description": "User not found"}}


# ──────────────────────────────────────────────────────────────
# Listings
# ──────────────────────────────────────────────────────────────


@router.get(
    "",
    response_model=OffsetPage[UserResponse],
    summary="List users (offset)",
    description="Page-number pagination over active users, newest first.",
)
async def list_users(
    service: UserServiceDep,
    page: Annotated[int, Query(ge=1, description="1-based page number")] = DEFAULT_PAGE,
    limit: Annotated[int, Query(ge=1, le=MAX_LIMIT, description="Page size")] = DEFAULT_LIMIT,
) -> OffsetPage[UserResponse]:
    result = await service.list_users_offset(OffsetPageQuery(page=page, limit=limit))
    return OffsetPage[UserResponse](
        data=[UserResponse.model_validate(u) for u in result.items],
        pagination=OffsetPageMeta.from_result(result),
    )


@router.get(
    "/cursor",
    response_model=CursorPage[UserResponse],
    summary="List users (cursor)",
    description=(
        "Keyset pagination over active users, newest first. Pass the previous "
        "page's next_cursor as after_cursor. before_cursor is rejected with 400."
    ),
    responses={status.HTTP_400_BAD_REQUEST: {"model": ProblemDetail}},
)
async def list_users_cursor(
    service: UserServiceDep,
    after_cursor: Annotated[UUID | None, Query(description="Id of the last row seen")] = None,
    before_cursor: Annotated[UUID | None, Query(description="Not supported")] = None,
    limit: Annotated[int, Query(ge=1, le=MAX_LIMIT, description="Page size")] = DEFAULT_LIMIT,
) -> CursorPage[UserResponse]:
    query = CursorPageQuery(limit=limit, after_cursor=after_cursor, before_cursor=before_cursor)
    result = await service.list_users_cursor(query)
    return CursorPage[UserResponse](
        data=[UserResponse.model_validate(u) for u in result.items],
        pagination=CursorPageMeta.from_result(result),
    )


# ──────────────────────────────────────────────────────────────
# Current user
# ──────────────────────────────────────────────────────────────


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get own user",
    responses={status.HTTP_401_UNAUTHORIZED: {"model": ProblemDetail}, **_NOT_FOUND},
)
async def get_me(service: UserServiceDep, user_id: CurrentUserIdDep) -> UserResponse:
    user = await service.get_user(user_id)
    return UserResponse.model_validate(user)


@router.patch(
    "/me",
    response_model=UserResponse,
    summary="Update own profile",
    responses={status.HTTP_401_UNAUTHORIZED: {"model": ProblemDetail}, **_NOT_FOUND},
)
async def update_me(
    payload: UserProfileUpdate,
    service: UserServiceDep,
    user_id: CurrentUserIdDep,
    ctx: ContextDep,
) -> UserResponse:
    user = await service.update_user_profile(user_id, payload, ctx)
    return UserResponse.model_validate(user)


# ──────────────────────────────────────────────────────────────
# Single user
# ──────────────────────────────────────────────────────────────


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get a user",
    responses=_NOT_FOUND,
)
async def get_user(user_id: UUID, service: UserServiceDep) -> UserResponse:
    user = await service.get_user(user_id)
    return UserResponse.model_validate(user)


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update a user's profile",
    description="Fields omitted from the body are left unchanged.",
    responses={status.HTTP_409_CONFLICT: {"model": ProblemDetail}, **_NOT_FOUND},
)
async def update_user(
    user_id: UUID,
    payload: UserProfileUpdate,
    service: UserServiceDep,
    ctx: ContextDep,
) -> UserResponse:
    user = await service.update_user_profile(user_id, payload, ctx)
    return UserResponse.model_validate(user)


@router.delete(
    "/{user_id}",
    response_model=UserDeletedResponse,
    status_code=status.HTTP_200_OK,
    summary="Soft-delete a user",
    description="Marks the user deleted. Repeating the call succeeds and keeps the first deletion time.",
    responses=_NOT_FOUND,
)
async def delete_user(
    user_id: UUID,
    service: UserServiceDep,
    ctx: ContextDep,
) -> UserDeletedResponse:
    user, changed = await service.delete_user(user_id, ctx)
    return UserDeletedResponse(
        message="User deleted" if changed else "User was already deleted",
        id=user.id,
        deleted_at=user.deleted_at,
        already_deleted=not changed,
    )


@router.post(
    "/{user_id}/restore",
    response_model=UserResponse,
    summary="Restore a soft-deleted user",
    responses=_NOT_FOUND,
)
async def restore_user(
    user_id: UUID,
    service: UserServiceDep,
    ctx: ContextDep,
) -> UserResponse:
    user = await service.restore_user(user_id, ctx)
    return UserResponse.model_validate(user)
