"""FastAPI dependencies for the users feature."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from user_service.core.dependencies import SessionDep
from user_service.features.users.repository import UserRepository, get_user_repository
from user_service.features.users.service import UserService


def get_user_service(
    session: SessionDep,
    repo: Annotated[UserRepository, Depends(get_user_repository)],
) -> UserService:
    return UserService(session, repo)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
