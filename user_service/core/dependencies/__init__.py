"""FastAPI dependencies for route handlers.

Usage:
    from user_service.core.dependencies import ContextDep, SessionDep

    @router.delete("/users/{user_id}")
    async def delete_user(user_id: UUID, session: SessionDep, ctx: ContextDep):
        ...
"""

from user_service.core.dependencies.context import (
    ContextDep,
    CurrentUserIdDep,
    get_request_context,
    require_user_id,
)
from user_service.core.dependencies.database import (
    DatabaseDep,
    SessionDep,
    get_database,
    get_db_session,
)
from user_service.core.dependencies.settings import (
    AppSettingsDep,
    SettingsDep,
    get_request_app_settings,
    get_request_settings,
)

__all__ = [
    "AppSettingsDep",
    "ContextDep",
    "CurrentUserIdDep",
    "DatabaseDep",
    "SessionDep",
    "SettingsDep",
    "get_database",
    "get_db_session",
    "get_request_app_settings",
    "get_request_context",
    "get_request_settings",
    "require_user_id",
]
