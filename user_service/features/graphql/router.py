"""GraphQL router for FastAPI integration.

Provides:
- GraphQL endpoint at GRAPHQL_PATH (mounted by app/router.py)
- GraphiQL in development only
- Request context with the database session and RequestContext
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated, Any, cast

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002
from strawberry.fastapi import GraphQLRouter

from user_service.core.context import RequestContext  # noqa: TC001
from user_service.core.dependencies import get_db_session, get_request_context
from user_service.features.graphql.context import GraphQLContext
from user_service.features.graphql.schema import create_schema

if TYPE_CHECKING:
    from user_service.core.settings import AppSettings, GraphQLSettings

logger = logging.getLogger(__name__)


async def get_graphql_context(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    request_context: Annotated[RequestContext, Depends(get_request_context)],
) -> GraphQLContext:
    """Strawberry attaches request, response and background tasks to the returned context."""
    return GraphQLContext(session=session, request_context=request_context)


def create_graphql_router(settings: GraphQLSettings, app_settings: AppSettings) -> APIRouter:
    """Create the GraphQL router with settings-based configuration."""
    ide_enabled = settings.ide_enabled(app_settings.environment)

    graphql_app = GraphQLRouter(
        create_schema(mask_errors=app_settings.is_production),
        context_getter=cast("Any", get_graphql_context),
        graphql_ide="graphiql" if ide_enabled else None,
        path="",
    )

    router = APIRouter(prefix=settings.path, tags=["graphql"])
    router.include_router(graphql_app)

    logger.debug("GraphQL router created", extra={"path": settings.path, "graphiql": ide_enabled})
    return router


__all__ = ["create_graphql_router", "get_graphql_context"]
