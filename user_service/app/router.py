"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from user_service.features.graphql import create_graphql_router
from user_service.features.health.router import router as health_router
from user_service.features.users.router import router as users_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from user_service.core.settings import AppSettings, GraphQLSettings

logger = logging.getLogger(__name__)


def setup_routers(
    app: FastAPI,
    app_settings: AppSettings,
    graphql_settings: GraphQLSettings,
) -> None:
    """Register all feature routers with the application.

    Health probes are mounted at the root so orchestrators do not depend on
    the API version prefix.
    """
    app.include_router(health_router)
    app.include_router(users_router, prefix=app_settings.api_prefix)

    if graphql_settings.enabled:
        app.include_router(create_graphql_router(graphql_settings, app_settings))
        logger.info("GraphQL endpoint enabled", extra={"path": graphql_settings.path})
