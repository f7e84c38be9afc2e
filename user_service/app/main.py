"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from user_service.app.docs import configure_documentation
from user_service.app.exception_handlers import configure_exception_handlers
from user_service.app.lifespan import lifespan
from user_service.app.middleware import configure_middleware
from user_service.app.router import setup_routers
from user_service.core.settings import Settings, get_settings


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        settings: Explicit settings; defaults to the cached environment settings.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    app_settings = settings.app

    app = FastAPI(
        title=app_settings.title,
        description=app_settings.description,
        version=app_settings.version,
        # Served by configure_documentation behind basic auth
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        debug=app_settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    configure_exception_handlers(app)
    configure_documentation(app, app_settings)
    configure_middleware(app, settings)
    setup_routers(app, app_settings, settings.graphql)

    return app
