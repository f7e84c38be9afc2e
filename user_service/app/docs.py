"""API documentation routes guarded by HTTP basic auth.

FastAPI's built-in docs routes are disabled in ``create_app``; these routes
serve the same Swagger UI and OpenAPI document behind
``verify_docs_credentials`` when docs credentials are configured.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import Depends, FastAPI
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import HTMLResponse, JSONResponse

from user_service.core.security import verify_docs_credentials

if TYPE_CHECKING:
    from user_service.core.settings import AppSettings

logger = logging.getLogger(__name__)


def configure_documentation(app: FastAPI, settings: AppSettings) -> None:
    """Register the Swagger UI and OpenAPI routes unless docs are disabled."""
    docs_url = settings.get_docs_url()
    openapi_url = settings.get_openapi_url()
    if not docs_url or not openapi_url:
        logger.info("API documentation disabled via configuration")
        return

    guard = [Depends(verify_docs_credentials)]

    @app.get(openapi_url, include_in_schema=False, dependencies=guard)
    async def openapi_json() -> JSONResponse:
        return JSONResponse(app.openapi())

    @app.get(docs_url, include_in_schema=False, dependencies=guard)
    async def swagger_ui_html() -> HTMLResponse:
        return get_swagger_ui_html(openapi_url=openapi_url, title=f"{settings.title} · API Explorer")

    logger.debug(
        "API documentation configured",
        extra={"docs_url": docs_url, "protected": settings.docs_protected},
    )
