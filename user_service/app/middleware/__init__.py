"""HTTP middleware stack.

Request ID sits outermost so CORS preflights and error responses carry the
correlation id too; CORS is added only when origins are configured.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware

from user_service.app.middleware.request_id import HEADER_NAME, RequestIDMiddleware

if TYPE_CHECKING:
    from fastapi import FastAPI

    from user_service.core.settings import Settings

logger = logging.getLogger(__name__)

__all__ = ["RequestIDMiddleware", "configure_middleware"]


def configure_middleware(app: FastAPI, settings: Settings) -> None:
    # add_middleware prepends, so the last one added runs first
    origins = settings.app.cors_origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=settings.app.cors_allow_credentials,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=[HEADER_NAME],
        )
    app.add_middleware(RequestIDMiddleware)
    logger.debug("Middleware configured", extra={"cors_origins": len(origins)})
