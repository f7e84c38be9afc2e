"""Correlation id for every HTTP request.

An incoming ``X-Request-ID`` is reused, otherwise a UUID4 is minted. The id
lands on ``request.state.request_id``, in the log context for the life of
the request, and on the response headers.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from starlette.datastructures import Headers, MutableHeaders

from user_service.infra.logging.context import clear_log_context, set_log_context

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

HEADER_NAME = "X-Request-ID"


class RequestIDMiddleware:
    """Pure ASGI middleware; websocket and lifespan scopes pass straight through."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(HEADER_NAME) or str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_tagged(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[HEADER_NAME] = request_id
            await send(message)

        set_log_context(request_id=request_id)
        try:
            await self.app(scope, receive, send_tagged)
        finally:
            clear_log_context()
