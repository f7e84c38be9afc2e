"""Build the explicit RequestContext for route handlers."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request
from frozendict import frozendict

from user_service.core.context import RequestContext
from user_service.core.dependencies.settings import AppSettingsDep
from user_service.core.exceptions import UnauthorizedException, ValidationException


def get_request_context(
    request: Request,
    settings: AppSettingsDep,
) -> RequestContext:
    """Collect request id, forwarded identity and headers into a RequestContext.

    Raises:
        ValidationException: If the identity header is not a UUID.
    """
    raw_user_id = request.headers.get(settings.user_id_header)
    user_id: UUID | None = None
    if raw_user_id:
        try:
            user_id = UUID(raw_user_id)
        except ValueError as exc:
            raise ValidationException(
                detail=f"{settings.user_id_header} header must be a UUID",
                type="invalid-user-id-header",
                extra={"header": settings.user_id_header},
            ) from exc

    return RequestContext(
        request_id=getattr(request.state, "request_id", None),
        user_id=user_id,
        headers=frozendict(request.headers.items()),
        client_host=request.client.host if request.client else None,
    )


def require_user_id(
    ctx: Annotated[RequestContext, Depends(get_request_context)],
) -> UUID:
    """Identity of the caller; 401 when the gateway forwarded none."""
    if ctx.user_id is None:
        raise UnauthorizedException(detail="No authenticated user on this request")
    return ctx.user_id


ContextDep = Annotated[RequestContext, Depends(get_request_context)]
CurrentUserIdDep = Annotated[UUID, Depends(require_user_id)]
