"""Exception handlers: every error leaves the service as an RFC 7807 document.

``AppException`` subclasses carry their own status, title and type. Database
and broker failures become a 503 ``upstream-unavailable``, except constraint
violations, which are a 409 ``conflict``. Anything else is a 500. Neither the
409 nor the 500 echoes the exception text.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from user_service.core.database import DatabaseNotConnectedError, NotFoundError
from user_service.core.exceptions import (
    AppException,
    ConflictException,
    NotFoundException,
    ServiceUnavailableException,
    UnauthorizedException,
)
from user_service.core.schemas.error import (
    ProblemDetail,
    ValidationError,
    ValidationProblemDetail,
)

logger = logging.getLogger(__name__)

UPSTREAM_ERRORS: tuple[type[Exception], ...] = (
    SQLAlchemyError,
    DatabaseNotConnectedError,
    ConnectionError,
)
UPSTREAM_DETAIL_LIMIT = 500


def _request_fields(request: Request) -> dict[str, Any]:
    return {
        "request_id": getattr(request.state, "request_id", None),
        "path": request.url.path,
        "method": request.method,
    }


def _problem_response(
    problem: ProblemDetail,
    *,
    extra: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = problem.model_dump(mode="json", exclude_none=True)
    # extra members never shadow the standard ones
    for key, value in (extra or {}).items():
        body.setdefault(key, value)
    return JSONResponse(status_code=problem.status, content=body, headers=headers or None)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    context = _request_fields(request)
    logger.warning(
        "Application exception occurred",
        extra={**context, "exception_type": exc.type, "status_code": exc.status_code, "detail": exc.detail},
    )
    problem = ProblemDetail(
        type=exc.type,
        title=exc.title,
        status=exc.status_code,
        detail=exc.detail,
        instance=exc.instance or request.url.path,
        request_id=context["request_id"],
    )
    headers = exc.headers if isinstance(exc, UnauthorizedException) else None
    return _problem_response(problem, extra=exc.extra, headers=headers)


async def not_found_error_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """A repository NotFoundError that escaped its handler is a 404."""
    translated = NotFoundException(
        detail=str(exc),
        type=f"{exc.model_name.lower()}-not-found",
        extra={key: str(value) for key, value in exc.identifier.items()},
    )
    return await app_exception_handler(request, translated)


async def upstream_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Upstream dependency failed",
        extra={**_request_fields(request), "exception_type": type(exc).__name__},
        exc_info=exc,
    )
    translated = ServiceUnavailableException(
        detail=f"Upstream dependency unavailable: {type(exc).__name__}: {exc}"[:UPSTREAM_DETAIL_LIMIT],
        type="upstream-unavailable",
    )
    return await app_exception_handler(request, translated)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """A constraint violation the service layer did not translate is a 409."""
    logger.warning(
        "Integrity constraint violated",
        extra={**_request_fields(request), "exception_type": type(exc.orig).__name__},
    )
    translated = ConflictException(
        detail="The request conflicts with the current state of the resource",
        type="conflict",
    )
    return await app_exception_handler(request, translated)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError | PydanticValidationError
) -> JSONResponse:
    """422 with one entry per offending field.

    Serves both FastAPI request validation and pydantic models validated
    inside a handler.
    """
    context = _request_fields(request)
    errors = [
        ValidationError(
            field=".".join(str(part) for part in error["loc"]),
            message=error["msg"],
            type=error["type"],
            value=error.get("input"),
        )
        for error in exc.errors()
    ]
    logger.warning("Request validation failed", extra={**context, "error_count": len(errors)})

    problem = ValidationProblemDetail(
        type="validation-error",
        title="Validation Error",
        status=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=f"Validation failed for {len(errors)} field(s)",
        instance=request.url.path,
        request_id=context["request_id"],
        errors=errors,
    )
    return _problem_response(problem)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    context = _request_fields(request)
    logger.error(
        "Unexpected exception occurred",
        extra={**context, "exception_type": type(exc).__name__},
        exc_info=exc,
    )
    problem = ProblemDetail(
        type="internal-error",
        title="Internal Server Error",
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred while processing your request",
        instance=request.url.path,
        request_id=context["request_id"],
    )
    return _problem_response(problem)


def configure_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    # resolved by MRO, so this wins over the SQLAlchemyError entry below
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    for exc_class in UPSTREAM_ERRORS:
        app.add_exception_handler(exc_class, upstream_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PydanticValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
    logger.debug("Exception handlers configured")
