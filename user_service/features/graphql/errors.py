"""GraphQL error translation and production error masking.

Application exceptions become GraphQL errors whose ``extensions`` carry the
problem ``code`` (the AppException type) and HTTP-equivalent ``status``.
Anything else is internal and is masked in production.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from graphql import GraphQLError

from user_service.core.exceptions import AppException

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")

MASKED_MESSAGE = "Unexpected error."


def to_graphql_error(exc: AppException) -> GraphQLError:
    return GraphQLError(
        exc.detail,
        original_error=exc,
        extensions={"code": exc.type, "status": exc.status_code, **exc.extra},
    )


def translate_app_errors(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
    """Re-raise AppException from a resolver as a structured GraphQLError."""

    @wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return await func(*args, **kwargs)
        except AppException as exc:
            logger.info(
                "GraphQL resolver raised application error",
                extra={"resolver": func.__name__, "code": exc.type, "status": exc.status_code},
            )
            raise to_graphql_error(exc) from exc

    return wrapper


def is_user_facing_error(error: GraphQLError) -> bool:
    """Application errors and query validation errors are shown as-is."""
    if error.extensions and "code" in error.extensions:
        return True
    # No original error means graphql-core rejected the query itself
    return error.original_error is None
