"""GraphQL schema assembly."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import strawberry
from strawberry.extensions import MaskErrors

from user_service.features.graphql.errors import MASKED_MESSAGE, is_user_facing_error
from user_service.features.graphql.resolvers import Mutation, Query

if TYPE_CHECKING:
    from graphql import GraphQLError
    from strawberry.types import ExecutionContext

logger = logging.getLogger(__name__)


class UserServiceSchema(strawberry.Schema):
    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        """Log user-facing errors quietly and internal ones with tracebacks."""
        for error in errors:
            if is_user_facing_error(error):
                logger.info(
                    "GraphQL error",
                    extra={"error": error.message, "path": error.path, "extensions": error.extensions},
                )
            else:
                logger.error(
                    "GraphQL resolver failed",
                    extra={"error": error.message, "path": error.path},
                    exc_info=error.original_error or error,
                )


def create_schema(*, mask_errors: bool) -> strawberry.Schema:
    """Build the schema; internal errors are masked when ``mask_errors`` is set."""
    extensions = []
    if mask_errors:
        extensions.append(
            MaskErrors(
                should_mask_error=lambda error: not is_user_facing_error(error),
                error_message=MASKED_MESSAGE,
            )
        )
    return UserServiceSchema(query=Query, mutation=Mutation, extensions=extensions)


__all__ = ["UserServiceSchema", "create_schema"]
