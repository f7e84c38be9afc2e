"""GraphQL API over the users service (Strawberry)."""

from user_service.features.graphql.router import create_graphql_router
from user_service.features.graphql.schema import create_schema

__all__ = ["create_graphql_router", "create_schema"]
