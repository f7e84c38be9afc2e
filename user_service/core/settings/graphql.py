"""GraphQL endpoint settings (``GRAPHQL_`` prefix)."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GraphQLSettings(BaseSettings):
    enabled: bool = True
    path: str = Field(default="/graphql", max_length=255, pattern=r"^/.*$")
    disable_playground: bool = Field(default=False, description="Hide GraphiQL in development too")

    model_config = SettingsConfigDict(
        env_prefix="GRAPHQL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    def ide_enabled(self, environment: str) -> bool:
        """GraphiQL is served in development only."""
        return not self.disable_playground and environment == "development"
