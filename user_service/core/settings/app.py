"""Service identity, HTTP server and documentation settings (``APP_`` prefix)."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "staging", "production", "test"]

_PATH = r"^/.*$"


class AppSettings(BaseSettings):
    """FastAPI application settings, e.g. ``APP_DEBUG=true`` or ``APP_API_PREFIX=/api/v2``."""

    service_name: str = Field(
        default="user-service",
        min_length=1,
        max_length=100,
        pattern=r"^[a-z0-9]+(-[a-z0-9]+)*$",
        description="Name stamped on log records",
    )
    title: str = Field(default="User Service API", min_length=1, max_length=200)
    description: str = "User management API with offset and cursor pagination"
    version: str = Field(default="1.0.0", pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9]+)?$")
    environment: Environment = "development"
    debug: bool = False

    api_prefix: str = Field(default="/api/v1", max_length=255, pattern=_PATH)
    public_url: str = Field(
        default="http://localhost:8000", description="Base URL the docs self-probe requests",
    )
    host: str = Field(default="0.0.0.0", min_length=1, max_length=255)
    port: int = Field(default=8000, ge=1, le=65535)

    user_id_header: str = Field(
        default="X-User-ID", min_length=1, description="Caller id forwarded by the auth gateway",
    )

    cors_origins: list[str] = Field(default_factory=list, description="JSON array of origins")
    cors_allow_credentials: bool = True

    docs_url: str = Field(default="/docs", pattern=_PATH)
    openapi_url: str = Field(default="/openapi.json", pattern=_PATH)
    disable_docs: bool = False
    docs_username: str | None = Field(default=None, description="Unset leaves the docs open")
    docs_password: SecretStr | None = None

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @model_validator(mode="after")
    def _check_consistency(self) -> AppSettings:
        if self.is_production and self.debug:
            msg = "Debug mode cannot be enabled in production environment"
            raise ValueError(msg)
        if (self.docs_username is None) != (self.docs_password is None):
            msg = "APP_DOCS_USERNAME and APP_DOCS_PASSWORD must be set together"
            raise ValueError(msg)
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def docs_enabled(self) -> bool:
        return not self.disable_docs

    @property
    def docs_protected(self) -> bool:
        """Docs sit behind HTTP basic auth."""
        return self.docs_username is not None

    def get_docs_url(self) -> str | None:
        return self.docs_url if self.docs_enabled else None

    def get_openapi_url(self) -> str | None:
        return self.openapi_url if self.docs_enabled else None

    def docs_probe_url(self) -> str:
        """Absolute Swagger UI URL for the docs health probe."""
        return self.public_url.rstrip("/") + self.docs_url
