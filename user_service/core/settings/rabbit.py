"""RabbitMQ settings (``RABBIT_`` prefix) for the FastStream broker.

``RABBIT_AMQP_URI="amqps://user:pass@mq:5671/prod"`` is split into the
component fields; without it the URI is assembled from ``RABBIT_HOST``,
``RABBIT_PORT``, ``RABBIT_USERNAME``, ``RABBIT_PASSWORD`` and ``RABBIT_VHOST``.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, unquote, urlparse

from pydantic import Field, SecretStr, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RabbitSettings(BaseSettings):
    """Connection settings for ``MessageBroker``."""

    enabled: bool = Field(default=True, description="Connect to RabbitMQ at startup")
    amqp_uri: str | None = Field(default=None, alias="RABBIT_AMQP_URI", description="Full AMQP URI")

    host: str = Field(default="localhost", min_length=1, max_length=255)
    port: int = Field(default=5672, ge=1, le=65535)
    username: str = Field(default="guest", min_length=1, max_length=100)
    password: SecretStr = SecretStr("guest")
    vhost: str = Field(default="/", description="Leading slash optional")
    ssl_enabled: bool = Field(default=False, description="amqps:// when set")

    connection_name: str = Field(
        default="user-service", min_length=1, max_length=100, description="Shown in the management UI",
    )
    connection_timeout: float = Field(default=10.0, ge=1.0, le=300.0)
    health_check_timeout: float = Field(default=3.0, ge=0.1, le=30.0, description="Broker ping timeout")
    startup_require_rabbit: bool = Field(
        default=False,
        description="Abort startup when RabbitMQ is unreachable; otherwise run without messaging",
    )

    model_config = SettingsConfigDict(
        env_prefix="RABBIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @model_validator(mode="after")
    def _split_uri(self) -> RabbitSettings:
        # frozen model, hence object.__setattr__
        if not self.amqp_uri:
            return self

        parsed = urlparse(self.amqp_uri)
        parts: dict[str, Any] = {
            "host": parsed.hostname,
            "port": parsed.port,
            "username": unquote(parsed.username) if parsed.username else None,
            "password": SecretStr(unquote(parsed.password)) if parsed.password else None,
            "vhost": unquote(parsed.path.lstrip("/")) or None,
            "ssl_enabled": True if parsed.scheme == "amqps" else None,
        }
        for key, value in parts.items():
            if value is not None:
                object.__setattr__(self, key, value)
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def url(self) -> str:
        """AMQP URI assembled from the component fields."""
        secret = self.password.get_secret_value()
        auth = quote(self.username, safe="") + (f":{quote(secret, safe='')}" if secret else "")
        vhost = self.vhost.lstrip("/")
        scheme = "amqps" if self.ssl_enabled else "amqp"
        return f"{scheme}://{auth}@{self.host}:{self.port}/{quote(vhost, safe='')}"

    @property
    def is_configured(self) -> bool:
        return self.enabled and bool(self.host)
