"""Health check settings (``HEALTH_`` prefix), e.g. ``HEALTH_CACHE_TTL_SECONDS=0`` to disable caching."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HealthCheckSettings(BaseSettings):
    cache_ttl_seconds: float = Field(default=10.0, ge=0.0, le=300.0, description="0 disables the result cache")
    global_timeout: float = Field(default=30.0, ge=1.0, le=300.0, description="Budget for one round of checks")
    degraded_threshold_ms: float = Field(
        default=1000.0, ge=1.0, le=60000.0, description="Passing checks slower than this are degraded",
    )

    docs_probe_enabled: bool = Field(default=True, description="Never registered in production")
    docs_probe_timeout: float = Field(default=5.0, ge=0.1, le=30.0)

    model_config = SettingsConfigDict(
        env_prefix="HEALTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
