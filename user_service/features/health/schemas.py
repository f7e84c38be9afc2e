"""Response bodies of the ``/health`` endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from user_service.core.schemas.common import HealthStatus


class ComponentHealthDetail(BaseModel):
    healthy: bool
    status: HealthStatus
    message: str = ""
    latency_ms: float
    metadata: dict[str, Any] | None = Field(default=None, description="Provider specifics, e.g. the error")


class HealthResponse(BaseModel):
    """Aggregate of every registered check; served with 503 when ``status`` is unhealthy."""

    status: HealthStatus
    timestamp: datetime
    service: str
    version: str
    environment: str
    duration_ms: float = Field(description="Wall time of the checks, 0-ish when cached")
    from_cache: bool = False
    checks: dict[str, ComponentHealthDetail] = Field(default_factory=dict)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "timestamp": "2025-01-01T00:00:00Z",
                "service": "user-service",
                "version": "1.0.0",
                "environment": "development",
                "duration_ms": 12.4,
                "from_cache": False,
                "checks": {
                    "database": {
                        "healthy": True,
                        "status": "healthy",
                        "message": "Database operational",
                        "latency_ms": 3.1,
                    }
                },
            }
        },
    )


class ReadinessResponse(BaseModel):
    """Database reachability; served with 503 when ``ready`` is false."""

    ready: bool
    checks: dict[str, bool] = Field(default_factory=dict)
    timestamp: datetime


class LivenessResponse(BaseModel):
    alive: bool
    timestamp: datetime
    service: str
