"""Schemas shared across features."""

from __future__ import annotations

from enum import StrEnum


class HealthStatus(StrEnum):
    """Outcome of a health check, ordered healthy < degraded < unhealthy."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
