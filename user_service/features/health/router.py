"""Health check API endpoints.

- Comprehensive health: /health - all dependency checks, 503 when unhealthy
- Liveness probes: /health/live - is the process alive?
- Readiness probes: /health/ready - can the service reach its database?
"""

from __future__ import annotations

from fastapi import APIRouter, Query, Response, status

from user_service.core.schemas.common import HealthStatus
from user_service.features.health.schemas import (
    ComponentHealthDetail,
    HealthResponse,
    LivenessResponse,
    ReadinessResponse,
)

# NOTE: must stay a runtime import so FastAPI resolves the Depends() metadata
from user_service.features.health.service import HealthServiceDep  # noqa: TC001

router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "",
    response_model=HealthResponse,
    summary="Comprehensive health check",
    description="Overall status with every dependency check; 503 when unhealthy",
    responses={503: {"description": "At least one dependency is unhealthy"}},
)
async def health_check(
    response: Response,
    service: HealthServiceDep,
    force_refresh: bool = Query(default=False, description="Bypass cache and run fresh checks"),
) -> HealthResponse:
    result = await service.check_health(force_refresh=force_refresh)
    if result.status is HealthStatus.UNHEALTHY:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    settings = service.settings
    return HealthResponse(
        status=result.status,
        timestamp=result.timestamp,
        service=settings.service_name,
        version=settings.version,
        environment=settings.environment,
        duration_ms=round(result.duration_ms, 2),
        from_cache=result.from_cache,
        checks={name: ComponentHealthDetail(**d) for name, d in result.details().items()},
    )


@router.get(
    "/live",
    response_model=LivenessResponse,
    summary="Liveness probe",
)
async def liveness_check(service: HealthServiceDep) -> LivenessResponse:
    return LivenessResponse(**service.liveness())


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Service not ready to accept traffic"}},
    summary="Readiness probe",
)
async def readiness_check(response: Response, service: HealthServiceDep) -> ReadinessResponse:
    result = await service.readiness()
    if not result["ready"]:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(**result)
