"""Health service, aggregator wiring and dependency injection helpers.

Example:
    >>> @router.get("/health")
    >>> async def health(service: HealthServiceDep):
    ...     return await service.check_health()
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, Request

from user_service.core.dependencies.settings import AppSettingsDep
from user_service.core.schemas.common import HealthStatus
from user_service.core.settings import AppSettings
from user_service.features.health.aggregator import AggregatedHealthResult, HealthAggregator
from user_service.features.health.providers import (
    ApiDocsHealthProvider,
    DatabaseHealthProvider,
    RabbitMQHealthProvider,
)

if TYPE_CHECKING:
    from user_service.core.settings import Settings
    from user_service.infra.database import Database
    from user_service.infra.messaging import MessageBroker

logger = logging.getLogger(__name__)


def build_health_aggregator(
    settings: Settings,
    *,
    database: Database | None,
    broker: MessageBroker | None,
) -> HealthAggregator:
    """Create the aggregator with the providers this deployment needs.

    The docs probe is only registered outside production and when the docs
    are served at all.
    """
    health = settings.health
    aggregator = HealthAggregator(settings=health)

    if database is not None:
        aggregator.add_provider(
            DatabaseHealthProvider(
                database,
                timeout=settings.db.health_check_timeout,
                latency_threshold_ms=health.degraded_threshold_ms,
            )
        )

    if broker is not None and broker.enabled:
        aggregator.add_provider(
            RabbitMQHealthProvider(broker, timeout=settings.rabbit.health_check_timeout)
        )

    app = settings.app
    if health.docs_probe_enabled and not app.is_production and app.docs_enabled:
        aggregator.add_provider(
            ApiDocsHealthProvider(
                app.docs_probe_url(),
                username=app.docs_username,
                password=app.docs_password.get_secret_value() if app.docs_password else None,
                timeout=health.docs_probe_timeout,
            )
        )

    return aggregator


class HealthService:
    """Turns aggregator results into API payloads."""

    def __init__(self, aggregator: HealthAggregator, settings: AppSettings) -> None:
        self._aggregator = aggregator
        self._settings = settings

    @property
    def settings(self) -> AppSettings:
        return self._settings

    async def check_health(self, force_refresh: bool = False) -> AggregatedHealthResult:
        return await self._aggregator.check_all(force_refresh=force_refresh)

    def liveness(self) -> dict[str, object]:
        return {
            "alive": True,
            "timestamp": datetime.now(UTC),
            "service": self._settings.service_name,
        }

    async def readiness(self) -> dict[str, object]:
        """Ready only when the database probe passes."""
        result = await self._aggregator.check_provider("database")
        ready = result is not None and result.status is not HealthStatus.UNHEALTHY
        return {
            "ready": ready,
            "checks": {"database": ready},
            "timestamp": datetime.now(UTC),
        }


def get_health_aggregator(request: Request) -> HealthAggregator:
    """The aggregator built in the lifespan, or an empty one before startup."""
    aggregator: HealthAggregator | None = getattr(request.app.state, "health_aggregator", None)
    if aggregator is None:
        logger.warning("Health aggregator not initialised; reporting without providers")
        aggregator = HealthAggregator(cache_ttl_seconds=0)
        request.app.state.health_aggregator = aggregator
    return aggregator


def get_health_service(
    aggregator: Annotated[HealthAggregator, Depends(get_health_aggregator)],
    settings: AppSettingsDep,
) -> HealthService:
    return HealthService(aggregator, settings)


HealthServiceDep = Annotated[HealthService, Depends(get_health_service)]
