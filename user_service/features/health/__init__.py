"""Health checks: providers, aggregator and HTTP probes."""

from user_service.features.health.aggregator import AggregatedHealthResult, HealthAggregator
from user_service.features.health.service import HealthService, build_health_aggregator

__all__ = [
    "AggregatedHealthResult",
    "HealthAggregator",
    "HealthService",
    "build_health_aggregator",
]
