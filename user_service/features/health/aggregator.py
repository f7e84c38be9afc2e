"""Concurrent health checks reduced to a single status, with a short TTL cache.

Example:
    >>> aggregator = HealthAggregator(cache_ttl_seconds=10.0)
    >>> aggregator.add_provider(DatabaseHealthProvider(database))
    >>> result = await aggregator.check_all()
    >>> again = await aggregator.check_all()  # again.from_cache is True within the TTL
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from user_service.core.schemas.common import HealthStatus
from user_service.features.health.providers import HealthCheckResult, HealthProvider

if TYPE_CHECKING:
    from collections.abc import Iterable

    from user_service.core.settings.health import HealthCheckSettings

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 10.0
DEFAULT_CHECK_TIMEOUT_SECONDS = 30.0

_SEVERITY = {HealthStatus.HEALTHY: 0, HealthStatus.DEGRADED: 1, HealthStatus.UNHEALTHY: 2}


def worst_status(statuses: Iterable[HealthStatus]) -> HealthStatus:
    """UNHEALTHY beats DEGRADED beats HEALTHY; no statuses at all is HEALTHY."""
    return max(statuses, key=_SEVERITY.__getitem__, default=HealthStatus.HEALTHY)


@dataclass(frozen=True)
class AggregatedHealthResult:
    """Outcome of one aggregated run (or a cached copy of it)."""

    status: HealthStatus
    checks: dict[str, HealthCheckResult] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    duration_ms: float = 0.0
    from_cache: bool = False

    def details(self) -> dict[str, dict[str, Any]]:
        """Per-provider payload for the /health response."""
        out: dict[str, dict[str, Any]] = {}
        for name, check in self.checks.items():
            entry: dict[str, Any] = {
                "healthy": check.status is HealthStatus.HEALTHY,
                "status": check.status.value,
                "message": check.message,
                "latency_ms": round(check.latency_ms, 2),
            }
            if check.metadata:
                entry["metadata"] = check.metadata
            out[name] = entry
        return out


class HealthAggregator:
    """Registry of health providers.

    ``check_all`` runs every provider at once under one timeout; a provider
    that raises or is still running when the timeout hits counts as
    UNHEALTHY. Results are reused for ``cache_ttl_seconds`` (0 disables the
    cache). ``settings`` wins over the explicit keyword values.
    """

    def __init__(
        self,
        settings: HealthCheckSettings | None = None,
        cache_ttl_seconds: float | None = None,
        check_timeout_seconds: float | None = None,
    ) -> None:
        if settings is not None:
            cache_ttl_seconds = settings.cache_ttl_seconds
            check_timeout_seconds = settings.global_timeout

        self._cache_ttl = DEFAULT_CACHE_TTL_SECONDS if cache_ttl_seconds is None else cache_ttl_seconds
        self._timeout = (
            DEFAULT_CHECK_TIMEOUT_SECONDS if check_timeout_seconds is None else check_timeout_seconds
        )
        self._providers: dict[str, HealthProvider] = {}
        self._cached: AggregatedHealthResult | None = None
        self._cached_until = 0.0

    def add_provider(self, provider: HealthProvider) -> None:
        """Register ``provider`` under its name.

        Raises:
            TypeError: If it does not implement HealthProvider
            ValueError: If the name is already taken
        """
        if not isinstance(provider, HealthProvider):
            raise TypeError(f"{type(provider).__name__} does not implement HealthProvider")
        if provider.name in self._providers:
            raise ValueError(f"Provider '{provider.name}' already registered")

        self._providers[provider.name] = provider
        self._cached = None
        logger.info("Registered health provider", extra={"provider": provider.name})

    def list_providers(self) -> list[str]:
        return list(self._providers)

    async def check_all(self, force_refresh: bool = False) -> AggregatedHealthResult:
        if not force_refresh and self._cached is not None and time.monotonic() < self._cached_until:
            return dataclasses.replace(self._cached, from_cache=True)

        started = time.perf_counter()
        checks = await self._run_all()
        result = AggregatedHealthResult(
            status=worst_status(c.status for c in checks.values()),
            checks=checks,
            duration_ms=(time.perf_counter() - started) * 1000,
        )

        if self._cache_ttl > 0:
            self._cached = result
            self._cached_until = time.monotonic() + self._cache_ttl

        if result.status is not HealthStatus.HEALTHY:
            logger.warning(
                "Health check not healthy",
                extra={
                    "status": result.status.value,
                    "failing": sorted(n for n, c in checks.items() if c.status is not HealthStatus.HEALTHY),
                },
            )
        return result

    async def check_provider(self, name: str) -> HealthCheckResult | None:
        """Run a single provider; None when ``name`` is not registered."""
        provider = self._providers.get(name)
        return None if provider is None else await self._check_one(provider)

    async def _run_all(self) -> dict[str, HealthCheckResult]:
        names = list(self._providers)
        try:
            async with asyncio.timeout(self._timeout):
                results = await asyncio.gather(*(self._check_one(self._providers[n]) for n in names))
        except TimeoutError:
            logger.error(
                "Health check timed out",
                extra={"timeout": self._timeout, "providers": names},
            )
            return {
                n: HealthCheckResult(
                    status=HealthStatus.UNHEALTHY,
                    message=f"Check timed out after {self._timeout}s",
                    metadata={"error": "timeout"},
                )
                for n in names
            }
        return dict(zip(names, results, strict=True))

    @staticmethod
    async def _check_one(provider: HealthProvider) -> HealthCheckResult:
        try:
            return await provider.check_health()
        except Exception as e:
            logger.exception("Health provider raised", extra={"provider": provider.name})
            return HealthCheckResult(
                status=HealthStatus.UNHEALTHY,
                message=f"Check error: {e}",
                metadata={"error": str(e), "error_type": type(e).__name__},
            )
