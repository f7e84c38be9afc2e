"""Contract between the health aggregator and individual checks.

A provider is anything with a ``name`` and an async ``check_health()``
that reports failure as an UNHEALTHY result instead of raising:

    class CacheHealthProvider:
        name = "cache"

        async def check_health(self) -> HealthCheckResult:
            timer = Timer()
            await cache.ping()
            return HealthCheckResult(HealthStatus.HEALTHY, "Cache operational", timer.elapsed_ms())
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from user_service.core.schemas.common import HealthStatus

# Slower successful checks are reported as DEGRADED
DEGRADED_LATENCY_THRESHOLD_MS = 1000.0


@dataclass
class HealthCheckResult:
    status: HealthStatus
    message: str = ""
    latency_ms: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)


class Timer:
    """Monotonic stopwatch started on construction."""

    __slots__ = ("_started",)

    def __init__(self) -> None:
        self._started = time.perf_counter()

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._started) * 1000


@runtime_checkable
class HealthProvider(Protocol):
    @property
    def name(self) -> str:
        """Key of this check in health responses, e.g. ``"database"``."""
        ...

    async def check_health(self) -> HealthCheckResult: ...
