"""Health check providers.

- DatabaseHealthProvider: SELECT 1 round trip
- RabbitMQHealthProvider: broker ping
- ApiDocsHealthProvider: authenticated GET on the Swagger UI
"""

from .database import DatabaseHealthProvider
from .docs import ApiDocsHealthProvider
from .protocol import DEGRADED_LATENCY_THRESHOLD_MS, HealthCheckResult, HealthProvider, Timer
from .rabbitmq import RabbitMQHealthProvider

__all__ = [
    "DEGRADED_LATENCY_THRESHOLD_MS",
    "ApiDocsHealthProvider",
    "DatabaseHealthProvider",
    "HealthCheckResult",
    "HealthProvider",
    "RabbitMQHealthProvider",
    "Timer",
]
