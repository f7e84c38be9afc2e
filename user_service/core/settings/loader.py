"""Process-wide settings loaders.

Every domain model is validated once and then reused. ``get_settings()``
bundles them for code that needs more than one domain; tests that change
the environment call ``clear_all_caches()`` before the next lookup.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import lru_cache
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .app import AppSettings
from .graphql import GraphQLSettings
from .health import HealthCheckSettings
from .logs import LoggingSettings
from .postgres import PostgresSettings
from .rabbit import RabbitSettings

_cached: list[Callable[..., object]] = []


S = TypeVar("S")


def _once(factory: Callable[[], S]) -> Callable[[], S]:
    @lru_cache(maxsize=1)
    def load() -> S:
        return factory()

    _cached.append(load)
    return load


get_app_settings = _once(AppSettings)
get_db_settings = _once(PostgresSettings)
get_rabbit_settings = _once(RabbitSettings)
get_logging_settings = _once(LoggingSettings)
get_health_settings = _once(HealthCheckSettings)
get_graphql_settings = _once(GraphQLSettings)


class Settings(BaseModel):
    """All domain settings side by side, each read from its own prefix.

    Example:
        settings = get_settings()
        if settings.db.is_configured:
            ...
    """

    model_config = ConfigDict(frozen=True)

    app: AppSettings = Field(default_factory=get_app_settings)
    db: PostgresSettings = Field(default_factory=get_db_settings)
    rabbit: RabbitSettings = Field(default_factory=get_rabbit_settings)
    logging: LoggingSettings = Field(default_factory=get_logging_settings)
    health: HealthCheckSettings = Field(default_factory=get_health_settings)
    graphql: GraphQLSettings = Field(default_factory=get_graphql_settings)


get_settings = _once(Settings)


def clear_all_caches() -> None:
    for loader in _cached:
        loader.cache_clear()  # type: ignore[attr-defined]
