"""Settings for each concern, one ``BaseSettings`` class per env prefix.

``APP_``, ``DB_`` (or ``DATABASE_URL``), ``RABBIT_``, ``LOG_``, ``HEALTH_``
and ``GRAPHQL_`` variables are read from the environment or ``.env``,
validated, frozen and cached:

    from user_service.core.settings import get_db_settings, get_settings

    db = get_db_settings()
    settings = get_settings()  # every domain at once
"""

from __future__ import annotations

from .app import AppSettings
from .graphql import GraphQLSettings
from .health import HealthCheckSettings
from .loader import (
    Settings,
    clear_all_caches,
    get_app_settings,
    get_db_settings,
    get_graphql_settings,
    get_health_settings,
    get_logging_settings,
    get_rabbit_settings,
    get_settings,
)
from .logs import LoggingSettings
from .postgres import PostgresSettings
from .rabbit import RabbitSettings

__all__ = [
    "AppSettings",
    "GraphQLSettings",
    "HealthCheckSettings",
    "LoggingSettings",
    "PostgresSettings",
    "RabbitSettings",
    "Settings",
    "clear_all_caches",
    "get_app_settings",
    "get_db_settings",
    "get_graphql_settings",
    "get_health_settings",
    "get_logging_settings",
    "get_rabbit_settings",
    "get_settings",
]
