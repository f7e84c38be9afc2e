"""Logging: queue-backed handlers, JSON output and per-request context.

Modules log through ``logging.getLogger(__name__)``; DEBUG lines that are
costly to build use ``get_lazy_logger(__name__)`` with a lambda message.
"""

from user_service.infra.logging.config import configure_logging, setup_logging, shutdown
from user_service.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from user_service.infra.logging.formatters import JSONFormatter
from user_service.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
