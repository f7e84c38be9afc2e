"""Request-scoped log fields.

``RequestIDMiddleware`` and the request-context dependency store
``request_id`` and ``user_id`` here; ContextInjectingFilter copies them onto
every record emitted by the same asyncio task.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from types import MappingProxyType
from typing import Any

_EMPTY: MappingProxyType[str, Any] = MappingProxyType({})
_fields: ContextVar[MappingProxyType[str, Any]] = ContextVar("log_fields", default=_EMPTY)


def set_log_context(**fields: Any) -> None:
    """Merge ``fields`` into the current task's log context.

    Example:
        set_log_context(request_id="abc-123")
        logger.info("Listing users")  # record carries request_id
    """
    _fields.set(MappingProxyType({**_fields.get(), **fields}))


def get_log_context() -> dict[str, Any]:
    return dict(_fields.get())


def clear_log_context() -> None:
    _fields.set(_EMPTY)


class ContextInjectingFilter(logging.Filter):
    """Installed on the root QueueHandler; explicit ``extra=`` values win."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _fields.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
