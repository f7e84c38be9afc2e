"""Logger adapter whose messages may be zero-argument callables.

The callable runs only when the level is enabled, so DEBUG lines that
format whole result pages cost nothing in production:

    logger = get_lazy_logger(__name__)
    logger.debug(lambda: f"Page rows: {[str(u.id) for u in users]}")
"""

from __future__ import annotations

import logging
from typing import Any


def _render(value: Any) -> Any:
    return value() if callable(value) else value


class LazyLoggerAdapter(logging.LoggerAdapter):
    # LoggerAdapter.debug/info/... all funnel through log()
    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(level):
            super().log(level, _render(msg), *map(_render, args), **kwargs)


def get_lazy_logger(name: str) -> LazyLoggerAdapter:
    return LazyLoggerAdapter(logging.getLogger(name), {})
