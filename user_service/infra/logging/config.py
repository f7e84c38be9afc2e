"""Logging setup for the API server and the CLI.

The root logger gets a single QueueHandler; a QueueListener thread owns the
real handlers (stderr, optional rotating file), so a slow disk or pipe
never blocks a request. ``dictConfig`` sets the levels; the context filter
sits on the QueueHandler.
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import TYPE_CHECKING, Any

from user_service.infra.logging.context import ContextInjectingFilter
from user_service.infra.logging.formatters import JSONFormatter

if TYPE_CHECKING:
    from user_service.core.settings.logs import LoggingSettings

TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

_listener: QueueListener | None = None
_configured = False

logger = logging.getLogger(__name__)


def shutdown() -> None:
    """Flush queued records and stop the listener thread (idempotent)."""
    global _listener

    if _listener is not None:
        _listener.stop()
        _listener = None


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **overrides: Any,
) -> None:
    """Configure logging from ``LOG_*`` settings, once per process.

    Both entrypoints (uvicorn factory and CLI) call this; later calls are
    ignored unless ``force`` is set. ``overrides`` replace individual
    configure_logging() arguments.
    """
    global _configured

    if _configured and not force:
        return

    if log_settings is None:
        from user_service.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    configure_logging(**{**log_settings.to_logging_kwargs(), **overrides})
    _configured = True


def configure_logging(
    log_level: str = "INFO",
    console_level: str | None = None,
    file_level: str | None = None,
    file_path: str | Path | None = None,
    json_logs: bool = True,
    console_enabled: bool = True,
    include_context: bool = True,
    capture_warnings: bool = True,
    include_uvicorn: bool = True,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    service_name: str = "user-service",
) -> None:
    """(Re)build the logging pipeline.

    Args:
        log_level: Root level.
        console_level: stderr handler level; defaults to ``log_level``.
        file_level: File handler level; defaults to ``log_level``.
        file_path: Rotating log file; None means no file output.
        json_logs: JSON Lines when True, plain text otherwise.
        console_enabled: Write to stderr.
        include_context: Attach request_id/user_id from the log context.
        capture_warnings: Route ``warnings`` through logging.
        include_uvicorn: Let uvicorn's loggers reach the root handlers.
        file_max_bytes: Rotation size.
        file_backup_count: Rotated files kept.
        service_name: ``service`` field on every JSON record.
    """
    shutdown()
    logging.captureWarnings(capture_warnings)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "root": {"level": log_level.upper(), "handlers": []},
            "loggers": {
                name: {"handlers": [], "propagate": include_uvicorn} for name in _UVICORN_LOGGERS
            },
        }
    )

    def formatter() -> logging.Formatter:
        if json_logs:
            return JSONFormatter(static={"service": service_name})
        return logging.Formatter(fmt=TEXT_FORMAT, datefmt=TEXT_DATEFMT)

    outputs: list[logging.Handler] = []
    if console_enabled:
        outputs.append(_with(logging.StreamHandler(), console_level or log_level, formatter()))
    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            path, maxBytes=file_max_bytes, backupCount=file_backup_count, encoding="utf-8",
        )
        outputs.append(_with(rotating, file_level or log_level, formatter()))

    _start_queue(outputs, include_context=include_context)
    logger.debug("Logging configured", extra={"handlers": [type(h).__name__ for h in outputs]})


def _with(handler: logging.Handler, level: str, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level.upper())
    handler.setFormatter(formatter)
    return handler


def _start_queue(outputs: list[logging.Handler], *, include_context: bool) -> None:
    global _listener

    queue: Queue[logging.LogRecord] = Queue()
    if outputs:
        _listener = QueueListener(queue, *outputs, respect_handler_level=True)
        _listener.start()
        atexit.register(shutdown)
    # Filters on a logger skip records propagated from child loggers, so the
    # context filter sits on the handler; it runs in the emitting task.
    entry = QueueHandler(queue)
    if include_context:
        entry.addFilter(ContextInjectingFilter())
    logging.getLogger().addHandler(entry)
