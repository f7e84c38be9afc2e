"""JSON Lines formatter with OpenTelemetry trace correlation."""
from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from opentelemetry import trace

# Attributes every LogRecord carries; anything else on a record is an ``extra``
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__,
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Render each record as one JSON object on one line.

    The object holds the keys named in ``fmt_keys``, a UTC ``timestamp``,
    ``trace_id``/``span_id`` while a span is active, and the ``static``
    fields. Every ``extra=`` attribute is included too, among them the
    request context added by ContextInjectingFilter.

    Example output (one line in practice):
        {"level": "INFO", "logger": "user_service.features.users.service",
         "message": "User deleted", "timestamp": "2025-01-01T00:00:00.123Z",
         "service": "user-service", "request_id": "abc-123", "user_id": "..."}
    """

    def __init__(
        self,
        fmt_keys: dict[str, str] | None = None,
        static: dict[str, Any] | None = None,
    ) -> None:
        super().__init__()
        self.fmt_keys = fmt_keys or {"level": "levelname", "logger": "name", "message": "message"}
        self.static = static or {}

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        payload: dict[str, Any] = {key: getattr(record, attr, None) for key, attr in self.fmt_keys.items()}
        payload["timestamp"] = _utc_iso(record.created)
        payload.update(_trace_ids())

        # Tracebacks are flattened so the output stays one record per line
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info).replace("\n", "\\n")
        if record.stack_info:
            payload["stack_trace"] = record.stack_info.replace("\n", "\\n")

        payload.update(self.static)
        for key, value in vars(record).items():
            if key not in _STANDARD_ATTRS and key not in payload:
                payload[key] = value

        return json.dumps(payload, ensure_ascii=False, default=str)


def _utc_iso(created: float) -> str:
    stamp = datetime.fromtimestamp(created, tz=UTC).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def _trace_ids() -> dict[str, str]:
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return {}
    return {
        "trace_id": format(span_context.trace_id, "032x"),
        "span_id": format(span_context.span_id, "016x"),
    }
