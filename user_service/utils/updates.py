"""Partial updates that report what actually changed.

    result = apply_updates(user, payload, fields=["first_name", "last_name"])
    if result.applied:
        logger.info("User updated", extra={"changes": result.changes})
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass
class UpdateResult:
    changes: dict[str, Any] = field(default_factory=dict)

    @property
    def applied(self) -> bool:
        return bool(self.changes)


def apply_updates(
    entity: Any,
    payload: Mapping[str, Any] | Any,
    *,
    fields: Collection[str] | None = None,
    exclude: Collection[str] | None = None,
    skip_none: bool = False,
) -> UpdateResult:
    """Copy payload values onto ``entity`` where they differ.

    A pydantic payload contributes only the fields the caller set, so an
    omitted field is left alone while an explicit ``None`` clears it
    (unless ``skip_none``). ``fields`` narrows the candidates and
    ``exclude`` removes some outright.
    """
    values = payload.model_dump(exclude_unset=True) if hasattr(payload, "model_dump") else dict(payload)
    allowed = values.keys() if fields is None else set(fields) & values.keys()
    blocked = set(exclude or ())

    result = UpdateResult()
    for name in (key for key in values if key in allowed and key not in blocked):
        value = values[name]
        if (value is None and skip_none) or getattr(entity, name, None) == value:
            continue
        setattr(entity, name, value)
        result.changes[name] = value
    return result
