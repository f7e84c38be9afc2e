"""Explicit request context passed from the HTTP edge down to services."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from frozendict import frozendict


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Per-request data that services need but must not read from globals.

    Attributes:
        request_id: Correlation id (X-Request-ID).
        user_id: Identity forwarded by the auth gateway, if any.
        headers: Immutable copy of the request headers (lower-cased names).
        client_host: Peer address as seen by the server.
    """

    request_id: str | None = None
    user_id: UUID | None = None
    headers: frozendict[str, str] = field(default_factory=frozendict)
    client_host: str | None = None

    @property
    def actor(self) -> str | None:
        """String form of the acting identity, for audit columns."""
        return str(self.user_id) if self.user_id else None

    @classmethod
    def system(cls, *, request_id: str | None = None) -> RequestContext:
        """Context for CLI commands and other non-HTTP callers."""
        return cls(request_id=request_id)
