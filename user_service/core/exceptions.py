"""Application exceptions rendered as RFC 7807 problem details.

Each subclass fixes the HTTP status and title and supplies a default
``type``; callers usually pass a more specific ``type`` such as
``"user-not-found"`` or ``"username-taken"`` so clients can branch on it.

Example:
    raise NotFoundException(
        detail=f"User with id {user_id} not found",
        type="user-not-found",
        extra={"user_id": str(user_id)},
    )
"""

from __future__ import annotations

from typing import Any, ClassVar


class AppException(Exception):
    """Base application exception.

    Attributes:
        status_code: HTTP status of the problem response.
        detail: Human-readable explanation of this occurrence.
        type: Problem type identifier.
        title: Short summary of the problem type.
        instance: Request path of the occurrence; filled in by the handler when unset.
        extra: Extra members merged into the problem body.
    """

    status_code: int = 500
    title: str = "Internal Server Error"
    default_type: ClassVar[str] = "about:blank"

    def __init__(
        self,
        detail: str,
        type: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
        *,
        status_code: int | None = None,
        title: str | None = None,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.type = type or self.default_type
        self.instance = instance
        self.extra = extra or {}
        if status_code is not None:
            self.status_code = status_code
        if title is not None:
            self.title = title

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, type={self.type!r}, detail={self.detail!r})"


class BadRequestException(AppException):
    """The request is well-formed but asks for something unsupported."""

    status_code = 400
    title = "Bad Request"
    default_type = "bad-request"


class UnauthorizedException(AppException):
    """No usable identity on the request.

    ``headers`` are copied onto the response (e.g. ``WWW-Authenticate``).
    """

    status_code = 401
    title = "Unauthorized"
    default_type = "unauthorized"

    def __init__(
        self,
        detail: str = "Authentication required",
        type: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(detail, type, instance, extra)
        self.headers = headers or {}


class NotFoundException(AppException):
    status_code = 404
    title = "Not Found"
    default_type = "not-found"


class ConflictException(AppException):
    """A write collides with existing state, e.g. a taken username."""

    status_code = 409
    title = "Conflict"
    default_type = "conflict"


class ValidationException(AppException):
    """Malformed input that FastAPI's own validation did not catch.

    Example:
        raise ValidationException(
            detail="limit must be between 1 and 100",
            extra={"field": "limit", "value": 0},
        )
    """

    status_code = 422
    title = "Validation Error"
    default_type = "validation-error"


class ServiceUnavailableException(AppException):
    """An upstream dependency (database, broker) cannot serve the request."""

    status_code = 503
    title = "Service Unavailable"
    default_type = "service-unavailable"
