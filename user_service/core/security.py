"""HTTP basic auth helpers guarding the API documentation."""

from __future__ import annotations

import base64
import logging
import secrets
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from user_service.core.dependencies.settings import AppSettingsDep
from user_service.core.exceptions import UnauthorizedException

logger = logging.getLogger(__name__)

_basic = HTTPBasic(auto_error=False)


def create_basic_auth_headers(username: str, password: str) -> dict[str, str]:
    """Build an ``Authorization: Basic`` header for outgoing requests."""
    token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return {"Authorization": f"Basic {token}"}


def verify_docs_credentials(
    credentials: Annotated[HTTPBasicCredentials | None, Depends(_basic)],
    settings: AppSettingsDep,
) -> None:
    """Reject requests to the docs unless they carry the configured credentials.

    Docs without configured credentials are left open.

    Raises:
        UnauthorizedException: On missing or wrong credentials.
    """
    if not settings.docs_protected:
        return

    expected_user = settings.docs_username or ""
    expected_password = settings.docs_password.get_secret_value() if settings.docs_password else ""

    if credentials is not None:
        user_ok = secrets.compare_digest(credentials.username.encode(), expected_user.encode())
        password_ok = secrets.compare_digest(
            credentials.password.encode(), expected_password.encode(),
        )
        if user_ok and password_ok:
            return

    logger.warning(
        "Rejected documentation request",
        extra={"username": credentials.username if credentials else None},
    )
    raise UnauthorizedException(
        detail="Valid credentials are required to view the API documentation",
        type="docs-unauthorized",
        headers={"WWW-Authenticate": "Basic"},
    )
