"""Settings dependencies.

Routes read settings from ``app.state.settings`` (set by ``create_app``) so an
application built with explicit settings never mixes in the cached
environment settings.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from user_service.core.settings import AppSettings, Settings, get_settings


def get_request_settings(request: Request) -> Settings:
    settings: Settings | None = getattr(request.app.state, "settings", None)
    return settings or get_settings()


def get_request_app_settings(
    settings: Annotated[Settings, Depends(get_request_settings)],
) -> AppSettings:
    return settings.app


SettingsDep = Annotated[Settings, Depends(get_request_settings)]
AppSettingsDep = Annotated[AppSettings, Depends(get_request_app_settings)]
