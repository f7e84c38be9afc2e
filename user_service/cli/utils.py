"""Console output helpers and the async bridge for click commands."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from functools import partial, wraps
from typing import Any, TypeVar

import click

# kind -> (symbol, colour, to stderr)
_STYLES: dict[str, tuple[str, str, bool]] = {
    "success": ("✓", "green", False),
    "error": ("✗", "red", True),
    "warning": ("⚠", "yellow", False),
    "info": ("ℹ", "blue", False),
}


def _emit(kind: str, message: str) -> None:
    symbol, colour, to_stderr = _STYLES[kind]
    click.secho(f"{symbol} {message}", fg=colour, err=to_stderr)


success = partial(_emit, "success")
error = partial(_emit, "error")
warning = partial(_emit, "warning")
info = partial(_emit, "info")


def header(message: str) -> None:
    click.secho(f"\n{message}", fg="cyan", bold=True)


T = TypeVar("T")


def coro(func: Callable[..., Awaitable[T]]) -> Callable[..., T]:
    """Run an async click callback to completion with ``asyncio.run``.

    Example:
        @users.command("list")
        @coro
        async def list_users() -> None:
            ...
    """

    @wraps(func)
    def runner(*args: Any, **kwargs: Any) -> T:
        return asyncio.run(func(*args, **kwargs))

    return runner
