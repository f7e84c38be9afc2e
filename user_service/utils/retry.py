"""Exponential-backoff retry for async startup probes.

Used by ``Database.connect`` to wait for a database that is still coming up.
Request paths never retry.

Example:
    probe = retry(max_attempts=5, initial_delay=0.5, exceptions=(OSError,))(database.ping)
    await probe()
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from dataclasses import dataclass
from functools import wraps
from typing import TYPE_CHECKING, ParamSpec, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


@dataclass(frozen=True, slots=True)
class Backoff:
    """Delay schedule: ``initial * multiplier**attempt``, capped, optionally jittered."""

    initial: float = 1.0
    maximum: float = 60.0
    multiplier: float = 2.0
    jitter: bool = True

    def delay(self, attempt: int) -> float:
        base = min(self.initial * self.multiplier**attempt, self.maximum)
        return base * random.uniform(0.5, 1.5) if self.jitter else base


class RetryError(Exception):
    """Every attempt failed; ``last_exception`` is the final failure."""

    def __init__(self, last_exception: Exception, attempts: int, elapsed: float) -> None:
        self.last_exception = last_exception
        self.attempts = attempts
        self.elapsed = elapsed
        super().__init__(f"Gave up after {attempts} attempt(s) in {elapsed:.1f}s: {last_exception}")


def retry(
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    jitter: bool = True,
    exceptions: tuple[type[Exception], ...] = (Exception,),
    stop_after_delay: float | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Retry an async callable on ``exceptions``.

    Other exceptions propagate at once. When ``max_attempts`` are used up,
    or ``stop_after_delay`` seconds have passed, RetryError is raised from
    the last failure.
    """
    backoff = Backoff(initial=initial_delay, maximum=max_delay, jitter=jitter)

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            started = time.monotonic()
            attempt = 0
            while True:
                attempt += 1
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    elapsed = time.monotonic() - started
                    out_of_time = stop_after_delay is not None and elapsed >= stop_after_delay
                    if attempt >= max_attempts or out_of_time:
                        logger.error(
                            "Giving up on %s",
                            func.__name__,
                            extra={"attempts": attempt, "elapsed": round(elapsed, 3), "error": str(e)},
                        )
                        raise RetryError(e, attempt, elapsed) from e

                    delay = backoff.delay(attempt - 1)
                    logger.warning(
                        "Retrying %s in %.2fs (attempt %d/%d)",
                        func.__name__,
                        delay,
                        attempt,
                        max_attempts,
                        extra={"error": str(e)},
                    )
                    await asyncio.sleep(delay)

        return wrapper

    return decorator
