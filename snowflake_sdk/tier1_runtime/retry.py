"""
snowflake_sdk.tier1_runtime.retry
───────────────────────────────────
Fixed-interval polling with an optional attempt bound. Backed by Tenacity.
Used by the generator to wait out an exhausted sequence space until the
clock reaches the next millisecond.

Usage:
    ts = poll_until(read_ts, lambda ts: ts > last, interval=0.001, max_attempts=51)
"""
from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any, TypeVar

from tenacity import (
    RetryError,
    Retrying,
    retry_if_result,
    stop_after_attempt,
    stop_never,
    wait_fixed,
)

T = TypeVar("T")


def poll_until(
    fn: Callable[[], T],
    accept: Callable[[T], bool],
    *,
    interval: float,
    max_attempts: int | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Call *fn* until *accept* returns True for its result.

    The first call happens immediately; each further call is preceded by a
    sleep of *interval* seconds through *sleep*. Exceptions raised by *fn*
    propagate unchanged.

    Args:
        fn:           Zero-argument callable producing the polled value.
        accept:       Predicate deciding whether the value ends the wait.
        interval:     Seconds to sleep between calls.
        max_attempts: Total calls allowed (including the first). None polls
                      forever.
        sleep:        Sleep function, injectable so tests never block.

    Raises:
        tenacity.RetryError: max_attempts calls were made and none was accepted.
    """
    retrying = Retrying(
        stop=stop_after_attempt(max_attempts) if max_attempts else stop_never,
        wait=wait_fixed(interval),
        retry=retry_if_result(lambda value: not accept(value)),
        sleep=sleep,
        reraise=True,
    )
    return retrying(fn)


def attempts_made(exc: RetryError) -> int:
    """Number of calls made before *exc* was raised."""
    attempt: Any = exc.last_attempt
    return attempt.attempt_number


__all__ = ["poll_until", "attempts_made", "RetryError"]
