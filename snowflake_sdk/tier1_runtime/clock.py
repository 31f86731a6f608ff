"""
snowflake_sdk.tier1_runtime.clock
──────────────────────────────────
Mockable millisecond time source. Layout derivation and id generation read
time through a Clock instead of calling time.time() directly, so tests can
freeze, step, stall or rewind the clock without patching the time module.
"""
from __future__ import annotations

import threading
import time
from typing import Callable


def _wall_ms() -> int:
    return time.time_ns() // 1_000_000


# ── Clock implementation ───────────────────────────────────────────────────

class Clock:
    """Wall clock in integer milliseconds since the Unix epoch."""

    def __init__(
        self,
        now_fn: Callable[[], int] | None = None,
        sleep_fn: Callable[[float], None] | None = None,
    ) -> None:
        self._now_fn = now_fn or _wall_ms
        self._sleep_fn = sleep_fn or time.sleep

    def now_ms(self) -> int:
        """Return the current Unix timestamp in milliseconds."""
        return self._now_fn()

    def sleep(self, seconds: float) -> None:
        """Block the calling thread for *seconds*."""
        self._sleep_fn(seconds)

    def freeze(self, ms: int) -> "ManualClock":
        """Return a manual clock stopped at *ms*."""
        return ManualClock(ms)


class ManualClock(Clock):
    """
    Clock that only moves when told to.

    sleep() does not block: it records the requested duration and, unless
    advance_on_sleep is False, moves the clock forward by it (rounded up to
    a whole millisecond). A clock with advance_on_sleep=False models a
    stalled time source.
    """

    def __init__(self, start_ms: int, advance_on_sleep: bool = True) -> None:
        super().__init__(now_fn=self._read, sleep_fn=self._fake_sleep)
        self._ms = start_ms
        self._mu = threading.Lock()
        self.advance_on_sleep = advance_on_sleep
        self.sleeps: list[float] = []

    def _read(self) -> int:
        with self._mu:
            return self._ms

    def _fake_sleep(self, seconds: float) -> None:
        with self._mu:
            self.sleeps.append(seconds)
            if self.advance_on_sleep:
                self._ms += max(1, round(seconds * 1000))

    def advance(self, ms: int = 1) -> None:
        """Move the clock forward by *ms*."""
        with self._mu:
            self._ms += ms

    def set(self, ms: int) -> None:
        """Jump to *ms*, backwards included."""
        with self._mu:
            self._ms = ms


# ── Module-level singleton ─────────────────────────────────────────────────

_clock: Clock = Clock()


def get_clock() -> Clock:
    """Return the process clock."""
    return _clock


def set_clock(clock: Clock) -> None:
    """Replace the process clock (use in tests)."""
    global _clock
    _clock = clock


def timestamp_ms() -> int:
    """Return the current Unix timestamp in milliseconds."""
    return _clock.now_ms()


__all__ = ["Clock", "ManualClock", "get_clock", "set_clock", "timestamp_ms"]
