"""
snowflake_sdk.tier1_runtime.generator
──────────────────────────────────────
Thread-safe snowflake id generator for one node id.

A Generator owns the last minted (timestamp, sequence) pair and hands out
ids under a single lock. When more ids are requested within one millisecond
than the sequence field holds, the caller that overflows sleeps in 1 ms
steps until the clock moves on, still holding the lock, so every other
caller queues behind it. Set max_wait_ms to turn a stalled clock into
SequenceExhaustionTimeoutError instead of an unbounded block.

Usage:
    layout = default_layout()
    gen = Generator(layout, node_id=3)
    uid = gen.get()
"""
from __future__ import annotations

import threading
import time

from snowflake_sdk.tier0_core.config import (
    ClockRegressionPolicy,
    SnowflakeSettings,
    get_settings,
    layout_from_settings,
)
from snowflake_sdk.tier0_core.errors import (
    ClockRegressionError,
    EpochInFutureError,
    InvalidConfigError,
    NodeIdOutOfRangeError,
    SequenceExhaustionTimeoutError,
    TimestampOverflowError,
)
from snowflake_sdk.tier0_core.layout import LayoutConfig
from snowflake_sdk.tier0_core.logging import get_logger
from snowflake_sdk.tier0_core.metrics import counter, histogram
from snowflake_sdk.tier1_runtime.clock import Clock, get_clock
from snowflake_sdk.tier1_runtime.retry import RetryError, attempts_made, poll_until

logger = get_logger(__name__)

_WAIT_INTERVAL = 0.001

_ids_generated = counter(
    "snowflake_ids_generated_total", "Ids handed out by snowflake generators", ["node_id"]
)
_sequence_exhaustions = counter(
    "snowflake_sequence_exhaustions_total",
    "Times a generator ran out of sequence numbers within one millisecond",
    ["node_id"],
)
_clock_regressions = counter(
    "snowflake_clock_regressions_total",
    "Clock readings earlier than the last minted timestamp",
    ["node_id", "policy"],
)
_wait_seconds = histogram(
    "snowflake_wait_seconds",
    "Time spent holding the generator lock waiting for the next millisecond",
    ["node_id"],
)


class Generator:
    """
    Mints unique 64-bit ids for a single node id.

    One instance per node id per process; share it between threads freely.
    Two live generators with the same node id and layout will collide.
    """

    def __init__(
        self,
        layout: LayoutConfig,
        node_id: int,
        *,
        clock: Clock | None = None,
        max_wait_ms: int | None = None,
        clock_regression: ClockRegressionPolicy = ClockRegressionPolicy.TOLERATE,
    ) -> None:
        if not isinstance(layout, LayoutConfig) or not layout.is_valid:
            logger.warning("snowflake.generator.rejected", code=InvalidConfigError.code)
            raise InvalidConfigError(
                user_message="invalid config",
                detail=f"invalid config: layout is not a validated LayoutConfig: {layout!r}",
            )
        clock = clock or get_clock()
        now = clock.now_ms()
        if layout.epoch >= now:
            logger.warning(
                "snowflake.generator.rejected",
                code=EpochInFutureError.code,
                epoch=layout.epoch,
                now=now,
            )
            raise EpochInFutureError(
                user_message=f"layout epoch must be in the past, got {layout.epoch} (now {now})",
                epoch=layout.epoch,
                now=now,
            )
        if isinstance(node_id, bool) or not isinstance(node_id, int):
            raise InvalidConfigError(user_message=f"node id must be an integer, got {node_id!r}")
        if not 0 <= node_id <= layout.max_node_id:
            logger.warning(
                "snowflake.generator.rejected",
                code=NodeIdOutOfRangeError.code,
                node_id=node_id,
                max_node_id=layout.max_node_id,
            )
            raise NodeIdOutOfRangeError(
                user_message=(
                    f"node id must be between 0 and {layout.max_node_id} "
                    f"for this layout, got {node_id}"
                ),
                node_id=node_id,
                max_node_id=layout.max_node_id,
            )
        if max_wait_ms is not None and max_wait_ms < 1:
            raise InvalidConfigError(user_message=f"max_wait_ms must be at least 1, got {max_wait_ms}")
        try:
            policy = ClockRegressionPolicy(clock_regression)
        except ValueError as exc:
            raise InvalidConfigError(
                user_message=f"unknown clock regression policy {clock_regression!r}"
            ) from exc

        self._layout = layout
        self._node_id = node_id
        self._clock = clock
        self._max_wait_ms = max_wait_ms
        self._policy = policy
        self._label = str(node_id)

        self._lock = threading.Lock()
        self._last_timestamp = 0
        self._sequence = 0

        logger.info(
            "snowflake.generator.created",
            node_id=node_id,
            max_wait_ms=max_wait_ms,
            clock_regression=self._policy.value,
            layout=layout.describe(),
        )

    @property
    def layout(self) -> LayoutConfig:
        return self._layout

    @property
    def node_id(self) -> int:
        return self._node_id

    def __repr__(self) -> str:
        return (
            f"Generator(node_id={self._node_id}, "
            f"timestamp_bits={self._layout.timestamp_bits}, "
            f"node_id_bits={self._layout.node_id_bits})"
        )

    # ── Id emission ──────────────────────────────────────────────────────────

    def get(self) -> int:
        """
        Return the next id.

        Blocks while the current millisecond's sequence space is used up.

        Raises:
            SequenceExhaustionTimeoutError: max_wait_ms passed without the clock advancing.
            ClockRegressionError:           clock went backwards under the reject policy.
            TimestampOverflowError:         the layout's timestamp field is used up.
        """
        with self._lock:
            elapsed = self._elapsed()
            if elapsed < self._last_timestamp:
                elapsed = self._on_regression(elapsed)

            if elapsed <= self._last_timestamp:
                sequence = self._sequence + 1
                if sequence > self._layout.max_sequence:
                    elapsed = self._wait_next_millis()
                    sequence = 0
            else:
                sequence = 0

            if not 0 <= elapsed <= self._layout.max_timestamp:
                raise TimestampOverflowError(
                    user_message="elapsed time does not fit the layout timestamp field",
                    elapsed_ms=elapsed,
                    max_timestamp=self._layout.max_timestamp,
                )

            self._last_timestamp = elapsed
            self._sequence = sequence
            uid = self._layout.compose(elapsed, self._node_id, sequence)

        _ids_generated(node_id=self._label).inc()
        return uid

    def _elapsed(self) -> int:
        return self._clock.now_ms() - self._layout.epoch

    def _on_regression(self, elapsed: int) -> int:
        drift = self._last_timestamp - elapsed
        _clock_regressions(node_id=self._label, policy=self._policy.value).inc()
        logger.warning(
            "snowflake.clock.regressed",
            node_id=self._node_id,
            drift_ms=drift,
            policy=self._policy.value,
        )
        if self._policy is ClockRegressionPolicy.REJECT:
            raise ClockRegressionError(
                user_message=f"clock moved backwards by {drift} ms",
                drift_ms=drift,
                node_id=self._node_id,
            )
        if self._policy is ClockRegressionPolicy.HIGH_WATER:
            return self._last_timestamp
        return elapsed

    def _wait_next_millis(self) -> int:
        """Sleep in 1 ms steps until the clock passes the last minted timestamp."""
        _sequence_exhaustions(node_id=self._label).inc()
        logger.debug(
            "snowflake.sequence.exhausted",
            node_id=self._node_id,
            timestamp=self._last_timestamp,
        )
        last = self._last_timestamp
        started = time.monotonic()
        try:
            return poll_until(
                self._elapsed,
                lambda elapsed: elapsed > last,
                interval=_WAIT_INTERVAL,
                max_attempts=self._max_wait_ms + 1 if self._max_wait_ms else None,
                sleep=self._clock.sleep,
            )
        except RetryError as exc:
            waited = attempts_made(exc) - 1
            logger.error(
                "snowflake.wait.timeout",
                node_id=self._node_id,
                waited_ms=waited,
                timestamp=last,
            )
            raise SequenceExhaustionTimeoutError(
                waited_ms=waited,
                node_id=self._node_id,
            ) from exc
        finally:
            _wait_seconds(node_id=self._label).observe(time.monotonic() - started)


def new_generator(
    layout: LayoutConfig,
    node_id: int,
    *,
    clock: Clock | None = None,
    max_wait_ms: int | None = None,
    clock_regression: ClockRegressionPolicy = ClockRegressionPolicy.TOLERATE,
) -> Generator:
    """Validate *layout* and *node_id* and return a fresh Generator."""
    return Generator(
        layout,
        node_id,
        clock=clock,
        max_wait_ms=max_wait_ms,
        clock_regression=clock_regression,
    )


def generator_from_settings(
    settings: SnowflakeSettings | None = None,
    *,
    clock: Clock | None = None,
) -> Generator:
    """Build the layout and the generator described by *settings*."""
    settings = settings or get_settings()
    return Generator(
        layout_from_settings(settings, clock=clock),
        settings.node_id,
        clock=clock,
        max_wait_ms=settings.max_wait_ms,
        clock_regression=settings.clock_regression,
    )


__all__ = ["Generator", "new_generator", "generator_from_settings"]
