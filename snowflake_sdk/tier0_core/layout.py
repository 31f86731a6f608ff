"""
snowflake_sdk.tier0_core.layout
────────────────────────────────
Bit layout of a 64-bit snowflake id. Three choices (epoch, timestamp width,
node-id width) fix everything else:

    bit 63        unused, keeps ids positive as signed 64-bit integers
    next T bits   milliseconds elapsed since the epoch
    next N bits   node id
    low S bits    per-millisecond sequence, S = 63 - T - N

derive_layout() validates the choices once at startup and returns an
immutable LayoutConfig that any number of generators can share without
locking.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from snowflake_sdk.tier0_core.errors import (
    ConfigurationError,
    EpochInFutureError,
    FieldWidthOverflowError,
    InvalidConfigError,
    TimestampWidthTooSmallError,
)
from snowflake_sdk.tier0_core.ids import IdParts
from snowflake_sdk.tier0_core.logging import get_logger

if TYPE_CHECKING:
    from snowflake_sdk.tier1_runtime.clock import Clock

logger = get_logger(__name__)

ID_BITS = 63
MIN_TIMESTAMP_BITS = 40
MAX_TIMESTAMP_AND_NODE_ID_BITS = 59

# 2010-12-12T23:59:59Z
DEFAULT_EPOCH = 1292198399000
DEFAULT_TIMESTAMP_BITS = 42
DEFAULT_NODE_ID_BITS = 11

_MS_PER_YEAR = 365 * 24 * 60 * 60 * 1000


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class LayoutConfig:
    """
    Validated field layout. Build it with derive_layout(); a directly
    constructed instance (including the zero value LayoutConfig()) is
    unvalidated and generators refuse it unless is_valid holds.
    """

    epoch: int = 0
    timestamp_bits: int = 0
    node_id_bits: int = 0

    @property
    def timestamp_shift(self) -> int:
        return ID_BITS - self.timestamp_bits

    @property
    def sequence_bits(self) -> int:
        """Width of the sequence field, also the left shift of the node id."""
        return ID_BITS - self.timestamp_bits - self.node_id_bits

    @property
    def node_id_shift(self) -> int:
        return self.sequence_bits

    @property
    def max_timestamp(self) -> int:
        return (1 << self.timestamp_bits) - 1

    @property
    def max_node_id(self) -> int:
        return (1 << self.node_id_bits) - 1

    @property
    def max_sequence(self) -> int:
        return (1 << self.sequence_bits) - 1

    @property
    def is_valid(self) -> bool:
        """Structural check on the widths; the epoch is not re-read against the clock."""
        if not all(_is_int(v) for v in (self.epoch, self.timestamp_bits, self.node_id_bits)):
            return False
        return (
            self.timestamp_bits >= MIN_TIMESTAMP_BITS
            and self.node_id_bits >= 0
            and self.timestamp_bits + self.node_id_bits <= MAX_TIMESTAMP_AND_NODE_ID_BITS
        )

    # ── Id packing ───────────────────────────────────────────────────────────

    def compose(self, timestamp: int, node_id: int, sequence: int) -> int:
        """Pack already range-checked fields into an id."""
        return (
            (timestamp << self.timestamp_shift)
            | (node_id << self.sequence_bits)
            | sequence
        )

    def decompose(self, uid: int) -> IdParts:
        """Split an id minted under this layout back into its fields."""
        if uid < 0 or uid >> ID_BITS:
            raise ValueError(f"Not a 63-bit snowflake id: {uid!r}")
        return IdParts(
            timestamp=uid >> self.timestamp_shift,
            node_id=(uid >> self.sequence_bits) & self.max_node_id,
            sequence=uid & self.max_sequence,
        )

    # ── Capacity summary ─────────────────────────────────────────────────────

    @property
    def lifetime_years(self) -> float:
        """How long the timestamp field lasts, in 365-day years."""
        return (1 << self.timestamp_bits) / _MS_PER_YEAR

    def describe(self) -> str:
        nodes = 1 << self.node_id_bits
        per_node = 1 << self.sequence_bits
        return "\n".join([
            "Snowflake id layout (64 bit)",
            f"| 1 bit unused | {self.timestamp_bits} bit timestamp "
            f"| {self.node_id_bits} bit node id | {self.sequence_bits} bit sequence |",
            f"| {self.lifetime_years:.2f} years of uniqueness | {nodes} nodes "
            f"| {per_node} ids/ms per node | {nodes * per_node} ids/ms in total |",
        ])

    def __str__(self) -> str:
        return self.describe()


def _rejected(exc: ConfigurationError) -> ConfigurationError:
    logger.warning("snowflake.layout.rejected", code=exc.code, **exc.metadata)
    return exc


def derive_layout(
    epoch: int,
    timestamp_bits: int,
    node_id_bits: int,
    *,
    clock: Clock | None = None,
) -> LayoutConfig:
    """
    Validate the three layout choices and return the derived LayoutConfig.

    The clock (process clock by default) is read once to check the epoch.

    Raises:
        InvalidConfigError:          non-integer input or negative node-id width.
        EpochInFutureError:          epoch is not before the current time.
        FieldWidthOverflowError:     timestamp_bits + node_id_bits > 59.
        TimestampWidthTooSmallError: timestamp_bits < 40.
    """
    for name, value in (
        ("epoch", epoch),
        ("timestamp_bits", timestamp_bits),
        ("node_id_bits", node_id_bits),
    ):
        if not _is_int(value):
            raise InvalidConfigError(
                user_message=f"{name} must be an integer, got {value!r}",
                field=name,
            )
    if node_id_bits < 0:
        raise InvalidConfigError(
            user_message=f"node_id_bits must not be negative, got {node_id_bits}",
            field="node_id_bits",
        )

    if clock is None:
        from snowflake_sdk.tier1_runtime.clock import get_clock
        clock = get_clock()
    now = clock.now_ms()

    if epoch >= now:
        raise _rejected(EpochInFutureError(
            user_message=f"epoch must be in the past, got {epoch} (now {now})",
            epoch=epoch,
            now=now,
        ))
    if timestamp_bits + node_id_bits > MAX_TIMESTAMP_AND_NODE_ID_BITS:
        raise _rejected(FieldWidthOverflowError(
            user_message=(
                "timestamp and node id can take at most "
                f"{MAX_TIMESTAMP_AND_NODE_ID_BITS} bits, got "
                f"{timestamp_bits} + {node_id_bits}"
            ),
            timestamp_bits=timestamp_bits,
            node_id_bits=node_id_bits,
        ))
    if timestamp_bits < MIN_TIMESTAMP_BITS:
        raise _rejected(TimestampWidthTooSmallError(
            user_message=(
                f"timestamp needs at least {MIN_TIMESTAMP_BITS} bits, "
                f"got {timestamp_bits}"
            ),
            timestamp_bits=timestamp_bits,
        ))

    layout = LayoutConfig(
        epoch=epoch,
        timestamp_bits=timestamp_bits,
        node_id_bits=node_id_bits,
    )
    logger.debug(
        "snowflake.layout.derived",
        epoch=epoch,
        timestamp_bits=timestamp_bits,
        node_id_bits=node_id_bits,
        sequence_bits=layout.sequence_bits,
    )
    return layout


def default_layout(*, clock: Clock | None = None) -> LayoutConfig:
    """Layout for 2048 nodes x 1024 ids/ms each, good for ~139 years from 2010."""
    return derive_layout(
        DEFAULT_EPOCH, DEFAULT_TIMESTAMP_BITS, DEFAULT_NODE_ID_BITS, clock=clock
    )


__all__ = [
    "LayoutConfig",
    "derive_layout",
    "default_layout",
    "ID_BITS",
    "MIN_TIMESTAMP_BITS",
    "MAX_TIMESTAMP_AND_NODE_ID_BITS",
    "DEFAULT_EPOCH",
    "DEFAULT_TIMESTAMP_BITS",
    "DEFAULT_NODE_ID_BITS",
]
