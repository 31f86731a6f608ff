"""
snowflake_sdk.tier0_core.errors
────────────────────────────────
Error taxonomy for layout derivation, generator construction and id
emission. Every error carries a stable machine-readable code, a message safe
to show to operators, and keyword metadata for structured logs.

Configuration errors are raised at construction time and are fixed by
retrying with corrected inputs. Generation errors come out of
Generator.get() and only exist for the hardened paths (bounded waits,
rejected clock regressions, exhausted timestamp field).
"""
from __future__ import annotations

from typing import Any


# ── Base error ────────────────────────────────────────────────────────────────

class SnowflakeError(Exception):
    """
    Base class for all snowflake_sdk errors. Every error has:
    - code: stable machine-readable string (snake_case)
    - user_message: safe to surface to operators
    - detail: internal context
    - metadata: keyword context, suitable for log fields
    """

    code: str = "snowflake_error"

    def __init__(
        self,
        code: str | None = None,
        user_message: str = "Unexpected id generator failure.",
        detail: str | None = None,
        **metadata: Any,
    ) -> None:
        self.code = code or self.__class__.code
        self.user_message = user_message
        self.detail = detail or user_message
        self.metadata = metadata
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "error": {
                "code": self.code,
                "message": self.user_message,
            }
        }
        if self.metadata:
            d["error"]["metadata"] = dict(self.metadata)
        return d


# ── Configuration errors ──────────────────────────────────────────────────────

class ConfigurationError(SnowflakeError):
    """Layout or generator inputs rejected at construction."""
    code = "configuration_error"


class EpochInFutureError(ConfigurationError):
    """Epoch is not strictly before the current wall-clock time."""
    code = "epoch_in_future"


class TimestampWidthTooSmallError(ConfigurationError):
    """Timestamp field too narrow to give a useful id lifetime."""
    code = "timestamp_width_too_small"


class FieldWidthOverflowError(ConfigurationError):
    """Timestamp and node-id fields leave no room for a sequence."""
    code = "field_width_overflow"


class NodeIdOutOfRangeError(ConfigurationError):
    """Node id does not fit in the layout's node-id field."""
    code = "node_id_out_of_range"


class InvalidConfigError(ConfigurationError):
    """Layout is zero-valued, unvalidated or structurally broken."""
    code = "invalid_config"


# ── Generation errors ─────────────────────────────────────────────────────────

class GenerationError(SnowflakeError):
    """Raised by Generator.get() when no id can be produced."""
    code = "generation_error"


class SequenceExhaustionTimeoutError(GenerationError):
    """The clock did not advance within the configured wait bound."""
    code = "sequence_exhaustion_timeout"

    def __init__(
        self,
        code: str | None = None,
        user_message: str = "Timed out waiting for the clock to advance.",
        waited_ms: int | None = None,
        **metadata: Any,
    ) -> None:
        self.waited_ms = waited_ms
        super().__init__(code, user_message, waited_ms=waited_ms, **metadata)


class ClockRegressionError(GenerationError):
    """The clock is behind the last minted timestamp and the policy rejects it."""
    code = "clock_regression"

    def __init__(
        self,
        code: str | None = None,
        user_message: str = "Clock moved backwards.",
        drift_ms: int | None = None,
        **metadata: Any,
    ) -> None:
        self.drift_ms = drift_ms
        super().__init__(code, user_message, drift_ms=drift_ms, **metadata)


class TimestampOverflowError(GenerationError):
    """Elapsed time no longer fits in the layout's timestamp field."""
    code = "timestamp_overflow"


__all__ = [
    "SnowflakeError",
    "ConfigurationError",
    "EpochInFutureError",
    "TimestampWidthTooSmallError",
    "FieldWidthOverflowError",
    "NodeIdOutOfRangeError",
    "InvalidConfigError",
    "GenerationError",
    "SequenceExhaustionTimeoutError",
    "ClockRegressionError",
    "TimestampOverflowError",
]
