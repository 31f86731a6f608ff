"""
snowflake_sdk
─────────────
Stable top-level exports. Import from here, not from sub-modules directly.
Every name exported here is part of the public API and subject to semver.
"""
from snowflake_sdk.tier0_core.logging import get_logger
from snowflake_sdk.tier0_core.errors import (
    SnowflakeError,
    ConfigurationError,
    EpochInFutureError,
    TimestampWidthTooSmallError,
    FieldWidthOverflowError,
    NodeIdOutOfRangeError,
    InvalidConfigError,
    GenerationError,
    SequenceExhaustionTimeoutError,
    ClockRegressionError,
    TimestampOverflowError,
)
from snowflake_sdk.tier0_core.ids import UIDGenerator, IdParts
from snowflake_sdk.tier0_core.layout import LayoutConfig, derive_layout, default_layout
from snowflake_sdk.tier0_core.config import (
    ClockRegressionPolicy,
    SnowflakeSettings,
    get_settings,
    layout_from_settings,
)

from snowflake_sdk.tier1_runtime.clock import Clock, ManualClock, get_clock, set_clock
from snowflake_sdk.tier1_runtime.generator import (
    Generator,
    new_generator,
    generator_from_settings,
)

__version__ = "0.1.0"
__all__ = [
    # logging
    "get_logger",
    # errors
    "SnowflakeError", "ConfigurationError", "EpochInFutureError",
    "TimestampWidthTooSmallError", "FieldWidthOverflowError",
    "NodeIdOutOfRangeError", "InvalidConfigError", "GenerationError",
    "SequenceExhaustionTimeoutError", "ClockRegressionError",
    "TimestampOverflowError",
    # ids
    "UIDGenerator", "IdParts",
    # layout
    "LayoutConfig", "derive_layout", "default_layout",
    # config
    "ClockRegressionPolicy", "SnowflakeSettings", "get_settings",
    "layout_from_settings",
    # clock
    "Clock", "ManualClock", "get_clock", "set_clock",
    # generator
    "Generator", "new_generator", "generator_from_settings",
]
