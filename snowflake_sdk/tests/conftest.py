"""
snowflake_sdk test configuration.

Time-sensitive tests run against a ManualClock so that "the same
millisecond" and "the clock went backwards" are deterministic. Concurrency
tests use the real clock.
"""
from __future__ import annotations

import os

import pytest

# ── Environment defaults ───────────────────────────────────────────────────
# These must be set before any snowflake_sdk modules are imported.

os.environ.setdefault("SNOWFLAKE_ENV", "test")
os.environ.setdefault("SNOWFLAKE_SERVICE_NAME", "test-service")
os.environ.setdefault("SNOWFLAKE_LOG_LEVEL", "WARNING")

# 2023-11-14T22:13:20Z
START_MS = 1_700_000_000_000


# ── Fixtures ───────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def reset_module_singletons():
    """
    Restore the process clock and drop cached settings between tests.
    """
    import snowflake_sdk.tier1_runtime.clock as _clock
    from snowflake_sdk.tier0_core.config import _reset_settings

    orig_clock = _clock._clock
    _reset_settings()

    yield

    _clock._clock = orig_clock
    _reset_settings()


@pytest.fixture
def manual_clock():
    """Return a ManualClock stopped at START_MS."""
    from snowflake_sdk.tier1_runtime.clock import ManualClock
    return ManualClock(START_MS)


@pytest.fixture
def stalled_clock():
    """Return a ManualClock that does not move when slept on."""
    from snowflake_sdk.tier1_runtime.clock import ManualClock
    return ManualClock(START_MS, advance_on_sleep=False)


@pytest.fixture
def small_layout(manual_clock):
    """Default epoch, 42 timestamp bits, 17 node bits: 4 sequence bits (16 ids/ms)."""
    from snowflake_sdk.tier0_core.layout import DEFAULT_EPOCH, derive_layout
    return derive_layout(DEFAULT_EPOCH, 42, 17, clock=manual_clock)
