"""
snowflake_sdk.tier0_core.config
────────────────────────────────
Typed generator configuration with env layering. Reads from .env, then
environment variables. Node ids usually come from the deployment (pod
ordinal, host index), so every field can be set without code changes.

Minimal stack: pydantic-settings
"""
from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import TYPE_CHECKING

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from snowflake_sdk.tier0_core.layout import (
    DEFAULT_EPOCH,
    DEFAULT_NODE_ID_BITS,
    DEFAULT_TIMESTAMP_BITS,
    LayoutConfig,
    derive_layout,
)

if TYPE_CHECKING:
    from snowflake_sdk.tier1_runtime.clock import Clock


class ClockRegressionPolicy(str, Enum):
    """What Generator.get() does when the clock reads earlier than the last minted id."""

    TOLERATE = "tolerate"      # record the earlier reading and carry on
    HIGH_WATER = "high_water"  # keep minting under the last minted millisecond
    REJECT = "reject"          # raise ClockRegressionError


class SnowflakeSettings(BaseSettings):
    """Layout and generator settings. All env vars are prefixed with SNOWFLAKE_."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ── Layout ────────────────────────────────────────────────────────────────
    epoch_ms: int = Field(default=DEFAULT_EPOCH, alias="SNOWFLAKE_EPOCH_MS")
    timestamp_bits: int = Field(
        default=DEFAULT_TIMESTAMP_BITS, alias="SNOWFLAKE_TIMESTAMP_BITS"
    )
    node_id_bits: int = Field(default=DEFAULT_NODE_ID_BITS, alias="SNOWFLAKE_NODE_ID_BITS")

    # ── Generator ─────────────────────────────────────────────────────────────
    node_id: int = Field(default=0, alias="SNOWFLAKE_NODE_ID")
    max_wait_ms: int | None = Field(default=None, alias="SNOWFLAKE_MAX_WAIT_MS")
    clock_regression: ClockRegressionPolicy = Field(
        default=ClockRegressionPolicy.TOLERATE, alias="SNOWFLAKE_CLOCK_REGRESSION"
    )

    # ── Observability ─────────────────────────────────────────────────────────
    service_name: str = Field(default="snowflake", alias="SNOWFLAKE_SERVICE_NAME")
    environment: str = Field(default="development", alias="SNOWFLAKE_ENV")
    log_level: str = Field(default="INFO", alias="SNOWFLAKE_LOG_LEVEL")
    log_format: str = Field(default="json", alias="SNOWFLAKE_LOG_FORMAT")

    @field_validator("environment")
    @classmethod
    def validate_env(cls, v: str) -> str:
        allowed = {"development", "staging", "production", "test"}
        if v.lower() not in allowed:
            raise ValueError(f"environment must be one of {allowed}, got {v!r}")
        return v.lower()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in {"json", "console"}:
            raise ValueError(f"log_format must be 'json' or 'console', got {v!r}")
        return v.lower()

    @field_validator("max_wait_ms")
    @classmethod
    def validate_max_wait(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError(f"max_wait_ms must be at least 1, got {v}")
        return v


@lru_cache(maxsize=1)
def get_settings() -> SnowflakeSettings:
    """
    Return the singleton settings. Cached after first call.
    Call _reset_settings() in tests to pick up new env vars.
    """
    return SnowflakeSettings()


def _reset_settings() -> None:
    """For tests: clear the settings cache."""
    get_settings.cache_clear()


def layout_from_settings(
    settings: SnowflakeSettings | None = None,
    *,
    clock: Clock | None = None,
) -> LayoutConfig:
    """Derive the layout described by *settings* (process settings by default)."""
    settings = settings or get_settings()
    return derive_layout(
        settings.epoch_ms, settings.timestamp_bits, settings.node_id_bits, clock=clock
    )


__all__ = [
    "ClockRegressionPolicy",
    "SnowflakeSettings",
    "get_settings",
    "layout_from_settings",
]
