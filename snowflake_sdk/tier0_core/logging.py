"""
snowflake_sdk.tier0_core.logging
─────────────────────────────────
Structured logs for the id generator. Configured lazily on the first
get_logger() call so that embedding services which configure structlog
themselves can do so before touching the SDK.

Minimal stack: structlog (stdout JSON or console)
Configure via: SNOWFLAKE_LOG_LEVEL, SNOWFLAKE_LOG_FORMAT=json|console
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog


# ── Configuration ─────────────────────────────────────────────────────────────

def _configure_structlog() -> None:
    log_level = os.getenv("SNOWFLAKE_LOG_LEVEL", "INFO").upper()
    log_format = os.getenv("SNOWFLAKE_LOG_FORMAT", "json").lower()

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level, logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    sdk_logger = logging.getLogger("snowflake_sdk")
    sdk_logger.addHandler(handler)
    sdk_logger.setLevel(getattr(logging, log_level, logging.INFO))


# ── Public API ────────────────────────────────────────────────────────────────

_configured = False


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Return a structured logger bound to the given name.

    The SDK installs its own structlog configuration only when the host
    process has not configured structlog yet; an existing configuration is
    left as it is.

    Usage:
        log = get_logger(__name__)
        log.info("snowflake.generator.created", node_id=3)
        log.warning("snowflake.clock.regressed", drift_ms=12)
    """
    global _configured
    if not _configured:
        if not structlog.is_configured():
            _configure_structlog()
        _configured = True
    return structlog.get_logger(name or __name__)
