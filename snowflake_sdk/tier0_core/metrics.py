"""
snowflake_sdk.tier0_core.metrics
─────────────────────────────────
Counters and histograms with standard naming and labels. Metrics register in
the default prometheus-client registry, so an embedding service that
already exposes /metrics publishes them without extra wiring.

Minimal stack: prometheus-client
Configure via: SNOWFLAKE_SERVICE_NAME (value of the "service" label)
"""
from __future__ import annotations

import os
from typing import Callable

from prometheus_client import Counter, Histogram

# Standard labels applied to every metric
_DEFAULT_LABELS = ["service"]
_SERVICE = os.getenv("SNOWFLAKE_SERVICE_NAME", "snowflake")
_DEFAULT_LABEL_VALUES = {"service": _SERVICE}


def counter(name: str, description: str, labels: list[str] | None = None) -> Callable:
    """
    Create a counter with standard labels.

    Usage:
        ids_total = counter("snowflake_ids_generated_total", "Ids minted", ["node_id"])
        ids_total(node_id="3").inc()
    """
    all_labels = _DEFAULT_LABELS + (labels or [])
    c = Counter(name, description, all_labels)

    def _counter(**extra_labels: str) -> Counter:
        return c.labels(**_DEFAULT_LABEL_VALUES, **extra_labels)

    return _counter


def histogram(
    name: str,
    description: str,
    labels: list[str] | None = None,
    buckets: tuple = (0.001, 0.002, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
) -> Callable:
    """
    Create a histogram with standard labels. Default buckets are tuned for
    millisecond-scale waits.

    Usage:
        wait_seconds = histogram("snowflake_wait_seconds", "Time blocked on the clock")
        wait_seconds(node_id="3").observe(0.0012)
    """
    all_labels = _DEFAULT_LABELS + (labels or [])
    h = Histogram(name, description, all_labels, buckets=buckets)

    def _histogram(**extra_labels: str) -> Histogram:
        return h.labels(**_DEFAULT_LABEL_VALUES, **extra_labels)

    return _histogram


__all__ = ["counter", "histogram"]
