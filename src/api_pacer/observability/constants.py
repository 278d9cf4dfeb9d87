# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Metric name constants following Prometheus naming conventions.

All metric names use the `api_pacer_` prefix.

Naming Conventions:
    - Counter metrics end with `_total`
    - Histogram metrics for time end with `_seconds`
    - Gauges use present-tense descriptive names

Label Best Practices:
    Only use bounded labels:
    - `method` - Remote API method (chat.postMessage, users.list, ...)
    - `reason` - Retry reason (status code or exception class name)
"""


# =============================================================================
# Global Prefix
# =============================================================================

METRIC_PREFIX = "api_pacer"
"""Prefix for all Prometheus metrics in this library."""


# =============================================================================
# Scheduler Metrics (scheduler/scheduler.py)
# =============================================================================

ADMISSIONS_TOTAL = f"{METRIC_PREFIX}_admissions_total"
"""Total calls admitted from the queue and executed."""

RATE_LIMITED_TOTAL = f"{METRIC_PREFIX}_rate_limited_total"
"""Total rate limit rejections absorbed by the scheduler."""

QUEUE_DELAY_WARNINGS_TOTAL = f"{METRIC_PREFIX}_queue_delay_warnings_total"
"""Total queue delay warnings emitted for long-waiting calls."""

QUEUE_DEPTH = f"{METRIC_PREFIX}_queue_depth"
"""Current number of calls waiting in the queue."""

QUEUE_WAIT_SECONDS = f"{METRIC_PREFIX}_queue_wait_seconds"
"""Time between submission and admission."""


# =============================================================================
# Transport Metrics (transport/resilient.py)
# =============================================================================

TRANSPORT_RETRIES_TOTAL = f"{METRIC_PREFIX}_transport_retries_total"
"""Total transport retries, labelled by reason."""

TRANSPORT_FAILURES_TOTAL = f"{METRIC_PREFIX}_transport_failures_total"
"""Total requests that exhausted the retry budget."""


# =============================================================================
# Histogram Buckets
# =============================================================================

QUEUE_WAIT_BUCKETS: tuple[float, ...] = (
    0.01,
    0.1,
    0.5,
    1.0,
    5.0,
    10.0,
    30.0,
    60.0,
    120.0,
    300.0,
)
"""Buckets for queue wait histograms (10ms to 5min)."""


__all__ = [
    "ADMISSIONS_TOTAL",
    "METRIC_PREFIX",
    "QUEUE_DELAY_WARNINGS_TOTAL",
    "QUEUE_DEPTH",
    "QUEUE_WAIT_BUCKETS",
    "QUEUE_WAIT_SECONDS",
    "RATE_LIMITED_TOTAL",
    "TRANSPORT_FAILURES_TOTAL",
    "TRANSPORT_RETRIES_TOTAL",
]
