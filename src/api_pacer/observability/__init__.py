# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Observability for api-pacer.

Exports:
    MetricsCollector: Prometheus-backed collector for scheduler and
        transport metrics.
    Metric name constants from observability.constants.
"""

from .collector import MetricsCollector
from .constants import (
    ADMISSIONS_TOTAL,
    METRIC_PREFIX,
    QUEUE_DELAY_WARNINGS_TOTAL,
    QUEUE_DEPTH,
    QUEUE_WAIT_SECONDS,
    RATE_LIMITED_TOTAL,
    TRANSPORT_FAILURES_TOTAL,
    TRANSPORT_RETRIES_TOTAL,
)

__all__ = [
    "ADMISSIONS_TOTAL",
    "METRIC_PREFIX",
    "QUEUE_DELAY_WARNINGS_TOTAL",
    "QUEUE_DEPTH",
    "QUEUE_WAIT_SECONDS",
    "RATE_LIMITED_TOTAL",
    "TRANSPORT_FAILURES_TOTAL",
    "TRANSPORT_RETRIES_TOTAL",
    "MetricsCollector",
]
