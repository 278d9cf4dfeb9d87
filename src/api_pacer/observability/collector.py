# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Prometheus metrics collector for the scheduler and transport.

Each MetricsCollector owns its own CollectorRegistry, so several schedulers
(or test cases) can create collectors without duplicate registration
errors. The collector is optional: the scheduler and the transport only
record metrics when one is passed to them.

Usage:
    >>> collector = MetricsCollector()
    >>> scheduler = Scheduler(metrics=collector)
    >>> collector.start_http_server(9090)
    >>> collector.get_metrics()["api_pacer_queue_depth"]
    0.0
"""

from __future__ import annotations

import logging
from typing import Any

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

from .constants import (
    ADMISSIONS_TOTAL,
    QUEUE_DELAY_WARNINGS_TOTAL,
    QUEUE_DEPTH,
    QUEUE_WAIT_BUCKETS,
    QUEUE_WAIT_SECONDS,
    RATE_LIMITED_TOTAL,
    TRANSPORT_FAILURES_TOTAL,
    TRANSPORT_RETRIES_TOTAL,
)

logger = logging.getLogger(__name__)


class MetricsCollector:
    """
    Collects admission, rate limit and retry metrics.

    Attributes:
        registry: The CollectorRegistry all metrics are registered with
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        self._server_started = False

        self._admissions = Counter(
            ADMISSIONS_TOTAL,
            "Calls admitted from the queue and executed",
            ["method"],
            registry=self.registry,
        )
        self._rate_limited = Counter(
            RATE_LIMITED_TOTAL,
            "Rate limit rejections absorbed by the scheduler",
            ["method"],
            registry=self.registry,
        )
        self._queue_delay_warnings = Counter(
            QUEUE_DELAY_WARNINGS_TOTAL,
            "Queue delay warnings for long-waiting calls",
            ["method"],
            registry=self.registry,
        )
        self._queue_depth = Gauge(
            QUEUE_DEPTH,
            "Calls waiting in the queue",
            registry=self.registry,
        )
        self._queue_wait = Histogram(
            QUEUE_WAIT_SECONDS,
            "Time between submission and admission",
            buckets=QUEUE_WAIT_BUCKETS,
            registry=self.registry,
        )
        self._transport_retries = Counter(
            TRANSPORT_RETRIES_TOTAL,
            "Transport retries by reason",
            ["reason"],
            registry=self.registry,
        )
        self._transport_failures = Counter(
            TRANSPORT_FAILURES_TOTAL,
            "Requests that exhausted the retry budget",
            registry=self.registry,
        )

    # ===== SCHEDULER =====

    def record_admission(self, method: str, wait_seconds: float) -> None:
        self._admissions.labels(method=method).inc()
        self._queue_wait.observe(wait_seconds)

    def record_rate_limited(self, method: str) -> None:
        self._rate_limited.labels(method=method).inc()

    def record_queue_delay_warning(self, method: str) -> None:
        self._queue_delay_warnings.labels(method=method).inc()

    def set_queue_depth(self, depth: int) -> None:
        self._queue_depth.set(depth)

    # ===== TRANSPORT =====

    def record_transport_retry(self, reason: str) -> None:
        self._transport_retries.labels(reason=reason).inc()

    def record_transport_failure(self) -> None:
        self._transport_failures.inc()

    # ===== EXPORT =====

    def get_metrics(self) -> dict[str, Any]:
        """
        Snapshot every sample in the registry as a flat dict.

        Labelled samples are keyed as ``name{label=value,...}``.
        """
        snapshot: dict[str, Any] = {}
        for family in self.registry.collect():
            for sample in family.samples:
                if sample.name.endswith("_created"):
                    continue
                key = sample.name
                if sample.labels:
                    labels = ",".join(
                        f"{k}={v}" for k, v in sorted(sample.labels.items())
                    )
                    key = f"{key}{{{labels}}}"
                snapshot[key] = sample.value
        return snapshot

    def start_http_server(self, port: int, addr: str = "127.0.0.1") -> bool:
        """
        Expose this collector's registry for Prometheus scraping.

        Returns:
            True if the server was started, False if it was already running
        """
        if self._server_started:
            logger.debug("Metrics server already running")
            return False
        start_http_server(port, addr=addr, registry=self.registry)
        self._server_started = True
        logger.info(f"Metrics server listening on {addr}:{port}")
        return True


__all__ = ["MetricsCollector"]
