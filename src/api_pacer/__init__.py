# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""api-pacer - Admission scheduling for rate-limited API clients.

This library mediates calls from many concurrent callers to a remote API
that enforces per-method rate limits and answers with transient errors.

Key Features:
    - Priority-ordered admission queue with FIFO tie-breaking
    - Rolling per-method request budgets
    - Global pause on server rate limit signals, with front-of-queue retry
    - HTTP transport with capped exponential backoff on transient failures
    - Prometheus metrics

Quick Start:
    >>> from api_pacer import ApiClient, Priority
    >>>
    >>> async with ApiClient(token) as client:
    ...     response = await client.call(
    ...         "chat.postMessage",
    ...         {"channel": "C123", "text": "hello"},
    ...         priority=Priority.HIGH,
    ...     )

Main Exports:
    - Scheduler, create_scheduler: Admission scheduling
    - ResilientTransport, HttpRequest: Retrying HTTP transport
    - ApiClient: Scheduler + transport wired together
    - SchedulerConfig, TransportConfig: Configuration options
    - ApiResponse: Response envelope model

Version: 1.0.0
"""

__version__ = "1.0.0"

from .client import ApiClient
from .exceptions import (
    PacerError,
    SchedulerError,
    TransportExhaustedError,
)
from .observability import MetricsCollector
from .protocols import (
    ClockProtocol,
    RateLimitClassifierProtocol,
    SleepProtocol,
)
from .scheduler import (
    DEFAULT_METHOD_LIMITS,
    MethodWindow,
    Scheduler,
    SchedulerConfig,
    create_scheduler,
)
from .transport import HttpRequest, ResilientTransport, TransportConfig
from .types import (
    DEFAULT_PRIORITY,
    ApiResponse,
    Priority,
    QueuedCall,
    detect_rate_limit,
    parse_retry_after,
)

__all__ = [
    "DEFAULT_METHOD_LIMITS",
    "DEFAULT_PRIORITY",
    # Client
    "ApiClient",
    # Types
    "ApiResponse",
    # Protocols
    "ClockProtocol",
    "HttpRequest",
    "MethodWindow",
    # Observability
    "MetricsCollector",
    # Exceptions
    "PacerError",
    "Priority",
    "QueuedCall",
    "RateLimitClassifierProtocol",
    # Transport
    "ResilientTransport",
    # Scheduler
    "Scheduler",
    "SchedulerConfig",
    "SchedulerError",
    "SleepProtocol",
    "TransportConfig",
    "TransportExhaustedError",
    "create_scheduler",
    "detect_rate_limit",
    "parse_retry_after",
]
