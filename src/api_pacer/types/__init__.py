# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Type definitions and constants."""

from .queue import DEFAULT_PRIORITY, Priority, QueuedCall
from .response import (
    DEFAULT_RETRY_AFTER,
    INVALID_RESPONSE_ERROR,
    RATE_LIMITED_ERROR,
    ApiResponse,
    detect_rate_limit,
    parse_retry_after,
)

__all__ = [
    "DEFAULT_PRIORITY",
    "DEFAULT_RETRY_AFTER",
    "INVALID_RESPONSE_ERROR",
    "RATE_LIMITED_ERROR",
    # Responses
    "ApiResponse",
    # Queue types
    "Priority",
    "QueuedCall",
    "detect_rate_limit",
    "parse_retry_after",
]
