# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Transport Configuration for api-pacer

Retry budget and backoff schedule for the resilient HTTP transport.
"""

from dataclasses import dataclass


@dataclass
class TransportConfig:
    """
    Configuration for the resilient transport.

    The delay before retry ``n`` (0-based) is
    ``min(backoff_base * backoff_factor ** n, max_backoff)``. No jitter.
    """

    max_attempts: int = 3
    """Total attempts per request, including the first."""

    backoff_base: float = 1.0
    """Delay in seconds before the first retry."""

    backoff_factor: float = 2.0
    """Multiplier applied to the delay after every retry."""

    max_backoff: float = 30.0
    """Upper bound for a single retry delay in seconds."""

    timeout: float = 30.0
    """Per-attempt HTTP timeout in seconds for the owned client."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.backoff_base <= 0:
            raise ValueError("backoff_base must be positive")
        if self.backoff_factor < 1:
            raise ValueError("backoff_factor must be at least 1")
        if self.max_backoff < self.backoff_base:
            raise ValueError("max_backoff must not be below backoff_base")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")


__all__ = ["TransportConfig"]
