# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Scheduler Configuration for api-pacer

This module provides the compiled-in per-method budget table and the
configuration dataclass for the admission scheduler.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ..types.queue import DEFAULT_PRIORITY
from ..types.response import DEFAULT_RETRY_AFTER

DEFAULT_METHOD_LIMITS: Mapping[str, int] = MappingProxyType(
    {
        "chat.postMessage": 300,
        "chat.update": 50,
        "conversations.list": 20,
        "conversations.info": 20,
        "conversations.create": 20,
        "conversations.history": 50,
        "conversations.replies": 50,
        "conversations.setTopic": 20,
        "conversations.setPurpose": 20,
        "conversations.archive": 20,
        "reactions.add": 20,
        "reactions.remove": 20,
        "search.messages": 20,
        "pins.add": 20,
        "pins.remove": 20,
        "users.list": 20,
        "users.profile.get": 100,
        "auth.test": 100,
    }
)
"""Admissions allowed per rolling window, keyed by API method.

Methods missing from the table are unlimited.
"""


@dataclass
class SchedulerConfig:
    """
    Configuration for the admission scheduler.

    The budget table is frozen after construction; it cannot be changed
    while the scheduler runs.
    """

    # === Budgets ===

    method_limits: Mapping[str, int] = field(
        default_factory=lambda: DEFAULT_METHOD_LIMITS
    )
    """Maximum admissions per window for each method."""

    window_seconds: float = 60.0
    """Length of the rolling window in seconds."""

    window_margin: float = 0.1
    """Extra delay added when waiting for the oldest admission to age out."""

    # === Diagnostics ===

    queue_delay_warning: float = 10.0
    """Queue wait in seconds after which a delay warning is logged."""

    # === Defaults ===

    default_retry_after: float = DEFAULT_RETRY_AFTER
    """Pause in seconds when a rate limit carries no usable delay."""

    default_priority: int = DEFAULT_PRIORITY
    """Priority used when submit() is called without one."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        for method, limit in self.method_limits.items():
            if limit < 1:
                raise ValueError(f"limit for {method} must be at least 1")
        self.method_limits = MappingProxyType(dict(self.method_limits))
        if self.window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        if self.window_margin < 0:
            raise ValueError("window_margin must not be negative")
        if self.queue_delay_warning < 0:
            raise ValueError("queue_delay_warning must not be negative")
        if self.default_retry_after <= 0:
            raise ValueError("default_retry_after must be positive")


__all__ = [
    "DEFAULT_METHOD_LIMITS",
    "SchedulerConfig",
]
