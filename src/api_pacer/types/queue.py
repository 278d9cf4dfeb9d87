# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Queue types for request admission.

This module defines the work item held by the scheduler queue and the
reference priority scale.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from asyncio import Future


class Priority(IntEnum):
    """Reference priority scale. Lower values are admitted first.

    Any int is a valid priority; these names only label the common levels.
    """

    URGENT = 0
    HIGH = 1
    NORMAL = 2
    BACKGROUND = 3


DEFAULT_PRIORITY = Priority.NORMAL


@dataclass
class QueuedCall:
    """
    A call waiting in the scheduler queue.

    Wraps the zero-argument action that performs exactly one remote call,
    together with the future through which its outcome reaches the caller.

    Attributes:
        method: Remote operation name, used as the rate limit bucket key
        request_func: Async callable that executes the call
        priority: Admission priority (lower = sooner)
        enqueued_at: Scheduler clock reading at submission, in seconds
        future: Future resolved with the call's result or exception
        attempts: Number of times request_func has been invoked
    """

    method: str
    request_func: Callable[[], Awaitable[Any]]
    priority: int
    enqueued_at: float
    future: "Future[Any]" = field(repr=False)
    attempts: int = 0

    def wait_time(self, now: float) -> float:
        """Seconds this call has spent waiting since submission."""
        return max(0.0, now - self.enqueued_at)


__all__ = [
    "DEFAULT_PRIORITY",
    "Priority",
    "QueuedCall",
]
