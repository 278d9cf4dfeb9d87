# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Admission scheduler for rate-limited API calls.

This module provides:
- Scheduler: Priority queue with per-method budgets and a global pause
- SchedulerConfig: Configuration for scheduler behavior
- MethodWindow: Rolling per-method admission record
- DEFAULT_METHOD_LIMITS: Compiled-in per-method budget table
"""

from .config import DEFAULT_METHOD_LIMITS, SchedulerConfig
from .scheduler import REQUEUE_RANK, Scheduler, create_scheduler
from .window import MethodWindow

__all__ = [
    "DEFAULT_METHOD_LIMITS",
    "REQUEUE_RANK",
    "MethodWindow",
    # Scheduler
    "Scheduler",
    # Config
    "SchedulerConfig",
    "create_scheduler",
]
