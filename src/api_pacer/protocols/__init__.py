# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Protocol definitions for api-pacer components.

Available protocols:
- RateLimitClassifierProtocol: Recognises rate-limited action results
- ClockProtocol: Monotonic time source
- SleepProtocol: Cooperative delay primitive
"""

from .classifier import RateLimitClassifierProtocol
from .clock import ClockProtocol, SleepProtocol

__all__ = [
    "ClockProtocol",
    "RateLimitClassifierProtocol",
    "SleepProtocol",
]
