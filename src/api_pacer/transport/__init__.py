# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Resilient HTTP transport with capped exponential backoff."""

from .config import TransportConfig
from .resilient import HttpRequest, ResilientTransport

__all__ = [
    "HttpRequest",
    "ResilientTransport",
    "TransportConfig",
]
