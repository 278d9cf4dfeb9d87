# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Caller-facing API client built on the scheduler and transport."""

from .api import DEFAULT_BASE_URL, ApiClient

__all__ = [
    "DEFAULT_BASE_URL",
    "ApiClient",
]
