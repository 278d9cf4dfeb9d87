# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
API response model and rate limit detection.

Slack-style APIs answer every call with a JSON envelope carrying an ``ok``
flag and, on failure, an ``error`` code. A call rejected for exceeding the
rate limit is reported either as HTTP 429 with a ``Retry-After`` header or
as ``{"ok": false, "error": "ratelimited"}``. This module turns both into a
single outcome that the scheduler can recognise.
"""

import math
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, field_validator

if TYPE_CHECKING:
    import httpx

RATE_LIMITED_ERROR = "ratelimited"
"""Error code reported by the API when a call was rejected for rate limiting."""

INVALID_RESPONSE_ERROR = "invalid_response"
"""Error code used when the response body is not a usable JSON envelope."""

DEFAULT_RETRY_AFTER = 1.0
"""Retry delay in seconds used when the server hint is missing or unusable."""


def parse_retry_after(value: Any, default: float = DEFAULT_RETRY_AFTER) -> float:
    """
    Parse a server-provided retry delay into seconds.

    Accepts ints, floats and numeric strings such as a ``Retry-After``
    header value. Missing, non-numeric, non-finite, zero or negative hints
    fall back to ``default`` so a malformed hint can never break pause logic.

    Args:
        value: Raw hint (header value, JSON field, ...)
        default: Delay to use when the hint is unusable

    Returns:
        Positive delay in seconds
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(seconds) or seconds <= 0:
        return default
    return seconds


class ApiResponse(BaseModel):
    """
    JSON envelope returned by the remote API.

    Unknown fields are kept so callers can read operation-specific payloads
    (``channels``, ``messages``, ``response_metadata`` ...) from the model.
    """

    model_config = ConfigDict(extra="allow")

    ok: bool
    error: str | None = None
    retry_after: float = DEFAULT_RETRY_AFTER
    http_status: int | None = None

    @field_validator("retry_after", mode="before")
    @classmethod
    def _parse_retry_after(cls, value: Any) -> float:
        return parse_retry_after(value)

    @property
    def is_rate_limited(self) -> bool:
        """True when the call was rejected for exceeding the rate limit."""
        return not self.ok and self.error == RATE_LIMITED_ERROR

    @classmethod
    def from_http(cls, response: "httpx.Response") -> "ApiResponse":
        """
        Build an ApiResponse from an HTTP response.

        A 429 status becomes a rate-limited response whose delay comes from
        the ``Retry-After`` header. Any other status is parsed as a JSON
        envelope; bodies that are not one yield ``invalid_response``.
        """
        if response.status_code == 429:
            return cls(
                ok=False,
                error=RATE_LIMITED_ERROR,
                retry_after=response.headers.get("Retry-After"),
                http_status=response.status_code,
            )

        try:
            body = response.json()
            if not isinstance(body, dict):
                raise ValueError("response body is not a JSON object")
            return cls.model_validate({**body, "http_status": response.status_code})
        except ValueError:
            return cls(
                ok=False,
                error=INVALID_RESPONSE_ERROR,
                http_status=response.status_code,
            )


def detect_rate_limit(result: Any) -> float | None:
    """
    Default rate limit classifier used by the scheduler.

    Recognises an ApiResponse, a mapping, or any object carrying
    ``ok is False`` and ``error == "ratelimited"``.

    Args:
        result: Value returned by a submitted action

    Returns:
        Retry delay in seconds for a rate-limited outcome, None otherwise
    """
    if isinstance(result, ApiResponse):
        return result.retry_after if result.is_rate_limited else None

    if isinstance(result, Mapping):
        if result.get("ok") is False and result.get("error") == RATE_LIMITED_ERROR:
            hint = result.get("retry_after")
            if hint is None:
                hint = result.get("_retryAfter")
            return parse_retry_after(hint)
        return None

    if (
        getattr(result, "ok", None) is False
        and getattr(result, "error", None) == RATE_LIMITED_ERROR
    ):
        hint = getattr(result, "retry_after", None)
        if hint is None:
            hint = getattr(result, "_retryAfter", None)
        return parse_retry_after(hint)
    return None


__all__ = [
    "DEFAULT_RETRY_AFTER",
    "INVALID_RESPONSE_ERROR",
    "RATE_LIMITED_ERROR",
    "ApiResponse",
    "detect_rate_limit",
    "parse_retry_after",
]
