# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Resilient HTTP transport.

Performs one logical HTTP exchange with automatic retry on server errors
(status >= 500) and connectivity failures, using capped exponential
backoff. Responses below 500, including 4xx and 429, are returned to the
caller untouched on the attempt they arrive.
"""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx
from typing_extensions import Self

from ..exceptions import TransportExhaustedError
from ..observability.collector import MetricsCollector
from ..protocols.clock import SleepProtocol
from .config import TransportConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpRequest:
    """
    Description of a request, rebuilt into an httpx.Request per attempt.

    Attributes:
        method: HTTP verb
        url: Absolute target URL
        headers: Request headers
        params: Query parameters
        json: JSON body, mutually exclusive with content
        content: Raw body bytes
    """

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    params: Mapping[str, Any] | None = None
    json: Any = None
    content: bytes | None = None


class ResilientTransport:
    """
    HTTP transport with retry on transient failures.

    Holds no mutable state besides the connection pool, so one instance can
    be shared by concurrent callers.

    Example:
        >>> async with ResilientTransport() as transport:
        ...     response = await transport.perform(
        ...         HttpRequest("POST", "https://slack.com/api/auth.test")
        ...     )
    """

    def __init__(
        self,
        config: TransportConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        sleep: SleepProtocol = asyncio.sleep,
        metrics: MetricsCollector | None = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            config: Retry budget and backoff schedule
            client: Optional pre-built client; the transport creates and owns
                one when omitted
            sleep: Cooperative delay used between attempts
            metrics: Optional Prometheus collector
        """
        self.config = config if config is not None else TransportConfig()
        self._owns_client = client is None
        self._client = (
            client
            if client is not None
            else httpx.AsyncClient(timeout=self.config.timeout)
        )
        self._sleep = sleep
        self._metrics = metrics

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    def calculate_backoff(self, attempt: int) -> float:
        """
        Calculate exponential backoff delay.

        Args:
            attempt: Index of the failed attempt (0-based)

        Returns:
            Delay in seconds before the next attempt
        """
        delay = self.config.backoff_base * (self.config.backoff_factor**attempt)
        return min(delay, self.config.max_backoff)

    async def perform(
        self, request: HttpRequest, max_attempts: int | None = None
    ) -> httpx.Response:
        """
        Send a request, retrying server errors and connectivity failures.

        Args:
            request: Request to send
            max_attempts: Overrides config.max_attempts for this call

        Returns:
            The first response with a status below 500

        Raises:
            TransportExhaustedError: If every attempt failed
            ValueError: If max_attempts is below 1
        """
        attempts = max_attempts if max_attempts is not None else self.config.max_attempts
        if attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        last_status: int | None = None
        last_error: httpx.TransportError | None = None

        for attempt in range(attempts):
            try:
                response = await self._client.send(self._build_request(request))
            except httpx.TransportError as e:
                last_status, last_error = None, e
                reason = type(e).__name__
                logger.warning(
                    f"API unreachable (attempt {attempt + 1}/{attempts}): {e}"
                )
            else:
                if response.status_code < 500:
                    return response
                last_status, last_error = response.status_code, None
                reason = str(response.status_code)
                logger.warning(
                    f"API error {response.status_code} "
                    f"(attempt {attempt + 1}/{attempts})"
                )

            if attempt + 1 >= attempts:
                break

            delay = self.calculate_backoff(attempt)
            if self._metrics:
                self._metrics.record_transport_retry(reason)
            logger.debug(f"Retrying {request.method} {request.url} in {delay:g}s")
            await self._sleep(delay)

        if self._metrics:
            self._metrics.record_transport_failure()

        last = str(last_error) if last_error is not None else f"status {last_status}"
        raise TransportExhaustedError(
            f"API unavailable after {attempts} attempts: {last}",
            attempts=attempts,
            last_status=last_status,
            last_error=last_error,
        ) from last_error

    def _build_request(self, request: HttpRequest) -> httpx.Request:
        return self._client.build_request(
            request.method,
            request.url,
            headers=dict(request.headers),
            params=request.params,
            json=request.json,
            content=request.content,
        )


__all__ = [
    "HttpRequest",
    "ResilientTransport",
]
