# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Caller-facing API client.

Turns an API method name and its arguments into a request, runs it through
the scheduler (admission, budgets, rate limit pauses) and the resilient
transport (retry on transient failures), and returns the parsed response
envelope. Operation-specific argument handling stays with the caller.
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from typing_extensions import Self

from ..scheduler.scheduler import Scheduler
from ..transport.resilient import HttpRequest, ResilientTransport
from ..types.response import ApiResponse

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://slack.com/api"


class ApiClient:
    """
    Rate-limited client for a Slack-style Web API.

    Attributes:
        base_url: API root; the method name is appended as the path
        scheduler: Scheduler every call is submitted to
        transport: Transport performing the HTTP exchange

    Example:
        >>> async with ApiClient(token) as client:
        ...     response = await client.call(
        ...         "chat.postMessage", {"channel": "C1", "text": "hi"}
        ...     )
        ...     if not response.ok:
        ...         print(response.error)
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        scheduler: Scheduler | None = None,
        transport: ResilientTransport | None = None,
        method_priorities: Mapping[str, int] | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            token: Bearer token sent with every call
            base_url: API root URL
            scheduler: Shared scheduler; a default one is created if omitted
            transport: Shared transport; an owned one is created if omitted
            method_priorities: Default priority per method, used when call()
                is given no explicit priority
        """
        self.base_url = base_url.rstrip("/")
        self.scheduler = scheduler if scheduler is not None else Scheduler()
        self._owns_transport = transport is None
        self.transport = transport if transport is not None else ResilientTransport()
        self._method_priorities = MappingProxyType(dict(method_priorities or {}))
        self._headers = {"Authorization": f"Bearer {token}"}

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            await self.transport.aclose()

    def build_request(
        self,
        method: str,
        params: Mapping[str, Any] | None = None,
        *,
        http_method: str = "POST",
    ) -> HttpRequest:
        """
        Build the HTTP request for an API method.

        GET sends ``params`` as the query string; any other verb sends them
        as a JSON body.
        """
        url = f"{self.base_url}/{method}"
        verb = http_method.upper()
        if verb == "GET":
            return HttpRequest(verb, url, headers=self._headers, params=params)
        headers = {**self._headers, "Content-Type": "application/json; charset=utf-8"}
        return HttpRequest(verb, url, headers=headers, json=dict(params or {}))

    async def call(
        self,
        method: str,
        params: Mapping[str, Any] | None = None,
        *,
        http_method: str = "POST",
        priority: int | None = None,
    ) -> ApiResponse:
        """
        Call an API method through the scheduler.

        Rate limit rejections are absorbed by the scheduler, so the returned
        response is never the rate-limited one.

        Args:
            method: API method name, e.g. "conversations.history"
            params: Method arguments
            http_method: HTTP verb
            priority: Admission priority; falls back to the per-method table,
                then to the scheduler default

        Returns:
            Parsed response envelope

        Raises:
            TransportExhaustedError: If the transport ran out of attempts
        """
        request = self.build_request(method, params, http_method=http_method)
        if priority is None:
            priority = self._method_priorities.get(method)

        async def send() -> ApiResponse:
            response = await self.transport.perform(request)
            return ApiResponse.from_http(response)

        logger.debug(f"Submitting {method} ({request.method})")
        return await self.scheduler.call(method, send, priority)


__all__ = [
    "DEFAULT_BASE_URL",
    "ApiClient",
]
