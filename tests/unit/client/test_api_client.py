"""
Unit tests for ApiClient.

The client is wired to a real Scheduler on the fake clock and to a
ResilientTransport backed by httpx.MockTransport.
"""

import asyncio
import json
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from api_pacer.client.api import ApiClient
from api_pacer.exceptions import TransportExhaustedError
from api_pacer.scheduler.scheduler import Scheduler
from api_pacer.transport.resilient import ResilientTransport
from api_pacer.types.response import ApiResponse


def build_client(handler, scheduler, **kwargs):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    transport = ResilientTransport(client=http, sleep=AsyncMock())
    return ApiClient(
        "xoxb-token",
        base_url="https://slack.test/api/",
        scheduler=scheduler,
        transport=transport,
        **kwargs,
    )


class TestApiClientRequests:
    def test_build_post_request(self):
        client = ApiClient("xoxb-token", scheduler=Mock(), transport=Mock())

        request = client.build_request("chat.postMessage", {"channel": "C1", "text": "hi"})

        assert request.method == "POST"
        assert request.url == "https://slack.com/api/chat.postMessage"
        assert request.headers["Authorization"] == "Bearer xoxb-token"
        assert request.headers["Content-Type"].startswith("application/json")
        assert request.json == {"channel": "C1", "text": "hi"}

    def test_build_get_request(self):
        client = ApiClient("xoxb-token", scheduler=Mock(), transport=Mock())

        request = client.build_request(
            "conversations.history", {"channel": "C1", "limit": 10}, http_method="get"
        )

        assert request.method == "GET"
        assert request.params == {"channel": "C1", "limit": 10}
        assert request.json is None
        assert "Content-Type" not in request.headers

    @pytest.mark.asyncio
    async def test_call_returns_parsed_response(self, scheduler):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"ok": True, "ts": "1.0"})

        client = build_client(handler, scheduler)

        response = await client.call("chat.postMessage", {"channel": "C1", "text": "hi"})

        assert isinstance(response, ApiResponse)
        assert response.ok is True
        assert response.model_extra["ts"] == "1.0"
        assert str(seen[0].url) == "https://slack.test/api/chat.postMessage"
        assert seen[0].headers["Authorization"] == "Bearer xoxb-token"
        assert json.loads(seen[0].content) == {"channel": "C1", "text": "hi"}

    @pytest.mark.asyncio
    async def test_get_call_sends_query(self, scheduler):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"ok": True, "members": []})

        client = build_client(handler, scheduler)

        await client.call("users.list", {"limit": 200}, http_method="GET")

        assert seen[0].method == "GET"
        assert seen[0].url.params["limit"] == "200"


class TestApiClientScheduling:
    @pytest.mark.asyncio
    async def test_http_429_absorbed_by_scheduler(self, scheduler, clock):
        statuses = [429, 200]
        seen = []

        def handler(request):
            seen.append(request)
            status = statuses.pop(0)
            if status == 429:
                return httpx.Response(429, headers={"Retry-After": "2"})
            return httpx.Response(200, json={"ok": True})

        client = build_client(handler, scheduler)
        task = asyncio.ensure_future(client.call("reactions.add", {"name": "tada"}))

        await clock.advance(0)
        assert not task.done()
        assert scheduler.paused_until == pytest.approx(1002.0)

        await clock.advance(3)
        response = await task

        assert response.ok is True
        assert len(seen) == 2

    @pytest.mark.asyncio
    async def test_transport_failure_reaches_caller(self, scheduler):
        client = build_client(lambda request: httpx.Response(503), scheduler)

        with pytest.raises(TransportExhaustedError, match="after 3 attempts"):
            await client.call("auth.test")

    @pytest.mark.asyncio
    async def test_method_priority_table(self):
        scheduler = Mock(spec=Scheduler)
        scheduler.call = AsyncMock(return_value=ApiResponse(ok=True))
        client = ApiClient(
            "t",
            scheduler=scheduler,
            transport=Mock(),
            method_priorities={"chat.postMessage": 0},
        )

        await client.call("chat.postMessage", {"text": "x"})
        await client.call("users.list")
        await client.call("chat.postMessage", {"text": "y"}, priority=3)

        priorities = [c.args[2] for c in scheduler.call.await_args_list]
        methods = [c.args[0] for c in scheduler.call.await_args_list]
        assert priorities == [0, None, 3]
        assert methods == ["chat.postMessage", "users.list", "chat.postMessage"]


class TestApiClientLifecycle:
    @pytest.mark.asyncio
    async def test_closes_owned_transport(self):
        client = ApiClient("t", scheduler=Mock())
        http = client.transport._client

        async with client:
            pass

        assert http.is_closed

    @pytest.mark.asyncio
    async def test_leaves_shared_transport_open(self):
        transport = Mock()
        transport.aclose = AsyncMock()
        client = ApiClient("t", scheduler=Mock(), transport=transport)

        await client.aclose()

        transport.aclose.assert_not_awaited()
