"""Unit tests for ApiResponse, retry hint parsing and rate limit detection."""

from types import SimpleNamespace
from unittest.mock import Mock

import httpx
import pytest

from api_pacer.types.response import (
    INVALID_RESPONSE_ERROR,
    RATE_LIMITED_ERROR,
    ApiResponse,
    detect_rate_limit,
    parse_retry_after,
)


class TestParseRetryAfter:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("5", 5.0),
            (" 30 ", 30.0),
            (2, 2.0),
            (2.5, 2.5),
            ("120", 120.0),
        ],
    )
    def test_valid_hints(self, value, expected):
        assert parse_retry_after(value) == expected

    @pytest.mark.parametrize(
        "value",
        [None, "", "soon", "0", 0, -4, "-1", "nan", "inf", True, object()],
    )
    def test_unusable_hints_default_to_one_second(self, value):
        assert parse_retry_after(value) == 1.0

    def test_custom_default(self):
        assert parse_retry_after(None, default=3.0) == 3.0


class TestApiResponse:
    def test_extra_fields_preserved(self):
        response = ApiResponse.model_validate(
            {"ok": True, "channels": [{"id": "C1"}], "response_metadata": {}}
        )
        assert response.ok is True
        assert response.model_extra["channels"] == [{"id": "C1"}]

    def test_is_rate_limited(self):
        assert ApiResponse(ok=False, error=RATE_LIMITED_ERROR).is_rate_limited
        assert not ApiResponse(ok=False, error="not_in_channel").is_rate_limited
        assert not ApiResponse(ok=True).is_rate_limited

    def test_malformed_retry_after_defaults(self):
        response = ApiResponse(ok=False, error=RATE_LIMITED_ERROR, retry_after="abc")
        assert response.retry_after == 1.0

    def test_from_http_429_uses_header(self):
        http = httpx.Response(429, headers={"Retry-After": "7"})
        response = ApiResponse.from_http(http)

        assert response.is_rate_limited
        assert response.retry_after == 7.0
        assert response.http_status == 429

    def test_from_http_429_without_header(self):
        response = ApiResponse.from_http(httpx.Response(429))
        assert response.is_rate_limited
        assert response.retry_after == 1.0

    def test_from_http_json_body(self):
        http = httpx.Response(200, json={"ok": True, "ts": "1700000000.000100"})
        response = ApiResponse.from_http(http)

        assert response.ok is True
        assert response.http_status == 200
        assert response.model_extra["ts"] == "1700000000.000100"

    def test_from_http_error_envelope(self):
        http = httpx.Response(200, json={"ok": False, "error": "channel_not_found"})
        response = ApiResponse.from_http(http)

        assert response.ok is False
        assert response.error == "channel_not_found"
        assert not response.is_rate_limited

    def test_from_http_ratelimited_envelope(self):
        http = httpx.Response(
            200, json={"ok": False, "error": "ratelimited", "retry_after": 3}
        )
        assert ApiResponse.from_http(http).retry_after == 3.0

    @pytest.mark.parametrize(
        "http",
        [
            httpx.Response(400, text="<html>bad request</html>"),
            httpx.Response(200, json=["not", "an", "object"]),
            httpx.Response(200, json={"missing": "ok"}),
        ],
    )
    def test_from_http_invalid_bodies(self, http):
        response = ApiResponse.from_http(http)

        assert response.ok is False
        assert response.error == INVALID_RESPONSE_ERROR
        assert response.http_status == http.status_code


class TestDetectRateLimit:
    def test_api_response(self):
        limited = ApiResponse(ok=False, error=RATE_LIMITED_ERROR, retry_after=4)
        assert detect_rate_limit(limited) == 4.0
        assert detect_rate_limit(ApiResponse(ok=True)) is None

    def test_mapping_with_retry_after(self):
        result = {"ok": False, "error": "ratelimited", "retry_after": "5"}
        assert detect_rate_limit(result) == 5.0

    def test_mapping_with_legacy_key(self):
        result = {"ok": False, "error": "ratelimited", "_retryAfter": "2"}
        assert detect_rate_limit(result) == 2.0

    def test_mapping_without_hint(self):
        assert detect_rate_limit({"ok": False, "error": "ratelimited"}) == 1.0

    def test_ordinary_mappings(self):
        assert detect_rate_limit({"ok": True}) is None
        assert detect_rate_limit({"ok": False, "error": "invalid_auth"}) is None
        assert detect_rate_limit({"error": "ratelimited"}) is None

    def test_attribute_objects(self):
        limited = SimpleNamespace(ok=False, error="ratelimited", retry_after=9)
        assert detect_rate_limit(limited) == 9.0
        assert detect_rate_limit(SimpleNamespace(ok=True)) is None

    def test_attribute_objects_with_legacy_field(self):
        limited = SimpleNamespace(ok=False, error="ratelimited", _retryAfter="6")
        assert detect_rate_limit(limited) == 6.0

    def test_legacy_key_used_when_retry_after_is_none(self):
        mapping = {"ok": False, "error": "ratelimited", "retry_after": None, "_retryAfter": 3}
        obj = SimpleNamespace(**mapping)
        assert detect_rate_limit(mapping) == 3.0
        assert detect_rate_limit(obj) == 3.0

    @pytest.mark.parametrize("result", [None, "text", 42, [1, 2], Mock()])
    def test_other_values(self, result):
        assert detect_rate_limit(result) is None
