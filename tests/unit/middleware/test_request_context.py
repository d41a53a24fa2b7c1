"""
Request Context Middleware Tests.

WHAT: Unit tests for the RequestContextMiddleware and request metadata
helpers.

WHY: Every log line written while reconciling a Xendit callback carries
the request ID, and the tenant context records the callback's source IP.
These tests ensure correct behavior for:
- Client IP extraction (direct and through proxies)
- Request ID reuse and generation
- Metadata availability throughout the request lifecycle

HOW: Tests build raw ASGI scopes to verify extraction and propagation.
"""

import pytest
from unittest.mock import MagicMock
from starlette.requests import Request
from starlette.responses import Response

from xendit_payments.middleware.request_context import (
    REQUEST_ID_HEADER,
    RequestContextMiddleware,
    RequestMetadata,
    _request_metadata,
    build_request_metadata,
    get_client_ip,
    get_request_metadata,
)


def _make_request(
    headers: dict = None,
    client_host: str = None,
    method: str = "POST",
    path: str = "/payments/xendit",
) -> Request:
    scope = {
        "type": "http",
        "method": method,
        "scheme": "http",
        "server": ("testserver", 80),
        "path": path,
        "query_string": b"",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": (client_host, 12345) if client_host else None,
    }
    return Request(scope)


async def _ok(request):
    return Response(content="Ok", status_code=200)


class TestGetClientIp:
    """Tests for the get_client_ip function."""

    def test_from_x_real_ip(self):
        request = _make_request(headers={"X-Real-IP": "192.168.1.100"}, client_host="10.0.0.1")
        assert get_client_ip(request) == "192.168.1.100"

    def test_from_x_forwarded_for(self):
        """
        WHY: The first address in X-Forwarded-For is the original client.
        """
        request = _make_request(
            headers={"X-Forwarded-For": "203.0.113.50, 70.41.3.18, 150.172.238.178"},
            client_host="10.0.0.1",
        )
        assert get_client_ip(request) == "203.0.113.50"

    def test_prefers_x_real_ip_over_x_forwarded_for(self):
        request = _make_request(
            headers={"X-Real-IP": "192.168.1.100", "X-Forwarded-For": "203.0.113.50"},
        )
        assert get_client_ip(request) == "192.168.1.100"

    def test_from_direct_connection(self):
        assert get_client_ip(_make_request(client_host="172.16.0.50")) == "172.16.0.50"

    def test_strips_whitespace(self):
        request = _make_request(headers={"X-Real-IP": "  192.168.1.100  "})
        assert get_client_ip(request) == "192.168.1.100"

    def test_unknown_fallback(self):
        assert get_client_ip(_make_request()) == "unknown"


class TestBuildRequestMetadata:
    """Tests for build_request_metadata."""

    def test_fields(self):
        request = _make_request(
            headers={"User-Agent": "Xendit/1.0"},
            client_host="203.0.113.9",
        )

        metadata = build_request_metadata(request)

        assert metadata.ip_address == "203.0.113.9"
        assert metadata.user_agent == "Xendit/1.0"
        assert metadata.path == "/payments/xendit"
        assert metadata.method == "POST"
        # UUID4 format (36 chars with hyphens)
        assert len(metadata.request_id) == 36

    def test_reuses_upstream_request_id(self):
        request = _make_request(headers={REQUEST_ID_HEADER: "upstream-id"})
        assert build_request_metadata(request).request_id == "upstream-id"

    def test_user_agent_optional(self):
        assert build_request_metadata(_make_request()).user_agent is None


class TestGetRequestMetadata:
    """Tests for the context variable accessor."""

    def test_none_outside_a_request(self):
        assert get_request_metadata() is None

    def test_returns_set_metadata(self):
        metadata = RequestMetadata(
            request_id="test-id",
            ip_address="127.0.0.1",
            user_agent=None,
            path="/health",
            method="GET",
        )
        token = _request_metadata.set(metadata)
        try:
            assert get_request_metadata() == metadata
        finally:
            _request_metadata.reset(token)


@pytest.mark.asyncio
class TestRequestContextMiddleware:
    """Tests for the RequestContextMiddleware class."""

    async def test_adds_request_id_header(self):
        middleware = RequestContextMiddleware(app=MagicMock())

        response = await middleware.dispatch(_make_request(), _ok)

        assert len(response.headers[REQUEST_ID_HEADER]) == 36

    async def test_echoes_upstream_request_id(self):
        middleware = RequestContextMiddleware(app=MagicMock())
        request = _make_request(headers={REQUEST_ID_HEADER: "cb-123"})

        response = await middleware.dispatch(request, _ok)

        assert response.headers[REQUEST_ID_HEADER] == "cb-123"

    async def test_sets_metadata_in_request_state_and_context_var(self):
        captured = {}

        async def call_next(req):
            captured["state"] = req.state.metadata
            captured["var"] = get_request_metadata()
            return Response(content="Ok", status_code=200)

        middleware = RequestContextMiddleware(app=MagicMock())
        await middleware.dispatch(_make_request(client_host="10.0.0.1"), call_next)

        assert captured["state"].ip_address == "10.0.0.1"
        assert captured["var"] is captured["state"]

    async def test_clears_metadata_after_request(self):
        middleware = RequestContextMiddleware(app=MagicMock())

        await middleware.dispatch(_make_request(), _ok)

        assert get_request_metadata() is None

    async def test_clears_metadata_on_error(self):
        async def call_next(req):
            raise ValueError("Test error")

        middleware = RequestContextMiddleware(app=MagicMock())

        with pytest.raises(ValueError):
            await middleware.dispatch(_make_request(), call_next)

        assert get_request_metadata() is None
