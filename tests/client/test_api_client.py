"""
Tests for LMSApiClient transport behavior.

Uses httpx.MockTransport so no server is needed; backoff is zeroed so
retries run instantly.
"""

import json

import httpx
import pytest

from lms.client import ApiError, LMSApiClient


def _client(handler, **kwargs) -> LMSApiClient:
    options = {"max_retries": 3, "backoff_initial": 0, "backoff_max": 0}
    options.update(kwargs)
    return LMSApiClient(
        base_url="http://lms.test",
        transport=httpx.MockTransport(handler),
        **options,
    )


class TestRetries:
    async def test_transient_failures_are_retried_until_success(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(503, json={"detail": {"error": "unavailable", "message": "down"}})
            return httpx.Response(200, json={"status": "ok"})

        async with _client(handler) as client:
            result = await client.get("/health")

        assert result == {"status": "ok"}
        assert len(calls) == 3

    async def test_client_errors_are_not_retried(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(
                400, json={"detail": {"error": "validation_error", "message": "title is required"}}
            )

        async with _client(handler) as client:
            with pytest.raises(ApiError) as exc_info:
                await client.post("/api/admin/courses", {"course": {}})

        assert len(calls) == 1
        assert exc_info.value.status == 400
        assert exc_info.value.code == "validation_error"
        assert exc_info.value.message == "title is required"

    async def test_persistent_server_error_exhausts_attempts(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500, text="boom")

        async with _client(handler, max_retries=2) as client:
            with pytest.raises(ApiError) as exc_info:
                await client.get("/api/client/courses")

        assert len(calls) == 2
        assert exc_info.value.status == 500

    async def test_network_error_is_reported_with_status_zero(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler, max_retries=1) as client:
            with pytest.raises(ApiError) as exc_info:
                await client.get("/health")

        assert exc_info.value.status == 0
        assert exc_info.value.code == "network_error"
        assert exc_info.value.retryable


class TestRequests:
    async def test_auth_and_org_headers_are_sent(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(200, json={})

        async with _client(handler, access_token="tok", org_id="org-1") as client:
            await client.get("/api/auth/me")

        assert seen["authorization"] == "Bearer tok"
        assert seen["x-org-id"] == "org-1"

    async def test_anonymous_request_has_no_auth_header(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(200, json={})

        async with _client(handler) as client:
            await client.get("/health")

        assert "authorization" not in seen
        assert "x-org-id" not in seen

    async def test_body_keys_are_snake_cased_and_response_camel_cased(self):
        sent = {}

        def handler(request: httpx.Request) -> httpx.Response:
            sent.update(json.loads(request.content))
            return httpx.Response(
                200,
                json={"order_index": 2, "content": {"video_url": "x"}, "settings_json": {"a_b": 1}},
            )

        async with _client(handler) as client:
            result = await client.post(
                "/api/admin/lessons",
                {"moduleId": "m1", "orderIndex": 2, "content": {"videoUrl": "x"}},
            )

        assert sent == {"module_id": "m1", "order_index": 2, "content": {"videoUrl": "x"}}
        assert result == {"orderIndex": 2, "content": {"video_url": "x"}, "settings_json": {"a_b": 1}}

    async def test_transform_can_be_disabled(self):
        sent = {}

        def handler(request: httpx.Request) -> httpx.Response:
            sent.update(json.loads(request.content))
            return httpx.Response(200, json={"user_id": "u1"})

        async with _client(handler) as client:
            result = await client.post("/x", {"questionOne": "a"}, transform=False)

        assert sent == {"questionOne": "a"}
        assert result == {"user_id": "u1"}

    async def test_none_params_are_dropped(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.url.params)
            return httpx.Response(200, json=[])

        async with _client(handler) as client:
            await client.get("/api/admin/courses", {"status": "draft", "orgId": None})

        assert seen == {"status": "draft"}

    async def test_empty_body_returns_none(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(204)

        async with _client(handler) as client:
            assert await client.delete("/api/admin/courses/c1") is None

    async def test_non_json_body_returns_text(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="pong", headers={"content-type": "text/plain"})

        async with _client(handler) as client:
            assert await client.get("/ping") == "pong"
