"""Tests for the httpx-backed CallMeLater client.

Uses ``httpx.MockTransport`` so requests never leave the process.
"""

from __future__ import annotations

import json

import httpx
import pytest

from callmelater.client import CallMeLaterClient
from callmelater.credentials import CallMeLaterApi
from callmelater.exceptions import (
    CallMeLaterAPIError,
    CallMeLaterConnectionError,
    CallMeLaterTimeoutError,
)
from callmelater.nodes.action import CallMeLaterNode

API_URL = "https://api.callmelater.test"


def _client(handler) -> CallMeLaterClient:
    credentials = CallMeLaterApi(api_token="sk_test_123", api_url=API_URL)
    return CallMeLaterClient(credentials, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_bearer_token_sent_on_every_call() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers.get("authorization"))
        return httpx.Response(200, json={"data": {}})

    async with _client(handler) as client:
        await client.request("GET", f"{API_URL}/api/v1/actions/a1")
        await client.get_quota()

    assert seen == ["Bearer sk_test_123", "Bearer sk_test_123"]


@pytest.mark.asyncio
async def test_json_body_is_sent() -> None:
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["url"] = str(request.url)
        captured["body"] = json.loads(request.content)
        return httpx.Response(201, json={"data": {"id": "act_1"}})

    async with _client(handler) as client:
        result = await client.create_action({"name": "ping"})

    assert result == {"data": {"id": "act_1"}}
    assert captured == {
        "method": "POST",
        "url": f"{API_URL}/api/v1/actions",
        "body": {"name": "ping"},
    }


@pytest.mark.asyncio
async def test_get_and_cancel_paths() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, request.url.path))
        return httpx.Response(200, json={"data": {"id": "a1"}})

    async with _client(handler) as client:
        await client.get_action("a1")
        await client.cancel_action("a1")

    assert calls == [("GET", "/api/v1/actions/a1"), ("DELETE", "/api/v1/actions/a1")]


@pytest.mark.asyncio
async def test_error_status_raises_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"message": "The schedule field is required."})

    async with _client(handler) as client:
        with pytest.raises(CallMeLaterAPIError) as exc_info:
            await client.create_action({})

    err = exc_info.value
    assert err.status_code == 422
    assert err.detail == "The schedule field is required."
    assert err.response_body == {"message": "The schedule field is required."}
    assert err.method == "POST"
    assert err.url == "/api/v1/actions"
    assert str(err) == "CallMeLater API returned 422: The schedule field is required. (POST /api/v1/actions)"


@pytest.mark.asyncio
async def test_error_with_non_json_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    async with _client(handler) as client:
        with pytest.raises(CallMeLaterAPIError, match="returned 502: Bad Gateway"):
            await client.get_quota()


@pytest.mark.asyncio
async def test_empty_response_returns_empty_dict() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(204)

    async with _client(handler) as client:
        assert await client.cancel_action("a1") == {}


@pytest.mark.asyncio
async def test_connect_error_is_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(CallMeLaterConnectionError):
            await client.get_quota()


@pytest.mark.asyncio
async def test_timeout_is_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async with _client(handler) as client:
        with pytest.raises(CallMeLaterTimeoutError):
            await client.get_quota()


@pytest.mark.asyncio
@pytest.mark.parametrize("error_cls", [httpx.ReadError, httpx.RemoteProtocolError, httpx.WriteError])
async def test_transport_errors_are_wrapped(error_cls) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise error_cls("connection reset", request=request)

    async with _client(handler) as client:
        with pytest.raises(CallMeLaterConnectionError, match="connection reset"):
            await client.get_quota()


@pytest.mark.asyncio
async def test_non_json_success_body_raises_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>proxy login</html>")

    async with _client(handler) as client:
        with pytest.raises(CallMeLaterAPIError) as exc_info:
            await client.get_action("act_1")

    err = exc_info.value
    assert err.status_code == 200
    assert err.detail == "Invalid JSON response"
    assert err.response_body == {"message": "<html>proxy login</html>"}
    assert (err.method, err.url) == ("GET", "/api/v1/actions/act_1")


def test_api_error_message_includes_request_when_known() -> None:
    assert str(CallMeLaterAPIError(404, "Not found")) == "CallMeLater API returned 404: Not found"
    err = CallMeLaterAPIError(404, "Not found", method="GET", url="/api/v1/actions/x")
    assert str(err) == "CallMeLater API returned 404: Not found (GET /api/v1/actions/x)"
    assert err.response_body == {}


@pytest.mark.asyncio
async def test_action_node_over_real_transport() -> None:
    sent = []

    def handler(request: httpx.Request) -> httpx.Response:
        sent.append(json.loads(request.content))
        return httpx.Response(201, json={"data": {"id": "act_1", "status": "pending"}})

    credentials = CallMeLaterApi(api_token="sk_test_123", api_url=API_URL)
    node = CallMeLaterNode(credentials)
    params = CallMeLaterNode.parameters({"name": "ping", "schedule": "1h", "webhook_url": "https://x/y"})

    async with _client(handler) as client:
        result = await node.execute([{}], params, client)

    assert result == [{"id": "act_1", "status": "pending"}]
    assert sent == [{
        "name": "ping",
        "mode": "immediate",
        "request": {"url": "https://x/y", "method": "POST"},
        "schedule": {"wait": "1h"},
    }]
