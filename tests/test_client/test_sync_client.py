"""Tests for the synchronous transport."""

from __future__ import annotations

import json
import logging

import httpx
import pytest

from apiplay.client.sync_client import SyncClient
from apiplay.models import HTTPMethod, RequestConfig, RequestDescriptor


def _descriptor(**overrides) -> RequestDescriptor:
    data = {
        "method": HTTPMethod.POST,
        "url": "https://api.example.com/alerts?dry=1",
        "headers": {"Authorization": "Bearer tok", "Content-Type": "application/json"},
        "body": '{"symbol": "ETH"}',
    }
    data.update(overrides)
    return RequestDescriptor(**data)


class TestSyncClientSend:
    """Sending descriptors through httpx.MockTransport."""

    def test_sends_exactly_the_descriptor(self) -> None:
        captured: dict[str, httpx.Request] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["request"] = request
            return httpx.Response(201, json={"id": 7})

        with SyncClient(transport=httpx.MockTransport(handler)) as client:
            client.send(_descriptor())

        request = captured["request"]
        assert request.method == "POST"
        assert str(request.url) == "https://api.example.com/alerts?dry=1"
        assert request.headers["authorization"] == "Bearer tok"
        assert request.headers["content-type"] == "application/json"
        assert request.content == b'{"symbol": "ETH"}'

    def test_response_state(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                201, headers={"X-Request-Id": "abc"}, text='{"id": "é"}'
            )

        with SyncClient(transport=httpx.MockTransport(handler)) as client:
            result = client.send(_descriptor())

        assert result.status == 201
        assert result.status_text == "Created"
        assert result.headers["x-request-id"] == "abc"
        assert result.body == '{"id": "é"}'
        assert result.size_bytes == len('{"id": "é"}'.encode("utf-8"))
        assert result.duration_ms >= 0

    def test_no_body(self) -> None:
        captured: dict[str, httpx.Request] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["request"] = request
            return httpx.Response(204)

        with SyncClient(transport=httpx.MockTransport(handler)) as client:
            result = client.send(_descriptor(method=HTTPMethod.GET, body=None, headers={}))

        assert captured["request"].content == b""
        assert result.status == 204
        assert result.body == ""
        assert result.size_bytes == 0

    def test_error_status_is_a_response(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"detail": "boom"})

        with SyncClient(transport=httpx.MockTransport(handler)) as client:
            result = client.send(_descriptor())

        assert result.status == 500
        assert result.status_text == "Internal Server Error"
        assert json.loads(result.body) == {"detail": "boom"}

    def test_network_error(self, caplog: pytest.LogCaptureFixture) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        with caplog.at_level(logging.WARNING, logger="apiplay.client.sync_client"):
            with SyncClient(transport=httpx.MockTransport(handler)) as client:
                result = client.send(_descriptor())

        assert result.status == 0
        assert result.status_text == "Network Error"
        assert result.headers == {}
        assert result.size_bytes == 0
        assert result.body == '{\n  "error": "Connection refused"\n}'
        assert "Connection refused" in caplog.text

    def test_timeout_is_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with SyncClient(transport=httpx.MockTransport(handler)) as client:
            result = client.send(_descriptor())

        assert result.status == 0
        assert json.loads(result.body) == {"error": "timed out"}

    def test_non_ascii_header_is_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("request should not be sent")

        descriptor = _descriptor(headers={"Authorization": "Bearer tok’en"})
        with SyncClient(transport=httpx.MockTransport(handler)) as client:
            result = client.send(descriptor)

        assert result.status == 0
        assert result.status_text == "Network Error"
        assert "error" in json.loads(result.body)

    def test_invalid_url_is_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("request should not be sent")

        with SyncClient(transport=httpx.MockTransport(handler)) as client:
            result = client.send(_descriptor(url="https://api.example.com:abc/alerts"))

        assert result.status == 0
        assert result.status_text == "Network Error"



class TestSyncClientLifecycle:
    def test_send_outside_context(self) -> None:
        with pytest.raises(RuntimeError, match="context manager"):
            SyncClient().send(_descriptor())

    def test_closed_after_exit(self) -> None:
        client = SyncClient(
            RequestConfig(timeout=5, verify_ssl=False),
            transport=httpx.MockTransport(lambda request: httpx.Response(200)),
        )
        with client:
            assert client._client is not None
            assert client._client.timeout.read == 5
        assert client._client is None
