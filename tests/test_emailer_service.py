from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from loca.core.errors import EmailerError
from loca.services.emailer_service import EmailerClient

URL = "http://emailer.test/emailer"
PAYLOAD = {"templateName": "invoice", "recordId": "42", "params": {"term": "2024020100"}}


def _send(handler, *, url: str | None = URL, timeout: float = 5.0):
    client = EmailerClient(url, timeout=timeout, transport=httpx.MockTransport(handler))
    return asyncio.run(client.send(PAYLOAD))


def test_posts_json_and_returns_recipient_list():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{**PAYLOAD, "email": "a@example.com", "status": "sent"}])

    statuses = _send(handler)

    assert statuses[0]["email"] == "a@example.com"
    assert seen[0].method == "POST"
    assert str(seen[0].url) == URL
    assert json.loads(seen[0].content) == PAYLOAD


def test_reuses_open_http_client_inside_context():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=[])

    async def _twice():
        async with EmailerClient(URL, transport=httpx.MockTransport(handler)) as client:
            http = client._http
            await client.send(PAYLOAD)
            await client.send(PAYLOAD)
            assert client._http is http
        assert client._http is None

    asyncio.run(_twice())
    assert len(calls) == 2


@pytest.mark.parametrize("status_code", [400, 404, 500, 503])
def test_http_error_status_raises(status_code):
    with pytest.raises(EmailerError) as excinfo:
        _send(lambda request: httpx.Response(status_code, text="nope"))

    assert excinfo.value.status_code == status_code
    assert excinfo.value.payload == "nope"


def test_non_json_body_raises():
    with pytest.raises(EmailerError, match="not JSON"):
        _send(lambda request: httpx.Response(200, text="<html>ok</html>"))


def test_body_that_is_not_a_list_raises():
    with pytest.raises(EmailerError, match="not a list"):
        _send(lambda request: httpx.Response(200, json={"status": "sent"}))


def test_timeout_raises_emailer_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(EmailerError, match="timed out after 1.5s"):
        _send(handler, timeout=1.5)


def test_connection_error_raises_emailer_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(EmailerError, match="connection refused"):
        _send(handler)


def test_missing_url_raises_without_calling_out():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=[])

    with pytest.raises(EmailerError, match="EMAILER_URL"):
        _send(handler, url=None)
    assert calls == []


def test_timeout_is_applied_to_http_client():
    client = EmailerClient(URL, timeout=2.5)

    http = client._new_http_client()
    try:
        assert http.timeout == httpx.Timeout(2.5)
    finally:
        asyncio.run(http.aclose())
