from __future__ import annotations

import gzip
import json
from threading import Event

import httpx
import pytest

from tokenlists.engine.fetcher import HTTPClient
from tokenlists.errors import FetchCancelledError, FetchError

URL = "https://lists.example.org/status.json"


def test_fetch_returns_body_and_etag(routes) -> None:
    routes.json(URL, b'{"tokens": []}', etag='"v1"')
    with HTTPClient(transport=routes.transport()) as client:
        body, etag = client.fetch(URL)

    assert body == b'{"tokens": []}'
    assert etag == '"v1"'
    assert "If-None-Match" not in routes.requests[0].headers


def test_fetch_sends_if_none_match_and_handles_not_modified(routes) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.headers.get("If-None-Match") == '"v1"':
            return httpx.Response(304)
        return httpx.Response(200, content=b"fresh", headers={"ETag": '"v2"'})

    routes.add(URL, handler)
    with HTTPClient(transport=routes.transport()) as client:
        body, etag = client.fetch(URL, etag='"v1"')

    assert body is None
    assert etag == '"v1"'
    assert routes.requests[0].headers["If-None-Match"] == '"v1"'


def test_fetch_with_stale_etag_returns_fresh_body(routes) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.headers.get("If-None-Match") == '"v2"':
            return httpx.Response(304)
        return httpx.Response(200, content=b"fresh", headers={"ETag": '"v2"'})

    routes.add(URL, handler)
    with HTTPClient(transport=routes.transport()) as client:
        assert client.fetch(URL, etag='"v0"') == (b"fresh", '"v2"')
        assert client.fetch(URL, etag='"v2"') == (None, '"v2"')

    assert routes.requests[0].headers["If-None-Match"] == '"v0"'


def test_fetch_decodes_gzip_bodies(routes) -> None:
    payload = json.dumps({"name": "gz"}).encode()
    routes.add(
        URL,
        lambda _request: httpx.Response(
            200, content=gzip.compress(payload), headers={"Content-Encoding": "gzip", "ETag": "abc"}
        ),
    )
    with HTTPClient(transport=routes.transport()) as client:
        body, etag = client.fetch(URL)

    assert body == payload
    assert etag == "abc"


@pytest.mark.parametrize("status_code", [404, 500, 403])
def test_fetch_raises_on_unexpected_status(routes, status_code: int) -> None:
    routes.json(URL, b"nope", status_code=status_code)
    with HTTPClient(transport=routes.transport()) as client:
        with pytest.raises(FetchError) as excinfo:
            client.fetch(URL)

    assert excinfo.value.status_code == status_code
    assert excinfo.value.url == URL


def test_fetch_wraps_transport_errors(routes) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    routes.add(URL, handler)
    with HTTPClient(transport=routes.transport()) as client:
        with pytest.raises(FetchError) as excinfo:
            client.fetch(URL)

    assert excinfo.value.status_code is None


def test_fetch_honours_cancel_before_request(routes) -> None:
    routes.json(URL, b"{}")
    cancel = Event()
    cancel.set()
    with HTTPClient(transport=routes.transport()) as client:
        with pytest.raises(FetchCancelledError):
            client.fetch(URL, cancel=cancel)

    assert routes.requests == []


def test_fetch_json_decodes_document(routes) -> None:
    routes.json(URL, b'{"type": "object"}')
    with HTTPClient(transport=routes.transport()) as client:
        assert client.fetch_json(URL) == {"type": "object"}


def test_fetch_json_rejects_invalid_json(routes) -> None:
    routes.json(URL, b"<html>")
    with HTTPClient(transport=routes.transport()) as client:
        with pytest.raises(FetchError):
            client.fetch_json(URL)
