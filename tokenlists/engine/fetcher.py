"""Conditional HTTP fetching with ETag revalidation."""

from __future__ import annotations

import json
from threading import Event
from typing import Any

import httpx
import structlog

from ..errors import FetchCancelledError, FetchError

DEFAULT_REQUEST_TIMEOUT = 5.0
DEFAULT_KEEPALIVE_EXPIRY = 90.0
DEFAULT_MAX_KEEPALIVE_CONNECTIONS = 10


class HTTPClient:
    """GET requests with ``If-None-Match`` support over a pooled httpx client."""

    def __init__(
        self,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.logger = logger or structlog.get_logger("tokenlists.fetcher")
        self._client = httpx.Client(
            follow_redirects=True,
            timeout=timeout,
            limits=httpx.Limits(
                max_keepalive_connections=DEFAULT_MAX_KEEPALIVE_CONNECTIONS,
                keepalive_expiry=DEFAULT_KEEPALIVE_EXPIRY,
            ),
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def fetch(self, url: str, etag: str = "", cancel: Event | None = None) -> tuple[bytes | None, str]:
        """Fetch ``url`` and return ``(body, etag)``.

        When ``etag`` is given it is sent as ``If-None-Match``; a 304 answer
        returns ``(None, etag)``. Any other status than 200 raises
        :class:`FetchError`. Gzip encoded bodies are decoded transparently.
        Setting ``cancel`` aborts the request between body chunks.
        """

        self._raise_if_cancelled(url, cancel)
        headers = {"If-None-Match": etag} if etag else {}
        try:
            with self._client.stream("GET", url, headers=headers) as response:
                if response.status_code == httpx.codes.NOT_MODIFIED:
                    return None, etag
                if response.status_code != httpx.codes.OK:
                    raise FetchError(
                        f"unexpected status code {response.status_code} for {url}",
                        url,
                        status_code=response.status_code,
                    )
                new_etag = response.headers.get("ETag", "")
                chunks: list[bytes] = []
                for chunk in response.iter_bytes():
                    self._raise_if_cancelled(url, cancel)
                    chunks.append(chunk)
        except httpx.HTTPError as exc:
            raise FetchError(f"failed to fetch {url}: {exc}", url) from exc
        return b"".join(chunks), new_etag

    def fetch_json(self, url: str, cancel: Event | None = None) -> Any:
        body, _ = self.fetch(url, cancel=cancel)
        try:
            return json.loads(body or b"")
        except ValueError as exc:
            raise FetchError(f"invalid JSON document at {url}: {exc}", url) from exc

    @staticmethod
    def _raise_if_cancelled(url: str, cancel: Event | None) -> None:
        if cancel is not None and cancel.is_set():
            raise FetchCancelledError(url)


__all__ = ["DEFAULT_REQUEST_TIMEOUT", "HTTPClient"]
