"""Fan-out fetch of every list named by the manifest."""

from __future__ import annotations

import queue
from concurrent.futures import wait
from datetime import datetime, timezone
from threading import Event

import structlog

from ..errors import ContentNotFoundError, FetchError, SchemaValidationError
from ..infra.stores import ContentStore
from ..types import FetchedTokenList
from .fetcher import HTTPClient
from .manifest import ManifestEntry, ManifestResolver
from .thread_pool import ThreadPoolManager
from .validate import validate_json_against_schema


class RemoteListsFetcher:
    """Download all manifest entries concurrently and persist the changed ones."""

    def __init__(
        self,
        resolver: ManifestResolver,
        content_store: ContentStore,
        http_client: HTTPClient,
        pool: ThreadPoolManager,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.resolver = resolver
        self.content_store = content_store
        self.http_client = http_client
        self.pool = pool
        self.logger = logger or structlog.get_logger("tokenlists.remote")

    def fetch_and_store(self, cancel: Event | None = None) -> int:
        """Return the number of lists written to the content store."""

        manifest = self.resolver.resolve(cancel)
        entries = manifest.unique_entries()
        if len(entries) < len(manifest.token_lists):
            self.logger.warning(
                "manifest_duplicate_ids", dropped=len(manifest.token_lists) - len(entries)
            )
        if not entries:
            self.logger.info("manifest_empty")
            return 0

        results: queue.Queue[FetchedTokenList] = queue.Queue(maxsize=len(entries))
        executor = self.pool.get()
        futures = [executor.submit(self._fetch_entry, entry, results, cancel) for entry in entries]
        wait(futures)

        stored = 0
        while True:
            try:
                fetched = results.get_nowait()
            except queue.Empty:
                break
            try:
                self.content_store.set(fetched.id, fetched.to_content())
            except Exception as exc:  # noqa: BLE001
                self.logger.error("list_store_failed", list_id=fetched.id, error=str(exc))
                continue
            stored += 1
        self.logger.info("remote_lists_stored", stored=stored, total=len(entries))
        return stored

    def _fetch_entry(
        self,
        entry: ManifestEntry,
        results: queue.Queue[FetchedTokenList],
        cancel: Event | None,
    ) -> None:
        log = self.logger.bind(list_id=entry.id, url=entry.source_url)
        try:
            etag = self.content_store.get_etag(entry.id)
        except ContentNotFoundError:
            etag = ""
        except Exception as exc:  # noqa: BLE001
            log.warning("etag_read_failed", error=str(exc))
            etag = ""

        try:
            body, new_etag = self.http_client.fetch(entry.source_url, etag=etag, cancel=cancel)
            if body is None:
                log.debug("list_not_modified")
                return
            if entry.schema_url:
                schema = self.http_client.fetch_json(entry.schema_url, cancel=cancel)
                if not isinstance(schema, dict):
                    raise SchemaValidationError(f"schema at {entry.schema_url} is not an object")
                validate_json_against_schema(body, schema)
        except (FetchError, SchemaValidationError) as exc:
            log.warning("list_fetch_failed", error=str(exc))
            return
        except Exception as exc:  # noqa: BLE001
            log.error("list_fetch_crashed", error=str(exc))
            return

        results.put(
            FetchedTokenList(
                id=entry.id,
                source_url=entry.source_url,
                schema=entry.schema_url,
                etag=new_etag,
                fetched=datetime.now(timezone.utc),
                data=body,
            )
        )
        log.debug("list_fetched", size=len(body))


__all__ = ["RemoteListsFetcher"]
