"""Resolve the list-of-token-lists manifest from the network or the cache."""

from __future__ import annotations

from datetime import datetime, timezone
from threading import Event

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..constants import MANIFEST_LIST_ID, MANIFEST_SCHEMA
from ..errors import ContentNotFoundError, FetchError, SchemaValidationError
from ..infra.stores import ContentStore
from ..types import Content
from .fetcher import HTTPClient
from .parsers.base import VersionModel
from .validate import validate_json_against_schema


class ManifestEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    source_url: str = Field(alias="sourceUrl")
    schema_url: str = Field(default="", alias="schema")


class Manifest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    timestamp: str = ""
    version: VersionModel = Field(default_factory=VersionModel)
    token_lists: list[ManifestEntry] = Field(default_factory=list, alias="tokenLists")

    def unique_entries(self) -> list[ManifestEntry]:
        """Entries keyed by ID; the first occurrence of an ID wins."""

        seen: set[str] = set()
        entries: list[ManifestEntry] = []
        for entry in self.token_lists:
            if entry.id in seen:
                continue
            seen.add(entry.id)
            entries.append(entry)
        return entries


def parse_manifest(raw: bytes) -> Manifest:
    """Validate ``raw`` against the manifest schema and load it."""

    validate_json_against_schema(raw, MANIFEST_SCHEMA)
    try:
        return Manifest.model_validate_json(raw)
    except ValidationError as exc:
        raise SchemaValidationError(str(exc)) from exc


class ManifestResolver:
    """Conditional fetch of the manifest with fallback to the cached copy.

    ``resolve`` never raises: network, schema or parse failures are logged and
    the cached manifest (possibly empty) is returned instead.
    """

    def __init__(
        self,
        content_store: ContentStore,
        http_client: HTTPClient,
        manifest_url: str = "",
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.content_store = content_store
        self.http_client = http_client
        self.manifest_url = manifest_url
        self.logger = logger or structlog.get_logger("tokenlists.manifest")

    def resolve(self, cancel: Event | None = None) -> Manifest:
        cached_content, cached = self._load_cached()
        if not self.manifest_url:
            return cached

        etag = cached_content.etag if cached_content is not None else ""
        try:
            body, new_etag = self.http_client.fetch(self.manifest_url, etag=etag, cancel=cancel)
        except FetchError as exc:
            self.logger.warning("manifest_fetch_failed", url=self.manifest_url, error=str(exc))
            return cached

        if body is None or (etag and new_etag == etag):
            self.logger.debug("manifest_not_modified", url=self.manifest_url)
            return cached

        try:
            manifest = parse_manifest(body)
        except SchemaValidationError as exc:
            self.logger.warning("manifest_invalid", url=self.manifest_url, error=str(exc))
            return cached

        try:
            self.content_store.set(
                MANIFEST_LIST_ID,
                Content(
                    source_url=self.manifest_url,
                    etag=new_etag,
                    data=body,
                    fetched=datetime.now(timezone.utc),
                ),
            )
        except Exception as exc:  # noqa: BLE001
            self.logger.error("manifest_store_failed", error=str(exc))
        self.logger.info("manifest_updated", entries=len(manifest.token_lists), etag=new_etag)
        return manifest

    def _load_cached(self) -> tuple[Content | None, Manifest]:
        try:
            content = self.content_store.get(MANIFEST_LIST_ID)
        except ContentNotFoundError:
            self.logger.debug("manifest_cache_empty")
            return None, Manifest()
        except Exception as exc:  # noqa: BLE001
            self.logger.warning("manifest_cache_read_failed", error=str(exc))
            return None, Manifest()

        try:
            return content, parse_manifest(content.data)
        except SchemaValidationError as exc:
            self.logger.warning("manifest_cache_invalid", error=str(exc))
            return None, Manifest()


__all__ = ["Manifest", "ManifestEntry", "ManifestResolver", "parse_manifest"]
