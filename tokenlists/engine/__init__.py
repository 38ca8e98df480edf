"""Fetching, parsing and merging of token lists."""

from .fetcher import HTTPClient
from .manifest import Manifest, ManifestEntry, ManifestResolver
from .merge import SnapshotBuilder
from .remote import RemoteListsFetcher
from .thread_pool import ThreadPoolManager

__all__ = [
    "HTTPClient",
    "Manifest",
    "ManifestEntry",
    "ManifestResolver",
    "RemoteListsFetcher",
    "SnapshotBuilder",
    "ThreadPoolManager",
]
