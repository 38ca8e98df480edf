"""Infra layer utilities (store contracts, in-memory and SQLite stores)."""

from .storage import SQLiteContentStore, SQLiteLastRefreshTimeStore, SQLiteManager
from .stores import (
    ContentStore,
    CustomTokenStore,
    InMemoryContentStore,
    InMemoryCustomTokenStore,
    InMemoryLastRefreshTimeStore,
    InMemoryPrivacyGuard,
    LastRefreshTimeStore,
    PrivacyGuard,
)

__all__ = [
    "ContentStore",
    "CustomTokenStore",
    "InMemoryContentStore",
    "InMemoryCustomTokenStore",
    "InMemoryLastRefreshTimeStore",
    "InMemoryPrivacyGuard",
    "LastRefreshTimeStore",
    "PrivacyGuard",
    "SQLiteContentStore",
    "SQLiteLastRefreshTimeStore",
    "SQLiteManager",
]
