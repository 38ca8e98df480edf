"""Out-of-the-box configuration: bundled main list and in-memory stores."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ..constants import STATUS_LIST_ID
from ..infra.stores import (
    InMemoryContentStore,
    InMemoryCustomTokenStore,
    InMemoryLastRefreshTimeStore,
    InMemoryPrivacyGuard,
)
from .models import TokenListsConfig

DATA_DIR = Path(__file__).resolve().parents[1] / "data"
BUNDLED_MAIN_LIST_PATH = DATA_DIR / "status-token-list.json"


def load_bundled_main_list() -> bytes:
    """Raw bytes of the Status token list shipped with the package."""

    return BUNDLED_MAIN_LIST_PATH.read_bytes()


def default_config(**overrides: Any) -> TokenListsConfig:
    """A valid config backed by in-memory stores; ``overrides`` replace any field."""

    values: dict[str, Any] = {
        "main_list_id": STATUS_LIST_ID,
        "main_list": load_bundled_main_list(),
        "privacy_guard": InMemoryPrivacyGuard(),
        "last_refresh_store": InMemoryLastRefreshTimeStore(),
        "content_store": InMemoryContentStore(),
        "custom_token_store": InMemoryCustomTokenStore(),
    }
    values.update(overrides)
    return TokenListsConfig(**values)


__all__ = [
    "BUNDLED_MAIN_LIST_PATH",
    "default_config",
    "load_bundled_main_list",
]
