"""Pydantic models describing the engine configuration and the settings file."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

from ..chains import ALL_CHAINS, DEFAULT_COINGECKO_CHAINS_MAPPER
from ..engine.parsers import (
    CoinGeckoAllTokensParser,
    Parser,
    StandardTokenListParser,
    StatusTokenListParser,
)
from ..constants import (
    COINGECKO_ALL_TOKENS_LIST_ID,
    COINGECKO_ARBITRUM_LIST_ID,
    COINGECKO_BASE_LIST_ID,
    COINGECKO_BSC_LIST_ID,
    COINGECKO_ETHEREUM_LIST_ID,
    COINGECKO_OPTIMISM_LIST_ID,
    STATUS_LIST_ID,
    UNISWAP_LIST_ID,
)
from ..infra.stores import ContentStore, CustomTokenStore, LastRefreshTimeStore, PrivacyGuard

DEFAULT_AUTO_REFRESH_INTERVAL = timedelta(minutes=30)
DEFAULT_AUTO_REFRESH_CHECK_INTERVAL = timedelta(minutes=3)
DEFAULT_REQUEST_TIMEOUT = 5.0
DEFAULT_FETCH_WORKERS = 8


def default_parsers(chains_mapper: Mapping[str, int] | None = None) -> dict[str, Parser]:
    """Parsers for the well-known list IDs."""

    standard = StandardTokenListParser()
    return {
        STATUS_LIST_ID: StatusTokenListParser(),
        # Uniswap and the per-platform CoinGecko lists follow the standard format.
        UNISWAP_LIST_ID: standard,
        COINGECKO_ALL_TOKENS_LIST_ID: CoinGeckoAllTokensParser(
            chains_mapper if chains_mapper is not None else DEFAULT_COINGECKO_CHAINS_MAPPER
        ),
        COINGECKO_ETHEREUM_LIST_ID: standard,
        COINGECKO_OPTIMISM_LIST_ID: standard,
        COINGECKO_ARBITRUM_LIST_ID: standard,
        COINGECKO_BSC_LIST_ID: standard,
        COINGECKO_BASE_LIST_ID: standard,
    }


class TokenListsConfig(BaseModel):
    """Immutable engine configuration; checked by ``validate_config`` on use."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    main_list_id: str = STATUS_LIST_ID
    main_list: bytes | None = None
    initial_lists: Mapping[str, bytes] = Field(default_factory=dict)
    parsers: Mapping[str, Parser] = Field(default_factory=dict)

    chains: tuple[int, ...] = ALL_CHAINS
    coingecko_chains_mapper: Mapping[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_COINGECKO_CHAINS_MAPPER)
    )

    manifest_url: str = ""
    auto_refresh_interval: timedelta = DEFAULT_AUTO_REFRESH_INTERVAL
    auto_refresh_check_interval: timedelta = DEFAULT_AUTO_REFRESH_CHECK_INTERVAL
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    fetch_workers: int = Field(default=DEFAULT_FETCH_WORKERS, ge=1)

    privacy_guard: PrivacyGuard | None = None
    last_refresh_store: LastRefreshTimeStore | None = None
    content_store: ContentStore | None = None
    custom_token_store: CustomTokenStore | None = None

    _resolved_parsers: Mapping[str, Parser] = PrivateAttr(default_factory=dict)

    @field_validator("initial_lists", "parsers", "coingecko_chains_mapper", mode="after")
    @classmethod
    def _freeze_mapping(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    def model_post_init(self, __context: Any) -> None:
        resolved = default_parsers(self.coingecko_chains_mapper)
        resolved.update(self.parsers)
        self._resolved_parsers = MappingProxyType(resolved)

    def parser_for(self, list_id: str) -> Parser | None:
        """Return the configured parser for ``list_id``, falling back to the defaults."""

        return self._resolved_parsers.get(list_id)


class TokenListsSettings(BaseModel):
    """File-backed settings (``tokenlists.yaml``) used to assemble a config."""

    main_list_id: str = STATUS_LIST_ID
    main_list_path: Path | None = None
    initial_lists: dict[str, Path] = Field(default_factory=dict)
    chains: list[int] = Field(default_factory=lambda: list(ALL_CHAINS))
    manifest_url: str = ""
    auto_refresh_interval: float = Field(default=DEFAULT_AUTO_REFRESH_INTERVAL.total_seconds(), gt=0)
    auto_refresh_check_interval: float = Field(
        default=DEFAULT_AUTO_REFRESH_CHECK_INTERVAL.total_seconds(), gt=0
    )
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    fetch_workers: int = Field(default=DEFAULT_FETCH_WORKERS, ge=1)
    privacy_mode: bool = False
    cache_path: Path = Field(default=Path("data/cache/tokenlists.db"))

    @field_validator("main_list_path", "cache_path", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Path | None:
        if value in (None, ""):
            return None
        return Path(value)

    @field_validator("initial_lists", mode="before")
    @classmethod
    def _coerce_list_paths(cls, value: Any) -> dict[str, Path]:
        if value in (None, ""):
            return {}
        if not isinstance(value, dict):
            raise ValueError("initial_lists expects a mapping of list ID to file path")
        return {str(key): Path(path) for key, path in value.items()}

    @model_validator(mode="after")
    def _validate_intervals(self) -> "TokenListsSettings":
        if self.auto_refresh_check_interval > self.auto_refresh_interval:
            raise ValueError("auto_refresh_check_interval must be <= auto_refresh_interval")
        return self

    def resolved_cache_path(self, base_dir: Path) -> Path:
        """Return the cache database path relative to the project directory."""

        if not self.cache_path.is_absolute():
            return (base_dir / self.cache_path).resolve()
        return self.cache_path


__all__ = [
    "DEFAULT_AUTO_REFRESH_CHECK_INTERVAL",
    "DEFAULT_AUTO_REFRESH_INTERVAL",
    "DEFAULT_FETCH_WORKERS",
    "DEFAULT_REQUEST_TIMEOUT",
    "TokenListsConfig",
    "TokenListsSettings",
    "default_parsers",
]
