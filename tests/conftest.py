"""Shared fixtures: token list payload builders, configs and mock HTTP routes."""

from __future__ import annotations

import json
from datetime import timedelta
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Callable, Iterable

import httpx
import pytest

from tokenlists.config import ConfigLocator, ConfigRepository, TokenListsConfig
from tokenlists.infra import (
    InMemoryContentStore,
    InMemoryCustomTokenStore,
    InMemoryLastRefreshTimeStore,
    InMemoryPrivacyGuard,
)

ETH_ZERO = "0x0000000000000000000000000000000000000000"
SNT_MAINNET = "0x744d70fdbe2ba4cf95131626614a1763df805b9e"
USDC_MAINNET = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
DAI_MAINNET = "0x6b175474e89094c44da98b954eedeac495271d0f"


def status_list_json(tokens: Iterable[dict[str, Any]], name: str = "Status Token List", **extra: Any) -> bytes:
    payload: dict[str, Any] = {
        "name": name,
        "timestamp": "2025-01-01T00:00:00Z",
        "version": {"major": 1, "minor": 2, "patch": 3},
        "tags": {},
        "logoURI": "",
        "keywords": ["status"],
        "tokens": list(tokens),
    }
    payload.update(extra)
    return json.dumps(payload).encode()


def standard_list_json(tokens: Iterable[dict[str, Any]], name: str = "Uniswap Labs Default", **extra: Any) -> bytes:
    payload: dict[str, Any] = {
        "name": name,
        "timestamp": "2025-02-02T10:00:00Z",
        "version": {"major": 12, "minor": 0, "patch": 1},
        "tokens": list(tokens),
    }
    payload.update(extra)
    return json.dumps(payload).encode()


def status_token(symbol: str, contracts: dict[int, str | None], decimals: int = 18, **extra: Any) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "crossChainId": extra.pop("cross_chain_id", symbol.lower()),
        "symbol": symbol,
        "name": extra.pop("name", symbol),
        "decimals": decimals,
        "logoURI": extra.pop("logo_uri", ""),
        "contracts": {str(chain): address for chain, address in contracts.items()},
    }
    entry.update(extra)
    return entry


def standard_token(chain_id: int, address: str, symbol: str, decimals: int = 18) -> dict[str, Any]:
    return {
        "chainId": chain_id,
        "address": address,
        "name": symbol,
        "symbol": symbol,
        "decimals": decimals,
        "logoURI": "",
    }


ETH_SNT_MAIN_LIST = status_list_json(
    [
        status_token("ETH", {1: ETH_ZERO}, cross_chain_id="eth-native", name="Ethereum"),
        status_token("SNT", {1: SNT_MAINNET}, cross_chain_id="status", name="Status"),
    ]
)


@pytest.fixture
def make_config() -> Callable[..., TokenListsConfig]:
    """Build a config over fresh in-memory stores, Ethereum mainnet only."""

    def _builder(**overrides: Any) -> TokenListsConfig:
        base: dict[str, Any] = {
            "main_list_id": "status",
            "main_list": ETH_SNT_MAIN_LIST,
            "chains": (1,),
            "auto_refresh_interval": timedelta(minutes=30),
            "auto_refresh_check_interval": timedelta(minutes=3),
            "privacy_guard": InMemoryPrivacyGuard(),
            "last_refresh_store": InMemoryLastRefreshTimeStore(),
            "content_store": InMemoryContentStore(),
            "custom_token_store": InMemoryCustomTokenStore(),
        }
        base.update(overrides)
        return TokenListsConfig(**base)

    return _builder


class MockRoutes:
    """URL -> handler table behind an ``httpx.MockTransport``; records every request."""

    def __init__(self) -> None:
        self.handlers: dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, url: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.handlers[url] = handler

    def json(self, url: str, body: bytes, etag: str = "", status_code: int = 200) -> None:
        headers = {"ETag": etag} if etag else {}
        self.add(url, lambda _request: httpx.Response(status_code, content=body, headers=headers))

    def calls_to(self, url: str) -> list[httpx.Request]:
        return [request for request in self.requests if str(request.url) == url]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.handlers.get(str(request.url))
        if handler is None:
            return httpx.Response(404, text="not found")
        return handler(request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def routes() -> MockRoutes:
    return MockRoutes()


@pytest.fixture
def temp_config_repository(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterable[ConfigRepository]:
    monkeypatch.setenv("TOKENLISTS_HOME", str(tmp_path))
    locator = ConfigLocator(project_root=tmp_path)
    repository = ConfigRepository(locator)
    yield repository


@pytest.fixture
def payloads() -> SimpleNamespace:
    """Payload builders and well-known addresses for token list tests."""

    return SimpleNamespace(
        status_list=status_list_json,
        standard_list=standard_list_json,
        status_token=status_token,
        standard_token=standard_token,
        eth_snt_main_list=ETH_SNT_MAIN_LIST,
        eth_zero=ETH_ZERO,
        snt=SNT_MAINNET,
        usdc=USDC_MAINNET,
        dai=DAI_MAINNET,
    )
