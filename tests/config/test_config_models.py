from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from tokenlists.config import TokenListsSettings, default_config, default_parsers, load_bundled_main_list
from tokenlists.engine.parsers import CoinGeckoAllTokensParser, StandardTokenListParser, StatusTokenListParser
from tokenlists.engine.validate import validate_config
from tokenlists.engine.merge import SnapshotBuilder


def test_default_parsers_cover_well_known_ids() -> None:
    parsers = default_parsers()

    assert isinstance(parsers["status"], StatusTokenListParser)
    assert isinstance(parsers["uniswap"], StandardTokenListParser)
    assert isinstance(parsers["coingeckoAllTokens"], CoinGeckoAllTokensParser)
    for list_id in ("coingeckoEthereum", "coingeckoOptimism", "coingeckoArbitrum", "coingeckoBsc", "coingeckoBase"):
        assert isinstance(parsers[list_id], StandardTokenListParser)


def test_config_mappings_are_read_only(make_config) -> None:
    config = make_config(initial_lists={"uniswap": b"{}"})

    with pytest.raises(TypeError):
        config.initial_lists["other"] = b"{}"  # type: ignore[index]
    with pytest.raises(ValidationError):
        config.main_list_id = "other"  # type: ignore[misc]


def test_configured_parsers_extend_defaults(make_config) -> None:
    custom = StandardTokenListParser()
    config = make_config(parsers={"my-list": custom})

    assert config.parser_for("my-list") is custom
    assert isinstance(config.parser_for("status"), StatusTokenListParser)
    assert config.parser_for("nope") is None


def test_coingecko_parser_uses_configured_mapper(make_config) -> None:
    config = make_config(coingecko_chains_mapper={"polygon-pos": 137})

    assert config.parser_for("coingeckoAllTokens").chains_mapper == {"polygon-pos": 137}


def test_default_config_is_valid_and_uses_bundled_list() -> None:
    config = default_config()

    validate_config(config)
    assert config.main_list == load_bundled_main_list()
    assert config.auto_refresh_interval == timedelta(minutes=30)
    assert config.auto_refresh_check_interval == timedelta(minutes=3)

    state = SnapshotBuilder(config).build()
    usdc_cross_chain = {token.chain_id for token in state.tokens.values() if token.cross_chain_id == "usd-coin"}
    assert {1, 10, 8453, 42161} <= usdc_cross_chain


def test_settings_defaults_and_interval_check(tmp_path: Path) -> None:
    settings = TokenListsSettings()
    assert settings.cache_path == Path("data/cache/tokenlists.db")
    assert settings.resolved_cache_path(tmp_path) == (tmp_path / "data/cache/tokenlists.db").resolve()

    with pytest.raises(ValidationError):
        TokenListsSettings(auto_refresh_interval=60, auto_refresh_check_interval=120)


def test_settings_coerce_initial_list_paths() -> None:
    settings = TokenListsSettings(initial_lists={"uniswap": "lists/uniswap.json"}, main_list_path="")

    assert settings.initial_lists == {"uniswap": Path("lists/uniswap.json")}
    assert settings.main_list_path is None
