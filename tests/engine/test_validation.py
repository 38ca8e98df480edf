from __future__ import annotations

from datetime import timedelta

import pytest

from tokenlists.engine.validate import validate_config, validate_json_against_schema, validate_token
from tokenlists.errors import (
    AutoRefreshCheckIntervalError,
    ChainNotAllowedError,
    ChainsNotProvidedError,
    ConfigError,
    ContentStoreNotProvidedError,
    DecimalsExceedMaximumError,
    EmptySymbolError,
    InitialListParserNotFoundError,
    InvalidAddressLengthError,
    InvalidLogoURIError,
    LastRefreshTimeStoreNotProvidedError,
    MainListIDNotProvidedError,
    MainListIDUsedAsInitialListError,
    MainListNotProvidedError,
    MainListParserNotFoundError,
    PrivacyGuardNotProvidedError,
    SchemaValidationError,
    TokenNotProvidedError,
)
from tokenlists.types import Token

VALID_ADDRESS = bytes.fromhex("ab" * 20)


def make_token(**overrides) -> Token:
    base = {"chain_id": 1, "address": VALID_ADDRESS, "symbol": "TKN", "decimals": 18}
    base.update(overrides)
    return Token(**base)


def test_valid_config_passes(make_config) -> None:
    validate_config(make_config())


@pytest.mark.parametrize(
    ("overrides", "error"),
    [
        ({"main_list": None}, MainListNotProvidedError),
        ({"main_list_id": ""}, MainListIDNotProvidedError),
        ({"main_list_id": "no-such-list"}, MainListParserNotFoundError),
        ({"initial_lists": {"status": b"{}"}}, MainListIDUsedAsInitialListError),
        ({"initial_lists": {"mystery": b"{}"}}, InitialListParserNotFoundError),
        ({"chains": ()}, ChainsNotProvidedError),
        (
            {"auto_refresh_interval": timedelta(minutes=1), "auto_refresh_check_interval": timedelta(minutes=2)},
            AutoRefreshCheckIntervalError,
        ),
        ({"privacy_guard": None}, PrivacyGuardNotProvidedError),
        ({"last_refresh_store": None}, LastRefreshTimeStoreNotProvidedError),
        ({"content_store": None}, ContentStoreNotProvidedError),
    ],
)
def test_invalid_config_raises_specific_error(make_config, overrides, error) -> None:
    with pytest.raises(error) as excinfo:
        validate_config(make_config(**overrides))

    assert isinstance(excinfo.value, ConfigError)
    assert isinstance(excinfo.value, ValueError)


def test_custom_parser_registers_extra_list(make_config) -> None:
    from tokenlists.engine.parsers import StandardTokenListParser

    validate_config(make_config(initial_lists={"mystery": b"{}"}, parsers={"mystery": StandardTokenListParser()}))


def test_decimals_boundary() -> None:
    validate_token(make_token(decimals=18), [1])
    with pytest.raises(DecimalsExceedMaximumError):
        validate_token(make_token(decimals=19), [1])


@pytest.mark.parametrize("logo_uri", ["", "data:image/png;base64,AAAA", "ipfs://Qm123", "http://x.org/a.png", "https://x.org/a.png"])
def test_allowed_logo_uris(logo_uri: str) -> None:
    validate_token(make_token(logo_uri=logo_uri), [1])


@pytest.mark.parametrize("logo_uri", ["ftp://x.org/a.png", "x.org/a.png", "javascript:alert(1)"])
def test_rejected_logo_uris(logo_uri: str) -> None:
    with pytest.raises(InvalidLogoURIError):
        validate_token(make_token(logo_uri=logo_uri), [1])


def test_token_rules() -> None:
    with pytest.raises(TokenNotProvidedError):
        validate_token(None, [1])
    with pytest.raises(ChainNotAllowedError):
        validate_token(make_token(chain_id=10), [1])
    with pytest.raises(InvalidAddressLengthError):
        validate_token(make_token(address=b"\x01" * 19), [1])
    with pytest.raises(EmptySymbolError):
        validate_token(make_token(symbol=""), [1])


def test_json_schema_validation() -> None:
    schema = {"$schema": "http://json-schema.org/draft-07/schema#", "type": "object", "required": ["tokens"]}

    assert validate_json_against_schema(b'{"tokens": []}', schema) == {"tokens": []}
    with pytest.raises(SchemaValidationError):
        validate_json_against_schema(b'{"name": "x"}', schema)
    with pytest.raises(SchemaValidationError):
        validate_json_against_schema(b"not json", schema)
