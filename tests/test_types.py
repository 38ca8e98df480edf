from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from tokenlists.types import (
    ZERO_ADDRESS,
    Content,
    FetchedTokenList,
    Token,
    chain_and_address_from_token_key,
    format_rfc3339,
    parse_address,
    token_key,
)

DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"


def test_token_key_is_lowercase_and_reversible() -> None:
    address = parse_address(DAI)
    key = token_key(1, address)

    assert key == "1-0x6b175474e89094c44da98b954eedeac495271d0f"
    assert chain_and_address_from_token_key(key) == (1, address)


@pytest.mark.parametrize("key", ["", "1", "1-2-3", "x-0x6b175474e89094c44da98b954eedeac495271d0f", "1-0x1234"])
def test_malformed_token_keys(key: str) -> None:
    assert chain_and_address_from_token_key(key) is None


@pytest.mark.parametrize(
    ("chain_id", "symbol", "expected"),
    [(1, "ETH", True), (1, "eth", True), (56, "BNB", True), (97, "bnb", True), (56, "ETH", False), (10, "BNB", False)],
)
def test_is_native(chain_id: int, symbol: str, expected: bool) -> None:
    assert Token(chain_id=chain_id, address=ZERO_ADDRESS, symbol=symbol).is_native() is expected


def test_non_zero_address_is_never_native() -> None:
    assert not Token(chain_id=1, address=parse_address(DAI), symbol="ETH").is_native()


def test_checksum_address() -> None:
    assert Token(chain_id=1, address=parse_address(DAI.lower())).checksum_address == DAI


def test_format_rfc3339_normalises_to_utc() -> None:
    plus_two = timezone(timedelta(hours=2))
    assert format_rfc3339(datetime(2025, 1, 1, 12, 0, 0, 500, tzinfo=plus_two)) == "2025-01-01T10:00:00Z"
    assert format_rfc3339(datetime(2025, 1, 1, 12, 0, 0)) == "2025-01-01T12:00:00Z"


def test_fetched_token_list_to_content() -> None:
    fetched = datetime(2025, 1, 1, tzinfo=timezone.utc)
    record = FetchedTokenList(id="status", source_url="https://x", schema="", etag="e", fetched=fetched, data=b"{}")

    assert record.to_content() == Content(source_url="https://x", etag="e", data=b"{}", fetched=fetched)
