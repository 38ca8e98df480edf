"""Core value types shared by the parsers, merge engine and facade."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping

from eth_utils import is_hex_address, to_canonical_address, to_checksum_address

from .chains import is_bsc_family
from .constants import BSC_NATIVE_SYMBOL, ETHEREUM_NATIVE_SYMBOL

TOKEN_KEY_SEPARATOR = "-"
ADDRESS_LENGTH = 20
ZERO_ADDRESS = bytes(ADDRESS_LENGTH)


def parse_address(value: str) -> bytes | None:
    """Return the 20-byte form of a hex address, or ``None`` when it is not one."""

    if not isinstance(value, str) or not is_hex_address(value):
        return None
    return to_canonical_address(value)


def address_hex(address: bytes) -> str:
    return "0x" + address.hex()


def token_key(chain_id: int, address: bytes) -> str:
    """Build the snapshot key ``"<chainID>-<lowercase 0x address>"``."""

    return f"{chain_id}{TOKEN_KEY_SEPARATOR}{address_hex(address).lower()}"


def chain_and_address_from_token_key(key: str) -> tuple[int, bytes] | None:
    """Inverse of :func:`token_key`; ``None`` when the key is malformed."""

    parts = key.split(TOKEN_KEY_SEPARATOR)
    if len(parts) != 2:
        return None
    chain_part, address_part = parts
    if not chain_part.isdigit():
        return None
    address = parse_address(address_part)
    if address is None:
        return None
    return int(chain_part), address


def format_rfc3339(value: datetime) -> str:
    """Render a datetime as RFC 3339 in UTC with second precision."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True, slots=True)
class Token:
    """A token on one chain; ``cross_chain_id`` groups the same asset across chains."""

    chain_id: int
    address: bytes
    decimals: int = 0
    name: str = ""
    symbol: str = ""
    logo_uri: str = ""
    cross_chain_id: str = ""
    custom_token: bool = False

    @property
    def key(self) -> str:
        return token_key(self.chain_id, self.address)

    @property
    def checksum_address(self) -> str:
        return to_checksum_address(address_hex(self.address))

    def is_native(self) -> bool:
        if self.address != ZERO_ADDRESS:
            return False
        native_symbol = BSC_NATIVE_SYMBOL if is_bsc_family(self.chain_id) else ETHEREUM_NATIVE_SYMBOL
        return self.symbol.casefold() == native_symbol.casefold()


@dataclass(frozen=True, slots=True)
class Version:
    major: int = 0
    minor: int = 0
    patch: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True, slots=True)
class TokenList:
    """A normalised token list as produced by a parser."""

    name: str = ""
    timestamp: str = ""
    fetched_timestamp: str = ""
    source: str = ""
    version: Version = field(default_factory=Version)
    tags: Mapping[str, Any] = field(default_factory=dict)
    logo_uri: str = ""
    keywords: tuple[str, ...] = ()
    tokens: tuple[Token, ...] = ()


@dataclass(frozen=True, slots=True)
class Content:
    """Cached fetch artifact stored per list ID."""

    source_url: str = ""
    etag: str = ""
    data: bytes = b""
    fetched: datetime | None = None


@dataclass(frozen=True, slots=True)
class FetchedTokenList:
    """A successfully downloaded list waiting to be persisted."""

    id: str
    source_url: str
    schema: str
    etag: str
    fetched: datetime
    data: bytes

    def to_content(self) -> Content:
        return Content(source_url=self.source_url, etag=self.etag, data=self.data, fetched=self.fetched)


@dataclass(frozen=True, slots=True)
class State:
    """Immutable snapshot published by the merge engine."""

    tokens: Mapping[str, Token] = field(default_factory=lambda: MappingProxyType({}))
    token_lists: Mapping[str, TokenList] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def freeze(cls, tokens: dict[str, Token], token_lists: dict[str, TokenList]) -> "State":
        return cls(tokens=MappingProxyType(dict(tokens)), token_lists=MappingProxyType(dict(token_lists)))


__all__ = [
    "ADDRESS_LENGTH",
    "Content",
    "FetchedTokenList",
    "State",
    "Token",
    "TokenList",
    "Version",
    "ZERO_ADDRESS",
    "address_hex",
    "chain_and_address_from_token_key",
    "format_rfc3339",
    "parse_address",
    "token_key",
]
