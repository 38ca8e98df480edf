"""Parser for the Uniswap-style standard token list format."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from ...types import Token, TokenList, parse_address
from .base import Parser, TokenListEnvelope, decode, envelope_fields


class StandardTokenEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chain_id: int = Field(default=0, alias="chainId")
    address: str | None = None
    name: str = ""
    symbol: str = ""
    decimals: int = Field(default=0, ge=0)
    logo_uri: str = Field(default="", alias="logoURI")


class StandardTokenListModel(TokenListEnvelope):
    tokens: list[StandardTokenEntry] = Field(default_factory=list)


class StandardTokenListParser(Parser):
    """One token per ``tokens`` entry."""

    def parse(
        self,
        raw: bytes,
        source_url: str,
        fetched_at: datetime | None,
        supported_chains: Iterable[int],
    ) -> TokenList:
        payload = decode(StandardTokenListModel.model_validate_json, raw)
        chains = set(supported_chains)
        tokens: list[Token] = []
        for entry in payload.tokens:
            address = parse_address(entry.address or "")
            if address is None or entry.chain_id not in chains:
                continue
            tokens.append(
                Token(
                    chain_id=entry.chain_id,
                    address=address,
                    name=entry.name,
                    symbol=entry.symbol,
                    decimals=entry.decimals,
                    logo_uri=entry.logo_uri,
                )
            )
        return TokenList(tokens=tuple(tokens), **envelope_fields(payload, source_url, fetched_at))


__all__ = ["StandardTokenListModel", "StandardTokenListParser"]
