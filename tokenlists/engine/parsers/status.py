"""Parser for Status token lists, where one entry carries per-chain contracts."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from ...types import Token, TokenList, parse_address
from .base import Parser, TokenListEnvelope, decode, envelope_fields


class StatusTokenEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cross_chain_id: str = Field(default="", alias="crossChainId")
    symbol: str = ""
    name: str = ""
    decimals: int = Field(default=0, ge=0)
    logo_uri: str = Field(default="", alias="logoURI")
    contracts: dict[int, str | None] = Field(default_factory=dict)


class StatusTokenListModel(TokenListEnvelope):
    tokens: list[StatusTokenEntry] = Field(default_factory=list)


class StatusTokenListParser(Parser):
    """Fan each entry out into one token per ``contracts`` chain."""

    def parse(
        self,
        raw: bytes,
        source_url: str,
        fetched_at: datetime | None,
        supported_chains: Iterable[int],
    ) -> TokenList:
        payload = decode(StatusTokenListModel.model_validate_json, raw)
        chains = set(supported_chains)
        tokens: list[Token] = []
        for entry in payload.tokens:
            for chain_id, raw_address in entry.contracts.items():
                address = parse_address(raw_address or "")
                if address is None or chain_id not in chains:
                    continue
                tokens.append(
                    Token(
                        cross_chain_id=entry.cross_chain_id,
                        chain_id=chain_id,
                        address=address,
                        name=entry.name,
                        symbol=entry.symbol,
                        decimals=entry.decimals,
                        logo_uri=entry.logo_uri,
                    )
                )
        return TokenList(tokens=tuple(tokens), **envelope_fields(payload, source_url, fetched_at))


__all__ = ["StatusTokenListModel", "StatusTokenListParser"]
