"""Parser for the CoinGecko ``coins/list?include_platform=true`` dump.

CoinGecko does not publish decimals or logos in this endpoint, so every token
it yields has ``decimals == 0`` and an empty logo URI.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Mapping

from pydantic import BaseModel, Field, TypeAdapter

from ...types import Token, TokenList, parse_address
from .base import Parser, decode, fetched_timestamp


class CoinGeckoToken(BaseModel):
    id: str = ""
    symbol: str = ""
    name: str = ""
    platforms: dict[str, str | None] = Field(default_factory=dict)


_COINGECKO_TOKENS = TypeAdapter(list[CoinGeckoToken])


class CoinGeckoAllTokensParser(Parser):
    """Fan each coin out through ``chains_mapper`` (platform name -> chain ID)."""

    def __init__(self, chains_mapper: Mapping[str, int]) -> None:
        self.chains_mapper = dict(chains_mapper)

    def parse(
        self,
        raw: bytes,
        source_url: str,
        fetched_at: datetime | None,
        supported_chains: Iterable[int],
    ) -> TokenList:
        coins = decode(_COINGECKO_TOKENS.validate_json, raw)
        chains = set(supported_chains)
        tokens: list[Token] = []
        for coin in coins:
            for platform, raw_address in coin.platforms.items():
                chain_id = self.chains_mapper.get(platform)
                if chain_id is None or chain_id not in chains or not raw_address:
                    continue
                address = parse_address(raw_address)
                if address is None:
                    continue
                tokens.append(
                    Token(
                        chain_id=chain_id,
                        address=address,
                        name=coin.name,
                        symbol=coin.symbol,
                    )
                )
        return TokenList(
            fetched_timestamp=fetched_timestamp(fetched_at, ""),
            source=source_url,
            tokens=tuple(tokens),
        )


__all__ = ["CoinGeckoAllTokensParser", "CoinGeckoToken"]
