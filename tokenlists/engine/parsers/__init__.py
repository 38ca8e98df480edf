"""Parser SPI and implementations."""

from .base import Parser
from .coingecko import CoinGeckoAllTokensParser
from .standard import StandardTokenListParser
from .status import StatusTokenListParser

__all__ = [
    "CoinGeckoAllTokensParser",
    "Parser",
    "StandardTokenListParser",
    "StatusTokenListParser",
]
