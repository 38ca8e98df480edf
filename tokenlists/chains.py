"""Chain identifiers and chain-family helpers."""

from __future__ import annotations

ETHEREUM_MAINNET = 1
ETHEREUM_SEPOLIA = 11155111
OPTIMISM_MAINNET = 10
OPTIMISM_SEPOLIA = 11155420
ARBITRUM_MAINNET = 42161
ARBITRUM_SEPOLIA = 421614
BSC_MAINNET = 56
BSC_TESTNET = 97
BASE_MAINNET = 8453
BASE_SEPOLIA = 84532
STATUS_NETWORK_SEPOLIA = 1660990954

ALL_CHAINS: tuple[int, ...] = (
    ETHEREUM_MAINNET,
    ETHEREUM_SEPOLIA,
    OPTIMISM_MAINNET,
    OPTIMISM_SEPOLIA,
    ARBITRUM_MAINNET,
    ARBITRUM_SEPOLIA,
    BSC_MAINNET,
    BSC_TESTNET,
    BASE_MAINNET,
    BASE_SEPOLIA,
    STATUS_NETWORK_SEPOLIA,
)

BSC_CHAINS = frozenset({BSC_MAINNET, BSC_TESTNET})

# CoinGecko platform name -> chain ID
DEFAULT_COINGECKO_CHAINS_MAPPER: dict[str, int] = {
    "ethereum": ETHEREUM_MAINNET,
    "optimistic-ethereum": OPTIMISM_MAINNET,
    "arbitrum-one": ARBITRUM_MAINNET,
    "binance-smart-chain": BSC_MAINNET,
    "base": BASE_MAINNET,
}


def is_bsc_family(chain_id: int) -> bool:
    return chain_id in BSC_CHAINS


__all__ = [
    "ALL_CHAINS",
    "ARBITRUM_MAINNET",
    "ARBITRUM_SEPOLIA",
    "BASE_MAINNET",
    "BASE_SEPOLIA",
    "BSC_CHAINS",
    "BSC_MAINNET",
    "BSC_TESTNET",
    "DEFAULT_COINGECKO_CHAINS_MAPPER",
    "ETHEREUM_MAINNET",
    "ETHEREUM_SEPOLIA",
    "OPTIMISM_MAINNET",
    "OPTIMISM_SEPOLIA",
    "STATUS_NETWORK_SEPOLIA",
    "is_bsc_family",
]
