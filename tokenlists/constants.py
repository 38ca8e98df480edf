"""Well-known list identifiers, native token metadata and the manifest schema."""

from __future__ import annotations

from typing import Any

ETHEREUM_NATIVE_CROSS_CHAIN_ID = "eth-native"
ETHEREUM_NATIVE_SYMBOL = "ETH"
ETHEREUM_NATIVE_NAME = "Ethereum"
ETHEREUM_NATIVE_LOGO_URI = (
    "https://raw.githubusercontent.com/trustwallet/assets/master/blockchains/ethereum/"
    "assets/0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2/logo.png"
)

BSC_NATIVE_CROSS_CHAIN_ID = "bsc-native"
BSC_NATIVE_SYMBOL = "BNB"
BSC_NATIVE_NAME = "BNB"
BSC_NATIVE_LOGO_URI = "https://assets.coingecko.com/coins/images/825/thumb/bnb-icon2_2x.png?1696501970"

NATIVE_TOKEN_DECIMALS = 18
MAX_TOKEN_DECIMALS = 18

# Reserved content-store ID under which the manifest is cached.
MANIFEST_LIST_ID = "status-list-of-token-lists"

NATIVE_TOKEN_LIST_ID = "native"
STATUS_LIST_ID = "status"
UNISWAP_LIST_ID = "uniswap"
COINGECKO_ALL_TOKENS_LIST_ID = "coingeckoAllTokens"
COINGECKO_ETHEREUM_LIST_ID = "coingeckoEthereum"
COINGECKO_OPTIMISM_LIST_ID = "coingeckoOptimism"
COINGECKO_ARBITRUM_LIST_ID = "coingeckoArbitrum"
COINGECKO_BSC_LIST_ID = "coingeckoBsc"
COINGECKO_BASE_LIST_ID = "coingeckoBase"
CUSTOM_TOKEN_LIST_ID = "custom"

NATIVE_TOKEN_LIST_NAME = "Native tokens"
CUSTOM_TOKEN_LIST_NAME = "Custom tokens"

LOCAL_SOURCE_URL = "local"

ALLOWED_LOGO_URI_PREFIXES = ("data:", "ipfs://", "http://", "https://")

MANIFEST_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-04/schema#",
    "type": "object",
    "properties": {
        "timestamp": {
            "type": "string",
            "description": "The timestamp of this list version",
            "format": "date-time",
        },
        "version": {
            "type": "object",
            "description": "The version of the list, used in change detection",
            "properties": {
                "major": {"type": "integer"},
                "minor": {"type": "integer"},
                "patch": {"type": "integer"},
            },
            "required": ["major", "minor", "patch"],
            "additionalProperties": False,
        },
        "tokenLists": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "id": {
                        "type": "string",
                        "description": "A unique identifier for the token list source.",
                    },
                    "sourceUrl": {
                        "type": "string",
                        "format": "uri",
                        "description": "URL pointing to the token list source.",
                    },
                    "schema": {
                        "type": "string",
                        "format": "uri",
                        "description": "Optional URL pointing to the schema definition of the token list.",
                    },
                },
                "required": ["id", "sourceUrl"],
                "additionalProperties": False,
            },
        },
    },
}
