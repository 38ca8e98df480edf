"""Aggregate token lists into one deduplicated, queryable snapshot."""

from .config import TokenListsConfig, default_config
from .manager import TokensList
from .types import Token, TokenList, Version

__all__ = [
    "Token",
    "TokenList",
    "TokenListsConfig",
    "TokensList",
    "Version",
    "default_config",
]
