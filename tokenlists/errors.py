"""Exception hierarchy for the token list engine."""

from __future__ import annotations


class TokenListsError(Exception):
    """Base class for every error raised by this package."""


# ----------------------------------------------------------------------
# Configuration errors (construction time only)
# ----------------------------------------------------------------------
class ConfigError(TokenListsError, ValueError):
    """Invalid engine configuration."""


class MainListNotProvidedError(ConfigError):
    def __init__(self) -> None:
        super().__init__("main list not provided")


class MainListIDNotProvidedError(ConfigError):
    def __init__(self) -> None:
        super().__init__("main list ID not provided")


class MainListParserNotFoundError(ConfigError):
    def __init__(self, list_id: str) -> None:
        super().__init__(f"main list parser not found for list ID {list_id!r}")
        self.list_id = list_id


class MainListIDUsedAsInitialListError(ConfigError):
    def __init__(self, list_id: str) -> None:
        super().__init__(f"main list ID {list_id!r} cannot be used as an initial list ID")
        self.list_id = list_id


class InitialListParserNotFoundError(ConfigError):
    def __init__(self, list_id: str) -> None:
        super().__init__(f"initial list parser not found for list ID {list_id!r}")
        self.list_id = list_id


class ChainsNotProvidedError(ConfigError):
    def __init__(self) -> None:
        super().__init__("chains not provided")


class AutoRefreshCheckIntervalError(ConfigError):
    def __init__(self) -> None:
        super().__init__("check interval must be <= refresh interval")


class PrivacyGuardNotProvidedError(ConfigError):
    def __init__(self) -> None:
        super().__init__("privacy guard not provided")


class LastRefreshTimeStoreNotProvidedError(ConfigError):
    def __init__(self) -> None:
        super().__init__("last refresh time store not provided")


class ContentStoreNotProvidedError(ConfigError):
    def __init__(self) -> None:
        super().__init__("content store not provided")


# ----------------------------------------------------------------------
# Transient fetch / parse errors
# ----------------------------------------------------------------------
class FetchError(TokenListsError):
    """HTTP fetch failed; ``status_code`` is set when the server answered."""

    def __init__(self, message: str, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class FetchCancelledError(FetchError):
    def __init__(self, url: str) -> None:
        super().__init__(f"request cancelled: {url}", url)


class TokenListParseError(TokenListsError):
    """Raw token list bytes could not be decoded."""


class SchemaValidationError(TokenListsError):
    """JSON document does not match its schema."""


# ----------------------------------------------------------------------
# Per-token validation errors
# ----------------------------------------------------------------------
class TokenValidationError(TokenListsError):
    """A single token failed validation."""


class TokenNotProvidedError(TokenValidationError):
    def __init__(self) -> None:
        super().__init__("token not provided")


class ChainNotAllowedError(TokenValidationError):
    def __init__(self, chain_id: int) -> None:
        super().__init__(f"chain not allowed: {chain_id}")
        self.chain_id = chain_id


class InvalidAddressLengthError(TokenValidationError):
    def __init__(self, length: int) -> None:
        super().__init__(f"invalid address length: {length}")
        self.length = length


class EmptySymbolError(TokenValidationError):
    def __init__(self) -> None:
        super().__init__("symbol cannot be empty")


class DecimalsExceedMaximumError(TokenValidationError):
    def __init__(self, decimals: int) -> None:
        super().__init__(f"decimals exceeds maximum: {decimals}")
        self.decimals = decimals


class InvalidLogoURIError(TokenValidationError):
    def __init__(self, logo_uri: str) -> None:
        super().__init__(f"invalid logo URI: {logo_uri}")
        self.logo_uri = logo_uri


# ----------------------------------------------------------------------
# Store / lifecycle errors
# ----------------------------------------------------------------------
class ContentNotFoundError(TokenListsError, KeyError):
    def __init__(self, list_id: str) -> None:
        super().__init__(f"content not found: {list_id}")
        self.list_id = list_id

    def __str__(self) -> str:
        return str(self.args[0])


class LifecycleError(TokenListsError):
    """Lifecycle method called in the wrong state."""


__all__ = [
    "AutoRefreshCheckIntervalError",
    "ChainNotAllowedError",
    "ChainsNotProvidedError",
    "ConfigError",
    "ContentNotFoundError",
    "ContentStoreNotProvidedError",
    "DecimalsExceedMaximumError",
    "EmptySymbolError",
    "FetchCancelledError",
    "FetchError",
    "InitialListParserNotFoundError",
    "InvalidAddressLengthError",
    "InvalidLogoURIError",
    "LastRefreshTimeStoreNotProvidedError",
    "LifecycleError",
    "MainListIDNotProvidedError",
    "MainListIDUsedAsInitialListError",
    "MainListNotProvidedError",
    "MainListParserNotFoundError",
    "PrivacyGuardNotProvidedError",
    "SchemaValidationError",
    "TokenListParseError",
    "TokenListsError",
    "TokenNotProvidedError",
    "TokenValidationError",
]
