"""Config, token and JSON-schema validation."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Iterable

from jsonschema import FormatChecker
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from ..constants import ALLOWED_LOGO_URI_PREFIXES, MAX_TOKEN_DECIMALS
from ..errors import (
    AutoRefreshCheckIntervalError,
    ChainNotAllowedError,
    ChainsNotProvidedError,
    ContentStoreNotProvidedError,
    DecimalsExceedMaximumError,
    EmptySymbolError,
    InitialListParserNotFoundError,
    InvalidAddressLengthError,
    InvalidLogoURIError,
    LastRefreshTimeStoreNotProvidedError,
    MainListIDNotProvidedError,
    MainListIDUsedAsInitialListError,
    MainListNotProvidedError,
    MainListParserNotFoundError,
    PrivacyGuardNotProvidedError,
    SchemaValidationError,
    TokenNotProvidedError,
)
from ..types import ADDRESS_LENGTH, Token

if TYPE_CHECKING:
    from ..config.models import TokenListsConfig


def validate_config(config: "TokenListsConfig") -> None:
    """Raise the first :class:`ConfigError` found in ``config``."""

    if config.main_list is None:
        raise MainListNotProvidedError()
    if not config.main_list_id:
        raise MainListIDNotProvidedError()
    if config.parser_for(config.main_list_id) is None:
        raise MainListParserNotFoundError(config.main_list_id)
    for list_id in config.initial_lists:
        if list_id == config.main_list_id:
            raise MainListIDUsedAsInitialListError(list_id)
        if config.parser_for(list_id) is None:
            raise InitialListParserNotFoundError(list_id)
    if not config.chains:
        raise ChainsNotProvidedError()
    if config.auto_refresh_check_interval > config.auto_refresh_interval:
        raise AutoRefreshCheckIntervalError()
    if config.privacy_guard is None:
        raise PrivacyGuardNotProvidedError()
    if config.last_refresh_store is None:
        raise LastRefreshTimeStoreNotProvidedError()
    if config.content_store is None:
        raise ContentStoreNotProvidedError()


def validate_token(token: Token | None, allowed_chains: Iterable[int]) -> None:
    if token is None:
        raise TokenNotProvidedError()
    if token.chain_id not in set(allowed_chains):
        raise ChainNotAllowedError(token.chain_id)
    if len(token.address) != ADDRESS_LENGTH:
        raise InvalidAddressLengthError(len(token.address))
    if not token.symbol:
        raise EmptySymbolError()
    if token.decimals > MAX_TOKEN_DECIMALS:
        raise DecimalsExceedMaximumError(token.decimals)
    if token.logo_uri and not token.logo_uri.startswith(ALLOWED_LOGO_URI_PREFIXES):
        raise InvalidLogoURIError(token.logo_uri)


def validate_json_against_schema(raw: bytes, schema: dict[str, Any]) -> Any:
    """Decode ``raw`` and check it against ``schema``; return the decoded document.

    The validator class follows the schema's ``$schema`` draft, with format
    checking enabled.
    """

    try:
        document = json.loads(raw)
    except ValueError as exc:
        raise SchemaValidationError(f"invalid JSON document: {exc}") from exc

    try:
        validator_cls = validator_for(schema)
        validator_cls.check_schema(schema)
    except SchemaError as exc:
        raise SchemaValidationError(f"invalid schema: {exc.message}") from exc

    validator = validator_cls(schema, format_checker=FormatChecker())
    errors = sorted(validator.iter_errors(document), key=lambda err: list(err.path))
    if errors:
        messages = "; ".join(
            f"{'/'.join(str(part) for part in err.path) or '<root>'}: {err.message}" for err in errors
        )
        raise SchemaValidationError(f"document does not match schema: {messages}")
    return document


__all__ = ["validate_config", "validate_json_against_schema", "validate_token"]
