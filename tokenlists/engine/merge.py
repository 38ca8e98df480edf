"""Merge the native, bundled, cached and custom tiers into one snapshot."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Callable

import structlog

from ..chains import is_bsc_family
from ..constants import (
    BSC_NATIVE_CROSS_CHAIN_ID,
    BSC_NATIVE_LOGO_URI,
    BSC_NATIVE_NAME,
    BSC_NATIVE_SYMBOL,
    CUSTOM_TOKEN_LIST_ID,
    CUSTOM_TOKEN_LIST_NAME,
    ETHEREUM_NATIVE_CROSS_CHAIN_ID,
    ETHEREUM_NATIVE_LOGO_URI,
    ETHEREUM_NATIVE_NAME,
    ETHEREUM_NATIVE_SYMBOL,
    LOCAL_SOURCE_URL,
    MANIFEST_LIST_ID,
    NATIVE_TOKEN_DECIMALS,
    NATIVE_TOKEN_LIST_ID,
    NATIVE_TOKEN_LIST_NAME,
)
from ..errors import ContentNotFoundError, TokenListsError, TokenValidationError
from ..types import ZERO_ADDRESS, State, Token, TokenList
from .validate import validate_token

if TYPE_CHECKING:
    from ..config.models import TokenListsConfig


def native_token(chain_id: int) -> Token:
    """The synthesized native token of ``chain_id`` (ETH, or BNB on the BSC family)."""

    if is_bsc_family(chain_id):
        return Token(
            cross_chain_id=BSC_NATIVE_CROSS_CHAIN_ID,
            chain_id=chain_id,
            address=ZERO_ADDRESS,
            symbol=BSC_NATIVE_SYMBOL,
            name=BSC_NATIVE_NAME,
            decimals=NATIVE_TOKEN_DECIMALS,
            logo_uri=BSC_NATIVE_LOGO_URI,
        )
    return Token(
        cross_chain_id=ETHEREUM_NATIVE_CROSS_CHAIN_ID,
        chain_id=chain_id,
        address=ZERO_ADDRESS,
        symbol=ETHEREUM_NATIVE_SYMBOL,
        name=ETHEREUM_NATIVE_NAME,
        decimals=NATIVE_TOKEN_DECIMALS,
        logo_uri=ETHEREUM_NATIVE_LOGO_URI,
    )


class _Draft:
    """Mutable state collected while the tiers are merged."""

    def __init__(self) -> None:
        self.tokens: dict[str, Token] = {}
        self.token_lists: dict[str, TokenList] = {}

    def add(self, list_id: str, token_list: TokenList) -> None:
        self.token_lists[list_id] = token_list
        for token in token_list.tokens:
            # Earlier tiers win.
            self.tokens.setdefault(token.key, token)


class SnapshotBuilder:
    """Build an immutable :class:`State` from the configured sources.

    Tiers are merged in a fixed order: native, main, initial, remote, custom.
    A token key is owned by the first tier that yields it. A failing tier is
    logged and skipped.
    """

    def __init__(self, config: "TokenListsConfig", logger: structlog.BoundLogger | None = None) -> None:
        self.config = config
        self.logger = logger or structlog.get_logger("tokenlists.merge")

    def build(self) -> State:
        draft = _Draft()
        tiers: list[tuple[str, Callable[[_Draft], None]]] = [
            ("native", self._merge_native),
            ("main", self._merge_main),
            ("initial", self._merge_initial),
            ("remote", self._merge_remote),
            ("custom", self._merge_custom),
        ]
        for tier, merge in tiers:
            try:
                merge(draft)
            except Exception as exc:  # noqa: BLE001
                self.logger.error("tier_merge_failed", tier=tier, error=str(exc))
        self.logger.debug("snapshot_built", tokens=len(draft.tokens), lists=len(draft.token_lists))
        return State.freeze(draft.tokens, draft.token_lists)

    def _merge_native(self, draft: _Draft) -> None:
        tokens = tuple(native_token(chain_id) for chain_id in self.config.chains)
        draft.add(NATIVE_TOKEN_LIST_ID, TokenList(name=NATIVE_TOKEN_LIST_NAME, tokens=tokens))

    def _merge_main(self, draft: _Draft) -> None:
        token_list = self._cached_or_bundled(self.config.main_list_id, self.config.main_list)
        if token_list is not None:
            draft.add(self.config.main_list_id, token_list)

    def _merge_initial(self, draft: _Draft) -> None:
        for list_id in sorted(self.config.initial_lists):
            if list_id == self.config.main_list_id:
                continue
            token_list = self._cached_or_bundled(list_id, self.config.initial_lists[list_id])
            if token_list is not None:
                draft.add(list_id, token_list)

    def _merge_remote(self, draft: _Draft) -> None:
        stored = self.config.content_store.get_all()
        skipped = {self.config.main_list_id, MANIFEST_LIST_ID, *self.config.initial_lists}
        for list_id in sorted(stored):
            if list_id in skipped:
                continue
            parser = self.config.parser_for(list_id)
            if parser is None:
                self.logger.warning("remote_list_parser_not_found", list_id=list_id)
                continue
            content = stored[list_id]
            try:
                token_list = parser.parse(
                    content.data, content.source_url, content.fetched, self.config.chains
                )
            except TokenListsError as exc:
                self.logger.error("remote_list_parse_failed", list_id=list_id, error=str(exc))
                continue
            draft.add(list_id, token_list)

    def _merge_custom(self, draft: _Draft) -> None:
        store = self.config.custom_token_store
        if store is None:
            return
        tokens: list[Token] = []
        for token in store.get_all():
            try:
                validate_token(token, self.config.chains)
            except TokenValidationError as exc:
                self.logger.warning(
                    "custom_token_invalid",
                    symbol=getattr(token, "symbol", ""),
                    error=str(exc),
                )
                continue
            tokens.append(dataclasses.replace(token, custom_token=True))
        draft.add(CUSTOM_TOKEN_LIST_ID, TokenList(name=CUSTOM_TOKEN_LIST_NAME, tokens=tuple(tokens)))

    def _cached_or_bundled(self, list_id: str, bundled: bytes | None) -> TokenList | None:
        parser = self.config.parser_for(list_id)
        if parser is None:
            self.logger.error("list_parser_not_found", list_id=list_id)
            return None

        log = self.logger.bind(list_id=list_id)
        try:
            content = self.config.content_store.get(list_id)
        except ContentNotFoundError:
            log.info("list_not_cached")
        except Exception as exc:  # noqa: BLE001
            log.error("list_cache_read_failed", error=str(exc))
        else:
            if content.data:
                try:
                    return parser.parse(content.data, content.source_url, content.fetched, self.config.chains)
                except TokenListsError as exc:
                    log.error("cached_list_parse_failed", error=str(exc))

        if bundled is None:
            return None
        try:
            return parser.parse(bundled, LOCAL_SOURCE_URL, None, self.config.chains)
        except TokenListsError as exc:
            log.error("bundled_list_parse_failed", error=str(exc))
            return None


__all__ = ["SnapshotBuilder", "native_token"]
