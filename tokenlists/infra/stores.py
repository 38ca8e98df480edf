"""Store contracts consumed by the engine plus thread-safe in-memory defaults."""

from __future__ import annotations

from datetime import datetime
from threading import Lock
from typing import Iterable, Protocol, runtime_checkable

from ..errors import ContentNotFoundError
from ..types import Content, Token


@runtime_checkable
class PrivacyGuard(Protocol):
    def is_privacy_on(self) -> bool: ...


@runtime_checkable
class LastRefreshTimeStore(Protocol):
    def get(self) -> datetime | None: ...

    def set(self, value: datetime) -> None: ...


@runtime_checkable
class ContentStore(Protocol):
    def get_etag(self, list_id: str) -> str: ...

    def get(self, list_id: str) -> Content: ...

    def set(self, list_id: str, content: Content) -> None: ...

    def get_all(self) -> dict[str, Content]: ...


@runtime_checkable
class CustomTokenStore(Protocol):
    def get_all(self) -> list[Token]: ...


class InMemoryPrivacyGuard:
    """Privacy flag held in memory; ``set_privacy_mode`` flips it at runtime."""

    def __init__(self, privacy_on: bool = False) -> None:
        self._privacy_on = privacy_on

    def is_privacy_on(self) -> bool:
        return self._privacy_on

    def set_privacy_mode(self, privacy_on: bool) -> None:
        self._privacy_on = privacy_on


class InMemoryLastRefreshTimeStore:
    def __init__(self, value: datetime | None = None) -> None:
        self._value = value
        self._lock = Lock()

    def get(self) -> datetime | None:
        with self._lock:
            return self._value

    def set(self, value: datetime) -> None:
        with self._lock:
            self._value = value


class InMemoryContentStore:
    def __init__(self) -> None:
        self._content: dict[str, Content] = {}
        self._lock = Lock()

    def get_etag(self, list_id: str) -> str:
        return self.get(list_id).etag

    def get(self, list_id: str) -> Content:
        with self._lock:
            try:
                return self._content[list_id]
            except KeyError:
                raise ContentNotFoundError(list_id) from None

    def set(self, list_id: str, content: Content) -> None:
        with self._lock:
            self._content[list_id] = content

    def get_all(self) -> dict[str, Content]:
        with self._lock:
            return dict(self._content)


class InMemoryCustomTokenStore:
    def __init__(self, tokens: Iterable[Token] | None = None) -> None:
        self._tokens: list[Token] = list(tokens or [])
        self._lock = Lock()

    def add(self, token: Token) -> None:
        with self._lock:
            self._tokens.append(token)

    def get_all(self) -> list[Token]:
        with self._lock:
            return list(self._tokens)


__all__ = [
    "ContentStore",
    "CustomTokenStore",
    "InMemoryContentStore",
    "InMemoryCustomTokenStore",
    "InMemoryLastRefreshTimeStore",
    "InMemoryPrivacyGuard",
    "LastRefreshTimeStore",
    "PrivacyGuard",
]
