"""Parser Service Provider Interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Iterable, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...errors import TokenListParseError
from ...types import TokenList, Version, format_rfc3339

T = TypeVar("T")


class VersionModel(BaseModel):
    major: int = 0
    minor: int = 0
    patch: int = 0

    def to_version(self) -> Version:
        return Version(major=self.major, minor=self.minor, patch=self.patch)


class TokenListEnvelope(BaseModel):
    """Fields shared by the Standard and Status list formats."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    timestamp: str = ""
    version: VersionModel = Field(default_factory=VersionModel)
    tags: dict[str, Any] | None = None
    logo_uri: str = Field(default="", alias="logoURI")
    keywords: list[str] | None = None


class Parser(ABC):
    """Uniform parser contract turning raw list bytes into a :class:`TokenList`."""

    @abstractmethod
    def parse(
        self,
        raw: bytes,
        source_url: str,
        fetched_at: datetime | None,
        supported_chains: Iterable[int],
    ) -> TokenList:
        """Parse ``raw``; tokens on unsupported chains or with bad addresses are dropped."""


def decode(loader: Callable[[bytes], T], raw: bytes) -> T:
    """Run a pydantic loader, mapping validation failures to :class:`TokenListParseError`."""

    try:
        return loader(raw)
    except ValidationError as exc:
        raise TokenListParseError(str(exc)) from exc


def fetched_timestamp(fetched_at: datetime | None, fallback: str) -> str:
    # Lists that were never fetched (bundled data) report their own timestamp.
    if fetched_at is None:
        return fallback
    return format_rfc3339(fetched_at)


def envelope_fields(envelope: TokenListEnvelope, source_url: str, fetched_at: datetime | None) -> dict[str, Any]:
    return {
        "name": envelope.name,
        "timestamp": envelope.timestamp,
        "fetched_timestamp": fetched_timestamp(fetched_at, envelope.timestamp),
        "source": source_url,
        "version": envelope.version.to_version(),
        "tags": dict(envelope.tags or {}),
        "logo_uri": envelope.logo_uri,
        "keywords": tuple(envelope.keywords or ()),
    }


__all__ = [
    "Parser",
    "TokenListEnvelope",
    "VersionModel",
    "decode",
    "envelope_fields",
    "fetched_timestamp",
]
