"""Settings file loading and assembly of the engine config."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

import yaml

from ..infra.storage import SQLiteContentStore, SQLiteLastRefreshTimeStore, SQLiteManager
from ..infra.stores import CustomTokenStore, InMemoryCustomTokenStore, InMemoryPrivacyGuard, PrivacyGuard
from .defaults import load_bundled_main_list
from .models import TokenListsConfig, TokenListsSettings

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
SETTINGS_FILENAME = "tokenlists.yaml"
HOME_ENV_VAR = "TOKENLISTS_HOME"


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


def _write_file(path: Path, payload: dict) -> None:
    with path.open("w", encoding="utf-8") as stream:
        if path.suffix in (".yaml", ".yml"):
            yaml.safe_dump(payload, stream, allow_unicode=True, sort_keys=False)
        else:
            json.dump(payload, stream, indent=2, ensure_ascii=False)


@dataclass(slots=True)
class ConfigLocator:
    """Resolve the project home and its data and log directories."""

    project_root: Path | None = None
    data_dir: Path | None = None
    logs_dir: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get(HOME_ENV_VAR)
        if env_root:
            root = Path(env_root).expanduser().resolve()
        else:
            root = (self.project_root or Path.cwd()).resolve()
        self.project_root = root
        self.data_dir = (root / "data").resolve()
        self.logs_dir = (root / "logs").resolve()
        self.ensure_directories()

    def ensure_directories(self) -> None:
        for directory in (self.data_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def settings_path(self) -> Path:
        for extension in CONFIG_EXTENSIONS:
            candidate = self.data_dir / f"tokenlists{extension}"
            if candidate.exists():
                return candidate
        return self.data_dir / SETTINGS_FILENAME


class ConfigRepository:
    """Read and write :class:`TokenListsSettings`."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self._cache: TokenListsSettings | None = None

    def load_settings(self) -> TokenListsSettings:
        if self._cache is not None:
            return self._cache
        path = self.locator.settings_path()
        if path.exists():
            settings = TokenListsSettings.model_validate(_read_file(path))
        else:
            settings = TokenListsSettings()
            self.save_settings(settings)
        self._cache = settings
        return settings

    def save_settings(self, settings: TokenListsSettings) -> Path:
        path = self.locator.settings_path()
        _write_file(path, settings.model_dump(mode="json"))
        self._cache = settings
        return path

    def resolve_path(self, path: Path) -> Path:
        """Relative paths in the settings file are relative to the project home."""

        if path.is_absolute():
            return path
        return (self.locator.project_root / path).resolve()


def build_config(
    settings: TokenListsSettings,
    repository: ConfigRepository,
    manager: SQLiteManager | None = None,
    privacy_guard: PrivacyGuard | None = None,
    custom_token_store: CustomTokenStore | None = None,
) -> TokenListsConfig:
    """Turn file settings into an engine config backed by the SQLite cache."""

    manager = manager or SQLiteManager()
    db_path = settings.resolved_cache_path(repository.locator.project_root)
    if settings.main_list_path is not None:
        main_list = repository.resolve_path(settings.main_list_path).read_bytes()
    else:
        main_list = load_bundled_main_list()
    initial_lists = {
        list_id: repository.resolve_path(path).read_bytes()
        for list_id, path in settings.initial_lists.items()
    }
    return TokenListsConfig(
        main_list_id=settings.main_list_id,
        main_list=main_list,
        initial_lists=initial_lists,
        chains=tuple(settings.chains),
        manifest_url=settings.manifest_url,
        auto_refresh_interval=timedelta(seconds=settings.auto_refresh_interval),
        auto_refresh_check_interval=timedelta(seconds=settings.auto_refresh_check_interval),
        request_timeout=settings.request_timeout,
        fetch_workers=settings.fetch_workers,
        privacy_guard=privacy_guard or InMemoryPrivacyGuard(settings.privacy_mode),
        last_refresh_store=SQLiteLastRefreshTimeStore(manager, db_path),
        content_store=SQLiteContentStore(manager, db_path),
        custom_token_store=custom_token_store or InMemoryCustomTokenStore(),
    )


__all__ = [
    "CONFIG_EXTENSIONS",
    "ConfigLocator",
    "ConfigRepository",
    "HOME_ENV_VAR",
    "SETTINGS_FILENAME",
    "build_config",
]
