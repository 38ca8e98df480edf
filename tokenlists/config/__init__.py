"""Configuration models and loaders."""

from .defaults import default_config, load_bundled_main_list
from .loader import ConfigLocator, ConfigRepository, build_config
from .models import TokenListsConfig, TokenListsSettings, default_parsers

__all__ = [
    "ConfigLocator",
    "ConfigRepository",
    "TokenListsConfig",
    "TokenListsSettings",
    "build_config",
    "default_config",
    "default_parsers",
    "load_bundled_main_list",
]
