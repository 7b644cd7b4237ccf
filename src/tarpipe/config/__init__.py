"""Config layer facade: config sources and the cached filter registry."""

from .source import (
    ConfigEntry,
    flatten_config,
    parse_config_bool,
    parse_overrides,
    read_config_file,
    resolve_config_path,
)
from .core import config_path, ensure, require, reset, use

__all__ = [
    "ConfigEntry",
    "config_path",
    "ensure",
    "flatten_config",
    "parse_config_bool",
    "parse_overrides",
    "read_config_file",
    "require",
    "reset",
    "resolve_config_path",
    "use",
]
