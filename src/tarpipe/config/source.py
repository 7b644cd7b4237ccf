"""Configuration sources: flat ``(key, value)`` streams of dotted keys.

The registry never reads files itself; it consumes an iterable of entries
the way git's config callback delivers them. A value of ``None`` marks a
valueless key (``git -c tarfilter.x.compressionlevels``).
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Tuple

from ..exceptions import ConfigError, ConfigFileError

ConfigEntry = Tuple[str, Optional[Any]]

CONFIG_ENV_VAR = "TARPIPE_CONFIG"
CONFIG_FILENAMES = (".tarpipe.json", "tarpipe.json")

_TRUE_WORDS = {"true", "yes", "on"}
_FALSE_WORDS = {"false", "no", "off", ""}


def resolve_config_path(cli_path: Optional[Path] = None) -> Path:
    """Pick the config file: --config, then $TARPIPE_CONFIG, then the
    working directory (``.tarpipe.json`` before ``tarpipe.json``), then
    ``~/.tarpipe.json``.

    The returned path may not exist; callers decide whether that matters.
    """
    if cli_path:
        return cli_path

    from_env = os.getenv(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env).expanduser()

    for candidate in (Path.cwd() / name for name in CONFIG_FILENAMES):
        if candidate.exists():
            return candidate

    return Path.home() / CONFIG_FILENAMES[0]


def flatten_config(data: dict, prefix: str = "") -> Iterator[ConfigEntry]:
    """Flatten a nested mapping into dotted key/value entries.

    Nested objects join their keys with ``.``; lists expand into one entry
    per item (repeatable keys); ``null`` becomes a valueless key. Numbers are
    passed on as strings, bools stay bools.
    """
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            yield from flatten_config(value, full_key)
        elif isinstance(value, list):
            for item in value:
                yield full_key, _scalar(item)
        else:
            yield full_key, _scalar(value)


def _scalar(value: Any) -> Optional[Any]:
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value)


def read_config_file(path: Path, *, required: bool = False) -> List[ConfigEntry]:
    """Read a JSON config file into flat entries.

    A missing file is an empty source unless ``required`` is set.
    """
    if not path.exists():
        if required:
            raise ConfigFileError(f"Config file not found: {path}")
        return []

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigFileError(f"Cannot read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigFileError(f"Config file {path} must contain a JSON object")
    return list(flatten_config(data))


def parse_overrides(items: Iterable[str]) -> List[ConfigEntry]:
    """Parse ``key=value`` overrides from CLI flags.

    A bare ``key`` (no ``=``) is a valueless entry, as with ``git -c``.
    """
    entries: List[ConfigEntry] = []
    for item in items:
        if "=" in item:
            key, value = item.split("=", 1)
            entries.append((key, value))
        else:
            entries.append((item, None))
        if not entries[-1][0]:
            raise ValueError(f"Invalid override: {item} (expected key=value)")
    return entries


def parse_config_bool(key: str, value: Optional[Any]) -> bool:
    """Interpret a config value as a boolean using git's conventions."""
    if value is None:
        return True
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0

    text = str(value).strip().lower()
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    try:
        return int(text, 10) != 0
    except ValueError:
        raise ConfigError(key, f"bad boolean config value '{value}'") from None


__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAMES",
    "ConfigEntry",
    "flatten_config",
    "parse_config_bool",
    "parse_overrides",
    "read_config_file",
    "resolve_config_path",
]
