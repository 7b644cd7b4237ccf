"""Filter registry: ordered filter definitions and their resolution.

The registry is filled in one pass: built-in filters first, then every
``tarfilter.<name>.<attribute>`` entry from the config source, then filters
that never received a command are dropped. Config entries merge into existing
definitions (``extension`` appends), so a registry is always built from a
fresh list rather than reloaded in place.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from .config.source import ConfigEntry, parse_config_bool
from .exceptions import ConfigError
from .models import FilterDefinition

logger = logging.getLogger(__name__)

NAMESPACE = "tarfilter"


def builtin_filters() -> List[FilterDefinition]:
    """Return fresh copies of the filters available without any config."""
    return [
        FilterDefinition(
            name="tgz",
            command="gzip -n",
            extensions=["tgz", "tar.gz"],
            use_compression=True,
        ),
    ]


def match_extension(filename: str, ext: str) -> bool:
    """Check whether ``filename`` ends with ``.ext`` after a non-empty stem.

    One character is needed for the dot and at least one more before it, so
    ``.tar.gz`` alone never matches ``tar.gz``.
    """
    prefixlen = len(filename) - len(ext)
    if prefixlen < 2 or filename[prefixlen - 1] != ".":
        return False
    return filename[prefixlen:] == ext


class Registry:
    """Ordered, read-only collection of filter definitions."""

    def __init__(
        self,
        filters: Iterable[FilterDefinition] = (),
        errors: Iterable[ConfigError] = (),
    ):
        self._filters: Tuple[FilterDefinition, ...] = tuple(filters)
        self.errors: Tuple[ConfigError, ...] = tuple(errors)

    def __iter__(self) -> Iterator[FilterDefinition]:
        return iter(self._filters)

    def __len__(self) -> int:
        return len(self._filters)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Registry):
            return NotImplemented
        return self._filters == other._filters

    def __repr__(self) -> str:
        return f"Registry({list(self.names())!r})"

    def names(self) -> Tuple[str, ...]:
        """Filter names in registry order."""
        return tuple(f.name for f in self._filters)

    def by_name(self, name: str) -> Optional[FilterDefinition]:
        """Get a filter by exact (case-sensitive) name, or None."""
        return next((f for f in self._filters if f.name == name), None)

    def by_extension(self, filename: str) -> Optional[FilterDefinition]:
        """Get the first filter with an extension matching ``filename``.

        Registry order wins over extension order: if two filters claim the
        same suffix, the one installed first is returned.
        """
        for filter_def in self._filters:
            for ext in filter_def.extensions:
                if match_extension(filename, ext):
                    return filter_def
        return None


def resolve_filter(
    registry: Registry,
    name: Optional[str] = None,
    filename: Optional[str] = None,
) -> Optional[FilterDefinition]:
    """Resolve a filter by explicit name, else by output filename.

    An explicit name is authoritative: when it is unknown the filename is not
    consulted. Returns None when nothing matches.
    """
    if name is not None:
        return registry.by_name(name)
    if filename:
        return registry.by_extension(filename)
    return None


def _split_key(key: str) -> Optional[Tuple[str, str]]:
    """Split ``tarfilter.<name>.<attribute>`` into (name, attribute).

    The name is everything between the first and the last dot and may itself
    contain dots. Namespace and attribute compare case-insensitively.
    """
    namespace, sep, rest = key.partition(".")
    if not sep or namespace.lower() != NAMESPACE:
        return None
    name, dot, attribute = rest.rpartition(".")
    if not dot or not name:
        return None
    return name, attribute.lower()


def _apply_entry(
    filters: List[FilterDefinition], key: str, value: Optional[object]
) -> None:
    parts = _split_key(key)
    if parts is None:
        return
    name, attribute = parts

    filter_def = next((f for f in filters if f.name == name), None)
    if filter_def is None:
        filter_def = FilterDefinition(name=name)
        filters.append(filter_def)
        logger.debug("Created filter %r from config", name)

    if attribute == "command":
        filter_def.command = _require_value(key, value)
    elif attribute == "extension":
        filter_def.extensions.append(_require_value(key, value))
    elif attribute == "compressionlevels":
        filter_def.use_compression = parse_config_bool(key, value)


def _require_value(key: str, value: Optional[object]) -> str:
    if value is None or isinstance(value, bool):
        raise ConfigError(key, "missing value")
    return str(value)


def load_registry(entries: Iterable[ConfigEntry] = ()) -> Registry:
    """Build a registry from the built-ins plus config ``entries``.

    Bad values are logged and recorded on ``Registry.errors``; they only
    cancel the offending key. Filters left without a command are removed.
    """
    filters = builtin_filters()
    errors: List[ConfigError] = []

    for key, value in entries:
        try:
            _apply_entry(filters, key, value)
        except ConfigError as e:
            logger.warning("%s", e)
            errors.append(e)

    kept = [f for f in filters if f.command]
    for dropped in filters:
        if not dropped.command:
            logger.debug("Dropping filter %r: no command configured", dropped.name)

    return Registry(kept, errors)


__all__ = [
    "NAMESPACE",
    "Registry",
    "builtin_filters",
    "load_registry",
    "match_extension",
    "resolve_filter",
]
