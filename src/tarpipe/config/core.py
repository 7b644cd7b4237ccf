"""Core registry state: load once per process and cache."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from ..registry import Registry, load_registry
from .source import parse_overrides, read_config_file, resolve_config_path

_REGISTRY: Registry | None = None
_CONFIG_PATH: Path | None = None


def reset() -> None:
    """Reset cached registry (primarily for tests)."""

    global _REGISTRY, _CONFIG_PATH
    _REGISTRY = None
    _CONFIG_PATH = None


def config_path() -> Path | None:
    """Return the path the cached registry was loaded from, if any."""

    return _CONFIG_PATH


def _store(registry: Registry, path: Path) -> Registry:
    global _REGISTRY, _CONFIG_PATH
    _REGISTRY = registry
    _CONFIG_PATH = path
    return registry


def use(
    path: Path | str | None = None,
    overrides: Iterable[str] = (),
) -> Registry:
    """Load the registry from ``path`` (or fallback locations) and cache it.

    An explicit ``path`` must exist; the fallback locations may be missing.
    """

    target: Optional[Path]
    if path is None:
        target = None
    elif isinstance(path, Path):
        target = path
    else:
        target = Path(path)

    resolved = resolve_config_path(target)
    entries = read_config_file(resolved, required=target is not None)
    entries.extend(parse_overrides(overrides))
    return _store(load_registry(entries), resolved)


def ensure(
    path: Path | str | None = None,
    overrides: Iterable[str] = (),
) -> Registry:
    """Return the cached registry, loading it on first use.

    Config values append rather than overwrite, so the registry is never
    rebuilt once loaded; call ``reset()`` or ``use()`` to start over.
    """

    if _REGISTRY is None:
        return use(path, overrides)
    return _REGISTRY


def require() -> Registry:
    """Return the cached registry, loading it if necessary."""

    return ensure(None)


__all__ = ["config_path", "ensure", "require", "reset", "use"]
