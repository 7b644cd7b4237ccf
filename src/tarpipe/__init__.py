"""tarpipe: tar archives compressed through configurable filter commands."""

from . import config
from .registry import Registry, load_registry, resolve_filter
from .writer import build_filter_command, write_archive, write_filtered_archive

__all__ = [
    "__version__",
    "Registry",
    "build_filter_command",
    "config",
    "load_registry",
    "resolve_filter",
    "write_archive",
    "write_filtered_archive",
]

__version__ = "0.1.0"
