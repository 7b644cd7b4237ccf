"""tarpipe context for passing state between commands."""

from pathlib import Path
from typing import Optional, Tuple

import click

from . import config
from .registry import Registry


class TarpipeContext:
    def __init__(self):
        self.config_file: Optional[Path] = None
        self.overrides: Tuple[str, ...] = ()

    def registry(self) -> Registry:
        """Return the process-wide registry, loading it on first use."""
        return config.ensure(self.config_file, self.overrides)


pass_context = click.make_pass_decorator(TarpipeContext, ensure=True)
