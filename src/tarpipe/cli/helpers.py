"""CLI helper utilities shared across commands."""

import sys

import click

from ..exceptions import ConfigFileError
from ..registry import Registry


def load_registry_or_exit(ctx) -> Registry:
    """Load the filter registry, exiting with an error if the config is bad.

    Raises:
        SystemExit: If the config file cannot be read or an override is malformed
    """
    try:
        return ctx.registry()
    except (ConfigFileError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
