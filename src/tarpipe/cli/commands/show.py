"""Show command - print one filter definition as JSON."""

import json
import sys

import click

from ...context import pass_context
from ..helpers import load_registry_or_exit


@click.command()
@click.argument("name")
@pass_context
def show(ctx, name):
    """Show the filter NAME as JSON."""
    registry = load_registry_or_exit(ctx)

    filter_def = registry.by_name(name)
    if filter_def is None:
        click.echo(f"Error: Filter '{name}' not found", err=True)
        click.echo(f"Available filters: {', '.join(registry.names())}", err=True)
        sys.exit(1)

    click.echo(json.dumps(filter_def.model_dump(), indent=2))
