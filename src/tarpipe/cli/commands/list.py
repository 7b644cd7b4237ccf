"""List command - show the available archive formats."""

import click

from ...context import pass_context
from ..helpers import load_registry_or_exit


@click.command(name="list")
@click.option("--verbose", "-v", is_flag=True, help="Show command and extensions")
@pass_context
def list_formats(ctx, verbose):
    """List archive formats: 'tar' and every configured filter.

    Filters are listed in resolution order; when two filters claim the same
    extension the first one listed wins.
    """
    registry = load_registry_or_exit(ctx)

    click.echo("tar")
    for filter_def in registry:
        if not verbose:
            click.echo(filter_def.name)
            continue
        extensions = ", ".join(filter_def.extensions) or "-"
        levels = "yes" if filter_def.use_compression else "no"
        click.echo(
            f"{filter_def.name}\tcommand: {filter_def.command}\t"
            f"extensions: {extensions}\tcompression levels: {levels}"
        )
