"""tarpipe CLI main entry point with global options."""

import logging
from pathlib import Path

import click

from ..context import TarpipeContext


@click.group()
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to config file (overrides $TARPIPE_CONFIG)",
)
@click.option(
    "-c",
    "overrides",
    multiple=True,
    metavar="KEY[=VALUE]",
    help="Extra config entry, e.g. -c tarfilter.txz.command='xz -c'",
)
@click.option("--verbose", "-v", is_flag=True, help="Log filter setup and commands")
@click.pass_context
def cli(ctx, config_file, overrides, verbose):
    """tarpipe - tar archives compressed through configurable filter commands."""
    ctx.ensure_object(TarpipeContext)
    ctx.obj.config_file = config_file
    ctx.obj.overrides = tuple(overrides)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


# Register commands at module level so tests can import cli with commands attached
from .commands.archive import archive
from .commands.list import list_formats
from .commands.show import show

cli.add_command(archive)
cli.add_command(list_formats)
cli.add_command(show)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
