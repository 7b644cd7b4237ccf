"""Archive command - write a tar archive, optionally through a filter."""

import io
import shutil
import sys
import tempfile
from pathlib import Path

import click

from ...archive import check_inputs
from ...context import pass_context
from ...exceptions import FilterError
from ...models import ArchiveParams
from ...registry import resolve_filter
from ...writer import write_archive
from ..helpers import load_registry_or_exit

PLAIN_FORMAT = "tar"


def _stdout_has_fileno() -> bool:
    try:
        sys.stdout.fileno()
        return True
    except (AttributeError, OSError, ValueError, io.UnsupportedOperation):
        # Not a real file handle (e.g., Click test runner)
        return False


def _write_to_stdout(params, filter_def) -> None:
    if _stdout_has_fileno():
        # Filters write straight to our stdout; flush ours first
        sys.stdout.flush()
        write_archive(params, filter_def, sys.stdout.buffer)
        sys.stdout.buffer.flush()
        return

    with tempfile.TemporaryFile() as spool:
        write_archive(params, filter_def, spool)
        spool.seek(0)
        shutil.copyfileobj(spool, sys.stdout.buffer)
    sys.stdout.buffer.flush()


@click.command()
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "-o",
    "--output",
    "output_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the archive to this file (format guessed from its extension)",
)
@click.option("--format", "format_name", help="Archive format: 'tar' or a filter name")
@click.option(
    "-l",
    "--compression-level",
    "level",
    type=click.IntRange(0, 9),
    help="Compression level passed to filters that accept one",
)
@click.option("--prefix", default="", help="Prepend PREFIX to each member name")
@click.option(
    "--base-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Store member names relative to this directory",
)
@pass_context
def archive(ctx, paths, output_file, format_name, level, prefix, base_dir):
    """Write PATHS as a tar archive, compressed through a filter.

    The filter is picked by --format, else by the --output filename
    (e.g. backup.tar.gz uses the 'tgz' filter), else a plain tar is written.

    Examples:
        tarpipe archive src -o src.tar.gz            # gzip -n
        tarpipe archive src --format tgz -l 9 > out  # gzip -n -9
        tarpipe -c tarfilter.txz.command='xz -c' \\
                -c tarfilter.txz.extension=txz archive src -o src.txz
    """
    registry = load_registry_or_exit(ctx)

    filter_def = None
    if format_name is not None and format_name != PLAIN_FORMAT:
        filter_def = resolve_filter(registry, name=format_name)
        if filter_def is None:
            click.echo(f"Error: Unknown archive format '{format_name}'", err=True)
            sys.exit(1)
    elif format_name is None and output_file is not None:
        filter_def = resolve_filter(registry, filename=str(output_file))

    if level is not None and (filter_def is None or not filter_def.use_compression):
        name = PLAIN_FORMAT if filter_def is None else filter_def.name
        click.echo(
            f"Error: Argument not supported for format '{name}': -l {level}",
            err=True,
        )
        sys.exit(1)

    params = ArchiveParams(
        paths=list(paths),
        prefix=prefix,
        base_dir=base_dir,
        compression_level=-1 if level is None else level,
    )

    try:
        check_inputs(params)
        if output_file is not None:
            with open(output_file, "wb") as out:
                write_archive(params, filter_def, out)
        else:
            _write_to_stdout(params, filter_def)
    except FilterError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except (OSError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
