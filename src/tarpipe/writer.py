"""Filtered archive writer.

Runs a filter's shell command and streams the tar body into its stdin. The
child's stdout is the final archive: it goes wherever ``output`` points, or
to this process's stdout when ``output`` is None.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import IO, Any, BinaryIO, Callable, Optional, Union

from .archive import write_tar_archive
from .exceptions import FilterError, FilterExitError, InternalError, SpawnError
from .models import ArchiveParams, FilterDefinition
from .process_utils import popen_shell

logger = logging.getLogger(__name__)

Serializer = Callable[[ArchiveParams, BinaryIO], int]
Output = Union[IO[Any], int, None]

# POSIX shell statuses for a command it could not run
_SHELL_START_FAILURES = {
    126: "permission denied",
    127: "command not found",
}


def build_filter_command(
    filter_def: FilterDefinition, compression_level: int = -1
) -> str:
    """Return the effective command line for ``filter_def``.

    Appends `` -<level>`` when the filter takes compression levels and the
    caller gave one (``compression_level >= 0``).
    """
    cmd = filter_def.command
    if filter_def.use_compression and compression_level >= 0:
        cmd += f" -{compression_level}"
    return cmd


def _write_to_filter(
    params: ArchiveParams,
    command: str,
    output: Output,
    serializer: Serializer,
) -> int:
    logger.debug("Starting filter: %s", command)
    try:
        proc = popen_shell(command, stdin=subprocess.PIPE, stdout=output)
    except (OSError, ValueError) as e:
        raise SpawnError(command, str(e)) from e

    broken_pipe = False
    result = 0
    with proc:
        assert proc.stdin is not None
        try:
            result = serializer(params, proc.stdin)
        except BrokenPipeError:
            broken_pipe = True
        finally:
            # EOF for the filter; it may already have stopped reading
            try:
                proc.stdin.close()
            except BrokenPipeError:
                broken_pipe = True
        returncode = proc.wait()

    logger.debug("Filter %r exited with %d", command, returncode)
    if returncode in _SHELL_START_FAILURES:
        raise SpawnError(command, _SHELL_START_FAILURES[returncode])
    if returncode != 0:
        raise FilterExitError(command, returncode)
    if broken_pipe:
        raise FilterError(command, f"'{command}' filter closed its input early")
    return result


def write_filtered_archive(
    params: ArchiveParams,
    filter_def: Optional[FilterDefinition],
    output: Output = None,
    serializer: Serializer = write_tar_archive,
) -> int:
    """Write the archive for ``params`` through ``filter_def``'s command.

    Args:
        params: Archive inputs, including the requested compression level
        filter_def: Resolved filter; None is a caller bug
        output: Destination for the filter's stdout (file object or fd)
        serializer: Writes the tar body to the sink it is given

    Returns:
        The serializer's result code

    Raises:
        InternalError: If ``filter_def`` is None
        SpawnError: If the filter command cannot be started, including the
            shell reporting it as not found (127) or not executable (126)
        FilterExitError: If the filter exits with a non-zero status
    """
    if filter_def is None:
        raise InternalError("tar-filter archiver called with no filter defined")

    command = build_filter_command(filter_def, params.compression_level)
    return _write_to_filter(params, command, output, serializer)


def write_archive(
    params: ArchiveParams,
    filter_def: Optional[FilterDefinition] = None,
    output: Optional[BinaryIO] = None,
    serializer: Serializer = write_tar_archive,
) -> int:
    """Write a plain tar when no filter is given, else a filtered one."""
    if filter_def is not None:
        return write_filtered_archive(params, filter_def, output, serializer)

    sink = output if output is not None else sys.stdout.buffer
    return serializer(params, sink)


__all__ = [
    "Serializer",
    "build_filter_command",
    "write_archive",
    "write_filtered_archive",
]
