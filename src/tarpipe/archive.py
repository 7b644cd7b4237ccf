"""Tar serializer: streams the archive body to a writable binary sink."""

from __future__ import annotations

import tarfile
from pathlib import Path
from typing import BinaryIO

from .models import ArchiveParams


def check_inputs(params: ArchiveParams) -> None:
    """Verify every input path exists and sits under ``base_dir`` when set.

    Raises:
        FileNotFoundError: If an input path does not exist
        ValueError: If an input path is outside ``params.base_dir``
    """
    for path in params.paths:
        if not path.exists():
            raise FileNotFoundError(f"No such file or directory: {path}")
        if params.base_dir is not None and not path.resolve().is_relative_to(
            params.base_dir.resolve()
        ):
            raise ValueError(f"{path} is outside base directory {params.base_dir}")


def _member_name(path: Path, params: ArchiveParams) -> str:
    if params.base_dir is not None:
        name = path.resolve().relative_to(params.base_dir.resolve()).as_posix()
    else:
        name = path.as_posix().lstrip("/")
    return params.prefix + name


def write_tar_archive(params: ArchiveParams, sink: BinaryIO) -> int:
    """Write a POSIX tar of ``params.paths`` to ``sink``.

    Uses tarfile's stream mode so ``sink`` only needs ``write()`` (a pipe is
    fine). Directories are added recursively. Inputs are checked before
    anything is written. Returns 0.

    Raises:
        FileNotFoundError: If an input path does not exist
        ValueError: If an input path is outside ``params.base_dir``
    """
    check_inputs(params)

    with tarfile.open(fileobj=sink, mode="w|", format=tarfile.PAX_FORMAT) as tar:
        for path in params.paths:
            tar.add(str(path), arcname=_member_name(path, params))
    sink.flush()
    return 0


__all__ = ["check_inputs", "write_tar_archive"]
