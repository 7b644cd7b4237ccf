"""Process and subprocess utilities.

Filters are shell command strings (they may contain pipes or redirections),
so they are always started through ``/bin/sh -c``. The wrapper validates the
command before handing it to ``subprocess``.
"""

from __future__ import annotations

import subprocess
from typing import Any


def _normalize_shell_command(cmd: str) -> str:
    """Validate a shell command string."""
    if not isinstance(cmd, str):
        msg = "Shell command must be a string"
        raise TypeError(msg)

    if not cmd.strip():
        msg = "Shell command cannot be empty or whitespace"
        raise ValueError(msg)

    return cmd


def popen_shell(cmd: str, **kwargs: Any) -> subprocess.Popen[Any]:
    """Run subprocess.Popen through the shell after validating ``cmd``."""
    normalized_cmd = _normalize_shell_command(cmd)
    return subprocess.Popen(normalized_cmd, shell=True, **kwargs)  # noqa: S602


__all__ = ["popen_shell"]
