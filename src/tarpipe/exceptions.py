"""tarpipe exceptions."""

from __future__ import annotations

from typing import Optional


class TarpipeError(Exception):
    """Base class for tarpipe errors."""


class ConfigError(TarpipeError):
    """A recognized config key carried an unusable value."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"{message} for '{key}'")


class ConfigFileError(TarpipeError):
    """The config file could not be read or parsed."""


class InternalError(TarpipeError):
    """Raised on caller bugs, e.g. running the filter writer without a filter."""


class FilterError(TarpipeError):
    """An external filter command failed."""

    def __init__(self, command: str, message: Optional[str] = None):
        self.command = command
        super().__init__(message or f"'{command}' filter failed")


class SpawnError(FilterError):
    """The filter process could not be started."""

    def __init__(self, command: str, reason: Optional[str] = None):
        message = f"unable to start '{command}' filter"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(command, message)


class FilterExitError(FilterError):
    """The filter process exited with a non-zero status."""

    def __init__(self, command: str, returncode: int):
        self.returncode = returncode
        super().__init__(
            command,
            f"'{command}' filter reported error (exit code {returncode})",
        )


__all__ = [
    "ConfigError",
    "ConfigFileError",
    "FilterError",
    "FilterExitError",
    "InternalError",
    "SpawnError",
    "TarpipeError",
]
