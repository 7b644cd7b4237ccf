"""Pydantic models for filters and archive requests."""

from .archive import ArchiveParams
from .filter import FilterDefinition

__all__ = ["ArchiveParams", "FilterDefinition"]
