"""Archive request models."""

from __future__ import annotations

from pathlib import Path
from typing import List

from pydantic import BaseModel, Field


class ArchiveParams(BaseModel):
    """Inputs for one archive run.

    ``compression_level`` is -1 when the caller did not ask for one.
    """

    paths: List[Path] = Field(default_factory=list)
    prefix: str = ""
    base_dir: Path | None = None
    compression_level: int = Field(default=-1, ge=-1, le=9)


__all__ = ["ArchiveParams"]
