"""Filter definition model.

A filter is an external compression command that the archive stream is piped
through, together with the filename extensions that imply its use.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class FilterDefinition(BaseModel):
    """Named external compressor.

    ``command`` stays empty until configured; definitions that never get one
    are pruned when the registry finishes loading. ``extensions`` keeps
    insertion order and duplicates, since lookup is first-match-wins.
    """

    name: str
    command: str = ""
    extensions: List[str] = Field(default_factory=list)
    use_compression: bool = False


__all__ = ["FilterDefinition"]
