"""Index synchronization models."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class IndexEntry(BaseModel):
    """One row of an index region."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    filename: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class IndexSyncResult(BaseModel):
    """Outcome of synchronizing the indexes of several types."""

    model_config = ConfigDict(extra="forbid")

    updated: dict[str, Path] = Field(default_factory=dict)
    failed: dict[str, str] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Return whether every index was written."""
        return not self.failed
