"""Document workflow result models."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StatusChange(BaseModel):
    """Status update applied to one document."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: Path
    previous: Any = None
    current: str
    touched_date_field: str | None = None


class DeprecationResult(BaseModel):
    """Outcome of deprecating a decision record."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: Path
    changed: bool
    dry_run: bool = False
    already_deprecated: bool = False
    updates: dict[str, Any] = Field(default_factory=dict)
    skipped_fields: list[str] = Field(default_factory=list)


class RenumberStep(BaseModel):
    """Planned rename and id rewrite of one document."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    source: str
    target: str
    previous_id: Any = None
    new_id: Any = None


class RenumberResult(BaseModel):
    """Outcome of renumbering the documents of a type."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type_name: str
    dry_run: bool = False
    total: int = 0
    steps: list[RenumberStep] = Field(default_factory=list)
