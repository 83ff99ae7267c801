"""Loaded document models."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """Markdown file split into front matter and body."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    filename: str
    absolute_path: Path
    metadata: dict[str, Any] = Field(default_factory=dict)
    body: str = ""


class ParseFailure(BaseModel):
    """Markdown file whose front matter could not be parsed."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    filename: str
    absolute_path: Path
    message: str


LoadedDocument = Document | ParseFailure
