"""Project configuration models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from folio.typing.enums import IndexFormat
from folio.typing.models.schema import FieldDefinition


class IndexingConfig(BaseModel):
    """How index regions are rendered for every document type."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    columns: list[str] = Field(default_factory=list)
    format: IndexFormat = IndexFormat.TABLE
    filename: str = Field(default="index.md", min_length=1)

    @model_validator(mode="after")
    def _check_columns(self) -> IndexingConfig:
        """Ensure table indexes have at least one column.

        Raises:
            ValueError: If a table index has no columns.

        Returns:
            IndexingConfig: Validated config.
        """
        if self.format == IndexFormat.TABLE and not self.columns:
            raise ValueError("'columns' must not be empty when format is 'table'")  # noqa: TRY003
        return self


class DocumentTypeConfig(BaseModel):
    """One managed document type."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: str = Field(min_length=1, description="Directory of the type, relative to the docs root.")
    template: str = Field(min_length=1, description="Template file name under `<root>/_templates`.")
    frontmatter: dict[str, FieldDefinition] = Field(default_factory=dict)


class FolioConfig(BaseModel):
    """Top-level `folio.yaml` payload."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    root: str = "docs"
    types: dict[str, DocumentTypeConfig]
    indexing: IndexingConfig
