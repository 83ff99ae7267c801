"""Validation result models."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

from folio.typing.enums import ErrorCode


class FieldError(BaseModel):
    """One problem found in a document's front matter."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    code: ErrorCode
    field: str | None = None
    message: str


class UniquenessViolation(BaseModel):
    """Value of a unique field repeated across documents."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    field: str
    value: Any
    first_seen_in: str
    duplicate_in: str


class DocumentReport(BaseModel):
    """Validation outcome of a single document."""

    model_config = ConfigDict(extra="forbid")

    filename: str
    path: Path
    errors: list[FieldError] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def valid(self) -> bool:
        """Return whether the document has no errors."""
        return not self.errors


class ValidationSummary(BaseModel):
    """Document counts of a validation run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    total: int = 0
    valid: int = 0
    invalid: int = 0

    def __add__(self, other: ValidationSummary) -> ValidationSummary:
        """Combine two summaries.

        Args:
            other: Summary to add.

        Returns:
            ValidationSummary: Summed counts.
        """
        return ValidationSummary(
            total=self.total + other.total,
            valid=self.valid + other.valid,
            invalid=self.invalid + other.invalid,
        )


class TypeValidationResult(BaseModel):
    """Validation outcome of every document of one type."""

    model_config = ConfigDict(extra="forbid")

    type_name: str
    documents: list[DocumentReport] = Field(default_factory=list)
    uniqueness_violations: list[UniquenessViolation] = Field(default_factory=list)

    @property
    def per_document_errors(self) -> dict[str, list[FieldError]]:
        """Return errors keyed by filename, for invalid documents only."""
        return {report.filename: list(report.errors) for report in self.documents if report.errors}

    @property
    def summary(self) -> ValidationSummary:
        """Return document counts."""
        valid = sum(1 for report in self.documents if report.valid)
        return ValidationSummary(total=len(self.documents), valid=valid, invalid=len(self.documents) - valid)

    @property
    def valid(self) -> bool:
        """Return whether every document is valid."""
        return all(report.valid for report in self.documents)


class ValidationRun(BaseModel):
    """Validation outcome across every type processed in one invocation."""

    model_config = ConfigDict(extra="forbid")

    results: list[TypeValidationResult] = Field(default_factory=list)

    @property
    def summary(self) -> ValidationSummary:
        """Return document counts across types."""
        total = ValidationSummary()
        for result in self.results:
            total += result.summary
        return total

    @property
    def valid(self) -> bool:
        """Return whether every document of every type is valid."""
        return all(result.valid for result in self.results)

    def to_payload(self) -> dict[str, object]:
        """Build the JSON-friendly report consumed by tooling.

        Returns:
            dict[str, object]: Per-type document reports and aggregate counts.
        """
        types: dict[str, object] = {}
        for result in self.results:
            types[result.type_name] = {
                "documents": {
                    report.filename: {
                        "valid": report.valid,
                        "errors": [error.model_dump(mode="json") for error in report.errors],
                    }
                    for report in result.documents
                },
                "summary": result.summary.model_dump(),
            }
        return {"types": types, "summary": self.summary.model_dump(), "valid": self.valid}
