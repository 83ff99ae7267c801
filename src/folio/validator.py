"""Validate every document of a type against its compiled schema."""

from __future__ import annotations

from typing import TYPE_CHECKING

from folio import logger
from folio.document_loader import load_documents
from folio.typing.enums import ErrorCode
from folio.typing.models import (
    DocumentReport,
    FieldError,
    ParseFailure,
    TypeValidationResult,
    UniquenessViolation,
    ValidationRun,
)

if TYPE_CHECKING:
    from collections.abc import Hashable, Sequence

    from folio.config_loader import Project
    from folio.schema_compiler import CompiledSchema
    from folio.typing.models import LoadedDocument


def _uniqueness_key(value: object) -> Hashable:
    """Return a hashable stand-in for a coerced value.

    Args:
        value (object): Coerced field value.

    Returns:
        Hashable: Key compared with exact equality.
    """
    if isinstance(value, list):
        return tuple(_uniqueness_key(item) for item in value)
    return value  # type: ignore[return-value]


def validate_documents(
    documents: Sequence[LoadedDocument],
    schema: CompiledSchema,
    *,
    type_name: str,
) -> TypeValidationResult:
    """Apply a compiled schema to documents and enforce unique fields.

    Documents are processed in the given order. A repeated unique value is
    reported on the later document, referencing the first one that used it.
    Values that failed validation for a field, and absent values, never take
    part in uniqueness checks.

    Args:
        documents (Sequence[LoadedDocument]): Documents in listing order.
        schema (CompiledSchema): Compiled validator of the type.
        type_name (str): Document type name.

    Returns:
        TypeValidationResult: Per-document reports and uniqueness violations.
    """
    reports: list[DocumentReport] = []
    violations: list[UniquenessViolation] = []
    first_seen: dict[str, dict[Hashable, str]] = {name: {} for name in schema.unique_fields}

    for item in documents:
        if isinstance(item, ParseFailure):
            reports.append(
                DocumentReport(
                    filename=item.filename,
                    path=item.absolute_path,
                    errors=[FieldError(code=ErrorCode.PARSE_FAILURE, message=item.message)],
                ),
            )
            continue

        check = schema.validate(item.metadata)
        errors = list(check.errors)
        for field_name, seen in first_seen.items():
            if field_name in check.invalid_fields:
                continue
            value = check.values.get(field_name)
            if value is None:
                continue
            key = _uniqueness_key(value)
            first = seen.get(key)
            if first is None:
                seen[key] = item.filename
                continue
            violations.append(
                UniquenessViolation(field=field_name, value=value, first_seen_in=first, duplicate_in=item.filename),
            )
            errors.append(
                FieldError(
                    code=ErrorCode.DUPLICATE_UNIQUE,
                    field=field_name,
                    message=f"Duplicate value {value!r} for unique field '{field_name}'. First seen in {first}",
                ),
            )

        reports.append(DocumentReport(filename=item.filename, path=item.absolute_path, errors=errors))

    result = TypeValidationResult(type_name=type_name, documents=reports, uniqueness_violations=violations)
    logger.info("Document type validated", extra={"type": type_name, **result.summary.model_dump()})
    return result


def validate_type(project: Project, type_name: str) -> TypeValidationResult:
    """Load and validate every document of one type.

    Args:
        project (Project): Loaded project.
        type_name (str): Document type name.

    Returns:
        TypeValidationResult: Validation outcome.
    """
    schema = project.schema(type_name)
    documents = load_documents(project.type_dir(type_name), exclude={project.config.indexing.filename})
    return validate_documents(documents, schema, type_name=type_name)


def validate_project(project: Project, type_names: Sequence[str] | None = None) -> ValidationRun:
    """Validate several document types.

    Args:
        project (Project): Loaded project.
        type_names (Sequence[str] | None): Types to validate, all configured types when omitted.

    Returns:
        ValidationRun: Aggregate outcome.
    """
    names = list(type_names) if type_names is not None else project.type_names
    return ValidationRun(results=[validate_type(project, name) for name in names])
