"""Typing-centric domain modules."""

from folio.typing.enums import BaseType, ErrorCode, IndexFormat
from folio.typing.models import (
    Document,
    DocumentReport,
    DocumentTypeConfig,
    FieldDefinition,
    FieldError,
    FolioConfig,
    GeneratorDefault,
    IndexingConfig,
    LiteralDefault,
    ParseFailure,
    TypeValidationResult,
    UniquenessViolation,
    ValidationRun,
    ValidationSummary,
)

__all__ = [
    "BaseType",
    "Document",
    "DocumentReport",
    "DocumentTypeConfig",
    "ErrorCode",
    "FieldDefinition",
    "FieldError",
    "FolioConfig",
    "GeneratorDefault",
    "IndexFormat",
    "IndexingConfig",
    "LiteralDefault",
    "ParseFailure",
    "TypeValidationResult",
    "UniquenessViolation",
    "ValidationRun",
    "ValidationSummary",
]
