"""Core domain model exports."""

from folio.typing.models.config import DocumentTypeConfig, FolioConfig, IndexingConfig
from folio.typing.models.document import Document, LoadedDocument, ParseFailure
from folio.typing.models.indexing import IndexEntry, IndexSyncResult
from folio.typing.models.schema import (
    DefaultValue,
    FieldDefinition,
    FrontmatterSchema,
    GeneratorDefault,
    LiteralDefault,
)
from folio.typing.models.validation import (
    DocumentReport,
    FieldError,
    TypeValidationResult,
    UniquenessViolation,
    ValidationRun,
    ValidationSummary,
)
from folio.typing.models.workflows import DeprecationResult, RenumberResult, RenumberStep, StatusChange

__all__ = [
    "DefaultValue",
    "DeprecationResult",
    "Document",
    "DocumentReport",
    "DocumentTypeConfig",
    "FieldDefinition",
    "FieldError",
    "FolioConfig",
    "FrontmatterSchema",
    "GeneratorDefault",
    "IndexEntry",
    "IndexSyncResult",
    "IndexingConfig",
    "LiteralDefault",
    "LoadedDocument",
    "ParseFailure",
    "RenumberResult",
    "RenumberStep",
    "StatusChange",
    "TypeValidationResult",
    "UniquenessViolation",
    "ValidationRun",
    "ValidationSummary",
]
