"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass, field


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class AsyncExecutionError(PackageError):
    """Raised when an async operation fails in compatibility runner."""

    result: BaseException
    message: str = "Async operation failed"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.result}"


@dataclass(frozen=True)
class ConfigurationError(PackageError):
    """Raised when the project configuration or one of its schemas is invalid."""

    message: str
    details: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        """Return error message payload."""
        if not self.details:
            return self.message
        lines = "\n".join(f"  - {detail}" for detail in self.details)
        return f"{self.message}:\n{lines}"


@dataclass(frozen=True)
class UnknownDocumentTypeError(PackageError):
    """Raised when a command names a document type missing from the configuration."""

    type_name: str
    available: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        """Return error message payload."""
        available = ", ".join(self.available) or "none"
        return f"Document type '{self.type_name}' is not defined. Available types: {available}"


@dataclass(frozen=True)
class IndexWriteError(PackageError):
    """Raised when an index file cannot be written."""

    path: str
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Failed to write index file '{self.path}': {self.exc}" if self.exc else self.path


@dataclass(frozen=True)
class DocumentNotFoundError(PackageError):
    """Raised when no document of a type matches the requested identifier."""

    type_name: str
    document_id: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Could not find a document of type '{self.type_name}' with ID '{self.document_id}'"


@dataclass(frozen=True)
class DocumentWriteError(PackageError):
    """Raised when a document file cannot be created or rewritten."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class TemplateError(PackageError):
    """Raised when a document template cannot be read or rendered."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class FrontMatterError(PackageError):
    """Raised when a document's front matter block cannot be parsed."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class InvalidFieldValueError(PackageError):
    """Raised when a workflow would write a value its schema rejects."""

    field_name: str
    value: object
    reasons: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        """Return error message payload."""
        reasons = "; ".join(self.reasons)
        return f"'{self.value}' is not a valid value for field '{self.field_name}': {reasons}"


@dataclass(frozen=True)
class ConfirmationRequiredError(PackageError):
    """Raised when a destructive workflow runs without explicit confirmation."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message
