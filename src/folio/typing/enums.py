"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value)
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class BaseType(_EnumMixin):
    """Scalar types a front matter field can declare."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"


class IndexFormat(_EnumMixin):
    """Rendering format of an index region."""

    TABLE = "table"
    LIST = "list"


class ErrorCode(_EnumMixin):
    """Per-document validation error categories."""

    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    TYPE_MISMATCH = "TypeMismatch"
    ENUM_VIOLATION = "EnumViolation"
    PATTERN_VIOLATION = "PatternViolation"
    CONSTRAINT_VIOLATION = "ConstraintViolation"
    UNKNOWN_FIELD = "UnknownField"
    DUPLICATE_UNIQUE = "DuplicateUnique"
    PARSE_FAILURE = "ParseFailure"
