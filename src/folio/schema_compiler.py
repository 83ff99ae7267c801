"""Compile front matter schemas into reusable validators.

Each field definition is turned once into a small validator object
(`StringValidator`, `NumberValidator`, `BooleanValidator`, `DateValidator`,
optionally wrapped in `ArrayValidator`). A `CompiledSchema` then applies
them to a metadata mapping, collecting every error instead of stopping at
the first one, and rejecting keys the schema does not declare.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import TYPE_CHECKING, ClassVar, Protocol

from folio.exceptions import ConfigurationError
from folio.typing.enums import BaseType, ErrorCode
from folio.typing.models import FieldDefinition, FieldError, GeneratorDefault, LiteralDefault

if TYPE_CHECKING:
    from collections.abc import Mapping

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class FieldCheck:
    """Outcome of validating one value."""

    value: object
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Return whether the value passed every rule."""
        return not self.errors


class ValueValidator(Protocol):
    """Single-field validation contract."""

    def validate(self, path: str, value: object) -> FieldCheck:
        """Validate and coerce a value.

        Args:
            path: Field path used in error reports.
            value: Raw value.

        Returns:
            FieldCheck: Coerced value and errors.
        """


def _display(value: object) -> str:
    return value if isinstance(value, str) else repr(value)


@dataclass(frozen=True)
class _ScalarValidator:
    """Shared type/enum handling for scalar validators."""

    enum_values: tuple[object, ...] | None = None

    type_message: ClassVar[str] = "Invalid value"

    def coerce(self, value: object) -> tuple[bool, object]:
        """Return `(accepted, coerced_value)` for a raw value."""
        raise NotImplementedError

    def constraint_errors(self, path: str, value: object) -> list[FieldError]:  # noqa: ARG002, PLR6301
        """Return constraint violations for an already coerced value."""
        return []

    def validate(self, path: str, value: object) -> FieldCheck:
        """Check type, enum membership and constraints of a scalar value.

        Args:
            path (str): Field path used in error reports.
            value (object): Raw value.

        Returns:
            FieldCheck: Coerced value and errors.
        """
        accepted, coerced = self.coerce(value)
        if not accepted:
            return FieldCheck(
                value=None,
                errors=[FieldError(code=ErrorCode.TYPE_MISMATCH, field=path, message=self.type_message)],
            )

        errors: list[FieldError] = []
        if self.enum_values is not None and coerced not in self.enum_values:
            allowed = ", ".join(_display(item) for item in self.enum_values)
            errors.append(
                FieldError(code=ErrorCode.ENUM_VIOLATION, field=path, message=f"Must be one of: {allowed}"),
            )
        errors.extend(self.constraint_errors(path, coerced))
        return FieldCheck(value=coerced, errors=errors)


@dataclass(frozen=True)
class StringValidator(_ScalarValidator):
    """Validator for `string` fields."""

    pattern: re.Pattern[str] | None = None
    min_length: int | None = None

    type_message: ClassVar[str] = "Must be a string"

    def coerce(self, value: object) -> tuple[bool, object]:  # noqa: PLR6301
        """Accept only `str` values."""
        return isinstance(value, str), value

    def constraint_errors(self, path: str, value: object) -> list[FieldError]:
        """Check pattern and minimum length."""
        text = str(value)
        errors: list[FieldError] = []
        if self.pattern is not None and not self.pattern.search(text):
            errors.append(
                FieldError(
                    code=ErrorCode.PATTERN_VIOLATION,
                    field=path,
                    message=f"Must match pattern: {self.pattern.pattern}",
                ),
            )
        if self.min_length is not None and len(text) < self.min_length:
            errors.append(
                FieldError(
                    code=ErrorCode.CONSTRAINT_VIOLATION,
                    field=path,
                    message=f"Must be at least {self.min_length} characters long",
                ),
            )
        return errors


@dataclass(frozen=True)
class NumberValidator(_ScalarValidator):
    """Validator for `number` fields."""

    minimum: int | float | None = None

    type_message: ClassVar[str] = "Must be a number"

    def coerce(self, value: object) -> tuple[bool, object]:  # noqa: PLR6301
        """Accept ints and floats, never booleans."""
        return isinstance(value, int | float) and not isinstance(value, bool), value

    def constraint_errors(self, path: str, value: object) -> list[FieldError]:
        """Check the minimum value."""
        if self.minimum is not None and isinstance(value, int | float) and value < self.minimum:
            return [
                FieldError(
                    code=ErrorCode.CONSTRAINT_VIOLATION,
                    field=path,
                    message=f"Must be greater than or equal to {self.minimum}",
                ),
            ]
        return []


@dataclass(frozen=True)
class BooleanValidator(_ScalarValidator):
    """Validator for `boolean` fields."""

    type_message: ClassVar[str] = "Must be true or false"

    def coerce(self, value: object) -> tuple[bool, object]:  # noqa: PLR6301
        """Accept only `bool` values."""
        return isinstance(value, bool), value


@dataclass(frozen=True)
class DateValidator(_ScalarValidator):
    """Validator for `date` fields; values are coerced to ISO `YYYY-MM-DD` strings."""

    type_message: ClassVar[str] = "Must be a date in YYYY-MM-DD format"

    def coerce(self, value: object) -> tuple[bool, object]:  # noqa: PLR6301
        """Accept calendar dates and ISO date strings."""
        if isinstance(value, datetime):
            return False, value
        if isinstance(value, date):
            return True, value.isoformat()
        if isinstance(value, str) and _ISO_DATE.match(value):
            try:
                return True, date.fromisoformat(value).isoformat()
            except ValueError:
                return False, value
        return False, value


@dataclass(frozen=True)
class ArrayValidator:
    """Apply an item validator to every element of a list."""

    item: _ScalarValidator

    def validate(self, path: str, value: object) -> FieldCheck:
        """Validate a list value element by element.

        Args:
            path (str): Field path used in error reports.
            value (object): Raw value.

        Returns:
            FieldCheck: Coerced list and per-element errors.
        """
        if not isinstance(value, list):
            return FieldCheck(
                value=None,
                errors=[FieldError(code=ErrorCode.TYPE_MISMATCH, field=path, message="Must be a list")],
            )

        coerced: list[object] = []
        errors: list[FieldError] = []
        for index, element in enumerate(value):
            check = self.item.validate(f"{path}[{index}]", element)
            coerced.append(check.value)
            errors.extend(check.errors)
        return FieldCheck(value=coerced, errors=errors)


@dataclass(frozen=True)
class CompiledField:
    """Field definition bound to its validator."""

    name: str
    definition: FieldDefinition
    validator: ValueValidator

    @property
    def default(self) -> LiteralDefault | GeneratorDefault | None:
        """Return the field's default, if any."""
        return self.definition.default_value


@dataclass(frozen=True)
class SchemaCheck:
    """Outcome of validating one document's metadata."""

    values: dict[str, object]
    errors: list[FieldError]
    invalid_fields: frozenset[str]

    @property
    def ok(self) -> bool:
        """Return whether the metadata satisfied the schema."""
        return not self.errors


@dataclass(frozen=True)
class CompiledSchema:
    """Closed, fail-soft validator for one document type."""

    fields: tuple[CompiledField, ...]

    @property
    def field_names(self) -> tuple[str, ...]:
        """Return declared field names in display order."""
        return tuple(compiled.name for compiled in self.fields)

    @property
    def unique_fields(self) -> tuple[str, ...]:
        """Return names of fields declared unique."""
        return tuple(compiled.name for compiled in self.fields if compiled.definition.unique)

    def get(self, name: str) -> CompiledField | None:
        """Return a compiled field by name."""
        for compiled in self.fields:
            if compiled.name == name:
                return compiled
        return None

    def validate(self, metadata: Mapping[str, object]) -> SchemaCheck:
        """Validate front matter against the schema.

        Absent optional fields with a default are validated against the
        materialized default; generator defaults run once per call.

        Args:
            metadata (Mapping[str, object]): Raw front matter.

        Returns:
            SchemaCheck: Coerced values of valid fields and every error found.
        """
        values: dict[str, object] = {}
        errors: list[FieldError] = []
        invalid: set[str] = set()

        for compiled in self.fields:
            raw = metadata.get(compiled.name)
            if raw is None:
                if compiled.definition.required:
                    errors.append(
                        FieldError(
                            code=ErrorCode.MISSING_REQUIRED_FIELD,
                            field=compiled.name,
                            message="Missing required field",
                        ),
                    )
                    invalid.add(compiled.name)
                    continue
                if compiled.default is None:
                    continue
                raw = compiled.default.resolve()

            check = compiled.validator.validate(compiled.name, raw)
            if check.ok:
                values[compiled.name] = check.value
            else:
                errors.extend(check.errors)
                invalid.add(compiled.name)

        declared = set(self.field_names)
        for key in metadata:
            if str(key) not in declared:
                errors.append(
                    FieldError(
                        code=ErrorCode.UNKNOWN_FIELD,
                        field=str(key),
                        message="Unknown field (not declared in the schema)",
                    ),
                )

        return SchemaCheck(values=values, errors=errors, invalid_fields=frozenset(invalid))

    def materialize_defaults(self, metadata: Mapping[str, object]) -> dict[str, object]:
        """Return a copy of `metadata` with defaults filled in for absent fields.

        Args:
            metadata (Mapping[str, object]): Front matter to complete.

        Returns:
            dict[str, object]: Front matter in schema order, then any extra keys.
        """
        completed: dict[str, object] = {}
        for compiled in self.fields:
            value = metadata.get(compiled.name)
            if value is None and compiled.default is not None:
                value = compiled.default.resolve()
            if value is not None:
                completed[compiled.name] = value
        for key, value in metadata.items():
            completed.setdefault(key, value)
        return completed


def _scalar_validator(name: str, definition: FieldDefinition) -> _ScalarValidator:
    """Build the base validator of a field and normalize its enum literals.

    Args:
        name (str): Field name.
        definition (FieldDefinition): Field definition.

    Raises:
        ConfigurationError: If an enum literal does not match the field type.

    Returns:
        _ScalarValidator: Scalar validator.
    """
    match definition.base_type:
        case BaseType.STRING:
            pattern = re.compile(definition.pattern) if definition.pattern is not None else None
            validator: _ScalarValidator = StringValidator(pattern=pattern, min_length=definition.min_length)
        case BaseType.NUMBER:
            validator = NumberValidator(minimum=definition.minimum_value)
        case BaseType.BOOLEAN:
            validator = BooleanValidator()
        case BaseType.DATE:
            validator = DateValidator()

    if definition.enum_values is None:
        return validator

    normalized: list[object] = []
    for literal in definition.enum_values:
        accepted, coerced = validator.coerce(literal)
        if not accepted:
            raise ConfigurationError(
                message=f"Invalid enum for field '{name}'",
                details=[f"{literal!r} is not a valid {definition.base_type.value} value"],
            )
        normalized.append(coerced)
    return replace(validator, enum_values=tuple(normalized))


def compile_field(name: str, definition: FieldDefinition) -> CompiledField:
    """Compile one field definition.

    Args:
        name (str): Field name.
        definition (FieldDefinition): Field definition.

    Raises:
        ConfigurationError: If the enum or literal default contradicts the field's own rules.

    Returns:
        CompiledField: Field bound to its validator.
    """
    scalar = _scalar_validator(name, definition)
    validator: ValueValidator = ArrayValidator(item=scalar) if definition.is_array else scalar

    if isinstance(definition.default_value, LiteralDefault):
        check = validator.validate(name, definition.default_value.resolve())
        if not check.ok:
            raise ConfigurationError(
                message=f"Invalid default for field '{name}'",
                details=[f"{error.field}: {error.message}" for error in check.errors],
            )

    return CompiledField(name=name, definition=definition, validator=validator)


def compile_schema(fields: Mapping[str, FieldDefinition]) -> CompiledSchema:
    """Compile a front matter schema, preserving field order.

    Args:
        fields (Mapping[str, FieldDefinition]): Field definitions by name.

    Returns:
        CompiledSchema: Executable validator.
    """
    return CompiledSchema(fields=tuple(compile_field(name, definition) for name, definition in fields.items()))
