"""Schema-centric domain models."""

from __future__ import annotations

import re
import uuid
from collections.abc import Callable
from copy import deepcopy
from datetime import UTC, date, datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from folio.typing.enums import BaseType

EnumLiteral = str | bool | int | float | date


def _today() -> str:
    return date.today().isoformat()  # noqa: DTZ011


def _now() -> str:
    return datetime.now(tz=UTC).isoformat(timespec="seconds")


def _uuid() -> str:
    return str(uuid.uuid4())


GENERATORS: dict[str, Callable[[], object]] = {
    "today": _today,
    "now": _now,
    "uuid": _uuid,
}


class LiteralDefault(BaseModel):
    """Default value used verbatim when a field is absent."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["literal"] = "literal"
    value: Any

    def resolve(self) -> object:
        """Return a private copy of the literal.

        Returns:
            object: Default value.
        """
        return deepcopy(self.value)


class GeneratorDefault(BaseModel):
    """Default value produced by a zero-argument factory at validation time."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["generator"] = "generator"
    name: str = "custom"
    factory: Callable[[], Any]

    @classmethod
    def from_name(cls, name: str) -> GeneratorDefault:
        """Build a generator default from a built-in generator name.

        Args:
            name (str): Generator name, e.g. `today`.

        Raises:
            ValueError: If the generator is unknown.

        Returns:
            GeneratorDefault: Resolved generator default.
        """
        factory = GENERATORS.get(name)
        if factory is None:
            supported = ", ".join(sorted(GENERATORS))
            message = f"Unknown default generator '{name}'. Expected one of: {supported}"
            raise ValueError(message)
        return cls(name=name, factory=factory)

    def resolve(self) -> object:
        """Invoke the factory.

        Returns:
            object: Generated value.
        """
        return self.factory()


DefaultValue = Annotated[LiteralDefault | GeneratorDefault, Field(discriminator="kind")]


class FieldDefinition(BaseModel):
    """Declarative rules for one front matter field."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    base_type: BaseType = Field(alias="type")
    required: bool = False
    unique: bool = False
    is_array: bool = Field(default=False, alias="isArray")
    enum_values: tuple[EnumLiteral, ...] | None = Field(default=None, alias="enum")
    pattern: str | None = None
    min_length: int | None = Field(default=None, alias="minLength", ge=0)
    minimum_value: int | float | None = Field(default=None, alias="minimum")
    default_value: DefaultValue | None = Field(default=None, alias="default")

    @field_validator("default_value", mode="before")
    @classmethod
    def _wrap_default(cls, value: object) -> object:
        """Turn raw configuration defaults into a literal or generator variant.

        Args:
            value (object): Raw `default` entry.

        Returns:
            object: Tagged default payload.
        """
        if value is None or isinstance(value, LiteralDefault | GeneratorDefault):
            return value
        if isinstance(value, dict) and set(value) == {"generate"}:
            return GeneratorDefault.from_name(str(value["generate"]))
        if callable(value):
            return GeneratorDefault(name=getattr(value, "__name__", "custom"), factory=value)
        return LiteralDefault(value=value)

    @model_validator(mode="after")
    def _check_constraints(self) -> FieldDefinition:
        """Reject constraint combinations that cannot apply to the base type.

        Raises:
            ValueError: If a constraint does not fit the field type.

        Returns:
            FieldDefinition: Validated definition.
        """
        if self.pattern is not None:
            if self.base_type != BaseType.STRING:
                raise ValueError("'pattern' is only allowed on string fields")  # noqa: TRY003
            try:
                re.compile(self.pattern)
            except re.error as exc:
                message = f"Invalid 'pattern' {self.pattern!r}: {exc}"
                raise ValueError(message) from exc
        if self.min_length is not None and self.base_type != BaseType.STRING:
            raise ValueError("'minLength' is only allowed on string fields")  # noqa: TRY003
        if self.minimum_value is not None and self.base_type != BaseType.NUMBER:
            raise ValueError("'minimum' is only allowed on number fields")  # noqa: TRY003
        if self.enum_values is not None and not self.enum_values:
            raise ValueError("'enum' must list at least one value")  # noqa: TRY003
        return self


FrontmatterSchema = dict[str, FieldDefinition]
