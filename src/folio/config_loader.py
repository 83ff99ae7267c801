"""Project configuration discovery, validation and schema compilation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import ValidationError

from folio import logger
from folio.exceptions import ConfigurationError, UnknownDocumentTypeError
from folio.schema_compiler import CompiledSchema, compile_schema
from folio.typing.models import DocumentTypeConfig, FolioConfig

if TYPE_CHECKING:
    from collections.abc import Mapping

CONFIG_FILENAMES = ("folio.yaml", "folio.yml", ".folio.yaml")
TEMPLATES_DIRNAME = "_templates"


@dataclass(frozen=True)
class Project:
    """Validated configuration bound to its location on disk."""

    config: FolioConfig
    config_path: Path
    schemas: dict[str, CompiledSchema]

    @property
    def base_dir(self) -> Path:
        """Return the directory holding the configuration file."""
        return self.config_path.parent

    @property
    def docs_root(self) -> Path:
        """Return the documentation root directory."""
        return self.base_dir / self.config.root

    @property
    def templates_dir(self) -> Path:
        """Return the directory holding document templates."""
        return self.docs_root / TEMPLATES_DIRNAME

    @property
    def type_names(self) -> list[str]:
        """Return configured document type names in declaration order."""
        return list(self.config.types)

    def document_type(self, type_name: str) -> DocumentTypeConfig:
        """Return the configuration of a document type.

        Args:
            type_name (str): Document type name.

        Raises:
            UnknownDocumentTypeError: If the type is not configured.

        Returns:
            DocumentTypeConfig: Type configuration.
        """
        doc_type = self.config.types.get(type_name)
        if doc_type is None:
            raise UnknownDocumentTypeError(type_name=type_name, available=self.type_names)
        return doc_type

    def schema(self, type_name: str) -> CompiledSchema:
        """Return the compiled schema of a document type.

        Args:
            type_name (str): Document type name.

        Raises:
            UnknownDocumentTypeError: If the type is not configured.

        Returns:
            CompiledSchema: Compiled validator.
        """
        compiled = self.schemas.get(type_name)
        if compiled is None:
            raise UnknownDocumentTypeError(type_name=type_name, available=self.type_names)
        return compiled

    def type_dir(self, type_name: str) -> Path:
        """Return the directory holding documents of a type."""
        return self.docs_root / self.document_type(type_name).path

    def index_path(self, type_name: str) -> Path:
        """Return the index file path of a type."""
        return self.type_dir(type_name) / self.config.indexing.filename


def find_config_file(start: Path | None = None) -> Path:
    """Search for a configuration file from `start` up to the filesystem root.

    Args:
        start (Path | None): Starting directory, defaults to the working directory.

    Raises:
        ConfigurationError: If no configuration file is found.

    Returns:
        Path: Configuration file path.
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        for name in CONFIG_FILENAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    raise ConfigurationError(
        message=(
            f"Could not find a Folio configuration file ({', '.join(CONFIG_FILENAMES)}) in {current} or its parents"
        ),
    )


def _load_yaml_file(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise ConfigurationError(message=f"Config file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(message=f"Failed to read YAML config: {path}", details=[str(exc)]) from exc

    if not isinstance(data, dict):
        raise ConfigurationError(message=f"Top-level YAML must be a mapping: {path}")

    return data


def _format_validation_error(exc: ValidationError) -> list[str]:
    return [f"{'.'.join(str(part) for part in error['loc']) or '.'}: {error['msg']}" for error in exc.errors()]


def build_project(payload: Mapping[str, Any], config_path: Path) -> Project:
    """Validate a raw configuration payload and compile every type schema.

    Args:
        payload (Mapping[str, Any]): Parsed configuration.
        config_path (Path): File the payload came from.

    Raises:
        ConfigurationError: If the configuration or any schema is invalid.

    Returns:
        Project: Ready-to-use project.
    """
    try:
        config = FolioConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(
            message=f"Invalid configuration in {config_path}",
            details=_format_validation_error(exc),
        ) from exc

    schemas: dict[str, CompiledSchema] = {}
    for type_name, doc_type in config.types.items():
        try:
            schemas[type_name] = compile_schema(doc_type.frontmatter)
        except ConfigurationError as exc:
            raise ConfigurationError(
                message=f"Invalid schema for type '{type_name}' in {config_path}",
                details=[exc.message, *exc.details],
            ) from exc

    return Project(config=config, config_path=config_path, schemas=schemas)


def load_config(path: Path | None = None, *, cwd: Path | None = None) -> Project:
    """Find, load and validate the project configuration.

    Args:
        path (Path | None): Explicit configuration file; searched for when omitted.
        cwd (Path | None): Directory the search starts from.

    Returns:
        Project: Loaded project.
    """
    config_path = (path or find_config_file(cwd)).resolve()
    project = build_project(_load_yaml_file(config_path), config_path)
    logger.info("Configuration loaded", extra={"config_path": str(config_path), "types": project.type_names})
    return project
