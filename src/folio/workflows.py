"""Document creation and lifecycle workflows that keep indexes in sync."""

from __future__ import annotations

import re
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

from folio import logger
from folio.document_loader import load_documents
from folio.exceptions import (
    ConfigurationError,
    ConfirmationRequiredError,
    DocumentNotFoundError,
    DocumentWriteError,
    IndexWriteError,
    InvalidFieldValueError,
)
from folio.files import (
    move_document,
    next_sequence_number,
    read_template,
    render_template,
    rewrite_document,
    sequential_filename,
    write_new_document,
)
from folio.indexing import sync_index
from folio.typing.enums import BaseType
from folio.typing.models import (
    DeprecationResult,
    Document,
    ParseFailure,
    RenumberResult,
    RenumberStep,
    StatusChange,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from folio.config_loader import Project
    from folio.schema_compiler import CompiledField

_DATE_FIELDS_TOUCHED_ON_STATUS = ("dateModified", "date", "updated_at")
_DEPRECATED = "deprecated"
_NUMBER_PREFIX = re.compile(r"^(\d+)")
_NUMBER_PREFIX_WITH_SEPARATOR = re.compile(r"^\d+[-\s]*")
_RENUMBER_SUFFIX = ".renumber-tmp"


def _sync_after_change(project: Project, type_name: str) -> None:
    """Refresh a type's index, reporting write failures without failing the workflow."""
    try:
        sync_index(project, type_name)
    except IndexWriteError as exc:
        logger.warning("Could not update the index file", extra={"type": type_name, "error": str(exc)})


def _check_value(compiled: CompiledField, value: object) -> None:
    check = compiled.validator.validate(compiled.name, value)
    if not check.ok:
        raise InvalidFieldValueError(
            field_name=compiled.name,
            value=value,
            reasons=[error.message for error in check.errors],
        )


def _coerce_identifier(compiled: CompiledField, raw: str) -> object:
    if compiled.definition.base_type == BaseType.NUMBER:
        try:
            return int(raw)
        except ValueError:
            return raw
    return raw


def _sequence_identifier(compiled: CompiledField, number: int) -> object:
    if compiled.definition.base_type == BaseType.NUMBER:
        return number
    return f"{number:04d}"


def create_document(
    project: Project,
    type_name: str,
    title: str,
    *,
    document_id: str | None = None,
    today: date | None = None,
) -> Path:
    """Create the next sequentially numbered document of a type from its template.

    Args:
        project (Project): Loaded project.
        type_name (str): Document type name.
        title (str): Document title.
        document_id (str | None): Explicit identifier; the sequence number is used otherwise.
        today (date | None): Creation date, defaults to the current date.

    Raises:
        InvalidFieldValueError: If the explicit identifier does not satisfy the `id` field.

    Returns:
        Path: Created file.
    """
    doc_type = project.document_type(type_name)
    schema = project.schema(type_name)
    type_dir = project.type_dir(type_name)
    number = next_sequence_number(type_dir)

    metadata: dict[str, object] = {}
    id_field = schema.get("id")
    if id_field is not None:
        if document_id is not None:
            metadata["id"] = _coerce_identifier(id_field, document_id)
            _check_value(id_field, metadata["id"])
        else:
            metadata["id"] = _sequence_identifier(id_field, number)
    if schema.get("title") is not None:
        metadata["title"] = title
    date_field = schema.get("date")
    if date_field is not None and date_field.definition.base_type == BaseType.DATE:
        metadata["date"] = (today or date.today()).isoformat()  # noqa: DTZ011
    metadata = schema.materialize_defaults(metadata)

    template = read_template(project.templates_dir, doc_type.template)
    body = render_template(template, {**metadata, "title": title})
    path = write_new_document(type_dir / sequential_filename(number, title), metadata, body)
    logger.info("Document created", extra={"type": type_name, "path": str(path)})

    _sync_after_change(project, type_name)
    return path


def list_documents(project: Project, type_name: str, filters: Mapping[str, str] | None = None) -> list[Document]:
    """Return parsed documents of a type whose front matter matches every filter.

    Values are compared as strings; documents lacking a filtered key never match.

    Args:
        project (Project): Loaded project.
        type_name (str): Document type name.
        filters (Mapping[str, str] | None): Expected values by field name.

    Returns:
        list[Document]: Matching documents in listing order.
    """
    index_name = project.config.indexing.filename
    documents = [
        item
        for item in load_documents(project.type_dir(type_name), exclude={index_name})
        if isinstance(item, Document)
    ]
    for key, expected in (filters or {}).items():
        documents = [
            document
            for document in documents
            if document.metadata.get(key) is not None and str(document.metadata[key]) == expected
        ]
    return documents


def find_document(project: Project, type_name: str, document_id: str) -> Document:
    """Find a document of a type by its `id` front matter value.

    Args:
        project (Project): Loaded project.
        type_name (str): Document type name.
        document_id (str): Identifier, compared as a string.

    Raises:
        DocumentNotFoundError: If no document has that identifier.

    Returns:
        Document: Matching document.
    """
    for document in list_documents(project, type_name):
        value = document.metadata.get("id")
        if value is not None and str(value) == document_id:
            return document
    raise DocumentNotFoundError(type_name=type_name, document_id=document_id)


def update_status(
    project: Project,
    type_name: str,
    document_id: str,
    new_status: str,
    *,
    today: date | None = None,
) -> StatusChange:
    """Set the `status` of a document and refresh the type's index.

    The first declared field among `dateModified`, `date` and `updated_at`
    is set to today's date as well.

    Args:
        project (Project): Loaded project.
        type_name (str): Document type name.
        document_id (str): Identifier of the document.
        new_status (str): Status to set.
        today (date | None): Date written to the touched date field.

    Raises:
        ConfigurationError: If the type declares no `status` field.

    Returns:
        StatusChange: Applied change.
    """
    schema = project.schema(type_name)
    status_field = schema.get("status")
    if status_field is None:
        raise ConfigurationError(message=f"Document type '{type_name}' does not declare a 'status' field")
    _check_value(status_field, new_status)

    document = find_document(project, type_name, document_id)
    metadata = dict(document.metadata)
    previous = metadata.get("status")
    metadata["status"] = new_status

    touched = next((name for name in _DATE_FIELDS_TOUCHED_ON_STATUS if schema.get(name) is not None), None)
    if touched is not None:
        metadata[touched] = (today or date.today()).isoformat()  # noqa: DTZ011

    rewrite_document(document.absolute_path, metadata, document.body)
    logger.info(
        "Status updated",
        extra={"type": type_name, "id": document_id, "previous": previous, "current": new_status},
    )
    _sync_after_change(project, type_name)
    return StatusChange(path=document.absolute_path, previous=previous, current=new_status, touched_date_field=touched)


def find_decision_type(project: Project) -> str:
    """Return the document type holding architecture decision records.

    Args:
        project (Project): Loaded project.

    Raises:
        ConfigurationError: If no type looks like an ADR type.

    Returns:
        str: Type name.
    """
    if "adr" in project.config.types:
        return "adr"
    for type_name, doc_type in project.config.types.items():
        if "adr" in doc_type.path.lower() or "adr" in doc_type.template.lower():
            return type_name
    raise ConfigurationError(message="No ADR document type found in configuration")


def _deprecated_status(compiled: CompiledField | None) -> str:
    if compiled is not None and compiled.definition.enum_values is not None:
        for value in compiled.definition.enum_values:
            if isinstance(value, str) and value.lower() == _DEPRECATED:
                return value
    return _DEPRECATED


def deprecate_document(  # noqa: PLR0913
    project: Project,
    document_id: str,
    *,
    type_name: str | None = None,
    reason: str | None = None,
    superseded_by: str | None = None,
    dry_run: bool = False,
    today: date | None = None,
) -> DeprecationResult:
    """Mark a decision record as deprecated.

    Only fields declared by the type's schema are written; the others are
    reported in `skipped_fields`.

    Args:
        project (Project): Loaded project.
        document_id (str): Identifier of the record.
        type_name (str | None): Document type, the ADR type when omitted.
        reason (str | None): Deprecation reason.
        superseded_by (str | None): Identifier of the replacing record.
        dry_run (bool): Report the planned updates without writing.
        today (date | None): Deprecation date.

    Returns:
        DeprecationResult: Planned or applied updates.
    """
    resolved_type = type_name or find_decision_type(project)
    schema = project.schema(resolved_type)
    document = find_document(project, resolved_type, document_id)

    status_value = _deprecated_status(schema.get("status"))
    current = document.metadata.get("status")
    if isinstance(current, str) and current.lower() == _DEPRECATED:
        logger.warning("Document is already deprecated", extra={"type": resolved_type, "id": document_id})
        return DeprecationResult(path=document.absolute_path, changed=False, dry_run=dry_run, already_deprecated=True)

    candidates: dict[str, object] = {
        "status": status_value,
        "deprecated_date": (today or date.today()).isoformat(),  # noqa: DTZ011
    }
    if reason:
        candidates["deprecation_reason"] = reason
    if superseded_by:
        candidates["superseded_by"] = superseded_by

    updates = {name: value for name, value in candidates.items() if schema.get(name) is not None}
    skipped = [name for name in candidates if name not in updates]
    result = DeprecationResult(
        path=document.absolute_path,
        changed=not dry_run,
        dry_run=dry_run,
        updates=updates,
        skipped_fields=skipped,
    )
    if dry_run:
        return result

    rewrite_document(document.absolute_path, {**document.metadata, **updates}, document.body)
    logger.info("Document deprecated", extra={"type": resolved_type, "id": document_id, "skipped": skipped})
    _sync_after_change(project, resolved_type)
    return result


def _numbered_documents(project: Project, type_name: str) -> list[Document]:
    """Return the documents whose filename starts with a number, in numeric order.

    Raises:
        DocumentWriteError: If a numbered file cannot be parsed.
    """
    index_name = project.config.indexing.filename
    numbered: list[tuple[int, Document]] = []
    for item in load_documents(project.type_dir(type_name), exclude={index_name}):
        match = _NUMBER_PREFIX.match(item.filename)
        if match is None:
            continue
        if isinstance(item, ParseFailure):
            raise DocumentWriteError(message=f"Cannot renumber '{item.filename}': {item.message}")
        numbered.append((int(match.group(1)), item))
    numbered.sort(key=lambda pair: pair[0])
    return [document for _, document in numbered]


def _renumbered_filename(document: Document, number: int) -> str:
    title = document.metadata.get("title")
    base = title if isinstance(title, str) and title.strip() else Path(document.filename).stem
    name = sequential_filename(number, _NUMBER_PREFIX_WITH_SEPARATOR.sub("", base))
    return name.removesuffix(".md") + Path(document.filename).suffix


def renumber_documents(
    project: Project,
    *,
    type_name: str | None = None,
    start_from: int = 1,
    dry_run: bool = False,
    force: bool = False,
) -> RenumberResult:
    """Give the numbered documents of a type consecutive numbers.

    Files are renamed to `NNNN-<slug>` in their current numeric order and the
    `id` field, when declared, is rewritten to match. Renames go through
    temporary names so that swapped numbers never collide.

    Args:
        project (Project): Loaded project.
        type_name (str | None): Document type, the ADR type when omitted.
        start_from (int): Number given to the first document.
        dry_run (bool): Report the planned renames without touching files.
        force (bool): Confirm the renames; required unless `dry_run` is set.

    Raises:
        InvalidFieldValueError: If `start_from` is lower than 1.
        ConfirmationRequiredError: If neither `force` nor `dry_run` is set.

    Returns:
        RenumberResult: Planned or applied steps.
    """
    if start_from < 1:
        raise InvalidFieldValueError(field_name="start_from", value=start_from, reasons=["Must be at least 1"])
    if not (force or dry_run):
        raise ConfirmationRequiredError(
            message="Renumbering renames every numbered file and may break links; use --force or --dry-run",
        )

    resolved_type = type_name or find_decision_type(project)
    id_field = project.schema(resolved_type).get("id")
    documents = _numbered_documents(project, resolved_type)

    steps: list[RenumberStep] = []
    for offset, document in enumerate(documents):
        number = start_from + offset
        target = _renumbered_filename(document, number)
        previous_id = document.metadata.get("id")
        new_id = _sequence_identifier(id_field, number) if id_field is not None else previous_id
        if target == document.filename and new_id == previous_id:
            continue
        steps.append(RenumberStep(source=document.filename, target=target, previous_id=previous_id, new_id=new_id))

    result = RenumberResult(type_name=resolved_type, dry_run=dry_run, total=len(documents), steps=steps)
    if dry_run or not steps:
        return result

    type_dir = project.type_dir(resolved_type)
    staged: dict[str, Path] = {}
    for step in steps:
        source = type_dir / step.source
        if step.source == step.target:
            staged[step.source] = source
        else:
            staged[step.source] = move_document(source, source.with_name(f"{source.name}{_RENUMBER_SUFFIX}"))

    documents_by_name = {document.filename: document for document in documents}
    for step in steps:
        document = documents_by_name[step.source]
        metadata = dict(document.metadata)
        if id_field is not None:
            metadata["id"] = step.new_id
        path = rewrite_document(staged[step.source], metadata, document.body)
        if step.source != step.target:
            move_document(path, type_dir / step.target)
        logger.info("Document renumbered", extra={"type": resolved_type, "source": step.source, "target": step.target})

    _sync_after_change(project, resolved_type)
    return result
