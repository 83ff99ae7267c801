"""Generate and merge the machine-owned index region of a document type.

An index file is split into three parts: the human-owned prefix, the region
between `START_MARKER` and `END_MARKER`, and the human-owned suffix. Only the
region is ever regenerated.
"""

from __future__ import annotations

import re
from datetime import date
from typing import TYPE_CHECKING
from urllib.parse import quote

from folio import logger
from folio.concurrency import path_lock
from folio.document_loader import load_documents
from folio.exceptions import IndexWriteError
from folio.typing.enums import IndexFormat
from folio.typing.models import IndexEntry, IndexSyncResult, ParseFailure

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from folio.config_loader import Project
    from folio.typing.models import IndexingConfig, LoadedDocument

START_MARKER = "<!-- FOLIO:INDEX:START -->"
END_MARKER = "<!-- FOLIO:INDEX:END -->"
EMPTY_PLACEHOLDER = "No documents found for this type."
MISSING_VALUE = "N/A"


def collect_entries(documents: Sequence[LoadedDocument]) -> list[IndexEntry]:
    """Turn loaded documents into index entries.

    Args:
        documents (Sequence[LoadedDocument]): Documents in listing order.

    Returns:
        list[IndexEntry]: One entry per document; unparsable ones carry no metadata.
    """
    entries: list[IndexEntry] = []
    for item in documents:
        if isinstance(item, ParseFailure):
            logger.warning(
                "Indexing document without front matter",
                extra={"file": item.filename, "reason": item.message},
            )
            entries.append(IndexEntry(filename=item.filename))
            continue
        entries.append(IndexEntry(filename=item.filename, metadata=item.metadata))
    return entries


def _id_sort_key(value: object) -> tuple[int, object]:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return (0, value)
    return (1, format_cell(value))


def sort_entries(entries: Sequence[IndexEntry]) -> list[IndexEntry]:
    """Sort entries by `id` when every entry has one, else keep listing order.

    Args:
        entries (Sequence[IndexEntry]): Entries in listing order.

    Returns:
        list[IndexEntry]: Ordered entries.
    """
    if entries and all(entry.metadata.get("id") is not None for entry in entries):
        return sorted(entries, key=lambda entry: _id_sort_key(entry.metadata["id"]))
    return list(entries)


def format_cell(value: object) -> str:
    """Render a front matter value as single-line Markdown text.

    Args:
        value (object): Raw value.

    Returns:
        str: Display text.
    """
    if value is None:
        return MISSING_VALUE
    if isinstance(value, list):
        return ", ".join(format_cell(item) for item in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    text = value.isoformat() if isinstance(value, date) else str(value)
    return " ".join(text.splitlines()).replace("|", "\\|")


def _link(label: str, filename: str) -> str:
    escaped = label.replace("[", "\\[").replace("]", "\\]")
    return f"[{escaped}]({quote(filename)})"


def render_table(entries: Sequence[IndexEntry], columns: Sequence[str]) -> str:
    """Render entries as a Markdown table.

    The `title` column (or the first column when there is none) links to the document.

    Args:
        entries (Sequence[IndexEntry]): Ordered entries.
        columns (Sequence[str]): Front matter keys used as columns.

    Returns:
        str: Markdown table.
    """
    link_column = "title" if "title" in columns else columns[0]
    lines = [
        f"| {' | '.join(columns)} |",
        f"| {' | '.join('---' for _ in columns)} |",
    ]
    for entry in entries:
        cells = []
        for column in columns:
            text = format_cell(entry.metadata.get(column))
            cells.append(_link(text, entry.filename) if column == link_column else text)
        lines.append(f"| {' | '.join(cells)} |")
    return "\n".join(lines)


def render_list(entries: Sequence[IndexEntry]) -> str:
    """Render entries as a Markdown bullet list.

    Args:
        entries (Sequence[IndexEntry]): Ordered entries.

    Returns:
        str: Markdown list.
    """
    lines = []
    for entry in entries:
        title = entry.metadata.get("title")
        label = format_cell(title) if title is not None else entry.filename
        status = entry.metadata.get("status")
        suffix = f" (Status: {format_cell(status)})" if status is not None and status != "" else ""
        lines.append(f"- {_link(label, entry.filename)}{suffix}")
    return "\n".join(lines)


def render_region(entries: Sequence[IndexEntry], indexing: IndexingConfig) -> str:
    """Render the complete marker-wrapped index region.

    Args:
        entries (Sequence[IndexEntry]): Ordered entries.
        indexing (IndexingConfig): Rendering configuration.

    Returns:
        str: Region including both markers.
    """
    if not entries:
        body = EMPTY_PLACEHOLDER
    elif indexing.format == IndexFormat.LIST:
        body = render_list(entries)
    else:
        body = render_table(entries, indexing.columns)
    return f"{START_MARKER}\n\n{body}\n\n{END_MARKER}"


def split_region(content: str) -> tuple[str, str, str] | None:
    """Split content into `(prefix, region, suffix)` around the marker pair.

    The region starts at the first start marker and ends at the first end
    marker after it. End markers ahead of the start marker belong to the prefix.

    Args:
        content (str): Index file content.

    Returns:
        tuple[str, str, str] | None: The three parts, or None without a marker pair.
    """
    start = content.find(START_MARKER)
    if start == -1:
        return None
    end = content.find(END_MARKER, start + len(START_MARKER))
    if end == -1:
        return None
    end += len(END_MARKER)
    return content[:start], content[start:end], content[end:]


def merge_region(existing: str, region: str) -> str:
    """Merge a freshly rendered region into existing index content.

    Args:
        existing (str): Current file content.
        region (str): Region including both markers.

    Returns:
        str: New file content; text outside the markers is left untouched.
    """
    parts = split_region(existing)
    if parts is not None:
        prefix, _, suffix = parts
        return f"{prefix}{region}{suffix}"
    if not existing:
        return f"{region}\n"
    separator = "\n" if existing.endswith("\n") else "\n\n"
    return f"{existing}{separator}{region}\n"


def index_title(type_path: str) -> str:
    """Derive an index heading from a type's configured path.

    Args:
        type_path (str): Configured path, e.g. `architecture-decisions`.

    Returns:
        str: Title, e.g. `Architecture Decisions`.
    """
    spaced = re.sub(r"[-_]", " ", type_path)
    return re.sub(r"\b\w", lambda match: match.group(0).upper(), spaced)


def new_index_content(type_path: str, region: str) -> str:
    """Build a brand-new index file around a region.

    Args:
        type_path (str): Configured path of the type.
        region (str): Region including both markers.

    Returns:
        str: File content.
    """
    return f"# Index of {index_title(type_path)}\n\n{region}\n"


def _read_existing(path: Path) -> str | None:
    try:
        with path.open("r", encoding="utf-8", newline="") as handle:
            return handle.read()
    except FileNotFoundError:
        return None


def sync_index(project: Project, type_name: str) -> Path:
    """Regenerate the index region of one document type.

    Args:
        project (Project): Loaded project.
        type_name (str): Document type name.

    Raises:
        IndexWriteError: If the index file cannot be read or written.

    Returns:
        Path: Index file path.
    """
    doc_type = project.document_type(type_name)
    index_path = project.index_path(type_name)
    documents = load_documents(project.type_dir(type_name), exclude={index_path.name})
    region = render_region(sort_entries(collect_entries(documents)), project.config.indexing)

    with path_lock(index_path):
        try:
            existing = _read_existing(index_path)
            content = new_index_content(doc_type.path, region) if existing is None else merge_region(existing, region)
            index_path.parent.mkdir(parents=True, exist_ok=True)
            with index_path.open("w", encoding="utf-8", newline="") as handle:
                handle.write(content)
        except (OSError, UnicodeDecodeError) as exc:
            raise IndexWriteError(path=str(index_path), exc=exc) from exc

    logger.info("Index updated", extra={"type": type_name, "index_path": str(index_path), "documents": len(documents)})
    return index_path


def sync_indexes(project: Project, type_names: Sequence[str] | None = None) -> IndexSyncResult:
    """Regenerate the index regions of several types.

    A write failure only affects its own type; the remaining types are still processed.

    Args:
        project (Project): Loaded project.
        type_names (Sequence[str] | None): Types to index, all configured types when omitted.

    Returns:
        IndexSyncResult: Updated paths and failures by type.
    """
    result = IndexSyncResult()
    names = list(type_names) if type_names is not None else project.type_names
    for type_name in names:
        try:
            result.updated[type_name] = sync_index(project, type_name)
        except IndexWriteError as exc:
            logger.exception("Index update failed", extra={"type": type_name})
            result.failed[type_name] = str(exc)
    return result
