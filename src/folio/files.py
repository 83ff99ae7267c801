"""Filesystem helpers for creating and rewriting documents."""

from __future__ import annotations

import re
from datetime import date
from typing import TYPE_CHECKING

import jinja2

from folio.document_loader import render_document
from folio.exceptions import DocumentWriteError, TemplateError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

_SEQUENCE_PREFIX = re.compile(r"^(\d+)-")


def slugify(text: str) -> str:
    """Convert text into a lowercase, URL-safe slug.

    Args:
        text (str): Input text, e.g. `This is a Test!`.

    Returns:
        str: Slug, e.g. `this-is-a-test`.
    """
    slug = text.lower().strip()
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"[^\w\-.]+", "", slug, flags=re.ASCII)
    slug = re.sub(r"--+", "-", slug)
    return slug.strip("-")


def next_sequence_number(directory: Path) -> int:
    """Return the number following the highest `NNNN-` filename prefix.

    Args:
        directory (Path): Directory of one document type.

    Returns:
        int: Next sequence number, starting at 1.
    """
    if not directory.is_dir():
        return 1
    highest = 0
    for path in directory.iterdir():
        match = _SEQUENCE_PREFIX.match(path.name)
        if match:
            highest = max(highest, int(match.group(1)))
    return highest + 1


def sequential_filename(number: int, title: str) -> str:
    """Build a zero-padded document filename.

    Args:
        number (int): Sequence number.
        title (str): Document title.

    Returns:
        str: Filename such as `0005-my-new-adr.md`.
    """
    slug = slugify(title) or "untitled"
    return f"{number:04d}-{slug}.md"


def read_template(templates_dir: Path, template_name: str) -> str:
    """Read a document template.

    Args:
        templates_dir (Path): Directory holding templates.
        template_name (str): Template file name.

    Raises:
        TemplateError: If the template is missing or unreadable.

    Returns:
        str: Template text.
    """
    template_path = templates_dir / template_name
    try:
        return template_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise TemplateError(message=f"Template file not found at '{template_path}'") from exc
    except OSError as exc:
        raise TemplateError(message=f"Failed to read template file '{template_name}': {exc}") from exc


def _template_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(_template_text(item) for item in value)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def render_template(template: str, context: Mapping[str, object]) -> str:
    """Render a Jinja template; unknown names render empty.

    Values are formatted before rendering: lists are joined with `, ` and
    dates are ISO formatted.

    Args:
        template (str): Template text.
        context (Mapping[str, object]): Values by name.

    Raises:
        TemplateError: If the template cannot be rendered.

    Returns:
        str: Rendered text.
    """
    values = {name: _template_text(value) for name, value in context.items()}
    try:
        return jinja2.Template(template, keep_trailing_newline=True).render(values)
    except jinja2.TemplateError as exc:
        raise TemplateError(message=f"Failed to render template: {exc}") from exc


def write_new_document(path: Path, metadata: Mapping[str, object], body: str) -> Path:
    """Create a document file, refusing to overwrite an existing one.

    Args:
        path (Path): Target file.
        metadata (Mapping[str, object]): Front matter.
        body (str): Markdown body.

    Raises:
        DocumentWriteError: If the file exists or cannot be written.

    Returns:
        Path: Written file.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("x", encoding="utf-8") as handle:
            handle.write(render_document(metadata, body))
    except FileExistsError as exc:
        raise DocumentWriteError(message=f"A file named '{path.name}' already exists in this directory") from exc
    except OSError as exc:
        raise DocumentWriteError(message=f"Failed to write file at '{path}': {exc}") from exc
    return path


def rewrite_document(path: Path, metadata: Mapping[str, object], body: str) -> Path:
    """Replace the front matter of an existing document, keeping its body.

    Args:
        path (Path): Document file.
        metadata (Mapping[str, object]): New front matter.
        body (str): Existing body.

    Raises:
        DocumentWriteError: If the file cannot be written.

    Returns:
        Path: Written file.
    """
    try:
        path.write_text(render_document(metadata, body), encoding="utf-8")
    except OSError as exc:
        raise DocumentWriteError(message=f"Failed to write file at '{path}': {exc}") from exc
    return path


def move_document(source: Path, target: Path) -> Path:
    """Rename a document file.

    Args:
        source (Path): Current file.
        target (Path): New file path.

    Raises:
        DocumentWriteError: If the file cannot be renamed.

    Returns:
        Path: New file path.
    """
    try:
        source.rename(target)
    except OSError as exc:
        raise DocumentWriteError(message=f"Failed to rename '{source.name}' to '{target.name}': {exc}") from exc
    return target
