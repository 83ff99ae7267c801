"""Markdown document discovery and front matter parsing."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import yaml

from folio import logger
from folio.concurrency import read_texts
from folio.exceptions import FrontMatterError
from folio.typing.models import Document, LoadedDocument, ParseFailure

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping
    from pathlib import Path

FRONT_MATTER_DELIMITER = "---"
MARKDOWN_SUFFIXES = (".md", ".mdx")


def split_front_matter(content: str) -> tuple[dict[str, Any], str]:
    """Split YAML front matter from the Markdown body.

    Files that do not open with a `---` line have no front matter.

    Args:
        content (str): Full file content.

    Raises:
        FrontMatterError: If the block is unterminated, invalid YAML, or not a mapping.

    Returns:
        tuple[dict[str, Any], str]: Metadata mapping and body text.
    """
    content = content.removeprefix("\ufeff")
    lines = content.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != FRONT_MATTER_DELIMITER:
        return {}, content

    end_idx = None
    for i, line in enumerate(lines[1:], 1):
        if line.rstrip() == FRONT_MATTER_DELIMITER:
            end_idx = i
            break
    if end_idx is None:
        raise FrontMatterError(message="Front matter block is not closed with '---'")

    try:
        raw = yaml.safe_load("".join(lines[1:end_idx]))
    except yaml.YAMLError as exc:
        raise FrontMatterError(message=f"Invalid YAML front matter: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise FrontMatterError(message="Front matter must be a key-value mapping")
    # YAML turns keys such as `on:` or `2024:` into bool and int
    metadata = {str(key): value for key, value in raw.items()}
    return metadata, "".join(lines[end_idx + 1 :])


def render_document(metadata: Mapping[str, object], body: str) -> str:
    """Serialize front matter and body back into a Markdown document.

    Args:
        metadata (Mapping[str, object]): Front matter, dumped in insertion order.
        body (str): Markdown body.

    Returns:
        str: Document content.
    """
    header = yaml.safe_dump(dict(metadata), sort_keys=False, allow_unicode=True) if metadata else ""
    return f"{FRONT_MATTER_DELIMITER}\n{header}{FRONT_MATTER_DELIMITER}\n{body}"


def list_markdown_files(directory: Path, *, exclude: Collection[str] = ()) -> list[Path]:
    """List Markdown files of a directory in filename order.

    Args:
        directory (Path): Directory to scan (missing directories yield nothing).
        exclude (Collection[str]): File names to skip, e.g. the index file.

    Returns:
        list[Path]: Markdown files.
    """
    if not directory.is_dir():
        return []
    return sorted(
        (
            path
            for path in directory.iterdir()
            if path.is_file() and path.suffix in MARKDOWN_SUFFIXES and path.name not in exclude
        ),
        key=lambda path: path.name,
    )


def parse_document(path: Path, content: str) -> LoadedDocument:
    """Build a document (or a parse failure) from raw file content.

    Args:
        path (Path): Source file.
        content (str): File content.

    Returns:
        LoadedDocument: Parsed document or parse failure.
    """
    try:
        metadata, body = split_front_matter(content)
    except FrontMatterError as exc:
        return ParseFailure(filename=path.name, absolute_path=path.resolve(), message=str(exc))
    return Document(filename=path.name, absolute_path=path.resolve(), metadata=metadata, body=body)


def load_documents(directory: Path, *, exclude: Collection[str] = ()) -> list[LoadedDocument]:
    """Read and parse every Markdown file of a directory.

    Unreadable or malformed files become `ParseFailure` entries so callers can
    keep processing the remaining documents.

    Args:
        directory (Path): Directory of one document type.
        exclude (Collection[str]): File names to skip.

    Returns:
        list[LoadedDocument]: Documents in listing order.
    """
    paths = list_markdown_files(directory, exclude=exclude)
    loaded: list[LoadedDocument] = []
    for path, content in zip(paths, read_texts(paths), strict=True):
        if isinstance(content, Exception):
            loaded.append(
                ParseFailure(
                    filename=path.name,
                    absolute_path=path.resolve(),
                    message=f"Could not read file: {content}",
                ),
            )
            continue
        loaded.append(parse_document(path, content))

    failures = sum(1 for item in loaded if isinstance(item, ParseFailure))
    logger.debug("Documents loaded", extra={"directory": str(directory), "count": len(loaded), "failures": failures})
    return loaded
