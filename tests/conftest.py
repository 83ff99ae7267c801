"""Pytest marker auto-assignment by folder and shared project fixtures."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from folio import logger
from folio.config_loader import load_config

ADR_CONFIG = dedent(
    """\
    root: docs
    indexing:
      columns: [id, title, status]
      format: table
      filename: index.md
    types:
      adr:
        path: adr
        template: adr.md
        frontmatter:
          id: {type: number, required: true, unique: true}
          title: {type: string, required: true, minLength: 5}
          status:
            type: string
            enum: [proposed, accepted, deprecated]
            default: proposed
          date: {type: date, default: {generate: today}}
          deprecated_date: {type: date}
          superseded_by: {type: string}
    """,
)

ADR_TEMPLATE = "# {{ title }}\n\n## Context\n\n## Decision\n"


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    """Mark collected tests located under tests/<marker>/."""
    target_dir = Path(config.rootpath) / "tests" / marker
    target_dir = target_dir.resolve()

    for item in items:
        try:
            path = Path(str(item.fspath)).resolve()
        except OSError:
            logger.warning(
                f"Could not resolve path for test item {item.name!s}; skipping {marker!s} marker assignment",
            )
            continue

        if path == target_dir or target_dir in path.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Apply directory-based markers to test items."""
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")


def _write_adr(directory: Path, filename: str, front_matter: str, body: str = "Body.\n") -> Path:
    path = directory / filename
    path.write_text(f"---\n{front_matter}---\n{body}", encoding="utf-8")
    return path


@pytest.fixture
def write_adr():
    """Return a helper writing a Markdown document with raw YAML front matter."""
    return _write_adr


@pytest.fixture
def adr_project_dir(tmp_path: Path) -> Path:
    """Create a project with an `adr` type, its template and an empty type directory."""
    (tmp_path / "folio.yaml").write_text(ADR_CONFIG, encoding="utf-8")
    templates = tmp_path / "docs" / "_templates"
    templates.mkdir(parents=True)
    (templates / "adr.md").write_text(ADR_TEMPLATE, encoding="utf-8")
    (tmp_path / "docs" / "adr").mkdir()
    return tmp_path


@pytest.fixture
def adr_dir(adr_project_dir: Path) -> Path:
    return adr_project_dir / "docs" / "adr"


@pytest.fixture
def adr_project(adr_project_dir: Path):
    return load_config(adr_project_dir / "folio.yaml")
