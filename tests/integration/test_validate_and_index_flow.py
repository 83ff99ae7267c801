from __future__ import annotations

from textwrap import dedent
from typing import TYPE_CHECKING

from folio.config_loader import load_config
from folio.indexing import END_MARKER, START_MARKER, sync_indexes
from folio.typing.enums import ErrorCode
from folio.validator import validate_project

if TYPE_CHECKING:
    from pathlib import Path

CONFIG = dedent(
    """\
    root: handbook
    indexing:
      format: list
      filename: README.md
    types:
      runbook:
        path: runbooks
        template: runbook.md
        frontmatter:
          title: {type: string, required: true}
          status: {type: string, enum: [draft, live]}
          ref: {type: string, unique: true, default: {generate: uuid}}
      rfc:
        path: rfcs
        template: rfc.md
        frontmatter:
          id: {type: string, pattern: "^RFC-[0-9]+$"}
          title: {type: string}
          reviewers: {type: string, isArray: true, minLength: 2}
    """,
)


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _project(tmp_path: Path):
    _write(tmp_path / "folio.yaml", CONFIG)
    return load_config(tmp_path / "folio.yaml")


def test_generator_defaults_are_fresh_per_document(tmp_path: Path, mocker) -> None:
    calls = {"count": 0}

    def _counting_uuid() -> str:
        calls["count"] += 1
        return f"ref-{calls['count']}"

    mocker.patch.dict("folio.typing.models.schema.GENERATORS", {"uuid": _counting_uuid})
    project = _project(tmp_path)
    for name in ("a.md", "b.md", "c.md"):
        _write(tmp_path / "handbook" / "runbooks" / name, f"---\ntitle: {name}\n---\n")

    run = validate_project(project, ["runbook"])

    assert calls["count"] == 3
    assert run.valid


def test_unique_duplicates_reference_first_document(tmp_path: Path) -> None:
    project = _project(tmp_path)
    runbooks = tmp_path / "handbook" / "runbooks"
    _write(runbooks / "a.md", "---\ntitle: A\nref: shared\n---\n")
    _write(runbooks / "b.md", "---\ntitle: B\nref: own\n---\n")
    _write(runbooks / "c.md", "---\ntitle: C\nref: shared\n---\n")

    result = validate_project(project, ["runbook"]).results[0]

    assert list(result.per_document_errors) == ["c.md"]
    error = result.per_document_errors["c.md"][0]
    assert error.code == ErrorCode.DUPLICATE_UNIQUE
    assert error.message.endswith("First seen in a.md")


def test_validate_then_index_every_type(tmp_path: Path) -> None:
    project = _project(tmp_path)
    rfcs = tmp_path / "handbook" / "rfcs"
    _write(rfcs / "0002-b.md", "---\nid: RFC-2\ntitle: Second\nreviewers: [ann, b]\n---\n")
    _write(rfcs / "0001-a.md", "---\nid: rfc-1\ntitle: First\n---\n")
    _write(rfcs / "0003-broken.md", "---\nid: [\n---\n")
    _write(rfcs / "README.md", f"# RFCs\r\n\r\nHand written.\r\n\r\n{START_MARKER}\r\nstale\r\n{END_MARKER}\r\n")

    run = validate_project(project)
    rfc_result = next(result for result in run.results if result.type_name == "rfc")
    codes = {filename: [error.code for error in errors] for filename, errors in rfc_result.per_document_errors.items()}

    assert codes == {
        "0001-a.md": [ErrorCode.PATTERN_VIOLATION],
        "0002-b.md": [ErrorCode.CONSTRAINT_VIOLATION],
        "0003-broken.md": [ErrorCode.PARSE_FAILURE],
    }

    result = sync_indexes(project)

    assert result.ok
    assert set(result.updated) == {"runbook", "rfc"}
    rfc_index = (rfcs / "README.md").read_bytes().decode("utf-8")
    assert rfc_index.startswith("# RFCs\r\n\r\nHand written.\r\n\r\n")
    assert rfc_index.endswith(f"{END_MARKER}\r\n")
    assert "stale" not in rfc_index
    lines = [line for line in rfc_index.splitlines() if line.startswith("- ")]
    assert lines == ["- [First](0001-a.md)", "- [Second](0002-b.md)", "- [0003-broken.md](0003-broken.md)"]
    runbook_index = (tmp_path / "handbook" / "runbooks" / "README.md").read_text(encoding="utf-8")
    assert runbook_index.startswith("# Index of Runbooks\n\n")
    assert "No documents found for this type." in runbook_index
