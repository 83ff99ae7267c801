from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from folio.exceptions import IndexWriteError
from folio.indexing import (
    EMPTY_PLACEHOLDER,
    END_MARKER,
    START_MARKER,
    collect_entries,
    format_cell,
    index_title,
    merge_region,
    new_index_content,
    render_list,
    render_region,
    render_table,
    sort_entries,
    split_region,
    sync_index,
    sync_indexes,
)
from folio.typing.models import Document, IndexEntry, IndexingConfig, ParseFailure


def _entry(filename: str, **metadata: object) -> IndexEntry:
    return IndexEntry(filename=filename, metadata=metadata)


def test_sort_entries_by_numeric_id() -> None:
    entries = [_entry("b.md", id=10), _entry("a.md", id=2), _entry("c.md", id=1)]

    assert [entry.filename for entry in sort_entries(entries)] == ["c.md", "a.md", "b.md"]


def test_sort_entries_keeps_listing_order_when_an_id_is_missing() -> None:
    entries = [_entry("a.md", id=3), _entry("b.md"), _entry("c.md", id=1)]

    assert [entry.filename for entry in sort_entries(entries)] == ["a.md", "b.md", "c.md"]


def test_sort_entries_with_mixed_ids_puts_numbers_first() -> None:
    entries = [_entry("a.md", id="RFC-2"), _entry("b.md", id=7), _entry("c.md", id="RFC-1")]

    assert [entry.filename for entry in sort_entries(entries)] == ["b.md", "c.md", "a.md"]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, "N/A"),
        (["api", "db"], "api, db"),
        (True, "true"),
        (date(2024, 1, 15), "2024-01-15"),
        ("a | b", "a \\| b"),
        ("line one\nline two", "line one line two"),
        (3, "3"),
    ],
)
def test_format_cell(value: object, expected: str) -> None:
    assert format_cell(value) == expected


def test_render_table_links_title_column() -> None:
    table = render_table([_entry("0001 first.md", id=1, title="First")], ["id", "title", "status"])

    assert table.splitlines() == [
        "| id | title | status |",
        "| --- | --- | --- |",
        "| 1 | [First](0001%20first.md) | N/A |",
    ]


def test_render_table_links_first_column_without_title() -> None:
    table = render_table([_entry("a.md", id=1)], ["id"])

    assert table.splitlines()[-1] == "| [1](a.md) |"


def test_render_table_escapes_brackets_in_link_label() -> None:
    table = render_table([_entry("x.md", id=1, title="a [b] c")], ["id", "title"])

    assert table.splitlines()[-1] == "| 1 | [a \\[b\\] c](x.md) |"


def test_render_list_uses_title_and_status() -> None:
    listing = render_list([_entry("a.md", title="Alpha", status="accepted"), _entry("b.md")])

    assert listing.splitlines() == ["- [Alpha](a.md) (Status: accepted)", "- [b.md](b.md)"]


def test_render_region_empty_placeholder() -> None:
    region = render_region([], IndexingConfig(columns=["id"]))

    assert region == f"{START_MARKER}\n\n{EMPTY_PLACEHOLDER}\n\n{END_MARKER}"


def test_render_region_list_format() -> None:
    region = render_region([_entry("a.md", title="Alpha")], IndexingConfig(format="list"))

    assert "- [Alpha](a.md)" in region


def test_collect_entries_keeps_unparsable_documents() -> None:
    documents = [
        Document(filename="a.md", absolute_path=Path("/d/a.md"), metadata={"id": 1}),
        ParseFailure(filename="b.md", absolute_path=Path("/d/b.md"), message="Invalid YAML"),
    ]

    entries = collect_entries(documents)

    assert [(entry.filename, entry.metadata) for entry in entries] == [("a.md", {"id": 1}), ("b.md", {})]


def test_merge_region_preserves_surrounding_text() -> None:
    existing = f"before\n{START_MARKER}\nOLD\n{END_MARKER}\nafter"
    region = f"{START_MARKER}\nNEW\n{END_MARKER}"

    assert merge_region(existing, region) == f"before\n{START_MARKER}\nNEW\n{END_MARKER}\nafter"


def test_merge_region_preserves_crlf_outside_markers() -> None:
    existing = f"# Title\r\n\r\n{START_MARKER}\r\nOLD\r\n{END_MARKER}\r\nFooter\r\n"
    region = f"{START_MARKER}\nNEW\n{END_MARKER}"

    merged = merge_region(existing, region)

    assert merged.startswith("# Title\r\n\r\n")
    assert merged.endswith(f"{END_MARKER}\r\nFooter\r\n")


def test_merge_region_appends_without_markers() -> None:
    region = f"{START_MARKER}\nNEW\n{END_MARKER}"

    assert merge_region("# Notes\n", region) == f"# Notes\n\n{region}\n"
    assert merge_region("# Notes", region) == f"# Notes\n\n{region}\n"


def test_split_region_uses_first_start_and_next_end() -> None:
    content = f"intro\n{START_MARKER}\nOLD\n{END_MARKER}\ntail\n{END_MARKER}"

    prefix, region, suffix = split_region(content)  # type: ignore[misc]

    assert prefix == "intro\n"
    assert region == f"{START_MARKER}\nOLD\n{END_MARKER}"
    assert suffix == f"\ntail\n{END_MARKER}"


def test_split_region_skips_end_marker_in_prefix() -> None:
    content = f"Ends at {END_MARKER}\n{START_MARKER}\nOLD\n{END_MARKER}\n"

    prefix, region, suffix = split_region(content)  # type: ignore[misc]

    assert prefix == f"Ends at {END_MARKER}\n"
    assert region == f"{START_MARKER}\nOLD\n{END_MARKER}"
    assert suffix == "\n"


def test_split_region_without_end_after_start_is_not_a_region() -> None:
    assert split_region(f"{END_MARKER}\n{START_MARKER}\n") is None


def test_index_title_and_new_content() -> None:
    assert index_title("architecture-decisions") == "Architecture Decisions"
    assert index_title("run_books") == "Run Books"
    assert new_index_content("adr", "REGION") == "# Index of Adr\n\nREGION\n"


def test_sync_index_creates_file(adr_project, adr_dir: Path, write_adr) -> None:
    write_adr(adr_dir, "0002-second.md", "id: 2\ntitle: Second decision\nstatus: accepted\n")
    write_adr(adr_dir, "0001-first.md", "id: 1\ntitle: First decision\n")

    path = sync_index(adr_project, "adr")

    content = path.read_text(encoding="utf-8")
    assert content.startswith("# Index of Adr\n\n")
    assert content.index("First decision") < content.index("Second decision")
    assert "| 2 | [Second decision](0002-second.md) | accepted |" in content
    assert "index.md" not in content


def test_sync_index_is_idempotent_and_preserves_human_text(adr_project, adr_dir: Path, write_adr) -> None:
    write_adr(adr_dir, "0001-first.md", "id: 1\ntitle: First decision\n")
    index = adr_dir / "index.md"
    index.write_text(f"# Decisions\n\nIntro.\n\n{START_MARKER}\nold\n{END_MARKER}\n\nFooter.\n", encoding="utf-8")

    sync_index(adr_project, "adr")
    once = index.read_text(encoding="utf-8")
    sync_index(adr_project, "adr")

    assert index.read_text(encoding="utf-8") == once
    assert once.startswith("# Decisions\n\nIntro.\n\n")
    assert once.endswith(f"{END_MARKER}\n\nFooter.\n")
    assert "old" not in once


def test_sync_index_is_idempotent_with_stray_end_marker(adr_project, adr_dir: Path, write_adr) -> None:
    write_adr(adr_dir, "0001-first.md", "id: 1\ntitle: First decision\n")
    index = adr_dir / "index.md"
    index.write_text(f"# Decisions\n\nThe region ends at {END_MARKER}\n", encoding="utf-8")

    sync_index(adr_project, "adr")
    once = index.read_text(encoding="utf-8")
    sync_index(adr_project, "adr")
    twice = index.read_text(encoding="utf-8")

    assert once == twice
    assert twice.count(START_MARKER) == 1
    assert twice.startswith(f"# Decisions\n\nThe region ends at {END_MARKER}\n\n{START_MARKER}")


def test_sync_index_skips_non_string_keys_for_other_documents(adr_project, adr_dir: Path, write_adr) -> None:
    write_adr(adr_dir, "0001-first.md", "id: 1\ntitle: First decision\n2024: x\n")
    write_adr(adr_dir, "0002-second.md", "id: 2\ntitle: Second decision\n")

    content = sync_index(adr_project, "adr").read_text(encoding="utf-8")

    assert "[First decision](0001-first.md)" in content
    assert "[Second decision](0002-second.md)" in content


def test_sync_index_empty_type_uses_placeholder(adr_project) -> None:
    path = sync_index(adr_project, "adr")

    assert EMPTY_PLACEHOLDER in path.read_text(encoding="utf-8")


def test_sync_index_wraps_write_errors(adr_project, mocker) -> None:
    mocker.patch("folio.indexing._read_existing", side_effect=PermissionError("denied"))

    with pytest.raises(IndexWriteError, match="denied"):
        sync_index(adr_project, "adr")


def test_sync_indexes_continues_after_failure(adr_project, mocker) -> None:
    mocker.patch(
        "folio.indexing.sync_index",
        side_effect=IndexWriteError(path="/docs/adr/index.md", exc=PermissionError("denied")),
    )

    result = sync_indexes(adr_project)

    assert not result.ok
    assert "denied" in result.failed["adr"]
