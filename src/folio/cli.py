"""CLI entry point for Folio."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import TYPE_CHECKING

from folio import __version__, logger
from folio.config_loader import load_config
from folio.exceptions import PackageError
from folio.indexing import format_cell, sync_index, sync_indexes
from folio.logging import configure_logging
from folio.settings import get_settings
from folio.validator import validate_project
from folio.workflows import create_document, deprecate_document, list_documents, renumber_documents, update_status

if TYPE_CHECKING:
    from folio.config_loader import Project
    from folio.typing.models import ValidationRun


def _key_value_from_cli(value: str) -> tuple[str, str]:
    """Convert a `--where key=value` CLI value into a filter pair.

    Args:
        value (str): CLI value.

    Raises:
        argparse.ArgumentTypeError: If value has no `=` or an empty key.

    Returns:
        tuple[str, str]: Field name and expected value.
    """
    key, separator, expected = value.partition("=")
    if not separator or not key.strip():
        raise argparse.ArgumentTypeError("--where expects key=value")  # noqa: TRY003
    return key.strip(), expected


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="folio", description="Validate and index Markdown documentation")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, default=None, dest="config_path", help="Path to folio.yaml")

    subparsers = parser.add_subparsers(dest="command")

    validate_parser = subparsers.add_parser("validate", help="Validate document front matter")
    validate_parser.add_argument("type_name", nargs="?", default=None)
    validate_parser.add_argument("--json", action="store_true", dest="as_json")

    index_parser = subparsers.add_parser("index", help="Regenerate index files")
    index_parser.add_argument("type_name", nargs="?", default=None)

    new_parser = subparsers.add_parser("new", help="Create a document from its template")
    new_parser.add_argument("type_name")
    new_parser.add_argument("title")
    new_parser.add_argument("--id", default=None, dest="document_id")

    status_parser = subparsers.add_parser("status", help="Change the status of a document")
    status_parser.add_argument("type_name")
    status_parser.add_argument("document_id")
    status_parser.add_argument("new_status")

    list_parser = subparsers.add_parser("list", help="List documents of a type")
    list_parser.add_argument("type_name")
    list_parser.add_argument("--status", default=None)
    list_parser.add_argument("--owner", default=None)
    list_parser.add_argument("--where", action="append", default=[], type=_key_value_from_cli, dest="where")

    deprecate_parser = subparsers.add_parser("deprecate", help="Deprecate an architecture decision record")
    deprecate_parser.add_argument("document_id")
    deprecate_parser.add_argument("--type", default=None, dest="type_name")
    deprecate_parser.add_argument("--reason", default=None)
    deprecate_parser.add_argument("--superseded-by", default=None, dest="superseded_by")
    deprecate_parser.add_argument("--dry-run", action="store_true", dest="dry_run")

    renumber_parser = subparsers.add_parser("renumber", help="Renumber architecture decision records sequentially")
    renumber_parser.add_argument("--type", default=None, dest="type_name")
    renumber_parser.add_argument("--start-from", type=int, default=1, dest="start_from")
    renumber_parser.add_argument("--dry-run", action="store_true", dest="dry_run")
    renumber_parser.add_argument("--force", action="store_true")

    return parser


def _print_validation_report(run: ValidationRun) -> None:
    for result in run.results:
        summary = result.summary
        print(f"{result.type_name}: {summary.valid}/{summary.total} valid")  # noqa: T201
        for filename, errors in result.per_document_errors.items():
            print(f"  {filename}")  # noqa: T201
            for error in errors:
                location = f"{error.field}: " if error.field else ""
                print(f"    - [{error.code}] {location}{error.message}")  # noqa: T201
    total = run.summary
    print(f"Total: {total.valid}/{total.total} valid, {total.invalid} invalid")  # noqa: T201


def _run_validate(project: Project, args: argparse.Namespace) -> int:
    type_names = [args.type_name] if args.type_name else None
    if args.type_name:
        project.document_type(args.type_name)
    run = validate_project(project, type_names)
    if args.as_json:
        print(json.dumps(run.to_payload(), indent=2, default=str))  # noqa: T201
    else:
        _print_validation_report(run)
    return 0 if run.valid else 1


def _run_index(project: Project, args: argparse.Namespace) -> int:
    if args.type_name:
        path = sync_index(project, args.type_name)
        print(f"Updated {path}")  # noqa: T201
        return 0
    result = sync_indexes(project)
    for path in result.updated.values():
        print(f"Updated {path}")  # noqa: T201
    for type_name, reason in result.failed.items():
        print(f"Failed {type_name}: {reason}")  # noqa: T201
    return 0 if result.ok else 1


def _run_new(project: Project, args: argparse.Namespace) -> int:
    path = create_document(project, args.type_name, args.title, document_id=args.document_id)
    print(f"Created {path}")  # noqa: T201
    return 0


def _run_status(project: Project, args: argparse.Namespace) -> int:
    change = update_status(project, args.type_name, args.document_id, args.new_status)
    print(f"{change.path.name}: {format_cell(change.previous)} -> {change.current}")  # noqa: T201
    return 0


def _build_list_filters(args: argparse.Namespace) -> dict[str, str]:
    """Merge list filter options.

    Args:
        args (argparse.Namespace): Parsed CLI args.

    Returns:
        dict[str, str]: Expected values by field name.
    """
    filters = dict(args.where)
    if args.status is not None:
        filters["status"] = args.status
    if args.owner is not None:
        filters["owner"] = args.owner
    return filters


def _run_list(project: Project, args: argparse.Namespace) -> int:
    documents = list_documents(project, args.type_name, _build_list_filters(args))
    for document in documents:
        metadata = document.metadata
        title = metadata.get("title", document.filename)
        print(f"{format_cell(metadata.get('id'))}\t{format_cell(metadata.get('status'))}\t{title}")  # noqa: T201
    if not documents:
        print("No matching documents.")  # noqa: T201
    return 0


def _run_deprecate(project: Project, args: argparse.Namespace) -> int:
    result = deprecate_document(
        project,
        args.document_id,
        type_name=args.type_name,
        reason=args.reason,
        superseded_by=args.superseded_by,
        dry_run=args.dry_run,
    )
    if result.already_deprecated:
        print(f"{result.path.name} is already deprecated")  # noqa: T201
        return 0
    prefix = "Would update" if result.dry_run else "Updated"
    print(f"{prefix} {result.path.name}:")  # noqa: T201
    for name, value in result.updates.items():
        print(f"  {name}: {value}")  # noqa: T201
    if result.skipped_fields:
        print(f"Skipped fields not declared in the schema: {', '.join(result.skipped_fields)}")  # noqa: T201
    return 0


def _run_renumber(project: Project, args: argparse.Namespace) -> int:
    result = renumber_documents(
        project,
        type_name=args.type_name,
        start_from=args.start_from,
        dry_run=args.dry_run,
        force=args.force,
    )
    if not result.steps:
        print(f"{result.type_name}: {result.total} documents already numbered")  # noqa: T201
        return 0
    prefix = "Would rename" if result.dry_run else "Renamed"
    for step in result.steps:
        print(f"{prefix} {step.source} -> {step.target} (id {format_cell(step.new_id)})")  # noqa: T201
    return 0


_COMMANDS = {
    "validate": _run_validate,
    "index": _run_index,
    "new": _run_new,
    "status": _run_status,
    "list": _run_list,
    "deprecate": _run_deprecate,
    "renumber": _run_renumber,
}


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv (list[str] | None): Arguments, `sys.argv[1:]` when omitted.

    Returns:
        int: Exit code (0 for success, 1 for error or invalid documents, 130 when interrupted).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args(argv)

    handler = _COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 0

    try:
        project = load_config(args.config_path or settings.config_path)
        return handler(project, args)
    except PackageError:
        logger.exception("Command failed", extra={"command": args.command})
        return 1
    except KeyboardInterrupt:
        logger.info("Command aborted by user", extra={"command": args.command})
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
