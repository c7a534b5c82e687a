#!/usr/bin/env python3
"""softrepo CLI for inspecting and maintaining rows of any table."""

import argparse
import sys

import psycopg
import questionary
from rich.console import Console
from rich.table import Table

from softrepo.config import config
from softrepo.db import Database
from softrepo.exceptions import RepositoryError
from softrepo.logger import configure_logging
from softrepo.model import Record
from softrepo.repository import DbRepository

console = Console()


def build_repository(args: argparse.Namespace) -> DbRepository:
    """Repository over `args.table` hydrating generic records."""
    deleted = None if args.no_soft else (args.soft_field or config.soft_delete_field)
    return DbRepository(Database(), args.table, Record, deleted)


def confirm(summary: str, assume_yes: bool) -> bool:
    console.print(f"[yellow]{summary}[/]")
    if assume_yes:
        return True
    return bool(questionary.confirm("Proceed with these changes?").ask())


def render_records(records: list[Record]) -> None:
    """Print records as a table, one column per attribute seen."""
    columns: list[str] = []
    for record in records:
        for name in record.to_dict():
            if name not in columns:
                columns.append(name)

    table = Table(show_header=True, header_style="bold")
    for name in columns:
        table.add_column(name)
    for record in records:
        row = record.to_dict()
        table.add_row(*("" if row.get(c) is None else str(row.get(c)) for c in columns))
    console.print(table)


def count_rows(repo: DbRepository, args: argparse.Namespace) -> int:
    if args.soft:
        total = repo.count_soft(args.where, args.value)
    else:
        total = repo.count(args.where, args.value)
    console.print(f"[bold]{total}[/] row(s) in {repo.table}")
    return 0


def list_rows(repo: DbRepository, args: argparse.Namespace) -> int:
    if args.soft:
        records = repo.get_all_soft(args.where, args.value, order=args.order)
    else:
        records = repo.get_all(args.where, args.value, order=args.order)
    if not records:
        console.print("[red]No rows found.[/]")
        return 0
    render_records(records)
    return 0


def show_row(repo: DbRepository, args: argparse.Namespace) -> int:
    record = find_record(repo, args.id, soft=args.soft)
    if record is None:
        return 1
    render_records([record])
    return 0


def find_record(repo: DbRepository, identity: str, soft: bool = False) -> Record | None:
    id_field = repo.model_class.id_field
    if soft:
        record = repo.find_soft(id_field, identity)
    else:
        record = repo.find(id_field, identity)
    if record is None:
        console.print(f"[red]No row in {repo.table} with {id_field} {identity}.[/]")
    return record


def delete_row(repo: DbRepository, args: argparse.Namespace) -> int:
    """Permanently delete a row."""
    record = find_record(repo, args.id)
    if record is None:
        return 1
    summary = f"Will permanently delete [bold]{repo.table} #{args.id}[/]."
    if not confirm(summary, args.yes):
        console.print("[dim]Cancelled.[/]")
        return 0
    repo.delete(record)
    console.print(f"[green]Deleted {repo.table} #{args.id}.[/]")
    return 0


def delete_soft_row(repo: DbRepository, args: argparse.Namespace) -> int:
    """Mark a row as deleted."""
    record = find_record(repo, args.id, soft=True)
    if record is None:
        return 1
    summary = f"Will soft delete [bold]{repo.table} #{args.id}[/] (sets {repo.deleted})."
    if not confirm(summary, args.yes):
        console.print("[dim]Cancelled.[/]")
        return 0
    repo.delete_soft(record)
    console.print(f"[green]Soft deleted {repo.table} #{args.id}.[/]")
    return 0


def restore_row(repo: DbRepository, args: argparse.Namespace) -> int:
    """Clear the soft-delete marker of a row."""
    record = find_record(repo, args.id)
    if record is None:
        return 1
    summary = f"Will restore [bold]{repo.table} #{args.id}[/] (clears {repo.deleted})."
    if not confirm(summary, args.yes):
        console.print("[dim]Cancelled.[/]")
        return 0
    repo.restore_soft(record)
    console.print(f"[green]Restored {repo.table} #{args.id}.[/]")
    return 0


COMMANDS = {
    "count": count_rows,
    "list": list_rows,
    "show": show_row,
    "delete": delete_row,
    "delete-soft": delete_soft_row,
    "restore": restore_row,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="softrepo CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("table", help="Table name")
    common.add_argument("--soft-field", help="Soft-delete column (default from SOFT_DELETE_FIELD)")
    common.add_argument("--no-soft", action="store_true", help="Table has no soft-delete column")

    filters = argparse.ArgumentParser(add_help=False)
    filters.add_argument("--soft", action="store_true", help="Ignore soft-deleted rows")
    filters.add_argument("--where", help="Condition with ? placeholders, e.g. \"name = ?\"")
    filters.add_argument(
        "--value", action="append", default=[], help="Value bound to the next placeholder"
    )

    subparsers.add_parser("count", parents=[common, filters], help="Count rows")
    list_parser = subparsers.add_parser("list", parents=[common, filters], help="List rows")
    list_parser.add_argument("--order", help="ORDER BY expression")

    show_parser = subparsers.add_parser("show", parents=[common], help="Show one row")
    show_parser.add_argument("id", help="Row identity")
    show_parser.add_argument("--soft", action="store_true", help="Ignore soft-deleted rows")

    for name, help_text in [
        ("delete", "Permanently delete a row"),
        ("delete-soft", "Soft delete a row"),
        ("restore", "Restore a soft-deleted row"),
    ]:
        action_parser = subparsers.add_parser(name, parents=[common], help=help_text)
        action_parser.add_argument("id", help="Row identity")
        action_parser.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()
    repo = build_repository(args)
    try:
        return COMMANDS[args.command](repo, args)
    except (RepositoryError, ValueError, psycopg.Error) as e:
        console.print(f"[red]{e}[/]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
