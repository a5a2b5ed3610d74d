"""Shared utilities for gitscribe CLI commands."""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from gitscribe.config import ScribeConfig
from gitscribe.exceptions import ScribeError
from gitscribe.git.ops import GitOps
from gitscribe.logging import get_logger
from gitscribe.types import CommitRecord, Identity, PlainNote, StructuredNote

console = Console()
logger = get_logger("cli")


def get_config(ctx: click.Context) -> ScribeConfig:
    obj = ctx.find_root().obj or {}
    return obj.get("config") or ScribeConfig()


def get_ops(ctx: click.Context) -> GitOps:
    """Open the repository selected with ``-C`` (default: cwd)."""
    obj = ctx.find_root().obj or {}
    repo = obj.get("repo") or Path(".")
    return GitOps(repo, config=get_config(ctx).git)


@contextmanager
def report_errors(action: str) -> Iterator[None]:
    """Turn gitscribe errors into a red message and exit code 1."""
    try:
        yield
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        raise SystemExit(130) from None
    except ScribeError as e:
        console.print(f"[red]{action} failed:[/red] {e.message}")
        logger.error(f"{action} failed: {e}")
        raise SystemExit(1) from e


def parse_identity(
    ctx: click.Context | None, param: click.Parameter | None, value: str | None
) -> Identity | None:
    """click callback for ``Name <email>`` options."""
    if value is None:
        return None
    try:
        return Identity.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def parse_timestamp(
    ctx: click.Context | None, param: click.Parameter | None, value: str | None
) -> datetime | None:
    """click callback for ISO-8601 timestamp options."""
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise click.BadParameter(f"Expected an ISO-8601 timestamp, got {value!r}") from e


def parse_json_value(value: str) -> Any:
    try:
        return json.loads(value)
    except ValueError as e:
        raise click.BadParameter(f"Invalid JSON: {e}") from e


def format_note(note: PlainNote | StructuredNote | None) -> str:
    if note is None:
        return ""
    if isinstance(note, StructuredNote):
        return json.dumps(note.document, sort_keys=True)
    return note.text


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2))


def commit_table(records: list[CommitRecord], title: str | None = None) -> Table:
    table = Table(title=title)
    table.add_column("Commit", style="cyan")
    table.add_column("Title")
    table.add_column("Author")
    table.add_column("Date")
    table.add_column("Refs", style="green")
    table.add_column("Note", style="magenta")

    for record in records:
        title_cell = record.title or ""
        if record.is_root_commit:
            title_cell = f"{title_cell} [dim](root)[/dim]"
        table.add_row(
            record.short_hash or "?",
            title_cell,
            str(record.author) if record.author else "",
            record.author_date.isoformat() if record.author_date else "",
            ", ".join(record.refs),
            format_note(record.note),
        )
    return table
