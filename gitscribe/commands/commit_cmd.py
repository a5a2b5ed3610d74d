"""gitscribe add/commit commands - stage files and create commits."""

from datetime import datetime
from typing import Any

import click

from gitscribe.commands._utils import (
    console,
    format_note,
    get_ops,
    parse_identity,
    parse_json_value,
    parse_timestamp,
    report_errors,
)
from gitscribe.constants import NoteMode
from gitscribe.types import Identity


@click.command("add")
@click.argument("paths", nargs=-1)
@click.option("--all", "-A", "add_all", is_flag=True, help="Stage every change")
@click.pass_context
def add(ctx: click.Context, paths: tuple[str, ...], add_all: bool) -> None:
    """Stage PATHS (or every change) for the next commit."""
    with report_errors("Staging"):
        get_ops(ctx).stage(list(paths), add_all=add_all)
        what = "all changes" if add_all or not paths else f"{len(paths)} path(s)"
        console.print(f"[green]\u2713[/green] Staged {what}")


@click.command("commit")
@click.option("--message", "-m", required=True, help="Commit message")
@click.option("--author", callback=parse_identity, help='Author as "Name <email>"')
@click.option("--author-date", callback=parse_timestamp, help="Author timestamp (ISO-8601)")
@click.option("--committer", callback=parse_identity, help='Committer as "Name <email>"')
@click.option("--committer-date", callback=parse_timestamp, help="Committer timestamp (ISO-8601)")
@click.option("--allow-empty", is_flag=True, help="Allow a commit with no changes")
@click.option("--note", help="Attach a text note to the new commit")
@click.option("--note-json", help="Attach a JSON note to the new commit")
@click.option("--append-note", "note_mode", flag_value=NoteMode.APPEND.value, help="Append to an existing note")
@click.option("--force-note", "note_mode", flag_value=NoteMode.FORCE.value, help="Overwrite an existing note")
@click.pass_context
def commit(
    ctx: click.Context,
    message: str,
    author: Identity | None,
    author_date: datetime | None,
    committer: Identity | None,
    committer_date: datetime | None,
    allow_empty: bool,
    note: str | None,
    note_json: str | None,
    note_mode: str | None,
) -> None:
    """Commit the index with the given identities and dates.

    Examples:

        gitscribe commit -m "Import r1042" --author "Alice <a@example.com>" --author-date 2009-04-01T12:00:00Z

        gitscribe commit -m "Tag release" --allow-empty --note-json '{"svn_revision": 1042}'
    """
    if note is not None and note_json is not None:
        raise click.UsageError("--note and --note-json are mutually exclusive")

    note_value: Any = note
    if note_json is not None:
        note_value = parse_json_value(note_json)
        if not isinstance(note_value, dict | list):
            raise click.BadParameter("must be a JSON object or array", param_hint="--note-json")

    with report_errors("Commit"):
        confirmation = get_ops(ctx).commit(
            message,
            author=author,
            author_date=author_date,
            committer=committer,
            committer_date=committer_date,
            allow_empty=allow_empty,
            note=note_value,
            note_mode=NoteMode(note_mode or NoteMode.ADD.value),
        )

        where = "detached HEAD" if confirmation.detached else confirmation.branch
        root = " [dim](root-commit)[/dim]" if confirmation.is_root_commit else ""
        console.print(
            f"[green]\u2713[/green] [cyan]{confirmation.short_hash}[/cyan] on {where}{root}: {confirmation.title}"
        )
        if confirmation.note is not None:
            console.print(f"  Note: {format_note(confirmation.note)}")
