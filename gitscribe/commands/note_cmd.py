"""gitscribe note commands - attach and read commit notes."""

import click

from gitscribe.commands._utils import console, format_note, get_ops, parse_json_value, report_errors
from gitscribe.constants import NoteMode


@click.group(name="note")
def note_group() -> None:
    """Attach notes to commits and read them back."""
    pass


@note_group.command(name="add")
@click.argument("ref")
@click.argument("value")
@click.option("--json-value", is_flag=True, help="Parse VALUE as a JSON object or array")
@click.option("--append", "mode", flag_value=NoteMode.APPEND.value, help="Append to an existing note")
@click.option("--force", "mode", flag_value=NoteMode.FORCE.value, help="Overwrite an existing note")
@click.pass_context
def add_command(ctx: click.Context, ref: str, value: str, json_value: bool, mode: str | None) -> None:
    """Attach VALUE as a note on commit REF.

    Fails if REF already has a note unless --append or --force is given.
    """
    note = value
    if json_value:
        note = parse_json_value(value)
        if not isinstance(note, dict | list):
            raise click.BadParameter("must be a JSON object or array", param_hint="VALUE")

    with report_errors("Note"):
        attached = get_ops(ctx).add_note(ref, note, mode=NoteMode(mode or NoteMode.ADD.value))
        console.print(f"[green]\u2713[/green] Note on {ref}: {format_note(attached)}")


@note_group.command(name="show")
@click.argument("ref", default="HEAD")
@click.pass_context
def show_command(ctx: click.Context, ref: str) -> None:
    """Print the note attached to REF."""
    with report_errors("Note lookup"):
        ops = get_ops(ctx)
        ops.require_commit(ref)
        note = ops.get_note(ref)
        if note is None:
            console.print(f"[yellow]No note on {ref}[/yellow]")
            raise SystemExit(1)
        click.echo(format_note(note))
