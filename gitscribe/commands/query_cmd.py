"""gitscribe show/log commands - inspect commits."""

import click

from gitscribe.commands._utils import commit_table, console, echo_json, get_ops, report_errors
from gitscribe.constants import ParentMode


@click.command("show")
@click.argument("ref", default="HEAD")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def show(ctx: click.Context, ref: str, json_output: bool) -> None:
    """Show metadata and note of commit REF (default: HEAD)."""
    with report_errors("Commit lookup"):
        record = get_ops(ctx).get_commit(ref)

        if json_output:
            echo_json(record.to_dict())
            return

        console.print(commit_table([record], title=ref))
        if record.committer and record.committer != record.author:
            console.print(f"Committer: {record.committer} at {record.committer_date}")


@click.command("log")
@click.argument("ref", required=False)
@click.option("--max-count", "-n", type=click.IntRange(min=0), help="Limit the number of commits")
@click.option("--first-parent", is_flag=True, help="Follow only the first parent of merges")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def log(
    ctx: click.Context,
    ref: str | None,
    max_count: int | None,
    first_parent: bool,
    json_output: bool,
) -> None:
    """List commits reachable from REF (default: current branch), newest first."""
    mode = ParentMode.FIRST if first_parent else ParentMode.ALL

    with report_errors("History"):
        records = get_ops(ctx).get_history(ref, max_count=max_count, parent_mode=mode)

        if json_output:
            echo_json([r.to_dict() for r in records])
            return

        if not records:
            console.print("[yellow]No commits found[/yellow]")
            return
        console.print(commit_table(records, title=f"History of {ref or 'HEAD'}"))
