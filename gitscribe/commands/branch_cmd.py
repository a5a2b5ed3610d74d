"""gitscribe branch commands - create, list and inspect branches."""

import click
from rich.table import Table

from gitscribe.commands._utils import commit_table, console, echo_json, get_ops, report_errors


@click.group(name="branch")
def branch_group() -> None:
    """Create and inspect branches."""
    pass


@branch_group.command(name="create")
@click.argument("name")
@click.option("--start-point", "-s", help="Ref to branch from (default: HEAD)")
@click.pass_context
def create_command(ctx: click.Context, name: str, start_point: str | None) -> None:
    """Create branch NAME and switch to it."""
    with report_errors("Branch creation"):
        ops = get_ops(ctx)
        ops.create_branch(name, start_point)
        console.print(f"[green]\u2713[/green] Created branch: {name}")


@branch_group.command(name="list")
@click.argument("pattern", required=False)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def list_command(ctx: click.Context, pattern: str | None, json_output: bool) -> None:
    """List local branches, optionally matching PATTERN."""
    with report_errors("Branch listing"):
        ops = get_ops(ctx)
        branches = ops.get_branches(pattern)

        if json_output:
            echo_json([b.to_dict() for b in branches])
            return

        current = ops.current_branch()
        table = Table(title="Branches")
        table.add_column("Branch")
        table.add_column("Commit", style="cyan")
        table.add_column("Upstream")
        table.add_column("Last commit")
        table.add_column("Current")

        for branch in branches:
            last = branch.last_commit.title if branch.last_commit else ""
            table.add_row(
                branch.name,
                branch.commit[:8],
                branch.upstream or "",
                last or "",
                "\u2713" if branch.name == current else "",
            )

        console.print(table)


@branch_group.command(name="show")
@click.argument("name", required=False)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def show_command(ctx: click.Context, name: str | None, json_output: bool) -> None:
    """Show branch NAME (default: current branch) and its tip commit."""
    with report_errors("Branch lookup"):
        record = get_ops(ctx).get_branch(name)

        if json_output:
            echo_json(record.to_dict())
            return

        console.print(f"[bold]{record.name}[/bold] at [cyan]{record.commit}[/cyan]")
        console.print(f"Upstream: {record.upstream or '[dim]none[/dim]'}")
        if record.last_commit:
            console.print(commit_table([record.last_commit], title="Last commit"))
