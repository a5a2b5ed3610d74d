"""gitscribe replay command - build a history from a YAML plan."""

from pathlib import Path

import click
from rich.table import Table

from gitscribe.commands._utils import console, get_config, get_ops, report_errors
from gitscribe.git.ops import GitOps
from gitscribe.replay import load_plan, replay_plan


@click.command("replay")
@click.argument("plan_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--init", "init_repo", is_flag=True, help="Initialize the repository first")
@click.pass_context
def replay(ctx: click.Context, plan_file: Path, init_repo: bool) -> None:
    """Apply the branches and commits listed in PLAN_FILE."""
    with report_errors("Replay"):
        plan = load_plan(plan_file)

        if init_repo:
            repo = (ctx.find_root().obj or {}).get("repo") or Path(".")
            ops = GitOps.init_repository(repo, initial_branch=plan.initial_branch, config=get_config(ctx).git)
        else:
            ops = get_ops(ctx)

        commits = replay_plan(ops, plan)

        table = Table(title=f"Replayed {plan_file.name}")
        table.add_column("Commit", style="cyan")
        table.add_column("Branch")
        table.add_column("Title")
        for confirmation in commits:
            table.add_row(
                confirmation.short_hash,
                confirmation.branch or "detached HEAD",
                confirmation.title,
            )
        console.print(table)
        console.print(f"[green]\u2713[/green] {len(commits)} commit(s) created")
