"""gitscribe init command - create a repository."""

from pathlib import Path

import click

from gitscribe.commands._utils import console, get_config, report_errors
from gitscribe.git.ops import GitOps


@click.command("init")
@click.argument("path", type=click.Path(file_okay=False, path_type=Path), default=".")
@click.option("--initial-branch", "-b", help="Name of the first branch")
@click.pass_context
def init(ctx: click.Context, path: Path, initial_branch: str | None) -> None:
    """Initialize a repository at PATH (created if missing)."""
    with report_errors("Init"):
        ops = GitOps.init_repository(path, initial_branch=initial_branch, config=get_config(ctx).git)
        console.print(f"[green]\u2713[/green] Initialized repository at {ops.repo_path}")
