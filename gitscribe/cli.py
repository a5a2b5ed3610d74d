"""gitscribe command-line interface."""

from pathlib import Path

import click

from gitscribe import __version__
from gitscribe.commands import (
    add,
    branch_group,
    commit,
    init,
    log,
    note_group,
    replay,
    show,
)
from gitscribe.commands._utils import report_errors
from gitscribe.config import ScribeConfig
from gitscribe.logging import set_log_context, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="gitscribe")
@click.option(
    "-C",
    "--repo",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Repository to operate on (default: current directory)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: .gitscribe/config.yaml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every git invocation")
@click.pass_context
def cli(ctx: click.Context, repo: Path | None, config_path: Path | None, verbose: bool) -> None:
    """gitscribe - script synthetic git histories.

    Create branches and commits with explicit identities, dates and notes,
    then query what was built.
    """
    ctx.ensure_object(dict)

    with report_errors("Configuration"):
        config = ScribeConfig.load(config_path)

    setup_logging(
        level="debug" if verbose else config.logging.level,
        log_dir=config.logging.directory,
        json_output=config.logging.json_output,
    )
    set_log_context(repo=str(repo) if repo else None)

    ctx.obj["repo"] = repo
    ctx.obj["config"] = config


cli.add_command(init)
cli.add_command(branch_group)
cli.add_command(add)
cli.add_command(commit)
cli.add_command(show)
cli.add_command(log)
cli.add_command(note_group)
cli.add_command(replay)


if __name__ == "__main__":
    cli()
