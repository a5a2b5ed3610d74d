"""gitscribe CLI commands."""

from gitscribe.commands.branch_cmd import branch_group
from gitscribe.commands.commit_cmd import add, commit
from gitscribe.commands.init_cmd import init
from gitscribe.commands.note_cmd import note_group
from gitscribe.commands.query_cmd import log, show
from gitscribe.commands.replay_cmd import replay

__all__ = [
    "add",
    "branch_group",
    "commit",
    "init",
    "log",
    "note_group",
    "replay",
    "show",
]
