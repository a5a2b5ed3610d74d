"""gitscribe git package -- structured git operations.

Re-exports core classes for convenient access:
    from gitscribe.git import GitOps, GitRunner, GitConfig
"""

from gitscribe.git.base import GitRunner
from gitscribe.git.config import GitConfig, IdentityConfig
from gitscribe.git.notes import add_note, get_note, serialize_note
from gitscribe.git.ops import GitOps

__all__ = [
    "GitRunner",
    "GitOps",
    "GitConfig",
    "IdentityConfig",
    "add_note",
    "get_note",
    "serialize_note",
]
