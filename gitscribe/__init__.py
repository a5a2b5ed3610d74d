"""gitscribe - script synthetic git histories.

Thin helpers over the git command line for building repositories commit by
commit: identities and dates, branches, staging, commits with notes, and
structured queries of what was built.
"""

__version__ = "0.1.0"
__author__ = "gitscribe contributors"

from gitscribe.constants import NoteMode, ParentMode
from gitscribe.env import build_identity_env, scoped_env, with_env
from gitscribe.exceptions import GitError, ScribeError
from gitscribe.git import GitConfig, GitOps
from gitscribe.types import (
    BranchRecord,
    CommitConfirmation,
    CommitRecord,
    Identity,
    PlainNote,
    StructuredNote,
)

__all__ = [
    "__version__",
    "GitOps",
    "GitConfig",
    "GitError",
    "ScribeError",
    "NoteMode",
    "ParentMode",
    # Environment
    "build_identity_env",
    "scoped_env",
    "with_env",
    # Records
    "Identity",
    "PlainNote",
    "StructuredNote",
    "CommitConfirmation",
    "CommitRecord",
    "BranchRecord",
]
