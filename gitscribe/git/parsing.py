"""Parsers for the git output formats gitscribe depends on.

Each parser documents the exact format it accepts. Commit confirmation
lines that do not match raise OutputParseError; short commit summary lines
leave the missing fields unset.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import datetime

from gitscribe.constants import (
    BRANCH_REF_FIELDS,
    COMMIT_SUMMARY_FIELDS,
    DETACHED_HEAD,
    FIELD_SEPARATOR,
)
from gitscribe.exceptions import OutputParseError
from gitscribe.logging import get_logger
from gitscribe.types import CommitConfirmation, CommitRecord, Identity, Note, PlainNote, StructuredNote

logger = get_logger("git.parsing")

# [<branch> (root-commit) <hash>] <title>
COMMIT_CONFIRMATION_RE = re.compile(
    r"^\[(?P<branch>detached HEAD|[^\s\]]+) "
    r"(?P<root>\(root-commit\) )?"
    r"(?P<hash>[0-9a-f]{4,64})\] "
    r"(?P<title>.*)$",
    re.MULTILINE,
)


@dataclass
class BranchRef:
    """One line of the branch ref enumeration."""

    name: str
    commit: str
    upstream: str | None = None


def parse_commit_confirmation(output: str) -> CommitConfirmation:
    """Parse the summary line ``git commit`` prints.

    Format: ``[<branch-or-detached HEAD> (root-commit )?<hash>] <title>``.
    Only the first matching line is used; diffstat lines are ignored.

    Args:
        output: Raw stdout of ``git commit``

    Returns:
        Parsed confirmation

    Raises:
        OutputParseError: If no line matches
    """
    match = COMMIT_CONFIRMATION_RE.search(output)
    if not match:
        raise OutputParseError(
            f"Unrecognized commit output: {output.strip()!r}", raw_output=output
        )

    branch = match.group("branch")
    detached = branch == DETACHED_HEAD
    return CommitConfirmation(
        short_hash=match.group("hash"),
        title=match.group("title").rstrip(),
        branch=None if detached else branch,
        detached=detached,
        is_root_commit=match.group("root") is not None,
    )


def parse_ref_names(field: str) -> list[str]:
    """Split a ``%D`` decoration field into ref names."""
    return [name.strip() for name in field.split(",") if name.strip()]


def _parse_date(value: str) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        logger.warning(f"Unparseable date in git output: {value!r}")
        return None


def _parse_identity(name: str, email: str) -> Identity | None:
    if not name and not email:
        return None
    return Identity(name=name, email=email)


def parse_commit_summary(line: str) -> CommitRecord:
    """Parse one ``%D|%h|%s|%an|%ae|%aI|%cn|%ce|%cI`` line.

    A line with fewer than nine fields yields a record whose fields are
    all unset. A subject containing the separator yields more than nine
    fields; the surplus is joined back into the title.

    Args:
        line: One line of ``git log --format`` output

    Returns:
        CommitRecord without root status or note
    """
    parts = line.rstrip("\n").split(FIELD_SEPARATOR)
    if len(parts) < COMMIT_SUMMARY_FIELDS:
        logger.warning(
            f"Commit summary has {len(parts)} fields, expected {COMMIT_SUMMARY_FIELDS}: {line!r}"
        )
        return CommitRecord()

    refs = parts[0]
    short_hash = parts[1]
    # title sits between the two fixed-width ends
    title = FIELD_SEPARATOR.join(parts[2:-6])
    an, ae, ad, cn, ce, cd = parts[-6:]

    return CommitRecord(
        short_hash=short_hash or None,
        title=title,
        author=_parse_identity(an, ae),
        author_date=_parse_date(ad),
        committer=_parse_identity(cn, ce),
        committer_date=_parse_date(cd),
        refs=parse_ref_names(refs),
    )


def parse_branch_refs(output: str) -> list[BranchRef]:
    """Parse ``%(refname:short)|%(objectname)|%(upstream:short)`` lines.

    Lines with fewer than three fields are skipped.
    """
    refs: list[BranchRef] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = line.split(FIELD_SEPARATOR)
        if len(parts) < BRANCH_REF_FIELDS:
            logger.warning(f"Skipping malformed ref line: {line!r}")
            continue
        name, commit, upstream = parts[0], parts[1], parts[2]
        refs.append(BranchRef(name=name, commit=commit, upstream=upstream or None))
    return refs


def count_parents(rev_list_line: str) -> int:
    """Count parents in a ``git rev-list --parents -n 1`` line."""
    hashes = rev_list_line.split()
    return max(len(hashes) - 1, 0)


def decode_note(text: str) -> Note:
    """Turn stored note text back into a Note.

    JSON objects and arrays become StructuredNote; everything else,
    including JSON scalars, stays PlainNote.
    """
    try:
        value = json.loads(text)
    except ValueError:
        return PlainNote(text)
    if isinstance(value, dict | list):
        return StructuredNote(value)
    return PlainNote(text)
