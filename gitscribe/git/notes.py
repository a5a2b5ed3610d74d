"""Attach and read git notes."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from gitscribe.constants import NoteMode
from gitscribe.git.base import GitRunner
from gitscribe.git.parsing import decode_note
from gitscribe.logging import get_logger
from gitscribe.types import Note, PlainNote, StructuredNote, to_note

logger = get_logger("git.notes")


def serialize_note(note: Note) -> str:
    """Render a note as the text git stores.

    Structured notes become compact JSON.
    """
    if isinstance(note, StructuredNote):
        return json.dumps(note.document, separators=(",", ":"))
    return note.text


def _notes_args(runner: GitRunner) -> list[str]:
    args = ["notes"]
    if runner.config.notes_ref:
        args.extend(["--ref", runner.config.notes_ref])
    return args


def add_note(
    runner: GitRunner,
    ref: str,
    note: Note | str | dict[str, Any] | list[Any],
    mode: NoteMode = NoteMode.ADD,
    env: Mapping[str, str] | None = None,
) -> Note:
    """Attach a note to a commit.

    Args:
        runner: Runner for the target repository
        ref: Commit to annotate
        note: Note, text, or JSON-compatible document
        mode: ADD fails if a note exists, FORCE overwrites, APPEND extends
        env: Extra environment (identity of the notes commit)

    Returns:
        The attached note

    Raises:
        GitError: If git rejects the note (e.g. ADD over an existing note)
    """
    note = to_note(note)
    text = serialize_note(note)

    args = _notes_args(runner)
    if mode is NoteMode.APPEND:
        args.append("append")
    else:
        args.append("add")
        if mode is NoteMode.FORCE:
            args.append("-f")
    args.extend(["-m", text, ref])

    runner._run(*args, env=env)
    logger.info(f"Attached note to {ref} ({mode.value})", extra={"ref": ref})
    return note


def get_note(runner: GitRunner, ref: str) -> Note | None:
    """Read the note attached to a commit.

    Args:
        runner: Runner for the target repository
        ref: Commit to inspect

    Returns:
        The decoded note, or None when the commit has none
    """
    result = runner._run(*_notes_args(runner), "show", ref, check=False)
    if result.returncode != 0:
        return None
    text = result.stdout.rstrip("\n")
    if not text:
        return PlainNote("")
    return decode_note(text)
