"""Shared data types for gitscribe operations."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

_IDENTITY_RE = re.compile(r"^\s*(?P<name>[^<>]*?)\s*<(?P<email>[^<>]*)>\s*$")


@dataclass(frozen=True)
class Identity:
    """Author or committer identity."""

    name: str
    email: str

    @classmethod
    def parse(cls, value: str) -> Identity:
        """Parse ``"Name <email>"``.

        Raises:
            ValueError: If the value is not in ``Name <email>`` form
        """
        match = _IDENTITY_RE.match(value)
        if not match or not match.group("name"):
            raise ValueError(f"Expected 'Name <email>', got {value!r}")
        return cls(name=match.group("name"), email=match.group("email"))

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


@dataclass(frozen=True)
class PlainNote:
    """Note stored as free text."""

    text: str

    def to_value(self) -> str:
        return self.text


@dataclass(frozen=True)
class StructuredNote:
    """Note stored as a JSON document."""

    document: dict[str, Any] | list[Any]

    def to_value(self) -> dict[str, Any] | list[Any]:
        return self.document


Note = PlainNote | StructuredNote


def to_note(value: Note | str | dict[str, Any] | list[Any]) -> Note:
    """Coerce a raw note value into the Note variant.

    Args:
        value: Existing note, text, or JSON-compatible document

    Returns:
        PlainNote for text, StructuredNote for dicts and lists

    Raises:
        TypeError: For any other value type
    """
    if isinstance(value, PlainNote | StructuredNote):
        return value
    if isinstance(value, str):
        return PlainNote(value)
    if isinstance(value, dict | list):
        return StructuredNote(value)
    raise TypeError(f"Unsupported note value: {type(value).__name__}")


@dataclass
class CommitConfirmation:
    """Parsed ``git commit`` confirmation line."""

    short_hash: str
    title: str
    branch: str | None = None
    detached: bool = False
    is_root_commit: bool = False
    note: Note | None = None


@dataclass
class CommitRecord:
    """Commit metadata as reported by git."""

    short_hash: str | None = None
    title: str | None = None
    is_root_commit: bool = False
    author: Identity | None = None
    author_date: datetime | None = None
    committer: Identity | None = None
    committer_date: datetime | None = None
    refs: list[str] = field(default_factory=list)
    note: Note | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "short_hash": self.short_hash,
            "title": self.title,
            "is_root_commit": self.is_root_commit,
            "author": _identity_dict(self.author),
            "author_date": self.author_date.isoformat() if self.author_date else None,
            "committer": _identity_dict(self.committer),
            "committer_date": self.committer_date.isoformat() if self.committer_date else None,
            "refs": list(self.refs),
            "note": self.note.to_value() if self.note else None,
        }


@dataclass
class BranchRecord:
    """Local branch with its tip commit."""

    name: str
    commit: str
    upstream: str | None = None
    last_commit: CommitRecord | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "commit": self.commit,
            "upstream": self.upstream,
            "last_commit": self.last_commit.to_dict() if self.last_commit else None,
        }


def _identity_dict(identity: Identity | None) -> dict[str, str] | None:
    if identity is None:
        return None
    return {"name": identity.name, "email": identity.email}
