"""Environment helpers: scoped overrides and git identity variables."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any, TypeVar

from gitscribe.constants import (
    GIT_AUTHOR_DATE,
    GIT_AUTHOR_EMAIL,
    GIT_AUTHOR_NAME,
    GIT_COMMITTER_DATE,
    GIT_COMMITTER_EMAIL,
    GIT_COMMITTER_NAME,
    GIT_DATE_FORMAT,
)
from gitscribe.types import Identity

T = TypeVar("T")


@contextmanager
def scoped_env(overrides: Mapping[str, str]) -> Iterator[None]:
    """Override process environment variables for the duration of a block.

    Every key is restored to its previous value, or removed if it was unset,
    on all exit paths. Mutates ``os.environ`` and is not thread-safe.

    Args:
        overrides: Variable name to value mapping
    """
    saved: dict[str, str | None] = {key: os.environ.get(key) for key in overrides}
    try:
        for key, value in overrides.items():
            os.environ[key] = value
        yield
    finally:
        for key, previous in saved.items():
            if previous is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = previous


def with_env(
    overrides: Mapping[str, str],
    operation: Callable[..., T],
    *args: Any,
    **kwargs: Any,
) -> T:
    """Run ``operation`` with environment overrides applied.

    Args:
        overrides: Variable name to value mapping
        operation: Callable to run
        *args: Positional arguments for the callable
        **kwargs: Keyword arguments for the callable

    Returns:
        Whatever ``operation`` returns
    """
    with scoped_env(overrides):
        return operation(*args, **kwargs)


def format_git_date(value: datetime) -> str:
    """Format a timestamp as ``yyyy-MM-ddTHH:mm:ssZ`` in UTC.

    Naive datetimes are taken to be UTC already.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime(GIT_DATE_FORMAT)


def build_identity_env(
    author: Identity | None = None,
    author_date: datetime | None = None,
    committer: Identity | None = None,
    committer_date: datetime | None = None,
) -> dict[str, str]:
    """Map identities and timestamps to git's environment variables.

    Only supplied inputs produce keys.

    Args:
        author: Author identity
        author_date: Author timestamp
        committer: Committer identity
        committer_date: Committer timestamp

    Returns:
        Variable name to value mapping
    """
    env: dict[str, str] = {}
    if author is not None:
        env[GIT_AUTHOR_NAME] = author.name
        env[GIT_AUTHOR_EMAIL] = author.email
    if author_date is not None:
        env[GIT_AUTHOR_DATE] = format_git_date(author_date)
    if committer is not None:
        env[GIT_COMMITTER_NAME] = committer.name
        env[GIT_COMMITTER_EMAIL] = committer.email
    if committer_date is not None:
        env[GIT_COMMITTER_DATE] = format_git_date(committer_date)
    return env
