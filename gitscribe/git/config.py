"""Git configuration models for gitscribe."""

from __future__ import annotations

from pydantic import BaseModel, Field

from gitscribe.constants import DEFAULT_TIMEOUT_SECONDS
from gitscribe.types import Identity


class IdentityConfig(BaseModel):
    """Configured author or committer identity."""

    name: str = Field(min_length=1)
    email: str

    def to_identity(self) -> Identity:
        return Identity(name=self.name, email=self.email)


class GitConfig(BaseModel):
    """Settings passed to every git invocation."""

    executable: str = "git"
    timeout_seconds: int = Field(default=DEFAULT_TIMEOUT_SECONDS, ge=1, le=3600)
    default_author: IdentityConfig | None = None
    default_committer: IdentityConfig | None = None
    notes_ref: str | None = Field(
        default=None,
        description="Notes ref passed as --ref (default: refs/notes/commits)",
    )
    extra_env: dict[str, str] = Field(default_factory=dict)

    def author(self) -> Identity | None:
        return self.default_author.to_identity() if self.default_author else None

    def committer(self) -> Identity | None:
        return self.default_committer.to_identity() if self.default_committer else None
