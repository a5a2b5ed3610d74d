"""Replay a YAML history plan against a repository.

A plan is an ordered list of steps. Each step is a mapping with exactly one
of ``branch``, ``checkout`` or ``commit``::

    initial_branch: main
    author: "Alice <alice@example.com>"
    steps:
      - commit:
          message: Initial import
          files: {README.md: "# Project\\n"}
          author_date: 2019-03-01T10:00:00Z
      - branch: {name: feature/login}
      - commit:
          message: Add login
          files: {login.py: "print('login')\\n"}
          note: {svn_revision: 1042}
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from gitscribe.exceptions import GitError, PlanError
from gitscribe.git.ops import GitOps
from gitscribe.logging import get_logger
from gitscribe.types import CommitConfirmation, Identity

logger = get_logger("replay")


class BranchStep(BaseModel):
    """Create a branch and switch to it."""

    name: str = Field(min_length=1)
    start_point: str | None = None
    checkout_if_exists: bool = False


class CommitStep(BaseModel):
    """Write files, stage everything and commit."""

    message: str = Field(min_length=1)
    files: dict[str, str] = Field(default_factory=dict)
    delete: list[str] = Field(default_factory=list)
    author: str | None = None
    author_date: datetime | None = None
    committer: str | None = None
    committer_date: datetime | None = None
    allow_empty: bool = False
    note: str | dict[str, Any] | list[Any] | None = None

    @field_validator("author", "committer")
    @classmethod
    def check_identity(cls, value: str | None) -> str | None:
        if value is not None:
            Identity.parse(value)
        return value


class PlanStep(BaseModel):
    """One plan entry; exactly one field is set."""

    branch: BranchStep | None = None
    checkout: str | None = None
    commit: CommitStep | None = None

    @model_validator(mode="after")
    def check_exactly_one(self) -> PlanStep:
        chosen = [k for k in ("branch", "checkout", "commit") if getattr(self, k) is not None]
        if len(chosen) != 1:
            raise ValueError("each step needs exactly one of: branch, checkout, commit")
        return self


class HistoryPlan(BaseModel):
    """A full history to build."""

    initial_branch: str | None = None
    author: str | None = None
    committer: str | None = None
    steps: list[PlanStep] = Field(default_factory=list)

    @field_validator("author", "committer")
    @classmethod
    def check_identity(cls, value: str | None) -> str | None:
        if value is not None:
            Identity.parse(value)
        return value


def load_plan(path: str | Path) -> HistoryPlan:
    """Load and validate a plan file.

    Raises:
        PlanError: If the file is missing, not YAML, or fails validation
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise PlanError(f"Cannot read plan {path}: {e.strerror}") from e
    except yaml.YAMLError as e:
        raise PlanError(f"Invalid YAML in plan {path}", details={"error": str(e)}) from e

    if not isinstance(data, dict):
        raise PlanError(f"Expected a mapping at the top of {path}")

    try:
        return HistoryPlan(**data)
    except ValidationError as e:
        raise PlanError(f"Invalid plan {path}", details={"errors": e.errors()}) from e


def _repo_file(ops: GitOps, relative: str, step: int) -> Path:
    target = (ops.repo_path / relative).resolve()
    if not target.is_relative_to(ops.repo_path) or target == ops.repo_path:
        raise PlanError(f"Path escapes the repository: {relative}", step=step)
    if target.relative_to(ops.repo_path).parts[0].lower() == ".git":
        raise PlanError(f"Path points into the git directory: {relative}", step=step)
    return target


def _apply_commit(ops: GitOps, plan: HistoryPlan, commit: CommitStep, step: int) -> CommitConfirmation:
    for relative, content in commit.files.items():
        target = _repo_file(ops, relative, step)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
    for relative in commit.delete:
        _repo_file(ops, relative, step).unlink(missing_ok=True)

    ops.stage(add_all=True)

    author = commit.author or plan.author
    committer = commit.committer or plan.committer
    return ops.commit(
        commit.message,
        author=Identity.parse(author) if author else None,
        author_date=commit.author_date,
        committer=Identity.parse(committer) if committer else None,
        committer_date=commit.committer_date or commit.author_date,
        allow_empty=commit.allow_empty,
        note=commit.note,
    )


def replay_plan(ops: GitOps, plan: HistoryPlan) -> list[CommitConfirmation]:
    """Apply every plan step in order.

    Args:
        ops: Target repository
        plan: Validated plan

    Returns:
        Confirmations of the commits created

    Raises:
        PlanError: If a step fails; earlier steps stay applied
    """
    commits: list[CommitConfirmation] = []

    if plan.initial_branch and not ops.has_head():
        # Rename the unborn branch so the root commit lands on it
        ops._run("symbolic-ref", "HEAD", f"refs/heads/{plan.initial_branch}")

    for index, step in enumerate(plan.steps, start=1):
        try:
            if step.branch is not None:
                if step.branch.checkout_if_exists and ops.branch_exists(step.branch.name):
                    logger.info(f"Step {index}: branch {step.branch.name} exists, checking out")
                    ops.checkout(step.branch.name)
                else:
                    ops.create_branch(step.branch.name, step.branch.start_point)
            elif step.checkout is not None:
                ops.checkout(step.checkout)
            elif step.commit is not None:
                commits.append(_apply_commit(ops, plan, step.commit, index))
        except GitError as e:
            raise PlanError(
                f"Step {index} failed: {e.message}", step=index, details=e.details
            ) from e
        except OSError as e:
            raise PlanError(
                f"Step {index} failed: {e.strerror or e}", step=index, details={"path": e.filename}
            ) from e

    logger.info(f"Replayed {len(plan.steps)} step(s), {len(commits)} commit(s)")
    return commits
