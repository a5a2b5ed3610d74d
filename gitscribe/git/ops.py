"""GitOps -- repository, branch, commit and history operations."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from gitscribe.constants import (
    BRANCH_REF_FORMAT,
    COMMIT_SUMMARY_FORMAT,
    NoteMode,
    ParentMode,
)
from gitscribe.env import build_identity_env
from gitscribe.exceptions import (
    BranchExistsError,
    BranchNotFoundError,
    GitError,
    NoHeadError,
    RefNotFoundError,
)
from gitscribe.git import notes
from gitscribe.git.base import GitRunner
from gitscribe.git.config import GitConfig
from gitscribe.git.parsing import (
    count_parents,
    parse_branch_refs,
    parse_commit_confirmation,
    parse_commit_summary,
)
from gitscribe.logging import get_logger
from gitscribe.types import BranchRecord, CommitConfirmation, CommitRecord, Identity, Note

logger = get_logger("git.ops")


class GitOps(GitRunner):
    """Git operations used to script a repository history.

    Inherits command execution from GitRunner. Every query re-reads the
    repository; nothing is cached between calls.
    """

    @classmethod
    def init_repository(
        cls,
        path: str | Path,
        initial_branch: str | None = None,
        config: GitConfig | None = None,
    ) -> GitOps:
        """Create (or reinitialize) a repository.

        Args:
            path: Repository directory, created if missing
            initial_branch: Name for the unborn first branch
            config: Git settings for the returned ops object

        Returns:
            GitOps bound to the new repository
        """
        repo_path = Path(path)
        repo_path.mkdir(parents=True, exist_ok=True)

        runner = GitRunner(repo_path, config=config, validate=False)
        args = ["init"]
        if initial_branch:
            args.extend(["-b", initial_branch])
        runner._run(*args)
        logger.info(f"Initialized repository at {runner.repo_path}")
        return cls(repo_path, config=config)

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    def branch_exists(self, branch: str) -> bool:
        """Check if a branch exists.

        Args:
            branch: Branch name

        Returns:
            True if branch exists
        """
        result = self._run("branch", "--list", branch, check=False)
        return bool(result.stdout.strip())

    def list_branch_names(self, pattern: str | None = None) -> list[str]:
        """List local branch names.

        Args:
            pattern: Glob pattern to filter branches

        Returns:
            Branch names in git's order
        """
        args = ["branch", "--list", "--format=%(refname:short)"]
        if pattern:
            args.append(pattern)
        result = self._run(*args)
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def create_branch(self, name: str, start_point: str | None = None) -> str:
        """Create a branch and switch to it.

        Args:
            name: Branch name to create
            start_point: Ref to branch from (default: HEAD)

        Returns:
            The new branch name

        Raises:
            BranchExistsError: If the branch already exists
            RefNotFoundError: If start_point does not resolve
            NoHeadError: If no start_point is given and HEAD is unborn
            GitError: If ``git checkout -b`` fails
        """
        if self.branch_exists(name):
            raise BranchExistsError(f"Branch already exists: {name}", branch=name)

        if start_point is not None:
            if self.resolve_commit(start_point) is None:
                raise RefNotFoundError(f"Start point does not resolve: {start_point}", ref=start_point)
        elif not self.has_head():
            raise NoHeadError(
                "HEAD is not valid; create a commit before branching",
                details={"path": str(self.repo_path)},
            )

        args = ["checkout", "-b", name]
        if start_point is not None:
            args.append(start_point)
        try:
            self._run(*args)
        except GitError as e:
            raise GitError(
                f"Failed to create branch {name}: {e.message}",
                command=e.command,
                exit_code=e.exit_code,
                details={"branch": name},
            ) from e

        logger.info(f"Created branch {name}", extra={"branch": name})
        return name

    def checkout(self, ref: str) -> None:
        """Checkout a branch or commit.

        Args:
            ref: Branch name or commit SHA
        """
        self._run("checkout", ref)
        logger.info(f"Checked out {ref}")

    def get_branch(self, name: str | None = None) -> BranchRecord:
        """Describe a local branch and its tip commit.

        Args:
            name: Branch name (default: current branch)

        Returns:
            BranchRecord with embedded last commit

        Raises:
            BranchNotFoundError: If no such branch exists
        """
        name = name or self.current_branch()
        result = self._run(
            "for-each-ref", f"--format={BRANCH_REF_FORMAT}", f"refs/heads/{name}", check=False
        )
        refs = [ref for ref in parse_branch_refs(result.stdout) if ref.name == name]
        if not refs:
            raise BranchNotFoundError(f"Branch not found: {name}", branch=name)

        ref = refs[0]
        return BranchRecord(
            name=ref.name,
            commit=ref.commit,
            upstream=ref.upstream,
            last_commit=self.get_commit(ref.commit),
        )

    def get_branches(self, pattern: str | None = None) -> list[BranchRecord]:
        """Describe all local branches, optionally filtered.

        Args:
            pattern: for-each-ref pattern below refs/heads/ (e.g. ``feature/*``)

        Returns:
            One BranchRecord per branch
        """
        target = f"refs/heads/{pattern}" if pattern else "refs/heads/"
        result = self._run("for-each-ref", f"--format={BRANCH_REF_FORMAT}", target)
        return [
            BranchRecord(
                name=ref.name,
                commit=ref.commit,
                upstream=ref.upstream,
                last_commit=self.get_commit(ref.commit),
            )
            for ref in parse_branch_refs(result.stdout)
        ]

    # ------------------------------------------------------------------
    # Staging and commits
    # ------------------------------------------------------------------

    def stage(self, paths: Sequence[str | Path] | None = None, *, add_all: bool = False) -> None:
        """Stage files for the next commit.

        Args:
            paths: Paths relative to the repository root
            add_all: Stage every change (also the default when no paths are given)
        """
        if add_all or not paths:
            self._run("add", "-A")
            logger.debug("Staged all changes")
            return
        self._run("add", "--", *(str(p) for p in paths))
        logger.debug(f"Staged {len(paths)} path(s)")

    def identity_env(
        self,
        author: Identity | None = None,
        author_date: datetime | None = None,
        committer: Identity | None = None,
        committer_date: datetime | None = None,
    ) -> dict[str, str]:
        """Build the identity environment, falling back to configured defaults."""
        return build_identity_env(
            author=author or self.config.author(),
            author_date=author_date,
            committer=committer or self.config.committer(),
            committer_date=committer_date,
        )

    def commit(
        self,
        message: str,
        *,
        author: Identity | None = None,
        author_date: datetime | None = None,
        committer: Identity | None = None,
        committer_date: datetime | None = None,
        allow_empty: bool = False,
        note: Note | str | dict[str, Any] | list[Any] | None = None,
        note_mode: NoteMode = NoteMode.ADD,
    ) -> CommitConfirmation:
        """Create a commit from the index.

        Args:
            message: Commit message
            author: Author identity
            author_date: Author timestamp
            committer: Committer identity
            committer_date: Committer timestamp
            allow_empty: Allow a commit with no changes
            note: Note to attach to the new commit
            note_mode: How the note is attached

        Returns:
            Parsed commit confirmation

        Raises:
            GitError: If git refuses the commit
            OutputParseError: If the confirmation line is unrecognized
        """
        env = self.identity_env(author, author_date, committer, committer_date)

        args = ["commit", "-m", message]
        if allow_empty:
            args.append("--allow-empty")

        result = self._run(*args, env=env)
        confirmation = parse_commit_confirmation(result.stdout)
        logger.info(
            f"Created commit {confirmation.short_hash}: {confirmation.title[:50]}",
            extra={"branch": confirmation.branch or "HEAD"},
        )

        if note is not None:
            confirmation.note = notes.add_note(
                self, confirmation.short_hash, note, mode=note_mode, env=env
            )
        return confirmation

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    def add_note(
        self,
        ref: str,
        note: Note | str | dict[str, Any] | list[Any],
        mode: NoteMode = NoteMode.ADD,
    ) -> Note:
        """Attach a note to ``ref``; see :func:`gitscribe.git.notes.add_note`."""
        return notes.add_note(self, ref, note, mode=mode, env=self.identity_env())

    def get_note(self, ref: str = "HEAD") -> Note | None:
        return notes.get_note(self, ref)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def require_commit(self, ref: str) -> str:
        sha = self.resolve_commit(ref)
        if sha is None:
            raise RefNotFoundError(f"Reference not found: {ref}", ref=ref)
        return sha

    def is_root_commit(self, ref: str = "HEAD") -> bool:
        """Check whether ``ref`` has no parents."""
        result = self._run("rev-list", "--parents", "-n", "1", ref, "--")
        return count_parents(result.stdout.strip()) == 0

    def get_commit(self, ref: str = "HEAD") -> CommitRecord:
        """Describe a single commit.

        Args:
            ref: Commit reference (default: HEAD)

        Returns:
            CommitRecord including root status and note

        Raises:
            RefNotFoundError: If ref does not name a commit
        """
        sha = self.require_commit(ref)

        result = self._run("log", "-1", f"--format={COMMIT_SUMMARY_FORMAT}", sha, "--")
        lines = result.stdout.splitlines()
        record = parse_commit_summary(lines[0] if lines else "")

        record.is_root_commit = self.is_root_commit(sha)
        record.note = self.get_note(sha)
        return record

    def get_history(
        self,
        ref: str | None = None,
        max_count: int | None = None,
        parent_mode: ParentMode = ParentMode.ALL,
    ) -> list[CommitRecord]:
        """List commits reachable from ``ref``, most recent first.

        Args:
            ref: Starting reference (default: the current branch)
            max_count: Maximum number of commits (default: unbounded)
            parent_mode: Follow all parents or first parents only

        Returns:
            CommitRecords in rev-list order

        Raises:
            RefNotFoundError: If ref does not name a commit
            ValueError: If max_count is negative
        """
        ref = ref or "HEAD"
        if max_count is not None and max_count < 0:
            raise ValueError("max_count must be non-negative")
        sha = self.require_commit(ref)

        args = ["rev-list"]
        if parent_mode is ParentMode.FIRST:
            args.append("--first-parent")
        if max_count is not None:
            args.append(f"--max-count={max_count}")
        args.extend([sha, "--"])

        result = self._run(*args)
        hashes = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        return [self.get_commit(commit) for commit in hashes]
