"""GitRunner base class -- low-level git command execution."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping
from pathlib import Path

from gitscribe.constants import GIT_LOCALE_ENV
from gitscribe.exceptions import GitError, GitNotFoundError
from gitscribe.git.config import GitConfig
from gitscribe.logging import get_logger

logger = get_logger("git.base")


class GitRunner:
    """Low-level git command runner with repository validation.

    All git processes are started here. Environment overrides are passed
    per call and merged into a copy of ``os.environ``; the process
    environment itself is never modified.
    """

    def __init__(
        self,
        repo_path: str | Path = ".",
        config: GitConfig | None = None,
        validate: bool = True,
    ) -> None:
        """Initialize git runner.

        Args:
            repo_path: Path to the git repository
            config: Git settings (executable, timeout, default identities)
            validate: Check that repo_path is a repository

        Raises:
            GitError: If the path is not a git repository
        """
        self.repo_path = Path(repo_path).resolve()
        self.config = config or GitConfig()
        if validate:
            self._validate_repo()

    def _validate_repo(self) -> None:
        """Validate that repo_path is a git repository."""
        # .git is a directory, or a file for worktrees
        if not (self.repo_path / ".git").exists():
            raise GitError(
                f"Not a git repository: {self.repo_path}",
                details={"path": str(self.repo_path)},
            )

    def _build_env(self, env: Mapping[str, str] | None) -> dict[str, str]:
        merged = dict(os.environ)
        merged.update(self.config.extra_env)
        merged.update(GIT_LOCALE_ENV)
        if env:
            merged.update(env)
        return merged

    def _run(
        self,
        *args: str,
        check: bool = True,
        capture: bool = True,
        env: Mapping[str, str] | None = None,
        timeout: int | None = None,
    ) -> subprocess.CompletedProcess[str]:
        """Run a git command.

        Args:
            *args: Git command arguments
            check: Whether to raise on non-zero exit
            capture: Whether to capture output
            env: Extra environment variables for this invocation only
            timeout: Timeout in seconds (default from config)

        Returns:
            Completed process result

        Raises:
            GitNotFoundError: If the git executable is missing
            GitError: If the command fails (when check=True) or times out
        """
        timeout = timeout or self.config.timeout_seconds
        cmd = [self.config.executable, "-C", str(self.repo_path), *args]
        logger.debug(f"Running: {' '.join(cmd)}", extra={"command": " ".join(args)})

        try:
            result = subprocess.run(
                cmd,
                capture_output=capture,
                text=True,
                encoding="utf-8",
                check=check,
                timeout=timeout,
                env=self._build_env(env),
            )
            return result
        except FileNotFoundError as e:
            raise GitNotFoundError(self.config.executable) from e
        except subprocess.TimeoutExpired as e:
            raise GitError(
                f"Git command timed out after {timeout}s: {' '.join(args)}",
                command=" ".join(cmd),
                exit_code=-1,
            ) from e
        except subprocess.CalledProcessError as e:
            raise GitError(
                f"Git command failed: {e.stderr.strip() if e.stderr else str(e)}",
                command=" ".join(cmd),
                exit_code=e.returncode,
            ) from e

    def resolve_commit(self, ref: str) -> str | None:
        """Resolve a reference to a full commit SHA.

        Args:
            ref: Branch, tag, or commit

        Returns:
            Full SHA, or None if the reference does not name a commit
        """
        result = self._run("rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}", check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def has_head(self) -> bool:
        """Check whether HEAD points at a commit."""
        return self.resolve_commit("HEAD") is not None

    def current_branch(self) -> str:
        """Get the current branch name.

        Works on unborn branches too.

        Returns:
            Current branch name, or "HEAD" when detached
        """
        result = self._run("symbolic-ref", "--quiet", "--short", "HEAD", check=False)
        if result.returncode == 0:
            return result.stdout.strip()
        return "HEAD"

    def current_commit(self) -> str:
        """Get the current commit SHA.

        Returns:
            Full 40-character commit SHA
        """
        result = self._run("rev-parse", "HEAD")
        return result.stdout.strip()
