"""Pytest configuration and fixtures for gitscribe tests."""

import os
import subprocess
from collections.abc import Generator
from pathlib import Path

import pytest

from gitscribe.git.ops import GitOps


def _run_git(*args: str, cwd: Path | None = None) -> str:
    """Run git command safely without shell=True."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


def _configure_identity(path: Path) -> None:
    _run_git("config", "user.email", "test@test.com", cwd=path)
    _run_git("config", "user.name", "Test", cwd=path)
    _run_git("config", "commit.gpgsign", "false", cwd=path)


@pytest.fixture(autouse=True)
def _isolate_git_identity(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep identity variables from the developer's shell out of tests."""
    for key in (
        "GIT_AUTHOR_NAME",
        "GIT_AUTHOR_EMAIL",
        "GIT_AUTHOR_DATE",
        "GIT_COMMITTER_NAME",
        "GIT_COMMITTER_EMAIL",
        "GIT_COMMITTER_DATE",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def tmp_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary git repository with one commit on ``main``.

    Yields:
        Path to the temporary repository
    """
    orig_dir = os.getcwd()
    os.chdir(tmp_path)

    _run_git("init", "-q", "-b", "main", cwd=tmp_path)
    _configure_identity(tmp_path)

    (tmp_path / "README.md").write_text("# Test Repo")
    _run_git("add", "-A", cwd=tmp_path)
    _run_git("commit", "-q", "-m", "Initial commit", cwd=tmp_path)

    yield tmp_path

    os.chdir(orig_dir)


@pytest.fixture
def empty_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary git repository without commits.

    Yields:
        Path to the repository (HEAD is an unborn ``main``)
    """
    repo = tmp_path / "empty"
    repo.mkdir()
    orig_dir = os.getcwd()
    os.chdir(repo)

    _run_git("init", "-q", "-b", "main", cwd=repo)
    _configure_identity(repo)

    yield repo

    os.chdir(orig_dir)


@pytest.fixture
def ops(tmp_repo: Path) -> GitOps:
    """GitOps bound to ``tmp_repo``."""
    return GitOps(tmp_repo)


@pytest.fixture
def git():
    """Helper to run raw git commands in tests."""
    return _run_git
