"""Tests for gitscribe GitOps against real repositories."""

import os
import subprocess
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from gitscribe.constants import NoteMode, ParentMode
from gitscribe.exceptions import (
    BranchExistsError,
    BranchNotFoundError,
    GitError,
    NoHeadError,
    OutputParseError,
    RefNotFoundError,
)
from gitscribe.git.config import GitConfig, IdentityConfig
from gitscribe.git.ops import GitOps
from gitscribe.types import Identity, PlainNote, StructuredNote


class TestInitRepository:
    def test_creates_directory(self, tmp_path: Path) -> None:
        ops = GitOps.init_repository(tmp_path / "new" / "repo", initial_branch="trunk")
        assert (ops.repo_path / ".git").is_dir()
        assert ops.current_branch() == "trunk"
        assert ops.has_head() is False

    def test_passes_config(self, tmp_path: Path) -> None:
        config = GitConfig(timeout_seconds=5)
        ops = GitOps.init_repository(tmp_path / "repo", config=config)
        assert ops.config is config

    def test_not_a_repository(self, tmp_path: Path) -> None:
        with pytest.raises(GitError, match="Not a git repository"):
            GitOps(tmp_path)


class TestBranches:
    def test_branch_exists(self, ops: GitOps) -> None:
        assert ops.branch_exists("main") is True
        assert ops.branch_exists("nope") is False

    def test_list_branch_names(self, ops: GitOps, git) -> None:
        git("branch", "feature/a", cwd=ops.repo_path)
        git("branch", "feature/b", cwd=ops.repo_path)
        assert ops.list_branch_names() == ["feature/a", "feature/b", "main"]
        assert ops.list_branch_names("feature/*") == ["feature/a", "feature/b"]

    @pytest.mark.smoke
    def test_create_branch_switches(self, ops: GitOps) -> None:
        assert ops.create_branch("topic") == "topic"
        assert ops.current_branch() == "topic"
        assert ops.branch_exists("topic")

    def test_create_branch_from_start_point(self, ops: GitOps, git) -> None:
        first = ops.current_commit()
        git("commit", "-q", "--allow-empty", "-m", "second", cwd=ops.repo_path)
        ops.create_branch("old", start_point=first)
        assert ops.current_commit() == first

    def test_create_existing_branch_leaves_repo_untouched(self, ops: GitOps, git) -> None:
        git("branch", "topic", cwd=ops.repo_path)
        before_branches = ops.list_branch_names()
        before_head = ops.current_commit()

        with pytest.raises(BranchExistsError) as exc_info:
            ops.create_branch("topic")

        assert exc_info.value.branch == "topic"
        assert ops.current_branch() == "main"
        assert ops.list_branch_names() == before_branches
        assert ops.current_commit() == before_head

    def test_create_branch_bad_start_point(self, ops: GitOps) -> None:
        with pytest.raises(RefNotFoundError) as exc_info:
            ops.create_branch("topic", start_point="does-not-exist")
        assert exc_info.value.ref == "does-not-exist"
        assert not ops.branch_exists("topic")

    def test_create_branch_without_head(self, empty_repo: Path) -> None:
        ops = GitOps(empty_repo)
        with pytest.raises(NoHeadError):
            ops.create_branch("topic")

    def test_create_branch_invalid_name(self, ops: GitOps) -> None:
        with pytest.raises(GitError, match="Failed to create branch"):
            ops.create_branch("bad..name")

    def test_checkout(self, ops: GitOps) -> None:
        ops.create_branch("topic")
        ops.checkout("main")
        assert ops.current_branch() == "main"

    def test_get_branch(self, ops: GitOps) -> None:
        record = ops.get_branch("main")
        assert record.name == "main"
        assert record.commit == ops.current_commit()
        assert record.upstream is None
        assert record.last_commit is not None
        assert record.last_commit.title == "Initial commit"

    def test_get_branch_defaults_to_current(self, ops: GitOps) -> None:
        ops.create_branch("topic")
        assert ops.get_branch().name == "topic"

    def test_get_branch_does_not_match_prefix(self, ops: GitOps, git) -> None:
        git("branch", "-m", "main", "trunk", cwd=ops.repo_path)
        git("branch", "main/sub", cwd=ops.repo_path)
        with pytest.raises(BranchNotFoundError):
            ops.get_branch("main")

    def test_get_branch_missing(self, ops: GitOps) -> None:
        with pytest.raises(BranchNotFoundError) as exc_info:
            ops.get_branch("nope")
        assert exc_info.value.branch == "nope"

    def test_get_branch_upstream(self, ops: GitOps, git) -> None:
        git("branch", "topic", cwd=ops.repo_path)
        git("branch", "--set-upstream-to=main", "topic", cwd=ops.repo_path)
        assert ops.get_branch("topic").upstream == "main"

    def test_get_branches(self, ops: GitOps, git) -> None:
        git("branch", "feature/x", cwd=ops.repo_path)
        records = ops.get_branches()
        assert [r.name for r in records] == ["feature/x", "main"]
        assert all(r.last_commit and r.last_commit.title == "Initial commit" for r in records)
        assert [r.name for r in ops.get_branches("feature/*")] == ["feature/x"]


class TestCommit:
    def test_stage_paths(self, ops: GitOps, git) -> None:
        (ops.repo_path / "a.txt").write_text("a")
        (ops.repo_path / "b.txt").write_text("b")
        ops.stage(["a.txt"])
        staged = git("diff", "--cached", "--name-only", cwd=ops.repo_path).split()
        assert staged == ["a.txt"]

    def test_stage_all(self, ops: GitOps, git) -> None:
        (ops.repo_path / "a.txt").write_text("a")
        (ops.repo_path / "README.md").unlink()
        ops.stage()
        staged = git("diff", "--cached", "--name-only", cwd=ops.repo_path).split()
        assert sorted(staged) == ["README.md", "a.txt"]

    @pytest.mark.smoke
    def test_commit_returns_confirmation(self, ops: GitOps) -> None:
        (ops.repo_path / "a.txt").write_text("a")
        ops.stage(["a.txt"])
        confirmation = ops.commit("Add a\n\nLonger body")
        assert confirmation.branch == "main"
        assert confirmation.title == "Add a"
        assert confirmation.is_root_commit is False
        assert ops.current_commit().startswith(confirmation.short_hash)

    def test_root_commit(self, empty_repo: Path) -> None:
        ops = GitOps(empty_repo)
        (empty_repo / "f.txt").write_text("x")
        ops.stage()
        confirmation = ops.commit("First")
        assert confirmation.is_root_commit is True
        assert confirmation.branch == "main"

    def test_root_commit_under_translated_locale(self, empty_repo: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LANGUAGE", "fr:de")
        monkeypatch.setenv("LANG", "fr_FR.UTF-8")
        monkeypatch.setenv("LC_ALL", "fr_FR.UTF-8")
        ops = GitOps(empty_repo)
        (empty_repo / "f.txt").write_text("x")
        ops.stage()

        confirmation = ops.commit("Premier", note="importé")

        assert confirmation.is_root_commit is True
        assert confirmation.branch == "main"
        assert ops.get_note() == PlainNote("importé")

    def test_detached_commit(self, ops: GitOps, git) -> None:
        git("checkout", "-q", "--detach", "HEAD", cwd=ops.repo_path)
        confirmation = ops.commit("Detached", allow_empty=True)
        assert confirmation.detached is True
        assert confirmation.branch is None

    def test_allow_empty_is_passed(self, ops: GitOps) -> None:
        with pytest.raises(GitError):
            ops.commit("Nothing")
        assert ops.commit("Nothing", allow_empty=True).title == "Nothing"

    def test_identities_and_dates(self, ops: GitOps, git) -> None:
        author = Identity("Alice", "alice@example.com")
        committer = Identity("Bob", "bob@example.com")
        author_date = datetime(2001, 2, 3, 4, 5, 6, tzinfo=UTC)
        committer_date = author_date + timedelta(days=1)

        ops.commit(
            "Imported",
            author=author,
            author_date=author_date,
            committer=committer,
            committer_date=committer_date,
            allow_empty=True,
        )

        line = git("log", "-1", "--format=%an|%ae|%aI|%cn|%ce|%cI", cwd=ops.repo_path).strip()
        assert line == (
            "Alice|alice@example.com|2001-02-03T04:05:06Z|"
            "Bob|bob@example.com|2001-02-04T04:05:06Z"
        ).replace("Z", "+00:00")

    def test_identity_does_not_leak_into_process_env(self, ops: GitOps) -> None:
        ops.commit("x", author=Identity("Alice", "a@x"), allow_empty=True)
        assert "GIT_AUTHOR_NAME" not in os.environ

    def test_configured_default_author(self, tmp_repo: Path, git) -> None:
        config = GitConfig(default_author=IdentityConfig(name="Migrator", email="m@example.com"))
        ops = GitOps(tmp_repo, config=config)
        ops.commit("Default author", allow_empty=True)
        assert git("log", "-1", "--format=%an", cwd=tmp_repo).strip() == "Migrator"

        ops.commit("Override", author=Identity("Alice", "a@x"), allow_empty=True)
        assert git("log", "-1", "--format=%an", cwd=tmp_repo).strip() == "Alice"

    def test_unparseable_output(self, ops: GitOps, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_run(*args, **kwargs):
            return subprocess.CompletedProcess(args=[], returncode=0, stdout="something else\n", stderr="")

        monkeypatch.setattr(ops, "_run", fake_run)
        with pytest.raises(OutputParseError) as exc_info:
            ops.commit("x", allow_empty=True)
        assert exc_info.value.raw_output == "something else\n"

    def test_commit_with_structured_note(self, ops: GitOps) -> None:
        confirmation = ops.commit("Noted", allow_empty=True, note={"Reviewer": "Alice"})
        assert confirmation.note == StructuredNote({"Reviewer": "Alice"})
        assert ops.get_note("HEAD") == StructuredNote({"Reviewer": "Alice"})


class TestQueries:
    def test_get_commit_head(self, ops: GitOps) -> None:
        record = ops.get_commit()
        assert record.title == "Initial commit"
        assert record.is_root_commit is True
        assert record.author == Identity("Test", "test@test.com")
        assert record.committer == Identity("Test", "test@test.com")
        assert record.author_date is not None
        assert "HEAD -> main" in record.refs
        assert record.note is None
        assert ops.current_commit().startswith(record.short_hash)

    def test_get_commit_non_root(self, ops: GitOps) -> None:
        ops.commit("Second", allow_empty=True)
        assert ops.get_commit().is_root_commit is False
        assert ops.get_commit("HEAD~1").is_root_commit is True

    def test_get_commit_title_with_separator(self, ops: GitOps) -> None:
        ops.commit("a | b", allow_empty=True)
        assert ops.get_commit().title == "a | b"

    def test_get_commit_refs_include_tags(self, ops: GitOps, git) -> None:
        git("tag", "v1.0", cwd=ops.repo_path)
        assert "tag: v1.0" in ops.get_commit().refs

    def test_get_commit_ref_named_like_directory(self, ops: GitOps, git) -> None:
        (ops.repo_path / "docs").mkdir()
        (ops.repo_path / "docs" / "index.md").write_text("# Docs")
        ops.stage(add_all=True)
        ops.commit("Add docs")
        git("branch", "docs", cwd=ops.repo_path)

        record = ops.get_commit("docs")
        assert record.title == "Add docs"
        assert record.is_root_commit is False
        assert "docs" in record.refs

    def test_get_commit_missing_ref(self, ops: GitOps) -> None:
        with pytest.raises(RefNotFoundError) as exc_info:
            ops.get_commit("no-such-ref")
        assert exc_info.value.ref == "no-such-ref"

    def test_get_commit_empty_repo(self, empty_repo: Path) -> None:
        with pytest.raises(RefNotFoundError):
            GitOps(empty_repo).get_commit()

    def test_get_commit_plain_note(self, ops: GitOps) -> None:
        ops.add_note("HEAD", "imported from r1")
        assert ops.get_commit().note == PlainNote("imported from r1")

    def test_note_modes(self, ops: GitOps) -> None:
        ops.add_note("HEAD", "one")
        with pytest.raises(GitError):
            ops.add_note("HEAD", "two")
        ops.add_note("HEAD", "two", mode=NoteMode.FORCE)
        assert ops.get_note() == PlainNote("two")
        ops.add_note("HEAD", "three", mode=NoteMode.APPEND)
        assert ops.get_note() == PlainNote("two\n\nthree")

    def test_notes_ref(self, tmp_repo: Path, git) -> None:
        ops = GitOps(tmp_repo, config=GitConfig(notes_ref="refs/notes/migration"))
        ops.add_note("HEAD", {"rev": 7})
        assert ops.get_note() == StructuredNote({"rev": 7})
        assert GitOps(tmp_repo).get_note() is None
        assert "refs/notes/migration" in git("for-each-ref", "refs/notes/", cwd=tmp_repo)


class TestHistory:
    @pytest.fixture
    def merge_repo(self, ops: GitOps) -> GitOps:
        """main: I - M1 - merge(S1..S2) - M2 ; side: S1 - S2."""
        ops.commit("M1", allow_empty=True)
        ops.create_branch("side")
        ops.commit("S1", allow_empty=True)
        ops.commit("S2", allow_empty=True)
        ops.checkout("main")
        ops._run("merge", "--no-ff", "-m", "Merge side", "side")
        ops.commit("M2", allow_empty=True)
        return ops

    def test_all_parents(self, merge_repo: GitOps) -> None:
        titles = [r.title for r in merge_repo.get_history()]
        assert titles[0] == "M2"
        assert titles[1] == "Merge side"
        assert set(titles) == {"M2", "Merge side", "S2", "S1", "M1", "Initial commit"}
        assert len(titles) == 6

    @pytest.mark.smoke
    def test_first_parent(self, merge_repo: GitOps) -> None:
        titles = [r.title for r in merge_repo.get_history(parent_mode=ParentMode.FIRST)]
        assert titles == ["M2", "Merge side", "M1", "Initial commit"]

    def test_first_parent_max_count(self, merge_repo: GitOps) -> None:
        records = merge_repo.get_history("main", max_count=2, parent_mode=ParentMode.FIRST)
        assert [r.title for r in records] == ["M2", "Merge side"]

    def test_max_count_zero(self, merge_repo: GitOps) -> None:
        assert merge_repo.get_history(max_count=0) == []

    def test_negative_max_count(self, ops: GitOps) -> None:
        with pytest.raises(ValueError):
            ops.get_history(max_count=-1)

    def test_history_of_ref_named_like_directory(self, ops: GitOps, git) -> None:
        (ops.repo_path / "docs").mkdir()
        (ops.repo_path / "docs" / "index.md").write_text("# Docs")
        ops.stage(add_all=True)
        ops.commit("Add docs")
        git("branch", "docs", cwd=ops.repo_path)

        assert [r.title for r in ops.get_history("docs")] == ["Add docs", "Initial commit"]

    def test_history_of_other_ref(self, merge_repo: GitOps) -> None:
        assert [r.title for r in merge_repo.get_history("side")] == ["S2", "S1", "M1", "Initial commit"]

    def test_root_flag_in_history(self, merge_repo: GitOps) -> None:
        records = merge_repo.get_history()
        roots = [r.title for r in records if r.is_root_commit]
        assert roots == ["Initial commit"]

    def test_unknown_ref(self, ops: GitOps) -> None:
        with pytest.raises(RefNotFoundError):
            ops.get_history("nope")
