from __future__ import annotations

from pathlib import Path

import pytest

from stashguard.git import GitRepository
from stashguard.models import GitCommandError


def test_pending_and_staged_files(git_repo: Path) -> None:
    repository = GitRepository(git_repo)

    assert repository.is_worktree() is True
    assert repository.pending_diff_files() == ["b.txt"]
    assert repository.pending_diff_file_count() == 1
    assert repository.staged_files() == ["a.txt"]


def test_stash_save_keeps_index_and_pop_restores(git_repo: Path, git) -> None:
    repository = GitRepository(git_repo)

    repository.stash_save(quiet=True, keep_index=True, label="stashguard-test123")

    assert (git_repo / "b.txt").read_text(encoding="utf-8") == "b committed\n"
    assert (git_repo / "a.txt").read_text(encoding="utf-8") == "a staged\n"
    assert repository.staged_files() == ["a.txt"]
    assert repository.pending_diff_file_count() == 0
    assert "stashguard-test123" in git(git_repo, "stash", "list").stdout

    repository.stash_pop(quiet=True)

    assert (git_repo / "b.txt").read_text(encoding="utf-8") == "b unstaged\n"
    assert git(git_repo, "stash", "list").stdout.strip() == ""


def test_stash_pop_without_stash_raises(git_repo: Path) -> None:
    repository = GitRepository(git_repo)

    with pytest.raises(GitCommandError) as excinfo:
        repository.stash_pop(quiet=True)

    assert excinfo.value.returncode != 0
    assert excinfo.value.command[:3] == ["git", "stash", "pop"]


def test_outside_worktree_reports_errors(tmp_path: Path) -> None:
    repository = GitRepository(tmp_path)

    assert repository.is_worktree() is False
    with pytest.raises(GitCommandError):
        repository.pending_diff_files()


def test_missing_git_binary_becomes_failed_result(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("PATH", str(tmp_path / "empty-bin"))
    repository = GitRepository(tmp_path)

    completed = repository.run(["status"])

    assert completed.returncode == 127
    assert "git not found" in completed.stderr
