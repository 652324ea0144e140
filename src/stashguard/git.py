"""Git working-copy operations used by the stash controller."""

from __future__ import annotations

import subprocess
from pathlib import Path

from stashguard.models import GitCommandError
from stashguard.utils import _compact_log_text, _run_git, _split_name_only


class GitRepository:
    def __init__(self, repo_root: Path) -> None:
        self.repo_root = Path(repo_root)

    def run(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        return _run_git(self.repo_root, args)

    def _run_checked(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        completed = self.run(args)
        if completed.returncode != 0:
            detail = _compact_log_text(
                (completed.stderr or completed.stdout or "unknown git error").strip()
            )
            raise GitCommandError(["git", *args], completed.returncode, detail)
        return completed

    def is_worktree(self) -> bool:
        check = self.run(["rev-parse", "--is-inside-work-tree"])
        return check.returncode == 0 and check.stdout.strip() == "true"

    def pending_diff_files(self) -> list[str]:
        """Files with unstaged changes (working tree vs. index)."""
        return _split_name_only(self._run_checked(["diff", "--name-only"]).stdout)

    def pending_diff_file_count(self) -> int:
        return len(self.pending_diff_files())

    def staged_files(self) -> list[str]:
        return _split_name_only(
            self._run_checked(["diff", "--cached", "--name-only"]).stdout
        )

    def stash_save(self, *, quiet: bool = True, keep_index: bool = True, label: str) -> None:
        args = ["stash", "push"]
        if quiet:
            args.append("--quiet")
        if keep_index:
            args.append("--keep-index")
        args.extend(["--message", label])
        self._run_checked(args)

    def stash_pop(self, *, quiet: bool = True) -> None:
        args = ["stash", "pop"]
        if quiet:
            args.append("--quiet")
        self._run_checked(args)
