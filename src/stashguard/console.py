"""Status output for stash and task progress."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from stashguard.utils import _append_log, _resolve_log_path


class Console:
    """Writes status lines to the terminal and mirrors them to the log file.

    Inside a git repository the log lives under the git dir, never in the
    work tree. A log file that cannot be written is reported once on stderr
    and mirroring stops; terminal output is unaffected.
    """

    def __init__(
        self,
        repo_root: Path | None = None,
        *,
        stream: TextIO | None = None,
        error_stream: TextIO | None = None,
    ) -> None:
        self.repo_root = repo_root
        self._stream = stream
        self._error_stream = error_stream
        self._log_path: Path | None = None
        self._log_disabled = repo_root is None

    @property
    def log_path(self) -> Path | None:
        if self.repo_root is None:
            return None
        if self._log_path is None:
            self._log_path = _resolve_log_path(self.repo_root)
        return self._log_path

    def write(self, message: str) -> None:
        print(message, file=self._stream or sys.stdout)
        self._log(message)

    def warn(self, message: str) -> None:
        print(f"WARNING: {message}", file=self._error_stream or sys.stderr)
        self._log(f"WARNING {message}")

    def error(self, message: str) -> None:
        print(f"ERROR: {message}", file=self._error_stream or sys.stderr)
        self._log(f"ERROR {message}")

    def _log(self, message: str) -> None:
        if self._log_disabled:
            return
        log_path = self.log_path
        try:
            _append_log(log_path, message)
        except OSError as exc:
            self._log_disabled = True
            print(
                f"WARNING: cannot write log file {log_path}: {exc}",
                file=self._error_stream or sys.stderr,
            )
