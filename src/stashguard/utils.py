"""Stashguard utility functions — timestamps, log files, and git subprocess helpers."""

from __future__ import annotations

import subprocess
import uuid
from datetime import datetime, timezone
from pathlib import Path

from stashguard.constants import GIT_DIR_LOG_PATH, LOG_RELATIVE_PATH


# ---------------------------------------------------------------------------
# Timestamp helpers
# ---------------------------------------------------------------------------


def _utc_now() -> str:
    return (
        datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")
    )


def _generate_stash_label(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:13]}"


# ---------------------------------------------------------------------------
# Log helpers
# ---------------------------------------------------------------------------


def _compact_log_text(text: str, limit: int = 240) -> str:
    compact = " ".join(text.strip().split())
    if len(compact) <= limit:
        return compact
    return f"{compact[:limit]}..."


def _resolve_log_path(repo_root: Path) -> Path:
    resolved = _run_git(repo_root, ["rev-parse", "--git-path", GIT_DIR_LOG_PATH])
    if resolved.returncode != 0 or not resolved.stdout.strip():
        return repo_root / LOG_RELATIVE_PATH
    log_path = Path(resolved.stdout.strip())
    if not log_path.is_absolute():
        log_path = repo_root / log_path
    return log_path


def _append_log(log_path: Path, message: str) -> None:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("a", encoding="utf-8") as handle:
        handle.write(f"{_utc_now()} {message}\n")


# ---------------------------------------------------------------------------
# Git helpers
# ---------------------------------------------------------------------------


def _run_git(repo_root: Path, args: list[str]) -> subprocess.CompletedProcess[str]:
    command = ["git", "-C", str(repo_root), *args]
    try:
        return subprocess.run(
            command,
            text=True,
            capture_output=True,
            check=False,
        )
    except FileNotFoundError as exc:
        return subprocess.CompletedProcess(command, 127, "", f"git not found: {exc}")
    except OSError as exc:
        return subprocess.CompletedProcess(command, 1, "", str(exc))


def _split_name_only(stdout: str) -> list[str]:
    paths: list[str] = []
    seen: set[str] = set()
    for raw_line in stdout.splitlines():
        path = raw_line.strip()
        if not path or path in seen:
            continue
        seen.add(path)
        paths.append(path)
    return paths
