from __future__ import annotations

import os
import shlex
import subprocess
from pathlib import Path
from typing import Iterable

from stashguard.console import Console
from stashguard.constants import STAGED_FILES_ENV_VAR
from stashguard.models import RunContext, RunReport, TaskResult, TaskSpec
from stashguard.stash import StashUnstagedChanges
from stashguard.utils import _compact_log_text


def _task_env(context: RunContext) -> dict[str, str]:
    env = os.environ.copy()
    env[STAGED_FILES_ENV_VAR] = "\n".join(context.files)
    return env


def _execute_task(repo_root: Path, task: TaskSpec, context: RunContext) -> TaskResult:
    try:
        argv = shlex.split(task.command)
    except ValueError as exc:
        return TaskResult(task.name, 2, f"invalid command: {exc}")
    if not argv:
        return TaskResult(task.name, 2, "empty command")
    try:
        completed = subprocess.run(
            argv,
            cwd=repo_root,
            text=True,
            capture_output=True,
            check=False,
            timeout=task.timeout_seconds,
            env=_task_env(context),
        )
    except subprocess.TimeoutExpired:
        return TaskResult(task.name, 124, f"timed out after {task.timeout_seconds:g}s")
    except FileNotFoundError as exc:
        return TaskResult(task.name, 127, f"command not found: {exc}")
    except OSError as exc:
        return TaskResult(task.name, 1, str(exc))
    output = "\n".join(part for part in (completed.stdout, completed.stderr) if part)
    return TaskResult(task.name, completed.returncode, output.strip())


def run_tasks(
    repo_root: Path,
    context: RunContext,
    tasks: Iterable[TaskSpec],
    *,
    stash: StashUnstagedChanges,
    console: Console,
) -> RunReport:
    """Run tasks between the stash controller's start and finish signals.

    Each task sees the context's files, newline-separated, in
    ``STASHGUARD_STAGED_FILES``. The finish signal is sent whether tasks pass
    or fail. An exception escaping
    a task skips it; the host's fatal-error path must restore the stash then.
    """
    stash.on_run_start(context)

    results: list[TaskResult] = []
    for task in tasks:
        result = _execute_task(repo_root, task, context)
        results.append(result)
        status = "PASS" if result.passed else f"FAIL (exit {result.returncode})"
        console.write(f"{task.name}: {status}")
        if not result.passed and result.output:
            console.write(_compact_log_text(result.output, limit=2000))

    report = RunReport(context=context, results=tuple(results))
    stash.on_run_finished(context)
    return report
