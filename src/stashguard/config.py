from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from stashguard.constants import (
    DEFAULT_IGNORE_UNSTAGED_CHANGES,
    DEFAULT_LABEL_PREFIX,
    DEFAULT_TASK_TIMEOUT_SECONDS,
    IGNORE_UNSTAGED_ENV_VAR,
    POLICY_RELATIVE_PATH,
)
from stashguard.models import (
    ConfigError,
    StashConfig,
    TaskSpec,
    _coerce_bool,
    _coerce_positive_float,
)


def _load_policy(repo_root: Path) -> dict[str, Any]:
    policy_path = repo_root / POLICY_RELATIVE_PATH
    if not policy_path.exists():
        return {}
    try:
        loaded = yaml.safe_load(policy_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"could not load {policy_path}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{policy_path} must contain a top-level mapping")
    return loaded


def _load_stash_config(
    repo_root: Path, *, environ: dict[str, str] | None = None
) -> StashConfig:
    policy = _load_policy(repo_root)
    stash = policy.get("stash")
    if not isinstance(stash, dict):
        stash = {}
    ignore_unstaged = _coerce_bool(
        stash.get("ignore_unstaged_changes"), default=DEFAULT_IGNORE_UNSTAGED_CHANGES
    )
    env = os.environ if environ is None else environ
    override = env.get(IGNORE_UNSTAGED_ENV_VAR)
    if override is not None and override.strip():
        ignore_unstaged = _coerce_bool(override)
    label_prefix = str(stash.get("label_prefix", DEFAULT_LABEL_PREFIX)).strip()
    if not label_prefix:
        label_prefix = DEFAULT_LABEL_PREFIX
    return StashConfig(
        ignore_unstaged_changes=ignore_unstaged,
        label_prefix=label_prefix,
    )


def _load_task_specs(repo_root: Path) -> tuple[TaskSpec, ...]:
    policy = _load_policy(repo_root)
    raw_tasks = policy.get("tasks", [])
    if not isinstance(raw_tasks, list):
        return ()
    tasks: list[TaskSpec] = []
    seen: set[str] = set()
    for index, entry in enumerate(raw_tasks):
        if not isinstance(entry, dict):
            continue
        command = str(entry.get("command", "")).strip()
        if not command:
            continue
        name = str(entry.get("name", "")).strip() or f"task_{index + 1}"
        if name in seen:
            continue
        seen.add(name)
        tasks.append(
            TaskSpec(
                name=name,
                command=command,
                timeout_seconds=_coerce_positive_float(
                    entry.get("timeout_seconds"), default=DEFAULT_TASK_TIMEOUT_SECONDS
                ),
            )
        )
    return tuple(tasks)
