"""Stashguard data models — exceptions, dataclasses, and coercion helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from stashguard.constants import MANUAL_POP_COMMAND, STASH_ELIGIBLE_CONTEXTS


def _coerce_bool(value: Any, *, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes", "on"}
    return bool(value) if value is not None else default


def _coerce_positive_float(value: Any, *, default: float) -> float:
    try:
        parsed = float(value)
    except Exception:
        return default
    return parsed if parsed > 0 else default


class ConfigError(RuntimeError):
    """Raised when the policy file cannot be loaded or validated."""


class GitCommandError(RuntimeError):
    """Raised when a git subcommand exits non-zero."""

    def __init__(self, command: list[str], returncode: int, detail: str) -> None:
        self.command = list(command)
        self.returncode = returncode
        self.detail = detail
        super().__init__(
            f"`{' '.join(self.command)}` failed with exit code {returncode}: {detail}"
        )


class StashPopError(RuntimeError):
    """Stashed changes could not be reapplied and are stranded in the stash stack.

    Hosts must surface this to the developer; the message carries the manual
    recovery command.
    """

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(
            "The stashed changes could not be applied. "
            f"Please run `{MANUAL_POP_COMMAND}` manually! More info: {detail}"
        )


@dataclass(frozen=True)
class StashConfig:
    ignore_unstaged_changes: bool
    label_prefix: str


@dataclass(frozen=True)
class RunContext:
    """Classification of the current validation run."""

    kind: str
    files: tuple[str, ...] = ()

    @property
    def is_pre_commit_like(self) -> bool:
        return self.kind in STASH_ELIGIBLE_CONTEXTS


@dataclass
class StashSession:
    outstanding: bool = False
    safety_net_armed: bool = False


@dataclass(frozen=True)
class TaskSpec:
    name: str
    command: str
    timeout_seconds: float


@dataclass(frozen=True)
class TaskResult:
    name: str
    returncode: int
    output: str

    @property
    def passed(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True)
class RunReport:
    context: RunContext
    results: tuple[TaskResult, ...] = field(default_factory=tuple)

    @property
    def passed(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def failed_tasks(self) -> tuple[str, ...]:
        return tuple(result.name for result in self.results if not result.passed)
