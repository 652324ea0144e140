from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from stashguard.config import _load_stash_config, _load_task_specs
from stashguard.constants import DEFAULT_TASK_TIMEOUT_SECONDS
from stashguard.models import ConfigError


def _write_policy(repo: Path, policy: object) -> None:
    policy_path = repo / ".stashguard" / "policy.yaml"
    policy_path.parent.mkdir(parents=True, exist_ok=True)
    policy_path.write_text(yaml.safe_dump(policy, sort_keys=False), encoding="utf-8")


def test_load_stash_config_defaults_without_policy(tmp_path: Path) -> None:
    config = _load_stash_config(tmp_path, environ={})

    assert config.ignore_unstaged_changes is True
    assert config.label_prefix == "stashguard"


def test_load_stash_config_reads_policy(tmp_path: Path) -> None:
    _write_policy(
        tmp_path,
        {"stash": {"ignore_unstaged_changes": False, "label_prefix": "precommit"}},
    )

    config = _load_stash_config(tmp_path, environ={})

    assert config.ignore_unstaged_changes is False
    assert config.label_prefix == "precommit"


def test_env_override_wins_over_policy(tmp_path: Path) -> None:
    _write_policy(tmp_path, {"stash": {"ignore_unstaged_changes": True}})

    config = _load_stash_config(
        tmp_path, environ={"STASHGUARD_IGNORE_UNSTAGED_CHANGES": "0"}
    )

    assert config.ignore_unstaged_changes is False


def test_blank_env_override_is_ignored(tmp_path: Path) -> None:
    config = _load_stash_config(
        tmp_path, environ={"STASHGUARD_IGNORE_UNSTAGED_CHANGES": "  "}
    )

    assert config.ignore_unstaged_changes is True


def test_env_override_read_from_process_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("STASHGUARD_IGNORE_UNSTAGED_CHANGES", "no")

    assert _load_stash_config(tmp_path).ignore_unstaged_changes is False


def test_malformed_policy_raises_config_error(tmp_path: Path) -> None:
    policy_path = tmp_path / ".stashguard" / "policy.yaml"
    policy_path.parent.mkdir(parents=True)
    policy_path.write_text("stash: [unterminated\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        _load_stash_config(tmp_path, environ={})


def test_non_mapping_policy_raises_config_error(tmp_path: Path) -> None:
    _write_policy(tmp_path, ["not", "a", "mapping"])

    with pytest.raises(ConfigError):
        _load_task_specs(tmp_path)


def test_load_task_specs_skips_malformed_entries(tmp_path: Path) -> None:
    _write_policy(
        tmp_path,
        {
            "tasks": [
                {"name": "lint", "command": "ruff check .", "timeout_seconds": 30},
                {"name": "empty", "command": ""},
                "not-a-mapping",
                {"command": "pytest -q", "timeout_seconds": -5},
                {"name": "lint", "command": "duplicate"},
            ]
        },
    )

    tasks = _load_task_specs(tmp_path)

    assert [task.name for task in tasks] == ["lint", "task_4"]
    assert tasks[0].timeout_seconds == 30.0
    assert tasks[1].command == "pytest -q"
    assert tasks[1].timeout_seconds == DEFAULT_TASK_TIMEOUT_SECONDS
