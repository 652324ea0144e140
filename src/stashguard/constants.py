"""Stashguard constants — paths, defaults, and run-context kinds."""

from __future__ import annotations

POLICY_RELATIVE_PATH = ".stashguard/policy.yaml"
# Outside git repositories only; inside one the log lives under the git dir
# so stash push/pop never sees it.
LOG_RELATIVE_PATH = ".stashguard/logs/stashguard.log"
GIT_DIR_LOG_PATH = "stashguard/stashguard.log"

IGNORE_UNSTAGED_ENV_VAR = "STASHGUARD_IGNORE_UNSTAGED_CHANGES"

DEFAULT_IGNORE_UNSTAGED_CHANGES = True
DEFAULT_LABEL_PREFIX = "stashguard"
DEFAULT_TASK_TIMEOUT_SECONDS = 600.0

CONTEXT_GIT_PRE_COMMIT = "git_pre_commit"
CONTEXT_RUN = "run"
STAGED_FILES_ENV_VAR = "STASHGUARD_STAGED_FILES"
STASH_ELIGIBLE_CONTEXTS = (CONTEXT_GIT_PRE_COMMIT,)

MANUAL_POP_COMMAND = "git stash pop"

PRE_COMMIT_HOOK_TEMPLATE = """#!/bin/sh
# Installed by stashguard. Runs configured checks against staged changes only.
exec "{python}" -m stashguard git-pre-commit --repo "$(git rev-parse --show-toplevel)"
"""
