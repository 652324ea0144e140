"""Stash unstaged changes around a validation run.

Validation tooling must only see what is about to be committed. Before a
pre-commit run the controller moves unstaged edits aside with
``git stash push --keep-index`` and reapplies them with ``git stash pop`` once
the run finishes, whether it passed or failed.

State is a single :class:`StashSession`; at most one stash is outstanding per
controller. Failing to save is harmless (the run proceeds against the
unmodified tree). Failing to pop is not: the developer's edits are stranded
in the stash stack, so :class:`StashPopError` is raised with the manual
recovery command.
"""

from __future__ import annotations

from typing import Any

from stashguard.console import Console
from stashguard.models import (
    GitCommandError,
    RunContext,
    StashConfig,
    StashPopError,
    StashSession,
)
from stashguard.safety_net import CrashSafetyNet
from stashguard.utils import _generate_stash_label


def stashing_enabled(config: StashConfig, context: RunContext) -> bool:
    return config.ignore_unstaged_changes and context.is_pre_commit_like


class StashUnstagedChanges:
    def __init__(
        self,
        config: StashConfig,
        repository: Any,
        console: Console,
        *,
        safety_net: CrashSafetyNet | None = None,
    ) -> None:
        self.config = config
        self.repository = repository
        self.console = console
        self.safety_net = safety_net if safety_net is not None else CrashSafetyNet()
        self._session = StashSession()

    @property
    def outstanding(self) -> bool:
        return self._session.outstanding

    @property
    def safety_net_armed(self) -> bool:
        return self._session.safety_net_armed

    def on_run_start(self, context: RunContext) -> None:
        if not stashing_enabled(self.config, context):
            return
        self._try_save()

    def on_run_finished(self, context: RunContext) -> None:
        """Handle both run-complete and run-failed."""
        if not stashing_enabled(self.config, context):
            return
        self._try_pop()

    def on_fatal_error(self) -> None:
        # The run context may never have been delivered on this path.
        if not self.config.ignore_unstaged_changes:
            return
        self._try_pop()

    def arm(self) -> None:
        if self._session.safety_net_armed:
            return
        self.safety_net.arm(self.on_fatal_error)
        self._session.safety_net_armed = True

    def _try_save(self) -> None:
        try:
            pending = self.repository.pending_diff_file_count()
        except GitCommandError as exc:
            self.console.warn(f"Failed inspecting unstaged changes: {exc.detail}")
            return
        if not pending:
            return

        self.console.write("Detected unstaged changes... Stashing them!")
        try:
            self.repository.stash_save(
                quiet=True,
                keep_index=True,
                label=_generate_stash_label(self.config.label_prefix),
            )
        except GitCommandError as exc:
            self.console.warn(f"Failed stashing changes: {exc.detail}")
            return

        self._session.outstanding = True
        self.arm()

    def _try_pop(self) -> None:
        if not self._session.outstanding:
            return

        self.console.write("Reapplying unstaged changes from stash.")
        try:
            self.repository.stash_pop(quiet=True)
        except GitCommandError as exc:
            raise StashPopError(exc.detail) from exc
        finally:
            self._session.outstanding = False
