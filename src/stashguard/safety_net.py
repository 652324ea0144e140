"""Last-resort restoration of stashed changes when the process dies abnormally.

The normal restore path is the runner's finish signal. This net only matters
when that signal never arrives: an unhandled exception (including
``KeyboardInterrupt``) unwinds the interpreter while a stash is outstanding.
Arming wraps ``sys.excepthook`` to notice such exceptions and registers an exit
callback that hands control back to the stash controller.
"""

from __future__ import annotations

import atexit
import sys
from typing import Any, Callable

from stashguard.models import StashPopError


class CrashSafetyNet:
    def __init__(
        self,
        *,
        register: Callable[[Callable[[], None]], Any] | None = None,
        hook_owner: Any = None,
    ) -> None:
        self._register = register
        self._hook_owner = hook_owner
        self._callback: Callable[[], None] | None = None
        self._fatal: BaseException | None = None
        self._armed = False

    @property
    def armed(self) -> bool:
        return self._armed

    @property
    def is_fatal(self) -> bool:
        return self._fatal is not None

    def arm(self, callback: Callable[[], None]) -> None:
        if self._armed:
            return
        self._callback = callback
        hook_owner = self._hook_owner if self._hook_owner is not None else sys
        previous_hook = hook_owner.excepthook

        def _excepthook(exc_type, exc, tb):  # type: ignore[no-untyped-def]
            self.record_fatal(exc)
            previous_hook(exc_type, exc, tb)

        hook_owner.excepthook = _excepthook
        register = self._register or atexit.register
        register(self._on_exit)
        self._armed = True

    def record_fatal(self, exc: BaseException) -> None:
        if self._fatal is None:
            self._fatal = exc

    def _on_exit(self) -> None:
        # Clean exits leave restoration to the normal finish path.
        if self._fatal is None or self._callback is None:
            return
        try:
            self._callback()
        except StashPopError as exc:
            print(f"stashguard: ERROR {exc}", file=sys.stderr)
