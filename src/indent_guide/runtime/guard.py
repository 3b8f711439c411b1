"""Protected execution of host callbacks.

Every callback the host fires runs through :class:`CallbackGuard`. The first
failure is reported once and flips the guard into ``ERROR``; later failures are
dropped so a broken redraw loop cannot flood the log.
"""

from __future__ import annotations

import traceback
from enum import Enum
from typing import Callable, Optional, TypeVar

from . import telemetry

T = TypeVar("T")


class GuardStatus(str, Enum):
    PRE_SETUP = "pre_setup"
    NORMAL = "normal"
    ERROR = "error"


class OneShotTrigger:
    """Runs ``action`` on the first call only."""

    def __init__(self, action: Optional[Callable[[str], None]] = None) -> None:
        self._action = action or telemetry.guard_failure
        self._fired = False

    @property
    def fired(self) -> bool:
        return self._fired

    def __call__(self, message: str) -> bool:
        if self._fired:
            return False
        self._fired = True
        self._action(message)
        return True


class CallbackGuard:
    """Owns the ``pre_setup -> normal -> error`` lifecycle."""

    def __init__(self, *, trigger: Optional[OneShotTrigger] = None) -> None:
        self.trigger = trigger or OneShotTrigger()
        self.status = GuardStatus.PRE_SETUP

    @property
    def active(self) -> bool:
        return self.status is not GuardStatus.PRE_SETUP

    def activate(self) -> bool:
        """Move ``pre_setup -> normal``; returns ``False`` if already past it."""

        if self.status is not GuardStatus.PRE_SETUP:
            return False
        self.status = GuardStatus.NORMAL
        return True

    def call(
        self, context: str, func: Callable[..., T], *args: object, **kwargs: object
    ) -> Optional[T]:
        try:
            return func(*args, **kwargs)
        except Exception:
            if self.status is GuardStatus.ERROR:
                return None
            self.status = GuardStatus.ERROR
            self.trigger(f"{context}\n{traceback.format_exc()}")
            return None


__all__ = ["CallbackGuard", "GuardStatus", "OneShotTrigger"]
