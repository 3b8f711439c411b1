"""Per-buffer and per-window state plus the registry that owns them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from indent_guide.config.options import GuideOptions, OptionsError
from indent_guide.runtime import telemetry
from indent_guide.scope.contain import ContainPointerIndex
from indent_guide.scope.models import ScopeRange
from indent_guide.scope.resolver import ScopeResolver

from .indent import IndentCache, LineFetcher


def _resolved_shiftwidth(options: GuideOptions) -> int:
    if options.shiftwidth is None:
        raise OptionsError("buffer state needs a resolved shiftwidth", key="shiftwidth")
    return options.shiftwidth


class BufferState:
    """Caches for one buffer snapshot.

    Indents and contain pointers are always reset together: pointers encode
    relationships between indents, so keeping one without the other yields
    silently wrong scopes.
    """

    def __init__(self, buffer: int, options: GuideOptions, fetch: LineFetcher) -> None:
        self.buffer = buffer
        self.options = options
        self.shiftwidth = _resolved_shiftwidth(options)
        self.cleared = False
        self.indents = IndentCache(
            fetch, shiftwidth=self.shiftwidth, overscan=options.overscan
        )
        self.pointers = ContainPointerIndex(self.indents)
        self.resolver = ScopeResolver(
            self.indents,
            self.pointers,
            max_increase_level=options.max_increase_level,
            policy=options.policy,
        )

    def apply_options(self, options: GuideOptions) -> bool:
        """Adopt freshly resolved options; returns ``True`` if caches were reset."""

        shiftwidth = _resolved_shiftwidth(options)
        self.options = options
        self.indents.overscan = options.overscan
        self.resolver.max_increase_level = options.max_increase_level
        self.resolver.policy = options.policy
        if shiftwidth == self.shiftwidth:
            return False
        self.shiftwidth = shiftwidth
        self.indents.shiftwidth = self.shiftwidth
        self.reset()
        return True

    def reset(self) -> None:
        self.indents.reset()
        self.pointers.reset()


@dataclass(slots=True)
class WindowState:
    window: int
    buffer: Optional[int] = None
    top_line: int = 0
    bottom_line: int = 0
    scroll_column: int = 0
    cursor_scope: Optional[ScopeRange] = None


class StateRegistry:
    """Explicit owner of every ``BufferState`` and ``WindowState``."""

    def __init__(self) -> None:
        self._buffers: Dict[int, BufferState] = {}
        self._windows: Dict[int, WindowState] = {}

    def buffer(self, buffer: int) -> Optional[BufferState]:
        return self._buffers.get(buffer)

    def window(self, window: int) -> Optional[WindowState]:
        return self._windows.get(window)

    def create_buffer(
        self, buffer: int, options: GuideOptions, fetch: LineFetcher
    ) -> BufferState:
        state = BufferState(buffer, options, fetch)
        self._buffers[buffer] = state
        telemetry.state_event("buffer_created", buffer, shiftwidth=state.shiftwidth)
        return state

    def ensure_window(self, window: int) -> WindowState:
        state = self._windows.get(window)
        if state is None:
            state = WindowState(window=window)
            self._windows[window] = state
        return state

    def reset_buffer(self, buffer: int) -> bool:
        state = self._buffers.get(buffer)
        if state is None:
            return False
        state.reset()
        telemetry.state_event("buffer_reset", buffer)
        return True

    def drop_buffer(self, buffer: int) -> Optional[BufferState]:
        state = self._buffers.pop(buffer, None)
        if state is not None:
            telemetry.state_event("buffer_dropped", buffer)
        return state

    def drop_window(self, window: int) -> Optional[WindowState]:
        return self._windows.pop(window, None)


__all__ = ["BufferState", "StateRegistry", "WindowState"]
