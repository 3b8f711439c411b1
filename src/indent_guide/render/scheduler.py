"""Redraw scheduling: the engine the host's redraw hooks call into.

The host drives three callbacks per redraw cycle:

``on_buffer_event(buffer)`` -- buffer content changed, drop its caches
``on_viewport_event(window, buffer, top, bottom)`` -- once per window
``on_line_event(window, buffer, line)`` -- once per visible line

plus the lifecycle signals ``on_window_closed``, ``on_buffer_closed`` and
``on_buffer_reloaded``. Every entry point runs under :class:`CallbackGuard`.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from indent_guide.buffer.indent import LineFetcher
from indent_guide.buffer.state import BufferState, StateRegistry, WindowState
from indent_guide.config.options import ConfigResolver, GuideOptions, OptionsHook
from indent_guide.host.protocols import IndentGuideHost
from indent_guide.runtime import telemetry
from indent_guide.runtime.guard import CallbackGuard, GuardStatus, OneShotTrigger
from indent_guide.scope.models import ScopeRange

from .diff import LineSpan, plan_scope_redraw
from .guides import GuideGlyph, plan_guides


class IndentGuideEngine:
    """Owns state, options and the callback guard for one host."""

    def __init__(
        self,
        host: IndentGuideHost,
        *,
        options: Optional[GuideOptions] = None,
        get_opts: Optional[OptionsHook] = None,
        trigger: Optional[OneShotTrigger] = None,
    ) -> None:
        self.host = host
        self.config = ConfigResolver(host, options=options, get_opts=get_opts)
        self.registry = StateRegistry()
        self.guard = CallbackGuard(trigger=trigger)

    @property
    def status(self) -> GuardStatus:
        return self.guard.status

    def setup(
        self, *, get_opts: Optional[OptionsHook] = None, **overrides: Any
    ) -> GuideOptions:
        """Merge ``overrides`` into the global options and start serving callbacks."""

        with telemetry.span(
            "engine::setup", component="engine", metadata={"keys": sorted(overrides)}
        ):
            options = self.config.update(overrides, get_opts=get_opts)
            if self.guard.activate():
                telemetry.record_event("engine.setup", data={"status": self.status.value})
        return options

    # -- host callbacks -------------------------------------------------

    def on_buffer_event(self, buffer: int) -> None:
        if not self.guard.active:
            return
        self.guard.call(f"[buf {buffer}]", self._buffer_pass, buffer)

    def on_viewport_event(
        self, window: int, buffer: int, top_line: int, bottom_line: int
    ) -> bool:
        """Run the viewport pass; ``False`` tells the host to skip line passes."""

        if not self.guard.active:
            return False
        result = self.guard.call(
            f"[win {window} buf {buffer}]",
            self._viewport_pass,
            window,
            buffer,
            top_line,
            bottom_line,
        )
        return bool(result)

    def on_line_event(self, window: int, buffer: int, line: int) -> None:
        if not self.guard.active:
            return
        self.guard.call(
            f"[win {window} buf {buffer} line {line}]",
            self._line_pass,
            window,
            buffer,
            line,
        )

    # -- lifecycle signals ----------------------------------------------

    def on_window_closed(self, window: int) -> None:
        self.registry.drop_window(window)

    def on_buffer_closed(self, buffer: int) -> None:
        self.registry.drop_buffer(buffer)

    def on_buffer_reloaded(self, buffer: int) -> None:
        self.registry.reset_buffer(buffer)

    # -- passes ---------------------------------------------------------

    def _buffer_pass(self, buffer: int) -> None:
        # disabled buffers included, re-enabling does not refetch
        self.registry.reset_buffer(buffer)

    def _viewport_pass(
        self, window: int, buffer: int, top_line: int, bottom_line: int
    ) -> bool:
        options = self.config.resolve(buffer)
        state = self.registry.buffer(buffer)

        if not options.enabled:
            if state is not None:
                if not state.cleared:
                    self.host.clear(buffer)
                    state.cleared = True
                state.apply_options(options)
            return False

        with telemetry.span(
            "render::viewport",
            logger_name="indent_guide.render",
            metadata={"window": window, "buffer": buffer},
        ):
            if state is None:
                state = self.registry.create_buffer(buffer, options, self._fetcher(buffer))
            elif state.apply_options(options):
                telemetry.state_event(
                    "shiftwidth_changed", buffer, shiftwidth=state.shiftwidth
                )
            state.cleared = False

            win = self.registry.ensure_window(window)
            if win.buffer is not None and win.buffer != buffer:
                self._update_cursor_scope(win, None)
            win.buffer = buffer
            win.top_line = top_line
            win.bottom_line = bottom_line
            win.scroll_column = self.host.scroll_column(window)

            overscan = options.overscan
            state.indents.prefetch(max(0, top_line - overscan), bottom_line + overscan)

            if self.host.current_window() == window:
                self._cursor_pass(state, win)
            elif options.auto_clear_cursor_scope or not options.show_cursor_scope:
                self._update_cursor_scope(win, None)
        return True

    def _cursor_pass(self, state: BufferState, win: WindowState) -> None:
        options = state.options
        cursor = self.host.cursor_line(win.window)
        if cursor >= win.bottom_line:
            # the bottom line estimate undershot (open folds)
            state.indents.prefetch(cursor, cursor + options.overscan)
        if options.show_cursor_scope:
            self._update_cursor_scope(win, state.resolver.find_cursor_scope(cursor))
        else:
            self._update_cursor_scope(win, None)

    def _update_cursor_scope(
        self, win: WindowState, scope: Optional[ScopeRange]
    ) -> List[LineSpan]:
        previous = win.cursor_scope
        win.cursor_scope = scope
        spans = plan_scope_redraw(previous, scope)
        if win.buffer is not None:
            for start, end in spans:
                self.host.request_redraw(win.buffer, start, end)
        return spans

    def _line_pass(self, window: int, buffer: int, line: int) -> List[GuideGlyph]:
        state = self.registry.buffer(buffer)
        if state is None or not state.options.enabled:
            return []
        win = self.registry.window(window)
        scroll_column = win.scroll_column if win else 0
        cursor_scope = win.cursor_scope if win and win.buffer == buffer else None

        options = state.options
        glyphs = plan_guides(
            state, line, scroll_column=scroll_column, cursor_scope=cursor_scope
        )
        for glyph in glyphs:
            self.host.draw(
                buffer,
                line,
                glyph.screen_column,
                options.glyph,
                glyph.highlight,
                options.priority,
            )
        return glyphs

    def _fetcher(self, buffer: int) -> LineFetcher:
        host = self.host

        def fetch(start: int, end: int) -> Sequence[str]:
            return host.get_lines(buffer, start, end)

        return fetch


__all__ = ["IndentGuideEngine"]
