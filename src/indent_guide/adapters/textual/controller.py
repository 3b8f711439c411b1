"""Adapter that runs the engine's redraw cycle for a Textual viewer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from indent_guide.host.memory import MemoryHost, run_redraw_cycle
from indent_guide.render.scheduler import IndentGuideEngine
from indent_guide.runtime.guard import GuardStatus


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class RenderedLine:
    """One visible line with guide glyphs already overlaid."""

    line: int
    text: str
    spans: List[Tuple[int, str]] = field(default_factory=list)
    is_cursor: bool = False


@dataclass(slots=True)
class GuideUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_view: Callable[[Sequence[RenderedLine]], None]
    update_status: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


class TextualIndentGuideAdapter:
    """Bridges key-driven cursor/scroll changes to engine redraw cycles."""

    def __init__(
        self,
        hooks: GuideUIHooks,
        *,
        host: Optional[MemoryHost] = None,
        engine: Optional[IndentGuideEngine] = None,
        window: int = 1,
        buffer: int = 1,
        height: int = 40,
        width: int = 120,
    ) -> None:
        self.hooks = hooks
        self.host = host or MemoryHost()
        self.engine = engine or IndentGuideEngine(self.host)
        self.window = window
        self.buffer = buffer
        self.width = width
        self._height = height
        self._synced_version: Optional[int] = None
        if self.engine.status is GuardStatus.PRE_SETUP:
            self.engine.setup()

    def load_text(self, text: str, *, shiftwidth: int = 4) -> None:
        lines = text.splitlines() or [""]
        if self.buffer in self.host.buffers:
            entry = self.host.buffers[self.buffer]
            entry.document.update_lines(0, entry.document.line_count, lines)
            entry.shiftwidth = shiftwidth
        else:
            self.host.open_buffer(self.buffer, lines, shiftwidth=shiftwidth)
            self.host.open_window(self.window, self.buffer, height=self._height)
        self._log_state("load ->", lines=len(lines), shiftwidth=shiftwidth)
        self.refresh()

    @property
    def line_count(self) -> int:
        return self.host.buffers[self.buffer].document.line_count

    def move_cursor(self, delta: int) -> None:
        view = self.host.windows[self.window]
        view.cursor_line = min(max(0, view.cursor_line + delta), self.line_count - 1)
        if view.cursor_line < view.top_line:
            view.top_line = view.cursor_line
        elif view.cursor_line >= view.bottom_line:
            view.top_line = view.cursor_line - view.height + 1
        self._log_state("cursor ->", line=view.cursor_line)
        self.refresh()

    def scroll_horizontal(self, delta: int) -> None:
        view = self.host.windows[self.window]
        view.scroll_column = max(0, view.scroll_column + delta)
        self._log_state("scroll ->", column=view.scroll_column)
        self.refresh()

    def resize(self, height: int, width: int) -> None:
        self._height = max(1, height)
        self.width = max(1, width)
        view = self.host.windows.get(self.window)
        if view is not None:
            view.height = self._height
            self.refresh()

    def toggle_enabled(self) -> bool:
        variables = self.host.buffers[self.buffer].variables
        enabled = not variables.get("indent_guide_enabled", True)
        variables["indent_guide_enabled"] = enabled
        self._log_state("toggle ->", enabled=enabled)
        self.refresh()
        return enabled

    def refresh(self) -> List[RenderedLine]:
        self._sync_document()
        run_redraw_cycle(self.host, self.engine, self.window)
        rendered = self._render()
        self.hooks.update_view(rendered)
        self.hooks.update_status(self._status_text())
        return rendered

    def _sync_document(self) -> None:
        version = self.host.buffers[self.buffer].document.version
        if version == self._synced_version:
            return
        if self._synced_version is not None:
            self.engine.on_buffer_event(self.buffer)
        self._synced_version = version

    def _render(self) -> List[RenderedLine]:
        view = self.host.windows[self.window]
        document = self.host.buffers[self.buffer].document
        overlays = self.host.overlays.get(self.buffer, {})
        rendered: List[RenderedLine] = []
        for line in range(view.top_line, min(view.bottom_line, document.line_count)):
            raw = document.get_line(line).expandtabs(
                self.host.buffers[self.buffer].shiftwidth
            )
            chars = list(raw[view.scroll_column : view.scroll_column + self.width])
            spans: List[Tuple[int, str]] = []
            for overlay in sorted(overlays.get(line, ()), key=lambda o: o.column):
                column = overlay.column
                if column < 0 or column >= self.width:
                    continue
                if column >= len(chars):
                    chars.extend(" " * (column - len(chars) + 1))
                if not chars[column].isspace():
                    continue
                chars[column] = overlay.glyph
                spans.append((column, overlay.highlight))
            rendered.append(
                RenderedLine(
                    line=line,
                    text="".join(chars),
                    spans=spans,
                    is_cursor=line == view.cursor_line,
                )
            )
        return rendered

    def _status_text(self) -> str:
        view = self.host.windows[self.window]
        win_state = self.engine.registry.window(self.window)
        scope = win_state.cursor_scope if win_state else None
        parts = [f"Ln {view.cursor_line + 1}/{self.line_count}"]
        if scope is not None:
            parts.append(
                f"scope {scope.start_line + 1}-{scope.end_line + 1} @ col {scope.indent_level}"
            )
        if self.engine.status is GuardStatus.ERROR:
            parts.append("guides: error")
        return "  ".join(parts)

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot: Dict[str, object] = {
            "window": self.window,
            "buffer": self.buffer,
            "status": self.engine.status.value,
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))


__all__ = ["GuideUIHooks", "RenderedLine", "TextualIndentGuideAdapter"]
