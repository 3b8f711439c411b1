"""In-memory host used by the Textual adapter and the test-suite.

Overlays behave like ephemeral decorations: a redraw cycle clears a line before
its line pass draws it again.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple

from indent_guide.buffer.document import BufferDocument

if TYPE_CHECKING:  # pragma: no cover
    from indent_guide.render.scheduler import IndentGuideEngine


@dataclass(frozen=True, slots=True)
class Overlay:
    column: int
    glyph: str
    highlight: str
    priority: int


@dataclass(slots=True)
class WindowView:
    buffer: int
    height: int = 40
    top_line: int = 0
    cursor_line: int = 0
    scroll_column: int = 0

    @property
    def bottom_line(self) -> int:
        return self.top_line + self.height


@dataclass(slots=True)
class MemoryBuffer:
    document: BufferDocument
    variables: Dict[str, Any] = field(default_factory=dict)
    shiftwidth: int = 4
    tabstop: int = 8


class MemoryHost:
    def __init__(self) -> None:
        self.buffers: Dict[int, MemoryBuffer] = {}
        self.windows: Dict[int, WindowView] = {}
        self.focused_window: Optional[int] = None
        self.overlays: Dict[int, Dict[int, List[Overlay]]] = {}
        self.redraws: List[Tuple[int, int, int]] = []
        self.clears: List[Tuple[int, int, Optional[int]]] = []
        self.fetches: List[Tuple[int, int, int]] = []

    # -- setup helpers --------------------------------------------------

    def open_buffer(
        self,
        buffer: int,
        lines: Sequence[str],
        *,
        shiftwidth: int = 4,
        tabstop: int = 8,
        variables: Optional[Dict[str, Any]] = None,
    ) -> MemoryBuffer:
        entry = MemoryBuffer(
            document=BufferDocument.from_lines(lines),
            variables=dict(variables or {}),
            shiftwidth=shiftwidth,
            tabstop=tabstop,
        )
        self.buffers[buffer] = entry
        return entry

    def open_window(
        self, window: int, buffer: int, *, height: int = 40, focus: bool = True
    ) -> WindowView:
        view = WindowView(buffer=buffer, height=height)
        self.windows[window] = view
        if focus or self.focused_window is None:
            self.focused_window = window
        return view

    def overlays_on(self, buffer: int, line: int) -> List[Overlay]:
        return list(self.overlays.get(buffer, {}).get(line, ()))

    # -- LineSource -----------------------------------------------------

    def get_lines(self, buffer: int, start: int, end: int) -> Sequence[str]:
        self.fetches.append((buffer, start, end))
        return self.buffers[buffer].document.get_lines(start, end)

    # -- OverlaySink ----------------------------------------------------

    def draw(
        self,
        buffer: int,
        line: int,
        column: int,
        glyph: str,
        highlight: str,
        priority: int,
    ) -> None:
        overlay = Overlay(column, glyph, highlight, priority)
        by_line = self.overlays.setdefault(buffer, {}).setdefault(line, [])
        if overlay not in by_line:
            by_line.append(overlay)

    def clear(self, buffer: int, start: int = 0, end: Optional[int] = None) -> None:
        self.clears.append((buffer, start, end))
        by_line = self.overlays.get(buffer)
        if not by_line:
            return
        for line in [n for n in by_line if n >= start and (end is None or n < end)]:
            del by_line[line]

    # -- RedrawSink -----------------------------------------------------

    def request_redraw(self, buffer: int, start: int, end: int) -> None:
        self.redraws.append((buffer, start, end))

    # -- ViewportProvider -----------------------------------------------

    def current_window(self) -> int:
        return self.focused_window if self.focused_window is not None else -1

    def cursor_line(self, window: int) -> int:
        return self.windows[window].cursor_line

    def scroll_column(self, window: int) -> int:
        return self.windows[window].scroll_column

    # -- BufferOptionSource ---------------------------------------------

    def buffer_variables(self, buffer: int) -> Dict[str, Any]:
        return self.buffers[buffer].variables

    def buffer_shiftwidth(self, buffer: int) -> int:
        return self.buffers[buffer].shiftwidth

    def buffer_tabstop(self, buffer: int) -> int:
        return self.buffers[buffer].tabstop


def run_redraw_cycle(host: MemoryHost, engine: "IndentGuideEngine", window: int) -> bool:
    """Drive one viewport pass plus a line pass for every visible line."""

    view = host.windows[window]
    line_count = host.buffers[view.buffer].document.line_count
    if not engine.on_viewport_event(window, view.buffer, view.top_line, view.bottom_line):
        return False
    for line in range(view.top_line, min(view.bottom_line, line_count)):
        host.overlays.get(view.buffer, {}).pop(line, None)
        engine.on_line_event(window, view.buffer, line)
    return True


__all__ = [
    "MemoryBuffer",
    "MemoryHost",
    "Overlay",
    "WindowView",
    "run_redraw_cycle",
]
