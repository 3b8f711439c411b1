"""Adapter boundary: what the engine needs from the hosting editor."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence


class LineSource(Protocol):
    def get_lines(self, buffer: int, start: int, end: int) -> Sequence[str]:
        """Return the current text of ``[start, end)``; shorter past the end."""
        ...


class OverlaySink(Protocol):
    def draw(
        self,
        buffer: int,
        line: int,
        column: int,
        glyph: str,
        highlight: str,
        priority: int,
    ) -> None:
        """Overlay ``glyph`` at screen ``column`` of ``line`` for this redraw."""
        ...

    def clear(self, buffer: int, start: int = 0, end: Optional[int] = None) -> None:
        """Remove overlays on ``[start, end)``; ``end=None`` means to the end."""
        ...


class RedrawSink(Protocol):
    def request_redraw(self, buffer: int, start: int, end: int) -> None:
        """Ask the host to redraw the inclusive line range ``[start, end]``."""
        ...


class ViewportProvider(Protocol):
    def current_window(self) -> int: ...

    def cursor_line(self, window: int) -> int: ...

    def scroll_column(self, window: int) -> int: ...


class BufferOptionSource(Protocol):
    def buffer_variables(self, buffer: int) -> Mapping[str, Any]: ...

    def buffer_shiftwidth(self, buffer: int) -> int: ...

    def buffer_tabstop(self, buffer: int) -> int: ...


class IndentGuideHost(
    LineSource, OverlaySink, RedrawSink, ViewportProvider, BufferOptionSource, Protocol
):
    """Everything :class:`~indent_guide.render.scheduler.IndentGuideEngine` calls."""


__all__ = [
    "BufferOptionSource",
    "IndentGuideHost",
    "LineSource",
    "OverlaySink",
    "RedrawSink",
    "ViewportProvider",
]
