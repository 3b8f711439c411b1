"""In-memory document used as a line source by bundled hosts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence


@dataclass(slots=True)
class BufferDocument:
    """Text storage built on a simple list-of-lines model.

    Every mutation bumps ``version``. The Textual adapter compares it before
    each redraw cycle and reports a change to the engine as a buffer event.
    """

    _lines: List[str] = field(default_factory=lambda: [""])
    version: int = 0

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "BufferDocument":
        return cls(_lines=list(lines) or [""])

    def get_lines(self, start: int, end: int) -> Sequence[str]:
        """Return ``[start, end)`` clamped to the document, like ``list`` slicing."""

        start = max(0, start)
        if end <= start:
            return ()
        return tuple(self._lines[start:end])

    def update_lines(self, start: int, end: int, new_lines: Iterable[str]) -> None:
        """Replace ``[start:end]`` with ``new_lines``."""

        self._lines[start:end] = list(new_lines)
        if not self._lines:
            self._lines.append("")
        self.version += 1

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, index: int) -> str:
        return self._lines[index]
