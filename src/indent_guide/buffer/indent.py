"""Per-line indent computation and the lazy indent cache."""

from __future__ import annotations

import math
from typing import Callable, Dict, Optional, Sequence

# Indent of a blank line; compares greater than every real column so blank
# lines always defer to their non-blank neighbours.
BLANK_INDENT = math.inf

LineFetcher = Callable[[int, int], Sequence[str]]


def compute_indent(line: str, shiftwidth: int) -> float:
    """Return the indent column of ``line``; tabs count ``shiftwidth`` columns."""

    indent = 0
    for ch in line:
        if ch == "\t":
            indent += shiftwidth
        elif ch.isspace():
            indent += 1
        else:
            return indent
    return BLANK_INDENT


def is_blank_indent(indent: Optional[float]) -> bool:
    return indent == BLANK_INDENT


def round_indent(indent: float, shiftwidth: int) -> int:
    """Round ``indent`` down to a multiple of ``shiftwidth``."""

    return int(math.floor(indent / shiftwidth) * shiftwidth)


class IndentCache:
    """Lazily computed, memoized indents for one buffer snapshot.

    Text is pulled from ``fetch(start, end)`` in windows of ``overscan`` lines.
    A short fetch marks the end of the buffer so later lookups past it answer
    ``None`` without touching the line source again.
    """

    def __init__(self, fetch: LineFetcher, *, shiftwidth: int, overscan: int) -> None:
        self._fetch = fetch
        self.shiftwidth = shiftwidth
        self.overscan = overscan
        self._indents: Dict[int, float] = {}
        self._lines: Dict[int, str] = {}
        self._end: Optional[int] = None

    def __contains__(self, line: int) -> bool:
        return line in self._indents or line in self._lines

    @property
    def known_end(self) -> Optional[int]:
        return self._end

    def prefetch(self, start: int, end: int) -> None:
        """Load text for ``[start, end)`` from the line source."""

        start = max(0, start)
        if self._end is not None:
            end = min(end, self._end)
        if end <= start:
            return
        lines = self._fetch(start, end)
        for offset, text in enumerate(lines):
            self._lines[start + offset] = text
        if len(lines) < end - start:
            self._end = start + len(lines)

    def get(self, line: int) -> Optional[float]:
        if line < 0:
            return None
        indent = self._indents.get(line)
        if indent is not None:
            return indent
        text = self._lines.get(line)
        if text is None:
            if self._end is not None and line >= self._end:
                return None
            self.prefetch(line, line + max(1, self.overscan))
            text = self._lines.get(line)
            if text is None:
                return None
        indent = compute_indent(text, self.shiftwidth)
        self._indents[line] = indent
        return indent

    def reset(self) -> None:
        self._indents.clear()
        self._lines.clear()
        self._end = None


__all__ = [
    "BLANK_INDENT",
    "IndentCache",
    "LineFetcher",
    "compute_indent",
    "is_blank_indent",
    "round_indent",
]
