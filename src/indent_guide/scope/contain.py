"""Memoized nearest-smaller-indent pointers.

For every line and direction the index remembers the first line outward whose
indent is strictly smaller. A scan keeps a stack of lines still waiting for
their answer; each newly visited line settles every pending entry deeper than
itself in one go, and already-settled lines are jumped over through their own
pointer. Each pointer is resolved at most once per direction between resets.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from indent_guide.buffer.indent import IndentCache

from .models import ContainLine, Direction


class ContainPointerIndex:
    def __init__(self, indents: IndentCache) -> None:
        self.indents = indents
        self._pointers: Dict[Direction, Dict[int, int]] = {
            Direction.UP: {},
            Direction.DOWN: {},
        }
        # Lines visited by the most recent ``find_contain_line`` call.
        self.last_scan_steps = 0

    def pointer(self, line: int, direction: Direction) -> Optional[int]:
        return self._pointers[direction].get(line)

    def find_contain_line(self, line: int, direction: Direction) -> ContainLine:
        pointers = self._pointers[direction]
        step = direction.value
        self.last_scan_steps = 0

        cur_indent = self.indents.get(line)
        if cur_indent is None:
            return ContainLine(line, None)

        next_line = pointers.get(line, line + step)
        next_indent = self.indents.get(next_line)
        self.last_scan_steps += 1

        stack: List[Tuple[float, int]] = [(cur_indent, line)]
        while next_indent is not None:
            while stack and next_indent < stack[-1][0]:
                _, origin = stack.pop()
                pointers[origin] = next_line
            if not stack:
                break
            stack.append((next_indent, next_line))

            next_line = pointers.get(next_line, next_line + step)
            next_indent = self.indents.get(next_line)
            self.last_scan_steps += 1

        if next_indent is None:
            # Ran off the buffer: everything still pending is bounded by it.
            for _, origin in stack:
                pointers[origin] = next_line

        return ContainLine(next_line, next_indent)

    def find_prev_contain_line(self, line: int) -> ContainLine:
        return self.find_contain_line(line, Direction.UP)

    def find_next_contain_line(self, line: int) -> ContainLine:
        return self.find_contain_line(line, Direction.DOWN)

    def reset(self) -> None:
        for pointers in self._pointers.values():
            pointers.clear()


__all__ = ["ContainPointerIndex"]
