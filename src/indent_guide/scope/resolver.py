"""Indentation scope lookup for arbitrary lines and for the cursor."""

from __future__ import annotations

from typing import Optional, Tuple

from indent_guide.buffer.indent import IndentCache, is_blank_indent, round_indent

from .contain import ContainPointerIndex
from .models import DEFAULT_SCOPE_POLICY, IndentScope, ScopePolicy, ScopeRange

# Blank-line recursion always lands on a non-blank line after one hop; the cap
# only guards against a corrupted index.
MAX_SCOPE_DEPTH = 8


class ScopeResolver:
    def __init__(
        self,
        indents: IndentCache,
        pointers: ContainPointerIndex,
        *,
        max_increase_level: int = 1,
        policy: ScopePolicy = DEFAULT_SCOPE_POLICY,
    ) -> None:
        self.indents = indents
        self.pointers = pointers
        self.max_increase_level = max_increase_level
        self.policy = policy

    @property
    def shiftwidth(self) -> int:
        return self.indents.shiftwidth

    def find_indent_scope(self, line: int, *, _depth: int = 0) -> Optional[IndentScope]:
        """Return both contain lines of ``line``.

        A blank line borrows the scope of its deeper non-blank neighbour,
        preferring the one below on a tie. ``None`` when neither direction
        finds a contain line.
        """

        indent = self.indents.get(line)
        if indent is None:
            return None
        prev = self.pointers.find_prev_contain_line(line)
        nxt = self.pointers.find_next_contain_line(line)

        if is_blank_indent(indent) and _depth < MAX_SCOPE_DEPTH:
            target: Optional[int] = None
            if prev.found and nxt.found:
                target = prev.line if prev.indent > nxt.indent else nxt.line
            elif prev.found:
                target = prev.line
            elif nxt.found:
                target = nxt.line
            if target is not None:
                return self.find_indent_scope(target, _depth=_depth + 1)

        if not prev.found and not nxt.found:
            return None
        return IndentScope(prev=prev, next=nxt)

    def select_base_line(self, line: int) -> Optional[Tuple[int, float]]:
        """Pick the line whose scope the cursor on ``line`` logically belongs to."""

        cur = self.indents.get(line)
        if cur is None:
            return None
        prev = (self.indents.get(line - 1) if line > 0 else None) or 0
        nxt = self.indents.get(line + 1) or 0

        if prev <= cur and nxt <= cur:
            # plateau, opener or closer: keep the cursor line
            return line, cur
        if self.policy.strict_child_tie:
            child_tie = nxt < prev
        else:
            child_tie = nxt <= prev
        if nxt > cur and (child_tie or prev <= cur):
            # cursor sits just above a deeper block
            return line + 1, nxt
        if prev >= cur:
            return line - 1, prev
        return None

    def find_cursor_scope(self, line: int) -> Optional[ScopeRange]:
        base = self.select_base_line(line)
        if base is None:
            return None
        base_line, base_indent = base

        scope = self.find_indent_scope(base_line)
        if scope is None:
            return None
        prev, nxt = scope.prev, scope.next
        shiftwidth = self.shiftwidth

        if (
            self.policy.clamp_increase
            and prev.indent is not None
            and prev.indent + self.max_increase_level * shiftwidth < base_indent
        ):
            # Highlight the outer level, so the closing contain line belongs
            # to the range too.
            end_line = nxt.line if nxt.found else nxt.line - 1
            return ScopeRange(
                start_line=prev.line + 1,
                end_line=end_line,
                indent_level=round_indent(prev.indent, shiftwidth),
            )

        if is_blank_indent(base_indent):
            level = max(i for i in (prev.indent, nxt.indent) if i is not None)
        else:
            # Deepest guide strictly left of the base line's text.
            level = max(0.0, base_indent - 0.5)
        return ScopeRange(
            start_line=prev.line + 1,
            end_line=nxt.line - 1,
            indent_level=round_indent(level, shiftwidth),
        )


__all__ = ["MAX_SCOPE_DEPTH", "ScopeResolver"]
