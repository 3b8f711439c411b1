"""Line-pass glyph planning."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from indent_guide.buffer.indent import is_blank_indent, round_indent
from indent_guide.buffer.state import BufferState
from indent_guide.scope.models import ScopeRange


@dataclass(frozen=True, slots=True)
class GuideGlyph:
    column: int  # buffer column of the guide
    screen_column: int  # column relative to the horizontal scroll offset
    highlight: str


def displayed_indent(state: BufferState, line: int) -> int:
    """Indent the guides of ``line`` should reach.

    Blank lines borrow the indent of the next non-blank line. Both kinds are
    capped at one increase step past the previous contain line.
    """

    indent = state.indents.get(line)
    if indent is None:
        return 0
    step = state.options.increase_step

    if is_blank_indent(indent):
        nxt = state.pointers.find_next_contain_line(line)
        if nxt.indent is None or is_blank_indent(nxt.indent):
            return 0
        indent = nxt.indent

    prev = state.pointers.find_prev_contain_line(line)
    if prev.indent is not None and not is_blank_indent(prev.indent):
        indent = min(indent, prev.indent + step)
    return int(indent)


def plan_guides(
    state: BufferState,
    line: int,
    *,
    scroll_column: int = 0,
    cursor_scope: Optional[ScopeRange] = None,
) -> List[GuideGlyph]:
    options = state.options
    shiftwidth = state.shiftwidth
    indent = state.indents.get(line)
    if indent is None:
        return []
    is_blank = is_blank_indent(indent)
    shown = displayed_indent(state, line)

    column = 0
    if options.skip_first_indent or (is_blank and shown == 0):
        column = shiftwidth
    # Nothing left of the scroll offset is visible.
    column = max(column, round_indent(scroll_column + shiftwidth - 1, shiftwidth))

    scope_level: Optional[int] = None
    if options.show_cursor_scope and cursor_scope and cursor_scope.contains(line):
        scope_level = cursor_scope.indent_level

    glyphs: List[GuideGlyph] = []
    limit = options.max_indent_level
    while column < shown or (is_blank and column <= shown):
        if limit and len(glyphs) >= limit:
            break
        highlight = (
            options.cursor_scope_highlight
            if column == scope_level
            else options.glyph_highlight
        )
        glyphs.append(
            GuideGlyph(
                column=column,
                screen_column=column - scroll_column,
                highlight=highlight,
            )
        )
        column += shiftwidth
    return glyphs


__all__ = ["GuideGlyph", "displayed_indent", "plan_guides"]
