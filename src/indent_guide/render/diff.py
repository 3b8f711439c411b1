"""Minimal redraw ranges for a cursor-scope change."""

from __future__ import annotations

from typing import List, Optional, Tuple

from indent_guide.scope.models import ScopeRange

LineSpan = Tuple[int, int]


def plan_scope_redraw(
    previous: Optional[ScopeRange], current: Optional[ScopeRange]
) -> List[LineSpan]:
    """Return inclusive ``(start, end)`` spans to redraw, fewest lines first.

    Unchanged scopes need nothing, disjoint scopes are redrawn separately and
    overlapping ones as their union.
    """

    if previous is None and current is None:
        return []
    if previous is None:
        assert current is not None
        return [(current.start_line, current.end_line)]
    if current is None:
        return [(previous.start_line, previous.end_line)]
    if previous == current:
        return []
    if not previous.overlaps(current):
        return [
            (previous.start_line, previous.end_line),
            (current.start_line, current.end_line),
        ]
    return [
        (
            min(previous.start_line, current.start_line),
            max(previous.end_line, current.end_line),
        )
    ]


__all__ = ["LineSpan", "plan_scope_redraw"]
