"""Value types shared by the contain-pointer index and scope resolver."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class Direction(int, Enum):
    """Scan direction; the value is the line increment."""

    UP = -1
    DOWN = 1


@dataclass(frozen=True, slots=True)
class ContainLine:
    """Nearest line outward with a strictly smaller indent.

    ``indent`` is ``None`` when the scan ran off the buffer; ``line`` then holds
    the boundary (``-1`` upward, the line count downward).
    """

    line: int
    indent: Optional[float]

    @property
    def found(self) -> bool:
        return self.indent is not None


@dataclass(frozen=True, slots=True)
class IndentScope:
    """Both contain lines around a reference line."""

    prev: ContainLine
    next: ContainLine


@dataclass(frozen=True, slots=True)
class ScopeRange:
    """Inclusive line range plus the guide column to highlight."""

    start_line: int
    end_line: int
    indent_level: int

    def __post_init__(self) -> None:
        if self.start_line > self.end_line:
            raise ValueError(
                f"start_line {self.start_line} is after end_line {self.end_line}"
            )

    def contains(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line

    def overlaps(self, other: "ScopeRange") -> bool:
        return (
            self.start_line <= other.end_line and other.start_line <= self.end_line
        )


@dataclass(frozen=True, slots=True)
class ScopePolicy:
    """Tie-break and widening rules for cursor scope selection.

    ``clamp_increase`` widens the scope to include the next contain line when
    the indent jumps by more than ``max_increase_level`` steps.
    ``strict_child_tie`` only treats the next line as the base when it is
    strictly shallower than the previous line.
    """

    name: str
    clamp_increase: bool = True
    strict_child_tie: bool = False


SCOPE_POLICIES: Dict[str, ScopePolicy] = {
    "clamped": ScopePolicy("clamped"),
    "unclamped": ScopePolicy("unclamped", clamp_increase=False),
    "strict_tie": ScopePolicy("strict_tie", strict_child_tie=True),
}

DEFAULT_SCOPE_POLICY = SCOPE_POLICIES["clamped"]


__all__ = [
    "ContainLine",
    "DEFAULT_SCOPE_POLICY",
    "Direction",
    "IndentScope",
    "SCOPE_POLICIES",
    "ScopePolicy",
    "ScopeRange",
]
