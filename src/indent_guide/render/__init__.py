"""Redraw scheduling, glyph planning and scope redraw diffing."""

from .diff import plan_scope_redraw
from .guides import GuideGlyph, displayed_indent, plan_guides
from .scheduler import IndentGuideEngine

__all__ = [
    "GuideGlyph",
    "IndentGuideEngine",
    "displayed_indent",
    "plan_guides",
    "plan_scope_redraw",
]
