"""Line storage and indent caching.

Buffer/window state lives in :mod:`indent_guide.buffer.state`, which depends on
the scope package and is imported from there directly.
"""

from .document import BufferDocument
from .indent import BLANK_INDENT, IndentCache, compute_indent, round_indent

__all__ = [
    "BLANK_INDENT",
    "BufferDocument",
    "IndentCache",
    "compute_indent",
    "round_indent",
]
