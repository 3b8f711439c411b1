"""Host-facing protocols; the in-memory host lives in :mod:`.memory`."""

from .protocols import (
    BufferOptionSource,
    IndentGuideHost,
    LineSource,
    OverlaySink,
    RedrawSink,
    ViewportProvider,
)

__all__ = [
    "BufferOptionSource",
    "IndentGuideHost",
    "LineSource",
    "OverlaySink",
    "RedrawSink",
    "ViewportProvider",
]
