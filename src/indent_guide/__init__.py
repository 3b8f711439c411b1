"""Whitespace-driven indent guides and cursor scope for editor viewports."""

__all__ = [
    "adapters",
    "buffer",
    "config",
    "host",
    "render",
    "runtime",
    "scope",
]

__version__ = "0.1.0"
