"""Textual host adapter."""

from .controller import GuideUIHooks, RenderedLine, TextualIndentGuideAdapter

__all__ = ["GuideUIHooks", "RenderedLine", "TextualIndentGuideAdapter"]
