"""Option model and resolution."""

from .options import (
    ConfigResolver,
    GuideOptions,
    OptionsError,
    normalize_overrides,
)

__all__ = ["ConfigResolver", "GuideOptions", "OptionsError", "normalize_overrides"]
