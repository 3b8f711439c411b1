"""Option model and the global/buffer-local config resolver."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Dict, Mapping, Optional

from indent_guide.host.protocols import BufferOptionSource
from indent_guide.scope.models import SCOPE_POLICIES, ScopePolicy

BUFFER_VAR_PREFIX = "indent_guide_"
FALLBACK_SHIFTWIDTH = 8

# Key names used by earlier releases.
OPTION_ALIASES: Dict[str, str] = {
    "char": "glyph",
    "char_hl": "glyph_highlight",
    "cursor_scope_char_hl": "cursor_scope_highlight",
}


class OptionsError(ValueError):
    """Raised for unknown option keys or out-of-range values."""

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


@dataclass(frozen=True, slots=True)
class GuideOptions:
    enabled: bool = True
    shiftwidth: Optional[int] = None
    overscan: int = 100
    skip_first_indent: bool = False
    glyph: str = "▏"
    glyph_highlight: str = "LineNr"
    show_cursor_scope: bool = True
    cursor_scope_highlight: str = "Delimiter"
    auto_clear_cursor_scope: bool = True
    priority: int = 120
    max_increase_level: int = 1
    # 0 disables the per-line glyph cap.
    max_indent_level: int = 64
    scope_policy: str = "clamped"

    def __post_init__(self) -> None:
        if self.shiftwidth is not None and self.shiftwidth <= 0:
            raise OptionsError("shiftwidth must be positive", key="shiftwidth")
        if self.overscan < 0:
            raise OptionsError("overscan cannot be negative", key="overscan")
        if self.max_increase_level < 0:
            raise OptionsError(
                "max_increase_level cannot be negative", key="max_increase_level"
            )
        if self.max_indent_level < 0:
            raise OptionsError(
                "max_indent_level cannot be negative", key="max_indent_level"
            )
        if self.scope_policy not in SCOPE_POLICIES:
            raise OptionsError(
                f"Unknown scope policy '{self.scope_policy}'", key="scope_policy"
            )

    @property
    def policy(self) -> ScopePolicy:
        return SCOPE_POLICIES[self.scope_policy]

    @property
    def increase_step(self) -> int:
        """Largest indent increase shown per line, in columns."""

        return (self.shiftwidth or FALLBACK_SHIFTWIDTH) * self.max_increase_level

    def merged(self, overrides: Mapping[str, Any]) -> "GuideOptions":
        return replace(self, **normalize_overrides(overrides))


OPTION_KEYS = frozenset(f.name for f in fields(GuideOptions))


def normalize_overrides(
    overrides: Mapping[str, Any], *, strict: bool = True
) -> Dict[str, Any]:
    """Translate aliases and drop ``None`` values.

    Unknown keys raise :class:`OptionsError` unless ``strict`` is off, in which
    case they are ignored.
    """

    result: Dict[str, Any] = {}
    for raw_key, value in overrides.items():
        key = OPTION_ALIASES.get(raw_key, raw_key)
        if key not in OPTION_KEYS:
            if strict:
                raise OptionsError(f"Unknown option '{raw_key}'", key=raw_key)
            continue
        if value is not None:
            result[key] = value
    return result


OptionsHook = Callable[[int], Optional[Mapping[str, Any]]]


class ConfigResolver:
    """Merges global options, a per-buffer hook and buffer-local variables.

    Precedence, highest first: ``indent_guide_<key>`` buffer variables, the
    mapping returned by ``get_opts(buffer)``, the global options.
    """

    def __init__(
        self,
        host: BufferOptionSource,
        *,
        options: Optional[GuideOptions] = None,
        get_opts: Optional[OptionsHook] = None,
    ) -> None:
        self.host = host
        self.options = options or GuideOptions()
        self.get_opts = get_opts

    def update(
        self, overrides: Mapping[str, Any], *, get_opts: Optional[OptionsHook] = None
    ) -> GuideOptions:
        self.options = self.options.merged(overrides)
        if get_opts is not None:
            self.get_opts = get_opts
        return self.options

    def resolve(self, buffer: int) -> GuideOptions:
        layered: Dict[str, Any] = {}
        if self.get_opts is not None:
            layered.update(normalize_overrides(self.get_opts(buffer) or {}))
        layered.update(self._buffer_locals(buffer))

        resolved = self.options.merged(layered)
        if resolved.shiftwidth is None:
            resolved = replace(resolved, shiftwidth=self._host_shiftwidth(buffer))
        return resolved

    def _buffer_locals(self, buffer: int) -> Dict[str, Any]:
        variables = self.host.buffer_variables(buffer)
        scoped = {
            key[len(BUFFER_VAR_PREFIX):]: value
            for key, value in variables.items()
            if key.startswith(BUFFER_VAR_PREFIX)
        }
        return normalize_overrides(scoped, strict=False)

    def _host_shiftwidth(self, buffer: int) -> int:
        shiftwidth = self.host.buffer_shiftwidth(buffer)
        if shiftwidth <= 0:
            shiftwidth = self.host.buffer_tabstop(buffer)
        return shiftwidth if shiftwidth > 0 else FALLBACK_SHIFTWIDTH


__all__ = [
    "BUFFER_VAR_PREFIX",
    "ConfigResolver",
    "FALLBACK_SHIFTWIDTH",
    "GuideOptions",
    "OPTION_ALIASES",
    "OptionsError",
    "OptionsHook",
    "normalize_overrides",
]
