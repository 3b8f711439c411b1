import pytest

from indent_guide.config import ConfigResolver, GuideOptions, OptionsError
from indent_guide.host.memory import MemoryHost


def make_host() -> MemoryHost:
    host = MemoryHost()
    host.open_buffer(1, ["a"])
    host.open_buffer(2, ["a"], variables={"indent_guide_glyph": "C"})
    host.open_buffer(3, ["a"])
    return host


@pytest.mark.parametrize(
    "overrides",
    [
        {"shiftwidth": 0},
        {"overscan": -1},
        {"max_increase_level": -2},
        {"max_indent_level": -1},
        {"scope_policy": "nearest"},
    ],
)
def test_invalid_options_are_rejected(overrides) -> None:
    with pytest.raises(OptionsError):
        GuideOptions(**overrides)


def test_legacy_aliases_are_accepted() -> None:
    options = GuideOptions().merged(
        {"char": "|", "char_hl": "Comment", "cursor_scope_char_hl": "Special"}
    )

    assert options.glyph == "|"
    assert options.glyph_highlight == "Comment"
    assert options.cursor_scope_highlight == "Special"


def test_unknown_global_option_raises() -> None:
    resolver = ConfigResolver(make_host())

    with pytest.raises(OptionsError) as excinfo:
        resolver.update({"colour": "red"})

    assert excinfo.value.key == "colour"


def test_precedence_buffer_local_over_hook_over_global() -> None:
    resolver = ConfigResolver(
        make_host(),
        options=GuideOptions(glyph="A"),
        get_opts=lambda buffer: {"glyph": "B"} if buffer in (1, 2) else None,
    )

    assert resolver.resolve(1).glyph == "B"
    assert resolver.resolve(2).glyph == "C"
    assert resolver.resolve(3).glyph == "A"


def test_unknown_buffer_variables_are_ignored() -> None:
    host = make_host()
    host.buffers[1].variables.update(
        {"indent_guide_sparkle": True, "other_plugin_enabled": False}
    )

    options = ConfigResolver(host).resolve(1)

    assert options.enabled is True


def test_shiftwidth_falls_back_to_tabstop_then_default() -> None:
    host = make_host()
    resolver = ConfigResolver(host)

    assert resolver.resolve(1).shiftwidth == 4

    host.buffers[1].shiftwidth = 0
    host.buffers[1].tabstop = 3
    assert resolver.resolve(1).shiftwidth == 3

    host.buffers[1].tabstop = 0
    assert resolver.resolve(1).shiftwidth == 8


def test_explicit_shiftwidth_beats_host_setting() -> None:
    host = make_host()
    resolver = ConfigResolver(host, get_opts=lambda buffer: {"shiftwidth": 2})

    assert resolver.resolve(1).shiftwidth == 2


def test_policy_lookup() -> None:
    assert GuideOptions().policy.clamp_increase is True
    assert GuideOptions(scope_policy="unclamped").policy.clamp_increase is False
    assert GuideOptions(scope_policy="strict_tie").policy.strict_child_tie is True
