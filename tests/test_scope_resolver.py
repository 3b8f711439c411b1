from typing import Sequence

import pytest

from indent_guide.buffer import BufferDocument, IndentCache
from indent_guide.scope import (
    SCOPE_POLICIES,
    ContainLine,
    ContainPointerIndex,
    IndentScope,
    ScopeRange,
    ScopeResolver,
)

SCENARIO = ["def f():", "    x = 1", "    y = 2", "", "    z = 3"]

CLOSER = [
    "def f():",
    "    a",
    "        b",
    "    c",
    "d",
]


def make_resolver(
    lines: Sequence[str],
    *,
    shiftwidth: int = 4,
    policy: str = "clamped",
    max_increase_level: int = 1,
) -> ScopeResolver:
    document = BufferDocument.from_lines(lines)
    cache = IndentCache(document.get_lines, shiftwidth=shiftwidth, overscan=100)
    return ScopeResolver(
        cache,
        ContainPointerIndex(cache),
        max_increase_level=max_increase_level,
        policy=SCOPE_POLICIES[policy],
    )


def test_cursor_in_function_body_highlights_function_level() -> None:
    resolver = make_resolver(SCENARIO)

    assert resolver.indents.get(1) == 4
    assert resolver.find_cursor_scope(1) == ScopeRange(1, 4, 0)


def test_cursor_on_blank_line_inherits_surrounding_block() -> None:
    resolver = make_resolver(SCENARIO)

    assert resolver.find_cursor_scope(3) == ScopeRange(1, 4, 0)


def test_cursor_on_opener_uses_child_block() -> None:
    resolver = make_resolver(SCENARIO)

    assert resolver.select_base_line(0) == (1, 4)
    assert resolver.find_cursor_scope(0) == ScopeRange(1, 4, 0)


@pytest.mark.parametrize(
    ("cursor", "base", "expected"),
    [
        (0, (1, 4), ScopeRange(1, 3, 0)),
        (1, (2, 8), ScopeRange(2, 2, 4)),
        (2, (2, 8), ScopeRange(2, 2, 4)),
        (3, (2, 8), ScopeRange(2, 2, 4)),
        (4, (3, 4), ScopeRange(1, 3, 0)),
    ],
)
def test_base_line_cases(cursor, base, expected) -> None:
    resolver = make_resolver(CLOSER)

    assert resolver.select_base_line(cursor) == base
    assert resolver.find_cursor_scope(cursor) == expected


def test_outermost_level_has_no_scope() -> None:
    resolver = make_resolver(["a", "b", "c"])

    for line in range(3):
        assert resolver.find_cursor_scope(line) is None


def test_all_blank_buffer_has_no_scope() -> None:
    resolver = make_resolver(["", "", "", ""])

    for line in range(4):
        assert resolver.find_indent_scope(line) is None
        assert resolver.find_cursor_scope(line) is None


def test_out_of_range_cursor_has_no_scope() -> None:
    resolver = make_resolver(SCENARIO)

    assert resolver.find_cursor_scope(40) is None


def test_blank_line_recurses_into_deeper_neighbour() -> None:
    above = make_resolver(["a:", "    b:", "        c", "", "    d", "e"])
    below = make_resolver(["a:", "    b", "", "        c", "d"])

    assert above.find_indent_scope(3) == IndentScope(ContainLine(1, 4), ContainLine(4, 4))
    assert below.find_indent_scope(2) == IndentScope(ContainLine(1, 4), ContainLine(4, 0))


def test_blank_line_tie_prefers_line_below() -> None:
    resolver = make_resolver(["a:", "    b", "", "    c", "d"])
    seen = []
    original = resolver.find_indent_scope

    def spy(line, **kwargs):
        seen.append(line)
        return original(line, **kwargs)

    resolver.find_indent_scope = spy  # type: ignore[method-assign]
    resolver.find_indent_scope(2)

    assert seen == [2, 3]


JUMP = ["def f():", "            x", "            y", "z"]


def test_clamped_policy_widens_multi_level_jump() -> None:
    resolver = make_resolver(JUMP, policy="clamped")

    assert resolver.find_cursor_scope(1) == ScopeRange(1, 3, 0)


def test_unclamped_policy_keeps_deep_highlight() -> None:
    resolver = make_resolver(JUMP, policy="unclamped")

    assert resolver.find_cursor_scope(1) == ScopeRange(1, 2, 8)


def test_larger_increase_level_disables_widening() -> None:
    resolver = make_resolver(JUMP, max_increase_level=3)

    assert resolver.find_cursor_scope(1) == ScopeRange(1, 2, 8)


TIE = ["x", "    a", "        b", "    c", "        d", "e"]


def test_default_policy_prefers_child_block_on_tie() -> None:
    resolver = make_resolver(TIE)

    assert resolver.select_base_line(3) == (4, 8)
    assert resolver.find_cursor_scope(3) == ScopeRange(4, 4, 4)


def test_strict_tie_policy_falls_back_to_previous_block() -> None:
    resolver = make_resolver(TIE, policy="strict_tie")

    assert resolver.select_base_line(3) == (2, 8)
    assert resolver.find_cursor_scope(3) == ScopeRange(2, 2, 4)


def test_non_multiple_indent_rounds_to_guide_column() -> None:
    unclamped = make_resolver(["a:", "      b", "c"], policy="unclamped")
    clamped = make_resolver(["a:", "      b", "c"])

    assert unclamped.find_cursor_scope(1) == ScopeRange(1, 1, 4)
    assert clamped.find_cursor_scope(1) == ScopeRange(1, 2, 0)


MIXED = [
    "class A:",
    "    def f(self):",
    "        if x:",
    "",
    "                deep()",
    "        return 1",
    "",
    "\tdef g(self):",
    "\t\tpass",
    "  odd = 2",
    "",
    "top = 3",
    "",
]


@pytest.mark.parametrize("policy", sorted(SCOPE_POLICIES))
def test_cursor_scope_ranges_are_ordered_and_in_bounds(policy) -> None:
    resolver = make_resolver(MIXED, policy=policy)

    for line in range(len(MIXED)):
        scope = resolver.find_cursor_scope(line)
        if scope is None:
            continue
        assert scope.start_line <= scope.end_line
        assert 0 <= scope.start_line
        assert scope.end_line < len(MIXED)
        assert scope.indent_level % 4 == 0
