from typing import Sequence

from indent_guide.buffer import BufferDocument, IndentCache
from indent_guide.scope import ContainLine, ContainPointerIndex, Direction

NESTED = [
    "def f():",
    "    if x:",
    "        a = 1",
    "",
    "        b = 2",
    "    return a",
    "x = 1",
]


def make_index(lines: Sequence[str], *, shiftwidth: int = 4) -> ContainPointerIndex:
    document = BufferDocument.from_lines(lines)
    cache = IndentCache(document.get_lines, shiftwidth=shiftwidth, overscan=100)
    return ContainPointerIndex(cache)


def test_find_prev_and_next_contain_lines() -> None:
    index = make_index(NESTED)

    assert index.find_prev_contain_line(2) == ContainLine(1, 4)
    assert index.find_next_contain_line(2) == ContainLine(5, 4)
    assert index.find_prev_contain_line(5) == ContainLine(0, 0)
    assert index.find_next_contain_line(1) == ContainLine(6, 0)


def test_boundaries_report_no_indent() -> None:
    index = make_index(NESTED)

    assert index.find_prev_contain_line(0) == ContainLine(-1, None)
    assert index.find_next_contain_line(6) == ContainLine(7, None)
    assert not index.find_next_contain_line(0).found


def test_blank_line_contains_to_nearest_non_blank() -> None:
    index = make_index(NESTED)

    assert index.find_prev_contain_line(3) == ContainLine(2, 8)
    assert index.find_next_contain_line(3) == ContainLine(4, 8)


def test_scan_memoizes_every_settled_line() -> None:
    index = make_index(NESTED)

    index.find_next_contain_line(2)

    assert index.pointer(2, Direction.DOWN) == 5
    assert index.pointer(3, Direction.DOWN) == 4
    assert index.pointer(4, Direction.DOWN) == 5
    assert index.pointer(2, Direction.UP) is None


def test_results_are_smaller_or_boundary_and_stable() -> None:
    index = make_index(NESTED)
    indents = index.indents

    for direction in Direction:
        for line in range(len(NESTED)):
            found = index.find_contain_line(line, direction)
            if found.found:
                assert found.indent < indents.get(line)
            else:
                assert found.line in (-1, len(NESTED))
            assert index.find_contain_line(line, direction) == found


def test_resolved_block_answers_in_one_step() -> None:
    index = make_index(NESTED)
    block = [4, 1, 3, 5, 2]

    for line in block:
        index.find_next_contain_line(line)
        index.find_prev_contain_line(line)

    for line in block:
        index.find_next_contain_line(line)
        assert index.last_scan_steps == 1
        index.find_prev_contain_line(line)
        assert index.last_scan_steps == 1


def test_all_blank_buffer_has_no_contain_lines() -> None:
    index = make_index(["", "", ""])

    for line in range(3):
        assert not index.find_prev_contain_line(line).found
        assert not index.find_next_contain_line(line).found


def test_out_of_range_line_is_not_found() -> None:
    index = make_index(["a"])

    assert index.find_next_contain_line(5) == ContainLine(5, None)


def test_reset_drops_pointers() -> None:
    index = make_index(NESTED)
    index.find_next_contain_line(2)

    index.reset()

    assert index.pointer(2, Direction.DOWN) is None
