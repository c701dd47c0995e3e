"""Tests for toon_tui.buffer — lines, grids and buffers"""
import pytest
from hypothesis import given, settings, strategies as st

from toon_tui.buffer import BLANK, CONTINUATION, Buffer, CharCell, Continuation, Grid, Line
from toon_tui.cursor import Cursor, CursorShape
from toon_tui.style import DEFAULT_STYLE, Attributes, Color, Style
from toon_tui.vec2 import Vec2

RED = Style(Color.RED)
BLUE = Style(Color.BLUE)


def line_of(text: str, length: int | None = None, style: Style = DEFAULT_STYLE) -> Line:
    line = Line(len(text) if length is None else length)
    line.write(Vec2(0, 0), text, style)
    return line


def assert_line_invariants(line: Line) -> None:
    cells = list(line)
    for x, cell in enumerate(cells):
        if isinstance(cell, Continuation):
            assert x > 0
            prev = cells[x - 1]
            assert isinstance(prev, CharCell) and prev.double
        elif cell.double:
            assert x + 1 < len(cells)
            assert isinstance(cells[x + 1], Continuation)
    if cells:
        last = cells[-1]
        assert not (isinstance(last, CharCell) and last.double)


class TestLineWrite:
    def test_new_line_is_blank(self):
        line = Line(4)
        assert list(line) == [BLANK] * 4
        assert line.text() == "    "

    def test_write_text(self):
        line = line_of("abcde")
        assert line.text() == "abcde"
        assert line[2] == CharCell("c", False, DEFAULT_STYLE)

    def test_wide_glyph_takes_two_cells(self):
        line = line_of("abcde")
        line.put(2, "中", RED)
        assert line[2] == CharCell("中", True, RED)
        assert line[3] is CONTINUATION
        assert line.text() == "ab中e"
        assert_line_invariants(line)

    def test_wide_glyph_in_last_column_is_ignored(self):
        line = line_of("abcde")
        line.put(4, "中", RED)
        assert line.text() == "abcde"
        assert_line_invariants(line)

    def test_overwriting_continuation_demotes_wide_glyph(self):
        line = line_of("abcde")
        line.put(2, "中", RED)
        line.put(3, "x", BLUE)
        assert line[2] == CharCell(" ", False, RED)
        assert line[3] == CharCell("x", False, BLUE)
        assert line.text() == "ab xe"
        assert_line_invariants(line)

    def test_overwriting_wide_glyph_start_blanks_continuation(self):
        line = line_of("abcde")
        line.put(2, "中", RED)
        line.put(2, "y", BLUE)
        assert line[2] == CharCell("y", False, BLUE)
        assert line[3] == CharCell(" ", False, RED)
        assert_line_invariants(line)

    def test_wide_over_wide_shifted_right(self):
        line = line_of("abcde")
        line.put(1, "中", RED)
        line.put(2, "文", BLUE)
        assert line[1] == CharCell(" ", False, RED)
        assert line[2] == CharCell("文", True, BLUE)
        assert line[3] is CONTINUATION
        assert line[4] == CharCell("e", False, DEFAULT_STYLE)
        assert_line_invariants(line)

    def test_wide_over_wide_shifted_left(self):
        line = line_of("abcde")
        line.put(2, "中", RED)
        line.put(1, "文", BLUE)
        assert line[1] == CharCell("文", True, BLUE)
        assert line[2] is CONTINUATION
        assert line[3] == CharCell(" ", False, RED)
        assert_line_invariants(line)

    def test_zero_width_mark_attaches_to_cell(self):
        line = line_of("abc")
        line.put(1, "\u0301", RED)
        assert line[1] == CharCell("b\u0301", False, DEFAULT_STYLE)

    def test_zero_width_mark_on_continuation_is_ignored(self):
        line = line_of("abcd")
        line.put(1, "中", RED)
        line.put(2, "\u0301", RED)
        assert line[1] == CharCell("中", True, RED)
        assert line[2] is CONTINUATION

    def test_write_attaches_marks_to_previous_glyph(self):
        line = Line(4)
        line.write(Vec2(0, 0), "e\u0301x", RED)
        assert line[0] == CharCell("e\u0301", False, RED)
        assert line[1] == CharCell("x", False, RED)

    def test_control_characters_are_ignored(self):
        line = line_of("abc")
        line.put(0, "\n", RED)
        line.put(1, "\0", RED)
        line.write(Vec2(0, 0), "\tz", RED)
        assert line.text() == "zbc"

    def test_out_of_range_writes_are_ignored(self):
        line = line_of("abc")
        line.put(3, "x", RED)
        line.put(-1, "x", RED)
        line.write_char(Vec2(0, 1), "x", RED)
        assert line.text() == "abc"

    def test_write_cuts_off_at_edge(self):
        line = Line(3)
        line.write(Vec2(1, 0), "hello", DEFAULT_STYLE)
        assert line.text() == " he"


class TestLineResize:
    def test_grow_appends_blanks(self):
        line = line_of("ab")
        line.resize(4)
        assert line.text() == "ab  "

    def test_shrink_truncates(self):
        line = line_of("abcd")
        line.resize(2)
        assert line.text() == "ab"

    def test_shrink_through_wide_glyph_demotes_it(self):
        line = line_of("ab", 4)
        line.put(2, "中", RED)
        line.resize(3)
        assert line[2] == CharCell(" ", False, RED)
        assert_line_invariants(line)

    def test_negative_length_rejected(self):
        with pytest.raises(ValueError):
            Line(-1)

    def test_too_long_rejected(self):
        with pytest.raises(ValueError):
            Line(0x10000)

    def test_copy_is_independent(self):
        line = line_of("abc")
        copy = line.copy()
        copy.put(0, "z", RED)
        assert line.text() == "abc"
        assert copy != line


class TestGrid:
    def _numbered(self, height: int) -> Grid:
        grid = Grid(Vec2(2, height))
        for y in range(height):
            grid.write(Vec2(0, y), str(y), DEFAULT_STYLE)
        return grid

    def test_size(self):
        grid = Grid(Vec2(5, 3))
        assert grid.size() == Vec2(5, 3)
        assert grid.width == 5
        assert grid.height == 3

    def test_write_char_out_of_bounds_ignored(self):
        grid = Grid(Vec2(2, 2))
        grid.write_char(Vec2(0, 2), "x", RED)
        grid.write_char(Vec2(-1, 0), "x", RED)
        assert grid == Grid(Vec2(2, 2))

    def test_resize_width_resizes_lines(self):
        grid = self._numbered(3)
        grid.resize_width(4)
        assert all(len(line) == 4 for line in grid.lines)

    def test_resize_height_grows_at_bottom(self):
        grid = self._numbered(2)
        grid.resize_height(4)
        assert [line.text() for line in grid.lines] == ["0 ", "1 ", "  ", "  "]

    def test_anchor_below_new_height_truncates_bottom(self):
        grid = self._numbered(10)
        grid.resize_height_with_anchor(3, 1)
        assert [line.text()[0] for line in grid.lines] == ["0", "1", "2"]

    def test_anchor_kept_as_last_row(self):
        grid = self._numbered(10)
        grid.resize_height_with_anchor(3, 7)
        assert [line.text()[0] for line in grid.lines] == ["5", "6", "7"]

    def test_anchor_on_last_row(self):
        grid = self._numbered(10)
        grid.resize_height_with_anchor(4, 9)
        assert [line.text()[0] for line in grid.lines] == ["6", "7", "8", "9"]

    def test_anchor_grow_appends(self):
        grid = self._numbered(3)
        grid.resize_height_with_anchor(5, 2)
        assert grid.height == 5
        assert grid.lines[2].text() == "2 "

    def test_too_large_rejected(self):
        with pytest.raises(ValueError):
            Grid(Vec2(0x10000, 1))

    def test_clear(self):
        grid = self._numbered(3)
        grid.clear()
        assert grid == Grid(Vec2(2, 3))

    def test_draw_replays_cells(self):
        grid = Grid(Vec2(4, 2))
        grid.write(Vec2(0, 1), "a中", RED)
        target = Grid(Vec2(4, 2))
        grid.draw(target)
        assert target == grid


class TestBuffer:
    def test_new_buffer(self):
        buffer = Buffer(Vec2(3, 2))
        assert buffer.size() == Vec2(3, 2)
        assert buffer.title == ""
        assert buffer.cursor is None

    def test_title_and_cursor_last_call_wins(self):
        buffer = Buffer(Vec2(3, 2))
        buffer.set_title("one")
        buffer.set_title("two")
        buffer.set_cursor(Cursor(pos=Vec2(1, 1)))
        buffer.set_cursor(None)
        assert buffer.title == "two"
        assert buffer.cursor is None

    def test_clear_resets_everything(self):
        buffer = Buffer(Vec2(3, 1))
        buffer.write(Vec2(0, 0), "abc", RED)
        buffer.set_title("t")
        buffer.set_cursor(Cursor())
        buffer.clear()
        assert buffer == Buffer(Vec2(3, 1))

    def test_draw_copies_title_and_cursor(self):
        source = Buffer(Vec2(3, 1))
        source.write(Vec2(0, 0), "hi", Style(attributes=Attributes().bold()))
        source.set_title("title")
        source.set_cursor(Cursor(CursorShape.BAR, True, Vec2(2, 0)))
        target = Buffer(Vec2(3, 1))
        source.draw(target)
        assert target == source

    def test_copy_is_independent(self):
        buffer = Buffer(Vec2(3, 1))
        copy = buffer.copy()
        copy.write(Vec2(0, 0), "x", RED)
        assert buffer.grid.lines[0].text() == "   "

    def test_cursor_outside_grid_dropped(self):
        buffer = Buffer(Vec2(1, 1))
        buffer.set_cursor(Cursor(pos=Vec2(0, 0)))
        buffer.set_cursor(Cursor(pos=Vec2(0, 1)))
        assert buffer.cursor is None
        buffer.set_cursor(Cursor(pos=Vec2(-1, 0)))
        assert buffer.cursor is None

    def test_corrupt_line_raises(self):
        line = Line(3)
        line._cells[1] = CONTINUATION
        with pytest.raises(RuntimeError):
            line.put(1, "x", DEFAULT_STYLE)


# ─────────────────────────────────────────────────────────────────────────────
# Properties
# ─────────────────────────────────────────────────────────────────────────────

GLYPHS = ["a", "b", " ", "中", "😃", "\u0301", "\x1b"]
STYLES = [DEFAULT_STYLE, RED, BLUE]

line_steps = st.lists(
    st.one_of(
        st.tuples(
            st.just("put"),
            st.integers(min_value=-1, max_value=9),
            st.sampled_from(GLYPHS),
            st.sampled_from(STYLES),
        ),
        st.tuples(st.just("resize"), st.integers(min_value=0, max_value=9)),
    ),
    max_size=40,
)


class TestLineProperties:
    @settings(max_examples=300, deadline=None)
    @given(length=st.integers(min_value=0, max_value=9), steps=line_steps)
    def test_invariants_survive_any_writes_and_resizes(self, length, steps):
        line = Line(length)
        for step in steps:
            if step[0] == "put":
                _, x, c, style = step
                line.put(x, c, style)
            else:
                line.resize(step[1])
            assert_line_invariants(line)

    @settings(max_examples=100, deadline=None)
    @given(
        width=st.integers(min_value=0, max_value=6),
        writes=st.lists(
            st.tuples(
                st.integers(min_value=-1, max_value=6),
                st.integers(min_value=-1, max_value=3),
                st.text(alphabet=GLYPHS, max_size=5),
            ),
            max_size=8,
        ),
        new_width=st.integers(min_value=0, max_value=6),
    )
    def test_grid_writes_keep_every_line_valid(self, width, writes, new_width):
        grid = Grid(Vec2(width, 3))
        for x, y, text in writes:
            grid.write(Vec2(x, y), text, RED)
        grid.resize_width(new_width)
        for line in grid.lines:
            assert len(line) == new_width
            assert_line_invariants(line)
