"""
Screen model — cells, lines, grids and buffers.

A Buffer is what the screen should look like: a Grid of Lines of Cells plus
a title and an optional cursor. Line, Grid and Buffer are all drawing sinks
(Output) and can also be drawn onto another Output.

Line invariants, held after every write and resize:
- every Continuation is immediately preceded by a double-width CharCell
- the last cell of a line is never a double-width CharCell
- a CharCell's contents is one base glyph of width 1 (or 2 when ``double``)
  followed by zero or more zero-width marks
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

from .cursor import Cursor
from .output import Output
from .style import DEFAULT_STYLE, Style
from .utils import char_width, check_dimension
from .vec2 import Vec2


@dataclass(frozen=True)
class CharCell:
    """A cell holding a base glyph followed by any zero-width marks."""

    contents: str
    double: bool
    style: Style

    def with_mark(self, mark: str) -> CharCell:
        return CharCell(self.contents + mark, self.double, self.style)


@dataclass(frozen=True)
class Continuation:
    """The second column of the double-width cell to its left."""


CONTINUATION = Continuation()
BLANK = CharCell(" ", False, DEFAULT_STYLE)

Cell = CharCell | Continuation


def _space(style: Style) -> CharCell:
    if style == DEFAULT_STYLE:
        return BLANK
    return CharCell(" ", False, style)


# ─────────────────────────────────────────────────────────────────────────────
# Line
# ─────────────────────────────────────────────────────────────────────────────

class Line(Output):
    """A fixed-length row of cells."""

    def __init__(self, length: int = 0) -> None:
        self._cells: list[Cell] = []
        self.resize(length)

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __getitem__(self, x: int) -> Cell:
        return self._cells[x]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        return f"Line({self.text()!r})"

    @property
    def cells(self) -> Sequence[Cell]:
        return self._cells

    def text(self) -> str:
        """The visible contents of the line, continuations contributing nothing."""
        return "".join(cell.contents for cell in self._cells if isinstance(cell, CharCell))

    def copy(self) -> Line:
        line = Line()
        line._cells = list(self._cells)
        return line

    def resize(self, new_len: int) -> None:
        """
        Resize the line. New cells are blank. If shrinking cuts a double-width
        cell in half, that cell becomes a space keeping its style.
        """
        check_dimension(new_len, "line length")
        cells = self._cells
        if new_len < len(cells):
            del cells[new_len:]
        else:
            cells.extend([BLANK] * (new_len - len(cells)))

        if cells:
            last = cells[-1]
            if isinstance(last, CharCell) and last.double:
                cells[-1] = _space(last.style)

    def clear(self) -> None:
        """Reset every cell to a default-styled space."""
        self._cells[:] = [BLANK] * len(self._cells)

    def put(self, x: int, c: str, style: Style) -> None:
        """Write one codepoint at column ``x`` (see Output for the rules)."""
        width = char_width(c)
        if width is None:
            return
        cells = self._cells
        if not 0 <= x < len(cells):
            return

        if width == 0:
            cell = cells[x]
            if isinstance(cell, CharCell):
                cells[x] = cell.with_mark(c)
            return

        if width == 1:
            old = cells[x]
            cells[x] = CharCell(c, False, style)
            if isinstance(old, CharCell):
                if old.double:
                    cells[x + 1] = _space(old.style)
            else:
                self._demote(x - 1)
            return

        if x + 1 >= len(cells):
            return
        old_first, old_second = cells[x], cells[x + 1]
        cells[x] = CharCell(c, True, style)
        cells[x + 1] = CONTINUATION
        if isinstance(old_first, Continuation):
            self._demote(x - 1)
        if isinstance(old_second, CharCell) and old_second.double:
            cells[x + 2] = _space(old_second.style)

    def _demote(self, x: int) -> None:
        cell = self._cells[x]
        if not (isinstance(cell, CharCell) and cell.double):
            raise RuntimeError(f"continuation at column {x + 1} without a double-width cell")
        self._cells[x] = _space(cell.style)

    # ── Output ────────────────────────────────────────────────────────────

    def size(self) -> Vec2:
        return Vec2(len(self._cells), 1)

    def write_char(self, pos: Vec2, c: str, style: Style) -> None:
        if pos.y != 0:
            return
        self.put(pos.x, c, style)

    def set_title(self, title: str) -> None:
        pass

    def set_cursor(self, cursor: Cursor | None) -> None:
        pass

    # ── Element ───────────────────────────────────────────────────────────

    def draw(self, output: Output) -> None:
        _draw_cells(self._cells, 0, output)

    def ideal_size(self, maximum: Vec2) -> Vec2:
        return self.size()

    def handle(self, input, events) -> None:
        pass


def _draw_cells(cells: Sequence[Cell], y: int, output: Output) -> None:
    for x, cell in enumerate(cells):
        if isinstance(cell, CharCell):
            pos = Vec2(x, y)
            for c in cell.contents:
                output.write_char(pos, c, cell.style)


# ─────────────────────────────────────────────────────────────────────────────
# Grid
# ─────────────────────────────────────────────────────────────────────────────

class Grid(Output):
    """A fixed-width stack of lines."""

    def __init__(self, size: Vec2 = Vec2(0, 0)) -> None:
        self._width = 0
        self._lines: list[Line] = []
        self.resize(size)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._width == other._width and self._lines == other._lines

    def __repr__(self) -> str:
        return f"Grid({self._width}x{len(self._lines)})"

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return len(self._lines)

    @property
    def lines(self) -> Sequence[Line]:
        return self._lines

    def copy(self) -> Grid:
        grid = Grid()
        grid._width = self._width
        grid._lines = [line.copy() for line in self._lines]
        return grid

    def resize_width(self, new_width: int) -> None:
        check_dimension(new_width, "grid width")
        self._width = new_width
        for line in self._lines:
            line.resize(new_width)

    def resize_height(self, new_height: int) -> None:
        """Grow by appending blank lines at the bottom, shrink by dropping from the bottom."""
        check_dimension(new_height, "grid height")
        lines = self._lines
        if new_height < len(lines):
            del lines[new_height:]
        else:
            lines.extend(Line(self._width) for _ in range(new_height - len(lines)))

    def resize_height_with_anchor(self, new_height: int, anchor: int) -> None:
        """
        Resize the height while keeping row ``anchor`` on screen.

        Shrinking drops rows from the bottom while the anchor survives that;
        otherwise the rows below the anchor are dropped first and then rows
        from the top, so the anchor ends up as the last row.
        """
        check_dimension(new_height, "grid height")
        lines = self._lines
        if new_height >= len(lines) or anchor < new_height:
            self.resize_height(new_height)
            return
        del lines[anchor + 1:]
        del lines[:len(lines) - new_height]

    def resize(self, new_size: Vec2) -> None:
        self.resize_width(new_size.x)
        self.resize_height(new_size.y)

    def clear(self) -> None:
        for line in self._lines:
            line.clear()

    # ── Output ────────────────────────────────────────────────────────────

    def size(self) -> Vec2:
        return Vec2(self._width, len(self._lines))

    def write_char(self, pos: Vec2, c: str, style: Style) -> None:
        if 0 <= pos.y < len(self._lines):
            self._lines[pos.y].put(pos.x, c, style)

    def set_title(self, title: str) -> None:
        pass

    def set_cursor(self, cursor: Cursor | None) -> None:
        pass

    # ── Element ───────────────────────────────────────────────────────────

    def draw(self, output: Output) -> None:
        for y, line in enumerate(self._lines):
            _draw_cells(line.cells, y, output)

    def ideal_size(self, maximum: Vec2) -> Vec2:
        return self.size()

    def handle(self, input, events) -> None:
        pass


# ─────────────────────────────────────────────────────────────────────────────
# Buffer
# ─────────────────────────────────────────────────────────────────────────────

class Buffer(Output):
    """A terminal state: a grid, a title and an optional cursor."""

    def __init__(self, size: Vec2 = Vec2(0, 0)) -> None:
        self.grid = Grid(size)
        self.title = ""
        self.cursor: Cursor | None = None

    @classmethod
    def from_grid(cls, grid: Grid) -> Buffer:
        buffer = cls()
        buffer.grid = grid
        return buffer

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Buffer):
            return NotImplemented
        return (
            self.grid == other.grid
            and self.title == other.title
            and self.cursor == other.cursor
        )

    def __repr__(self) -> str:
        return f"Buffer(grid={self.grid!r}, title={self.title!r}, cursor={self.cursor!r})"

    def copy(self) -> Buffer:
        buffer = Buffer.from_grid(self.grid.copy())
        buffer.title = self.title
        buffer.cursor = self.cursor
        return buffer

    def clear(self) -> None:
        """Recycle into a blank frame without reallocating the grid."""
        self.grid.clear()
        self.title = ""
        self.cursor = None

    # ── Output ────────────────────────────────────────────────────────────

    def size(self) -> Vec2:
        return self.grid.size()

    def write_char(self, pos: Vec2, c: str, style: Style) -> None:
        self.grid.write_char(pos, c, style)

    def set_title(self, title: str) -> None:
        self.title = str(title)

    def set_cursor(self, cursor: Cursor | None) -> None:
        if cursor is not None:
            size = self.grid.size()
            if not (0 <= cursor.pos.x < size.x and 0 <= cursor.pos.y < size.y):
                cursor = None
        self.cursor = cursor

    # ── Element ───────────────────────────────────────────────────────────

    def draw(self, output: Output) -> None:
        self.grid.draw(output)
        output.set_title(self.title)
        output.set_cursor(self.cursor)

    def ideal_size(self, maximum: Vec2) -> Vec2:
        return self.grid.size()

    def handle(self, input, events) -> None:
        pass
