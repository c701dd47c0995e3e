"""
Drawing sinks — the write interface elements draw themselves through.

Provides:
- Output: abstract base (size, write_char, set_title, set_cursor) plus helpers
- Area: offsets and clips another Output to a sub-rectangle
- MaybeFocused: forwards title/cursor to another Output only when focused
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from .cursor import Cursor
from .style import Attributes, Color, ColorValue, Style
from .utils import char_width
from .vec2 import Vec2


class Output(ABC):
    """
    An output to which elements draw themselves.

    Failed writes are silently dropped and not detectable:
    - control characters are ignored
    - writes outside ``size()`` are ignored
    - a double-width glyph in the last column is ignored
    - a zero-width glyph is appended to the cell it lands on, keeping that
      cell's style; on the second column of a double-width glyph it is ignored
    - overwriting either column of a double-width glyph turns the other column
      into a space that keeps the wide glyph's style
    """

    @abstractmethod
    def size(self) -> Vec2:
        """Size of the output in columns and rows."""

    @abstractmethod
    def write_char(self, pos: Vec2, c: str, style: Style) -> None:
        """Write a single codepoint at a zero-indexed position."""

    @abstractmethod
    def set_title(self, title: str) -> None:
        """Set the title. The last call wins."""

    @abstractmethod
    def set_cursor(self, cursor: Cursor | None) -> None:
        """Set the cursor, or None to hide it. The last call wins."""

    # ── helpers ───────────────────────────────────────────────────────────

    def write(self, pos: Vec2, text: object, style: Style) -> None:
        """
        Write ``str(text)`` starting at ``pos``.

        Control characters are skipped and zero-width marks are attached to
        the glyph before them. Whatever overflows the output is cut off.
        """
        x, y = pos.x, pos.y
        base: Vec2 | None = None
        for c in str(text):
            width = char_width(c)
            if width is None:
                continue
            if width == 0:
                if base is not None:
                    self.write_char(base, c, style)
                continue
            base = Vec2(x, y)
            self.write_char(base, c, style)
            x += width

    def fill(self, color: ColorValue) -> None:
        """Paint every cell with a space on ``color``."""
        size = self.size()
        style = Style(Color.DEFAULT, color, Attributes())
        for y in range(size.y):
            for x in range(size.x):
                self.write_char(Vec2(x, y), " ", style)

    def area(self, top_left: Vec2, size: Vec2) -> Area:
        return Area(self, top_left, size)

    def focused(self, focused: bool) -> MaybeFocused:
        return MaybeFocused(self, focused)


class Area(Output):
    """
    Draws to a rectangle of another output.

    ``top_left`` may be negative, so content can be drawn through a fixed
    viewport (scrolling). Positions are relative to the area; anything outside
    ``size`` or outside the inner output is dropped.
    """

    def __init__(self, inner: Output, top_left: Vec2, size: Vec2) -> None:
        self._inner = inner
        self._top_left = top_left
        self._size = Vec2(max(0, size.x), max(0, size.y))

    @property
    def inner(self) -> Output:
        return self._inner

    @property
    def top_left(self) -> Vec2:
        return self._top_left

    def size(self) -> Vec2:
        return self._size

    def _contains(self, pos: Vec2) -> bool:
        return 0 <= pos.x < self._size.x and 0 <= pos.y < self._size.y

    def write_char(self, pos: Vec2, c: str, style: Style) -> None:
        if not self._contains(pos):
            return
        # A wide glyph must have room for its second column.
        if pos.x == self._size.x - 1 and char_width(c) == 2:
            return
        target = pos + self._top_left
        if target.x < 0 or target.y < 0:
            return
        self._inner.write_char(target, c, style)

    def set_title(self, title: str) -> None:
        self._inner.set_title(title)

    def set_cursor(self, cursor: Cursor | None) -> None:
        if cursor is None or not self._contains(cursor.pos):
            self._inner.set_cursor(None)
            return
        target = cursor.pos + self._top_left
        if target.x < 0 or target.y < 0:
            self._inner.set_cursor(None)
            return
        self._inner.set_cursor(Cursor(cursor.shape, cursor.blinking, target))


class MaybeFocused(Output):
    """An output that only lets focused elements set the title and cursor."""

    def __init__(self, inner: Output, focused: bool) -> None:
        self._inner = inner
        self._focused = focused

    def size(self) -> Vec2:
        return self._inner.size()

    def write_char(self, pos: Vec2, c: str, style: Style) -> None:
        self._inner.write_char(pos, c, style)

    def set_title(self, title: str) -> None:
        if self._focused:
            self._inner.set_title(title)

    def set_cursor(self, cursor: Cursor | None) -> None:
        if self._focused:
            self._inner.set_cursor(cursor)
