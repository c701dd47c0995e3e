"""
Backend contract — the primitive terminal operations the diff is expressed in.

A backend owns no screen model of its own: the renderer tracks cursor
position and style and only calls a setter when the value changes. Errors
raised by any operation propagate to the caller unchanged.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..cursor import CursorShape
from ..events import TerminalEvent
from ..style import ColorValue, Intensity
from ..vec2 import Vec2

if TYPE_CHECKING:
    from ..device import Tty


class Backend(ABC):
    """Abstract terminal backend."""

    @classmethod
    def is_dummy(cls) -> bool:
        """Dummy backends need no terminal device and no exclusive token."""
        return False

    def bind(self, tty: Tty) -> None:
        """Take over the terminal device. Called once, before any other operation."""

    @abstractmethod
    def size(self) -> Vec2:
        """Current terminal size in columns and rows."""

    @abstractmethod
    def set_title(self, title: str) -> None: ...

    @abstractmethod
    def hide_cursor(self) -> None: ...

    @abstractmethod
    def show_cursor(self) -> None: ...

    @abstractmethod
    def set_cursor_shape(self, shape: CursorShape) -> None: ...

    @abstractmethod
    def set_cursor_blinking(self, blinking: bool) -> None: ...

    @abstractmethod
    def set_cursor_pos(self, pos: Vec2) -> None: ...

    @abstractmethod
    def set_foreground(self, color: ColorValue) -> None: ...

    @abstractmethod
    def set_background(self, color: ColorValue) -> None: ...

    @abstractmethod
    def set_intensity(self, intensity: Intensity) -> None: ...

    @abstractmethod
    def set_italic(self, italic: bool) -> None: ...

    @abstractmethod
    def set_underlined(self, underlined: bool) -> None: ...

    @abstractmethod
    def set_blinking(self, blinking: bool) -> None: ...

    @abstractmethod
    def set_crossed_out(self, crossed_out: bool) -> None: ...

    @abstractmethod
    def write(self, text: str) -> None:
        """
        Write one cell's contents at the cursor in the current style. The
        cursor moves right by the width written, never past the last column.
        """

    @abstractmethod
    def flush(self) -> None:
        """Make everything written so far visible."""

    @abstractmethod
    def reset(self) -> Tty | None:
        """Restore the terminal and give back the device passed to ``bind``."""

    @abstractmethod
    async def next_event(self) -> TerminalEvent:
        """
        Wait for the next input or resize event. Must be safe to cancel:
        a cancelled wait loses no event.
        """
