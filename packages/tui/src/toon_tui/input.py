"""
Decoded user input — key presses and mouse events.

Enter, Tab and Delete are character keys ("\\n", "\\t", "\\x7f"). Character
keys are always lowercase; an uppercase letter is shift + the lowercase key.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .vec2 import Vec2


class Key(Enum):
    BACKSPACE = "backspace"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    INSERT = "insert"
    ESCAPE = "escape"


@dataclass(frozen=True)
class FunctionKey:
    """F1..F12 etc; ``FunctionKey(5)`` is F5."""

    number: int


KeyValue = Key | FunctionKey | str


@dataclass(frozen=True)
class Modifiers:
    shift: bool = False
    control: bool = False
    alt: bool = False

    def are_none(self) -> bool:
        return not (self.shift or self.control or self.alt)


NO_MODIFIERS = Modifiers()


@dataclass(frozen=True)
class KeyPress:
    key: KeyValue
    modifiers: Modifiers = field(default=NO_MODIFIERS)

    @classmethod
    def from_char(cls, c: str) -> KeyPress:
        if c.isascii() and c.isupper():
            return cls(c.lower(), Modifiers(shift=True))
        return cls(c.lower() if c.isascii() else c)

    def is_char(self, c: str) -> bool:
        """Whether this press is exactly what typing ``c`` would produce."""
        return self == KeyPress.from_char(c)


class MouseKind(Enum):
    PRESS = "press"
    RELEASE = "release"
    HOLD = "hold"
    SCROLL_DOWN = "scroll_down"
    SCROLL_UP = "scroll_up"


class MouseButton(Enum):
    LEFT = "left"
    MIDDLE = "middle"
    RIGHT = "right"


@dataclass(frozen=True)
class Mouse:
    """
    A mouse event. ``button`` is only set for presses. ``size`` is the size of
    the output that captured the event; the renderer fills it in.
    """

    kind: MouseKind
    at: Vec2
    button: MouseButton | None = None
    size: Vec2 = Vec2(0, 0)
    modifiers: Modifiers = field(default=NO_MODIFIERS)


Input = KeyPress | Mouse
