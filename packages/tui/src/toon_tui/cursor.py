"""Terminal cursor descriptor."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .vec2 import Vec2


class CursorShape(Enum):
    BAR = "bar"              # a bar to the left of the character
    BLOCK = "block"          # a full block over the character
    UNDERLINE = "underline"  # an underline under the character


@dataclass(frozen=True)
class Cursor:
    shape: CursorShape = CursorShape.BLOCK
    blinking: bool = False
    pos: Vec2 = Vec2(0, 0)
