"""
Text styling — colors, attributes and the combined Style of a cell.

Provides:
- Color: the terminal default plus the 16 named colors
- AnsiValue: an 8-bit palette index (ansi_rgb() / ansi_grayscale() build the cube and ramp)
- Rgb: a full 24-bit color
- Intensity / Attributes: independently toggleable text attributes
- Style: foreground + background + attributes
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum


class Color(Enum):
    """The terminal's default color and the 16 named ANSI colors."""

    DEFAULT = "default"
    BLACK = "black"
    DARK_GRAY = "dark_gray"      # ANSI bright black
    LIGHT_GRAY = "light_gray"    # ANSI white
    WHITE = "white"              # ANSI bright white
    RED = "red"
    DARK_RED = "dark_red"
    GREEN = "green"
    DARK_GREEN = "dark_green"
    YELLOW = "yellow"
    DARK_YELLOW = "dark_yellow"
    BLUE = "blue"
    DARK_BLUE = "dark_blue"
    MAGENTA = "magenta"
    DARK_MAGENTA = "dark_magenta"
    CYAN = "cyan"
    DARK_CYAN = "dark_cyan"


@dataclass(frozen=True)
class AnsiValue:
    """An index into the terminal's 256-color palette."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 255:
            raise ValueError(f"palette index out of range: {self.value}")


@dataclass(frozen=True)
class Rgb:
    """A full 24-bit RGB color."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for component in (self.r, self.g, self.b):
            if not 0 <= component <= 255:
                raise ValueError(f"RGB component out of range: {component}")

    def opposite(self) -> Rgb:
        return Rgb(255 - self.r, 255 - self.g, 255 - self.b)


ColorValue = Color | AnsiValue | Rgb


def ansi_rgb(r: int, g: int, b: int) -> AnsiValue:
    """Palette color from the 6x6x6 cube. Each component must be 0..5."""
    if not (0 <= r <= 5 and 0 <= g <= 5 and 0 <= b <= 5):
        raise ValueError("ansi_rgb components must be in 0..5")
    return AnsiValue(16 + 36 * r + 6 * g + b)


def ansi_grayscale(shade: int) -> AnsiValue:
    """Palette color from the 24-step grayscale ramp. ``shade`` must be 0..23."""
    if not 0 <= shade < 24:
        raise ValueError("ansi_grayscale shade must be in 0..23")
    return AnsiValue(0xE8 + shade)


class Intensity(Enum):
    DIM = "dim"
    NORMAL = "normal"
    BOLD = "bold"


@dataclass(frozen=True)
class Attributes:
    """Text attributes. Not all terminals support all of them."""

    intensity: Intensity = Intensity.NORMAL
    italic: bool = False
    underlined: bool = False
    blinking: bool = False
    crossed_out: bool = False

    def bold(self) -> Attributes:
        return replace(self, intensity=Intensity.BOLD)

    def dim(self) -> Attributes:
        return replace(self, intensity=Intensity.DIM)

    def with_italic(self) -> Attributes:
        return replace(self, italic=True)

    def with_underline(self) -> Attributes:
        return replace(self, underlined=True)

    def with_blinking(self) -> Attributes:
        return replace(self, blinking=True)

    def with_crossed_out(self) -> Attributes:
        return replace(self, crossed_out=True)


@dataclass(frozen=True)
class Style:
    """How a cell is written: foreground, background and attributes."""

    foreground: ColorValue = Color.DEFAULT
    background: ColorValue = Color.DEFAULT
    attributes: Attributes = field(default_factory=Attributes)


DEFAULT_STYLE = Style()
