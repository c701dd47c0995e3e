"""
toon_tui — terminal rendering engine with frame diffing.

Elements draw into an in-memory Buffer; the Renderer diffs each frame
against the previous one and sends only the changes to a Backend.
"""
from .backends import AnsiBackend, Backend, Dummy, Operation, OpKind
from .buffer import BLANK, CONTINUATION, Buffer, Cell, CharCell, Continuation, Grid, Line
from .capture import StdioCapture
from .config import RendererConfig
from .cursor import Cursor, CursorShape
from .device import Tty
from .diff import DiffState, diff
from .element import Element
from .errors import RendererClosedError, TerminalInUseError, TokenConsumedError, ToonError
from .events import Events, InputEvent, ResizeEvent, TerminalEvent
from .input import (
    NO_MODIFIERS,
    FunctionKey,
    Input,
    Key,
    KeyPress,
    KeyValue,
    Modifiers,
    Mouse,
    MouseButton,
    MouseKind,
)
from .keys import decode_input
from .output import Area, MaybeFocused, Output
from .renderer import Renderer
from .stdin_buffer import StdinBuffer
from .style import (
    DEFAULT_STYLE,
    AnsiValue,
    Attributes,
    Color,
    ColorValue,
    Intensity,
    Rgb,
    Style,
    ansi_grayscale,
    ansi_rgb,
)
from .token import TerminalToken
from .utils import MAX_DIMENSION, char_width, is_printable, str_width
from .vec2 import Vec2

__all__ = [
    # backends
    "AnsiBackend",
    "Backend",
    "Dummy",
    "OpKind",
    "Operation",
    # buffer
    "BLANK",
    "CONTINUATION",
    "Buffer",
    "Cell",
    "CharCell",
    "Continuation",
    "Grid",
    "Line",
    # capture / device / token
    "StdioCapture",
    "TerminalToken",
    "Tty",
    # config
    "RendererConfig",
    # cursor
    "Cursor",
    "CursorShape",
    # diff
    "DiffState",
    "diff",
    # element / events
    "Element",
    "Events",
    "InputEvent",
    "ResizeEvent",
    "TerminalEvent",
    # errors
    "RendererClosedError",
    "TerminalInUseError",
    "TokenConsumedError",
    "ToonError",
    # input
    "NO_MODIFIERS",
    "FunctionKey",
    "Input",
    "Key",
    "KeyPress",
    "KeyValue",
    "Modifiers",
    "Mouse",
    "MouseButton",
    "MouseKind",
    "decode_input",
    "StdinBuffer",
    # output
    "Area",
    "MaybeFocused",
    "Output",
    # renderer
    "Renderer",
    # style
    "DEFAULT_STYLE",
    "AnsiValue",
    "Attributes",
    "Color",
    "ColorValue",
    "Intensity",
    "Rgb",
    "Style",
    "ansi_grayscale",
    "ansi_rgb",
    # utils
    "MAX_DIMENSION",
    "Vec2",
    "char_width",
    "is_printable",
    "str_width",
]
