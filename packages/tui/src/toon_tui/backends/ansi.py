"""
ANSI backend — drives a real terminal with VT/xterm escape sequences.

Output is buffered on the Tty and written on ``flush()``. Input is read
through the running asyncio loop (``add_reader`` on the device fd), split
by StdinBuffer and decoded by ``decode_input``; SIGWINCH becomes a
ResizeEvent.
"""
from __future__ import annotations

import asyncio
import logging
import os
import signal
from typing import TYPE_CHECKING

from ..config import RendererConfig
from ..cursor import CursorShape
from ..events import InputEvent, ResizeEvent, TerminalEvent
from ..keys import decode_input
from ..stdin_buffer import StdinBuffer
from ..style import AnsiValue, Color, ColorValue, Intensity, Rgb
from ..vec2 import Vec2
from .base import Backend

if TYPE_CHECKING:
    from ..device import Tty

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# Escape sequences
# ─────────────────────────────────────────────────────────────────────────────

CSI = "\x1b["

ALT_SCREEN_ON = "\x1b[?1049h"
ALT_SCREEN_OFF = "\x1b[?1049l"
WRAP_OFF = "\x1b[?7l"
WRAP_ON = "\x1b[?7h"
CLEAR_SCREEN = "\x1b[2J"
# press/release, drag reporting, SGR encoding
MOUSE_ON = "\x1b[?1000h\x1b[?1002h\x1b[?1006h"
MOUSE_OFF = "\x1b[?1006l\x1b[?1002l\x1b[?1000l"
PASTE_ON = "\x1b[?2004h"
PASTE_OFF = "\x1b[?2004l"
CURSOR_HIDE = "\x1b[?25l"
CURSOR_SHOW = "\x1b[?25h"
CURSOR_SHAPE_DEFAULT = "\x1b[0 q"
SGR_RESET = "\x1b[0m"

_FOREGROUND_CODES: dict[Color, int] = {
    Color.BLACK: 30,
    Color.DARK_RED: 31,
    Color.DARK_GREEN: 32,
    Color.DARK_YELLOW: 33,
    Color.DARK_BLUE: 34,
    Color.DARK_MAGENTA: 35,
    Color.DARK_CYAN: 36,
    Color.LIGHT_GRAY: 37,
    Color.DEFAULT: 39,
    Color.DARK_GRAY: 90,
    Color.RED: 91,
    Color.GREEN: 92,
    Color.YELLOW: 93,
    Color.BLUE: 94,
    Color.MAGENTA: 95,
    Color.CYAN: 96,
    Color.WHITE: 97,
}

_INTENSITY_CODES: dict[Intensity, str] = {
    Intensity.BOLD: "22;1",
    Intensity.DIM: "22;2",
    Intensity.NORMAL: "22",
}

# DECSCUSR parameter for (shape, blinking)
_CURSOR_SHAPE_CODES: dict[tuple[CursorShape, bool], int] = {
    (CursorShape.BLOCK, True): 1,
    (CursorShape.BLOCK, False): 2,
    (CursorShape.UNDERLINE, True): 3,
    (CursorShape.UNDERLINE, False): 4,
    (CursorShape.BAR, True): 5,
    (CursorShape.BAR, False): 6,
}


def color_sgr(color: ColorValue, background: bool = False) -> str:
    """SGR parameters selecting ``color`` as the foreground (or background)."""
    base = 48 if background else 38
    if isinstance(color, AnsiValue):
        return f"{base};5;{color.value}"
    if isinstance(color, Rgb):
        return f"{base};2;{color.r};{color.g};{color.b}"
    code = _FOREGROUND_CODES[color]
    return str(code + 10 if background else code)


def sgr(params: str) -> str:
    return f"{CSI}{params}m"


# ─────────────────────────────────────────────────────────────────────────────
# AnsiBackend
# ─────────────────────────────────────────────────────────────────────────────

class AnsiBackend(Backend):
    """Backend for any terminal that speaks xterm-style escape sequences."""

    def __init__(self, config: RendererConfig | None = None) -> None:
        self._config = config or RendererConfig()
        self._tty: Tty | None = None
        self._stdin_buffer = StdinBuffer()
        self._queue: asyncio.Queue[TerminalEvent | BaseException] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._flush_handle: asyncio.TimerHandle | None = None
        self._input_error: BaseException | None = None
        self._cursor_shape = CursorShape.BLOCK
        self._cursor_blinking = False

    @property
    def tty(self) -> Tty:
        if self._tty is None:
            raise RuntimeError("backend is not bound to a terminal")
        return self._tty

    def bind(self, tty: Tty) -> None:
        tty.enable_raw_mode()
        self._tty = tty
        self._input_error = None
        setup = []
        if self._config.alternate_screen:
            setup.append(ALT_SCREEN_ON)
        setup += [WRAP_OFF, SGR_RESET, CLEAR_SCREEN]
        if self._config.mouse_capture:
            setup.append(MOUSE_ON)
        if self._config.bracketed_paste:
            setup.append(PASTE_ON)
        tty.write("".join(setup))
        self.flush()
        logger.debug("bound ANSI backend to fd %d", tty.fileno())

    # ── general ───────────────────────────────────────────────────────────

    def size(self) -> Vec2:
        try:
            size = self.tty.size()
            return Vec2(size.columns, size.lines)
        except OSError:
            return Vec2(
                int(os.environ.get("COLUMNS", "80")),
                int(os.environ.get("LINES", "24")),
            )

    def set_title(self, title: str) -> None:
        clean = "".join(c for c in title if c.isprintable())
        self.tty.write(f"\x1b]0;{clean}\x07")

    # ── cursor ────────────────────────────────────────────────────────────

    def hide_cursor(self) -> None:
        self.tty.write(CURSOR_HIDE)

    def show_cursor(self) -> None:
        self.tty.write(CURSOR_SHOW)

    def _write_cursor_style(self) -> None:
        code = _CURSOR_SHAPE_CODES[(self._cursor_shape, self._cursor_blinking)]
        self.tty.write(f"{CSI}{code} q")

    def set_cursor_shape(self, shape: CursorShape) -> None:
        self._cursor_shape = shape
        self._write_cursor_style()

    def set_cursor_blinking(self, blinking: bool) -> None:
        self._cursor_blinking = blinking
        self._write_cursor_style()

    def set_cursor_pos(self, pos: Vec2) -> None:
        self.tty.write(f"{CSI}{pos.y + 1};{pos.x + 1}H")

    # ── style ─────────────────────────────────────────────────────────────

    def set_foreground(self, color: ColorValue) -> None:
        self.tty.write(sgr(color_sgr(color)))

    def set_background(self, color: ColorValue) -> None:
        self.tty.write(sgr(color_sgr(color, background=True)))

    def set_intensity(self, intensity: Intensity) -> None:
        self.tty.write(sgr(_INTENSITY_CODES[intensity]))

    def set_italic(self, italic: bool) -> None:
        self.tty.write(sgr("3" if italic else "23"))

    def set_underlined(self, underlined: bool) -> None:
        self.tty.write(sgr("4" if underlined else "24"))

    def set_blinking(self, blinking: bool) -> None:
        self.tty.write(sgr("5" if blinking else "25"))

    def set_crossed_out(self, crossed_out: bool) -> None:
        self.tty.write(sgr("9" if crossed_out else "29"))

    # ── writing ───────────────────────────────────────────────────────────

    def write(self, text: str) -> None:
        self.tty.write(text)

    def flush(self) -> None:
        data = self.tty.flush()
        if data and self._config.write_log:
            try:
                with open(self._config.write_log, "ab") as f:
                    f.write(data)
            except OSError as exc:
                logger.warning("could not append to write log %s: %s", self._config.write_log, exc)

    def reset(self) -> Tty | None:
        tty = self._tty
        if tty is None:
            return None
        self._stop_reading()
        teardown = [SGR_RESET, CURSOR_SHAPE_DEFAULT, CURSOR_SHOW]
        if self._config.bracketed_paste:
            teardown.append(PASTE_OFF)
        if self._config.mouse_capture:
            teardown.append(MOUSE_OFF)
        teardown.append(WRAP_ON)
        if self._config.alternate_screen:
            teardown.append(ALT_SCREEN_OFF)
        tty.write("".join(teardown))
        self.flush()
        tty.restore_mode()
        self._tty = None
        logger.debug("reset ANSI backend")
        return tty

    # ── events ────────────────────────────────────────────────────────────

    def _start_reading(self) -> asyncio.Queue:
        loop = asyncio.get_running_loop()
        if self._queue is not None and self._loop is loop:
            return self._queue
        # a new event loop (e.g. a second asyncio.run) needs fresh registrations
        self._stop_reading()
        self._loop = loop
        self._queue = asyncio.Queue()
        loop.add_reader(self.tty.fileno(), self._on_readable)
        try:
            loop.add_signal_handler(signal.SIGWINCH, self._on_resize)
        except (NotImplementedError, RuntimeError) as exc:
            logger.debug("resize events unavailable: %s", exc)
        return self._queue

    def _stop_reading(self) -> None:
        loop = self._loop
        if loop is None:
            return
        if self._flush_handle is not None:
            self._flush_handle.cancel()
            self._flush_handle = None
        if not loop.is_closed():
            loop.remove_reader(self.tty.fileno())
            try:
                loop.remove_signal_handler(signal.SIGWINCH)
            except (NotImplementedError, RuntimeError):
                pass
        self._loop = None
        self._queue = None
        self._stdin_buffer.clear()

    def _on_readable(self) -> None:
        assert self._queue is not None and self._loop is not None
        try:
            data = self.tty.read()
        except OSError as exc:
            self._fail_input(exc)
            return
        if not data:
            self._fail_input(EOFError("terminal input closed"))
            return

        if self._flush_handle is not None:
            self._flush_handle.cancel()
            self._flush_handle = None
        self._push_sequences(self._stdin_buffer.feed(data))
        if self._stdin_buffer.pending:
            self._flush_handle = self._loop.call_later(
                self._config.input_timeout_ms / 1000.0, self._on_input_timeout
            )

    def _fail_input(self, exc: BaseException) -> None:
        # the reader is gone; every later next_event re-raises exc
        assert self._queue is not None and self._loop is not None
        self._loop.remove_reader(self.tty.fileno())
        self._input_error = exc
        self._queue.put_nowait(exc)

    def _on_input_timeout(self) -> None:
        self._flush_handle = None
        self._push_sequences(self._stdin_buffer.flush())

    def _push_sequences(self, sequences: list[str]) -> None:
        assert self._queue is not None
        for seq in sequences:
            decoded = decode_input(seq)
            if decoded is None:
                logger.debug("dropping unrecognized input %r", seq)
                continue
            self._queue.put_nowait(InputEvent(decoded))

    def _on_resize(self) -> None:
        if self._queue is not None:
            self._queue.put_nowait(ResizeEvent(self.size()))

    async def next_event(self) -> TerminalEvent:
        queue = self._start_reading()
        if self._input_error is not None and queue.empty():
            raise self._input_error
        item = await queue.get()
        if isinstance(item, BaseException):
            raise item
        return item
