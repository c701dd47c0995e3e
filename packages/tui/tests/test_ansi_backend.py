"""Tests for toon_tui.backends.ansi — escape sequences out, decoded events in"""
import asyncio
import os
import socket

import pytest

from toon_tui.backends.ansi import AnsiBackend, color_sgr
from toon_tui.config import RendererConfig
from toon_tui.cursor import CursorShape
from toon_tui.device import Tty
from toon_tui.events import InputEvent
from toon_tui.input import Key, KeyPress, Modifiers
from toon_tui.style import AnsiValue, Color, Intensity, Rgb
from toon_tui.vec2 import Vec2


class SocketTty(Tty):
    """A Tty over one end of a socket pair; the test holds the other end."""

    def __init__(self, fd: int) -> None:
        super().__init__(fd)
        self.raw = False

    def enable_raw_mode(self) -> None:
        self.raw = True

    def restore_mode(self) -> None:
        self.raw = False

    def size(self) -> os.terminal_size:
        return os.terminal_size((20, 5))


class PipeTty(SocketTty):
    """Reads from a pipe; output is discarded."""

    def flush(self) -> bytes:
        data = bytes(self._pending)
        self._pending.clear()
        return data


@pytest.fixture
def terminal():
    ours, theirs = socket.socketpair()
    tty = SocketTty(ours.fileno())
    theirs.setblocking(False)
    yield tty, theirs
    ours.close()
    theirs.close()


def bound(tty: Tty, **options) -> AnsiBackend:
    backend = AnsiBackend(RendererConfig(**options))
    backend.bind(tty)
    return backend


def received(sock: socket.socket) -> bytes:
    try:
        return sock.recv(65536)
    except BlockingIOError:
        return b""


class TestColorSgr:
    def test_named_colors(self):
        assert color_sgr(Color.DARK_RED) == "31"
        assert color_sgr(Color.RED) == "91"
        assert color_sgr(Color.DEFAULT) == "39"
        assert color_sgr(Color.DEFAULT, background=True) == "49"
        assert color_sgr(Color.WHITE, background=True) == "107"

    def test_palette_and_rgb(self):
        assert color_sgr(AnsiValue(200)) == "38;5;200"
        assert color_sgr(Rgb(1, 2, 3), background=True) == "48;2;1;2;3"


class TestOutput:
    def test_bind_sets_up_terminal(self, terminal):
        tty, sock = terminal
        bound(tty)
        out = received(sock)
        assert tty.raw
        assert out.startswith(b"\x1b[?1049h")
        assert b"\x1b[?1006h" in out
        assert b"\x1b[?2004h" in out

    def test_options_disable_setup_steps(self, terminal):
        tty, sock = terminal
        bound(tty, alternate_screen=False, mouse_capture=False, bracketed_paste=False)
        out = received(sock)
        assert b"\x1b[?1049h" not in out
        assert b"\x1b[?1000h" not in out
        assert b"\x1b[?2004h" not in out

    def test_nothing_sent_before_flush(self, terminal):
        tty, sock = terminal
        backend = bound(tty)
        received(sock)
        backend.set_cursor_pos(Vec2(2, 1))
        backend.write("hi")
        assert received(sock) == b""
        backend.flush()
        assert received(sock) == b"\x1b[2;3Hhi"

    def test_style_sequences(self, terminal):
        tty, sock = terminal
        backend = bound(tty)
        received(sock)
        backend.set_foreground(Color.GREEN)
        backend.set_background(Rgb(10, 20, 30))
        backend.set_intensity(Intensity.BOLD)
        backend.set_intensity(Intensity.NORMAL)
        backend.set_italic(True)
        backend.set_underlined(False)
        backend.set_blinking(True)
        backend.set_crossed_out(False)
        backend.flush()
        assert received(sock) == (
            b"\x1b[92m\x1b[48;2;10;20;30m\x1b[22;1m\x1b[22m"
            b"\x1b[3m\x1b[24m\x1b[5m\x1b[29m"
        )

    def test_cursor_sequences(self, terminal):
        tty, sock = terminal
        backend = bound(tty)
        received(sock)
        backend.show_cursor()
        backend.set_cursor_shape(CursorShape.BAR)
        backend.set_cursor_blinking(True)
        backend.hide_cursor()
        backend.flush()
        assert received(sock) == b"\x1b[?25h\x1b[6 q\x1b[5 q\x1b[?25l"

    def test_title_drops_control_characters(self, terminal):
        tty, sock = terminal
        backend = bound(tty)
        received(sock)
        backend.set_title("a\x07b\x1bc")
        backend.flush()
        assert received(sock) == b"\x1b]0;abc\x07"

    def test_size_from_device(self, terminal):
        tty, _ = terminal
        assert bound(tty).size() == Vec2(20, 5)

    def test_write_log(self, terminal, tmp_path):
        tty, _ = terminal
        log = tmp_path / "out.log"
        backend = bound(tty, write_log=str(log))
        backend.write("logged")
        backend.flush()
        assert log.read_bytes().endswith(b"logged")

    def test_reset_restores_terminal(self, terminal):
        tty, sock = terminal
        backend = bound(tty)
        received(sock)
        assert backend.reset() is tty
        out = received(sock)
        assert out.endswith(b"\x1b[?7h\x1b[?1049l")
        assert b"\x1b[?2004l" in out
        assert not tty.raw
        assert backend.reset() is None

    def test_unbound_backend_refuses_output(self):
        with pytest.raises(RuntimeError):
            AnsiBackend().write("x")


class TestInput:
    @pytest.mark.asyncio
    async def test_keys_decoded(self, terminal):
        tty, sock = terminal
        backend = bound(tty)
        sock.send(b"a\x1b[1;5C")
        assert await asyncio.wait_for(backend.next_event(), 1) == InputEvent(KeyPress("a"))
        assert await asyncio.wait_for(backend.next_event(), 1) == InputEvent(
            KeyPress(Key.RIGHT, Modifiers(control=True))
        )
        backend.reset()

    @pytest.mark.asyncio
    async def test_lone_escape_after_timeout(self, terminal):
        tty, sock = terminal
        backend = bound(tty, input_timeout_ms=5)
        sock.send(b"\x1b")
        assert await asyncio.wait_for(backend.next_event(), 1) == InputEvent(KeyPress(Key.ESCAPE))
        backend.reset()

    @pytest.mark.asyncio
    async def test_unrecognized_input_skipped(self, terminal):
        tty, sock = terminal
        backend = bound(tty)
        sock.send(b"\x1c\x1b[99~z")
        assert await asyncio.wait_for(backend.next_event(), 1) == InputEvent(KeyPress("z"))
        backend.reset()

    @pytest.mark.asyncio
    async def test_closed_input_raises(self, terminal):
        tty, sock = terminal
        backend = bound(tty)
        sock.shutdown(socket.SHUT_WR)
        with pytest.raises(EOFError):
            await asyncio.wait_for(backend.next_event(), 1)
        backend.reset()

    @pytest.mark.asyncio
    async def test_closed_input_keeps_raising(self):
        read_fd, write_fd = os.pipe()
        os.close(write_fd)
        backend = bound(PipeTty(read_fd))
        try:
            with pytest.raises(EOFError):
                await asyncio.wait_for(backend.next_event(), 1)
            with pytest.raises(EOFError):
                await asyncio.wait_for(backend.next_event(), 1)
        finally:
            backend.reset()
            os.close(read_fd)


@pytest.mark.tty
class TestRealTerminal:
    def test_device_is_a_terminal(self):
        tty = Tty.open()
        try:
            assert tty.isatty()
            size = tty.size()
            assert size.columns > 0 and size.lines > 0
        finally:
            tty.close()
        assert tty.closed

    def test_raw_mode_round_trip(self):
        tty = Tty.open()
        try:
            tty.enable_raw_mode()
            tty.restore_mode()
        finally:
            tty.close()
