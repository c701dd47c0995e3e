"""
Renderer — draws elements to a backend and waits for their events.

Each ``draw()`` renders the element into the next-frame buffer, diffs it
against the buffer currently on screen, flushes, swaps the two and then
waits for input. It returns as soon as the element emits events; resizes
redraw the frame and keep waiting.

For real terminals only one renderer may exist at a time (see
TerminalToken). While it lives, stdout and stderr are captured and replayed
on cleanup.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable

from .backends.base import Backend
from .buffer import Buffer
from .capture import StdioCapture
from .config import RendererConfig
from .device import Tty
from .diff import DiffState, diff
from .element import Element
from .errors import RendererClosedError
from .events import Events, InputEvent, ResizeEvent
from .input import Mouse
from .style import Color, Intensity
from .token import TerminalToken
from .vec2 import Vec2

logger = logging.getLogger(__name__)


class Renderer:
    """
    Owns a backend and the two frame buffers diffed against each other.

    Use as a context manager, or call ``cleanup()`` when done:

        with Renderer(AnsiBackend()) as renderer:
            events = await renderer.draw(element)
    """

    def __init__(
        self,
        backend: Backend,
        token: TerminalToken | None = None,
        config: RendererConfig | None = None,
    ) -> None:
        self._backend = backend
        self._config = config if config is not None else RendererConfig.from_env()
        self._token: TerminalToken | None = None
        self._tty: Tty | None = None
        self._capture: StdioCapture | None = None
        self._captured_taken = False
        self._bound = False
        self._closed = False

        try:
            if not backend.is_dummy():
                self._acquire_terminal(token)

            backend.hide_cursor()
            backend.set_cursor_pos(Vec2(0, 0))
            backend.set_foreground(Color.DEFAULT)
            backend.set_background(Color.DEFAULT)
            backend.set_intensity(Intensity.NORMAL)
            backend.set_italic(False)
            backend.set_underlined(False)
            backend.set_blinking(False)
            backend.set_crossed_out(False)

            size = backend.size()
        except Exception:
            self._closed = True
            self._teardown(raise_errors=False)
            raise

        self._current = Buffer(size)
        self._next = Buffer(size)
        self._state = DiffState()
        logger.debug("renderer started at %dx%d", size.x, size.y)

    def _acquire_terminal(self, token: TerminalToken | None) -> None:
        if token is None:
            token = TerminalToken.acquire()
        token.consume()
        self._token = token

        self._tty = Tty.open()
        if self._config.capture_stdio:
            capture = StdioCapture()
            capture.start()
            self._capture = capture

        self._backend.bind(self._tty)
        self._bound = True

    # ── accessors ─────────────────────────────────────────────────────────

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def size(self) -> Vec2:
        return self._current.size()

    @property
    def closed(self) -> bool:
        return self._closed

    def take_captured(self) -> StdioCapture | None:
        """
        Take ownership of captured stdout/stderr. It is no longer replayed on
        cleanup; read it with ``getvalue()`` once the renderer is cleaned up.
        Returns None for dummy backends or if already taken.
        """
        if self._capture is None or self._captured_taken:
            return None
        self._captured_taken = True
        return self._capture

    # ── drawing ───────────────────────────────────────────────────────────

    async def draw(self, element: Element) -> list[Any]:
        """
        Draw ``element`` and wait until handling input makes it emit at least
        one event, returning them all.

        Cancelling the returned coroutine just stops waiting for input; the
        screen stays as last drawn.
        """
        if self._closed:
            raise RendererClosedError("draw() called after cleanup()")

        while True:
            self._render(element)

            while True:
                event = await self._backend.next_event()
                if isinstance(event, InputEvent):
                    emitted = self._handle_input(element, event)
                    if emitted:
                        return emitted
                elif isinstance(event, ResizeEvent):
                    if event.size != self._current.size():
                        self._resize(event.size)
                        break

    def _render(self, element: Element) -> None:
        try:
            element.draw(self._next)
            calls = diff(self._current, self._next, self._backend, self._state)
            self._backend.flush()
        except Exception:
            logger.exception("rendering a frame failed")
            # start the next frame from what is actually on screen
            self._next.clear()
            raise
        logger.debug("frame rendered with %d backend calls", calls)

        self._current.clear()
        self._current, self._next = self._next, self._current

    def _handle_input(self, element: Element, event: InputEvent) -> list[Any]:
        input = event.input
        if isinstance(input, Mouse):
            input = replace(input, size=self._current.size())
        events: Events[Any] = Events()
        element.handle(input, events)
        return events.drain()

    def _resize(self, size: Vec2) -> None:
        anchor = self._state.cursor_pos.y
        logger.debug("resizing %s -> %s around row %d", self._current.size(), size, anchor)
        for buffer in (self._current, self._next):
            buffer.grid.resize_width(size.x)
            buffer.grid.resize_height_with_anchor(size.y, anchor)

        pos = self._state.cursor_pos
        self._state.cursor_pos = Vec2(
            min(pos.x, max(0, size.x - 1)),
            min(pos.y, max(0, size.y - 1)),
        )

    # ── cleanup ───────────────────────────────────────────────────────────

    def cleanup(self) -> None:
        """
        Restore the terminal: reset the backend, close the device, replay
        captured output and release the terminal token. Calling it again
        does nothing. The first failure is raised once every step has run.
        """
        if self._closed:
            return
        self._closed = True
        self._teardown(raise_errors=True)

    def _teardown(self, raise_errors: bool) -> None:
        steps: list[tuple[str, Callable[[], None]]] = [
            ("reset backend", self._reset_backend),
            ("close terminal device", self._close_tty),
            ("stop capture", self._stop_capture),
            ("release token", self._release_token),
        ]
        first_error: Exception | None = None
        for name, step in steps:
            try:
                step()
            except Exception as exc:
                logger.warning("cleanup step %r failed: %s", name, exc, exc_info=True)
                if first_error is None:
                    first_error = exc
        if first_error is not None and raise_errors:
            raise first_error

    def _reset_backend(self) -> None:
        if self._backend.is_dummy():
            self._backend.reset()
        elif self._bound:
            self._bound = False
            self._backend.reset()

    def _close_tty(self) -> None:
        tty, self._tty = self._tty, None
        if tty is not None:
            tty.close()

    def _stop_capture(self) -> None:
        capture = self._capture
        if capture is None or not capture.active:
            return
        capture.stop()
        if not self._captured_taken:
            capture.replay()

    def _release_token(self) -> None:
        token, self._token = self._token, None
        if token is not None:
            token.release()

    def __enter__(self) -> Renderer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cleanup()

    def __del__(self) -> None:
        if getattr(self, "_closed", True):
            return
        self._closed = True
        self._teardown(raise_errors=False)
