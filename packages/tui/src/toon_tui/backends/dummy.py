"""
Dummy backend for tests.

Displays nothing. Every call is recorded in ``operations`` and applied to
``buffer``, a model of what a real terminal would now show.
"""
from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable

from ..buffer import Buffer
from ..cursor import Cursor, CursorShape
from ..events import ResizeEvent, TerminalEvent
from ..style import DEFAULT_STYLE, ColorValue, Intensity, Style
from ..utils import str_width
from ..vec2 import Vec2
from .base import Backend


class OpKind(Enum):
    SET_TITLE = "set_title"
    HIDE_CURSOR = "hide_cursor"
    SHOW_CURSOR = "show_cursor"
    SET_CURSOR_SHAPE = "set_cursor_shape"
    SET_CURSOR_BLINKING = "set_cursor_blinking"
    SET_CURSOR_POS = "set_cursor_pos"
    SET_FOREGROUND = "set_foreground"
    SET_BACKGROUND = "set_background"
    SET_INTENSITY = "set_intensity"
    SET_ITALIC = "set_italic"
    SET_UNDERLINED = "set_underlined"
    SET_BLINKING = "set_blinking"
    SET_CROSSED_OUT = "set_crossed_out"
    WRITE = "write"
    FLUSH = "flush"


@dataclass(frozen=True)
class Operation:
    """One recorded backend call; ``value`` is its argument, if any."""

    kind: OpKind
    value: Any = None


class Dummy(Backend):
    """
    A backend that records operations and keeps a screen model.

    ``cursor_pos`` is tracked even while the cursor is hidden; it is where
    writes land. Queued ``events`` are handed out oldest first; with none
    queued, ``next_event`` waits until ``push_event`` supplies one.
    """

    def __init__(self, size: Vec2, events: Iterable[TerminalEvent] = ()) -> None:
        self.operations: list[Operation] = []
        self.events: deque[TerminalEvent] = deque(events)
        self.title = ""
        self.buffer = Buffer(size)
        self.cursor_pos = Vec2(0, 0)
        self.style: Style = DEFAULT_STYLE
        self.was_reset = False
        self._waiter: asyncio.Future[None] | None = None

    @classmethod
    def is_dummy(cls) -> bool:
        return True

    def _record(self, kind: OpKind, value: Any = None) -> None:
        self.operations.append(Operation(kind, value))

    def take_operations(self) -> list[Operation]:
        """Return the operations recorded so far and start a fresh record."""
        ops, self.operations = self.operations, []
        return ops

    # ── general ───────────────────────────────────────────────────────────

    def size(self) -> Vec2:
        return self.buffer.grid.size()

    def set_title(self, title: str) -> None:
        self._record(OpKind.SET_TITLE, title)
        self.title = title
        self.buffer.title = title

    # ── cursor ────────────────────────────────────────────────────────────

    def hide_cursor(self) -> None:
        self._record(OpKind.HIDE_CURSOR)
        self.buffer.cursor = None

    def show_cursor(self) -> None:
        self._record(OpKind.SHOW_CURSOR)
        self.buffer.cursor = Cursor(CursorShape.BLOCK, False, self.cursor_pos)

    def set_cursor_shape(self, shape: CursorShape) -> None:
        self._record(OpKind.SET_CURSOR_SHAPE, shape)
        if self.buffer.cursor is not None:
            self.buffer.cursor = replace(self.buffer.cursor, shape=shape)

    def set_cursor_blinking(self, blinking: bool) -> None:
        self._record(OpKind.SET_CURSOR_BLINKING, blinking)
        if self.buffer.cursor is not None:
            self.buffer.cursor = replace(self.buffer.cursor, blinking=blinking)

    def set_cursor_pos(self, pos: Vec2) -> None:
        self._record(OpKind.SET_CURSOR_POS, pos)
        self._move_to(pos)

    def _move_to(self, pos: Vec2) -> None:
        self.cursor_pos = pos
        if self.buffer.cursor is not None:
            self.buffer.cursor = replace(self.buffer.cursor, pos=pos)

    # ── style ─────────────────────────────────────────────────────────────

    def set_foreground(self, color: ColorValue) -> None:
        self._record(OpKind.SET_FOREGROUND, color)
        self.style = replace(self.style, foreground=color)

    def set_background(self, color: ColorValue) -> None:
        self._record(OpKind.SET_BACKGROUND, color)
        self.style = replace(self.style, background=color)

    def set_intensity(self, intensity: Intensity) -> None:
        self._record(OpKind.SET_INTENSITY, intensity)
        self.style = replace(self.style, attributes=replace(self.style.attributes, intensity=intensity))

    def set_italic(self, italic: bool) -> None:
        self._record(OpKind.SET_ITALIC, italic)
        self.style = replace(self.style, attributes=replace(self.style.attributes, italic=italic))

    def set_underlined(self, underlined: bool) -> None:
        self._record(OpKind.SET_UNDERLINED, underlined)
        self.style = replace(self.style, attributes=replace(self.style.attributes, underlined=underlined))

    def set_blinking(self, blinking: bool) -> None:
        self._record(OpKind.SET_BLINKING, blinking)
        self.style = replace(self.style, attributes=replace(self.style.attributes, blinking=blinking))

    def set_crossed_out(self, crossed_out: bool) -> None:
        self._record(OpKind.SET_CROSSED_OUT, crossed_out)
        self.style = replace(self.style, attributes=replace(self.style.attributes, crossed_out=crossed_out))

    # ── writing ───────────────────────────────────────────────────────────

    def write(self, text: str) -> None:
        self._record(OpKind.WRITE, text)
        self.buffer.write(self.cursor_pos, text, self.style)
        last_column = max(0, self.buffer.grid.width - 1)
        x = min(self.cursor_pos.x + str_width(text), last_column)
        self._move_to(Vec2(x, self.cursor_pos.y))

    def flush(self) -> None:
        self._record(OpKind.FLUSH)

    def reset(self) -> None:
        self.was_reset = True

    # ── events ────────────────────────────────────────────────────────────

    def push_event(self, event: TerminalEvent) -> None:
        """Queue an event, waking a pending ``next_event``."""
        self.events.append(event)
        if self._waiter is not None and not self._waiter.done():
            self._waiter.set_result(None)

    async def next_event(self) -> TerminalEvent:
        while not self.events:
            self._waiter = asyncio.get_running_loop().create_future()
            try:
                await self._waiter
            finally:
                self._waiter = None

        event = self.events.popleft()
        if isinstance(event, ResizeEvent):
            self.buffer.grid.resize_width(event.size.x)
            self.buffer.grid.resize_height_with_anchor(event.size.y, self.cursor_pos.y)
            # terminals keep the cursor on screen
            self._move_to(Vec2(
                min(self.cursor_pos.x, max(0, event.size.x - 1)),
                min(self.cursor_pos.y, max(0, event.size.y - 1)),
            ))
        return event
