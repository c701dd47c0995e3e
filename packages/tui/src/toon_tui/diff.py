"""
Frame diffing — turns the change between two buffers into backend calls.

The tracked cursor position and style register live in a DiffState owned by
the renderer and carried across frames; a setter is only called when its
value differs from what the backend was last told.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from .backends.base import Backend
from .buffer import Buffer, CharCell
from .style import DEFAULT_STYLE, Attributes, Color, Style
from .vec2 import Vec2

logger = logging.getLogger(__name__)


@dataclass
class DiffState:
    """What the backend is known to be set to: cursor position and style."""

    cursor_pos: Vec2 = Vec2(0, 0)
    style: Style = DEFAULT_STYLE


# Attribute setters in the order they are issued
_ATTRIBUTE_SETTERS = (
    ("intensity", "set_intensity"),
    ("italic", "set_italic"),
    ("underlined", "set_underlined"),
    ("blinking", "set_blinking"),
    ("crossed_out", "set_crossed_out"),
)


def _apply_style(backend: Backend, state: DiffState, style: Style) -> int:
    calls = 0
    if state.style.foreground != style.foreground:
        backend.set_foreground(style.foreground)
        state.style = replace(state.style, foreground=style.foreground)
        calls += 1
    if state.style.background != style.background:
        backend.set_background(style.background)
        state.style = replace(state.style, background=style.background)
        calls += 1
    for name, setter in _ATTRIBUTE_SETTERS:
        value = getattr(style.attributes, name)
        if getattr(state.style.attributes, name) != value:
            getattr(backend, setter)(value)
            attributes: Attributes = replace(state.style.attributes, **{name: value})
            state.style = replace(state.style, attributes=attributes)
            calls += 1
    return calls


def diff(previous: Buffer, current: Buffer, backend: Backend, state: DiffState) -> int:
    """
    Issue the backend calls that turn a screen showing ``previous`` into one
    showing ``current``, returning how many calls were made.

    Any backend error aborts the diff and propagates unchanged; ``state``
    reflects every call that succeeded before it.
    """
    if previous.size() != current.size():
        raise ValueError(f"cannot diff buffers of size {previous.size()} and {current.size()}")

    calls = 0
    last_column = max(0, current.grid.width - 1)

    if previous.title != current.title:
        backend.set_title(current.title)
        calls += 1

    for y, (old_line, new_line) in enumerate(zip(previous.grid.lines, current.grid.lines)):
        for x, (old_cell, new_cell) in enumerate(zip(old_line.cells, new_line.cells)):
            if new_cell == old_cell or not isinstance(new_cell, CharCell):
                continue

            calls += _apply_style(backend, state, new_cell.style)

            pos = Vec2(x, y)
            if state.cursor_pos != pos:
                backend.set_cursor_pos(pos)
                state.cursor_pos = pos
                calls += 1

            backend.write(new_cell.contents)
            calls += 1
            state.cursor_pos = Vec2(min(x + (2 if new_cell.double else 1), last_column), y)

    # Some terminals fill space exposed by a resize with the current background.
    backend.set_background(Color.DEFAULT)
    state.style = replace(state.style, background=Color.DEFAULT)
    calls += 1

    old_cursor, new_cursor = previous.cursor, current.cursor
    if new_cursor is not None:
        if old_cursor is None:
            backend.show_cursor()
            calls += 1
        if old_cursor is None or old_cursor.shape != new_cursor.shape:
            backend.set_cursor_shape(new_cursor.shape)
            calls += 1
        if old_cursor is None or old_cursor.blinking != new_cursor.blinking:
            backend.set_cursor_blinking(new_cursor.blinking)
            calls += 1
        if state.cursor_pos != new_cursor.pos:
            backend.set_cursor_pos(new_cursor.pos)
            state.cursor_pos = new_cursor.pos
            calls += 1
    elif old_cursor is not None:
        backend.hide_cursor()
        calls += 1

    logger.debug("diff issued %d backend calls", calls)
    return calls
