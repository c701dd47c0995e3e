"""
Input decoding — turns raw terminal input sequences into Input values.

Supports legacy xterm/VT/rxvt sequences, the Kitty keyboard protocol
(CSI-u reports, see https://sw.kovidgoyal.net/kitty/keyboard-protocol/),
xterm modified-key reports and SGR / X10 mouse reports.

API:
- decode_input(data) — decode one complete sequence, or None if unknown
"""
from __future__ import annotations

import re

from .input import (
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
from .vec2 import Vec2

# ─────────────────────────────────────────────────────────────────────────────
# Constants
# ─────────────────────────────────────────────────────────────────────────────

_MOD_SHIFT = 1
_MOD_ALT = 2
_MOD_CTRL = 4
_LOCK_MASK = 64 + 128

_CP_TAB = 9
_CP_ENTER = 13
_CP_ESCAPE = 27
_CP_BACKSPACE = 127
_CP_KP_ENTER = 57414

_LEGACY_SEQS: dict[str, KeyValue] = {
    "\x1b[A": Key.UP, "\x1bOA": Key.UP,
    "\x1b[B": Key.DOWN, "\x1bOB": Key.DOWN,
    "\x1b[C": Key.RIGHT, "\x1bOC": Key.RIGHT,
    "\x1b[D": Key.LEFT, "\x1bOD": Key.LEFT,
    "\x1b[H": Key.HOME, "\x1bOH": Key.HOME, "\x1b[1~": Key.HOME, "\x1b[7~": Key.HOME,
    "\x1b[F": Key.END, "\x1bOF": Key.END, "\x1b[4~": Key.END, "\x1b[8~": Key.END,
    "\x1b[2~": Key.INSERT,
    "\x1b[3~": "\x7f",
    "\x1b[5~": Key.PAGE_UP, "\x1b[[5~": Key.PAGE_UP,
    "\x1b[6~": Key.PAGE_DOWN, "\x1b[[6~": Key.PAGE_DOWN,
    "\x1bOM": "\n",
    "\x1bOP": FunctionKey(1), "\x1b[11~": FunctionKey(1), "\x1b[[A": FunctionKey(1),
    "\x1bOQ": FunctionKey(2), "\x1b[12~": FunctionKey(2), "\x1b[[B": FunctionKey(2),
    "\x1bOR": FunctionKey(3), "\x1b[13~": FunctionKey(3), "\x1b[[C": FunctionKey(3),
    "\x1bOS": FunctionKey(4), "\x1b[14~": FunctionKey(4), "\x1b[[D": FunctionKey(4),
    "\x1b[15~": FunctionKey(5), "\x1b[[E": FunctionKey(5),
    "\x1b[17~": FunctionKey(6),
    "\x1b[18~": FunctionKey(7),
    "\x1b[19~": FunctionKey(8),
    "\x1b[20~": FunctionKey(9),
    "\x1b[21~": FunctionKey(10),
    "\x1b[23~": FunctionKey(11),
    "\x1b[24~": FunctionKey(12),
}

# rxvt reports shifted and ctrl'd navigation keys with their own sequences
_LEGACY_SHIFT_SEQS: dict[str, KeyValue] = {
    "\x1b[a": Key.UP,
    "\x1b[b": Key.DOWN,
    "\x1b[c": Key.RIGHT,
    "\x1b[d": Key.LEFT,
    "\x1b[2$": Key.INSERT,
    "\x1b[3$": "\x7f",
    "\x1b[5$": Key.PAGE_UP,
    "\x1b[6$": Key.PAGE_DOWN,
    "\x1b[7$": Key.HOME,
    "\x1b[8$": Key.END,
    "\x1b[Z": "\t",
}

_LEGACY_CTRL_SEQS: dict[str, KeyValue] = {
    "\x1bOa": Key.UP,
    "\x1bOb": Key.DOWN,
    "\x1bOc": Key.RIGHT,
    "\x1bOd": Key.LEFT,
    "\x1b[2^": Key.INSERT,
    "\x1b[3^": "\x7f",
    "\x1b[5^": Key.PAGE_UP,
    "\x1b[6^": Key.PAGE_DOWN,
    "\x1b[7^": Key.HOME,
    "\x1b[8^": Key.END,
}

_FUNC_NUMBERS: dict[int, KeyValue] = {
    1: Key.HOME, 2: Key.INSERT, 3: "\x7f", 4: Key.END,
    5: Key.PAGE_UP, 6: Key.PAGE_DOWN, 7: Key.HOME, 8: Key.END,
    11: FunctionKey(1), 12: FunctionKey(2), 13: FunctionKey(3), 14: FunctionKey(4),
    15: FunctionKey(5), 17: FunctionKey(6), 18: FunctionKey(7), 19: FunctionKey(8),
    20: FunctionKey(9), 21: FunctionKey(10), 23: FunctionKey(11), 24: FunctionKey(12),
}

_CSI_LETTERS: dict[str, KeyValue] = {
    "A": Key.UP, "B": Key.DOWN, "C": Key.RIGHT, "D": Key.LEFT,
    "H": Key.HOME, "F": Key.END,
    "P": FunctionKey(1), "Q": FunctionKey(2), "R": FunctionKey(3), "S": FunctionKey(4),
}

_CSI_U_RE = re.compile(r"^\x1b\[(\d+)(?::(\d*))?(?::(\d+))?(?:;(\d+))?(?::(\d+))?u$")
_LETTER_MOD_RE = re.compile(r"^\x1b\[1;(\d+)(?::(\d+))?([ABCDHFPQRS])$")
_FUNC_MOD_RE = re.compile(r"^\x1b\[(\d+)(?:;(\d+))?(?::(\d+))?~$")
_MODIFY_OTHER_KEYS_RE = re.compile(r"^\x1b\[27;(\d+);(\d+)~$")
_SGR_MOUSE_RE = re.compile(r"^\x1b\[<(\d+);(\d+);(\d+)([Mm])$")

_RELEASE = 3


def _modifiers(bits: int) -> Modifiers:
    bits &= ~_LOCK_MASK
    return Modifiers(
        shift=bool(bits & _MOD_SHIFT),
        control=bool(bits & _MOD_CTRL),
        alt=bool(bits & _MOD_ALT),
    )


def _with_modifiers(key: KeyValue, mods: Modifiers) -> KeyPress:
    if isinstance(key, str) and key.isascii() and key.isupper():
        return KeyPress(key.lower(), Modifiers(True, mods.control, mods.alt))
    return KeyPress(key, mods)


# ─────────────────────────────────────────────────────────────────────────────
# Codepoint decoding (Kitty / modifyOtherKeys)
# ─────────────────────────────────────────────────────────────────────────────

def _key_for_codepoint(cp: int) -> KeyValue | None:
    if cp == _CP_ESCAPE:
        return Key.ESCAPE
    if cp == _CP_TAB:
        return "\t"
    if cp in (_CP_ENTER, _CP_KP_ENTER):
        return "\n"
    if cp == _CP_BACKSPACE:
        return Key.BACKSPACE
    if 32 <= cp < 0xE000 or 0xF900 <= cp <= 0x10FFFF and not 57344 <= cp <= 63743:
        return chr(cp)
    return None


def _decode_kitty(data: str) -> Input | None:
    m = _CSI_U_RE.match(data)
    if not m:
        return None
    event_type = int(m.group(5)) if m.group(5) else 1
    if event_type == _RELEASE:
        return None
    key = _key_for_codepoint(int(m.group(1)))
    if key is None:
        return None
    mod_val = int(m.group(4)) if m.group(4) else 1
    return _with_modifiers(key, _modifiers(mod_val - 1))


# ─────────────────────────────────────────────────────────────────────────────
# Mouse decoding
# ─────────────────────────────────────────────────────────────────────────────

def _decode_mouse_bits(code: int, x: int, y: int, released: bool) -> Mouse | None:
    mods = Modifiers(
        shift=bool(code & 4),
        alt=bool(code & 8),
        control=bool(code & 16),
    )
    at = Vec2(max(0, x - 1), max(0, y - 1))
    button_bits = code & 3

    if code & 64:
        kind = MouseKind.SCROLL_UP if button_bits == 0 else MouseKind.SCROLL_DOWN
        if button_bits > 1:
            return None
        return Mouse(kind, at, modifiers=mods)
    if released or button_bits == 3:
        return Mouse(MouseKind.RELEASE, at, modifiers=mods)
    if code & 32:
        return Mouse(MouseKind.HOLD, at, modifiers=mods)
    button = (MouseButton.LEFT, MouseButton.MIDDLE, MouseButton.RIGHT)[button_bits]
    return Mouse(MouseKind.PRESS, at, button=button, modifiers=mods)


def _decode_mouse(data: str) -> Mouse | None:
    m = _SGR_MOUSE_RE.match(data)
    if m:
        return _decode_mouse_bits(
            int(m.group(1)), int(m.group(2)), int(m.group(3)), m.group(4) == "m"
        )
    if data.startswith("\x1b[M") and len(data) == 6:
        code, x, y = (ord(ch) - 32 for ch in data[3:])
        return _decode_mouse_bits(code, x, y, False)
    return None


# ─────────────────────────────────────────────────────────────────────────────
# decode_input
# ─────────────────────────────────────────────────────────────────────────────

def decode_input(data: str) -> Input | None:
    """
    Decode one complete input sequence, as split by StdinBuffer.
    Returns None for unknown sequences and key-release reports.
    """
    if not data:
        return None

    if data.startswith("\x1b["):
        mouse = _decode_mouse(data)
        if mouse is not None:
            return mouse

        kitty = _decode_kitty(data)
        if kitty is not None or _CSI_U_RE.match(data):
            return kitty

        m = _LETTER_MOD_RE.match(data)
        if m:
            if m.group(2) and int(m.group(2)) == _RELEASE:
                return None
            return KeyPress(_CSI_LETTERS[m.group(3)], _modifiers(int(m.group(1)) - 1))

        m = _MODIFY_OTHER_KEYS_RE.match(data)
        if m:
            key = _key_for_codepoint(int(m.group(2)))
            if key is None:
                return None
            return _with_modifiers(key, _modifiers(int(m.group(1)) - 1))

        m = _FUNC_MOD_RE.match(data)
        if m and m.group(2):
            if m.group(3) and int(m.group(3)) == _RELEASE:
                return None
            func = _FUNC_NUMBERS.get(int(m.group(1)))
            if func is None:
                return None
            return KeyPress(func, _modifiers(int(m.group(2)) - 1))

    key = _LEGACY_SEQS.get(data)
    if key is not None:
        return KeyPress(key)
    key = _LEGACY_SHIFT_SEQS.get(data)
    if key is not None:
        return KeyPress(key, Modifiers(shift=True))
    key = _LEGACY_CTRL_SEQS.get(data)
    if key is not None:
        return KeyPress(key, Modifiers(control=True))

    if data == "\x1b":
        return KeyPress(Key.ESCAPE)

    # ESC-prefixed single keys are alt + key
    if len(data) == 2 and data[0] == "\x1b":
        inner = decode_input(data[1])
        if isinstance(inner, KeyPress):
            mods = inner.modifiers
            return KeyPress(inner.key, Modifiers(mods.shift, mods.control, True))
        return None

    if len(data) != 1:
        return None

    code = ord(data)
    if data in ("\r", "\n"):
        return KeyPress("\n")
    if data == "\t":
        return KeyPress("\t")
    if data in ("\x7f", "\x08"):
        return KeyPress(Key.BACKSPACE)
    if code == 0:
        return KeyPress(" ", Modifiers(control=True))
    if 1 <= code <= 26:
        return KeyPress(chr(code + 96), Modifiers(control=True))
    if code < 32:
        return None
    return KeyPress.from_char(data)
