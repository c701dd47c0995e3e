"""
Terminal width utilities.

Provides:
- char_width(): column width class of a single codepoint (None, 0, 1 or 2)
- str_width(): total column width of a string of printable codepoints
- is_printable(): whether a codepoint may be written into a cell at all
"""
from __future__ import annotations

from functools import lru_cache

from wcwidth import wcwidth

# Largest length/height a Line or Grid may have (16-bit unsigned range)
MAX_DIMENSION = 0xFFFF


@lru_cache(maxsize=4096)
def char_width(c: str) -> int | None:
    """
    Return how many terminal columns ``c`` occupies.

    None for control characters (including NUL), which must never be written;
    0 for combining and other zero-width marks; otherwise 1 or 2.
    """
    if len(c) != 1:
        raise ValueError(f"expected a single codepoint, got {c!r}")
    if c == "\0":
        return None
    w = wcwidth(c)
    if w < 0:
        return None
    return min(w, 2)


def is_printable(c: str) -> bool:
    return char_width(c) is not None


def str_width(s: str) -> int:
    """Column width of ``s``; control characters count as zero."""
    total = 0
    for c in s:
        w = char_width(c)
        if w:
            total += w
    return total


def check_dimension(value: int, what: str) -> int:
    if not 0 <= value <= MAX_DIMENSION:
        raise ValueError(f"{what} must be in 0..{MAX_DIMENSION}, got {value}")
    return value
