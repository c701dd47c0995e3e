"""
StdinBuffer — splits raw terminal input into complete sequences.

Handles escape sequences split across reads, bracketed paste and UTF-8
characters split across reads. The buffer holds no timer of its own: when
``feed`` leaves an incomplete escape sequence pending, the owner schedules
``flush`` after its input timeout.
"""
from __future__ import annotations

import codecs
import re

ESC = "\x1b"
BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"

_SGR_MOUSE_PAYLOAD_RE = re.compile(r"^<\d+;\d+;\d+[Mm]$")

_COMPLETE = "complete"
_INCOMPLETE = "incomplete"
_NOT_ESCAPE = "not-escape"


# ─────────────────────────────────────────────────────────────────────────────
# Sequence completeness detection
# ─────────────────────────────────────────────────────────────────────────────

def _csi_status(data: str) -> str:
    if len(data) < 3:
        return _INCOMPLETE
    payload = data[2:]
    if not 0x40 <= ord(payload[-1]) <= 0x7E:
        return _INCOMPLETE
    if payload.startswith("<"):
        # SGR mouse: the final byte is only M or m after three numbers
        return _COMPLETE if _SGR_MOUSE_PAYLOAD_RE.match(payload) else _INCOMPLETE
    # "\x1b[[A" style linux console function keys
    if payload == "[":
        return _INCOMPLETE
    return _COMPLETE


def sequence_status(data: str) -> str:
    """Returns 'complete', 'incomplete', or 'not-escape'."""
    if not data.startswith(ESC):
        return _NOT_ESCAPE
    if len(data) == 1:
        return _INCOMPLETE
    introducer = data[1]

    if introducer == "[":
        if data.startswith(ESC + "[M"):
            return _COMPLETE if len(data) >= 6 else _INCOMPLETE
        return _csi_status(data)
    if introducer == "]":
        if data.endswith(ESC + "\\") or data.endswith("\x07"):
            return _COMPLETE
        return _INCOMPLETE
    if introducer in ("P", "_"):
        return _COMPLETE if data.endswith(ESC + "\\") else _INCOMPLETE
    if introducer == "O":
        return _COMPLETE if len(data) >= 3 else _INCOMPLETE
    return _COMPLETE


def split_sequences(buffer: str) -> tuple[list[str], str]:
    """
    Split ``buffer`` into complete sequences and single characters.
    Returns (sequences, remainder) where remainder is an incomplete escape
    sequence at the end of the buffer.
    """
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        if buffer[pos] != ESC:
            sequences.append(buffer[pos])
            pos += 1
            continue

        end = pos + 1
        while True:
            if end > len(buffer):
                return sequences, buffer[pos:]
            candidate = buffer[pos:end]
            if sequence_status(candidate) == _INCOMPLETE:
                # ESC inside a CSI starts a new sequence; OSC/DCS end with ESC \
                if (
                    end - 1 > pos + 1
                    and buffer[end - 1] == ESC
                    and buffer[pos + 1] == "["
                ):
                    sequences.append(buffer[pos:end - 1])
                    pos = end - 1
                    break
                end += 1
                continue
            sequences.append(candidate)
            pos = end
            break

    return sequences, ""


# ─────────────────────────────────────────────────────────────────────────────
# StdinBuffer
# ─────────────────────────────────────────────────────────────────────────────

class StdinBuffer:
    """
    Accumulates terminal input and hands back complete sequences.

    Pasted text (between bracketed paste markers) is returned as its
    individual characters so that it decodes into ordinary key presses.
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._paste_mode = False
        self._paste_buffer = ""
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def pending(self) -> bool:
        """Whether an incomplete escape sequence is waiting for more input."""
        return bool(self._buffer)

    def feed(self, data: str | bytes) -> list[str]:
        """Feed a chunk of input, returning every sequence it completed."""
        if isinstance(data, bytes):
            data = self._decoder.decode(data)
        if not data:
            return []

        out: list[str] = []
        self._buffer += data

        while True:
            if self._paste_mode:
                self._paste_buffer += self._buffer
                self._buffer = ""
                end = self._paste_buffer.find(BRACKETED_PASTE_END)
                if end == -1:
                    return out
                out.extend(self._paste_buffer[:end])
                self._buffer = self._paste_buffer[end + len(BRACKETED_PASTE_END):]
                self._paste_mode = False
                self._paste_buffer = ""
                continue

            start = self._buffer.find(BRACKETED_PASTE_START)
            if start == -1:
                break
            seqs, _ = split_sequences(self._buffer[:start])
            out.extend(seqs)
            self._buffer = self._buffer[start + len(BRACKETED_PASTE_START):]
            self._paste_mode = True

        seqs, self._buffer = split_sequences(self._buffer)
        out.extend(seqs)
        return out

    def flush(self) -> list[str]:
        """
        Give up waiting on a pending escape sequence. A lone ESC comes back as
        the Escape key; anything longer comes back as one unrecognized sequence.
        """
        if not self._buffer:
            return []
        seqs = [self._buffer]
        self._buffer = ""
        return seqs

    def clear(self) -> None:
        self._buffer = ""
        self._paste_mode = False
        self._paste_buffer = ""
        self._decoder.reset()
