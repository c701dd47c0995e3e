"""
Terminal device — the controlling terminal in raw mode.

Opens /dev/tty, falling back to a duplicate of stdout when there is no
controlling terminal. Output is buffered until ``flush()``. All failures
surface as OSError.
"""
from __future__ import annotations

import logging
import os
import sys

logger = logging.getLogger(__name__)


class Tty:
    """An open terminal device."""

    def __init__(self, fd: int) -> None:
        self._fd = fd
        self._pending = bytearray()
        self._saved_mode: list | None = None
        self._closed = False

    @classmethod
    def open(cls) -> Tty:
        try:
            fd = os.open("/dev/tty", os.O_RDWR | os.O_NOCTTY)
            logger.debug("opened /dev/tty as fd %d", fd)
        except OSError as exc:
            logger.debug("no controlling terminal (%s), duplicating stdout", exc)
            fd = os.dup(sys.stdout.fileno())
        return cls(fd)

    def fileno(self) -> int:
        return self._fd

    @property
    def closed(self) -> bool:
        return self._closed

    def isatty(self) -> bool:
        return os.isatty(self._fd)

    def enable_raw_mode(self) -> None:
        """Put the device in raw mode (no echo, no line buffering, no signals)."""
        import termios
        import tty

        try:
            self._saved_mode = termios.tcgetattr(self._fd)
            tty.setraw(self._fd)
        except termios.error as exc:
            raise OSError(*exc.args) from exc

    def restore_mode(self) -> None:
        if self._saved_mode is None:
            return
        import termios

        try:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved_mode)
        except termios.error as exc:
            raise OSError(*exc.args) from exc
        self._saved_mode = None

    def size(self) -> os.terminal_size:
        return os.get_terminal_size(self._fd)

    def write(self, data: str | bytes) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._pending += data

    def flush(self) -> bytes:
        """Write out everything buffered, returning what was written."""
        data = bytes(self._pending)
        self._pending.clear()
        view = memoryview(data)
        while view:
            written = os.write(self._fd, view)
            view = view[written:]
        return data

    def read(self, n: int = 4096) -> bytes:
        return os.read(self._fd, n)

    def close(self) -> None:
        """Restore the saved mode and close the device. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        try:
            self.restore_mode()
        finally:
            os.close(self._fd)
            logger.debug("closed terminal device fd %d", self._fd)
