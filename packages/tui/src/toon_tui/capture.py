"""
Standard output capture.

While a renderer owns the terminal, anything the process writes to file
descriptors 1 and 2 would corrupt the screen. StdioCapture points both at a
pipe and collects what arrives until ``stop()`` restores them.
"""
from __future__ import annotations

import logging
import os
import sys
import threading

logger = logging.getLogger(__name__)

_CAPTURED_FDS = (1, 2)


class StdioCapture:
    def __init__(self) -> None:
        self._saved: dict[int, int] = {}
        self._chunks: list[bytes] = []
        self._read_fd: int | None = None
        self._thread: threading.Thread | None = None

    @property
    def active(self) -> bool:
        return bool(self._saved)

    def start(self) -> None:
        if self.active:
            return
        _flush_python_streams()
        read_fd, write_fd = os.pipe()
        try:
            for fd in _CAPTURED_FDS:
                self._saved[fd] = os.dup(fd)
                os.dup2(write_fd, fd)
        except OSError:
            self._restore()
            os.close(read_fd)
            raise
        finally:
            os.close(write_fd)

        self._read_fd = read_fd
        self._thread = threading.Thread(target=self._read_loop, args=(read_fd,), daemon=True)
        self._thread.start()
        logger.debug("capturing stdout and stderr")

    def _read_loop(self, fd: int) -> None:
        while True:
            try:
                data = os.read(fd, 65536)
            except OSError:
                break
            if not data:
                break
            self._chunks.append(data)

    def _restore(self) -> None:
        for fd, saved in self._saved.items():
            os.dup2(saved, fd)
            os.close(saved)
        self._saved.clear()

    def stop(self) -> None:
        """Restore stdout and stderr and wait for the pipe to drain."""
        if not self.active:
            return
        _flush_python_streams()
        self._restore()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        if self._read_fd is not None:
            os.close(self._read_fd)
            self._read_fd = None
        logger.debug("stopped capturing, %d bytes collected", sum(map(len, self._chunks)))

    def getvalue(self) -> bytes:
        return b"".join(self._chunks)

    def replay(self, fd: int = 1) -> None:
        """Write everything collected to ``fd``."""
        view = memoryview(self.getvalue())
        while view:
            written = os.write(fd, view)
            view = view[written:]


def _flush_python_streams() -> None:
    for stream in (sys.stdout, sys.stderr):
        if stream is not None:
            try:
                stream.flush()
            except (OSError, ValueError):
                pass
