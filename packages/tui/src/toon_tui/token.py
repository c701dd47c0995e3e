"""
Terminal exclusivity.

Only one renderer at a time may own the real terminal. A TerminalToken is
that capability: at most one is outstanding per process, and it can be
handed to exactly one renderer, which releases it on cleanup.
"""
from __future__ import annotations

import threading

from .errors import TerminalInUseError, TokenConsumedError

_lock = threading.Lock()
_outstanding = False
_KEY = object()


class TerminalToken:
    def __init__(self, key: object) -> None:
        if key is not _KEY:
            raise TypeError("use TerminalToken.acquire()")
        self._consumed = False
        self._released = False

    @classmethod
    def acquire(cls) -> TerminalToken:
        """Take the terminal, raising TerminalInUseError if another token is out."""
        global _outstanding
        with _lock:
            if _outstanding:
                raise TerminalInUseError("the terminal is already owned by another token")
            _outstanding = True
        return cls(_KEY)

    @staticmethod
    def is_outstanding() -> bool:
        return _outstanding

    @property
    def released(self) -> bool:
        return self._released

    def consume(self) -> None:
        """Mark the token as used by a renderer. A token can only be used once."""
        with _lock:
            if self._consumed or self._released:
                raise TokenConsumedError("this terminal token has already been used")
            self._consumed = True

    def release(self) -> None:
        """Give the terminal back. Releasing twice is a no-op."""
        global _outstanding
        with _lock:
            if self._released:
                return
            self._released = True
            _outstanding = False
