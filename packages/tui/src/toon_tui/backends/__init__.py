"""Terminal backends."""
from .ansi import AnsiBackend
from .base import Backend
from .dummy import Dummy, Operation, OpKind

__all__ = ["AnsiBackend", "Backend", "Dummy", "Operation", "OpKind"]
