"""Engine exceptions. Backend and device failures propagate as-is."""
from __future__ import annotations


class ToonError(Exception):
    """Base class for errors raised by the rendering engine itself."""


class TerminalInUseError(ToonError):
    """Another exclusive terminal capability is already outstanding."""


class TokenConsumedError(ToonError):
    """The terminal token was already handed to a renderer."""


class RendererClosedError(ToonError):
    """The renderer was used after cleanup."""
