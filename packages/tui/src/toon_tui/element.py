"""
Element protocol — what the renderer draws.

Anything with ``draw``, ``ideal_size`` and ``handle`` is an element; Line,
Grid and Buffer are elements that replay their own contents.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .input import Input
from .vec2 import Vec2

if TYPE_CHECKING:
    from .events import Events
    from .output import Output


@runtime_checkable
class Element(Protocol):
    """Interface for elements that can be drawn by a Renderer."""

    def draw(self, output: Output) -> None:
        """Draw the element onto ``output``."""
        ...

    def ideal_size(self, maximum: Vec2) -> Vec2:
        """The size the element would like, given at most ``maximum``."""
        ...

    def handle(self, input: Input, events: Events) -> None:
        """React to user input, emitting any resulting events."""
        ...
