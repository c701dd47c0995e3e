"""Terminal events and the collector element handlers emit into."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from .input import Input
from .vec2 import Vec2

E = TypeVar("E")
F = TypeVar("F")


@dataclass(frozen=True)
class InputEvent:
    input: Input


@dataclass(frozen=True)
class ResizeEvent:
    size: Vec2


TerminalEvent = InputEvent | ResizeEvent


class Events(Generic[E]):
    """
    Collects events emitted while an element handles input.

    ``map(f)`` gives a collector for a child element whose events are
    translated by ``f`` before reaching this collector's sink.
    """

    def __init__(self, sink: Callable[[Any], None] | None = None) -> None:
        self._items: list[E] = []
        self._sink: Callable[[Any], None] = sink if sink is not None else self._items.append

    def add(self, event: E) -> None:
        self._sink(event)

    def map(self, f: Callable[[F], E]) -> Events[F]:
        sink = self._sink
        return Events(lambda event: sink(f(event)))

    def drain(self) -> list[E]:
        """Take every event collected so far."""
        items, self._items = self._items, []
        return items

    def __len__(self) -> int:
        return len(self._items)
