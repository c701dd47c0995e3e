"""
Vec2 — a 2-D integer coordinate used for positions and sizes.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class Vec2:
    """A 2-dimensional vector. ``x`` is the column axis, ``y`` the row axis."""

    x: int = 0
    y: int = 0

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def map(self, f: Callable[[int], int]) -> Vec2:
        return Vec2(f(self.x), f(self.y))

    def swap(self) -> Vec2:
        return Vec2(self.y, self.x)

    def __iter__(self):
        yield self.x
        yield self.y
