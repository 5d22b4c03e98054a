"""Immutable 2D vector value and its polar view."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Vector2D:
    """Immutable 2D vector with float components."""

    x: float
    y: float

    @classmethod
    def from_polar(cls, angle: float, magnitude: float) -> Vector2D:
        """Build a vector from an angle in radians and a length."""
        return cls(math.cos(angle) * magnitude, math.sin(angle) * magnitude)

    def components(self) -> tuple[float, float]:
        return (self.x, self.y)

    def length(self) -> float:
        """Euclidean norm."""
        return math.hypot(self.x, self.y)

    def angle(self) -> float:
        """Angle to the x-axis in radians, via atan2."""
        return math.atan2(self.y, self.x)

    def normalized(self) -> Vector2D:
        """Unit vector in the same direction; the zero vector stays zero."""
        length = self.length()
        if length == 0.0:
            return Vector2D(0.0, 0.0)
        return Vector2D(self.x / length, self.y / length)

    def dot(self, other: VectorLike) -> float:
        """Dot product with another vector or a sequence of >= 2 components."""
        ox, oy = _coerce_components(other)
        return self.x * ox + self.y * oy

    def scaled(self, factor: float) -> Vector2D:
        return Vector2D(self.x * factor, self.y * factor)

    def distance_to(self, other: Vector2D) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def __add__(self, other: Vector2D) -> Vector2D:
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2D) -> Vector2D:
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Vector2D:
        return self.scaled(factor)

    __rmul__ = __mul__

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


VectorLike = Union[Vector2D, Sequence[float]]


def _coerce_components(source: VectorLike) -> tuple[float, float]:
    """Return the first two components of *source*.

    Raises :exc:`ValueError` when fewer than two components are available.
    """
    if isinstance(source, Vector2D):
        return source.x, source.y
    if source is None or len(source) < 2:
        raise ValueError("vector source must provide at least 2 components")
    return float(source[0]), float(source[1])
