"""A basic three-dimensional point."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Point(Generic[T]):
    """An immutable point with x, y and z coordinates, all zero by default."""

    x: T = 0
    y: T = 0
    z: T = 0

    def convert(self, kind: Callable[[T], U]) -> "Point[U]":
        """A point of another coordinate type, each coordinate passed through ``kind``."""
        return Point(kind(self.x), kind(self.y), kind(self.z))


__all__ = ["Point"]