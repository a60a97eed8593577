"""Geometry helpers for doorway orientations, grid positions and room bounds."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


@dataclass(frozen=True, order=True)
class GridPos:
    """Integer cell coordinate. The grid is y-up: north increases y."""

    x: int
    y: int

    def __iter__(self):
        yield self.x
        yield self.y

    def __getitem__(self, index: int) -> int:
        if index == 0:
            return self.x
        if index == 1:
            return self.y
        raise IndexError("GridPos only supports two coordinates")

    def __add__(self, other: GridPos) -> GridPos:
        return GridPos(self.x + other.x, self.y + other.y)

    def __sub__(self, other: GridPos) -> GridPos:
        return GridPos(self.x - other.x, self.y - other.y)

    def to_tuple(self) -> Tuple[int, int]:
        return self.x, self.y

    @classmethod
    def from_tuple(cls, value: Tuple[int, int]) -> GridPos:
        return cls(int(value[0]), int(value[1]))


class Orientation(Enum):
    """Cardinal doorway orientations with unit vectors on a y-up grid."""

    NORTH = (0, 1)
    EAST = (1, 0)
    SOUTH = (0, -1)
    WEST = (-1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def vector(self) -> Tuple[int, int]:
        return self.value

    @property
    def is_vertical(self) -> bool:
        """True for north/south doorways, which connect along the y axis."""
        return self.dx == 0

    def unit_offset(self) -> GridPos:
        return GridPos(self.dx, self.dy)

    def opposite(self) -> Orientation:
        return Orientation.from_tuple((-self.dx, -self.dy))

    def is_opposite(self, other: Orientation) -> bool:
        return self.opposite() is other

    @classmethod
    def from_tuple(cls, value: Tuple[int, int]) -> Orientation:
        try:
            return cls(tuple(value))
        except ValueError as exc:
            raise ValueError(f"Unsupported orientation {value}") from exc

    @classmethod
    def from_name(cls, name: str) -> Orientation:
        try:
            return cls[name.strip().upper()]
        except KeyError as exc:
            raise ValueError(f"Unsupported orientation {name!r}") from exc


def intervals_overlap(min1: int, max1: int, min2: int, max2: int) -> bool:
    """Return True when the inclusive intervals [min1, max1] and [min2, max2] intersect."""
    return max(min1, min2) <= min(max1, max2)


@dataclass(frozen=True)
class Bounds:
    """Inclusive cell rectangle: both ``lower`` and ``upper`` belong to the area."""

    lower: GridPos
    upper: GridPos

    def __post_init__(self) -> None:
        if self.upper.x < self.lower.x or self.upper.y < self.lower.y:
            raise ValueError(f"Bounds upper {self.upper} must not be below lower {self.lower}")

    @property
    def size(self) -> GridPos:
        """Extent as ``upper - lower``; a one-cell room has size (0, 0)."""
        return self.upper - self.lower

    @property
    def width(self) -> int:
        return self.upper.x - self.lower.x + 1

    @property
    def height(self) -> int:
        return self.upper.y - self.lower.y + 1

    def overlaps(self, other: Bounds) -> bool:
        """Return True when the two rectangles share at least one cell."""
        return intervals_overlap(
            self.lower.x, self.upper.x, other.lower.x, other.upper.x
        ) and intervals_overlap(self.lower.y, self.upper.y, other.lower.y, other.upper.y)

    def contains(self, point: GridPos) -> bool:
        return (
            self.lower.x <= point.x <= self.upper.x
            and self.lower.y <= point.y <= self.upper.y
        )

    def translate(self, offset: GridPos) -> Bounds:
        return Bounds(self.lower + offset, self.upper + offset)

    def union(self, other: Bounds) -> Bounds:
        return Bounds(
            GridPos(min(self.lower.x, other.lower.x), min(self.lower.y, other.lower.y)),
            GridPos(max(self.upper.x, other.upper.x), max(self.upper.y, other.upper.y)),
        )

    def to_tuple(self) -> Tuple[int, int, int, int]:
        """Return ``(lower_x, lower_y, upper_x, upper_y)``."""
        return self.lower.x, self.lower.y, self.upper.x, self.upper.y
