from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from types import MappingProxyType
from typing import List, Mapping, Tuple


Offset = Tuple[int, int]  # (dx, dy) relative to the pivot
Cell = Tuple[int, int]  # (row, col) on the board


class Shape(IntEnum):
    I = 0
    J = 1
    L = 2
    O = 3
    S = 4
    T = 5
    Z = 6

    @classmethod
    def parse(cls, value: "Shape | str | int") -> "Shape":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"unknown shape {value!r}") from None
        return cls(int(value))


NUM_ROTATIONS = 4

# Hard-coded rotation table. There are no wall kicks; a rotation that does not
# fit simply fails. O never changes, S and Z only have two distinct states.
_TABLE = {
    Shape.I: (
        ((-1, 0), (0, 0), (1, 0), (2, 0)),
        ((1, -1), (1, 0), (1, 1), (1, 2)),
        ((-1, 1), (0, 1), (1, 1), (2, 1)),
        ((0, -1), (0, 0), (0, 1), (0, 2)),
    ),
    Shape.J: (
        ((-1, 0), (0, 0), (1, 0), (1, 1)),
        ((0, -1), (0, 0), (0, 1), (-1, 1)),
        ((-1, -1), (-1, 0), (0, 0), (1, 0)),
        ((1, -1), (0, 0), (0, -1), (0, 1)),
    ),
    Shape.L: (
        ((-1, 0), (0, 0), (1, 0), (-1, 1)),
        ((0, -1), (0, 0), (0, 1), (1, 1)),
        ((1, -1), (-1, 0), (0, 0), (1, 0)),
        ((-1, -1), (0, -1), (0, 0), (0, 1)),
    ),
    Shape.O: (
        ((0, 0), (1, 0), (0, 1), (1, 1)),
        ((0, 0), (1, 0), (0, 1), (1, 1)),
        ((0, 0), (1, 0), (0, 1), (1, 1)),
        ((0, 0), (1, 0), (0, 1), (1, 1)),
    ),
    Shape.S: (
        ((0, 0), (1, 0), (-1, 1), (0, 1)),
        ((0, -1), (0, 0), (1, 0), (1, 1)),
        ((0, 0), (1, 0), (-1, 1), (0, 1)),
        ((0, -1), (0, 0), (1, 0), (1, 1)),
    ),
    Shape.T: (
        ((-1, 0), (0, 0), (1, 0), (0, 1)),
        ((0, -1), (0, 0), (0, 1), (-1, 0)),
        ((-1, 0), (0, 0), (1, 0), (0, -1)),
        ((0, -1), (0, 0), (0, 1), (1, 0)),
    ),
    Shape.Z: (
        ((-1, 0), (0, 0), (0, 1), (1, 1)),
        ((1, -1), (1, 0), (0, 0), (0, 1)),
        ((-1, 0), (0, 0), (0, 1), (1, 1)),
        ((1, -1), (1, 0), (0, 0), (0, 1)),
    ),
}

PIECE_COORDS: Mapping[Tuple[Shape, int], Tuple[Offset, ...]] = MappingProxyType(
    {(shape, rot): offsets for shape, rotations in _TABLE.items() for rot, offsets in enumerate(rotations)}
)


def coordinates(shape: Shape, rotation: int) -> Tuple[Offset, ...]:
    """Return the 4 (dx, dy) offsets of `shape` at `rotation` (taken modulo 4)."""
    return PIECE_COORDS[(Shape(shape), rotation % NUM_ROTATIONS)]


@dataclass(frozen=True)
class ActivePiece:
    shape: Shape
    x: int
    y: int
    rotation: int = 0  # 0..3

    def offsets(self) -> Tuple[Offset, ...]:
        return coordinates(self.shape, self.rotation)

    def moved(self, dx: int, dy: int, d_rotation: int = 0) -> "ActivePiece":
        return replace(
            self,
            x=self.x + dx,
            y=self.y + dy,
            rotation=(self.rotation + d_rotation) % NUM_ROTATIONS,
        )

    def cells(self) -> List[Cell]:
        return [(self.y + dy, self.x + dx) for dx, dy in self.offsets()]

    def to_dict(self) -> dict:
        return {"shape": self.shape.name, "x": self.x, "y": self.y, "rotation": self.rotation}
