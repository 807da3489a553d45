from __future__ import annotations

import random
from typing import Iterable, List, Optional, Protocol

from .pieces import Shape


class PieceGenerator(Protocol):
    """Source of upcoming shapes, injected into the session."""

    def next(self) -> Shape:
        ...


class RandomPieceGenerator:
    """Uniform draw from the 7 shapes, independent across calls."""

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random(seed)

    def next(self) -> Shape:
        return self.rng.choice(list(Shape))


class FixedSequenceGenerator:
    """Replays a fixed list of shapes, wrapping around at the end."""

    def __init__(self, shapes: Iterable["Shape | str"]) -> None:
        self.shapes: List[Shape] = [Shape.parse(s) for s in shapes]
        if not self.shapes:
            raise ValueError("FixedSequenceGenerator needs at least one shape")
        self.index = 0

    def next(self) -> Shape:
        shape = self.shapes[self.index % len(self.shapes)]
        self.index += 1
        return shape
