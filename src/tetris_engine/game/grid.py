from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidStateError
from .pieces import Cell


class GameGrid:
    """Fixed-height board stored as one integer bitmask per row.

    Row 0 is the top of the stack. Bit `i` of a row mask is set when column `i`
    is occupied. Only the low `width` bits of a mask are ever set.
    """

    def __init__(self, width: int = 10, height: int = 20, rows: Optional[Sequence[int]] = None) -> None:
        self.width = int(width)
        self.height = int(height)
        self.rows: List[int] = [0] * self.height
        if rows is not None:
            self.rows = [int(r) for r in rows]

    @classmethod
    def from_rows(cls, rows: Sequence[int], width: int = 10, height: int = 20) -> "GameGrid":
        """Build a grid from persisted row masks, rejecting malformed boards."""
        if len(rows) != height:
            raise InvalidStateError(f"board must have {height} rows, got {len(rows)}")
        full = (1 << width) - 1
        for i, mask in enumerate(rows):
            if isinstance(mask, bool) or not isinstance(mask, (int, np.integer)):
                raise InvalidStateError(f"row {i} is not an integer mask: {mask!r}")
            if int(mask) < 0 or int(mask) & ~full:
                raise InvalidStateError(f"row {i} has bits outside the {width}-wide board: {int(mask):#x}")
        return cls(width, height, rows)

    @property
    def full_mask(self) -> int:
        return (1 << self.width) - 1

    def snapshot(self) -> Tuple[int, ...]:
        return tuple(self.rows)

    def in_bounds(self, row: int, col: int) -> bool:
        # Rows above the visible board (row < 0) count as in bounds.
        return 0 <= col < self.width and row < self.height

    def occupied(self, row: int, col: int) -> bool:
        return bool((self.rows[row] >> col) & 1)

    def merge(self, cells: Iterable[Cell]) -> None:
        # Cells are validated by the caller.
        for row, col in cells:
            self.rows[row] |= 1 << col

    def full_rows(self) -> List[int]:
        full = self.full_mask
        return [i for i, mask in enumerate(self.rows) if mask == full]

    def clear_full_rows(self) -> int:
        full = self.full_mask
        kept = [mask for mask in self.rows if mask != full]
        cleared = self.height - len(kept)
        if cleared == 0:
            return 0
        self.rows = [0] * cleared + kept
        return cleared

    def to_array(self) -> np.ndarray:
        """Occupancy as a (height, width) uint8 array of 0/1."""
        masks = np.asarray(self.rows, dtype=np.uint32)[:, None]
        bits = np.arange(self.width, dtype=np.uint32)[None, :]
        return ((masks >> bits) & 1).astype(np.uint8)

    def get_max_height(self) -> int:
        for i, mask in enumerate(self.rows):
            if mask:
                return self.height - i
        return 0

    def count_holes(self) -> int:
        holes = 0
        seen = 0
        for mask in self.rows:
            holes += bin(seen & ~mask & self.full_mask).count("1")
            seen |= mask
        return holes

    def render_text(self, cells: Iterable[Cell] = ()) -> str:
        overlay = {(r, c) for r, c in cells}
        lines = []
        for r in range(self.height):
            line = []
            for c in range(self.width):
                if (r, c) in overlay:
                    line.append("▓")
                elif self.occupied(r, c):
                    line.append("█")
                else:
                    line.append("·")
            lines.append("".join(line))
        return "\n".join(lines)
