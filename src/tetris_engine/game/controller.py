from __future__ import annotations

from typing import List, Optional

from .grid import GameGrid
from .pieces import ActivePiece, Cell, Shape


class ActivePieceController:
    """Moves the falling piece around a `GameGrid`.

    Every movement is an `attempt_transform` with one axis perturbed. A
    transform that would leave the board or overlap locked cells leaves the
    piece untouched and returns False.
    """

    def __init__(self, grid: GameGrid, piece: Optional[ActivePiece] = None, spawn_y: int = 0) -> None:
        self.grid = grid
        self.piece = piece
        self.spawn_x = grid.width // 2 - 1
        self.spawn_y = int(spawn_y)

    def spawn_piece(self, shape: Shape) -> ActivePiece:
        return ActivePiece(shape=Shape(shape), x=self.spawn_x, y=self.spawn_y, rotation=0)

    def spawn(self, shape: Shape) -> ActivePiece:
        self.piece = self.spawn_piece(shape)
        return self.piece

    def fits(self, piece: ActivePiece) -> bool:
        for row, col in piece.cells():
            if not self.grid.in_bounds(row, col):
                return False
            if row >= 0 and self.grid.occupied(row, col):
                return False
        return True

    def attempt_transform(self, dx: int, dy: int, d_rotation: int = 0) -> bool:
        if self.piece is None:
            return False
        candidate = self.piece.moved(dx, dy, d_rotation)
        if not self.fits(candidate):
            return False
        self.piece = candidate
        return True

    def move_left(self) -> bool:
        return self.attempt_transform(-1, 0, 0)

    def move_right(self) -> bool:
        return self.attempt_transform(1, 0, 0)

    def soft_drop(self) -> bool:
        return self.attempt_transform(0, 1, 0)

    def rotate(self) -> bool:
        return self.attempt_transform(0, 0, 1)

    def drop_to_floor(self) -> int:
        """Soft-drop until blocked; return the number of rows descended."""
        steps = 0
        while self.soft_drop():
            steps += 1
        return steps

    def cells(self) -> List[Cell]:
        if self.piece is None:
            return []
        return self.piece.cells()
