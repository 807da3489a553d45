from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from .config import GameConfig
from .controller import ActivePieceController
from .errors import InvalidStateError
from .grid import GameGrid
from .pieces import NUM_ROTATIONS, ActivePiece, Shape


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of a session, the value callers persist.

    `board` holds one row mask per row, top row first. Once `game_over` is set
    the snapshot never changes again.
    """

    board: Tuple[int, ...]
    current_piece: ActivePiece
    next_piece: ActivePiece
    score: int = 0
    level: int = 1
    lines_cleared: int = 0
    game_over: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "board": list(self.board),
            "current_piece": self.current_piece.to_dict(),
            "next_piece": self.next_piece.to_dict(),
            "score": self.score,
            "level": self.level,
            "lines_cleared": self.lines_cleared,
            "game_over": self.game_over,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], config: Optional[GameConfig] = None) -> "GameState":
        """Load boundary: rebuild a snapshot and reject anything malformed."""
        cfg = config or GameConfig()
        try:
            grid = GameGrid.from_rows(list(data["board"]), cfg.width, cfg.height)
            state = cls(
                board=grid.snapshot(),
                current_piece=_piece_from_dict(data["current_piece"], "current_piece"),
                next_piece=_piece_from_dict(data["next_piece"], "next_piece"),
                score=_counter(data["score"], "score"),
                level=_counter(data["level"], "level"),
                lines_cleared=_counter(data["lines_cleared"], "lines_cleared"),
                game_over=data["game_over"],
            )
        except KeyError as exc:
            raise InvalidStateError(f"snapshot is missing field {exc.args[0]!r}") from None
        except TypeError as exc:
            raise InvalidStateError(f"malformed snapshot: {exc}") from exc
        if not isinstance(state.game_over, bool):
            raise InvalidStateError(f"game_over must be a bool, got {state.game_over!r}")
        if state.level < 1:
            raise InvalidStateError(f"level must be >= 1, got {state.level}")
        for name, piece in (("current_piece", state.current_piece), ("next_piece", state.next_piece)):
            if not all(grid.in_bounds(row, col) for row, col in piece.cells()):
                raise InvalidStateError(f"{name} has cells outside the board: {piece.cells()}")
        return state


def _counter(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidStateError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidStateError(f"{name} must be non-negative, got {value}")
    return value


def _piece_from_dict(data: Mapping[str, Any], name: str) -> ActivePiece:
    try:
        shape = Shape.parse(data["shape"])
    except ValueError as exc:
        raise InvalidStateError(f"{name}: {exc}") from None
    x, y, rotation = data["x"], data["y"], data["rotation"]
    for field, value in (("x", x), ("y", y), ("rotation", rotation)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidStateError(f"{name}.{field} must be an integer, got {value!r}")
    if not 0 <= rotation < NUM_ROTATIONS:
        raise InvalidStateError(f"{name}.rotation must be in [0, {NUM_ROTATIONS}), got {rotation}")
    return ActivePiece(shape=shape, x=x, y=y, rotation=rotation)


@dataclass
class SessionFrame:
    """Mutable working copy of a `GameState` for the duration of one operation."""

    grid: GameGrid
    controller: ActivePieceController
    next_piece: ActivePiece
    score: int
    level: int
    lines_cleared: int
    game_over: bool

    @classmethod
    def thaw(cls, state: GameState, config: GameConfig) -> "SessionFrame":
        grid = GameGrid(config.width, config.height, state.board)
        controller = ActivePieceController(grid, state.current_piece, spawn_y=config.spawn_y)
        return cls(
            grid=grid,
            controller=controller,
            next_piece=state.next_piece,
            score=state.score,
            level=state.level,
            lines_cleared=state.lines_cleared,
            game_over=state.game_over,
        )

    def freeze(self) -> GameState:
        assert self.controller.piece is not None
        return GameState(
            board=self.grid.snapshot(),
            current_piece=self.controller.piece,
            next_piece=self.next_piece,
            score=self.score,
            level=self.level,
            lines_cleared=self.lines_cleared,
            game_over=self.game_over,
        )
