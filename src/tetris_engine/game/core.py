from __future__ import annotations

import logging
from enum import IntEnum
from typing import Callable, Dict, Optional, Tuple, TypeVar

from .config import GameConfig
from .errors import InvalidStateError
from .generator import PieceGenerator, RandomPieceGenerator
from .grid import GameGrid
from .line_clear import LineClearEngine, LockResult
from .pieces import ActivePiece
from .rules import ScoringRules
from .state import GameState, SessionFrame

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    TICK = 5


class GameSession:
    """Public operation surface of the engine.

    The session wraps a `GameState` value. Each operation thaws it into a
    working frame, mutates the frame and commits a new snapshot only once the
    operation has finished, so callers never see a half-applied update.
    After game over every mutating call returns its failure value and leaves
    the snapshot untouched.
    """

    def __init__(
        self,
        generator: Optional[PieceGenerator] = None,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        state: Optional[GameState] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.generator: PieceGenerator = generator or RandomPieceGenerator(self.config.random_seed)
        self.line_clear = LineClearEngine(self.rules)
        self.last_lock: Optional[LockResult] = None
        self._state = state

    @classmethod
    def from_state(
        cls,
        state: GameState,
        generator: Optional[PieceGenerator] = None,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
    ) -> "GameSession":
        return cls(generator=generator, config=config, rules=rules, state=state)

    @property
    def initialized(self) -> bool:
        return self._state is not None

    @property
    def game_over(self) -> bool:
        return self._require_state().game_over

    def initialize(self) -> GameState:
        grid = GameGrid(self.config.width, self.config.height)
        self._state = GameState(
            board=grid.snapshot(),
            current_piece=ActivePiece(self.generator.next(), self.config.spawn_x, self.config.spawn_y),
            next_piece=ActivePiece(self.generator.next(), self.config.spawn_x, self.config.spawn_y),
        )
        self.last_lock = None
        logger.debug("initialized session: current=%s next=%s",
                     self._state.current_piece.shape.name, self._state.next_piece.shape.name)
        return self._state

    def get_state(self) -> GameState:
        return self._require_state()

    def move_left(self) -> bool:
        return self._run(lambda f: f.controller.move_left(), False)

    def move_right(self) -> bool:
        return self._run(lambda f: f.controller.move_right(), False)

    def rotate(self) -> bool:
        return self._run(lambda f: f.controller.rotate(), False)

    def soft_drop(self) -> bool:
        def op(frame: SessionFrame) -> bool:
            if frame.controller.soft_drop():
                return True
            self._lock(frame)
            return False

        return self._run(op, False)

    def hard_drop(self) -> int:
        def op(frame: SessionFrame) -> int:
            steps = frame.controller.drop_to_floor()
            self._lock(frame)
            return steps

        return self._run(op, 0)

    def advance_tick(self) -> GameState:
        self.soft_drop()
        return self._require_state()

    def step(self, action: Action) -> Tuple[GameState, int, bool, Dict[str, object]]:
        """Apply one `Action`; return (state, score gained, game over, info)."""
        before = self._require_state()
        if before.game_over:
            return before, 0, True, {}
        self.last_lock = None

        action = Action(action)
        if action == Action.LEFT:
            self.move_left()
        elif action == Action.RIGHT:
            self.move_right()
        elif action == Action.ROTATE:
            self.rotate()
        elif action == Action.SOFT_DROP:
            self.soft_drop()
        elif action == Action.HARD_DROP:
            self.hard_drop()
        elif action == Action.TICK:
            self.advance_tick()

        after = self._require_state()
        info: Dict[str, object] = {
            "score": after.score,
            "level": after.level,
            "lines_cleared": after.lines_cleared,
            "locked": self.last_lock is not None,
        }
        if self.last_lock is not None:
            info["lines"] = self.last_lock.lines_cleared
        return after, after.score - before.score, after.game_over, info

    def _require_state(self) -> GameState:
        if self._state is None:
            raise InvalidStateError("Game not initialized")
        return self._state

    def _run(self, op: Callable[[SessionFrame], T], failure: T) -> T:
        state = self._require_state()
        if state.game_over:
            return failure
        frame = SessionFrame.thaw(state, self.config)
        result = op(frame)
        self._state = frame.freeze()
        return result

    def _lock(self, frame: SessionFrame) -> LockResult:
        result = self.line_clear.lock(frame, self.generator)
        self.last_lock = result
        if frame.game_over:
            logger.info("game over: score=%d lines=%d level=%d", frame.score, frame.lines_cleared, frame.level)
        return result
