from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from tetris_engine.game import GameConfig, GameSession, GameState, InvalidStateError, ScoringRules
from tetris_engine.game.generator import PieceGenerator, RandomPieceGenerator

from .stores import SessionStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TetrisService:
    """Runs each public operation as load -> operate -> commit against a store.

    The engine itself never touches storage. This wrapper loads the persisted
    snapshot, fails loudly if there is none, applies the operation on a
    `GameSession` and writes the whole updated snapshot back.
    """

    def __init__(
        self,
        store: SessionStore,
        generator: Optional[PieceGenerator] = None,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
    ) -> None:
        self.store = store
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.generator: PieceGenerator = generator or RandomPieceGenerator(self.config.random_seed)

    def initialize(self) -> GameState:
        session = GameSession(generator=self.generator, config=self.config, rules=self.rules)
        state = session.initialize()
        self.store.save(state.to_dict())
        return state

    def get_state(self) -> GameState:
        return self._load().get_state()

    def move_left(self) -> bool:
        return self._apply(GameSession.move_left)

    def move_right(self) -> bool:
        return self._apply(GameSession.move_right)

    def soft_drop(self) -> bool:
        return self._apply(GameSession.soft_drop)

    def rotate(self) -> bool:
        return self._apply(GameSession.rotate)

    def hard_drop(self) -> int:
        return self._apply(GameSession.hard_drop)

    def advance_tick(self) -> GameState:
        return self._apply(GameSession.advance_tick)

    def _load(self) -> GameSession:
        data = self.store.load()
        if data is None:
            raise InvalidStateError("Game not initialized")
        state = GameState.from_dict(data, self.config)
        return GameSession.from_state(state, generator=self.generator, config=self.config, rules=self.rules)

    def _apply(self, op: Callable[[GameSession], T]) -> T:
        session = self._load()
        before = session.get_state()
        result = op(session)
        after = session.get_state()
        if after != before:
            self.store.save(after.to_dict())
            logger.debug("committed %s -> score=%d", getattr(op, "__name__", "op"), after.score)
        return result
