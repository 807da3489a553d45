from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .generator import PieceGenerator
from .grid import GameGrid
from .pieces import Cell
from .rules import ScoringRules
from .state import SessionFrame

logger = logging.getLogger(__name__)


@dataclass
class LockResult:
    lines_cleared: int = 0
    score_delta: int = 0
    leveled_up: bool = False
    topped_out: bool = False


class LineClearEngine:
    """Locks the falling piece into the board and settles the consequences.

    Lock procedure:
      1. a piece with any cell above row 0 tops out, nothing is merged
      2. otherwise its cells are merged and full rows are cleared
      3. score and lines are credited, level goes up by at most one
      4. the lookahead piece spawns and a new lookahead is drawn
      5. a spawn that does not fit ends the game
    """

    def __init__(self, rules: Optional[ScoringRules] = None) -> None:
        self.rules = rules or ScoringRules()

    def clear(self, grid: GameGrid) -> int:
        full = grid.full_rows()
        if not full:
            return 0
        cleared = grid.clear_full_rows()
        logger.debug("cleared rows %s", full)
        return cleared

    def lock(self, frame: SessionFrame, generator: PieceGenerator) -> LockResult:
        result = LockResult()
        controller = frame.controller
        if controller.piece is None:
            return result

        to_merge: List[Cell] = []
        for row, col in controller.cells():
            if row < 0:
                result.topped_out = True
            else:
                to_merge.append((row, col))
        if result.topped_out:
            logger.debug("top-out: %s locked above the board", controller.piece)
            frame.game_over = True
            return result

        frame.grid.merge(to_merge)
        lines = self.clear(frame.grid)

        result.lines_cleared = lines
        result.score_delta = self.rules.score_for_lines(lines, frame.level)
        frame.score += result.score_delta
        frame.lines_cleared += lines
        level = self.rules.level_after(frame.lines_cleared, frame.level)
        if level != frame.level:
            logger.debug("level up: %d -> %d after %d lines", frame.level, level, frame.lines_cleared)
            result.leveled_up = True
            frame.level = level

        controller.spawn(frame.next_piece.shape)
        frame.next_piece = controller.spawn_piece(generator.next())
        if not controller.attempt_transform(0, 0, 0):
            logger.debug("top-out: %s does not fit at spawn", controller.piece)
            result.topped_out = True
            frame.game_over = True
        return result
