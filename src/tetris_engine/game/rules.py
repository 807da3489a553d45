from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    lines_per_level: int = 10

    def score_for_lines(self, lines: int, level: int = 1) -> int:
        if 1 <= lines <= len(self.line_clear_scores):
            return self.line_clear_scores[lines - 1] * level
        return 0

    def level_after(self, lines_cleared: int, level: int) -> int:
        # A lock clears at most 4 lines, so at most one threshold is crossed.
        if lines_cleared >= level * self.lines_per_level:
            return level + 1
        return level
