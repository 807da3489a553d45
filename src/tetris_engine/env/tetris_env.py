from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetris_engine.game import Action, GameConfig, GameGrid, GameSession, GameState, RandomPieceGenerator, ScoringRules


class TetrisEnv(gym.Env):
    """
    Single-piece falling-block environment driven by the engine's operation set.

    Actions (6 total):
      0: Move Left
      1: Move Right
      2: Rotate
      3: Soft Drop (locks when blocked)
      4: Hard Drop
      5: Tick (gravity step)

    Reward is the engine score gained by the step; the episode terminates on top-out.
    `info` carries score, level, lines and the board's max_height and holes.
    """

    metadata = {"render_modes": []}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        max_episode_steps: int = 10000,
        invalid_action_penalty: float = 0.0,
    ) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.max_episode_steps = int(max_episode_steps)
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.session = GameSession(config=self.config, rules=self.rules)

        h, w = self.config.height, self.config.width
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0, high=1, shape=(h, w), dtype=np.uint8),
                "current": spaces.Discrete(7),
                "next": spaces.Discrete(7),
                "rotation": spaces.Discrete(4),
            }
        )
        self.action_space = spaces.Discrete(len(Action))
        self._steps = 0

    def _grid(self, state: GameState) -> GameGrid:
        return GameGrid(self.config.width, self.config.height, state.board)

    def _board_features(self, state: GameState) -> Dict[str, int]:
        grid = self._grid(state)
        return {"max_height": grid.get_max_height(), "holes": grid.count_holes()}

    def _get_obs(self, state: GameState) -> Dict[str, Any]:
        board = self._grid(state).to_array()
        return {
            "board": board,
            "current": int(state.current_piece.shape),
            "next": int(state.next_piece.shape),
            "rotation": int(state.current_piece.rotation),
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        piece_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.session = GameSession(
            generator=RandomPieceGenerator(piece_seed), config=self.config, rules=self.rules
        )
        state = self.session.initialize()
        self._steps = 0
        info: Dict[str, Any] = {"score": state.score, "level": state.level, "lines_cleared": state.lines_cleared}
        info.update(self._board_features(state))
        return self._get_obs(state), info

    def step(self, action: int):
        before = self.session.get_state()
        state, gained, terminated, info = self.session.step(Action(int(action)))
        self._steps += 1

        reward = float(gained)
        moved = state != before
        if not moved and self.invalid_action_penalty:
            reward += self.invalid_action_penalty
        info["moved"] = moved
        info.update(self._board_features(state))

        truncated = self._steps >= self.max_episode_steps and not terminated
        return self._get_obs(state), reward, bool(terminated), truncated, info

    def close(self) -> None:
        pass
