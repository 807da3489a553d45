from __future__ import annotations

import argparse
import random

import gymnasium as gym

# Ensure envs are registered
import tetris_engine.env  # noqa: F401
from tetris_engine.game import GameGrid
from tetris_engine.utils.logging import setup_logger


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play a headless game with uniformly random actions.")
    p.add_argument("--steps", type=int, default=500)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", type=str, default="info")
    p.add_argument("--plain", action="store_true", help="Plain stream logging instead of rich")
    return p


def run_random(steps: int = 500, seed: int | None = None, log_level: str = "info", use_rich: bool = True) -> dict:
    log = setup_logger(use_rich=use_rich, level=log_level)
    rng = random.Random(seed)
    env = gym.make("Tetris-10x20-v0")
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    for step in range(steps):
        action = rng.randrange(env.action_space.n)
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            log.info("episode ended after %d steps", step + 1)
            break

    state = env.unwrapped.session.get_state()
    env.close()
    log.info("score=%d lines=%d level=%d reward=%.1f", state.score, state.lines_cleared, state.level, total_reward)
    grid = GameGrid(rows=state.board)
    print(grid.render_text([] if state.game_over else state.current_piece.cells()))
    return state.to_dict()


def main() -> None:
    args = build_parser().parse_args()
    run_random(steps=args.steps, seed=args.seed, log_level=args.log_level, use_rich=not args.plain)


if __name__ == "__main__":  # pragma: no cover
    main()
