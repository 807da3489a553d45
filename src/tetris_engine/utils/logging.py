from __future__ import annotations

import logging

from rich.logging import RichHandler

# Engine modules log under this namespace (tetris_engine.game.core, ...).
ROOT_LOGGER = "tetris_engine"


def setup_logger(*, name: str = ROOT_LOGGER, use_rich: bool = True, level: str = "info") -> logging.Logger:
    """Attach a single handler to `name`, replacing any previous ones.

    Configuring the package root picks up the engine's lock/level/top-out
    debug records as well as the caller's own messages.
    """
    logger = logging.getLogger(str(name))
    logger.handlers.clear()
    logger.propagate = False

    lvl = getattr(logging, str(level).upper(), logging.INFO)
    logger.setLevel(lvl)

    handler: logging.Handler
    if use_rich:
        handler = RichHandler(
            rich_tracebacks=True,
            show_time=True,
            show_level=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s"))

    logger.addHandler(handler)
    return logger


__all__ = ["ROOT_LOGGER", "setup_logger"]
