"""Game module for the falling-block engine.

Exports the core game engine and supporting classes:
- GameGrid: row-bitmask board, occupancy and line compaction
- Shape, ActivePiece, coordinates: piece catalog
- ActivePieceController: movement and rotation validation
- LineClearEngine: lock protocol, line clears, scoring
- ScoringRules: score table and level threshold
- GameSession: public operation set over a GameState snapshot
"""

from .config import GameConfig
from .controller import ActivePieceController
from .core import Action, GameSession
from .errors import InvalidStateError, TetrisError
from .generator import FixedSequenceGenerator, PieceGenerator, RandomPieceGenerator
from .grid import GameGrid
from .line_clear import LineClearEngine, LockResult
from .pieces import ActivePiece, Shape, coordinates
from .rules import ScoringRules
from .state import GameState

__all__ = [
    "GameConfig",
    "ActivePieceController",
    "Action",
    "GameSession",
    "InvalidStateError",
    "TetrisError",
    "FixedSequenceGenerator",
    "PieceGenerator",
    "RandomPieceGenerator",
    "GameGrid",
    "LineClearEngine",
    "LockResult",
    "ActivePiece",
    "Shape",
    "coordinates",
    "ScoringRules",
    "GameState",
]
