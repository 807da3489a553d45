from __future__ import annotations


class TetrisError(Exception):
    """Base class for engine errors."""


class InvalidStateError(TetrisError, ValueError):
    """Raised at the load boundary.

    Either no session was ever initialized, or a persisted snapshot breaks one
    of the board/piece invariants (wrong row count, bits outside the board
    width, rotation outside 0..3, negative counters).
    """
