from __future__ import annotations

import random
from typing import Sequence

import pytest

from tetris_engine.game import (
    Action,
    ActivePiece,
    FixedSequenceGenerator,
    GameSession,
    GameState,
    InvalidStateError,
    RandomPieceGenerator,
    Shape,
)

FULL = (1 << 10) - 1


def make_session(
    board: Sequence[int],
    current: ActivePiece,
    sequence: str = "O",
    **counters: int,
) -> GameSession:
    state = GameState(
        board=tuple(board),
        current_piece=current,
        next_piece=ActivePiece(Shape.O, 4, 0, 0),
        **counters,
    )
    return GameSession.from_state(state, generator=FixedSequenceGenerator(sequence))


def test_initialize_creates_fresh_session() -> None:
    session = GameSession(generator=FixedSequenceGenerator("TO"))
    state = session.initialize()
    assert state.board == (0,) * 20
    assert (state.score, state.level, state.lines_cleared, state.game_over) == (0, 1, 0, False)
    assert state.current_piece == ActivePiece(Shape.T, 4, 0, 0)
    assert state.next_piece == ActivePiece(Shape.O, 4, 0, 0)


def test_operations_before_initialize_fail_loudly() -> None:
    session = GameSession()
    assert not session.initialized
    with pytest.raises(InvalidStateError, match="not initialized"):
        session.move_left()
    with pytest.raises(InvalidStateError):
        session.get_state()


def test_move_left_until_wall() -> None:
    session = GameSession(generator=FixedSequenceGenerator("O"))
    session.initialize()
    assert [session.move_left() for _ in range(5)] == [True, True, True, True, False]
    assert session.get_state().current_piece.x == 0


def test_soft_drop_moves_then_locks() -> None:
    session = GameSession(generator=FixedSequenceGenerator("OT"))
    session.initialize()
    assert session.soft_drop() is True
    assert session.get_state().current_piece.y == 1
    for _ in range(17):
        assert session.soft_drop() is True
    assert session.soft_drop() is False

    state = session.get_state()
    assert state.board[18] == state.board[19] == 0b110000
    assert state.current_piece == ActivePiece(Shape.T, 4, 0, 0)
    assert state.next_piece.shape == Shape.O
    assert state.score == 0


def test_single_line_clear_scores_by_level() -> None:
    board = [0] * 19 + [0b0011111111]
    session = make_session(board, ActivePiece(Shape.O, 8, 0, 0), level=2, lines_cleared=5)

    assert session.hard_drop() == 18
    state = session.get_state()
    assert state.lines_cleared == 6
    assert state.score == 200
    assert state.level == 2
    assert state.board[0] == 0
    assert state.board[19] == 0b1100000000
    assert sum(1 for row in state.board if row) == 1
    assert session.last_lock is not None and session.last_lock.lines_cleared == 1


def test_clearing_four_lines_scores_800() -> None:
    board = [0] * 16 + [FULL >> 1] * 4
    session = make_session(board, ActivePiece(Shape.I, 9, 1, 3))

    assert session.hard_drop() == 16
    state = session.get_state()
    assert state.board == (0,) * 20
    assert state.lines_cleared == 4
    assert state.score == 800


def test_level_increments_once_when_threshold_is_crossed() -> None:
    board = [0] * 19 + [0b0011111111]
    session = make_session(board, ActivePiece(Shape.O, 8, 0, 0), lines_cleared=9, score=50)

    session.hard_drop()
    state = session.get_state()
    assert state.lines_cleared == 10
    assert state.level == 2
    # Points use the level in effect when the lines were cleared.
    assert state.score == 150
    assert session.last_lock.leveled_up


def test_rotating_o_keeps_the_same_cells() -> None:
    session = GameSession(generator=FixedSequenceGenerator("O"))
    before = set(session.initialize().current_piece.cells())
    assert session.rotate() is True
    after = session.get_state().current_piece
    assert after.rotation == 1
    assert set(after.cells()) == before


def test_failed_rotation_never_locks() -> None:
    session = make_session([0] * 20, ActivePiece(Shape.I, 0, 0, 3))
    before = session.get_state()
    assert session.rotate() is False
    assert session.get_state() == before
    assert session.last_lock is None


def test_lock_above_the_board_tops_out_without_merging() -> None:
    board = [0] * 20
    board[3] = 1 << 5
    session = make_session(board, ActivePiece(Shape.I, 4, 0, 1))

    assert session.soft_drop() is False
    state = session.get_state()
    assert state.game_over
    assert state.board == tuple(board)
    assert state.current_piece == ActivePiece(Shape.I, 4, 0, 1)


def test_stacking_to_the_top_ends_the_game() -> None:
    session = GameSession(generator=FixedSequenceGenerator("O"))
    session.initialize()
    drops = [session.hard_drop() for _ in range(10)]
    assert drops == [18, 16, 14, 12, 10, 8, 6, 4, 2, 0]

    state = session.get_state()
    assert state.game_over
    assert all(row == 0b110000 for row in state.board)

    assert session.move_left() is False
    assert session.get_state() == state


def test_spawn_collision_after_lock_is_game_over() -> None:
    board = [0, 0] + [FULL - 1] * 18
    session = make_session(board, ActivePiece(Shape.O, 4, 0, 0))

    assert session.soft_drop() is False
    state = session.get_state()
    assert state.game_over
    assert state.board[0] == state.board[1] == 0b110000
    assert state.lines_cleared == 0


def test_every_operation_is_a_noop_after_game_over() -> None:
    board = [0, 0] + [FULL - 1] * 18
    session = make_session(board, ActivePiece(Shape.O, 4, 0, 0))
    session.soft_drop()
    frozen = session.get_state()
    assert frozen.game_over

    assert session.move_left() is False
    assert session.move_right() is False
    assert session.rotate() is False
    assert session.soft_drop() is False
    assert session.hard_drop() == 0
    assert session.advance_tick() == frozen
    assert session.step(Action.HARD_DROP) == (frozen, 0, True, {})
    assert session.get_state() == frozen


def test_advance_tick_is_a_gravity_step() -> None:
    session = GameSession(generator=FixedSequenceGenerator("T"))
    session.initialize()
    state = session.advance_tick()
    assert state.current_piece.y == 1
    assert state == session.get_state()


def test_step_reports_score_gained() -> None:
    board = [0] * 19 + [0b0011111111]
    session = make_session(board, ActivePiece(Shape.O, 8, 0, 0))
    state, gained, done, info = session.step(Action.HARD_DROP)
    assert gained == 100
    assert not done
    assert info["locked"] and info["lines"] == 1
    assert info["score"] == state.score == 100


def test_random_play_keeps_invariants() -> None:
    session = GameSession(generator=RandomPieceGenerator(seed=11))
    prev = session.initialize()
    actions = [Action.LEFT, Action.RIGHT, Action.ROTATE, Action.SOFT_DROP, Action.HARD_DROP, Action.TICK]
    rng = random.Random(5)
    for _ in range(3000):
        state, _, done, _ = session.step(rng.choice(actions))
        assert all(0 <= row < (1 << 10) for row in state.board)
        assert len(state.board) == 20
        assert state.score >= prev.score
        assert state.level >= prev.level
        assert state.lines_cleared >= prev.lines_cleared
        if prev.game_over:
            assert state == prev
        prev = state
