from __future__ import annotations

import copy

import pytest

from tetris_engine.game import FixedSequenceGenerator, GameSession, GameState, InvalidStateError


@pytest.fixture
def snapshot() -> dict:
    session = GameSession(generator=FixedSequenceGenerator("JS"))
    session.initialize()
    session.hard_drop()
    return session.get_state().to_dict()


def test_snapshot_layout(snapshot: dict) -> None:
    assert set(snapshot) == {
        "board", "current_piece", "next_piece", "score", "level", "lines_cleared", "game_over",
    }
    assert len(snapshot["board"]) == 20
    assert snapshot["current_piece"] == {"shape": "S", "x": 4, "y": 0, "rotation": 0}
    assert snapshot["next_piece"]["shape"] == "J"


def test_from_dict_restores_the_same_state(snapshot: dict) -> None:
    state = GameState.from_dict(snapshot)
    assert state.to_dict() == snapshot


@pytest.mark.parametrize(
    "mutate, match",
    [
        (lambda d: d.update(board=d["board"][:-1]), "20 rows"),
        (lambda d: d["board"].__setitem__(0, 1 << 12), "outside"),
        (lambda d: d["current_piece"].update(rotation=4), "rotation"),
        (lambda d: d["next_piece"].update(shape="Q"), "unknown shape"),
        (lambda d: d.pop("score"), "missing field 'score'"),
        (lambda d: d.update(level=0), "level"),
        (lambda d: d.update(lines_cleared=-1), "non-negative"),
        (lambda d: d.update(game_over="yes"), "bool"),
        (lambda d: d["current_piece"].update(x="4"), "integer"),
        (lambda d: d.update(current_piece=None), "malformed"),
        (lambda d: d["current_piece"].update(x=50), "current_piece has cells outside"),
        (lambda d: d["current_piece"].update(y=30), "current_piece has cells outside"),
        (lambda d: d["next_piece"].update(x=-1), "next_piece has cells outside"),
    ],
)
def test_from_dict_rejects_malformed_snapshots(snapshot: dict, mutate, match: str) -> None:
    bad = copy.deepcopy(snapshot)
    mutate(bad)
    with pytest.raises(InvalidStateError, match=match):
        GameState.from_dict(bad)


def test_invalid_state_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        GameState.from_dict({})


def test_from_dict_keeps_pieces_above_the_board(snapshot: dict) -> None:
    snapshot["current_piece"].update(shape="I", x=4, y=0, rotation=1)
    state = GameState.from_dict(snapshot)
    assert min(row for row, _ in state.current_piece.cells()) == -1
