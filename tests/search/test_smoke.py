from __future__ import annotations

import random

import pytest

from gambit.engine.board import position_from_symbols
from gambit.engine.game import Game
from gambit.search.service import SearchService


def _is_legal(game: Game, move) -> bool:
    return move.to_sq in game.legal_moves(move.from_sq)


def test_search_returns_legal_move_at_depth_2_startpos() -> None:
    game = Game.new()
    service = SearchService()

    res = service.search(game, depth=2)
    assert res.best_move is not None
    assert _is_legal(game, res.best_move), "best move must be legal"
    assert res.nodes > 20
    assert res.depth == 2


def test_search_returns_legal_move_at_depth_2_opening() -> None:
    # Both sides developed, castling available to white
    game = Game.new()
    for uci in ("e2e4", "e7e5", "g1f3", "b8c6", "f1c4", "f8c5"):
        game.make_move(uci[:2], uci[2:4])
    service = SearchService()

    res = service.search(game, depth=2)
    assert res.best_move is not None
    assert _is_legal(game, res.best_move), "best move must be legal"


def test_search_never_touches_callers_game() -> None:
    game = Game.new()
    game.make_move("e2", "e4")
    before = game.current_state()
    SearchService().search(game, depth=2)
    assert game.current_state() == before
    assert game.history_depth == 1


def test_seeded_searches_agree() -> None:
    game = Game.new()
    a = SearchService(random.Random(42)).find_best_move(game, depth=1)
    b = SearchService(random.Random(42)).find_best_move(game, depth=1)
    assert a is not None and b is not None
    assert a.to_uci() == b.to_uci()


def test_black_to_move_gets_black_move() -> None:
    game = Game.new()
    game.make_move("d2", "d4")
    move = SearchService(random.Random(1)).find_best_move(game, depth=1)
    assert move is not None
    assert move.from_sq[1] in "78"


def test_takes_hanging_queen() -> None:
    placement = {"e1": "K", "d1": "R", "e8": "k", "d5": "q"}
    game = Game.from_position(position_from_symbols(placement))
    move = SearchService(random.Random(3)).find_best_move(game, depth=2)
    assert move is not None
    assert move.to_uci() == "d1d5"


@pytest.mark.parametrize("depth", [0, -1, True, 1.5])
def test_invalid_depth_raises(depth) -> None:
    with pytest.raises(ValueError):
        SearchService().search(Game.new(), depth=depth)
