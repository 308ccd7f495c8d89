from __future__ import annotations

from gambit.engine.board import BLACK, KING, KNIGHT, PAWN, WHITE
from gambit.engine.game import Game


def test_halfmove_and_fullmove_counters_and_ep_clearing() -> None:
    game = Game.new()
    s = game.current_state()
    assert s.halfmove_clock == 0 and s.fullmove_number == 1

    # e2e4: pawn move resets halfmove, sets ep to e3, side -> black
    game.make_move("e2", "e4")
    s = game.current_state()
    assert s.halfmove_clock == 0
    assert s.turn == BLACK
    assert s.en_passant_target == "e3"
    assert s.fullmove_number == 1  # increments after black moves

    # g8f6: knight move increments halfmove, clears ep, side -> white, fullmove -> 2
    game.make_move("g8", "f6")
    s = game.current_state()
    assert s.halfmove_clock == 1
    assert s.turn == WHITE
    assert s.en_passant_target is None
    assert s.fullmove_number == 2

    # b1c3 then f6e4: capture resets halfmove
    game.make_move("b1", "c3")
    assert game.current_state().halfmove_clock == 2
    game.make_move("f6", "e4")
    s = game.current_state()
    assert s.halfmove_clock == 0
    assert s.captured_pieces == {WHITE: (PAWN,), BLACK: ()}
    assert s.fullmove_number == 2


def test_move_history_records_moves_in_order() -> None:
    game = Game.new()
    game.make_move("g1", "f3")
    game.make_move("b8", "c6")
    s = game.current_state()
    assert [m.to_uci() for m in s.move_history] == ["g1f3", "b8c6"]
    assert s.last_move is not None and s.last_move.piece == KNIGHT
    assert game.move_history_uci() == ["g1f3", "b8c6"]


def test_rejected_move_leaves_state_unchanged() -> None:
    game = Game.new()
    before = game.current_state()
    assert game.make_move("e2", "e5") is None  # too far
    assert game.make_move("e7", "e5") is None  # not black's turn
    assert game.make_move("e4", "e5") is None  # empty square
    assert game.make_move("a1", "a3") is None  # blocked rook
    assert game.current_state() == before
    assert game.history_depth == 0


def test_move_reports_capture() -> None:
    game = Game.new()
    for uci in ("e2e4", "d7d5"):
        game.make_move(uci[:2], uci[2:4])
    move = game.make_move("e4", "d5")
    assert move is not None
    assert move.captured == PAWN
    assert move.piece == PAWN
    assert move.castling is None and not move.en_passant


def test_exactly_one_king_per_color_throughout() -> None:
    game = Game.new()
    for uci in ("e2e4", "e7e5", "e1e2", "e8e7", "e2d3", "d7d6"):
        assert game.make_move(uci[:2], uci[2:4]) is not None
        position = game.current_state().position
        kings = [p.color for p in position.values() if p is not None and p.type == KING]
        assert sorted(kings) == [BLACK, WHITE]
