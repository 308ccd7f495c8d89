from __future__ import annotations

from dataclasses import replace

from gambit.engine.board import BLACK, KING, WHITE, position_from_symbols
from gambit.engine.game import Game
from gambit.eval import (
    CASTLING_RIGHTS_BONUS,
    CHECK_PENALTY,
    MATE_SCORE,
    evaluate,
    piece_square_value,
)
from gambit.engine.state import ACTIVE, CastlingRights


def test_king_table_switches_in_endgame() -> None:
    # Central king is punished in the middlegame and rewarded in the endgame
    assert piece_square_value(KING, WHITE, "e4") < 0
    assert piece_square_value(KING, WHITE, "e4", endgame=True) > 0
    assert piece_square_value(KING, BLACK, "e5", endgame=True) == piece_square_value(
        KING, WHITE, "e4", endgame=True
    )


def test_bare_kings_use_endgame_table() -> None:
    central = Game.from_position(position_from_symbols({"e4": "K", "e8": "k"}))
    corner = Game.from_position(position_from_symbols({"a1": "K", "e8": "k"}))
    assert evaluate(central.current_state()) > evaluate(corner.current_state())


def test_full_board_uses_middlegame_king_table() -> None:
    game = Game.new()
    for uci in ("e2e4", "e7e5", "e1e2"):
        game.make_move(uci[:2], uci[2:4])
    # White king walked forward and lost its castling rights
    assert evaluate(game.current_state()) < 0


def test_castling_rights_bonus() -> None:
    placement = {"e1": "K", "h1": "R", "e8": "k", "h8": "r"}
    with_rights = Game.from_position(position_from_symbols(placement))
    without = Game.from_position(
        position_from_symbols(placement),
        castling_rights=CastlingRights(white_kingside=False),
    )
    diff = evaluate(with_rights.current_state()) - evaluate(without.current_state())
    assert diff == CASTLING_RIGHTS_BONUS


def test_check_penalty_applies_to_side_to_move() -> None:
    game = Game.new()
    for uci in ("e2e4", "f7f6", "d1h5"):
        game.make_move(uci[:2], uci[2:4])
    state = game.current_state()
    assert state.check and state.turn == BLACK
    calm = replace(state, check=False, status=ACTIVE)
    assert evaluate(state) - evaluate(calm) == CHECK_PENALTY


def test_terminal_scores() -> None:
    game = Game.new()
    for uci in ("f2f3", "e7e5", "g2g4", "d8h4"):
        game.make_move(uci[:2], uci[2:4])
    assert evaluate(game.current_state()) == -MATE_SCORE

    stalemate = Game.from_position(
        position_from_symbols({"a8": "k", "b6": "Q", "c1": "K"}), BLACK
    )
    assert evaluate(stalemate.current_state()) == 0

    draw = Game.from_position(
        position_from_symbols({"e1": "K", "a3": "R", "e8": "k"}), halfmove_clock=100
    )
    assert evaluate(draw.current_state()) == 0
