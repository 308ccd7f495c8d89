from __future__ import annotations

from gambit.engine.board import BLACK, KNIGHT, PAWN, WHITE, position_from_symbols
from gambit.engine.game import Game
from gambit.eval import evaluate, piece_square_value


def _mirror_and_swap_colors(placement: dict[str, str]) -> dict[str, str]:
    # Mirror ranks and swap piece colors
    return {f"{sq[0]}{9 - int(sq[1])}": sym.swapcase() for sq, sym in placement.items()}


def test_start_position_is_balanced() -> None:
    assert evaluate(Game.new().current_state()) == 0


def test_knight_centralization_scores_higher() -> None:
    # White knight on d4 should score higher than on a1 (material equal)
    center = Game.from_position(position_from_symbols({"e8": "k", "d4": "N", "e1": "K"}))
    rim = Game.from_position(position_from_symbols({"e8": "k", "a1": "N", "e1": "K"}))
    assert evaluate(center.current_state()) > evaluate(rim.current_state())


def test_eval_mirror_swap_negates_score() -> None:
    # A modest imbalanced PSQT situation with equal material, kings included
    placement = {"e8": "k", "c5": "n", "d4": "B", "e1": "K", "g2": "P", "b6": "p"}
    game = Game.from_position(position_from_symbols(placement), WHITE)
    mirrored = Game.from_position(
        position_from_symbols(_mirror_and_swap_colors(placement)), BLACK
    )
    assert evaluate(mirrored.current_state()) == -evaluate(game.current_state())


def test_black_tables_are_mirrored() -> None:
    assert piece_square_value(KNIGHT, WHITE, "d4") == piece_square_value(KNIGHT, BLACK, "d5")
    assert piece_square_value(PAWN, WHITE, "a7") == 50
    assert piece_square_value(PAWN, BLACK, "a2") == 50


def test_material_dominates() -> None:
    up_a_rook = Game.from_position(position_from_symbols({"e8": "k", "e1": "K", "a3": "R"}))
    assert evaluate(up_a_rook.current_state()) > 400
