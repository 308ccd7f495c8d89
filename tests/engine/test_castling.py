from __future__ import annotations

from gambit.engine.board import BLACK, KING, ROOK, WHITE, Piece, position_from_symbols
from gambit.engine.game import Game
from gambit.engine.state import CastlingRights


CORNERS = {"e1": "K", "a1": "R", "h1": "R", "e8": "k", "a8": "r", "h8": "r"}


def corners_game(extra: dict[str, str] | None = None, turn: str = WHITE) -> Game:
    placement = dict(CORNERS)
    placement.update(extra or {})
    return Game.from_position(position_from_symbols(placement), turn)


def test_white_castling_available_when_clear_and_not_in_check() -> None:
    game = corners_game()
    ms = set(game.legal_moves("e1"))
    assert "g1" in ms
    assert "c1" in ms


def test_white_castling_blocked_when_in_check() -> None:
    # A black rook on e7 gives check on e1
    game = corners_game({"e7": "r"})
    assert game.in_check()
    ms = set(game.legal_moves("e1"))
    assert "g1" not in ms
    assert "c1" not in ms


def test_castling_through_attacked_square_is_illegal() -> None:
    # Black rook on f7 covers f1
    game = corners_game({"f7": "r"})
    ms = set(game.legal_moves("e1"))
    assert "g1" not in ms
    assert "c1" in ms


def test_queenside_b_file_only_needs_to_be_empty() -> None:
    # b1 attacked does not matter, the king never crosses it
    game = corners_game({"b7": "r"})
    assert "c1" in game.legal_moves("e1")
    # but a piece on b1 blocks
    game = corners_game({"b1": "N"})
    assert "c1" not in game.legal_moves("e1")


def test_castling_moves_rook_correctly() -> None:
    game = corners_game()
    move = game.make_move("e1", "g1")
    assert move is not None and move.castling == "kingside"
    assert game.piece_at("g1") == Piece(KING, WHITE)
    assert game.piece_at("f1") == Piece(ROOK, WHITE)
    assert game.piece_at("h1") is None
    rights = game.current_state().castling_rights
    assert not rights.white_kingside and not rights.white_queenside
    assert rights.black_kingside and rights.black_queenside


def test_black_queenside_castle_moves_rook_to_d8() -> None:
    game = corners_game(turn=BLACK)
    move = game.make_move("e8", "c8")
    assert move is not None and move.castling == "queenside"
    assert game.piece_at("c8") == Piece(KING, BLACK)
    assert game.piece_at("d8") == Piece(ROOK, BLACK)
    assert game.piece_at("a8") is None


def test_rook_move_revokes_only_that_side() -> None:
    game = corners_game()
    assert game.make_move("h1", "h2") is not None
    rights = game.current_state().castling_rights
    assert not rights.white_kingside
    assert rights.white_queenside


def test_king_move_revokes_both_sides_even_after_return() -> None:
    game = corners_game()
    game.make_move("e1", "e2")
    game.make_move("a8", "a7")
    game.make_move("e2", "e1")
    game.make_move("a7", "a8")
    assert "g1" not in game.legal_moves("e1")
    assert "c1" not in game.legal_moves("e1")


def test_capturing_rook_on_home_square_revokes_right() -> None:
    # White rook a1 captures a8; black loses queenside castling
    game = corners_game()
    game.make_move("a1", "a8")
    rights = game.current_state().castling_rights
    assert not rights.black_queenside
    assert rights.black_kingside
    assert not rights.white_queenside


def test_rights_missing_pieces_are_pruned_on_setup() -> None:
    game = Game.from_position(
        position_from_symbols({"e1": "K", "h1": "R", "e8": "k"}),
        castling_rights=CastlingRights(),
    )
    rights = game.current_state().castling_rights
    assert rights.white_kingside
    assert not rights.white_queenside
    assert not rights.black_kingside and not rights.black_queenside


def test_castling_requires_right() -> None:
    game = Game.from_position(
        position_from_symbols(CORNERS),
        castling_rights=CastlingRights(white_kingside=False),
    )
    ms = set(game.legal_moves("e1"))
    assert "g1" not in ms
    assert "c1" in ms
