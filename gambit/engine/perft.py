from __future__ import annotations

from typing import Dict

from .board import PAWN, PROMOTION_PIECES
from .game import Game
from .move import square_to_coords


def perft(game: Game, depth: int) -> int:
    """Compute perft node count for `game` at `depth`.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Promotions count once per promotion piece. Runs on a clone, so `game`
    is left untouched.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    return _perft(game.clone(), depth)


def perft_divide(game: Game, depth: int) -> Dict[str, int]:
    """Return perft counts per root move, keyed by UCI string."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    work = game.clone()
    out: Dict[str, int] = {}
    for from_sq, to_sq in work.all_legal_moves():
        for promo in _promotion_choices(work, from_sq, to_sq):
            mv = work.make_move(from_sq, to_sq, promo)
            assert mv is not None
            out[mv.to_uci()] = _perft(work, depth - 1)
            work.undo_last_move()
    return out


def _perft(game: Game, depth: int) -> int:
    if depth == 0:
        return 1
    nodes = 0
    for from_sq, to_sq in game.all_legal_moves():
        choices = _promotion_choices(game, from_sq, to_sq)
        if depth == 1:
            nodes += len(choices)
            continue
        for promo in choices:
            game.make_move(from_sq, to_sq, promo)
            nodes += _perft(game, depth - 1)
            game.undo_last_move()
    return nodes


def _promotion_choices(game: Game, from_sq: str, to_sq: str):
    piece = game.piece_at(from_sq)
    row, _ = square_to_coords(to_sq)
    if piece is not None and piece.type == PAWN and row in (0, 7):
        return PROMOTION_PIECES
    return (None,)
