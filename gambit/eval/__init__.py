"""Evaluation heuristics and related utilities.

Pure, deterministic, and side-effect free.
"""

from __future__ import annotations

from typing import Dict, Final, List

from gambit.engine.board import (
    BISHOP,
    BLACK,
    KING,
    KNIGHT,
    PAWN,
    QUEEN,
    ROOK,
    WHITE,
    count_pieces,
)
from gambit.engine.move import square_to_coords
from gambit.engine.state import DRAW, GameState


# Material values in centipawns
P_VAL: Final = 100
N_VAL: Final = 320
B_VAL: Final = 330
R_VAL: Final = 500
Q_VAL: Final = 900
K_VAL: Final = 20000

PIECE_VALUES: Final = {
    PAWN: P_VAL,
    KNIGHT: N_VAL,
    BISHOP: B_VAL,
    ROOK: R_VAL,
    QUEEN: Q_VAL,
    KING: K_VAL,
}

MATE_SCORE: Final = 100_000
CASTLING_RIGHTS_BONUS: Final = 20
CHECK_PENALTY: Final = 50
# King switches to the endgame table below this many pieces on the board
ENDGAME_PIECE_COUNT: Final = 10


def _mirror_sq(sq: int) -> int:
    # Flip vertically (rank mirror)
    f = sq % 8
    r = sq // 8
    return (7 - r) * 8 + f


# Piece-square tables (white perspective), centipawns.
# Index 0 is a1, 7 is h1, 56 is a8.
# fmt: off
PSQT_P: Final = [
    0,   0,   0,   0,   0,   0,   0,   0,
    5,  10,  10, -20, -20,  10,  10,   5,
    5,  -5, -10,   0,   0, -10,  -5,   5,
    0,   0,   0,  20,  20,   0,   0,   0,
    5,   5,  10,  25,  25,  10,   5,   5,
    10, 10,  20,  30,  30,  20,  10,  10,
    50, 50,  50,  50,  50,  50,  50,  50,
    0,   0,   0,   0,   0,   0,   0,   0,
]

PSQT_N: Final = [
    -50, -40, -30, -30, -30, -30, -40, -50,
    -40, -20,   0,   5,   5,   0, -20, -40,
    -30,   5,  10,  15,  15,  10,   5, -30,
    -30,   0,  15,  20,  20,  15,   0, -30,
    -30,   5,  15,  20,  20,  15,   5, -30,
    -30,   0,  10,  15,  15,  10,   0, -30,
    -40, -20,   0,   0,   0,   0, -20, -40,
    -50, -40, -30, -30, -30, -30, -40, -50,
]

PSQT_B: Final = [
    -20, -10, -10, -10, -10, -10, -10, -20,
    -10,   5,   0,   0,   0,   0,   5, -10,
    -10,  10,  10,  10,  10,  10,  10, -10,
    -10,   0,  10,  10,  10,  10,   0, -10,
    -10,   5,   5,  10,  10,   5,   5, -10,
    -10,   0,   5,  10,  10,   5,   0, -10,
    -10,   0,   0,   0,   0,   0,   0, -10,
    -20, -10, -10, -10, -10, -10, -10, -20,
]

PSQT_R: Final = [
     0,   0,   0,   5,   5,   0,   0,   0,
    -5,   0,   0,   0,   0,   0,   0,  -5,
    -5,   0,   0,   0,   0,   0,   0,  -5,
    -5,   0,   0,   0,   0,   0,   0,  -5,
    -5,   0,   0,   0,   0,   0,   0,  -5,
    -5,   0,   0,   0,   0,   0,   0,  -5,
     5,  10,  10,  10,  10,  10,  10,   5,
     0,   0,   0,   0,   0,   0,   0,   0,
]

PSQT_Q: Final = [
    -20, -10, -10,  -5,  -5, -10, -10, -20,
    -10,   0,   5,   0,   0,   0,   0, -10,
    -10,   5,   5,   5,   5,   5,   0, -10,
      0,   0,   5,   5,   5,   5,   0,  -5,
     -5,   0,   5,   5,   5,   5,   0,  -5,
    -10,   0,   5,   5,   5,   5,   0, -10,
    -10,   0,   0,   0,   0,   0,   0, -10,
    -20, -10, -10,  -5,  -5, -10, -10, -20,
]

PSQT_K: Final = [
     20,  30,  10,   0,   0,  10,  30,  20,
     20,  20,   0,   0,   0,   0,  20,  20,
    -10, -20, -20, -20, -20, -20, -20, -10,
    -20, -30, -30, -40, -40, -30, -30, -20,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
]

PSQT_K_EG: Final = [
    -50, -30, -30, -30, -30, -30, -30, -50,
    -30, -30,   0,   0,   0,   0, -30, -30,
    -30, -10,  20,  30,  30,  20, -10, -30,
    -30, -10,  30,  40,  40,  30, -10, -30,
    -30, -10,  30,  40,  40,  30, -10, -30,
    -30, -10,  20,  30,  30,  20, -10, -30,
    -30, -20, -10,   0,   0, -10, -20, -30,
    -50, -40, -30, -20, -20, -30, -40, -50,
]
# fmt: on

PSQT: Final[Dict[str, List[int]]] = {
    PAWN: PSQT_P,
    KNIGHT: PSQT_N,
    BISHOP: PSQT_B,
    ROOK: PSQT_R,
    QUEEN: PSQT_Q,
}


def piece_square_value(kind: str, color: str, square: str, endgame: bool = False) -> int:
    """Return the table bonus for a piece from its own side's perspective."""
    row, col = square_to_coords(square)
    idx = row * 8 + col
    if color == BLACK:
        idx = _mirror_sq(idx)
    if kind == KING:
        return PSQT_K_EG[idx] if endgame else PSQT_K[idx]
    return PSQT[kind][idx]


def evaluate(state: GameState) -> int:
    """Return a material + PSQT evaluation in centipawns.

    Positive means advantage for White. Checkmate scores +/-MATE_SCORE in
    favor of the side that delivered it; stalemate and draws score 0.
    """
    if state.checkmate:
        return -MATE_SCORE if state.turn == WHITE else MATE_SCORE
    if state.stalemate or state.status == DRAW:
        return 0

    endgame = count_pieces(state.position) < ENDGAME_PIECE_COUNT

    score = 0
    for sq, piece in state.position.items():
        if piece is None:
            continue
        value = PIECE_VALUES[piece.type] + piece_square_value(
            piece.type, piece.color, sq, endgame
        )
        score += value if piece.color == WHITE else -value

    # Castling rights bonus
    rights = state.castling_rights
    if rights.any_for(WHITE):
        score += CASTLING_RIGHTS_BONUS
    if rights.any_for(BLACK):
        score -= CASTLING_RIGHTS_BONUS

    # Check penalty against the side to move
    if state.check:
        score += -CHECK_PENALTY if state.turn == WHITE else CHECK_PENALTY

    return score
