from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .move import ALL_SQUARES, coords_to_square, in_bounds, square_to_coords


STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

WHITE = "white"
BLACK = "black"

PAWN = "pawn"
KNIGHT = "knight"
BISHOP = "bishop"
ROOK = "rook"
QUEEN = "queen"
KING = "king"

PROMOTION_PIECES = (QUEEN, ROOK, BISHOP, KNIGHT)

KINGSIDE = "kingside"
QUEENSIDE = "queenside"

KNIGHT_OFFSETS = ((-2, -1), (-2, 1), (-1, -2), (-1, 2), (1, -2), (1, 2), (2, -1), (2, 1))
KING_OFFSETS = ((-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1))
DIAGONALS = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ORTHOGONALS = ((-1, 0), (1, 0), (0, -1), (0, 1))

# Castling geometry per color and side: rook home, squares that must be empty,
# squares the king crosses (must not be attacked), king destination.
CASTLING_PATHS: Dict[Tuple[str, str], Tuple[str, Tuple[str, ...], Tuple[str, ...], str]] = {
    (WHITE, KINGSIDE): ("h1", ("f1", "g1"), ("f1", "g1"), "g1"),
    (WHITE, QUEENSIDE): ("a1", ("d1", "c1", "b1"), ("d1", "c1"), "c1"),
    (BLACK, KINGSIDE): ("h8", ("f8", "g8"), ("f8", "g8"), "g8"),
    (BLACK, QUEENSIDE): ("a8", ("d8", "c8", "b8"), ("d8", "c8"), "c8"),
}
KING_HOME = {WHITE: "e1", BLACK: "e8"}


@dataclass(frozen=True)
class Piece:
    type: str
    color: str

    def symbol(self) -> str:
        ch = "n" if self.type == KNIGHT else self.type[0]
        return ch.upper() if self.color == WHITE else ch


Position = Dict[str, Optional[Piece]]

_BACK_RANK = (ROOK, KNIGHT, BISHOP, QUEEN, KING, BISHOP, KNIGHT, ROOK)


def opposite(color: str) -> str:
    return BLACK if color == WHITE else WHITE


def pawn_direction(color: str) -> int:
    return 1 if color == WHITE else -1


def initial_position() -> Position:
    """Return the standard starting setup as a full 64-square mapping."""
    position: Position = {sq: None for sq in ALL_SQUARES}
    for col, kind in enumerate(_BACK_RANK):
        position[coords_to_square(0, col)] = Piece(kind, WHITE)
        position[coords_to_square(1, col)] = Piece(PAWN, WHITE)
        position[coords_to_square(6, col)] = Piece(PAWN, BLACK)
        position[coords_to_square(7, col)] = Piece(kind, BLACK)
    return position


def empty_position() -> Position:
    return {sq: None for sq in ALL_SQUARES}


_SYMBOL_TO_TYPE = {"p": PAWN, "n": KNIGHT, "b": BISHOP, "r": ROOK, "q": QUEEN, "k": KING}


def position_from_symbols(placement: Dict[str, str]) -> Position:
    """Build a full position from ``{"e1": "K", "e8": "k", ...}``.

    Uppercase letters are white pieces, lowercase black.

    Raises:
        ValueError: If a symbol is not a piece letter.
        InvalidSquareError: If a square is malformed.
    """
    position = empty_position()
    for sq, symbol in placement.items():
        kind = _SYMBOL_TO_TYPE.get(symbol.lower()) if len(symbol) == 1 else None
        if kind is None:
            raise ValueError(f"invalid piece symbol: {symbol!r}")
        square_to_coords(sq)
        position[sq] = Piece(kind, WHITE if symbol.isupper() else BLACK)
    return position


def find_king(position: Position, color: str) -> Optional[str]:
    for sq, piece in position.items():
        if piece is not None and piece.type == KING and piece.color == color:
            return sq
    return None


def pieces_of(position: Position, color: str) -> List[Tuple[str, Piece]]:
    return [(sq, p) for sq, p in position.items() if p is not None and p.color == color]


def count_pieces(position: Position) -> int:
    return sum(1 for p in position.values() if p is not None)


def board_to_text(position: Position) -> str:
    """Render the position as eight ranks of piece letters, rank 8 first."""
    rows = []
    for row in range(7, -1, -1):
        line = []
        for col in range(8):
            piece = position[coords_to_square(row, col)]
            line.append(piece.symbol() if piece is not None else ".")
        rows.append(" ".join(line))
    return "\n".join(rows)


# --- Move generation ---
def pseudo_legal_destinations(
    position: Position,
    square: str,
    en_passant_target: Optional[str] = None,
    castling_rights=None,
) -> List[str]:
    """Return destinations reachable by the piece on ``square``, ignoring self-check.

    Args:
        position (Position): Full board mapping.
        square (str): Square holding the piece to move.
        en_passant_target (Optional[str]): Current en passant target square.
        castling_rights: ``CastlingRights`` of the game; castling moves are
            generated only when given.

    Returns:
        List[str]: Destination squares, empty if ``square`` is empty.
    """
    piece = position[square]
    if piece is None:
        return []
    if piece.type == PAWN:
        return _pawn_moves(position, square, piece, en_passant_target)
    if piece.type == KNIGHT:
        return _step_moves(position, square, piece, KNIGHT_OFFSETS)
    if piece.type == BISHOP:
        return _slide_moves(position, square, piece, DIAGONALS)
    if piece.type == ROOK:
        return _slide_moves(position, square, piece, ORTHOGONALS)
    if piece.type == QUEEN:
        return _slide_moves(position, square, piece, DIAGONALS + ORTHOGONALS)
    moves = _step_moves(position, square, piece, KING_OFFSETS)
    if castling_rights is not None:
        moves.extend(_castling_moves(position, square, piece, castling_rights))
    return moves


def _pawn_moves(
    position: Position, square: str, piece: Piece, en_passant_target: Optional[str]
) -> List[str]:
    moves: List[str] = []
    row, col = square_to_coords(square)
    direction = pawn_direction(piece.color)
    start_row = 1 if piece.color == WHITE else 6

    # Single and double push
    one = row + direction
    if in_bounds(one, col):
        one_sq = coords_to_square(one, col)
        if position[one_sq] is None:
            moves.append(one_sq)
            if row == start_row:
                two_sq = coords_to_square(row + 2 * direction, col)
                if position[two_sq] is None:
                    moves.append(two_sq)

    # Captures, including onto the en passant target
    for dc in (-1, 1):
        if not in_bounds(one, col + dc):
            continue
        target_sq = coords_to_square(one, col + dc)
        target = position[target_sq]
        if target is not None and target.color != piece.color:
            moves.append(target_sq)
        elif target is None and target_sq == en_passant_target:
            moves.append(target_sq)
    return moves


def _step_moves(
    position: Position, square: str, piece: Piece, offsets: Tuple[Tuple[int, int], ...]
) -> List[str]:
    moves: List[str] = []
    row, col = square_to_coords(square)
    for dr, dc in offsets:
        tr, tc = row + dr, col + dc
        if not in_bounds(tr, tc):
            continue
        to_sq = coords_to_square(tr, tc)
        target = position[to_sq]
        if target is None or target.color != piece.color:
            moves.append(to_sq)
    return moves


def _slide_moves(
    position: Position, square: str, piece: Piece, dirs: Tuple[Tuple[int, int], ...]
) -> List[str]:
    moves: List[str] = []
    row, col = square_to_coords(square)
    for dr, dc in dirs:
        tr, tc = row, col
        while True:
            tr += dr
            tc += dc
            if not in_bounds(tr, tc):
                break
            to_sq = coords_to_square(tr, tc)
            target = position[to_sq]
            if target is None:
                moves.append(to_sq)
                continue
            if target.color != piece.color:
                moves.append(to_sq)
            break
    return moves


def _castling_moves(position: Position, square: str, piece: Piece, castling_rights) -> List[str]:
    moves: List[str] = []
    if square != KING_HOME[piece.color]:
        return moves
    enemy = opposite(piece.color)
    if is_square_attacked(position, square, enemy):
        return moves
    for side in (KINGSIDE, QUEENSIDE):
        if not castling_rights.allows(piece.color, side):
            continue
        rook_sq, between, transit, dest = CASTLING_PATHS[(piece.color, side)]
        rook = position[rook_sq]
        if rook is None or rook.type != ROOK or rook.color != piece.color:
            continue
        if any(position[sq] is not None for sq in between):
            continue
        if any(is_square_attacked(position, sq, enemy) for sq in transit):
            continue
        moves.append(dest)
    return moves


# --- Attack detection ---
def is_square_attacked(position: Position, square: str, by_color: str) -> bool:
    """Return True if a piece of ``by_color`` attacks ``square``.

    Looks outward from ``square`` for pawns, knights, the king and sliders,
    so it never generates castling or consults legality.
    """
    row, col = square_to_coords(square)

    # Pawns attack diagonally forward, so look one rank behind from their side
    pr = row - pawn_direction(by_color)
    for dc in (-1, 1):
        if in_bounds(pr, col + dc):
            p = position[coords_to_square(pr, col + dc)]
            if p is not None and p.color == by_color and p.type == PAWN:
                return True

    for offsets, kind in ((KNIGHT_OFFSETS, KNIGHT), (KING_OFFSETS, KING)):
        for dr, dc in offsets:
            tr, tc = row + dr, col + dc
            if in_bounds(tr, tc):
                p = position[coords_to_square(tr, tc)]
                if p is not None and p.color == by_color and p.type == kind:
                    return True

    for dirs, kinds in ((DIAGONALS, (BISHOP, QUEEN)), (ORTHOGONALS, (ROOK, QUEEN))):
        for dr, dc in dirs:
            tr, tc = row, col
            while True:
                tr += dr
                tc += dc
                if not in_bounds(tr, tc):
                    break
                p = position[coords_to_square(tr, tc)]
                if p is None:
                    continue
                if p.color == by_color and p.type in kinds:
                    return True
                break
    return False
