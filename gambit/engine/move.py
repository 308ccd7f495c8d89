from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


FILES = "abcdefgh"
RANKS = "12345678"

PROMOTION_CHARS = {"q": "queen", "r": "rook", "b": "bishop", "n": "knight"}
PROMOTION_TO_CHAR = {v: k for k, v in PROMOTION_CHARS.items()}


class InvalidSquareError(ValueError):
    """Raised when a square identifier is not a file ``a``-``h`` plus rank ``1``-``8``."""


@dataclass(frozen=True)
class Move:
    """Executed move record.

    Attributes:
        from_sq (str): Origin square such as ``"e2"``.
        to_sq (str): Destination square.
        piece (str): Type of the moved piece before any promotion.
        captured (Optional[str]): Type of the captured piece, if any.
        promotion (Optional[str]): Piece type the pawn promoted to, if any.
        castling (Optional[str]): ``"kingside"`` or ``"queenside"`` for castling.
        en_passant (bool): True when the move captured en passant.
    """

    from_sq: str
    to_sq: str
    piece: str
    captured: Optional[str] = None
    promotion: Optional[str] = None
    castling: Optional[str] = None
    en_passant: bool = False

    def to_uci(self) -> str:
        """Serialize the move into long algebraic UCI form.

        Returns:
            str: Move encoded like ``"e2e4"`` or ``"e7e8q"``.
        """
        promo = PROMOTION_TO_CHAR[self.promotion] if self.promotion else ""
        return self.from_sq + self.to_sq + promo


def parse_uci(uci: str) -> Tuple[str, str, Optional[str]]:
    """Parse a UCI move string into a move proposal.

    Args:
        uci (str): Move encoded in long algebraic notation (e.g. ``"e2e4"``).

    Returns:
        Tuple[str, str, Optional[str]]: Origin, destination and the promotion
            piece type (``None`` when absent).

    Raises:
        ValueError: If the string has an invalid length or promotion piece.
        InvalidSquareError: If either square is malformed.
    """
    if len(uci) not in (4, 5):
        raise ValueError(f"invalid UCI move length: {uci!r}")
    from_sq = validate_square(uci[0:2])
    to_sq = validate_square(uci[2:4])
    promo: Optional[str] = None
    if len(uci) == 5:
        ch = uci[4].lower()
        if ch not in PROMOTION_CHARS:
            raise ValueError(f"invalid promotion piece: {ch!r}")
        promo = PROMOTION_CHARS[ch]
    return from_sq, to_sq, promo


def validate_square(s: str) -> str:
    """Return ``s`` unchanged if it names a board square.

    Raises:
        InvalidSquareError: If ``s`` is not a valid square.
    """
    if not isinstance(s, str) or len(s) != 2 or s[0] not in FILES or s[1] not in RANKS:
        raise InvalidSquareError(f"invalid square: {s!r}")
    return s


def square_to_coords(s: str) -> Tuple[int, int]:
    """Convert algebraic notation into a zero-based ``(row, col)`` pair.

    Row 0 is rank 1 and column 0 is file a.

    Raises:
        InvalidSquareError: If ``s`` is not a valid square.
    """
    validate_square(s)
    return int(s[1]) - 1, ord(s[0]) - ord("a")


def coords_to_square(row: int, col: int) -> str:
    """Convert a zero-based ``(row, col)`` pair into algebraic notation.

    Raises:
        InvalidSquareError: If the coordinates are off the board.
    """
    if not in_bounds(row, col):
        raise InvalidSquareError(f"invalid coordinates: ({row}, {col})")
    return FILES[col] + RANKS[row]


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < 8 and 0 <= col < 8


ALL_SQUARES: Tuple[str, ...] = tuple(f + r for r in RANKS for f in FILES)
