from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

from .board import BLACK, KINGSIDE, QUEENSIDE, WHITE, Position, initial_position
from .move import Move


ACTIVE = "active"
CHECK = "check"
CHECKMATE = "checkmate"
STALEMATE = "stalemate"
DRAW = "draw"

# 50 full moves without a pawn advance or capture
FIFTY_MOVE_HALFMOVES = 100


@dataclass(frozen=True)
class CastlingRights:
    """Per-color kingside/queenside castling flags.

    Rights only ever go from True to False over a game.
    """

    white_kingside: bool = True
    white_queenside: bool = True
    black_kingside: bool = True
    black_queenside: bool = True

    def allows(self, color: str, side: str) -> bool:
        return getattr(self, f"{color}_{side}")

    def any_for(self, color: str) -> bool:
        return self.allows(color, KINGSIDE) or self.allows(color, QUEENSIDE)

    def revoke(self, color: str, side: str) -> "CastlingRights":
        if not self.allows(color, side):
            return self
        return replace(self, **{f"{color}_{side}": False})

    def revoke_all(self, color: str) -> "CastlingRights":
        return self.revoke(color, KINGSIDE).revoke(color, QUEENSIDE)

    def to_dict(self) -> Dict[str, Dict[str, bool]]:
        return {
            color: {side: self.allows(color, side) for side in (KINGSIDE, QUEENSIDE)}
            for color in (WHITE, BLACK)
        }


def _no_captures() -> Dict[str, Tuple[str, ...]]:
    return {WHITE: (), BLACK: ()}


@dataclass(frozen=True)
class GameState:
    """Complete snapshot of a game.

    ``captured_pieces`` is keyed by the color of the captured pieces.
    Snapshots pushed onto an engine's undo history are never mutated again.
    """

    position: Position = field(default_factory=initial_position)
    turn: str = WHITE
    castling_rights: CastlingRights = field(default_factory=CastlingRights)
    en_passant_target: Optional[str] = None
    halfmove_clock: int = 0
    fullmove_number: int = 1
    move_history: Tuple[Move, ...] = ()
    captured_pieces: Dict[str, Tuple[str, ...]] = field(default_factory=_no_captures)
    status: str = ACTIVE
    check: bool = False
    checkmate: bool = False
    stalemate: bool = False

    def copy(self) -> "GameState":
        """Return a value copy with its own position and capture mappings."""
        return replace(
            self,
            position=dict(self.position),
            captured_pieces=dict(self.captured_pieces),
        )

    @property
    def last_move(self) -> Optional[Move]:
        return self.move_history[-1] if self.move_history else None
