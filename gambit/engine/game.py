from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from .board import (
    BLACK,
    CASTLING_PATHS,
    KING,
    KING_HOME,
    KINGSIDE,
    PAWN,
    PROMOTION_PIECES,
    QUEEN,
    QUEENSIDE,
    ROOK,
    STARTPOS_FEN,
    WHITE,
    Piece,
    Position,
    empty_position,
    find_king,
    is_square_attacked,
    opposite,
    pawn_direction,
    pieces_of,
    pseudo_legal_destinations,
)
from .move import Move, coords_to_square, square_to_coords, validate_square
from .state import (
    ACTIVE,
    CHECK,
    CHECKMATE,
    DRAW,
    FIFTY_MOVE_HALFMOVES,
    STALEMATE,
    CastlingRights,
    GameState,
)


logger = logging.getLogger(__name__)


class Game:
    """Chess engine owning one game state and its undo history.

    Responsibility: answer legal-move queries, validate and execute moves,
    derive check/mate/draw status, undo, and clone for speculative search.
    """

    def __init__(self, state: Optional[GameState] = None) -> None:
        self._state = state if state is not None else GameState()
        self._history: List[GameState] = []

    @classmethod
    def new(cls) -> "Game":
        return cls()

    @classmethod
    def from_position(
        cls,
        position: Position,
        turn: str = WHITE,
        *,
        castling_rights: Optional[CastlingRights] = None,
        en_passant_target: Optional[str] = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> "Game":
        """Create a game from an arbitrary setup.

        Castling rights default to all four and are pruned to those whose king
        and rook still stand on their home squares. Status flags are derived
        for ``turn``.

        Raises:
            InvalidSquareError: If ``position`` or ``en_passant_target`` names
                a malformed square.
            ValueError: If ``turn`` is not a color or counters are negative.
        """
        if turn not in (WHITE, BLACK):
            raise ValueError(f"invalid side to move: {turn!r}")
        if halfmove_clock < 0 or fullmove_number <= 0:
            raise ValueError("invalid move counters")
        full = empty_position()
        for sq, piece in position.items():
            full[validate_square(sq)] = piece
        if en_passant_target is not None:
            validate_square(en_passant_target)
        rights = _prune_castling_rights(full, castling_rights or CastlingRights())
        game = cls(
            GameState(
                position=full,
                turn=turn,
                castling_rights=rights,
                en_passant_target=en_passant_target,
                halfmove_clock=halfmove_clock,
                fullmove_number=fullmove_number,
            )
        )
        game._update_status()
        return game

    def to_fen(self) -> str:
        # Placeholder: FEN export is not implemented, always the start position.
        return STARTPOS_FEN

    # --- Queries ---
    def current_state(self) -> GameState:
        return self._state.copy()

    @property
    def state(self) -> GameState:
        """Live snapshot without copying; callers must not modify its position."""
        return self._state

    @property
    def turn(self) -> str:
        return self._state.turn

    @property
    def history_depth(self) -> int:
        return len(self._history)

    def piece_at(self, square: str) -> Optional[Piece]:
        return self._state.position[validate_square(square)]

    def legal_moves(self, square: str) -> List[str]:
        """Return legal destination squares for the piece on ``square``.

        Empty when the square is empty or holds a piece of the side not to move.

        Raises:
            InvalidSquareError: If ``square`` is malformed.
        """
        state = self._state
        piece = state.position[validate_square(square)]
        if piece is None or piece.color != state.turn:
            return []
        candidates = pseudo_legal_destinations(
            state.position, square, state.en_passant_target, state.castling_rights
        )
        return [to_sq for to_sq in candidates if not self._leaves_king_attacked(square, to_sq)]

    def all_legal_moves(self) -> List[Tuple[str, str]]:
        """Return every legal ``(from, to)`` pair for the side to move."""
        moves: List[Tuple[str, str]] = []
        for sq, _ in pieces_of(self._state.position, self._state.turn):
            moves.extend((sq, to_sq) for to_sq in self.legal_moves(sq))
        return moves

    def has_legal_moves(self) -> bool:
        position = self._state.position
        return any(self.legal_moves(sq) for sq, _ in pieces_of(position, self._state.turn))

    def is_attacked(self, square: str, by_color: str) -> bool:
        return is_square_attacked(self._state.position, validate_square(square), by_color)

    # --- State flags for protocol ---
    def in_check(self) -> bool:
        return self._state.check

    def checkmate(self) -> bool:
        return self._state.checkmate

    def stalemate(self) -> bool:
        return self._state.stalemate

    def is_draw(self) -> bool:
        return self._state.status == DRAW

    def is_over(self) -> bool:
        return self._state.checkmate or self._state.stalemate or self.is_draw()

    def move_history_uci(self) -> List[str]:
        return [m.to_uci() for m in self._state.move_history]

    # --- Legality filter ---
    def _leaves_king_attacked(self, from_sq: str, to_sq: str) -> bool:
        """Simulate ``from_sq -> to_sq`` in place and report whether the mover's king is attacked.

        Only the touched squares change, and they are restored before returning.
        """
        position = self._state.position
        mover = position[from_sq]
        assert mover is not None
        captured = position[to_sq]

        # En passant lifts a pawn that is not on the destination square.
        ep_victim_sq: Optional[str] = None
        ep_victim: Optional[Piece] = None
        if mover.type == PAWN and to_sq == self._state.en_passant_target and captured is None:
            to_row, to_col = square_to_coords(to_sq)
            ep_victim_sq = coords_to_square(to_row - pawn_direction(mover.color), to_col)
            ep_victim = position[ep_victim_sq]

        position[to_sq] = mover
        position[from_sq] = None
        if ep_victim_sq is not None:
            position[ep_victim_sq] = None
        try:
            king_sq = to_sq if mover.type == KING else find_king(position, mover.color)
            if king_sq is None:
                return True
            return is_square_attacked(position, king_sq, opposite(mover.color))
        finally:
            position[from_sq] = mover
            position[to_sq] = captured
            if ep_victim_sq is not None:
                position[ep_victim_sq] = ep_victim

    # --- Move execution ---
    def make_move(self, from_sq: str, to_sq: str, promotion: Optional[str] = None) -> Optional[Move]:
        """Validate and execute a move proposal.

        Args:
            from_sq (str): Origin square.
            to_sq (str): Destination square.
            promotion (Optional[str]): Piece type a promoting pawn becomes;
                defaults to a queen. Ignored for non-promoting moves.

        Returns:
            Optional[Move]: The executed move, or ``None`` if the proposal is
                not legal (state is left untouched).

        Raises:
            InvalidSquareError: If a square is malformed.
            ValueError: If ``promotion`` is not a promotable piece type.
        """
        validate_square(from_sq)
        validate_square(to_sq)
        if promotion is not None and promotion not in PROMOTION_PIECES:
            raise ValueError(f"invalid promotion piece: {promotion!r}")

        state = self._state
        piece = state.position[from_sq]
        if piece is None or piece.color != state.turn:
            logger.debug("rejected %s%s: no piece of side to move", from_sq, to_sq)
            return None
        if to_sq not in self.legal_moves(from_sq):
            logger.debug("rejected %s%s: not legal", from_sq, to_sq)
            return None

        self._history.append(state)

        color = piece.color
        position = dict(state.position)
        captured = position[to_sq]
        position[to_sq] = piece
        position[from_sq] = None

        from_row, from_col = square_to_coords(from_sq)
        to_row, to_col = square_to_coords(to_sq)
        rights = state.castling_rights
        castling: Optional[str] = None
        en_passant = False

        if piece.type == KING:
            if abs(to_col - from_col) == 2:
                castling = KINGSIDE if to_col > from_col else QUEENSIDE
                rook_sq = CASTLING_PATHS[(color, castling)][0]
                # The rook lands on the square the king crossed.
                rook_dest = coords_to_square(from_row, (from_col + to_col) // 2)
                position[rook_dest] = position[rook_sq]
                position[rook_sq] = None
            rights = rights.revoke_all(color)
        elif piece.type == PAWN and to_sq == state.en_passant_target:
            victim_sq = coords_to_square(to_row - pawn_direction(color), to_col)
            captured = position[victim_sq]
            position[victim_sq] = None
            en_passant = True
        rights = _prune_castling_rights(position, rights)

        en_passant_target: Optional[str] = None
        if piece.type == PAWN and abs(to_row - from_row) == 2:
            en_passant_target = coords_to_square((from_row + to_row) // 2, from_col)

        promoted: Optional[str] = None
        if piece.type == PAWN and to_row == (7 if piece.color == WHITE else 0):
            promoted = promotion or QUEEN
            position[to_sq] = Piece(promoted, color)

        move = Move(
            from_sq=from_sq,
            to_sq=to_sq,
            piece=piece.type,
            captured=captured.type if captured is not None else None,
            promotion=promoted,
            castling=castling,
            en_passant=en_passant,
        )

        captured_pieces = dict(state.captured_pieces)
        if captured is not None:
            captured_pieces[captured.color] = captured_pieces[captured.color] + (captured.type,)

        if piece.type == PAWN or captured is not None:
            halfmove_clock = 0
        else:
            halfmove_clock = state.halfmove_clock + 1

        self._state = GameState(
            position=position,
            turn=opposite(color),
            castling_rights=rights,
            en_passant_target=en_passant_target,
            halfmove_clock=halfmove_clock,
            fullmove_number=state.fullmove_number + (1 if color == BLACK else 0),
            move_history=state.move_history + (move,),
            captured_pieces=captured_pieces,
        )
        self._update_status()
        return move

    def _update_status(self) -> None:
        state = self._state
        king_sq = find_king(state.position, state.turn)
        in_check = king_sq is not None and is_square_attacked(
            state.position, king_sq, opposite(state.turn)
        )
        can_move = self.has_legal_moves()
        checkmate = in_check and not can_move
        stalemate = not in_check and not can_move

        if checkmate:
            status = CHECKMATE
        elif stalemate:
            status = STALEMATE
        elif in_check:
            status = CHECK
        else:
            status = ACTIVE
        if state.halfmove_clock >= FIFTY_MOVE_HALFMOVES:
            status = DRAW

        self._state = replace(
            state, status=status, check=in_check, checkmate=checkmate, stalemate=stalemate
        )

    # --- Undo / reset / clone ---
    def undo_last_move(self) -> bool:
        """Restore the snapshot taken before the last move.

        Returns:
            bool: False when there is nothing to undo.
        """
        if not self._history:
            return False
        self._state = self._history.pop()
        logger.debug("undo, %d snapshots left", len(self._history))
        return True

    def reset(self) -> None:
        self._state = GameState()
        self._history = []
        logger.debug("game reset")

    def clone(self) -> "Game":
        """Return an independent engine with equal state and undo history."""
        other = Game(self._state.copy())
        other._history = [s.copy() for s in self._history]
        return other


def _prune_castling_rights(position: Position, rights: CastlingRights) -> CastlingRights:
    """Clear rights whose king or rook no longer stands on its home square.

    Covers rooks that moved away as well as rooks captured in place.
    """
    for (color, side), (rook_sq, _, _, _) in CASTLING_PATHS.items():
        if not rights.allows(color, side):
            continue
        rook = position[rook_sq]
        king = position[KING_HOME[color]]
        rook_home = rook is not None and rook.type == ROOK and rook.color == color
        king_home = king is not None and king.type == KING and king.color == color
        if not (rook_home and king_home):
            rights = rights.revoke(color, side)
    return rights
