from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

from gambit.engine.board import WHITE
from gambit.engine.game import Game
from gambit.engine.move import Move
from gambit.eval import evaluate


logger = logging.getLogger(__name__)

INF = 10_000_000


@dataclass
class SearchResult:
    best_move: Optional[Move]
    score: Optional[int]
    nodes: int
    depth: int
    time_ms: int


class SearchService:
    """Fixed-depth minimax with alpha-beta pruning.

    Every search runs on a private clone of the game, so the caller's game is
    never touched. Candidate moves are shuffled with ``rng`` before they are
    tried; pass a seeded ``random.Random`` for reproducible choices.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    def find_best_move(self, game: Game, depth: int = 3) -> Optional[Move]:
        """Return the best move for the side to move, or ``None`` if it has none."""
        return self.search(game, depth).best_move

    def search(self, game: Game, depth: int = 3) -> SearchResult:
        if isinstance(depth, bool) or not isinstance(depth, int) or depth < 1:
            raise ValueError(f"depth must be a positive integer, got {depth!r}")

        start = time.perf_counter()
        work = game.clone()
        maximizing = work.turn == WHITE
        nodes = 0

        def candidates() -> List[Tuple[str, str]]:
            moves = work.all_legal_moves()
            self._rng.shuffle(moves)
            return moves

        def minimax(d: int, alpha: int, beta: int, maximizing: bool) -> int:
            nonlocal nodes
            nodes += 1
            state = work.state
            if d == 0 or state.checkmate or state.stalemate:
                return evaluate(state)
            moves = candidates()
            if not moves:
                return evaluate(state)

            best = -INF if maximizing else INF
            for from_sq, to_sq in moves:
                if work.make_move(from_sq, to_sq) is None:
                    continue
                value = minimax(d - 1, alpha, beta, not maximizing)
                work.undo_last_move()
                if maximizing:
                    best = max(best, value)
                    alpha = max(alpha, value)
                else:
                    best = min(best, value)
                    beta = min(beta, value)
                if beta <= alpha:
                    break
            return best

        best_move: Optional[Move] = None
        best_value = -INF if maximizing else INF
        for from_sq, to_sq in candidates():
            move = work.make_move(from_sq, to_sq)
            if move is None:
                continue
            if maximizing:
                value = minimax(depth - 1, best_value, INF, False)
            else:
                value = minimax(depth - 1, -INF, best_value, True)
            work.undo_last_move()
            if best_move is None or (value > best_value if maximizing else value < best_value):
                best_value = value
                best_move = move

        time_ms = int((time.perf_counter() - start) * 1000)
        score = best_value if best_move is not None else None
        logger.info(
            "search done",
            extra={
                "depth": depth,
                "best_move": best_move.to_uci() if best_move else None,
                "score": score,
                "nodes": nodes,
                "time_ms": time_ms,
            },
        )
        return SearchResult(
            best_move=best_move, score=score, nodes=nodes, depth=depth, time_ms=time_ms
        )
