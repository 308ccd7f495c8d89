from __future__ import annotations

import logging
import random
from typing import Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ConfigDict, Field

from .error import (
    exception_handler,
    http_exception_handler,
    invalid_square_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from ...config import Settings
from ...engine.game import Game
from ...engine.move import InvalidSquareError, Move, parse_uci, validate_square
from ...search.service import SearchService
from .session import GameSession, InMemorySessionStore


logger = logging.getLogger(__name__)

PromotionPiece = Literal["queen", "rook", "bishop", "knight"]


class MoveRequest(BaseModel):
    """Either a UCI string in ``move`` or ``from``/``to`` squares."""

    model_config = ConfigDict(populate_by_name=True)

    move: Optional[str] = Field(default=None, description="UCI move string, e.g., e2e4")
    from_sq: Optional[str] = Field(default=None, alias="from", description="Origin square")
    to_sq: Optional[str] = Field(default=None, alias="to", description="Destination square")
    promotion: Optional[PromotionPiece] = None


class SearchRequest(BaseModel):
    depth: Optional[int] = Field(default=None, ge=1, le=6)


class PieceModel(BaseModel):
    type: str
    color: str


class MoveModel(BaseModel):
    uci: str
    from_sq: str = Field(serialization_alias="from")
    to_sq: str = Field(serialization_alias="to")
    piece: str
    captured: Optional[str] = None
    promotion: Optional[str] = None
    castling: Optional[str] = None
    en_passant: bool = False


class GameState(BaseModel):
    game_id: str
    fen: str
    board: Dict[str, PieceModel]
    turn: str
    castling_rights: Dict[str, Dict[str, bool]]
    en_passant_target: Optional[str]
    halfmove_clock: int
    fullmove_number: int
    move_history: List[str]
    last_move: Optional[str]
    captured_pieces: Dict[str, List[str]]
    status: str
    in_check: bool
    checkmate: bool
    stalemate: bool
    draw: bool


class LegalMovesResponse(BaseModel):
    square: str
    moves: List[str]


class AIMoveResponse(BaseModel):
    move: Optional[MoveModel]
    state: GameState


class SearchResponse(BaseModel):
    best_move: Optional[str]
    score: Optional[int]
    nodes: int
    depth: int
    time_ms: int


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="Gambit Chess API", version="0.1.0")

    # Basic logging setup
    logging.basicConfig(level=settings.log_level)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    # Preserve FastAPI 422 validation behavior and structured HTTP errors
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(InvalidSquareError, invalid_square_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore()
    service = SearchService(random.Random(settings.search_seed))
    app.state.settings = settings
    app.state.store = store

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=GameState)
    async def create_game() -> GameState:
        game_id = store.create(Game.new())
        session = _require_session(store, game_id)
        logger.info("game created", extra={"game_id": game_id})
        return _state_response(game_id, session.game)

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        session = _require_session(store, game_id)
        with session.lock:
            return _state_response(game_id, session.game)

    @app.get("/api/games/{game_id}/moves/{square}", response_model=LegalMovesResponse)
    async def legal_moves(game_id: str, square: str) -> LegalMovesResponse:
        session = _require_session(store, game_id)
        with session.lock:
            moves = session.game.legal_moves(validate_square(square))
        return LegalMovesResponse(square=square, moves=moves)

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    async def make_move(game_id: str, req: MoveRequest) -> GameState:
        session = _require_session(store, game_id)
        from_sq, to_sq, promotion = _proposal(req)
        with session.lock:
            move = session.game.make_move(from_sq, to_sq, promotion)
            if move is None:
                raise HTTPException(status_code=400, detail="illegal move")
            return _state_response(game_id, session.game)

    @app.post("/api/games/{game_id}/undo", response_model=GameState)
    async def undo(game_id: str) -> GameState:
        session = _require_session(store, game_id)
        with session.lock:
            if not session.game.undo_last_move():
                raise HTTPException(status_code=400, detail="no moves to undo")
            return _state_response(game_id, session.game)

    @app.post("/api/games/{game_id}/reset", response_model=GameState)
    async def reset(game_id: str) -> GameState:
        session = _require_session(store, game_id)
        with session.lock:
            session.game.reset()
            return _state_response(game_id, session.game)

    @app.post("/api/games/{game_id}/ai-move", response_model=AIMoveResponse)
    async def ai_move(game_id: str, req: Optional[SearchRequest] = None) -> AIMoveResponse:
        session = _require_session(store, game_id)
        depth = (req.depth if req else None) or settings.search_depth
        with session.lock:
            game = session.game
            best = service.find_best_move(game, depth=depth)
            played = None
            if best is not None:
                played = game.make_move(best.from_sq, best.to_sq, best.promotion)
            return AIMoveResponse(
                move=_move_model(played) if played is not None else None,
                state=_state_response(game_id, game),
            )

    @app.post("/api/games/{game_id}/search", response_model=SearchResponse)
    async def search(game_id: str, req: Optional[SearchRequest] = None) -> SearchResponse:
        session = _require_session(store, game_id)
        depth = (req.depth if req else None) or settings.search_depth
        with session.lock:
            res = service.search(session.game, depth=depth)
        return SearchResponse(
            best_move=res.best_move.to_uci() if res.best_move else None,
            score=res.score,
            nodes=res.nodes,
            depth=res.depth,
            time_ms=res.time_ms,
        )

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return {"status": "deleted"}

    return app


def _require_session(store: InMemorySessionStore, game_id: str) -> GameSession:
    session = store.get(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail="game not found")
    return session


def _proposal(req: MoveRequest) -> tuple[str, str, Optional[str]]:
    if req.move is not None:
        try:
            return parse_uci(req.move)
        except InvalidSquareError:
            raise
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    if req.from_sq is None or req.to_sq is None:
        raise HTTPException(status_code=400, detail="either move or from/to is required")
    return req.from_sq, req.to_sq, req.promotion


def _move_model(move: Move) -> MoveModel:
    return MoveModel(
        uci=move.to_uci(),
        from_sq=move.from_sq,
        to_sq=move.to_sq,
        piece=move.piece,
        captured=move.captured,
        promotion=move.promotion,
        castling=move.castling,
        en_passant=move.en_passant,
    )


def _state_response(game_id: str, game: Game) -> GameState:
    state = game.state
    history = [m.to_uci() for m in state.move_history]
    return GameState(
        game_id=game_id,
        fen=game.to_fen(),
        board={
            sq: PieceModel(type=p.type, color=p.color)
            for sq, p in state.position.items()
            if p is not None
        },
        turn=state.turn,
        castling_rights=state.castling_rights.to_dict(),
        en_passant_target=state.en_passant_target,
        halfmove_clock=state.halfmove_clock,
        fullmove_number=state.fullmove_number,
        move_history=history,
        last_move=history[-1] if history else None,
        captured_pieces={color: list(kinds) for color, kinds in state.captured_pieces.items()},
        status=state.status,
        in_check=state.check,
        checkmate=state.checkmate,
        stalemate=state.stalemate,
        draw=game.is_draw(),
    )


# Default app for non-factory servers
app = create_app()
