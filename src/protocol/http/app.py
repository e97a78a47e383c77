from __future__ import annotations

import logging
import os
from typing import Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException, Response
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from ...engine.game import Game
from ...engine.move import Candidate, move_to_str, parse_move, square_to_str, str_to_square
from ...engine.perft import perft as perft_nodes
from ...engine.position import Position
from .session import InMemorySessionStore


logger = logging.getLogger(__name__)


class CreateGameRequest(BaseModel):
    fen: Optional[str] = Field(default=None, description="FEN string; start position if omitted")


class CreateGameResponse(BaseModel):
    game_id: str
    fen: str


class SetPositionRequest(BaseModel):
    fen: str = Field(..., description="FEN string")


class MoveRequest(BaseModel):
    move: str = Field(..., description="Coordinate move string, e.g., e2e4")


class ClickRequest(BaseModel):
    square: str = Field(..., description="Clicked square, e.g., e2")


class PerftRequest(BaseModel):
    fen: str
    depth: int = Field(default=1, ge=0, le=5)


class CandidateOut(BaseModel):
    square: str
    capture: bool


class CandidatesResponse(BaseModel):
    square: str
    candidates: List[CandidateOut]


class ClickResponse(BaseModel):
    selected: Optional[str]
    candidates: List[CandidateOut]
    moved: Optional[str]
    fen: str


class GameState(BaseModel):
    game_id: str
    fen: str
    turn: str
    en_passant: Optional[str]
    selected: Optional[str]
    move_history: List[str]


def create_app(log_level: Union[int, str, None] = None) -> FastAPI:
    app = FastAPI(title="Chess Board API", version="0.1.0")

    # Level falls back to CHESS_LOG_LEVEL so the uvicorn factory path can set it
    if log_level is None:
        log_level = os.environ.get("CHESS_LOG_LEVEL", "info")
    if isinstance(log_level, str):
        log_level = log_level.upper()
    logging.basicConfig(level=log_level)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore()

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game(req: Optional[CreateGameRequest] = None) -> CreateGameResponse:
        game = Game.new() if req is None or req.fen is None else _game_from_fen(req.fen)
        game_id = store.create(game)
        logger.info("created game %s", game_id)
        return CreateGameResponse(game_id=game_id, fen=game.to_fen())

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        return _state(game_id, _require_game(store, game_id))

    @app.post("/api/games/{game_id}/position", response_model=GameState)
    async def set_position(game_id: str, req: SetPositionRequest) -> GameState:
        _require_game(store, game_id)
        game = _game_from_fen(req.fen)
        store.set(game_id, game)
        return _state(game_id, game)

    @app.get("/api/games/{game_id}/candidates/{square}", response_model=CandidatesResponse)
    async def candidates(game_id: str, square: str) -> CandidatesResponse:
        game = _require_game(store, game_id)
        sq = _parse_square(square)
        return CandidatesResponse(square=square, candidates=_candidates_out(game.candidates(sq)))

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    async def make_move(game_id: str, req: MoveRequest) -> GameState:
        game = _require_game(store, game_id)
        try:
            origin, destination = parse_move(req.move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if not game.move(origin, destination):
            raise HTTPException(status_code=409, detail="illegal move")
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/click", response_model=ClickResponse)
    async def click(game_id: str, req: ClickRequest) -> ClickResponse:
        game = _require_game(store, game_id)
        result = game.click(_parse_square(req.square))
        return ClickResponse(
            selected=square_to_str(result.selected) if result.selected is not None else None,
            candidates=_candidates_out(result.candidates),
            moved=move_to_str(*result.moved) if result.moved else None,
            fen=game.to_fen(),
        )

    @app.delete("/api/games/{game_id}", status_code=204)
    async def delete_game(game_id: str) -> Response:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return Response(status_code=204)

    @app.post("/api/perft")
    async def perft(req: PerftRequest) -> Dict[str, int]:
        try:
            position = Position.from_fen(req.fen)
        except ValueError:
            raise HTTPException(status_code=400, detail="invalid FEN")
        return {"nodes": perft_nodes(position, req.depth)}

    return app


def _require_game(store: InMemorySessionStore, game_id: str) -> Game:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game


def _game_from_fen(fen: str) -> Game:
    try:
        return Game.from_fen(fen)
    except ValueError:
        raise HTTPException(status_code=400, detail="invalid FEN")


def _parse_square(square: str) -> int:
    try:
        return str_to_square(square)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _candidates_out(moves: List[Candidate]) -> List[CandidateOut]:
    return [CandidateOut(square=square_to_str(m.destination), capture=m.is_capture) for m in moves]


def _state(game_id: str, game: Game) -> GameState:
    position = game.position
    ep = position.en_passant
    return GameState(
        game_id=game_id,
        fen=game.to_fen(),
        turn=position.turn.value,
        en_passant=square_to_str(ep) if ep is not None else None,
        selected=square_to_str(game.selected) if game.selected is not None else None,
        move_history=game.history_uci(),
    )


# Default app for non-factory servers
app = create_app()
