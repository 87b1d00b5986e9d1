from __future__ import annotations

import logging
from typing import Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException, Query, Response
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from ... import __version__
from ...engine.attacks import controlled_squares, is_square_attacked
from ...engine.errors import ChessError
from ...engine.legality import generate_legal_moves, in_check, is_checkmate, is_stalemate
from ...engine.move import parse_uci, str_to_square
from ...engine.position import Position
from ...engine.types import Color
from .error import (
    chess_error_handler,
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import PositionStore


logger = logging.getLogger(__name__)

ColorName = Literal["white", "black"]


class CreatePositionRequest(BaseModel):
    fen: Optional[str] = Field(default=None, description="FEN string; startpos when omitted")


class CreatePositionResponse(BaseModel):
    position_id: str
    fen: str


class SetFenRequest(BaseModel):
    fen: str = Field(..., description="FEN string")


class MoveRequest(BaseModel):
    move: str = Field(..., description="UCI move string, e.g., e2e4")


class ValidateMoveResponse(BaseModel):
    move: str
    legal: bool


class AttackedResponse(BaseModel):
    square: str
    by: ColorName
    attacked: bool


class ControlledResponse(BaseModel):
    by: ColorName
    squares: List[str]


class LegalMovesRequest(BaseModel):
    fen: str = Field(..., description="FEN string")


class LegalMovesResponse(BaseModel):
    fen: str
    moves: List[str]


class PositionState(BaseModel):
    position_id: str
    fen: str
    side_to_move: Literal["w", "b"]
    castling_rights: str
    en_passant_possible: bool
    halfmove_clock: int
    fullmove_number: int
    legal_moves: List[str]
    in_check: bool
    checkmate: bool
    stalemate: bool


def _color(name: ColorName) -> Color:
    return Color.WHITE if name == "white" else Color.BLACK


def _state(position_id: str, pos: Position) -> PositionState:
    return PositionState(
        position_id=position_id,
        fen=pos.to_fen(),
        side_to_move=pos.side_to_move.fen_char,
        castling_rights=pos.castling_rights,
        en_passant_possible=pos.en_passant_possible,
        halfmove_clock=pos.halfmove_clock,
        fullmove_number=pos.fullmove_number,
        legal_moves=[m.to_uci() for m in generate_legal_moves(pos)],
        in_check=in_check(pos),
        checkmate=is_checkmate(pos),
        stalemate=is_stalemate(pos),
    )


def create_app(log_level: str = "INFO") -> FastAPI:
    app = FastAPI(title="fenboard API", version=__version__)

    logging.basicConfig(level=log_level.upper())

    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(ChessError, chess_error_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = PositionStore()
    app.state.store = store

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/positions", response_model=CreatePositionResponse)
    async def create_position(
        req: Optional[CreatePositionRequest] = None,
    ) -> CreatePositionResponse:
        fen = req.fen if req is not None else None
        pos = Position(fen)
        position_id = store.create(pos)
        return CreatePositionResponse(position_id=position_id, fen=pos.to_fen())

    @app.get("/api/positions/{position_id}", response_model=PositionState)
    async def get_state(position_id: str) -> PositionState:
        return _state(position_id, _require_position(store, position_id))

    @app.put("/api/positions/{position_id}/fen", response_model=PositionState)
    async def set_fen(position_id: str, req: SetFenRequest) -> PositionState:
        _require_position(store, position_id)
        # Decode first so a bad FEN leaves the stored position untouched
        pos = Position(req.fen)
        store.replace(position_id, pos)
        return _state(position_id, pos)

    @app.get("/api/positions/{position_id}/bitsets")
    async def get_bitsets(position_id: str) -> Dict[str, List[List[int]]]:
        pos = _require_position(store, position_id)
        return {name: bitset.to_matrix() for name, bitset in pos.bitsets().items()}

    @app.get("/api/positions/{position_id}/attacked", response_model=AttackedResponse)
    async def attacked(
        position_id: str,
        square: str = Query(..., min_length=2, max_length=2),
        by: ColorName = Query(...),
    ) -> AttackedResponse:
        pos = _require_position(store, position_id)
        try:
            sq = str_to_square(square)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return AttackedResponse(
            square=square,
            by=by,
            attacked=is_square_attacked(pos, sq.rank, sq.file, _color(by)),
        )

    @app.get("/api/positions/{position_id}/controlled", response_model=ControlledResponse)
    async def controlled(position_id: str, by: ColorName = Query(...)) -> ControlledResponse:
        pos = _require_position(store, position_id)
        squares = [sq.name for sq in controlled_squares(pos, _color(by))]
        return ControlledResponse(by=by, squares=squares)

    @app.post("/api/positions/{position_id}/validate", response_model=ValidateMoveResponse)
    async def validate_move(position_id: str, req: MoveRequest) -> ValidateMoveResponse:
        pos = _require_position(store, position_id)
        try:
            move = parse_uci(req.move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return ValidateMoveResponse(move=req.move, legal=move in generate_legal_moves(pos))

    @app.delete("/api/positions/{position_id}", status_code=204)
    async def delete_position(position_id: str) -> Response:
        if not store.delete(position_id):
            raise HTTPException(status_code=404, detail="position not found")
        return Response(status_code=204)

    @app.post("/api/legal-moves", response_model=LegalMovesResponse)
    async def legal_moves(req: LegalMovesRequest) -> LegalMovesResponse:
        pos = Position(req.fen)
        moves = [m.to_uci() for m in generate_legal_moves(pos)]
        return LegalMovesResponse(fen=pos.to_fen(), moves=moves)

    return app


def _require_position(store: PositionStore, position_id: str) -> Position:
    pos = store.get(position_id)
    if pos is None:
        raise HTTPException(status_code=404, detail="position not found")
    return pos


# Default app for non-factory servers
app = create_app()
