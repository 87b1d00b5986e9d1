"""FEN-driven chess position model and legal move generator."""

from __future__ import annotations

from .engine.attacks import is_square_attacked
from .engine.bitset import Bitset
from .engine.errors import ChessError, InvalidArgument, InvalidFen, UnknownPieceChar
from .engine.legality import generate_legal_moves, is_king_in_check
from .engine.move import Move, Square, parse_uci
from .engine.position import STARTPOS_FEN, Position
from .engine.types import Color, PieceKind

__version__ = "0.1.0"

__all__ = [
    "Bitset",
    "ChessError",
    "Color",
    "InvalidArgument",
    "InvalidFen",
    "Move",
    "PieceKind",
    "Position",
    "STARTPOS_FEN",
    "Square",
    "UnknownPieceChar",
    "generate_legal_moves",
    "is_king_in_check",
    "is_square_attacked",
    "parse_uci",
]
