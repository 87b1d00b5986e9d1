from __future__ import annotations

from enum import Enum, IntEnum


class Color(IntEnum):
    """Piece color; the value matches the bit stored in the color bitset."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def fen_char(self) -> str:
        return "w" if self is Color.WHITE else "b"


class PieceKind(str, Enum):
    """Piece kinds keyed by their lowercase FEN letter."""

    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"


# Scan order for "which kind stands here" lookups
PIECE_KINDS = (
    PieceKind.PAWN,
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.ROOK,
    PieceKind.QUEEN,
    PieceKind.KING,
)

PROMOTION_KINDS = (PieceKind.KNIGHT, PieceKind.BISHOP, PieceKind.ROOK, PieceKind.QUEEN)
