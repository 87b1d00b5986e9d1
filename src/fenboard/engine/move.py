from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .types import PROMOTION_KINDS, PieceKind


@dataclass(frozen=True)
class Square:
    """Board coordinate.

    Attributes:
        rank (int): 0..7, where rank 0 is the first rank written in FEN (algebraic 8).
        file (int): 0..7, where file 0 is the ``a`` file.
    """

    rank: int
    file: int

    @property
    def name(self) -> str:
        return square_to_str(self)


@dataclass(frozen=True)
class Move:
    """Immutable move value.

    Attributes:
        from_sq (Square): Origin square.
        to_sq (Square): Destination square.
        promotion (Optional[PieceKind]): Promotion kind for pawns reaching the last rank.
    """

    from_sq: Square
    to_sq: Square
    promotion: Optional[PieceKind] = None

    def to_uci(self) -> str:
        """Serialize the move into long algebraic UCI form.

        Returns:
            str: Move encoded like ``"e2e4"`` or ``"e7e8q"``.
        """
        suffix = self.promotion.value if self.promotion is not None else ""
        return square_to_str(self.from_sq) + square_to_str(self.to_sq) + suffix


def parse_uci(uci: str) -> Move:
    """Parse a UCI move string.

    Args:
        uci (str): Move encoded in long algebraic notation (e.g. ``"e2e4"``).

    Returns:
        Move: Parsed move.

    Raises:
        ValueError: If the string has an invalid length, squares, or promotion
            piece.
    """
    if len(uci) not in (4, 5):
        raise ValueError(f"invalid UCI move length: {uci!r}")
    from_sq = str_to_square(uci[0:2])
    to_sq = str_to_square(uci[2:4])
    promotion: Optional[PieceKind] = None
    if len(uci) == 5:
        char = uci[4].lower()
        promotion = next((k for k in PROMOTION_KINDS if k.value == char), None)
        if promotion is None:
            raise ValueError(f"invalid promotion piece: {char!r}")
    return Move(from_sq, to_sq, promotion)


def str_to_square(s: str) -> Square:
    """Convert algebraic notation such as ``"e4"`` into a Square.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    return Square(rank=8 - int(s[1]), file=ord(s[0]) - ord("a"))


def square_to_str(square: Square) -> str:
    """Convert a Square into algebraic notation.

    Raises:
        ValueError: If the square lies outside the board.
    """
    if not (0 <= square.rank < 8 and 0 <= square.file < 8):
        raise ValueError(f"invalid square: {square!r}")
    return chr(ord("a") + square.file) + str(8 - square.rank)
