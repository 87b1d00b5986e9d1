from __future__ import annotations

from typing import List, Tuple

from .move import Square
from .position import Position
from .types import Color


Offsets = Tuple[Tuple[int, int], ...]

# (rank, file) deltas, ordered rank-major
KNIGHT_OFFSETS: Offsets = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)
KING_OFFSETS: Offsets = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)
BISHOP_DIRECTIONS: Offsets = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRECTIONS: Offsets = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRECTIONS: Offsets = BISHOP_DIRECTIONS + ROOK_DIRECTIONS


def pawn_direction(color: Color) -> int:
    """Rank delta of a pawn push: white advances toward rank 0, black toward rank 7."""
    return -1 if color is Color.WHITE else 1


def is_valid_square(rank: int, file: int) -> bool:
    return 0 <= rank < 8 and 0 <= file < 8


def square_occupied(pos: Position, rank: int, file: int) -> bool:
    return pos.pieces.get(rank, file)


def square_occupied_by_color(pos: Position, rank: int, file: int, color: Color) -> bool:
    if not square_occupied(pos, rank, file):
        return False
    return pos.color.get(rank, file) == (color is Color.BLACK)


def is_square_attacked(pos: Position, rank: int, file: int, by_color: Color) -> bool:
    """Return True if any piece of ``by_color`` attacks ``(rank, file)``.

    Covers: pawns, knights, king, and slider rays for bishops/rooks/queens.
    Sliding rays stop at the first occupied square of either color.
    """
    # A pawn attacks diagonally forward, so it stands one rank behind the target
    pawn_rank = rank - pawn_direction(by_color)
    for pawn_file in (file - 1, file + 1):
        if (
            is_valid_square(pawn_rank, pawn_file)
            and pos.pawns.get(pawn_rank, pawn_file)
            and square_occupied_by_color(pos, pawn_rank, pawn_file, by_color)
        ):
            return True

    for dr, df in KNIGHT_OFFSETS:
        tr, tf = rank + dr, file + df
        if (
            is_valid_square(tr, tf)
            and pos.knights.get(tr, tf)
            and square_occupied_by_color(pos, tr, tf, by_color)
        ):
            return True

    for dr, df in KING_OFFSETS:
        tr, tf = rank + dr, file + df
        if (
            is_valid_square(tr, tf)
            and pos.kings.get(tr, tf)
            and square_occupied_by_color(pos, tr, tf, by_color)
        ):
            return True

    if _ray_hits(pos, rank, file, by_color, BISHOP_DIRECTIONS, diagonal=True):
        return True
    return _ray_hits(pos, rank, file, by_color, ROOK_DIRECTIONS, diagonal=False)


def _ray_hits(
    pos: Position, rank: int, file: int, by_color: Color, directions: Offsets, *, diagonal: bool
) -> bool:
    slider = pos.bishops if diagonal else pos.rooks
    for dr, df in directions:
        tr, tf = rank + dr, file + df
        while is_valid_square(tr, tf):
            if square_occupied(pos, tr, tf):
                if square_occupied_by_color(pos, tr, tf, by_color) and (
                    slider.get(tr, tf) or pos.queens.get(tr, tf)
                ):
                    return True
                break
            tr += dr
            tf += df
    return False


def controlled_squares(pos: Position, color: Color) -> List[Square]:
    """List every square attacked by ``color``, rank-major."""
    return [
        Square(rank, file)
        for rank in range(8)
        for file in range(8)
        if is_square_attacked(pos, rank, file, color)
    ]
