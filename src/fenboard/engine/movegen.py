from __future__ import annotations

from typing import List

from .attacks import (
    BISHOP_DIRECTIONS,
    KING_OFFSETS,
    KNIGHT_OFFSETS,
    QUEEN_DIRECTIONS,
    ROOK_DIRECTIONS,
    Offsets,
    is_square_attacked,
    is_valid_square,
    pawn_direction,
    square_occupied,
    square_occupied_by_color,
)
from .move import Move, Square
from .position import Position
from .types import PROMOTION_KINDS, Color, PieceKind


KING_START_FILE = 4


def _home_rank(color: Color) -> int:
    return 7 if color is Color.WHITE else 0


def _push_pawn_move(moves: List[Move], frm: Square, to: Square) -> None:
    # Landing on either back rank always promotes; no plain move is emitted
    if to.rank in (0, 7):
        for kind in PROMOTION_KINDS:
            moves.append(Move(frm, to, promotion=kind))
    else:
        moves.append(Move(frm, to))


def generate_pawn_moves(pos: Position, rank: int, file: int, moves: List[Move]) -> None:
    """Append pseudo-legal pawn pushes and captures from ``(rank, file)``.

    En passant captures are not generated.
    """
    color = pos.color_at(rank, file)
    direction = pawn_direction(color)
    start_rank = 6 if color is Color.WHITE else 1
    frm = Square(rank, file)
    ahead = rank + direction

    if is_valid_square(ahead, file) and not square_occupied(pos, ahead, file):
        _push_pawn_move(moves, frm, Square(ahead, file))
        two_ahead = ahead + direction
        if rank == start_rank and not square_occupied(pos, two_ahead, file):
            moves.append(Move(frm, Square(two_ahead, file)))

    for capture_file in (file - 1, file + 1):
        if (
            is_valid_square(ahead, capture_file)
            and square_occupied(pos, ahead, capture_file)
            and not square_occupied_by_color(pos, ahead, capture_file, color)
        ):
            _push_pawn_move(moves, frm, Square(ahead, capture_file))


def _generate_step_moves(
    pos: Position, rank: int, file: int, offsets: Offsets, moves: List[Move]
) -> None:
    color = pos.color_at(rank, file)
    frm = Square(rank, file)
    for dr, df in offsets:
        tr, tf = rank + dr, file + df
        if is_valid_square(tr, tf) and not square_occupied_by_color(pos, tr, tf, color):
            moves.append(Move(frm, Square(tr, tf)))


def generate_knight_moves(pos: Position, rank: int, file: int, moves: List[Move]) -> None:
    _generate_step_moves(pos, rank, file, KNIGHT_OFFSETS, moves)


def generate_sliding_moves(
    pos: Position, rank: int, file: int, directions: Offsets, moves: List[Move]
) -> None:
    """Walk each ray until the edge or the first occupied square.

    Empty squares are quiet moves; an enemy blocker adds one capture.
    """
    color = pos.color_at(rank, file)
    frm = Square(rank, file)
    for dr, df in directions:
        tr, tf = rank + dr, file + df
        while is_valid_square(tr, tf):
            if not square_occupied(pos, tr, tf):
                moves.append(Move(frm, Square(tr, tf)))
            else:
                if not square_occupied_by_color(pos, tr, tf, color):
                    moves.append(Move(frm, Square(tr, tf)))
                break
            tr += dr
            tf += df


def generate_bishop_moves(pos: Position, rank: int, file: int, moves: List[Move]) -> None:
    generate_sliding_moves(pos, rank, file, BISHOP_DIRECTIONS, moves)


def generate_rook_moves(pos: Position, rank: int, file: int, moves: List[Move]) -> None:
    generate_sliding_moves(pos, rank, file, ROOK_DIRECTIONS, moves)


def generate_queen_moves(pos: Position, rank: int, file: int, moves: List[Move]) -> None:
    generate_sliding_moves(pos, rank, file, QUEEN_DIRECTIONS, moves)


def generate_king_moves(pos: Position, rank: int, file: int, moves: List[Move]) -> None:
    _generate_step_moves(pos, rank, file, KING_OFFSETS, moves)
    generate_castling_moves(pos, rank, file, moves)


def generate_castling_moves(pos: Position, rank: int, file: int, moves: List[Move]) -> None:
    """Append castling king moves for the king standing on ``(rank, file)``.

    Requires the king on its start square and not in check, the matching rights
    character, empty squares between king and rook, and no attacked square on the
    king's path. Only the two-file king move is produced; the rook is relocated
    when the move is applied.
    """
    color = pos.color_at(rank, file)
    home = _home_rank(color)
    if rank != home or file != KING_START_FILE:
        return
    enemy = color.opposite
    if is_square_attacked(pos, rank, file, enemy):
        return

    kingside, queenside = ("K", "Q") if color is Color.WHITE else ("k", "q")
    frm = Square(home, KING_START_FILE)

    if (
        kingside in pos.castling_rights
        and not any(square_occupied(pos, home, f) for f in (5, 6))
        and not any(is_square_attacked(pos, home, f, enemy) for f in (5, 6))
    ):
        moves.append(Move(frm, Square(home, 6)))

    if (
        queenside in pos.castling_rights
        and not any(square_occupied(pos, home, f) for f in (1, 2, 3))
        and not any(is_square_attacked(pos, home, f, enemy) for f in (3, 2))
    ):
        moves.append(Move(frm, Square(home, 2)))


_GENERATORS = {
    PieceKind.PAWN: generate_pawn_moves,
    PieceKind.KNIGHT: generate_knight_moves,
    PieceKind.BISHOP: generate_bishop_moves,
    PieceKind.ROOK: generate_rook_moves,
    PieceKind.QUEEN: generate_queen_moves,
    PieceKind.KING: generate_king_moves,
}


def generate_piece_moves(pos: Position, rank: int, file: int, moves: List[Move]) -> None:
    """Dispatch on the piece standing on ``(rank, file)``; empty squares add nothing."""
    if not square_occupied(pos, rank, file):
        return
    kind = pos.piece_at(rank, file)
    if kind is not None:
        _GENERATORS[kind](pos, rank, file, moves)


def generate_moves_for_color(pos: Position, color: Color) -> List[Move]:
    """Return all pseudo-legal moves for ``color``, squares visited rank-major."""
    moves: List[Move] = []
    for rank in range(8):
        for file in range(8):
            if square_occupied_by_color(pos, rank, file, color):
                generate_piece_moves(pos, rank, file, moves)
    return moves
