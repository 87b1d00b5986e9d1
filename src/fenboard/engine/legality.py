from __future__ import annotations

from typing import List

from .attacks import is_square_attacked, square_occupied_by_color
from .move import Move
from .movegen import generate_moves_for_color
from .position import BITSET_NAMES, Position
from .types import Color, PieceKind


def make_hypothetical_move(pos: Position, move: Move) -> Position:
    """Return a copy of ``pos`` with ``move`` played on its bitsets.

    Notes:
    - ``pos`` is never mutated.
    - Only the bitsets change: side to move, counters, castling rights and the
      cached FEN are carried over unchanged.
    - A two-file king move also relocates the rook of that wing.
    """
    board = pos.clone()
    frm, to = move.from_sq, move.to_sq

    kind = board.piece_at(frm.rank, frm.file)
    color = board.color_at(frm.rank, frm.file)
    is_black = color is Color.BLACK

    board.pieces.set(frm.rank, frm.file, False)
    board.color.set(frm.rank, frm.file, False)
    if kind is not None:
        board.board_for(kind).set(frm.rank, frm.file, False)

    # Capture: wipe whatever stood on the destination
    for name in BITSET_NAMES:
        getattr(board, name).set(to.rank, to.file, False)

    placed = move.promotion if move.promotion is not None else kind
    board.pieces.set(to.rank, to.file, True)
    board.color.set(to.rank, to.file, is_black)
    if placed is not None:
        board.board_for(placed).set(to.rank, to.file, True)

    if kind is PieceKind.KING and abs(frm.file - to.file) == 2:
        kingside = to.file > frm.file
        rook_from = 7 if kingside else 0
        rook_to = 5 if kingside else 3
        board.pieces.set(frm.rank, rook_from, False)
        board.color.set(frm.rank, rook_from, False)
        board.rooks.set(frm.rank, rook_from, False)
        board.pieces.set(frm.rank, rook_to, True)
        board.color.set(frm.rank, rook_to, is_black)
        board.rooks.set(frm.rank, rook_to, True)

    return board


def is_king_in_check(pos: Position, color: Color) -> bool:
    """Return True if the king of ``color`` is attacked.

    The first matching king in rank-major order is used. A position without a king
    of ``color`` is reported as not in check.
    """
    for rank in range(8):
        for file in range(8):
            if pos.kings.get(rank, file) and square_occupied_by_color(pos, rank, file, color):
                return is_square_attacked(pos, rank, file, color.opposite)
    return False


def generate_legal_moves(pos: Position) -> List[Move]:
    """Return the legal moves for the side to move.

    Each pseudo-legal move is played on a fresh copy of the position and kept only
    if the mover's king is not attacked afterwards. Order follows the pseudo-legal
    enumeration (squares rank-major, then each piece's offset table).
    """
    color = pos.side_to_move
    legal: List[Move] = []
    for move in generate_moves_for_color(pos, color):
        successor = make_hypothetical_move(pos, move)
        if not is_king_in_check(successor, color):
            legal.append(move)
    return legal


def in_check(pos: Position) -> bool:
    return is_king_in_check(pos, pos.side_to_move)


def has_legal_moves(pos: Position) -> bool:
    return bool(generate_legal_moves(pos))


def is_checkmate(pos: Position) -> bool:
    return in_check(pos) and not has_legal_moves(pos)


def is_stalemate(pos: Position) -> bool:
    return not in_check(pos) and not has_legal_moves(pos)
