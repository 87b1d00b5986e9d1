from __future__ import annotations

from collections import Counter

from fenboard.engine.legality import generate_legal_moves, make_hypothetical_move
from fenboard.engine.move import parse_uci
from fenboard.engine.position import Position
from fenboard.engine.types import PieceKind


def _uci_list(pos: Position) -> list[str]:
    return [m.to_uci() for m in generate_legal_moves(pos)]


def test_white_pawn_push_promotions() -> None:
    ms = _uci_list(Position("k7/4P3/8/8/8/8/8/4K3 w - - 0 1"))
    pawn_moves = [m for m in ms if m.startswith("e7")]
    # Knight, bishop, rook, queen in that order; never a bare e7e8
    assert pawn_moves == ["e7e8n", "e7e8b", "e7e8r", "e7e8q"]


def test_white_pawn_capture_promotion() -> None:
    ms = _uci_list(Position("3rk3/4P3/8/8/8/8/8/4K3 w - - 0 1"))
    assert {"e7d8q", "e7d8r", "e7d8b", "e7d8n"} <= set(ms)
    assert "e7d8" not in ms
    # e8 holds the black king, so there is no push
    assert not any(m.startswith("e7e8") for m in ms)


def test_black_pawn_push_promotions() -> None:
    ms = _uci_list(Position("4k3/8/8/8/8/8/3p4/K7 b - - 0 1"))
    assert [m for m in ms if m.startswith("d2")] == ["d2d1n", "d2d1b", "d2d1r", "d2d1q"]


def test_every_promotion_destination_has_four_entries() -> None:
    ms = _uci_list(Position("r1r1k3/1P6/8/8/8/8/8/4K3 w - - 0 1"))
    per_destination = Counter(m[:4] for m in ms if m.startswith("b7"))
    assert per_destination == {"b7a8": 4, "b7b8": 4, "b7c8": 4}


def test_promotion_places_new_piece_on_hypothetical_board() -> None:
    pos = Position("k7/4P3/8/8/8/8/8/4K3 w - - 0 1")
    after = make_hypothetical_move(pos, parse_uci("e7e8q"))
    assert after.piece_at(0, 4) is PieceKind.QUEEN
    assert not after.pawns.get(0, 4)
    assert not after.pieces.get(1, 4)
    assert not after.color.get(0, 4)


def test_black_promotion_keeps_black_color_bit() -> None:
    pos = Position("4k3/8/8/8/8/8/3p4/K7 b - - 0 1")
    after = make_hypothetical_move(pos, parse_uci("d2d1n"))
    assert after.piece_at(7, 3) is PieceKind.KNIGHT
    assert after.color.get(7, 3)
