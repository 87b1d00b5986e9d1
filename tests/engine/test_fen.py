from __future__ import annotations

import pytest

from fenboard.engine.errors import InvalidFen, UnknownPieceChar
from fenboard.engine.position import BITSET_NAMES, STARTPOS_FEN, Position
from fenboard.engine.types import Color, PieceKind


def occupied(pos: Position) -> list[tuple[int, int]]:
    return list(pos.pieces.squares())


def test_default_is_startpos() -> None:
    pos = Position()
    assert pos.to_fen() == STARTPOS_FEN
    assert Position.startpos().to_fen() == STARTPOS_FEN


def test_startpos_round_trip() -> None:
    assert Position.from_fen(STARTPOS_FEN).to_fen() == STARTPOS_FEN


@pytest.mark.parametrize(
    "fen",
    [
        "r1bqkbnr/pppp1ppp/2n5/4p3/3P4/5N2/PPP1PPPP/RNBQKB1R b KQ - 2 3",
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b - e3 0 1",
        "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1",
        # Non-canonical castling order and counters are kept verbatim
        "4k3/8/8/8/8/8/8/4K3 w qK - x 07",
    ],
)
def test_round_trip_various_positions(fen: str) -> None:
    assert Position(fen).to_fen() == fen


def test_startpos_layout() -> None:
    pos = Position.startpos()
    assert pos.side_to_move is Color.WHITE
    assert pos.castling_rights == "KQkq"
    assert pos.halfmove_clock == 0
    assert pos.fullmove_number == 1
    assert not pos.en_passant_possible
    # Black occupies the first two written ranks, white the last two
    for f in range(8):
        assert pos.color_at(0, f) is Color.BLACK
        assert pos.color_at(7, f) is Color.WHITE
        assert pos.piece_at(1, f) is PieceKind.PAWN
        assert pos.piece_at(6, f) is PieceKind.PAWN
    assert pos.piece_at(0, 4) is PieceKind.KING
    assert pos.piece_at(7, 3) is PieceKind.QUEEN
    assert pos.piece_at(4, 4) is None
    assert len(occupied(pos)) == 32


def test_rooks_and_king_fen_occupancy() -> None:
    pos = Position("8/8/8/8/8/8/8/R3K2R w KQ - 0 1")
    assert occupied(pos) == [(7, 0), (7, 4), (7, 7)]
    assert list(pos.rooks.squares()) == [(7, 0), (7, 7)]
    assert list(pos.kings.squares()) == [(7, 4)]
    assert pos.color.bits == 0
    assert pos.castling_rights == "KQ"


def test_every_occupied_square_has_exactly_one_kind() -> None:
    pos = Position("r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1")
    kinds = [pos.pawns, pos.knights, pos.bishops, pos.rooks, pos.queens, pos.kings]
    for r in range(8):
        for f in range(8):
            count = sum(1 for b in kinds if b.get(r, f))
            assert count == (1 if pos.pieces.get(r, f) else 0)


def test_side_to_move_anything_but_w_is_black() -> None:
    assert Position("8/8/8/8/8/8/8/8 b - - 0 1").side_to_move is Color.BLACK
    assert Position("8/8/8/8/8/8/8/8 x - - 0 1").side_to_move is Color.BLACK


def test_en_passant_field_only_sets_flag() -> None:
    pos = Position("rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1")
    assert pos.en_passant_possible


def test_bad_move_counters_default_to_zero() -> None:
    pos = Position("8/8/8/8/8/8/8/8 w - - abc -")
    assert pos.halfmove_clock == 0
    assert pos.fullmove_number == 0


def test_apply_fen_replaces_previous_state() -> None:
    pos = Position.startpos()
    pos.apply_fen("4k3/8/8/8/8/8/8/4K3 b - - 12 40")
    assert occupied(pos) == [(0, 4), (7, 4)]
    assert pos.castling_rights == "-"
    assert pos.side_to_move is Color.BLACK
    assert pos.halfmove_clock == 12
    assert pos.fullmove_number == 40
    assert pos.to_fen() == "4k3/8/8/8/8/8/8/4K3 b - - 12 40"


def test_cached_fen_is_not_rederived_from_bitsets() -> None:
    pos = Position.startpos()
    pos.pieces.set(4, 4, True)
    pos.pawns.set(4, 4, True)
    assert pos.to_fen() == STARTPOS_FEN


def test_clear_resets_bitsets_and_rights() -> None:
    pos = Position("4k3/8/8/8/8/8/8/4K3 b k - 3 9")
    pos.clear()
    assert all(getattr(pos, name).bits == 0 for name in BITSET_NAMES)
    assert pos.castling_rights == ""
    assert pos.side_to_move is Color.BLACK
    pos.clear(reset_moves=True)
    assert pos.side_to_move is Color.WHITE
    assert pos.fullmove_number == 1


def test_set_piece_bit_color_by_case() -> None:
    pos = Position("8/8/8/8/8/8/8/8 w - - 0 1")
    pos.set_piece_bit(0, 0, "R")
    pos.set_piece_bit(7, 7, "k")
    assert pos.pieces.get(0, 0) and not pos.color.get(0, 0)
    assert pos.pieces.get(7, 7) and pos.color.get(7, 7)
    assert pos.piece_at(0, 0) is PieceKind.ROOK
    assert pos.piece_at(7, 7) is PieceKind.KING


def test_set_piece_bit_rejects_unknown_char() -> None:
    pos = Position("8/8/8/8/8/8/8/8 w - - 0 1")
    with pytest.raises(UnknownPieceChar) as excinfo:
        pos.set_piece_bit(0, 0, "x")
    assert excinfo.value.char == "x"


@pytest.mark.parametrize(
    "fen",
    [
        "",
        "8/8/8/8/8/8/8/8 w - - 0",
        "8/8/8/8/8/8/8/8 w - - 0 1 extra",
        "8/8/8/8/8/8/8/8  w - - 0 1",
        "8/8/8/8/8/8/8 w - - 0 1",
        "ppppppppp/8/8/8/8/8/8/8 w - - 0 1",
    ],
)
def test_invalid_fen_raises(fen: str) -> None:
    with pytest.raises(InvalidFen):
        Position(fen)


@pytest.mark.parametrize(
    "fen",
    [
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNX w KQkq - 0 1",
        "9/8/8/8/8/8/8/8 w - - 0 1",
        "0/8/8/8/8/8/8/8 w - - 0 1",
    ],
)
def test_unknown_piece_char_raises(fen: str) -> None:
    with pytest.raises(UnknownPieceChar):
        Position(fen)


def test_errors_are_value_errors() -> None:
    with pytest.raises(ValueError):
        Position("not a fen")


def test_describe_lists_every_bitset() -> None:
    text = Position.startpos().describe()
    for name in BITSET_NAMES:
        assert f"Bitset {name}:" in text
    assert "1 1 1 1 1 1 1 1" in text
