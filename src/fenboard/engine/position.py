from __future__ import annotations

import copy
from typing import Dict, List, Optional

from .bitset import BOARD_SIZE, Bitset
from .errors import InvalidFen, UnknownPieceChar
from .types import PIECE_KINDS, Color, PieceKind


STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# Attribute names of the eight bitsets, in display order
BITSET_NAMES = ("pieces", "color", "pawns", "knights", "bishops", "rooks", "queens", "kings")

KIND_TO_BITSET = {
    PieceKind.PAWN: "pawns",
    PieceKind.KNIGHT: "knights",
    PieceKind.BISHOP: "bishops",
    PieceKind.ROOK: "rooks",
    PieceKind.QUEEN: "queens",
    PieceKind.KING: "kings",
}


def _parse_counter(text: str) -> int:
    # Malformed counters are tolerated and read as zero
    try:
        return int(text)
    except ValueError:
        return 0


class Position:
    """Board state held as eight bitsets plus FEN metadata.

    Notes:
    - ``pieces`` marks occupied squares; ``color`` is 1 for black pieces and only
      meaningful where ``pieces`` is set; one bitset per piece kind holds the rest.
    - Rank 0 is the first rank written in FEN (black's back rank), file 0 is ``a``.
    - ``to_fen()`` returns the FEN last applied. Editing bitsets directly does not
      update it.
    - Castling rights are taken from the FEN as written and never revoked.
    """

    pieces: Bitset
    color: Bitset
    pawns: Bitset
    knights: Bitset
    bishops: Bitset
    rooks: Bitset
    queens: Bitset
    kings: Bitset

    def __init__(self, fen: Optional[str] = None) -> None:
        for name in BITSET_NAMES:
            setattr(self, name, Bitset())
        self.side_to_move = Color.WHITE
        self.halfmove_clock = 0  # plies since the last capture or pawn advance
        self.fullmove_number = 1  # incremented after black moves
        self.en_passant_possible = False
        self.castling_rights = ""
        self.fen = fen if fen is not None else STARTPOS_FEN
        self.apply_fen()

    @classmethod
    def startpos(cls) -> "Position":
        return cls(STARTPOS_FEN)

    @classmethod
    def from_fen(cls, fen: str) -> "Position":
        return cls(fen)

    def __repr__(self) -> str:
        return f"Position({self.fen!r})"

    def clear(self, reset_moves: bool = False) -> None:
        """Empty every bitset and drop castling rights.

        Args:
            reset_moves (bool): Also restore side to move, move counters and the
                en-passant flag to their defaults.
        """
        for name in BITSET_NAMES:
            getattr(self, name).fill(0)
        self.castling_rights = ""
        if reset_moves:
            self.side_to_move = Color.WHITE
            self.halfmove_clock = 0
            self.fullmove_number = 1
            self.en_passant_possible = False

    def apply_fen(self, fen: Optional[str] = None) -> None:
        """Replace the whole position with the one described by ``fen``.

        Args:
            fen (Optional[str]): FEN to load; when omitted the cached FEN is
                decoded again.

        Raises:
            InvalidFen: If the FEN does not have six fields, the placement does not
                have eight ranks, or a rank describes more than eight files.
            UnknownPieceChar: If the placement contains an unknown character.

        Notes:
            Only the presence of an en-passant target is recorded; the square itself
            is discarded.
        """
        if fen is not None:
            self.fen = fen
        self.clear(reset_moves=True)

        fields = self.fen.split(" ")
        if len(fields) != 6:
            raise InvalidFen(f"FEN must have 6 fields, got {len(fields)}: {self.fen!r}")
        placement, stm, castling, ep, halfmove, fullmove = fields

        self.side_to_move = Color.WHITE if stm == "w" else Color.BLACK
        self.halfmove_clock = _parse_counter(halfmove)
        self.fullmove_number = _parse_counter(fullmove)
        self.en_passant_possible = ep != "-"
        self.castling_rights = castling

        rows = placement.split("/")
        if len(rows) != BOARD_SIZE:
            raise InvalidFen(f"FEN placement must have 8 ranks: {placement!r}")
        for rank, row in enumerate(rows):
            file = 0
            for ch in row:
                if ch in "12345678":
                    file += int(ch)
                    continue
                if file >= BOARD_SIZE:
                    raise InvalidFen(f"too many squares in FEN rank: {row!r}")
                self.set_piece_bit(rank, file, ch)
                file += 1

    def to_fen(self) -> str:
        return self.fen

    def set_piece_bit(self, rank: int, file: int, piece_char: str) -> None:
        """Place the piece named by a FEN character on ``(rank, file)``.

        Uppercase characters are white, lowercase black.

        Raises:
            UnknownPieceChar: If ``piece_char`` does not name a piece.
        """
        kind = next((k for k in PIECE_KINDS if k.value == piece_char.lower()), None)
        if kind is None:
            raise UnknownPieceChar(piece_char)
        self.color.set(rank, file, not piece_char.isupper())
        self.pieces.set(rank, file, True)
        self.board_for(kind).set(rank, file, True)

    def board_for(self, kind: PieceKind) -> Bitset:
        return getattr(self, KIND_TO_BITSET[kind])

    def piece_at(self, rank: int, file: int) -> Optional[PieceKind]:
        """Return the kind of piece on ``(rank, file)``, or ``None`` when empty."""
        for kind in PIECE_KINDS:
            if self.board_for(kind).get(rank, file):
                return kind
        return None

    def color_at(self, rank: int, file: int) -> Color:
        return Color.BLACK if self.color.get(rank, file) else Color.WHITE

    def clone(self) -> "Position":
        """Return a deep copy; no bitset is shared with the original."""
        other = copy.copy(self)
        for name in BITSET_NAMES:
            setattr(other, name, getattr(self, name).clone())
        return other

    def bitsets(self) -> Dict[str, Bitset]:
        return {name: getattr(self, name) for name in BITSET_NAMES}

    def describe(self) -> str:
        """Render every bitset as a labelled 8x8 matrix of 0/1 values."""
        lines: List[str] = []
        for name, bitset in self.bitsets().items():
            lines.append(f"Bitset {name}:")
            for row in bitset.to_matrix():
                lines.append(" ".join(str(bit) for bit in row))
            lines.append("")
        return "\n".join(lines)
