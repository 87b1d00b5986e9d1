from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Tuple

from .errors import InvalidArgument


BOARD_SIZE = 8
MASK_64 = (1 << 64) - 1


def _index(rank: int, file: int) -> int:
    return rank * BOARD_SIZE + file


@dataclass
class Bitset:
    """8x8 grid of booleans packed into a single 64-bit integer.

    Notes:
    - Cell (rank, file) lives at bit ``rank * 8 + file``.
    - Coordinates are not validated; callers keep them within 0..7.
    - ``and_``, ``or_`` and ``not_`` mutate the receiver in place.
    """

    bits: int = 0

    def fill(self, value: int) -> None:
        """Set every cell to ``value``.

        Args:
            value (int): Either 0 or 1.

        Raises:
            InvalidArgument: If ``value`` is neither 0 nor 1.
        """
        if value not in (0, 1):
            raise InvalidArgument(f"Bitset.fill() expects 0 or 1, got {value!r}")
        self.bits = MASK_64 if value == 1 else 0

    def get(self, rank: int, file: int) -> bool:
        return (self.bits >> _index(rank, file)) & 1 == 1

    def set(self, rank: int, file: int, value: bool) -> None:
        mask = 1 << _index(rank, file)
        if value:
            self.bits |= mask
        else:
            self.bits &= ~mask & MASK_64

    def and_(self, other: "Bitset") -> None:
        self.bits &= other.bits

    def or_(self, other: "Bitset") -> None:
        self.bits |= other.bits

    def not_(self) -> None:
        self.bits = ~self.bits & MASK_64

    def clone(self) -> "Bitset":
        return Bitset(self.bits)

    def squares(self) -> Iterator[Tuple[int, int]]:
        """Yield ``(rank, file)`` of every set cell, rank-major."""
        for rank in range(BOARD_SIZE):
            for file in range(BOARD_SIZE):
                if self.get(rank, file):
                    yield rank, file

    def to_matrix(self) -> List[List[int]]:
        """Return the grid as 8 rows of 0/1 values, rank 0 first."""
        return [
            [1 if self.get(rank, file) else 0 for file in range(BOARD_SIZE)]
            for rank in range(BOARD_SIZE)
        ]
