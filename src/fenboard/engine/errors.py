from __future__ import annotations


class ChessError(ValueError):
    """Base class for errors raised by the engine package."""


class InvalidFen(ChessError):
    """FEN text is structurally malformed (wrong field or rank count)."""


class UnknownPieceChar(ChessError):
    """Piece placement contains a character that is neither a piece nor a run length."""

    def __init__(self, char: str) -> None:
        super().__init__(f"unknown piece character: {char!r}")
        self.char = char


class InvalidArgument(ChessError):
    """Raised for argument values outside an operation's accepted domain."""
