"""Engine-wide constants and enums."""

from __future__ import annotations

from enum import Enum

BOARD_SIZE = 8


class Color(Enum):
    WHITE = "w"
    BLACK = "b"

    @property
    def opponent(self) -> Color:
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def sign(self) -> int:
        return 1 if self is Color.WHITE else -1


class PieceType(Enum):
    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"


SYMBOL_TO_TYPE = {piece_type.value: piece_type for piece_type in PieceType}

PIECE_VALUES = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
    # Kept large so a missing king swamps every other material term.
    PieceType.KING: 127,
}

# (pawn direction, starting row, promotion row)
PAWN_RANKS = {
    Color.WHITE: (1, 1, 7),
    Color.BLACK: (-1, 6, 0),
}

HOME_ROW = {Color.WHITE: 0, Color.BLACK: 7}

START_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

FILES = "abcdefgh"
RANKS = "12345678"

EMPTY_SYMBOL = "-"
