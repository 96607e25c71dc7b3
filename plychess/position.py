"""Board coordinates and algebraic square names."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import BOARD_SIZE, FILES, RANKS


@dataclass(frozen=True, slots=True)
class Position:
    column: int
    row: int

    @classmethod
    def from_notation(cls, notation: str) -> Position | None:
        if len(notation) != 2:
            return None
        file_char, rank_char = notation[0].lower(), notation[1]
        if file_char not in FILES or rank_char not in RANKS:
            return None
        return cls(FILES.index(file_char), RANKS.index(rank_char))

    def relative(self, column_offset: int, row_offset: int) -> Position:
        return Position(self.column + column_offset, self.row + row_offset)

    def in_bounds(self) -> bool:
        return 0 <= self.column < BOARD_SIZE and 0 <= self.row < BOARD_SIZE

    def notation(self) -> str:
        if not self.in_bounds():
            raise ValueError(f"Position out of range: ({self.column}, {self.row})")
        return f"{FILES[self.column]}{RANKS[self.row]}"

    def __str__(self) -> str:
        return self.notation()
