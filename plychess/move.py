"""Move model consumed by GameState.apply."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, NamedTuple

from .constants import PieceType
from .position import Position


class RookRelocation(NamedTuple):
    """Secondary piece movement carried by a castling move."""

    source: Position
    destination: Position


@dataclass(frozen=True, slots=True)
class Move:
    source: Position
    destination: Position
    enables_en_passant: bool = False
    en_passant_capture_target: Position | None = None
    auxiliary_move: RookRelocation | None = None
    promotion_type: PieceType | None = None

    @classmethod
    def from_notation(cls, notation: str) -> Move | None:
        """Parse ``"e2e4"`` style text; returns None when malformed.

        Only source and destination are recovered. Resolve the result against
        the legal move list with :func:`find_move` to get the full move.
        """
        text = notation.strip()
        if len(text) != 4:
            return None
        source = Position.from_notation(text[:2])
        destination = Position.from_notation(text[2:])
        if source is None or destination is None:
            return None
        return cls(source=source, destination=destination)

    def notation(self) -> str:
        return f"{self.source.notation()}{self.destination.notation()}"

    def __str__(self) -> str:
        return self.notation()


def find_move(notation: str, legal_moves: Iterable[Move]) -> Move | None:
    parsed = Move.from_notation(notation)
    if parsed is None:
        return None
    for move in legal_moves:
        if move.source == parsed.source and move.destination == parsed.destination:
            return move
    return None
