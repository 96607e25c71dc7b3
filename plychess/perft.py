"""Perft utilities for move generation correctness checks."""

from __future__ import annotations

from .board import GameState


def perft(state: GameState, depth: int) -> int:
    if depth < 0:
        raise ValueError("Depth must be >= 0")
    if depth == 0:
        return 1

    moves = state.legal_moves()
    if depth == 1:
        return len(moves)

    return sum(perft(state.successor(move), depth - 1) for move in moves)


def perft_divide(state: GameState, depth: int) -> dict[str, int]:
    if depth < 1:
        raise ValueError("Depth must be >= 1 for perft divide")

    result: dict[str, int] = {}
    for move in state.legal_moves():
        result[move.notation()] = result.get(move.notation(), 0) + perft(state.successor(move), depth - 1)
    return dict(sorted(result.items()))
