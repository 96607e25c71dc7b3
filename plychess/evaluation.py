"""Static evaluation: independent heuristics combined as a weighted sum.

Every heuristic scores on the same signed scale, positive favoring White.
"""

from __future__ import annotations

from collections import Counter
from enum import Enum
from functools import cached_property
from typing import Callable

from .board import GameState
from .constants import PIECE_VALUES, Color
from .move import Move

MATERIAL_WEIGHT = 15
MOBILITY_WEIGHT = 1
SPACE_WEIGHT = 3


class LeafView:
    """A state being scored, with both sides' legal moves computed on demand."""

    def __init__(self, state: GameState):
        self.state = state

    @cached_property
    def white_moves(self) -> list[Move]:
        return self.state.legal_moves(Color.WHITE)

    @cached_property
    def black_moves(self) -> list[Move]:
        return self.state.legal_moves(Color.BLACK)


Heuristic = Callable[[LeafView], int]


def material(view: LeafView) -> int:
    return sum(piece.color.sign * PIECE_VALUES[piece.piece_type] for _, piece in view.state.pieces())


def mobility(view: LeafView) -> int:
    return len(view.white_moves) - len(view.black_moves)


def space_control(view: LeafView) -> int:
    white_reach = Counter(move.destination for move in view.white_moves)
    black_reach = Counter(move.destination for move in view.black_moves)
    score = 0
    for square in white_reach.keys() | black_reach.keys():
        if white_reach[square] > black_reach[square]:
            score += 1
        elif white_reach[square] < black_reach[square]:
            score -= 1
    return score


class WeightedEvaluator:
    def __init__(self, weights: list[tuple[int, Heuristic]]):
        if not weights:
            raise ValueError("At least one weighted heuristic is required")
        self.weights = weights

    def __call__(self, state: GameState) -> int:
        view = LeafView(state)
        return sum(weight * heuristic(view) for weight, heuristic in self.weights)


class Strategy(Enum):
    PIECE_SCORE = "piece_score"
    MAX_MOVES = "max_moves"
    MAX_SPACES = "max_spaces"
    SPACES_MOVES = "spaces_moves"


STRATEGY_WEIGHTS: dict[Strategy, list[tuple[int, Heuristic]]] = {
    Strategy.PIECE_SCORE: [(MATERIAL_WEIGHT, material)],
    Strategy.MAX_MOVES: [(MATERIAL_WEIGHT, material), (MOBILITY_WEIGHT, mobility)],
    Strategy.MAX_SPACES: [(MATERIAL_WEIGHT, material), (SPACE_WEIGHT, space_control)],
    Strategy.SPACES_MOVES: [
        (MATERIAL_WEIGHT, material),
        (MOBILITY_WEIGHT, mobility),
        (SPACE_WEIGHT, space_control),
    ],
}


def evaluator_for(strategy: Strategy) -> WeightedEvaluator:
    return WeightedEvaluator(STRATEGY_WEIGHTS[strategy])
