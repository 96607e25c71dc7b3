"""Chess rules engine and fixed-depth search AI."""

from .board import GameState, Outcome, OutcomeKind, Piece
from .constants import Color, PieceType
from .evaluation import Strategy, WeightedEvaluator, evaluator_for
from .move import Move, RookRelocation, find_move
from .position import Position
from .search import SearchEngine, SearchResult, choose_move

__all__ = [
    "Color",
    "GameState",
    "Move",
    "Outcome",
    "OutcomeKind",
    "Piece",
    "PieceType",
    "Position",
    "RookRelocation",
    "SearchEngine",
    "SearchResult",
    "Strategy",
    "WeightedEvaluator",
    "choose_move",
    "evaluator_for",
    "find_move",
]
