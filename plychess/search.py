"""Fixed-depth minimax search with alpha-beta pruning."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from time import perf_counter
from typing import Callable

from .board import GameState, OutcomeKind
from .constants import Color
from .move import Move

logger = logging.getLogger(__name__)

BASE_MATE_SCORE = 100_000
SCORE_BOUND = 1_000_000

Evaluator = Callable[[GameState], int]


@dataclass(slots=True)
class CandidateScore:
    move: Move
    score: int


@dataclass(slots=True)
class SearchResult:
    best_move: Move | None
    score: int
    depth: int
    candidates: list[CandidateScore]
    nodes: int
    cutoffs: int
    elapsed_ms: float

    def tied_best(self) -> list[Move]:
        return [candidate.move for candidate in self.candidates if candidate.score == self.score]


def mate_score(winner: Color, distance: int) -> int:
    # Mates found closer to the root score further from zero.
    return winner.sign * (BASE_MATE_SCORE - distance)


class SearchEngine:
    def __init__(self, evaluate: Evaluator) -> None:
        self.evaluate = evaluate
        self.nodes = 0
        self.cutoffs = 0

    def search(self, state: GameState, depth: int, moves: list[Move] | None = None) -> SearchResult:
        if depth < 1:
            raise ValueError("depth must be >= 1")
        if moves is None:
            moves = state.legal_moves()

        self.nodes = 0
        self.cutoffs = 0
        start = perf_counter()

        candidates, score = self.best_moves(state, moves, -SCORE_BOUND, SCORE_BOUND, depth, depth)

        elapsed_ms = (perf_counter() - start) * 1000.0
        logger.debug(
            "searched depth=%d moves=%d nodes=%d cutoffs=%d score=%d in %.1fms",
            depth,
            len(moves),
            self.nodes,
            self.cutoffs,
            score,
            elapsed_ms,
        )
        return SearchResult(
            best_move=candidates[0].move if candidates else None,
            score=score,
            depth=depth,
            candidates=candidates,
            nodes=self.nodes,
            cutoffs=self.cutoffs,
            elapsed_ms=elapsed_ms,
        )

    def best_moves(
        self,
        state: GameState,
        moves: list[Move],
        alpha: int,
        beta: int,
        max_ply: int,
        ply: int,
    ) -> tuple[list[CandidateScore], int]:
        """Score ``moves`` from ``state`` searching ``ply`` half-moves deep.

        Returns the candidates ranked best-first for the side to move and
        the best score. Candidates after an alpha-beta cutoff are omitted.
        """
        if ply < 1:
            raise ValueError("ply must be >= 1")
        self.nodes += 1

        outcome = state.end_state(moves)
        if outcome.kind is OutcomeKind.WIN:
            return [], mate_score(outcome.winner, max_ply - ply)
        if outcome.kind is OutcomeKind.STALEMATE:
            return [CandidateScore(move, 0) for move in moves], 0

        if ply > 1:
            shallow, _ = self._scan(state, moves, -SCORE_BOUND, SCORE_BOUND, max_ply, 1)
            moves = [candidate.move for candidate in shallow]

        return self._scan(state, moves, alpha, beta, max_ply, ply)

    def _scan(
        self,
        state: GameState,
        moves: list[Move],
        alpha: int,
        beta: int,
        max_ply: int,
        ply: int,
    ) -> tuple[list[CandidateScore], int]:
        maximizing = state.current_player is Color.WHITE
        scored: list[CandidateScore] = []

        for move in moves:
            child = state.successor(move)
            if ply == 1:
                self.nodes += 1
                score = self.evaluate(child)
            else:
                _, score = self.best_moves(
                    child,
                    child.legal_moves(child.current_player),
                    alpha,
                    beta,
                    max_ply,
                    ply - 1,
                )
            scored.append(CandidateScore(move, score))

            if maximizing:
                alpha = max(alpha, score)
            else:
                beta = min(beta, score)
            # Strict so a score equal to the bound is always exact; the root
            # tie-break relies on ties being real.
            if beta < alpha:
                self.cutoffs += 1
                break

        scored.sort(key=lambda candidate: candidate.score, reverse=maximizing)
        return scored, scored[0].score


def choose_move(
    state: GameState,
    legal_moves: list[Move],
    ply_depth: int,
    evaluate: Evaluator,
    rng: random.Random,
) -> Move:
    """Pick uniformly among the moves sharing the best search score."""
    if not legal_moves:
        raise ValueError("Cannot choose a move from an empty move list")

    result = SearchEngine(evaluate).search(state, ply_depth, legal_moves)
    best = result.tied_best()
    if not best:
        raise ValueError("Position has already been decided")
    return rng.choice(best)
