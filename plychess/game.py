"""Driver loop playing one game between two strategies."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum

from .board import GameState, Outcome, OutcomeKind
from .constants import Color
from .evaluation import Strategy, evaluator_for
from .search import choose_move

logger = logging.getLogger(__name__)

DEFAULT_MAX_TURNS = 200


class GameResult(Enum):
    WHITE_WON = "1-0"
    BLACK_WON = "0-1"
    DRAW = "1/2-1/2"


@dataclass(slots=True)
class GameRecord:
    result: GameResult
    reason: str
    moves: list[str] = field(default_factory=list)
    final_fen: str = ""

    @property
    def plies(self) -> int:
        return len(self.moves)


def _result_for(outcome: Outcome) -> GameResult:
    if outcome.kind is OutcomeKind.WIN:
        return GameResult.WHITE_WON if outcome.winner is Color.WHITE else GameResult.BLACK_WON
    return GameResult.DRAW


def play_game(
    white: Strategy,
    black: Strategy,
    depth: int = 2,
    rng: random.Random | None = None,
    max_turns: int = DEFAULT_MAX_TURNS,
    state: GameState | None = None,
) -> GameRecord:
    """Play until the game ends or ``max_turns`` full turns have been made.

    Reaching the turn limit is scored as a draw.
    """
    if max_turns < 1:
        raise ValueError("max_turns must be >= 1")

    rng = random.Random() if rng is None else rng
    state = GameState.opening_state() if state is None else state.copy()
    evaluators = {Color.WHITE: evaluator_for(white), Color.BLACK: evaluator_for(black)}

    played: list[str] = []
    turn = 1
    while True:
        moves = state.legal_moves()
        outcome = state.end_state(moves)
        if outcome.is_over:
            break
        if turn > max_turns:
            outcome = Outcome.stalemate("turn limit reached")
            break

        move = choose_move(state, moves, depth, evaluators[state.current_player], rng)
        logger.debug("turn %d %s plays %s", turn, state.current_player.name.lower(), move)
        state.apply(move)
        played.append(move.notation())
        if state.current_player is Color.WHITE:
            turn += 1

    result = _result_for(outcome)
    logger.info(
        "%s vs %s: %s (%s) after %d plies",
        white.value,
        black.value,
        result.value,
        outcome.reason,
        len(played),
    )
    return GameRecord(result=result, reason=outcome.reason, moves=played, final_fen=state.to_fen())
