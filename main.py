"""Command-line utilities for the chess engine."""

from __future__ import annotations

import argparse
import logging
import random

from plychess.board import GameState
from plychess.constants import START_FEN
from plychess.evaluation import Strategy, evaluator_for
from plychess.game import DEFAULT_MAX_TURNS, play_game
from plychess.perft import perft, perft_divide
from plychess.search import SearchEngine

STRATEGY_CHOICES = [strategy.value for strategy in Strategy]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Chess engine utilities")
    parser.add_argument("--fen", default=START_FEN, help="FEN position")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default="WARNING", help="Logging level")

    subparsers = parser.add_subparsers(dest="command", required=False)

    perft_parser = subparsers.add_parser("perft", help="Run perft")
    perft_parser.add_argument("depth", type=int, help="Perft depth")
    perft_parser.add_argument("--divide", action="store_true", help="Show per-move split")

    search_parser = subparsers.add_parser("search", help="Rank the moves of the position")
    search_parser.add_argument("--depth", type=int, default=2, help="Search depth in plies")
    search_parser.add_argument("--strategy", choices=STRATEGY_CHOICES, default=Strategy.SPACES_MOVES.value)
    search_parser.add_argument("--seed", type=int, default=None, help="Tie-break random seed")

    selfplay_parser = subparsers.add_parser("selfplay", help="Play one engine-vs-engine game")
    selfplay_parser.add_argument("--white", choices=STRATEGY_CHOICES, default=Strategy.SPACES_MOVES.value)
    selfplay_parser.add_argument("--black", choices=STRATEGY_CHOICES, default=Strategy.PIECE_SCORE.value)
    selfplay_parser.add_argument("--depth", type=int, default=2, help="Search depth in plies")
    selfplay_parser.add_argument("--max-turns", type=int, default=DEFAULT_MAX_TURNS, help="Turn limit before a draw")
    selfplay_parser.add_argument("--seed", type=int, default=None, help="Tie-break random seed")

    return parser


def run() -> None:
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        state = GameState.from_fen(args.fen)
    except ValueError as exc:
        parser.error(str(exc))

    if args.command == "perft":
        if args.divide:
            for move, count in perft_divide(state, args.depth).items():
                print(f"{move}: {count}")
        else:
            print(perft(state, args.depth))
        return

    if args.command == "search":
        moves = state.legal_moves()
        if not moves:
            print(f"no legal moves: {state.end_state(moves).reason}")
            return
        engine = SearchEngine(evaluator_for(Strategy(args.strategy)))
        result = engine.search(state, args.depth, moves)
        print(f"bestmove {random.Random(args.seed).choice(result.tied_best())}")
        print(f"depth {result.depth} score {result.score} nodes {result.nodes} cutoffs {result.cutoffs}")
        for candidate in result.candidates:
            print(f"  {candidate.move} {candidate.score}")
        return

    if args.command == "selfplay":
        record = play_game(
            Strategy(args.white),
            Strategy(args.black),
            depth=args.depth,
            rng=random.Random(args.seed),
            max_turns=args.max_turns,
            state=state,
        )
        print(" ".join(record.moves))
        print(f"result {record.result.value} ({record.reason}) after {record.plies} plies")
        print(GameState.from_fen(record.final_fen))
        return

    print(state)


if __name__ == "__main__":
    run()
