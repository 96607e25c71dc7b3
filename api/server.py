"""FastAPI server exposing move generation and engine play for a FEN position."""

from __future__ import annotations

import random

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from plychess.board import GameState
from plychess.constants import START_FEN
from plychess.evaluation import Strategy, evaluator_for
from plychess.move import Move, find_move
from plychess.perft import perft, perft_divide
from plychess.search import SearchEngine, SearchResult


class PositionRequest(BaseModel):
    fen: str = Field(default=START_FEN)


class MoveRequest(BaseModel):
    fen: str = Field(default=START_FEN)
    move: str = Field(min_length=4, max_length=4)


class EngineMoveRequest(BaseModel):
    fen: str = Field(default=START_FEN)
    max_depth: int = Field(default=2, ge=1, le=4)
    strategy: Strategy = Field(default=Strategy.SPACES_MOVES)
    seed: int | None = Field(default=None)


class PerftRequest(BaseModel):
    fen: str = Field(default=START_FEN)
    depth: int = Field(default=2, ge=1, le=4)
    divide: bool = Field(default=False)


app = FastAPI(title="plychess API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _state_from_fen(fen: str) -> GameState:
    try:
        return GameState.from_fen(fen)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _position_payload(state: GameState, legal_moves: list[Move]) -> dict:
    outcome = state.end_state(legal_moves)
    side = state.current_player
    return {
        "fen": state.to_fen(),
        "side_to_move": side.value,
        "legal_moves": [move.notation() for move in legal_moves],
        "in_check": state.king_position(side) is not None and state.is_in_check(side),
        "status": outcome.kind.value,
        "winner": outcome.winner.value if outcome.winner else None,
        "reason": outcome.reason,
    }


def _search_payload(result: SearchResult, played: Move | None) -> dict:
    return {
        "best_move": played.notation() if played else None,
        "score": result.score,
        "depth": result.depth,
        "nodes": result.nodes,
        "cutoffs": result.cutoffs,
        "elapsed_ms": round(result.elapsed_ms, 2),
        "candidate_moves": [
            {"move": candidate.move.notation(), "score": candidate.score} for candidate in result.candidates
        ],
    }


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/legal-moves")
def legal_moves(payload: PositionRequest) -> dict:
    state = _state_from_fen(payload.fen)
    return _position_payload(state, state.legal_moves())


@app.post("/move")
def move(payload: MoveRequest) -> dict:
    state = _state_from_fen(payload.fen)
    chosen = find_move(payload.move, state.legal_moves())
    if chosen is None:
        raise HTTPException(status_code=400, detail=f"Illegal move: {payload.move}")
    state.apply(chosen)
    response = _position_payload(state, state.legal_moves())
    response["last_move"] = chosen.notation()
    return response


@app.post("/engine-move")
def engine_move(payload: EngineMoveRequest) -> dict:
    state = _state_from_fen(payload.fen)
    moves = state.legal_moves()
    if state.end_state(moves).is_over:
        raise HTTPException(status_code=400, detail="Game is already over")

    result = SearchEngine(evaluator_for(payload.strategy)).search(state, payload.max_depth, moves)
    played = random.Random(payload.seed).choice(result.tied_best())
    state.apply(played)

    response = _position_payload(state, state.legal_moves())
    response.update(_search_payload(result, played))
    return response


@app.post("/perft")
def run_perft(payload: PerftRequest) -> dict:
    state = _state_from_fen(payload.fen)
    if payload.divide:
        return {"divide": perft_divide(state, payload.depth)}
    return {"nodes": perft(state, payload.depth)}
