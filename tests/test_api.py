"""API smoke tests for the analysis endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from api.server import app
from plychess.constants import START_FEN


client = TestClient(app)


def test_health() -> None:
    health = client.get("/health")
    assert health.status_code == 200
    assert health.json() == {"status": "ok"}


def test_legal_moves_from_start() -> None:
    response = client.post("/legal-moves", json={"fen": START_FEN})
    assert response.status_code == 200
    body = response.json()
    assert len(body["legal_moves"]) == 20
    assert body["side_to_move"] == "w"
    assert body["status"] == "not_ended"
    assert body["in_check"] is False


def test_move_applies_and_reports_new_position() -> None:
    response = client.post("/move", json={"fen": START_FEN, "move": "e2e4"})
    assert response.status_code == 200
    body = response.json()
    assert body["last_move"] == "e2e4"
    assert body["side_to_move"] == "b"
    assert body["fen"] == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"


def test_illegal_move_and_bad_fen_rejected() -> None:
    illegal = client.post("/move", json={"fen": START_FEN, "move": "e2e5"})
    assert illegal.status_code == 400

    bad_fen = client.post("/legal-moves", json={"fen": "not a fen"})
    assert bad_fen.status_code == 400


def test_engine_move_finds_mate() -> None:
    response = client.post(
        "/engine-move",
        json={"fen": "6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1", "max_depth": 2, "strategy": "piece_score", "seed": 1},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["best_move"] == "a1a8"
    assert body["status"] == "win"
    assert body["winner"] == "w"
    assert body["reason"] == "checkmate"
    assert body["in_check"] is True
    assert body["candidate_moves"][0]["move"] == "a1a8"


def test_engine_move_on_finished_game_rejected() -> None:
    response = client.post("/engine-move", json={"fen": "7k/5Q2/6K1/8/8/8/8/8 b - - 0 1"})
    assert response.status_code == 400


def test_perft_endpoint() -> None:
    response = client.post("/perft", json={"fen": START_FEN, "depth": 2})
    assert response.status_code == 200
    assert response.json() == {"nodes": 400}

    divide = client.post("/perft", json={"fen": START_FEN, "depth": 1, "divide": True})
    assert divide.status_code == 200
    assert len(divide.json()["divide"]) == 20
