import random

from plychess.board import GameState
from plychess.constants import Color, PieceType
from plychess.move import Move, find_move
from plychess.position import Position


def _moves_notation(state: GameState, color: Color | None = None) -> set[str]:
    return {m.notation() for m in state.legal_moves(color)}


def _play(state: GameState, *notations: str) -> None:
    for notation in notations:
        move = find_move(notation, state.legal_moves())
        assert move is not None, f"{notation} is not legal in {state.to_fen()}"
        state.apply(move)


def test_start_position_has_20_legal_moves() -> None:
    state = GameState.opening_state()
    moves = state.legal_moves(Color.WHITE)

    assert len(moves) == 20
    assert sum(1 for m in moves if state.piece_at(m.source).piece_type is PieceType.KNIGHT) == 4
    assert sum(1 for m in moves if m.enables_en_passant) == 8


def test_black_reply_count_mirrors_white() -> None:
    state = GameState.opening_state()
    _play(state, "e2e4")

    assert len(state.legal_moves(Color.BLACK)) == 20


def test_pawn_double_step_blocked() -> None:
    fully_blocked = GameState.from_fen("4k3/8/8/8/8/4n3/4P3/4K3 w - - 0 1")
    far_blocked = GameState.from_fen("4k3/8/8/8/4n3/8/4P3/4K3 w - - 0 1")

    assert not {"e2e3", "e2e4"} & _moves_notation(fully_blocked)
    assert "e2e3" in _moves_notation(far_blocked)
    assert "e2e4" not in _moves_notation(far_blocked)


def test_pawn_captures_only_enemy_pieces() -> None:
    state = GameState.from_fen("4k3/8/8/8/8/3p1N2/4P3/4K3 w - - 0 1")
    moves = _moves_notation(state)

    assert "e2d3" in moves
    assert "e2f3" not in moves


def test_sliders_stop_at_blockers() -> None:
    state = GameState.from_fen("4k3/8/8/3p4/8/8/3R4/3QK3 w - - 0 1")
    rook_moves = {m.notation() for m in state.legal_moves() if m.source == Position(3, 1)}

    assert {"d2d3", "d2d4", "d2d5"} <= rook_moves
    assert "d2d6" not in rook_moves
    assert "d2d1" not in rook_moves
    assert {"d2a2", "d2h2"} <= rook_moves


def test_castling_moves_generated_when_path_clear() -> None:
    state = GameState.from_fen("4k3/8/8/8/8/8/8/R3K2R w KQ - 0 1")
    moves = {m.notation(): m for m in state.legal_moves()}

    assert "e1g1" in moves
    assert "e1c1" in moves
    assert moves["e1g1"].auxiliary_move.destination == Position(5, 0)
    assert moves["e1c1"].auxiliary_move.destination == Position(3, 0)


def test_castling_blocked_by_piece_between() -> None:
    state = GameState.from_fen("4k3/8/8/8/8/8/8/RN2K1NR w KQ - 0 1")
    moves = _moves_notation(state)

    assert "e1g1" not in moves
    assert "e1c1" not in moves


def test_castling_into_check_filtered_but_transit_not_checked() -> None:
    # The f8 rook covers f1, which the king only passes over.
    transit_attacked = GameState.from_fen("4kr2/8/8/8/8/8/8/R3K2R w KQ - 0 1")
    # The g8 rook covers g1, where the king would land.
    landing_attacked = GameState.from_fen("4k1r1/8/8/8/8/8/8/R3K2R w KQ - 0 1")

    assert "e1g1" in _moves_notation(transit_attacked)
    assert "e1g1" not in _moves_notation(landing_attacked)
    assert "e1c1" in _moves_notation(landing_attacked)


def test_castling_lost_after_king_moves_and_returns() -> None:
    state = GameState.from_fen("4k3/8/8/8/8/8/8/R3K2R w KQ - 0 1")
    _play(state, "e1f1", "e8e7", "f1e1", "e7e8")

    moves = _moves_notation(state)
    assert "e1g1" not in moves
    assert "e1c1" not in moves


def test_castling_lost_only_on_side_of_moved_rook() -> None:
    state = GameState.from_fen("4k3/8/8/8/8/8/8/R3K2R w KQ - 0 1")
    _play(state, "h1h2", "e8e7", "h2h1", "e7e8")

    moves = _moves_notation(state)
    assert "e1g1" not in moves
    assert "e1c1" in moves


def test_illegal_move_leaving_king_in_check_filtered_out() -> None:
    state = GameState.from_fen("4k3/8/8/8/8/8/4r3/R3K3 w - - 0 1")
    moves = _moves_notation(state)

    assert state.is_in_check(Color.WHITE)
    # The a1 rook move ignores the check.
    assert "a1a2" not in moves
    assert "e1d1" in moves
    assert "e1e2" in moves


def test_pinned_piece_cannot_leave_line() -> None:
    state = GameState.from_fen("4k3/4r3/8/8/8/8/4B3/4K3 w - - 0 1")
    bishop_moves = {m for m in state.legal_moves() if m.source == Position(4, 1)}

    assert bishop_moves == set()


def test_en_passant_only_on_following_ply() -> None:
    state = GameState.from_fen("4k3/8/8/8/1p6/8/P7/4K3 w - - 0 1")
    _play(state, "a2a4")

    capture = find_move("b4a3", state.legal_moves())
    assert capture is not None
    assert capture.en_passant_capture_target == Position(0, 3)

    _play(state, "e8e7", "e1e2")
    assert "b4a3" not in _moves_notation(state)


def test_en_passant_not_offered_to_side_that_pushed() -> None:
    state = GameState.from_fen("4k3/8/8/8/1P6/8/P7/4K3 w - - 0 1")
    _play(state, "a2a4")

    assert all(m.en_passant_capture_target is None for m in state.legal_moves(Color.WHITE))


def test_promotion_always_queen() -> None:
    state = GameState.from_fen("k2r4/4P3/8/8/8/8/8/4K3 w - - 0 1")
    pawn_moves = [m for m in state.legal_moves() if m.source == Position(4, 6)]

    assert {m.notation() for m in pawn_moves} == {"e7e8", "e7d8"}
    assert all(m.promotion_type is PieceType.QUEEN for m in pawn_moves)


def test_black_promotion() -> None:
    state = GameState.from_fen("4k3/8/8/8/8/8/3p4/K7 b - - 0 1")
    promotion = find_move("d2d1", state.legal_moves())

    assert promotion is not None
    assert promotion.promotion_type is PieceType.QUEEN


def _assert_mover_king_safe(state: GameState, moves: list[Move]) -> None:
    mover = state.current_player
    for move in moves:
        assert not state.successor(move).is_in_check(mover), move.notation()


def test_legal_moves_never_expose_own_king() -> None:
    rng = random.Random(11)
    state = GameState.opening_state()

    for _ in range(60):
        moves = state.legal_moves()
        if state.end_state(moves).is_over:
            break
        _assert_mover_king_safe(state, moves)
        state.apply(rng.choice(moves))


def test_legal_moves_never_expose_own_king_in_tactical_position() -> None:
    state = GameState.from_fen("r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1")
    _assert_mover_king_safe(state, state.legal_moves())
