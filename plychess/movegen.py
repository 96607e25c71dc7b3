"""Pseudo-legal and legal move generation and attack detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .constants import BOARD_SIZE, PAWN_RANKS, Color, PieceType
from .move import Move, RookRelocation
from .position import Position

if TYPE_CHECKING:
    from .board import GameState, Piece


KNIGHT_DELTAS = ((1, 2), (2, 1), (2, -1), (1, -2), (-1, -2), (-2, -1), (-2, 1), (-1, 2))
KING_DELTAS = ((1, 1), (1, 0), (1, -1), (0, 1), (0, -1), (-1, 1), (-1, 0), (-1, -1))
BISHOP_DIRS = ((1, 1), (1, -1), (-1, 1), (-1, -1))
ROOK_DIRS = ((1, 0), (-1, 0), (0, 1), (0, -1))
QUEEN_DIRS = BISHOP_DIRS + ROOK_DIRS

# (rook column, king destination column, rook destination column)
CASTLING_SIDES = ((0, 2, 3), (7, 6, 5))


def _in_bounds(column: int, row: int) -> bool:
    return 0 <= column < BOARD_SIZE and 0 <= row < BOARD_SIZE


def is_square_attacked(state: GameState, square: Position, by_color: Color) -> bool:
    """True if some pseudo-legal move of ``by_color`` could capture on ``square``.

    Probes outward from the square instead of generating every enemy move;
    only captures can land on an occupied square, so the answer is the same.
    """
    board = state.board
    column, row = square.column, square.row

    pawn_direction = PAWN_RANKS[by_color][0]
    for dc in (-1, 1):
        nc, nr = column + dc, row - pawn_direction
        if _in_bounds(nc, nr):
            piece = board[nr][nc]
            if piece is not None and piece.color is by_color and piece.piece_type is PieceType.PAWN:
                return True

    for deltas, piece_type in ((KNIGHT_DELTAS, PieceType.KNIGHT), (KING_DELTAS, PieceType.KING)):
        for dc, dr in deltas:
            nc, nr = column + dc, row + dr
            if _in_bounds(nc, nr):
                piece = board[nr][nc]
                if piece is not None and piece.color is by_color and piece.piece_type is piece_type:
                    return True

    for directions, sliders in (
        (BISHOP_DIRS, (PieceType.BISHOP, PieceType.QUEEN)),
        (ROOK_DIRS, (PieceType.ROOK, PieceType.QUEEN)),
    ):
        for dc, dr in directions:
            nc, nr = column + dc, row + dr
            while _in_bounds(nc, nr):
                piece = board[nr][nc]
                if piece is not None:
                    if piece.color is by_color and piece.piece_type in sliders:
                        return True
                    break
                nc += dc
                nr += dr

    return False


def in_check(state: GameState, color: Color) -> bool:
    king = state.king_position(color)
    if king is None:
        raise RuntimeError(f"No {color.name.lower()} king on the board")
    return is_square_attacked(state, king, color.opponent)


def _generate_pawn_moves(state: GameState, moves: list[Move], source: Position, pawn: Piece) -> None:
    board = state.board
    direction, start_row, promotion_row = PAWN_RANKS[pawn.color]

    def promotion(destination: Position) -> PieceType | None:
        return PieceType.QUEEN if destination.row == promotion_row else None

    forward = source.relative(0, direction)
    if forward.in_bounds() and board[forward.row][forward.column] is None:
        moves.append(Move(source, forward, promotion_type=promotion(forward)))
        if source.row == start_row:
            two_forward = source.relative(0, 2 * direction)
            if board[two_forward.row][two_forward.column] is None:
                moves.append(Move(source, two_forward, enables_en_passant=True))

    for dc in (-1, 1):
        target = source.relative(dc, direction)
        if not target.in_bounds():
            continue
        occupant = board[target.row][target.column]
        if occupant is not None and occupant.color is not pawn.color:
            moves.append(Move(source, target, promotion_type=promotion(target)))
            continue

        beside = source.relative(dc, 0)
        if occupant is None and state.en_passant_target == beside:
            victim = board[beside.row][beside.column]
            if victim is not None and victim.color is not pawn.color and victim.piece_type is PieceType.PAWN:
                moves.append(Move(source, target, en_passant_capture_target=beside))


def _generate_step_moves(
    state: GameState,
    moves: list[Move],
    source: Position,
    piece: Piece,
    deltas: tuple[tuple[int, int], ...],
) -> None:
    board = state.board
    for dc, dr in deltas:
        nc, nr = source.column + dc, source.row + dr
        if not _in_bounds(nc, nr):
            continue
        occupant = board[nr][nc]
        if occupant is None or occupant.color is not piece.color:
            moves.append(Move(source, Position(nc, nr)))


def _generate_slider_moves(
    state: GameState,
    moves: list[Move],
    source: Position,
    piece: Piece,
    directions: tuple[tuple[int, int], ...],
) -> None:
    board = state.board
    for dc, dr in directions:
        nc, nr = source.column + dc, source.row + dr
        while _in_bounds(nc, nr):
            occupant = board[nr][nc]
            if occupant is not None and occupant.color is piece.color:
                break
            moves.append(Move(source, Position(nc, nr)))
            if occupant is not None:
                break
            nc += dc
            nr += dr


def _generate_castling(state: GameState, moves: list[Move], source: Position, king: Piece) -> None:
    if not king.can_castle:
        return

    row = source.row
    home_row = state.board[row]
    for rook_column, king_column, rook_destination in CASTLING_SIDES:
        rook = home_row[rook_column]
        if rook is None or rook.color is not king.color or rook.piece_type is not PieceType.ROOK:
            continue
        if not rook.can_castle:
            continue
        low, high = sorted((source.column, rook_column))
        if any(home_row[column] is not None for column in range(low + 1, high)):
            continue
        moves.append(
            Move(
                source,
                Position(king_column, row),
                auxiliary_move=RookRelocation(Position(rook_column, row), Position(rook_destination, row)),
            )
        )


def generate_pseudo_legal_moves(state: GameState, color: Color) -> list[Move]:
    moves: list[Move] = []

    for source, piece in state.pieces(color):
        piece_type = piece.piece_type
        if piece_type is PieceType.PAWN:
            _generate_pawn_moves(state, moves, source, piece)
        elif piece_type is PieceType.KNIGHT:
            _generate_step_moves(state, moves, source, piece, KNIGHT_DELTAS)
        elif piece_type is PieceType.BISHOP:
            _generate_slider_moves(state, moves, source, piece, BISHOP_DIRS)
        elif piece_type is PieceType.ROOK:
            _generate_slider_moves(state, moves, source, piece, ROOK_DIRS)
        elif piece_type is PieceType.QUEEN:
            _generate_slider_moves(state, moves, source, piece, QUEEN_DIRS)
        else:
            _generate_step_moves(state, moves, source, piece, KING_DELTAS)
            _generate_castling(state, moves, source, piece)

    return moves


def generate_legal_moves(state: GameState, color: Color) -> list[Move]:
    # A side whose king is gone has already lost and has nothing to protect.
    if state.king_position(color) is None:
        return []

    legal_moves: list[Move] = []
    for move in generate_pseudo_legal_moves(state, color):
        if not in_check(state.probe(move), color):
            legal_moves.append(move)

    return legal_moves
