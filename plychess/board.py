"""Game state: board contents, move application and game-end classification."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator

from . import movegen
from .constants import (
    BOARD_SIZE,
    EMPTY_SYMBOL,
    HOME_ROW,
    PAWN_RANKS,
    START_FEN,
    SYMBOL_TO_TYPE,
    Color,
    PieceType,
)
from .move import Move
from .position import Position


@dataclass(frozen=True, slots=True)
class Piece:
    color: Color
    piece_type: PieceType
    can_castle: bool = False

    @property
    def symbol(self) -> str:
        symbol = self.piece_type.value
        return symbol.upper() if self.color is Color.WHITE else symbol

    @classmethod
    def from_symbol(cls, symbol: str) -> Piece:
        piece_type = SYMBOL_TO_TYPE.get(symbol.lower())
        if piece_type is None:
            raise ValueError(f"Invalid piece symbol: {symbol}")
        return cls(Color.WHITE if symbol.isupper() else Color.BLACK, piece_type)


class OutcomeKind(Enum):
    NOT_ENDED = "not_ended"
    WIN = "win"
    STALEMATE = "stalemate"


@dataclass(frozen=True, slots=True)
class Outcome:
    kind: OutcomeKind
    winner: Color | None = None
    reason: str = ""

    @property
    def is_over(self) -> bool:
        return self.kind is not OutcomeKind.NOT_ENDED

    @classmethod
    def win(cls, winner: Color, reason: str) -> Outcome:
        return cls(OutcomeKind.WIN, winner, reason)

    @classmethod
    def stalemate(cls, reason: str) -> Outcome:
        return cls(OutcomeKind.STALEMATE, None, reason)


NOT_ENDED = Outcome(OutcomeKind.NOT_ENDED)

Grid = list[list[Piece | None]]


class GameState:
    __slots__ = (
        "board",
        "current_player",
        "en_passant_target",
        "repetitions",
        "halfmove_clock",
        "fullmove_number",
    )

    def __init__(
        self,
        board: Grid,
        current_player: Color = Color.WHITE,
        en_passant_target: Position | None = None,
        repetitions: Counter[str] | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ):
        self.board = board
        self.current_player = current_player
        # Square of the pawn that advanced two squares on the previous ply.
        self.en_passant_target = en_passant_target
        if repetitions is None:
            repetitions = Counter({self.signature(): 1})
        self.repetitions = repetitions
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number

    @classmethod
    def opening_state(cls) -> GameState:
        return cls.from_fen(START_FEN)

    @classmethod
    def from_fen(cls, fen: str) -> GameState:
        fields = fen.split()
        if len(fields) not in (4, 6):
            raise ValueError(f"Invalid FEN: {fen}")

        placement, side, castling, ep = fields[:4]

        ranks = placement.split("/")
        if len(ranks) != BOARD_SIZE:
            raise ValueError(f"Invalid FEN board placement: {placement}")

        board: Grid = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        for row, rank in enumerate(reversed(ranks)):
            column = 0
            for ch in rank:
                if ch.isdigit():
                    column += int(ch)
                    continue
                if column >= BOARD_SIZE:
                    raise ValueError(f"Invalid rank in FEN: {rank}")
                board[row][column] = Piece.from_symbol(ch)
                column += 1
            if column != BOARD_SIZE:
                raise ValueError(f"Invalid rank in FEN: {rank}")

        if side not in ("w", "b"):
            raise ValueError(f"Invalid side to move in FEN: {side}")
        current_player = Color(side)

        if castling != "-":
            for flag in castling:
                if flag not in "KQkq":
                    raise ValueError(f"Invalid castling field in FEN: {castling}")
                _grant_castling(board, flag)

        en_passant_target = None
        if ep != "-":
            skipped = Position.from_notation(ep)
            if skipped is None:
                raise ValueError(f"Invalid en passant square in FEN: {ep}")
            direction = PAWN_RANKS[current_player.opponent][0]
            en_passant_target = skipped.relative(0, direction)
            pawn = board[en_passant_target.row][en_passant_target.column] if en_passant_target.in_bounds() else None
            if not _is_piece(pawn, current_player.opponent, PieceType.PAWN):
                raise ValueError(f"No pawn to capture en passant behind {ep}")

        halfmove_clock, fullmove_number = 0, 1
        if len(fields) == 6:
            try:
                halfmove_clock, fullmove_number = int(fields[4]), int(fields[5])
            except ValueError as exc:
                raise ValueError(f"Invalid move counters in FEN: {fen}") from exc
            if halfmove_clock < 0 or fullmove_number < 1:
                raise ValueError(f"Invalid move counters in FEN: {fen}")

        return cls(board, current_player, en_passant_target, None, halfmove_clock, fullmove_number)

    def to_fen(self) -> str:
        ranks = []
        for row in range(BOARD_SIZE - 1, -1, -1):
            rank = ""
            empty = 0
            for piece in self.board[row]:
                if piece is None:
                    empty += 1
                    continue
                if empty:
                    rank += str(empty)
                    empty = 0
                rank += piece.symbol
            if empty:
                rank += str(empty)
            ranks.append(rank)

        castling = ""
        for color in (Color.WHITE, Color.BLACK):
            row = HOME_ROW[color]
            king = self.board[row][4]
            if king is None or king.piece_type is not PieceType.KING or not king.can_castle:
                continue
            for column, flag in ((7, "k"), (0, "q")):
                rook = self.board[row][column]
                if rook is not None and rook.color is color and rook.can_castle:
                    castling += flag.upper() if color is Color.WHITE else flag

        ep = "-"
        if self.en_passant_target is not None:
            direction = PAWN_RANKS[self.current_player.opponent][0]
            ep = self.en_passant_target.relative(0, -direction).notation()

        clocks = f"{self.halfmove_clock} {self.fullmove_number}"
        return f"{'/'.join(ranks)} {self.current_player.value} {castling or '-'} {ep} {clocks}"

    def copy(self) -> GameState:
        return GameState(
            [row[:] for row in self.board],
            self.current_player,
            self.en_passant_target,
            Counter(self.repetitions),
            self.halfmove_clock,
            self.fullmove_number,
        )

    def piece_at(self, position: Position) -> Piece | None:
        return self.board[position.row][position.column]

    def pieces(self, color: Color | None = None) -> Iterator[tuple[Position, Piece]]:
        for row in range(BOARD_SIZE):
            for column in range(BOARD_SIZE):
                piece = self.board[row][column]
                if piece is not None and (color is None or piece.color is color):
                    yield Position(column, row), piece

    def king_position(self, color: Color) -> Position | None:
        for position, piece in self.pieces(color):
            if piece.piece_type is PieceType.KING:
                return position
        return None

    def signature(self) -> str:
        return "".join(
            EMPTY_SYMBOL if piece is None else piece.symbol
            for row in self.board
            for piece in row
        )

    def apply(self, move: Move) -> None:
        """Play ``move`` in place. The move must come from ``legal_moves``."""
        resets_clock = (
            self.piece_at(move.source).piece_type is PieceType.PAWN
            or self.piece_at(move.destination) is not None
        )
        self._relocate(move)
        self.repetitions[self.signature()] += 1
        self.halfmove_clock = 0 if resets_clock else self.halfmove_clock + 1
        if self.current_player is Color.BLACK:
            self.fullmove_number += 1
        self.current_player = self.current_player.opponent

    def successor(self, move: Move) -> GameState:
        state = self.copy()
        state.apply(move)
        return state

    def probe(self, move: Move) -> GameState:
        # Board-only simulation for king-safety tests: repetition counts are
        # shared read-only and the side to move is left unchanged.
        state = GameState(
            [row[:] for row in self.board],
            self.current_player,
            self.en_passant_target,
            self.repetitions,
        )
        state._relocate(move)
        return state

    def _relocate(self, move: Move) -> None:
        self.en_passant_target = None

        piece = self.piece_at(move.source)
        if piece.can_castle:
            piece = replace(piece, can_castle=False)
        if move.promotion_type is not None:
            piece = replace(piece, piece_type=move.promotion_type)

        self._set(move.destination, piece)
        self._set(move.source, None)

        if move.auxiliary_move is not None:
            rook = self.piece_at(move.auxiliary_move.source)
            if rook is not None and rook.can_castle:
                rook = replace(rook, can_castle=False)
            self._set(move.auxiliary_move.destination, rook)
            self._set(move.auxiliary_move.source, None)

        if move.en_passant_capture_target is not None:
            self._set(move.en_passant_capture_target, None)

        if move.enables_en_passant:
            self.en_passant_target = move.destination

    def _set(self, position: Position, piece: Piece | None) -> None:
        self.board[position.row][position.column] = piece

    def pseudo_legal_moves(self, color: Color) -> list[Move]:
        return movegen.generate_pseudo_legal_moves(self, color)

    def legal_moves(self, color: Color | None = None) -> list[Move]:
        return movegen.generate_legal_moves(self, self.current_player if color is None else color)

    def is_in_check(self, color: Color) -> bool:
        return movegen.in_check(self, color)

    def end_state(self, legal_moves: list[Move]) -> Outcome:
        """Classify the position for the side to move.

        King loss and repetition are checked before the move list: a lost
        king is a win for the opponent, and any board seen three times is a
        draw even when moves remain. With no legal moves, the side to move
        loses if in check and is stalemated otherwise.
        """
        mover = self.current_player
        if self.king_position(mover) is None:
            return Outcome.win(mover.opponent, "king captured")
        if any(count >= 3 for count in self.repetitions.values()):
            return Outcome.stalemate("threefold repetition")
        if not legal_moves:
            if self.is_in_check(mover):
                return Outcome.win(mover.opponent, "checkmate")
            return Outcome.stalemate("no legal moves")
        return NOT_ENDED

    def __str__(self) -> str:
        rows = []
        for row in range(BOARD_SIZE - 1, -1, -1):
            rows.append(" ".join("." if piece is None else piece.symbol for piece in self.board[row]))
        ep = "-" if self.en_passant_target is None else self.en_passant_target.notation()
        return "\n".join(rows) + f"\nside={self.current_player.value} ep={ep}"


def _grant_castling(board: Grid, flag: str) -> None:
    color = Color.WHITE if flag.isupper() else Color.BLACK
    row = HOME_ROW[color]
    rook_column = 7 if flag.lower() == "k" else 0
    king = board[row][4]
    rook = board[row][rook_column]
    if not _is_piece(king, color, PieceType.KING) or not _is_piece(rook, color, PieceType.ROOK):
        raise ValueError(f"Castling right {flag} has no king and rook in place")
    board[row][4] = replace(king, can_castle=True)
    board[row][rook_column] = replace(rook, can_castle=True)


def _is_piece(piece: Piece | None, color: Color, piece_type: PieceType) -> bool:
    return piece is not None and piece.color is color and piece.piece_type is piece_type
