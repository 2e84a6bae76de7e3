"""
Geometry of simple moves, and the move/verdict value objects.

Key idea: Use strategy pattern to define the simple-move shape for each rank (captures live in captures.py).

Legality as a whole (turn order, forced capture, capture chains) is checked later by Game
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, Optional, Self

from src.core.shared_types import MoveRejection, Rank
from src.draughts.captures import Board, capture_target, scan_diagonal
from src.draughts.pieces import FORWARD
from src.draughts.square import (
    DIAGONALS,
    Position,
    is_diagonal_line,
    squares_between,
)


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made: one jump or slide of one piece"""

    from_square: Position
    to_square: Position

    @classmethod
    def from_coordinates(
        cls, from_coordinates: tuple[int, int], to_coordinates: tuple[int, int]
    ) -> Self:
        return cls(Position(*from_coordinates), Position(*to_coordinates))

    def __str__(self) -> str:
        return f"{self.from_square.as_tuple()}->{self.to_square.as_tuple()}"


class MoveKind(StrEnum):
    SIMPLE = "simple"
    CAPTURE = "capture"


@dataclass(frozen=True)
class MoveVerdict:
    """
    Outcome of validating a move.

    Illegal input is an expected outcome, not an error: the rules engine answers with a verdict instead of raising.
    """

    legal: bool
    kind: Optional[MoveKind] = None
    reason: Optional[MoveRejection] = None
    # square of the enemy piece a capture removes
    captured: Optional[Position] = None

    @classmethod
    def accept(cls, kind: MoveKind, captured: Optional[Position] = None) -> Self:
        return cls(legal=True, kind=kind, captured=captured)

    @classmethod
    def reject(cls, reason: MoveRejection) -> Self:
        return cls(legal=False, reason=reason)

    @property
    def is_forced_capture_violation(self) -> bool:
        return self.reason == MoveRejection.MUST_CAPTURE

    def __bool__(self) -> bool:
        return self.legal


# --- SIMPLE MOVE RULES ---
def is_man_simple_move(board: Board, move: Move) -> bool:
    """A man steps a single square diagonally, and only forward (towards the opponent's back row)"""
    piece = board.piece(move.from_square)
    if piece is None:
        return False

    d_row = move.to_square.row - move.from_square.row
    d_col = move.to_square.col - move.from_square.col
    if abs(d_row) != 1 or abs(d_col) != 1:
        return False

    return d_row == FORWARD[piece.color] and board.is_empty(move.to_square)


def is_king_simple_move(board: Board, move: Move) -> bool:
    """A king slides any number of squares along a diagonal, in any direction, as long as the path is empty"""
    if not is_diagonal_line(move.from_square, move.to_square):
        return False

    path = squares_between(move.from_square, move.to_square) + [move.to_square]
    return all(board.is_empty(square) for square in path)


# -- STRATEGY PATTERN: SIMPLE MOVE RULES ---
IsSimpleMoveFn = Callable[[Board, Move], bool]
SIMPLE_MOVE_RULES: dict[Rank, IsSimpleMoveFn] = {
    Rank.MAN: is_man_simple_move,
    Rank.KING: is_king_simple_move,
}


def is_simple_move(board: Board, move: Move) -> bool:
    piece = board.piece(move.from_square)
    if piece is None:
        return False
    return SIMPLE_MOVE_RULES[piece.rank](board, move)


def classify_move(board: Board, move: Move) -> Optional[MoveKind]:
    """Capture, simple move, or None when the piece cannot get there at all. Turn order and forced capture are not considered."""
    if capture_target(board, move.from_square, move.to_square) is not None:
        return MoveKind.CAPTURE
    if is_simple_move(board, move):
        return MoveKind.SIMPLE
    return None


# --- CANDIDATE DESTINATIONS ---
def candidate_moves(board: Board, position: Position) -> list[Move]:
    """
    Every destination the piece could geometrically reach along its diagonals (ignoring what stands in the way).

    Used to list legal moves: each candidate is later run through the full validation by Game.
    * man: one or two squares away (simple move or jump)
    * king: anywhere along the four diagonals
    """
    piece = board.piece(position)
    if piece is None:
        return []

    moves: list[Move] = []
    for direction in DIAGONALS:
        for distance, square in enumerate(scan_diagonal(position, direction), start=1):
            if not piece.is_king and distance > 2:
                break
            moves.append(Move(position, square))
    return moves
