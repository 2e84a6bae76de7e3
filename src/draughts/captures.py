"""
Capture scanner
-----

Answers two kinds of questions:

* "Can the piece on this square capture anything right now?" (`has_capture_from`), which drives
  the forced-capture rule and the decision whether a capture chain has to continue.
* "Which enemy piece does this particular jump remove?" (`capture_target`), used to classify a proposed move
  and to know what to take off the board once it is played.

Key idea: same strategy pattern as for movement. One rule per rank, looked up in a table.
"""

from typing import Callable, Iterator, Optional, Protocol

from src.core.shared_types import Color, Rank
from src.draughts.pieces import Piece
from src.draughts.square import (
    DIAGONALS,
    Position,
    Vector,
    is_diagonal_line,
    squares_between,
)


class Board(Protocol):
    """Just the parts the capture rules need"""

    def piece(self, position: Position) -> Optional[Piece]: ...
    def is_empty(self, position: Position) -> bool: ...
    def locate_color(self, color: Color) -> list[Position]: ...


def scan_diagonal(position: Position, direction: Vector) -> Iterator[Position]:
    """Walk outward from (but excluding) the given square until the edge of the board."""
    square = position.step(direction)
    while square.is_within_bounds():
        yield square
        square = square.step(direction)


# --- IS A CAPTURE AVAILABLE FROM THIS SQUARE? ---
def man_has_capture(board: Board, position: Position) -> bool:
    """
    A man only jumps an adjacent enemy, landing on the empty square right behind it.
    Any of the four directions counts: men may capture backwards.
    """
    piece = board.piece(position)
    if piece is None:
        return False

    for direction in DIAGONALS:
        jumped_piece = board.piece(position.step(direction))
        if jumped_piece is None or not jumped_piece.is_enemy_of(piece):
            continue
        if board.is_empty(position.step(direction, 2)):
            return True
    return False


def king_has_capture(board: Board, position: Position) -> bool:
    """
    Raycasting along each diagonal
    ----

    Keep going over empty squares. The first piece we hit decides the direction:
    * own piece: path blocked, nothing to capture this way.
    * enemy piece: remember it and keep going. The next square must be empty to land on.
      Running into a second piece first means we cannot jump (two pieces in a row, or nowhere to land).
    """
    piece = board.piece(position)
    if piece is None:
        return False

    for direction in DIAGONALS:
        found_enemy = False
        for square in scan_diagonal(position, direction):
            found = board.piece(square)
            if found is None:
                if found_enemy:
                    return True
                continue

            if not found.is_enemy_of(piece) or found_enemy:
                break
            found_enemy = True
    return False


# -- STRATEGY PATTERN: CAPTURE RULES ---
HasCaptureFn = Callable[[Board, Position], bool]
CAPTURE_RULES: dict[Rank, HasCaptureFn] = {
    Rank.MAN: man_has_capture,
    Rank.KING: king_has_capture,
}


def has_capture_from(board: Board, position: Position) -> bool:
    """Does the piece standing on this square have at least one capture available? (False for an empty square)"""
    piece = board.piece(position)
    if piece is None:
        return False
    return CAPTURE_RULES[piece.rank](board, position)


def player_has_any_capture(
    board: Board, color: Color, must_continue_from: Optional[Position] = None
) -> bool:
    """
    Forced capture check.

    In the middle of a capture chain only the piece that is jumping may move, so only that square is checked.
    """
    if must_continue_from is not None:
        return has_capture_from(board, must_continue_from)

    return any(
        has_capture_from(board, position) for position in board.locate_color(color)
    )


# --- WHICH PIECE DOES A GIVEN JUMP CAPTURE? ---
def man_capture_target(
    board: Board, from_position: Position, to_position: Position
) -> Optional[Position]:
    """A man capture is a jump of exactly two squares diagonally, over an enemy piece, onto an empty square."""
    piece = board.piece(from_position)
    if piece is None:
        return None

    d_row = to_position.row - from_position.row
    d_col = to_position.col - from_position.col
    if abs(d_row) != 2 or abs(d_col) != 2:
        return None

    middle = Position(from_position.row + d_row // 2, from_position.col + d_col // 2)
    jumped_piece = board.piece(middle)
    if jumped_piece is None or not jumped_piece.is_enemy_of(piece):
        return None

    if not board.is_empty(to_position):
        return None
    return middle


def king_capture_target(
    board: Board, from_position: Position, to_position: Position
) -> Optional[Position]:
    """
    A king capture flies along a diagonal.
    ----

    Exactly one enemy piece on the path, no own pieces, every other square empty, and an empty square to land on.
    The king may land on any such empty square beyond the enemy: every landing distance is a separate (legal) move.
    """
    piece = board.piece(from_position)
    if piece is None or not is_diagonal_line(from_position, to_position):
        return None

    enemy_square: Optional[Position] = None
    for square in squares_between(from_position, to_position):
        found = board.piece(square)
        if found is None:
            continue
        # own piece blocks, and a second enemy cannot be jumped in the same move
        if not found.is_enemy_of(piece) or enemy_square is not None:
            return None
        enemy_square = square

    if enemy_square is None or not board.is_empty(to_position):
        return None
    return enemy_square


CaptureTargetFn = Callable[[Board, Position, Position], Optional[Position]]
CAPTURE_TARGET_RULES: dict[Rank, CaptureTargetFn] = {
    Rank.MAN: man_capture_target,
    Rank.KING: king_capture_target,
}


def capture_target(
    board: Board, from_position: Position, to_position: Position
) -> Optional[Position]:
    """Square of the enemy piece this move would capture, or None when the move is not a capture."""
    piece = board.piece(from_position)
    if piece is None:
        return None
    return CAPTURE_TARGET_RULES[piece.rank](board, from_position, to_position)
