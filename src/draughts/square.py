"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Draughts board used here is always 8x8 (rows and columns both count 0-7)
BOARD_SIZE = 8

Vector = tuple[int, int]

# (d_row, d_col) unit steps along the four diagonals
DIAGONALS: tuple[Vector, ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))


@dataclass(frozen=True)
class Position:
    row: int
    col: int

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_SIZE) and (0 <= self.col < BOARD_SIZE)

    def is_dark(self) -> bool:
        """Pieces only ever stand on the dark squares: those with odd row + col"""
        return (self.row + self.col) % 2 == 1

    def step(self, direction: Vector, distance: int = 1) -> Position:
        d_row, d_col = direction
        return Position(self.row + d_row * distance, self.col + d_col * distance)

    def as_tuple(self) -> tuple[int, int]:
        return (self.row, self.col)


def is_diagonal_line(from_position: Position, to_position: Position) -> bool:
    """Both squares lie on one diagonal, at least one step apart"""
    d_row = to_position.row - from_position.row
    d_col = to_position.col - from_position.col
    return abs(d_row) == abs(d_col) >= 1


def diagonal_direction(from_position: Position, to_position: Position) -> Vector:
    d_row = 1 if to_position.row > from_position.row else -1
    d_col = 1 if to_position.col > from_position.col else -1
    return (d_row, d_col)


def squares_between(from_position: Position, to_position: Position) -> list[Position]:
    """
    The squares strictly in between two squares on the same diagonal (so neither end point is included).
    """
    if not is_diagonal_line(from_position, to_position):
        raise ValueError(
            f"squares_between requires both squares to lie on the same diagonal. \n from: {from_position}\n to:{to_position}"
        )

    direction = diagonal_direction(from_position, to_position)
    distance = abs(to_position.row - from_position.row)
    return [from_position.step(direction, step) for step in range(1, distance)]
