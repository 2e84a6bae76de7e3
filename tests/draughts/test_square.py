"""Unit tests for src/draughts/square.py"""

import pytest

from src.draughts.square import (
    BOARD_SIZE,
    DIAGONALS,
    Position,
    diagonal_direction,
    is_diagonal_line,
    squares_between,
)


@pytest.mark.parametrize(
    "row, col, expected",
    [
        (0, 0, True),
        (7, 7, True),
        (3, 4, True),
        (-1, 0, False),
        (0, -1, False),
        (8, 0, False),
        (0, BOARD_SIZE, False),
    ],
)
def test_within_bounds(row: int, col: int, expected: bool) -> None:
    assert Position(row, col).is_within_bounds() == expected


@pytest.mark.parametrize(
    "row, col, expected",
    [(0, 1, True), (5, 0, True), (0, 0, False), (4, 4, False)],
)
def test_dark_squares(row: int, col: int, expected: bool) -> None:
    """Dark squares are the ones where row + col is odd"""
    assert Position(row, col).is_dark() == expected


def test_step_along_all_diagonals() -> None:
    start = Position(4, 4)
    assert [start.step(direction) for direction in DIAGONALS] == [
        Position(3, 3),
        Position(3, 5),
        Position(5, 3),
        Position(5, 5),
    ]
    assert start.step((-1, -1), 3) == Position(1, 1)


def test_squares_are_hashable_values() -> None:
    """Positions are used as dictionary keys by the board"""
    assert Position(2, 3) == Position(2, 3)
    assert len({Position(2, 3), Position(2, 3), Position(3, 2)}) == 2


@pytest.mark.parametrize(
    "start, end, expected",
    [
        ((4, 4), (1, 1), True),
        ((4, 4), (5, 3), True),
        ((4, 4), (4, 4), False),
        ((4, 4), (2, 3), False),
        ((4, 4), (4, 6), False),
    ],
)
def test_is_diagonal_line(start: tuple[int, int], end: tuple[int, int], expected: bool) -> None:
    assert is_diagonal_line(Position(*start), Position(*end)) == expected


def test_diagonal_direction() -> None:
    assert diagonal_direction(Position(4, 4), Position(0, 0)) == (-1, -1)
    assert diagonal_direction(Position(4, 4), Position(6, 2)) == (1, -1)


def test_squares_between() -> None:
    """End points are excluded"""
    assert squares_between(Position(4, 4), Position(0, 0)) == [
        Position(3, 3),
        Position(2, 2),
        Position(1, 1),
    ]
    assert squares_between(Position(2, 5), Position(3, 4)) == []


def test_squares_between_requires_diagonal() -> None:
    with pytest.raises(ValueError):
        squares_between(Position(0, 0), Position(0, 4))
