"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.shared_types import Color, Status
from src.db.schema import Base
from src.draughts.board import Board
from src.draughts.game import Game
from src.draughts.pieces import Piece
from src.draughts.square import Position

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

# (row, col) -> notation symbol ('w', 'b', 'W', 'B')
PiecePlacement = dict[tuple[int, int], str]


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def board_with_pieces() -> Callable[[PiecePlacement], Board]:
    """Call the inner function with the pieces that should be on an otherwise empty board"""

    def _create_board(pieces: PiecePlacement) -> Board:
        board = Board.empty()
        for (row, col), symbol in pieces.items():
            board.place_piece(Piece.from_symbol(symbol), Position(row, col))
        return board

    return _create_board


@pytest.fixture
def game_in_play(
    board_with_pieces: Callable[[PiecePlacement], Board],
) -> Callable[..., Game]:
    """A game that is already being played, set up with the given pieces."""

    def _create_game(
        pieces: PiecePlacement,
        to_move: Color = Color.WHITE,
        must_continue_from: tuple[int, int] | None = None,
    ) -> Game:
        return Game(
            board=board_with_pieces(pieces),
            current_player=to_move,
            status=Status.PLAYING,
            must_continue_from=(
                Position(*must_continue_from) if must_continue_from else None
            ),
        )

    return _create_game
