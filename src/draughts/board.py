"""The Game board: pure storage of which piece stands where, plus iteration. No rule checking happens here."""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.exceptions import InvalidNotationError
from src.core.shared_types import Color
from src.draughts.notation import STARTING_POSITION, is_valid_position
from src.draughts.pieces import Piece
from src.draughts.square import BOARD_SIZE, Position


@dataclass
class Board:
    # only occupied squares are stored
    squares: dict[Position, Piece] = field(default_factory=dict)

    @classmethod
    def starting_position(cls) -> Self:
        """Black fills the dark squares of rows 0-2, white those of rows 5-7."""
        return cls.from_notation(STARTING_POSITION)

    @classmethod
    def empty(cls) -> Self:
        return cls()

    @classmethod
    def from_notation(cls, notation: str) -> Self:
        """Construct a board from the board notation (see notation.py). Pieces can only stand on dark squares."""
        if not is_valid_position(notation):
            raise InvalidNotationError(
                f"Cannot interpret supplied string as a board: {notation!r}"
            )

        squares: dict[Position, Piece] = {}
        for row, row_notation in enumerate(notation.split("/")):
            col = 0
            for character in row_notation:
                if character.isdigit():
                    # skip over the run of empty squares
                    col += int(character)
                else:
                    position = Position(row, col)
                    if not position.is_dark():
                        raise InvalidNotationError(
                            f"Piece {character!r} on light square {position.as_tuple()}: {notation!r}"
                        )
                    squares[position] = Piece.from_symbol(character)
                    col += 1
        return cls(squares)

    def to_notation(self) -> str:
        """Rows are separated by slashes."""
        return "/".join(self._row_to_notation(row) for row in range(BOARD_SIZE))

    def _row_to_notation(self, row: int) -> str:
        characters: list[str] = []
        empty_count = 0
        for col in range(BOARD_SIZE):
            piece = self.piece(Position(row, col))
            if piece is None:
                empty_count += 1
                continue

            if empty_count > 0:
                characters.append(str(empty_count))
                empty_count = 0
            characters.append(piece.to_symbol())

        # if the entire row is empty, then we still place this number in the string
        if empty_count > 0:
            characters.append(str(empty_count))
        return "".join(characters)

    def piece(self, position: Position) -> Optional[Piece]:
        """None for an empty square, and for anything off the board."""
        if not position.is_within_bounds():
            return None
        return self.squares.get(position)

    def is_empty(self, position: Position) -> bool:
        return position.is_within_bounds() and position not in self.squares

    def place_piece(self, piece: Piece, position: Position) -> None:
        self.squares[position] = piece

    def remove_piece(self, position: Position) -> Optional[Piece]:
        return self.squares.pop(position, None)

    def move_piece(self, from_position: Position, to_position: Position) -> Piece:
        piece = self.squares.pop(from_position)
        self.squares[to_position] = piece
        return piece

    def locate_color(self, color: Color) -> list[Position]:
        return [position for position, _ in self.pieces_of(color)]

    def pieces_of(self, color: Color) -> list[tuple[Position, Piece]]:
        return [
            (position, piece)
            for position, piece in self.squares.items()
            if piece.color == color
        ]

    def count_pieces(self) -> dict[Color, int]:
        """Tally how many pieces each player still has on the board"""
        return {color: len(self.locate_color(color)) for color in Color}

    def to_rows(self) -> list[list[Optional[Piece]]]:
        """Full 8x8 grid, row 0 first. Convenient for sending the board to a client."""
        return [
            [self.piece(Position(row, col)) for col in range(BOARD_SIZE)]
            for row in range(BOARD_SIZE)
        ]
