"""Defines the pieces: a color plus a rank (man or king)"""

from dataclasses import dataclass
from typing import Self

from src.core.shared_types import Color, Rank

# Symbols used in the board notation. A plain lookup table, so the rank never has to be guessed from letter case.
SYMBOL_TO_PIECE: dict[str, tuple[Color, Rank]] = {
    "w": (Color.WHITE, Rank.MAN),
    "W": (Color.WHITE, Rank.KING),
    "b": (Color.BLACK, Rank.MAN),
    "B": (Color.BLACK, Rank.KING),
}

PIECE_TO_SYMBOL: dict[tuple[Color, Rank], str] = {
    value: key for key, value in SYMBOL_TO_PIECE.items()
}

# A man reaching this row gets crowned. White moves UP the board (decreasing row), black moves DOWN.
PROMOTION_ROW: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 7}

# Direction (in rows) of a man's simple move
FORWARD: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}


@dataclass
class Piece:
    color: Color
    rank: Rank = Rank.MAN

    @classmethod
    def from_symbol(cls, symbol: str) -> Self:
        color, rank = SYMBOL_TO_PIECE[symbol]
        return cls(color, rank)

    def to_symbol(self) -> str:
        return PIECE_TO_SYMBOL[(self.color, self.rank)]

    @property
    def is_king(self) -> bool:
        return self.rank == Rank.KING

    def is_enemy_of(self, other: "Piece") -> bool:
        return self.color != other.color

    def promote(self) -> None:
        """Crowning only ever goes one way: a king never demotes."""
        self.rank = Rank.KING
