"""
Compact text notation of a board position (the draughts counterpart of the FEN board field).

<row 0>/<row 1>/.../<row 7>

* Rows are written top (row 0, black's home side) to bottom (row 7, white's home side), columns left to right.
* A digit denotes that many consecutive empty squares.
* 'w' / 'b' denote a white / black man, 'W' / 'B' a white / black king (see SYMBOL_TO_PIECE).

ex) The standard starting position
1b1b1b1b/b1b1b1b1/1b1b1b1b/8/8/w1w1w1w1/1w1w1w1w/w1w1w1w1
"""

from src.draughts.pieces import SYMBOL_TO_PIECE
from src.draughts.square import BOARD_SIZE

STARTING_POSITION = "1b1b1b1b/b1b1b1b1/1b1b1b1b/8/8/w1w1w1w1/1w1w1w1w/w1w1w1w1"
EMPTY_POSITION = "/".join(["8"] * BOARD_SIZE)


def is_valid_position(position: str) -> bool:
    """Check if the string follows the notation and describes a correctly sized board."""
    rows = position.split("/")
    if len(rows) != BOARD_SIZE:
        return False

    for row_notation in rows:
        if not is_valid_row(row_notation):
            return False
    return True


def is_valid_row(row_notation: str) -> bool:
    col_count = 0
    for character in row_notation:
        if character.isdigit():
            col_count += int(character)
        elif character in SYMBOL_TO_PIECE:
            col_count += 1
        else:
            # immediately invalidate if the character is anything else
            return False

    return col_count == BOARD_SIZE


def is_valid_color_code(color: str) -> bool:
    return color in {"white", "black"}
