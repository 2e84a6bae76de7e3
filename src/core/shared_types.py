"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    WAITING = "waiting"
    PLAYING = "playing"
    # NOTE: part of the state shape, but no code path enters it (no end-of-game detection yet)
    FINISHED = "finished"


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class Rank(StrEnum):
    MAN = "man"
    KING = "king"


class MoveRejection(StrEnum):
    """Why a proposed move was not accepted. Ordered roughly as the checks are performed."""

    GAME_NOT_IN_PROGRESS = "game_not_in_progress"
    NOT_YOUR_TURN = "not_your_turn"
    NO_MOVEMENT = "no_movement"
    OUT_OF_BOUNDS = "out_of_bounds"
    NOT_YOUR_PIECE = "not_your_piece"
    MUST_CONTINUE_CHAIN = "must_continue_chain"
    DESTINATION_OCCUPIED = "destination_occupied"
    MUST_CAPTURE = "must_capture"
    BLOCKED = "blocked"
    # squares missing or not integer coordinates
    MALFORMED_MOVE = "malformed_move"


def opponent(color: Color) -> Color:
    return Color.BLACK if color == Color.WHITE else Color.WHITE
