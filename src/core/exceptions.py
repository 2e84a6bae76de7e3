"""
Custom exceptions.

Everything derives from GameError so the transport layer can catch a single type and report it back to the client.
"""

from src.core.shared_types import MoveRejection


class GameError(Exception):
    """Top-level exception for anything that goes wrong while handling a request."""


class InvalidRequestError(GameError):
    """Request payload cannot be interpreted."""


class InvalidNotationError(GameError):
    """Board notation string is malformed."""


class GameStateError(GameError):
    """A stored snapshot cannot be turned back into a Game."""


class IllegalMoveError(GameError):
    """Move was rejected by the rules engine."""

    def __init__(self, reason: MoveRejection, message: str | None = None) -> None:
        self.reason = reason
        super().__init__(message or f"Move not allowed: {reason}")


class MustCaptureError(IllegalMoveError):
    """A simple move was attempted while a capture is mandatory."""

    def __init__(self) -> None:
        super().__init__(
            MoveRejection.MUST_CAPTURE,
            "You must capture when a capture is available!",
        )


class RoomError(GameError):
    """Base for problems with rooms/seats."""


class RoomFullError(RoomError):
    pass


class RoomNotFoundError(RoomError):
    pass


class PlayerNotInRoomError(RoomError):
    pass


class ResetError(RoomError):
    """Reset answer without a matching request, or from the player who asked."""


class RepositoryError(GameError):
    pass
