"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make the models easier to read
PieceColor = str
PlayerName = str
ConnectionId = str
Coordinates = tuple[int, int]


@dataclass
class GameModel:
    """Transport-safe snapshot of a game: enough to rebuild the full state without replaying any history."""

    board: str
    current_player: PieceColor
    status: str
    winner: Optional[PieceColor] = None
    must_continue_from: Optional[Coordinates] = None


@dataclass
class PlayerModel:
    name: PlayerName
    color: PieceColor


@dataclass
class RoomModel:
    """A room: the game being played in it and who is seated (keyed by connection)."""

    room_id: str
    game: GameModel
    players: dict[ConnectionId, PlayerModel] = field(default_factory=dict)
    # connection that asked for a reset the opponent has not answered yet
    pending_reset: Optional[ConnectionId] = None
