"""
A Room seats (at most) two players around one Game.

The room decides who plays which color and owns the lifecycle of its Game: the game starts when the second player
sits down, and it gets thrown away (replaced by a fresh one) on a reset or when somebody leaves.
"""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.exceptions import (
    GameStateError,
    PlayerNotInRoomError,
    ResetError,
    RoomFullError,
)
from src.core.models import ConnectionId, PlayerModel, RoomModel
from src.core.shared_types import Color, Status
from src.draughts.game import Game


MAX_PLAYERS = 2
DEFAULT_PLAYER_NAME = "Player"

# first player to sit down gets white
SEATING_ORDER: tuple[Color, ...] = (Color.WHITE, Color.BLACK)


@dataclass
class Player:
    name: str
    color: Color


@dataclass
class Room:
    room_id: str
    game: Game = field(default_factory=Game.new_game)
    players: dict[ConnectionId, Player] = field(default_factory=dict)
    pending_reset: Optional[ConnectionId] = None

    @classmethod
    def from_model(cls, model: RoomModel) -> Self:
        players: dict[ConnectionId, Player] = {}
        for connection_id, player in model.players.items():
            if player.color not in [color.value for color in Color]:
                raise GameStateError(
                    f"Invalid color {player.color!r} for player {player.name!r}"
                )
            players[connection_id] = Player(player.name, Color(player.color))

        return cls(
            room_id=model.room_id,
            game=Game.from_model(model.game),
            players=players,
            pending_reset=model.pending_reset,
        )

    def to_model(self) -> RoomModel:
        return RoomModel(
            room_id=self.room_id,
            game=self.game.to_model(),
            players={
                connection_id: PlayerModel(player.name, player.color.value)
                for connection_id, player in self.players.items()
            },
            pending_reset=self.pending_reset,
        )

    @property
    def is_full(self) -> bool:
        return len(self.players) >= MAX_PLAYERS

    @property
    def is_empty(self) -> bool:
        return len(self.players) == 0

    def add_player(self, connection_id: ConnectionId, name: Optional[str] = None) -> Player:
        """
        Seat a new player
        ----

        The player gets the first color (in SEATING_ORDER) that is still free. Once both seats are taken, the game starts.
        """
        if connection_id in self.players:
            return self.players[connection_id]

        if self.is_full:
            raise RoomFullError(f"Room {self.room_id!r} already has {MAX_PLAYERS} players.")

        taken_colors = {player.color for player in self.players.values()}
        color = next(color for color in SEATING_ORDER if color not in taken_colors)
        player = Player(name=name or DEFAULT_PLAYER_NAME, color=color)
        self.players[connection_id] = player

        if self.is_full and self.game.status == Status.WAITING:
            self.game.start()
        return player

    def remove_player(self, connection_id: ConnectionId) -> Player:
        """Someone left: the game in progress is discarded and a fresh one waits for the next opponent."""
        player = self.players.pop(connection_id, None)
        if player is None:
            raise PlayerNotInRoomError(
                f"Connection {connection_id!r} is not seated in room {self.room_id!r}."
            )
        self.reset_game()
        return player

    def request_reset(self, connection_id: ConnectionId) -> Player:
        """A seated player asks to start over. Only the opponent can answer (see answer_reset)."""
        player = self.player(connection_id)
        self.pending_reset = connection_id
        return player

    def answer_reset(
        self, connection_id: ConnectionId, requester_id: ConnectionId, accepted: bool
    ) -> bool:
        """
        The opponent answers the open reset request. Either way the request is closed.
        ----
        Raises ResetError when there is no such request, or when the requester answers it.
        """
        self.player(connection_id)
        if self.pending_reset is None or requester_id != self.pending_reset:
            raise ResetError(
                f"No reset requested by {requester_id!r} in room {self.room_id!r}."
            )
        if connection_id == self.pending_reset:
            raise ResetError("A reset has to be accepted by the opponent.")

        self.pending_reset = None
        if accepted:
            self.reset_game()
        return accepted

    def reset_game(self) -> None:
        """Replace the game with a fresh one. Whether it is playing right away depends on how many players are left."""
        self.game = Game.new_game()
        self.pending_reset = None
        if self.is_full:
            self.game.start()

    def player(self, connection_id: ConnectionId) -> Player:
        player = self.players.get(connection_id)
        if player is None:
            raise PlayerNotInRoomError(
                f"Connection {connection_id!r} is not seated in room {self.room_id!r}."
            )
        return player

    def player_color(self, connection_id: ConnectionId) -> Color:
        return self.player(connection_id).color
