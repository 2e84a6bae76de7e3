"""Requests, responses and notices exchanged with the clients (camelCase on the wire)"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.core.exceptions import InvalidRequestError
from src.core.models import ConnectionId
from src.core.shared_types import Color, MoveRejection, Rank, Status
from src.draughts.moves import Move
from src.draughts.square import Position


class WireModel(BaseModel):
    """Accept both snake_case (Python side) and camelCase (client side) field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SquareModel(WireModel):
    # NOTE: no range restriction here. Off-board coordinates are simply an illegal move for the rules engine.
    row: int
    col: int

    @classmethod
    def from_position(cls, position: Position) -> "SquareModel":
        return cls(row=position.row, col=position.col)

    def to_position(self) -> Position:
        return Position(self.row, self.col)


class MoveModel(WireModel):
    from_square: SquareModel = Field(alias="from")
    to_square: SquareModel = Field(alias="to")

    @classmethod
    def from_move(cls, move: Move) -> "MoveModel":
        return cls(
            from_square=SquareModel.from_position(move.from_square),
            to_square=SquareModel.from_position(move.to_square),
        )

    def to_move(self) -> Move:
        return Move(self.from_square.to_position(), self.to_square.to_position())


# --- REQUEST MODELS ---
class RoomRequest(WireModel):
    room_id: str

    @field_validator("room_id")
    @classmethod
    def validate_room_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise InvalidRequestError("A room id is required.")
        return value


class JoinRoomRequest(RoomRequest):
    name: Optional[str] = None


class MoveRequest(RoomRequest, MoveModel):
    pass


class ResetGameRequest(RoomRequest):
    pass


class ResetResponseRequest(RoomRequest):
    accepted: bool
    requester_id: ConnectionId


class LegalMovesRequest(RoomRequest):
    pass


# --- RESPONSE MODELS ---
class PieceModel(WireModel):
    color: Color
    rank: Rank


class GameStateResponse(WireModel):
    """Full snapshot: sent after every change so both players always hold the same state."""

    board: list[list[Optional[PieceModel]]]
    current_player: Color
    status: Status
    winner: Optional[Color]
    must_continue_from: Optional[SquareModel]


class PlayerInfo(WireModel):
    name: str
    color: Color


class JoinedRoomResponse(WireModel):
    room_id: str
    player_color: Color
    game_state: GameStateResponse
    players: dict[ConnectionId, PlayerInfo]


class LegalMovesResponse(WireModel):
    room_id: str
    color: Color
    capture_available: bool
    moves: list[MoveModel]


# --- NOTICES (server -> client events that are not a game state) ---
class PlayerJoinedNotice(WireModel):
    connection_id: ConnectionId = Field(alias="socketId")
    name: str
    color: Color
    game_state: GameStateResponse
    players: dict[ConnectionId, PlayerInfo]


class PlayerLeftNotice(WireModel):
    connection_id: ConnectionId = Field(alias="socketId")


class ResetRequestNotice(WireModel):
    from_player: Color
    requester_id: ConnectionId


class MoveRejectedNotice(WireModel):
    reason: MoveRejection
    message: str


class ErrorNotice(WireModel):
    message: str


class RoomDeparture(WireModel):
    """What happened to a room a player left. No game state means the room was emptied and removed."""

    room_id: str
    connection_id: ConnectionId
    game_state: Optional[GameStateResponse] = None
