"""Orchestration of communication from the transport layer to the rules engine and the room store (and the reverse direction)."""

import logging

from src.api.models import (
    GameStateResponse,
    JoinedRoomResponse,
    JoinRoomRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveModel,
    MoveRequest,
    PieceModel,
    PlayerInfo,
    ResetGameRequest,
    ResetRequestNotice,
    ResetResponseRequest,
    RoomDeparture,
    SquareModel,
)
from src.core.exceptions import IllegalMoveError, MustCaptureError, RoomNotFoundError
from src.core.models import ConnectionId
from src.db.repository import RoomRepository
from src.draughts.game import Game
from src.draughts.room import Room

logger = logging.getLogger(__name__)


class RoomService:
    """Orchestration of layers for a draughts room."""

    def __init__(self, repository: RoomRepository) -> None:
        self.repo = repository

    # -- Transport events logic ---
    def join_room(
        self, request: JoinRoomRequest, connection_id: ConnectionId
    ) -> JoinedRoomResponse:
        """A player asks for a seat. The room gets created by its first player."""

        # Retrieve the room (or open a new one)
        stored_model = self.repo.get_room(request.room_id)
        room = (
            Room.from_model(stored_model)
            if stored_model is not None
            else Room(room_id=request.room_id)
        )

        # Seat the player (raises RoomFullError for a third player)
        player = room.add_player(connection_id, request.name)

        # store in repository
        self.repo.save_room(room.to_model())
        logger.info(
            "%s (%s) joined room %r as %s",
            player.name,
            connection_id,
            room.room_id,
            player.color,
        )

        return JoinedRoomResponse(
            room_id=room.room_id,
            player_color=player.color,
            game_state=self._create_game_state(room.game),
            players=self._create_player_infos(room),
        )

    def make_move(
        self, request: MoveRequest, connection_id: ConnectionId
    ) -> GameStateResponse:
        """Make a move attempt. Only a legal move changes (and stores) the game."""

        # Retrieve persisted room and find out which color this connection plays
        room = self._fetch_room(request.room_id)
        color = room.player_color(connection_id)

        # Attempt the move
        move = request.to_move()
        verdict = room.game.make_move(move, color)
        if not verdict.legal:
            logger.info(
                "Rejected move %s by %s in room %r: %s",
                move,
                color,
                room.room_id,
                verdict.reason,
            )
            if verdict.is_forced_capture_violation:
                raise MustCaptureError()
            assert verdict.reason is not None
            raise IllegalMoveError(verdict.reason)

        # store in repository
        self.repo.save_room(room.to_model())
        logger.info("Move %s (%s) by %s in room %r", move, verdict.kind, color, room.room_id)

        return self._create_game_state(room.game)

    def request_reset(
        self, request: ResetGameRequest, connection_id: ConnectionId
    ) -> ResetRequestNotice:
        """A player would like to start over. The opponent has to agree first (see respond_reset)."""
        room = self._fetch_room(request.room_id)
        player = room.request_reset(connection_id)
        self.repo.save_room(room.to_model())
        logger.info("%s requested a reset in room %r", player.color, room.room_id)
        return ResetRequestNotice(from_player=player.color, requester_id=connection_id)

    def respond_reset(
        self, request: ResetResponseRequest, connection_id: ConnectionId
    ) -> GameStateResponse | None:
        """
        The opponent answers a reset request.
        ----
        Accepted: the game is replaced by a fresh one, and its state is returned.
        Declined: the game goes on, returns None.

        Raises ResetError when the request is not open, or when the requester tries to answer it.
        """
        room = self._fetch_room(request.room_id)
        accepted = room.answer_reset(connection_id, request.requester_id, request.accepted)
        self.repo.save_room(room.to_model())

        if not accepted:
            logger.info("Reset declined in room %r", room.room_id)
            return None

        logger.info("Game reset in room %r", room.room_id)
        return self._create_game_state(room.game)

    def leave_room(self, connection_id: ConnectionId) -> list[RoomDeparture]:
        """
        A connection went away: free its seat in every room it was in.
        ----
        Empty rooms are removed. Otherwise the game is discarded and a fresh one waits for a new opponent.
        """
        departures: list[RoomDeparture] = []
        for stored_model in self.repo.list_rooms():
            if connection_id not in stored_model.players:
                continue

            room = Room.from_model(stored_model)
            player = room.remove_player(connection_id)
            logger.info("%s (%s) left room %r", player.name, connection_id, room.room_id)

            if room.is_empty:
                self.repo.delete_room(room.room_id)
                logger.info("Room %r is empty and was removed", room.room_id)
                departures.append(
                    RoomDeparture(room_id=room.room_id, connection_id=connection_id)
                )
                continue

            self.repo.save_room(room.to_model())
            departures.append(
                RoomDeparture(
                    room_id=room.room_id,
                    connection_id=connection_id,
                    game_state=self._create_game_state(room.game),
                )
            )
        return departures

    def get_state(self, room_id: str) -> GameStateResponse:
        """
        Retrieve current game state.
        ----
        A (re)connecting client can rebuild the full state from this, without replaying any history.
        """
        room = self._fetch_room(room_id)
        return self._create_game_state(room.game)

    def legal_moves(
        self, request: LegalMovesRequest, connection_id: ConnectionId
    ) -> LegalMovesResponse:
        """retrieve set of legal moves (and whether a capture is mandatory right now)."""
        room = self._fetch_room(request.room_id)
        color = room.player_color(connection_id)
        return LegalMovesResponse(
            room_id=room.room_id,
            color=color,
            capture_available=room.game.any_capture_available(color),
            moves=[MoveModel.from_move(move) for move in room.game.legal_moves(color)],
        )

    def players(self, room_id: str) -> dict[ConnectionId, PlayerInfo]:
        return self._create_player_infos(self._fetch_room(room_id))

    # -- Internal helpers --
    def _create_game_state(self, game: Game) -> GameStateResponse:
        """Convert the Game to the snapshot sent to the clients."""
        return GameStateResponse(
            board=[
                [
                    PieceModel(color=piece.color, rank=piece.rank) if piece else None
                    for piece in row
                ]
                for row in game.board.to_rows()
            ],
            current_player=game.current_player,
            status=game.status,
            winner=game.winner,
            must_continue_from=(
                SquareModel.from_position(game.must_continue_from)
                if game.must_continue_from
                else None
            ),
        )

    def _create_player_infos(self, room: Room) -> dict[ConnectionId, PlayerInfo]:
        return {
            connection_id: PlayerInfo(name=player.name, color=player.color)
            for connection_id, player in room.players.items()
        }

    def _fetch_room(self, room_id: str) -> Room:
        """Attempt to find the room in the repository and raise error if it fails."""
        room_model = self.repo.get_room(room_id)
        if room_model is None:
            raise RoomNotFoundError(f"Room with {room_id=} not found.")
        return Room.from_model(room_model)
