"""
Handling of the websocket events.

Key idea: same strategy pattern as the rules engine. Every inbound event name maps onto one handler.
The handlers translate between the wire messages and the RoomService, and decide who gets told what.
"""

import logging
from typing import Any, Awaitable, Callable

from pydantic import ValidationError

from src.api.connections import ConnectionManager
from src.api.models import (
    ErrorNotice,
    JoinRoomRequest,
    LegalMovesRequest,
    MoveRejectedNotice,
    MoveRequest,
    PlayerJoinedNotice,
    PlayerLeftNotice,
    ResetGameRequest,
    ResetResponseRequest,
    RoomRequest,
)
from src.core.exceptions import GameError, IllegalMoveError, MustCaptureError, RoomFullError
from src.core.models import ConnectionId
from src.core.shared_types import MoveRejection
from src.services.room_service import RoomService

logger = logging.getLogger(__name__)

EventData = dict[str, Any]
EventHandlerFn = Callable[[EventData, ConnectionId], Awaitable[None]]


class EventHandler:
    def __init__(self, service: RoomService, manager: ConnectionManager) -> None:
        self.service = service
        self.manager = manager
        self.handlers: dict[str, EventHandlerFn] = {
            "joinRoom": self.on_join_room,
            "makeMove": self.on_make_move,
            "resetGame": self.on_reset_game,
            "resetResponse": self.on_reset_response,
            "legalMoves": self.on_legal_moves,
        }

    async def dispatch(self, message: Any, connection_id: ConnectionId) -> None:
        """Route one inbound message. Problems are reported back to the sender, the connection stays open."""
        if not isinstance(message, dict) or not isinstance(message.get("data", {}), dict):
            await self._report_error(connection_id, "Messages look like {'event': ..., 'data': {...}}.")
            return

        event = message.get("event")
        handler = self.handlers.get(event) if isinstance(event, str) else None
        if handler is None:
            await self._report_error(connection_id, f"Unknown event: {event!r}")
            return

        try:
            await handler(message.get("data", {}), connection_id)
        except ValidationError as exc:
            logger.warning("Malformed %r payload from %s: %s", event, connection_id, exc)
            await self._report_error(connection_id, f"Malformed {event!r} payload.")
        except GameError as exc:
            logger.info("%r from %s failed: %s", event, connection_id, exc)
            await self._report_error(connection_id, str(exc))

    async def on_join_room(self, data: EventData, connection_id: ConnectionId) -> None:
        request = JoinRoomRequest.model_validate(data)
        try:
            response = self.service.join_room(request, connection_id)
        except RoomFullError:
            await self.manager.send(connection_id, "roomFull")
            return

        self.manager.join(response.room_id, connection_id)
        await self.manager.send(connection_id, "joinedRoom", response)

        player = response.players[connection_id]
        notice = PlayerJoinedNotice(
            connection_id=connection_id,
            name=player.name,
            color=player.color,
            game_state=response.game_state,
            players=response.players,
        )
        await self.manager.broadcast(response.room_id, "playerJoined", notice, exclude=connection_id)
        await self.manager.broadcast(response.room_id, "gameUpdate", response.game_state)

    async def on_make_move(self, data: EventData, connection_id: ConnectionId) -> None:
        # a missing room id is a generic error, bad squares are an illegal move
        RoomRequest.model_validate(data)
        try:
            request = MoveRequest.model_validate(data)
        except ValidationError as exc:
            logger.info("Malformed move from %s: %s", connection_id, exc)
            notice = MoveRejectedNotice(
                reason=MoveRejection.MALFORMED_MOVE,
                message="A move needs 'from' and 'to' squares with integer row and col.",
            )
            await self.manager.send(connection_id, "invalidMove", notice)
            return

        try:
            game_state = self.service.make_move(request, connection_id)
        except MustCaptureError as exc:
            notice = MoveRejectedNotice(reason=exc.reason, message=str(exc))
            await self.manager.send(connection_id, "mustCapture", notice)
            return
        except IllegalMoveError as exc:
            notice = MoveRejectedNotice(reason=exc.reason, message=str(exc))
            await self.manager.send(connection_id, "invalidMove", notice)
            return

        await self.manager.broadcast(request.room_id, "gameUpdate", game_state)

    async def on_reset_game(self, data: EventData, connection_id: ConnectionId) -> None:
        request = ResetGameRequest.model_validate(data)
        notice = self.service.request_reset(request, connection_id)
        # Ask the other player
        await self.manager.broadcast(request.room_id, "resetRequest", notice, exclude=connection_id)

    async def on_reset_response(self, data: EventData, connection_id: ConnectionId) -> None:
        request = ResetResponseRequest.model_validate(data)
        game_state = self.service.respond_reset(request, connection_id)
        if game_state is None:
            await self.manager.send(request.requester_id, "resetDeclined")
            return

        await self.manager.broadcast(request.room_id, "gameUpdate", game_state)
        await self.manager.broadcast(request.room_id, "resetConfirmed")

    async def on_legal_moves(self, data: EventData, connection_id: ConnectionId) -> None:
        request = LegalMovesRequest.model_validate(data)
        response = self.service.legal_moves(request, connection_id)
        await self.manager.send(connection_id, "legalMoves", response)

    async def on_disconnect(self, connection_id: ConnectionId) -> None:
        """Free the seats of the connection and tell whoever is left."""
        self.manager.disconnect(connection_id)
        for departure in self.service.leave_room(connection_id):
            notice = PlayerLeftNotice(connection_id=connection_id)
            await self.manager.broadcast(departure.room_id, "playerLeft", notice)
            if departure.game_state is not None:
                await self.manager.broadcast(departure.room_id, "gameUpdate", departure.game_state)

    async def _report_error(self, connection_id: ConnectionId, message: str) -> None:
        await self.manager.send(connection_id, "error", ErrorNotice(message=message))
