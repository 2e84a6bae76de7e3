"""Keeps track of the open websockets and which room each of them listens to."""

import logging
from collections import defaultdict
from typing import Any, Optional
from uuid import uuid4

from fastapi import WebSocket
from pydantic import BaseModel

from src.core.models import ConnectionId

logger = logging.getLogger(__name__)

Payload = BaseModel | dict[str, Any] | None


def encode(event: str, payload: Payload) -> dict[str, Any]:
    """Envelope every message the same way: {"event": ..., "data": ...}"""
    if isinstance(payload, BaseModel):
        data = payload.model_dump(mode="json", by_alias=True)
    else:
        data = payload or {}
    return {"event": event, "data": data}


class ConnectionManager:
    def __init__(self) -> None:
        self.connections: dict[ConnectionId, WebSocket] = {}
        self.rooms: dict[str, set[ConnectionId]] = defaultdict(set)

    async def connect(self, websocket: WebSocket) -> ConnectionId:
        await websocket.accept()
        connection_id = uuid4().hex
        self.connections[connection_id] = websocket
        logger.info("Client connected: %s", connection_id)
        return connection_id

    def disconnect(self, connection_id: ConnectionId) -> None:
        self.connections.pop(connection_id, None)
        for room_id in list(self.rooms):
            self.leave(room_id, connection_id)
        logger.info("Client disconnected: %s", connection_id)

    def join(self, room_id: str, connection_id: ConnectionId) -> None:
        self.rooms[room_id].add(connection_id)

    def leave(self, room_id: str, connection_id: ConnectionId) -> None:
        members = self.rooms.get(room_id)
        if members is None:
            return
        members.discard(connection_id)
        if not members:
            del self.rooms[room_id]

    async def send(self, connection_id: ConnectionId, event: str, payload: Payload = None) -> None:
        websocket = self.connections.get(connection_id)
        if websocket is None:
            logger.debug("Dropping %r for unknown connection %s", event, connection_id)
            return
        await websocket.send_json(encode(event, payload))

    async def broadcast(
        self,
        room_id: str,
        event: str,
        payload: Payload = None,
        exclude: Optional[ConnectionId] = None,
    ) -> None:
        """Send to everybody in the room (except, optionally, the one who caused the event)"""
        for connection_id in sorted(self.rooms.get(room_id, set())):
            if connection_id == exclude:
                continue
            await self.send(connection_id, event, payload)
