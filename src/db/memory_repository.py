"""Implementation of (Room)Repository keeping everything in a dictionary (default store, nothing survives a restart)"""

import logging
from copy import deepcopy

from src.core.models import RoomModel

logger = logging.getLogger(__name__)


class InMemoryRoomRepository:
    """Rooms stored by ID. Copies go in and out, so callers never alias the stored state."""

    def __init__(self) -> None:
        self._rooms: dict[str, RoomModel] = {}

    def get_room(self, room_id: str) -> RoomModel | None:
        room = self._rooms.get(room_id)
        return deepcopy(room) if room is not None else None

    def save_room(self, room: RoomModel) -> RoomModel:
        if room.room_id not in self._rooms:
            logger.debug("Creating room %r", room.room_id)
        self._rooms[room.room_id] = deepcopy(room)
        return deepcopy(room)

    def delete_room(self, room_id: str) -> RoomModel | None:
        return self._rooms.pop(room_id, None)

    def list_rooms(self) -> list[RoomModel]:
        return [deepcopy(room) for room in self._rooms.values()]
