"""Protocol repository (implemented in memory, and with SQLAlchemy)"""

from typing import Protocol

from src.core.models import RoomModel


class RoomRepository(Protocol):
    """Persistence layer orchestration: the explicitly owned store of live rooms."""

    def get_room(self, room_id: str) -> RoomModel | None:
        """Get room by ID, if record exists."""
        ...

    def save_room(self, room: RoomModel) -> RoomModel:
        """Create the record, or overwrite the existing one with the same ID."""
        ...

    def delete_room(self, room_id: str) -> RoomModel | None:
        """Remove a room's record."""
        ...

    def list_rooms(self) -> list[RoomModel]:
        """All rooms currently stored."""
        ...
