"""Implementation of (Room)Repository using SQLAlchemy"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError
from src.core.models import GameModel, PlayerModel, RoomModel
from src.db.schema import DBRoom

logger = logging.getLogger(__name__)


class SQLRoomRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_room(self, room_id: str) -> RoomModel | None:
        """Get room by ID, if record exists."""
        room_db = self._fetch_room(room_id)
        if room_db:
            return self._to_model(room_db)
        return None

    def save_room(self, room: RoomModel) -> RoomModel:
        """Create the record, or overwrite the existing one with the same ID."""
        room_db = self._fetch_room(room.room_id)
        if room_db is None:
            room_db = DBRoom(id=room.room_id)
            self.db.add(room_db)

        room_db.board = room.game.board
        room_db.current_player = room.game.current_player
        room_db.status = room.game.status
        room_db.winner = room.game.winner
        room_db.must_continue_from = (
            list(room.game.must_continue_from)
            if room.game.must_continue_from is not None
            else None
        )
        room_db.players = {
            connection_id: {"name": player.name, "color": player.color}
            for connection_id, player in room.players.items()
        }
        room_db.pending_reset = room.pending_reset
        self._commit()
        self.db.refresh(room_db)
        return self._to_model(room_db)

    def delete_room(self, room_id: str) -> RoomModel | None:
        """Remove a room's record."""
        room_db = self._fetch_room(room_id)
        if not room_db:
            return None
        room_model = self._to_model(room_db)
        self.db.delete(room_db)
        self._commit()
        return room_model

    def list_rooms(self) -> list[RoomModel]:
        return [self._to_model(room_db) for room_db in self.db.scalars(select(DBRoom))]

    def _fetch_room(self, room_id: str) -> DBRoom | None:
        query = select(DBRoom).where(DBRoom.id == room_id)
        return self.db.scalar(query)

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to store room changes")
            raise RepositoryError("Failed to store room changes.") from exc

    def _to_model(self, room_db: DBRoom) -> RoomModel:
        """Convert SQLAlchemy model to data transfer model."""
        must_continue_from = (
            (room_db.must_continue_from[0], room_db.must_continue_from[1])
            if room_db.must_continue_from
            else None
        )
        return RoomModel(
            room_id=room_db.id,
            game=GameModel(
                board=room_db.board,
                current_player=room_db.current_player,
                status=room_db.status,
                winner=room_db.winner,
                must_continue_from=must_continue_from,
            ),
            players={
                connection_id: PlayerModel(name=player["name"], color=player["color"])
                for connection_id, player in room_db.players.items()
            },
            pending_reset=room_db.pending_reset,
        )
