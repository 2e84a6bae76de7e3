"""FastAPI application: a websocket for playing, plus a couple of plain HTTP endpoints to look at the state."""

import json
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.connections import ConnectionManager
from src.api.events import EventHandler
from src.api.models import GameStateResponse, PlayerInfo
from src.core.config import Settings, get_settings
from src.core.exceptions import RoomNotFoundError
from src.core.logging import setup_logging
from src.db.database import build_engine, build_session_factory
from src.db.memory_repository import InMemoryRoomRepository
from src.db.repository import RoomRepository
from src.db.sql_repository import SQLRoomRepository
from src.services.room_service import RoomService

logger = logging.getLogger(__name__)


def decode_frame(text: Optional[str]) -> Any:
    """JSON text frames only. Binary frames and invalid JSON give None, which dispatch reports as malformed."""
    if text is None:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def build_repository(settings: Settings) -> RoomRepository:
    """Rooms live in memory, unless a database is configured."""
    if settings.database_url is None:
        return InMemoryRoomRepository()

    engine = build_engine(settings.database_url, echo=settings.database_echo)
    session_factory = build_session_factory(engine)
    return SQLRoomRepository(session_factory())


def create_app(
    settings: Optional[Settings] = None, repository: Optional[RoomRepository] = None
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    service = RoomService(repository or build_repository(settings))
    manager = ConnectionManager()
    events = EventHandler(service, manager)

    app = FastAPI(title="Draughts server")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.client_origin],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.state.service = service
    app.state.connections = manager

    @app.exception_handler(RoomNotFoundError)
    async def room_not_found_handler(request: Request, exc: RoomNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/rooms/{room_id}", response_model=GameStateResponse)
    async def room_state(room_id: str) -> GameStateResponse:
        return service.get_state(room_id)

    @app.get("/rooms/{room_id}/players", response_model=dict[str, PlayerInfo])
    async def room_players(room_id: str) -> dict[str, PlayerInfo]:
        return service.players(room_id)

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        connection_id = await manager.connect(websocket)
        try:
            while True:
                frame = await websocket.receive()
                if frame["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(frame.get("code", 1000))
                message = decode_frame(frame.get("text"))
                if message is None:
                    logger.warning("Unreadable message from %s", connection_id)
                await events.dispatch(message, connection_id)
        except WebSocketDisconnect:
            pass
        finally:
            await events.on_disconnect(connection_id)

    return app
