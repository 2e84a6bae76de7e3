"""Tests for src/api/app.py: HTTP endpoints and the websocket event flow, through the FastAPI test client"""

from typing import Any, Iterator

import pytest
from fastapi.testclient import TestClient
from starlette.testclient import WebSocketTestSession

from src.api.app import build_repository, create_app
from src.core.config import Settings
from src.db.memory_repository import InMemoryRoomRepository
from src.db.sql_repository import SQLRoomRepository

ROOM_ID = "lobby"
# white socket, black socket, white connection id, black connection id
SeatedPlayers = tuple[WebSocketTestSession, WebSocketTestSession, str, str]


@pytest.fixture
def client() -> Iterator[TestClient]:
    app = create_app(Settings(log_level="WARNING"), repository=InMemoryRoomRepository())
    # entering the client shares one event loop between all websockets of a test
    with TestClient(app) as test_client:
        yield test_client


def send(ws: WebSocketTestSession, event: str, **data: Any) -> None:
    ws.send_json({"event": event, "data": data})


def receive(ws: WebSocketTestSession, event: str) -> dict[str, Any]:
    """Next message has to be the expected event. Returns its payload."""
    message = ws.receive_json()
    assert message["event"] == event, message
    return message["data"]


def join(ws: WebSocketTestSession, name: str) -> dict[str, Any]:
    send(ws, "joinRoom", roomId=ROOM_ID, name=name)
    return receive(ws, "joinedRoom")


def move(
    ws: WebSocketTestSession, start: tuple[int, int], end: tuple[int, int]
) -> None:
    send(
        ws,
        "makeMove",
        roomId=ROOM_ID,
        **{"from": {"row": start[0], "col": start[1]}, "to": {"row": end[0], "col": end[1]}},
    )


# --- HTTP ---
def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_unknown_room(client: TestClient) -> None:
    response = client.get(f"/rooms/{ROOM_ID}")
    assert response.status_code == 404
    assert "not found" in response.json()["detail"]


def test_build_repository() -> None:
    assert isinstance(build_repository(Settings()), InMemoryRoomRepository)
    assert isinstance(
        build_repository(Settings(database_url="sqlite:///:memory:")), SQLRoomRepository
    )


# --- WEBSOCKET ---
def test_first_player_waits(client: TestClient) -> None:
    with client.websocket_connect("/ws") as ws:
        joined = join(ws, "Wendy")
        assert joined["roomId"] == ROOM_ID
        assert joined["playerColor"] == "white"
        assert joined["gameState"]["status"] == "waiting"
        assert receive(ws, "gameUpdate")["status"] == "waiting"

        response = client.get(f"/rooms/{ROOM_ID}")
        assert response.status_code == 200
        assert response.json()["currentPlayer"] == "white"


def test_full_game_flow(client: TestClient) -> None:
    with client.websocket_connect("/ws") as white:
        join(white, "Wendy")
        receive(white, "gameUpdate")

        with client.websocket_connect("/ws") as black:
            joined = join(black, "Bart")
            assert joined["playerColor"] == "black"
            assert len(joined["players"]) == 2

            notice = receive(white, "playerJoined")
            assert notice["name"] == "Bart"
            assert notice["color"] == "black"
            assert notice["gameState"]["status"] == "playing"
            for ws in (white, black):
                assert receive(ws, "gameUpdate")["status"] == "playing"

            # white opens
            move(white, (5, 0), (4, 1))
            for ws in (white, black):
                state = receive(ws, "gameUpdate")
                assert state["currentPlayer"] == "black"
                assert state["board"][4][1] == {"color": "white", "rank": "man"}

            # white again: not allowed
            move(white, (5, 2), (4, 3))
            rejected = receive(white, "invalidMove")
            assert rejected["reason"] == "not_your_turn"

            # a third player is turned away
            with client.websocket_connect("/ws") as third:
                send(third, "joinRoom", roomId=ROOM_ID, name="Carl")
                receive(third, "roomFull")

            players = client.get(f"/rooms/{ROOM_ID}/players").json()
            assert sorted(player["color"] for player in players.values()) == ["black", "white"]

        # black left: white waits for a new opponent with a fresh board
        left = receive(white, "playerLeft")
        assert "socketId" in left
        state = receive(white, "gameUpdate")
        assert state["status"] == "waiting"
        assert state["board"][5][0] == {"color": "white", "rank": "man"}

    # everybody left: the room is gone
    assert client.get(f"/rooms/{ROOM_ID}").status_code == 404


def test_forced_capture_is_reported(client: TestClient) -> None:
    with client.websocket_connect("/ws") as white, client.websocket_connect("/ws") as black:
        join(white, "Wendy")
        receive(white, "gameUpdate")
        join(black, "Bart")
        receive(white, "playerJoined")
        receive(white, "gameUpdate")
        receive(black, "gameUpdate")

        # set up a capture for black: (2, 1) can take (3, 2) once white moves there
        for ws, start, end in [
            (white, (5, 0), (4, 1)),
            (black, (2, 3), (3, 4)),
            (white, (4, 1), (3, 2)),
        ]:
            move(ws, start, end)
            receive(white, "gameUpdate")
            receive(black, "gameUpdate")

        send(black, "legalMoves", roomId=ROOM_ID)
        legal = receive(black, "legalMoves")
        assert legal["captureAvailable"] is True
        assert all(abs(m["to"]["row"] - m["from"]["row"]) == 2 for m in legal["moves"])

        move(black, (2, 7), (3, 6))
        rejected = receive(black, "mustCapture")
        assert rejected["reason"] == "must_capture"
        assert rejected["message"] == "You must capture when a capture is available!"


def test_reset_flow(client: TestClient) -> None:
    with client.websocket_connect("/ws") as white, client.websocket_connect("/ws") as black:
        white_id = next(iter(join(white, "Wendy")["players"]))
        receive(white, "gameUpdate")
        black_id = next(sid for sid in join(black, "Bart")["players"] if sid != white_id)
        receive(white, "playerJoined")
        receive(white, "gameUpdate")
        receive(black, "gameUpdate")

        send(black, "resetGame", roomId=ROOM_ID)
        request = receive(white, "resetRequest")
        assert request == {"fromPlayer": "black", "requesterId": black_id}

        # declined: only the requester hears about it
        send(white, "resetResponse", roomId=ROOM_ID, accepted=False, requesterId=black_id)
        receive(black, "resetDeclined")

        # the answer closed the request, black has to ask again
        send(black, "resetGame", roomId=ROOM_ID)
        receive(white, "resetRequest")
        send(white, "resetResponse", roomId=ROOM_ID, accepted=True, requesterId=black_id)
        for ws in (white, black):
            assert receive(ws, "gameUpdate")["status"] == "playing"
            receive(ws, "resetConfirmed")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("this is not json", "Messages look like"),
        ('["joinRoom"]', "Messages look like"),
        ('{"event": "dance", "data": {}}', "Unknown event"),
        ('{"event": "joinRoom", "data": {"roomId": "  "}}', "room id is required"),
        ('{"event": "makeMove", "data": {"from": {"row": 5, "col": 0}}}', "Malformed"),
        ('{"event": "resetGame", "data": {"roomId": "nowhere"}}', "not found"),
    ],
)
def test_bad_messages_are_reported(client: TestClient, raw: str, expected: str) -> None:
    """The connection survives a bad message, the sender gets an error event"""
    with client.websocket_connect("/ws") as ws:
        ws.send_text(raw)
        error = receive(ws, "error")
        assert expected in error["message"]

        # still usable afterwards
        assert join(ws, "Wendy")["playerColor"] == "white"


def test_binary_frame_is_reported(client: TestClient) -> None:
    with client.websocket_connect("/ws") as ws:
        ws.send_bytes(b'{"event": "joinRoom"}')
        assert "Messages look like" in receive(ws, "error")["message"]
        assert join(ws, "Wendy")["playerColor"] == "white"


@pytest.fixture
def two_players(client: TestClient) -> Iterator[SeatedPlayers]:
    """White and black seated in ROOM_ID, all join messages consumed. Yields both sockets and connection ids."""
    with client.websocket_connect("/ws") as white, client.websocket_connect("/ws") as black:
        white_id = next(iter(join(white, "Wendy")["players"]))
        receive(white, "gameUpdate")
        black_id = next(sid for sid in join(black, "Bart")["players"] if sid != white_id)
        receive(white, "playerJoined")
        receive(white, "gameUpdate")
        receive(black, "gameUpdate")
        yield white, black, white_id, black_id


@pytest.mark.parametrize(
    "squares",
    [
        {"from": {"row": "a", "col": 0}, "to": {"row": 4, "col": 1}},
        {"from": {"row": 5, "col": 0}, "to": {"row": 4}},
        {"from": {"row": 5, "col": 0}},
        {"from": [5, 0], "to": [4, 1]},
    ],
)
def test_malformed_squares_are_an_invalid_move(
    client: TestClient,
    two_players: SeatedPlayers,
    squares: dict[str, Any],
) -> None:
    white, _, _, _ = two_players
    send(white, "makeMove", roomId=ROOM_ID, **squares)
    rejected = receive(white, "invalidMove")
    assert rejected["reason"] == "malformed_move"

    # nothing happened to the game
    assert client.get(f"/rooms/{ROOM_ID}").json()["currentPlayer"] == "white"


def test_off_board_squares_are_an_invalid_move(
    two_players: SeatedPlayers,
) -> None:
    white, _, _, _ = two_players
    move(white, (5, 0), (-1, 9))
    assert receive(white, "invalidMove")["reason"] == "out_of_bounds"


def test_reset_without_request_is_refused(
    client: TestClient,
    two_players: SeatedPlayers,
) -> None:
    white, black, white_id, _ = two_players
    move(white, (5, 0), (4, 1))
    receive(white, "gameUpdate")
    receive(black, "gameUpdate")

    # white answers a request nobody made
    send(white, "resetResponse", roomId=ROOM_ID, accepted=True, requesterId=white_id)
    assert "No reset requested" in receive(white, "error")["message"]

    # white asks, then tries to accept on black's behalf
    send(white, "resetGame", roomId=ROOM_ID)
    receive(black, "resetRequest")
    send(white, "resetResponse", roomId=ROOM_ID, accepted=True, requesterId=white_id)
    assert "opponent" in receive(white, "error")["message"]

    state = client.get(f"/rooms/{ROOM_ID}").json()
    assert state["currentPlayer"] == "black"
    assert state["board"][4][1] == {"color": "white", "rank": "man"}
