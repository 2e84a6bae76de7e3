"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of the board game -->
validating a proposed move, applying it, and deciding whose turn it is next.

Everything here is synchronous and works on in-memory state only. A move is either validated-and-applied
or rejected, in one step, without partially changing the game.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.exceptions import GameStateError
from src.core.models import GameModel
from src.core.shared_types import Color, MoveRejection, Status, opponent
from src.draughts.board import Board
from src.draughts.captures import capture_target, has_capture_from, player_has_any_capture
from src.draughts.moves import Move, MoveKind, MoveVerdict, candidate_moves, classify_move
from src.draughts.notation import is_valid_color_code
from src.draughts.pieces import PROMOTION_ROW, Piece
from src.draughts.square import Position

logger = logging.getLogger(__name__)


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board = field(default_factory=Board.starting_position)
    current_player: Color = Color.WHITE
    status: Status = Status.WAITING
    # NOTE: never assigned. There is no end-of-game detection (no pieces / no moves left) yet.
    winner: Optional[Color] = None
    # set while a capture chain is in progress: the next move has to start from this square
    must_continue_from: Optional[Position] = None

    @classmethod
    def new_game(cls) -> Self:
        """Fresh game in the standard starting position, white to move, waiting for players."""
        return cls(board=Board.starting_position())

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        if model.status not in [status.value for status in Status]:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(Status)}"
            )
        if not is_valid_color_code(model.current_player):
            raise GameStateError(f"Invalid color to move: {model.current_player!r}")
        if model.winner is not None and not is_valid_color_code(model.winner):
            raise GameStateError(f"Invalid winner: {model.winner!r}")

        must_continue_from = (
            Position(*model.must_continue_from)
            if model.must_continue_from is not None
            else None
        )
        return cls(
            board=Board.from_notation(model.board),
            current_player=Color(model.current_player),
            status=Status(model.status),
            winner=Color(model.winner) if model.winner else None,
            must_continue_from=must_continue_from,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            board=self.board.to_notation(),
            current_player=self.current_player.value,
            status=self.status.value,
            winner=self.winner.value if self.winner else None,
            must_continue_from=(
                self.must_continue_from.as_tuple() if self.must_continue_from else None
            ),
        )

    def start(self) -> None:
        """Second player took a seat: the game can begin."""
        if self.status != Status.WAITING:
            raise GameStateError(
                f"Cannot start a game that is not waiting for players. status: {self.status}"
            )
        self._change_status(Status.PLAYING)

    def any_capture_available(self, color: Color) -> bool:
        """
        Is there any capture for this player? (captures are mandatory whenever available)

        ---
        Exposed for UI hints as well, next to being the forced-capture check.
        """
        return player_has_any_capture(self.board, color, self.must_continue_from)

    def validate_move(self, move: Move, color: Color) -> MoveVerdict:
        """
        Pure check of a proposed move by the player with the given color. Never changes the game.
        ----

        ----
        Preconditions (checked in order, first failure wins):
        1. the game is being played
        2. it is your turn
        3. the piece actually moves, and lands on the board
        4. you move one of your own pieces
        5. in the middle of a capture chain, you continue with the same piece
        6. you land on an empty square

        Then the move has to be either a capture, or (only when no capture is available anywhere) a simple move.
        """
        verdict = self._check_move(move, color)
        if verdict.legal:
            logger.debug("Move %s by %s accepted as %s", move, color, verdict.kind)
        else:
            logger.debug("Move %s by %s rejected: %s", move, color, verdict.reason)
        return verdict

    def apply_move(self, move: Move) -> Optional[Position]:
        """
        Apply an already validated move
        -----

        1. remove the captured piece (if any)
        2. move the piece
        3. crown it when it lands on the far row
        4. either keep the turn (capture chain continues) or pass it to the opponent

        Returns the square of the captured piece, if there was one.
        """
        # NOTE: find the captured piece BEFORE the board changes.
        captured = capture_target(self.board, move.from_square, move.to_square)

        # update the board
        piece = self.board.move_piece(move.from_square, move.to_square)
        if captured is not None:
            self.board.remove_piece(captured)

        self._promote_if_needed(piece, move.to_square)

        self._update_turn(captured is not None, move.to_square)
        return captured

    def make_move(self, move: Move, color: Color) -> MoveVerdict:
        """Validate, and only when legal, apply the move. The returned verdict says what happened."""
        verdict = self.validate_move(move, color)
        if verdict.legal:
            self.apply_move(move)
        return verdict

    def legal_moves(self, color: Color) -> list[Move]:
        """
        Every move the player could make right now (empty if it is not their turn).
        ----

        Candidates come from the plain geometry of each piece, then have to survive the full validation.
        """
        if self.status != Status.PLAYING or self.current_player != color:
            return []

        origins = (
            [self.must_continue_from]
            if self.must_continue_from is not None
            else self.board.locate_color(color)
        )
        legal_moves = [
            move
            for origin in origins
            for move in candidate_moves(self.board, origin)
            if self._check_move(move, color).legal
        ]
        return sorted(
            legal_moves,
            key=lambda move: (move.from_square.as_tuple(), move.to_square.as_tuple()),
        )

    # -- PRIVATE HELPERS ---
    def _check_move(self, move: Move, color: Color) -> MoveVerdict:
        # 1. make sure the game is (still) in progress
        if self.status != Status.PLAYING:
            return MoveVerdict.reject(MoveRejection.GAME_NOT_IN_PROGRESS)

        # 2. make sure it is your turn
        if self.current_player != color:
            return MoveVerdict.reject(MoveRejection.NOT_YOUR_TURN)

        # 3. the piece has to go somewhere on the board
        if move.from_square == move.to_square:
            return MoveVerdict.reject(MoveRejection.NO_MOVEMENT)
        if not move.to_square.is_within_bounds():
            return MoveVerdict.reject(MoveRejection.OUT_OF_BOUNDS)

        # 4. you can only move your own pieces (an off-board or empty square holds none)
        piece = self.board.piece(move.from_square)
        if piece is None or piece.color != color:
            return MoveVerdict.reject(MoveRejection.NOT_YOUR_PIECE)

        # 5. capture chain: the same piece has to keep jumping
        if (
            self.must_continue_from is not None
            and move.from_square != self.must_continue_from
        ):
            return MoveVerdict.reject(MoveRejection.MUST_CONTINUE_CHAIN)

        # 6. cannot land on another piece
        if not self.board.is_empty(move.to_square):
            return MoveVerdict.reject(MoveRejection.DESTINATION_OCCUPIED)

        kind = classify_move(self.board, move)
        if kind is None:
            return MoveVerdict.reject(MoveRejection.BLOCKED)
        if kind == MoveKind.CAPTURE:
            captured = capture_target(self.board, move.from_square, move.to_square)
            return MoveVerdict.accept(MoveKind.CAPTURE, captured)

        # forced capture: a simple move is only allowed if no capture exists at all (and never mid-chain)
        if self.must_continue_from is not None or self.any_capture_available(color):
            return MoveVerdict.reject(MoveRejection.MUST_CAPTURE)

        return MoveVerdict.accept(MoveKind.SIMPLE)

    def _promote_if_needed(self, piece: Piece, landing: Position) -> None:
        """A man is crowned the moment it lands on the far row (only the landing square counts)"""
        if not piece.is_king and landing.row == PROMOTION_ROW[piece.color]:
            piece.promote()
            logger.debug("%s man crowned on %s", piece.color, landing.as_tuple())

    def _update_turn(self, did_capture: bool, landing: Position) -> None:
        """
        Either the capture chain continues (same player, same piece), or the turn passes to the opponent.

        NOTE: evaluated after promotion, so a freshly crowned king continues with king captures.
        """
        if did_capture and has_capture_from(self.board, landing):
            self.must_continue_from = landing
            return

        self.must_continue_from = None
        self.current_player = opponent(self.current_player)

    def _change_status(self, new_status: Status) -> None:
        self.status = new_status
