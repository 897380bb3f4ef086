"""
The GameState is the entrypoint into the domain layer for the session and the synchronizer.

It owns the board, whose turn it is, the current selection and the status line. Both the local
input loop and the background network reader drive it, so `apply_move` is the one place the board
changes and it does so under `lock`.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Self

from netchess.chess.board import Board
from netchess.chess.moves import Move, legal_destinations
from netchess.chess.pieces import Color, Piece
from netchess.chess.square import Square

_LOGGER = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome! White's turn."
NOT_YOUR_TURN_MESSAGE = "Not your turn!"
SELECTED_MESSAGE = "Piece selected. Click a destination square."
SELECT_OWN_PIECE_MESSAGE = "Select one of your own pieces."
CANCELLED_MESSAGE = "Move cancelled."
GAME_IS_OVER_MESSAGE = "The game is over."
DISCONNECTED_MESSAGE = "Opponent disconnected."


class Phase(Enum):
    AWAITING_SELECTION = auto()
    PIECE_SELECTED = auto()
    GAME_OVER = auto()


@dataclass(frozen=True)
class Snapshot:
    """Consistent copy of everything the renderer needs for one frame"""

    board: Board
    current_player: Color
    game_over: bool
    selected_square: Optional[Square]
    legal_destinations: frozenset[Square]
    message: str


@dataclass
class GameState:
    board: Board
    current_player: Color = Color.WHITE
    game_over: bool = False
    winner: Optional[Color] = None
    selected_square: Optional[Square] = None
    legal_destinations: set[Square] = field(default_factory=set)
    message: str = WELCOME_MESSAGE
    move_log: list[Move] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @classmethod
    def new(cls) -> Self:
        """Standard starting position, white to move"""
        return cls(board=Board.starting_position())

    @property
    def phase(self) -> Phase:
        if self.game_over:
            return Phase.GAME_OVER
        if self.selected_square is not None:
            return Phase.PIECE_SELECTED
        return Phase.AWAITING_SELECTION

    # -- LOCAL INTERACTION ---
    def select(self, square: Square, player: Color) -> Optional[Move]:
        """
        Handle a confirm/click on `square` by the local `player`.
        ----

        * Nothing selected yet: select one of your own pieces and compute where it can go.
        * A piece is selected: a click on one of its destinations makes the move, anything else cancels.

        Returns the move that was applied (so the caller can send it to the peer), otherwise None.
        Invalid interactions only change the status message.
        """
        if self.game_over:
            self.message = GAME_IS_OVER_MESSAGE
            return None

        # turn is enforced per interaction
        if self.current_player != player:
            self.message = NOT_YOUR_TURN_MESSAGE
            return None

        if self.selected_square is None:
            self._try_select(square)
            return None

        if square in self.legal_destinations:
            move = Move.between(self.selected_square, square)
            self.apply_move(move)
            self._clear_selection()
            return move

        self._clear_selection()
        self.message = CANCELLED_MESSAGE
        return None

    def _try_select(self, square: Square) -> None:
        piece = self.board.piece(square)
        if piece is None or piece.color != self.current_player:
            self.message = SELECT_OWN_PIECE_MESSAGE
            return

        self.selected_square = square
        self.legal_destinations = legal_destinations(square, self.board)
        self.message = SELECTED_MESSAGE

    def _clear_selection(self) -> None:
        self.selected_square = None
        self.legal_destinations = set()

    # -- SINGLE MUTATION PATH (local and remote moves) ---
    def apply_move(self, move: Move) -> None:
        """
        Commit a move to the board
        -----

        1. capturing a king ends the game, the player who moved wins
        2. update the board
        3. record the move
        4. hand the turn to the other player

        No legality check: local moves were validated by `select`, remote moves are trusted.
        Once the game is over nothing more is applied.
        """
        with self.lock:
            if self.game_over:
                _LOGGER.warning("Ignoring %s, the game is already over", move.to_notation())
                return

            mover = self.current_player
            captured: Optional[Piece] = self.board.piece_at(move.to_row, move.to_col)
            if captured is not None and captured.is_king:
                self.game_over = True
                self.winner = mover
                self.message = f"Game Over! {mover.value} wins."
                _LOGGER.info("King captured by %s with %s", mover.value, move.to_notation())

            self.board.move_piece(move.from_row, move.from_col, move.to_row, move.to_col)
            self.move_log.append(move)

            self.current_player = mover.opponent
            if not self.game_over:
                self.message = f"{self.current_player.title}'s turn."

    def end_by_disconnect(self) -> None:
        """The peer went away: nothing more can be played"""
        with self.lock:
            self.game_over = True
            self.message = DISCONNECTED_MESSAGE

    def snapshot(self) -> Snapshot:
        """
        Board copy taken under the lock. The selection fields are read alongside it but they are not
        guarded by the lock anywhere, so a remote move landing between a local selection and this call
        can leave highlights that no longer match the board until the next click.
        """
        with self.lock:
            return Snapshot(
                board=self.board.copy(),
                current_player=self.current_player,
                game_over=self.game_over,
                selected_square=self.selected_square,
                legal_destinations=frozenset(self.legal_destinations),
                message=self.message,
            )
