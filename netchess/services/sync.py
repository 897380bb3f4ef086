"""Keeps the two GameStates in step by replaying each other's moves."""

import logging
import threading
from typing import Callable, Optional

from netchess.chess.game import GameState
from netchess.chess.moves import Move
from netchess.core.exceptions import ConnectionClosedError
from netchess.net.protocol import decode_move, encode_move
from netchess.net.transport import Connection

_LOGGER = logging.getLogger(__name__)


class MoveSynchronizer:
    """
    Outbound: send every locally applied move to the peer.
    Inbound: a background thread reads the peer's moves and applies them through `GameState.apply_move`,
    the same path local moves take.
    """

    def __init__(
        self,
        game: GameState,
        connection: Connection,
        on_update: Optional[Callable[[], None]] = None,
    ) -> None:
        self.game = game
        self.connection = connection
        self.on_update = on_update
        self._reader: Optional[threading.Thread] = None

    def send(self, move: Move) -> None:
        """Fire-and-forget. A failed write is logged, not retried; the reader will notice the broken stream."""
        try:
            self.connection.write(encode_move(move))
        except OSError:
            _LOGGER.warning("Could not send %s to peer", move.to_notation(), exc_info=True)
            return
        _LOGGER.debug("Sent %s", move.to_notation())

    def receive_forever(self) -> None:
        """Apply incoming moves until the connection fails, then end the game."""
        while True:
            try:
                line = self.connection.read_line()
            except ConnectionClosedError as exc:
                _LOGGER.warning("Peer connection lost: %s", exc)
                self.game.end_by_disconnect()
                self._notify()
                return

            move = decode_move(line)
            _LOGGER.debug("Received %r -> %s", line.strip(), move)
            self.game.apply_move(move)
            self._notify()

    def start(self) -> threading.Thread:
        """Run the reader in a daemon thread. It only stops when the connection does (or the process exits)."""
        self._reader = threading.Thread(
            target=self.receive_forever, name="netchess-reader", daemon=True
        )
        self._reader.start()
        return self._reader

    def _notify(self) -> None:
        if self.on_update is not None:
            self.on_update()
