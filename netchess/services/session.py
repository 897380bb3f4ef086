"""Orchestration of one game: local input/render loop + background network reader."""

import logging
from typing import Callable, Optional, Protocol

from netchess.chess.game import GameState
from netchess.chess.pieces import Color
from netchess.net.transport import Connection
from netchess.services.sync import MoveSynchronizer
from netchess.ui.controller import Action, Event, InputController
from netchess.ui.renderer import BoardRenderer, Surface
from netchess.ui.themes import DisplayConfig

_LOGGER = logging.getLogger(__name__)


class EventSource(Protocol):
    def next_event(self) -> Event: ...


class GameSession:
    """Wires the GameState to the peer connection, the display surface and the input events."""

    def __init__(
        self,
        game: GameState,
        connection: Connection,
        player: Color,
        surface: Surface,
        events: EventSource,
        display: Optional[DisplayConfig] = None,
        request_redraw: Optional[Callable[[], None]] = None,
    ) -> None:
        self.game = game
        self.player = player
        self.display = display or DisplayConfig()
        self.events = events
        self.renderer = BoardRenderer(surface)
        self.controller = InputController(game, player, self.display)
        self.sync = MoveSynchronizer(game, connection, on_update=request_redraw)

    def run(self) -> None:
        """
        Play until the local user quits.
        ----

        Once the game is over (king captured or peer gone) clicks only refresh the final message,
        so the last position stays on screen until the user quits. Quitting does not tell the peer anything.
        """
        _LOGGER.info("Session started, playing %s", self.player.value)
        self.sync.start()
        while True:
            self.renderer.draw(self.game, self.controller.cursor, self.display)
            action = self.controller.handle(self.events.next_event())
            if action == Action.QUIT:
                _LOGGER.info("Local player quit")
                return
            if action == Action.SEND and self.controller.outgoing is not None:
                self.sync.send(self.controller.outgoing)
