"""Turns raw terminal events into game actions (select-then-move over a shared cursor)"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union

from netchess.chess.game import GameState
from netchess.chess.moves import Move
from netchess.chess.pieces import Color
from netchess.chess.square import BOARD_DIMENSIONS, Square
from netchess.core.exceptions import InputSurfaceError
from netchess.ui.themes import DisplayConfig

# Every board square is drawn as a block of CELL_WIDTH x CELL_HEIGHT terminal cells
CELL_WIDTH = 4
CELL_HEIGHT = 2

ESCAPE = "\x1b"
QUIT_KEYS = frozenset({ESCAPE, "q", "Q"})
THEME_KEYS = frozenset({"t", "T"})


@dataclass(frozen=True)
class KeyEvent:
    key: str


@dataclass(frozen=True)
class PointerEvent:
    x: int
    y: int
    pressed: bool = True


@dataclass(frozen=True)
class ErrorEvent:
    error: Exception


@dataclass(frozen=True)
class RefreshEvent:
    """Nothing happened locally, but the picture may be stale (remote move, resize)"""


Event = Union[KeyEvent, PointerEvent, ErrorEvent, RefreshEvent]


class Action(Enum):
    NONE = auto()
    REDRAW = auto()
    SEND = auto()
    QUIT = auto()


def _clamp(value: int, upper: int) -> int:
    return max(0, min(value, upper - 1))


def cell_from_pixel(x: int, y: int) -> Square:
    """Terminal cell -> board square, clamped onto the board"""
    return Square(
        row=_clamp(y // CELL_HEIGHT, BOARD_DIMENSIONS[0]),
        col=_clamp(x // CELL_WIDTH, BOARD_DIMENSIONS[1]),
    )


class InputController:
    def __init__(self, game: GameState, player: Color, display: DisplayConfig) -> None:
        self.game = game
        self.player = player
        self.display = display
        self.cursor = Square(0, 0)
        self.outgoing: Optional[Move] = None

    def handle(self, event: Event) -> Action:
        self.outgoing = None

        if isinstance(event, ErrorEvent):
            raise InputSurfaceError(f"Terminal input failed: {event.error}") from event.error

        if isinstance(event, KeyEvent):
            if event.key in QUIT_KEYS:
                return Action.QUIT
            if event.key in THEME_KEYS:
                self.display.cycle_theme()
                return Action.REDRAW
            return Action.NONE

        if isinstance(event, RefreshEvent):
            return Action.REDRAW

        self.cursor = cell_from_pixel(event.x, event.y)
        if not event.pressed:
            return Action.REDRAW
        return self.confirm()

    def confirm(self) -> Action:
        """Select/move at the current cursor position"""
        move = self.game.select(self.cursor, self.player)
        if move is None:
            return Action.REDRAW
        self.outgoing = move
        return Action.SEND
