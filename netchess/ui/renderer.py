"""Draws the board, highlights, cursor and status line onto a cell-based surface"""

from typing import Protocol

from netchess.chess.game import GameState
from netchess.chess.pieces import Color
from netchess.chess.square import BOARD_DIMENSIONS, Square
from netchess.ui.controller import CELL_HEIGHT, CELL_WIDTH
from netchess.ui.themes import DEFAULT_COLOR, DisplayConfig

MESSAGE_ROW = BOARD_DIMENSIONS[0] * CELL_HEIGHT + 2
HELP_TEXT = "click: select/move   t: theme   q/Esc: quit"


class Surface(Protocol):
    def set_cell(self, x: int, y: int, char: str, fg: int, bg: int) -> None: ...
    def clear(self) -> None: ...
    def flush(self) -> None: ...


class BoardRenderer:
    def __init__(self, surface: Surface) -> None:
        self.surface = surface

    def draw(self, game: GameState, cursor: Square, display: DisplayConfig) -> None:
        """One frame. The board comes from a locked snapshot so a remote move cannot tear it."""
        snapshot = game.snapshot()
        theme = display.theme
        self.surface.clear()

        for row in range(BOARD_DIMENSIONS[0]):
            for col in range(BOARD_DIMENSIONS[1]):
                square = Square(row, col)
                bg = theme.dark if (row + col) % 2 == 0 else theme.light
                if square == snapshot.selected_square:
                    bg = theme.selected
                elif square in snapshot.legal_destinations:
                    bg = theme.legal

                self._fill_square(row, col, bg)
                piece = snapshot.board.piece(square)
                if piece is not None:
                    fg = theme.white_piece if piece.color == Color.WHITE else theme.black_piece
                    self.surface.set_cell(col * CELL_WIDTH + 1, row * CELL_HEIGHT, piece.symbol, fg, bg)

        self.surface.set_cell(cursor.col * CELL_WIDTH, cursor.row * CELL_HEIGHT, ">", theme.cursor, DEFAULT_COLOR)
        self.surface.set_cell(
            cursor.col * CELL_WIDTH + CELL_WIDTH - 1, cursor.row * CELL_HEIGHT, "<", theme.cursor, DEFAULT_COLOR
        )

        self._write_line(MESSAGE_ROW, snapshot.message)
        self._write_line(MESSAGE_ROW + 1, f"{HELP_TEXT}   [{theme.name}]")
        self.surface.flush()

    def _fill_square(self, row: int, col: int, bg: int) -> None:
        for dy in range(CELL_HEIGHT):
            for dx in range(CELL_WIDTH):
                self.surface.set_cell(col * CELL_WIDTH + dx, row * CELL_HEIGHT + dy, " ", DEFAULT_COLOR, bg)

    def _write_line(self, y: int, text: str) -> None:
        for x, char in enumerate(text):
            self.surface.set_cell(x, y, char, DEFAULT_COLOR, DEFAULT_COLOR)
