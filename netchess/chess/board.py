"""The Game board owns the 8x8 grid of pieces (in chess: the `position`)"""

from dataclasses import dataclass
from typing import Optional, Self

from netchess.chess.pieces import Color, Piece
from netchess.chess.square import BOARD_DIMENSIONS, Square

STARTING_POSITION_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_FEN = "/".join(["8"] * BOARD_DIMENSIONS[0])

Grid = list[list[Optional[Piece]]]


def _empty_grid() -> Grid:
    return [[None] * BOARD_DIMENSIONS[1] for _ in range(BOARD_DIMENSIONS[0])]


@dataclass
class Board:
    grid: Grid

    @classmethod
    def empty(cls) -> Self:
        return cls(_empty_grid())

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_POSITION_FEN)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (row 0), read from the a-file to the h-file
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank (row 7) are the white pieces
        """
        grid = _empty_grid()
        for row, fen_one_rank in enumerate(fen_str.split("/")):
            col = 0
            for character in fen_one_rank:
                if character.isalpha():
                    grid[row][col] = Piece.from_fen(character)
                    col += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
        return cls(grid)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in range(BOARD_DIMENSIONS[0]))

    def _row_to_fen(self, row: int) -> str:
        fen_characters: list[str] = []
        empty_count = 0
        for piece in self.grid[row]:
            if piece is None:
                empty_count += 1
                continue
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())

        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def piece_at(self, row: int, col: int) -> Optional[Piece]:
        """Callers are expected to pass in-bounds coordinates."""
        return self.grid[row][col]

    def piece(self, square: Square) -> Optional[Piece]:
        return self.grid[square.row][square.col]

    def is_empty(self, square: Square) -> bool:
        return self.piece(square) is None

    def is_opponent(self, square: Square, color: Color) -> bool:
        """True if the square holds a piece of the other color"""
        piece = self.piece(square)
        return piece is not None and piece.color != color

    def place_piece(self, piece: Piece, square: Square) -> None:
        """Only used to set up positions. During play the population changes through `move_piece` alone."""
        self.grid[square.row][square.col] = piece

    def move_piece(self, from_row: int, from_col: int, to_row: int, to_col: int) -> None:
        """Overwrite the destination with whatever is on the source and clear the source. No legality check."""
        piece_that_moved = self.grid[from_row][from_col]
        self.grid[from_row][from_col] = None
        self.grid[to_row][to_col] = piece_that_moved

    def copy(self) -> Self:
        """Pieces are immutable, so copying the rows is enough for an independent snapshot"""
        return type(self)([list(row) for row in self.grid])
