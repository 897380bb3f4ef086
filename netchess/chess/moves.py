"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the destination squares for each piece type.

Moves are pseudo-legal: nothing here checks whether a move leaves your own king capturable.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from netchess.chess.pieces import Color, Piece, PieceType
from netchess.chess.square import BOARD_DIMENSIONS, Square

_LOGGER = logging.getLogger(__name__)


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...
    def is_opponent(self, square: Square, color: Color) -> bool: ...


Vector = tuple[int, int]

NOTATION_LENGTH = 4


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_row: int
    from_col: int
    to_row: int
    to_col: int

    @classmethod
    def between(cls, from_square: Square, to_square: Square) -> Self:
        return cls(from_square.row, from_square.col, to_square.row, to_square.col)

    @property
    def from_square(self) -> Square:
        return Square(self.from_row, self.from_col)

    @property
    def to_square(self) -> Square:
        return Square(self.to_row, self.to_col)

    @classmethod
    def from_notation(cls, text: str) -> Self:
        """
        Coordinate notation
        ---

        <from file><from rank><to file><to rank>, ex. "e2e4" is (6, 4) -> (4, 4).

        Anything that is not exactly 4 characters, or that points outside the board, decodes to
        NULL_MOVE (a1-equivalent (0, 0) onto itself) instead of raising. The peer has no way to be told
        about a rejected move, so the line is consumed and applied like any other.
        """
        if len(text) != NOTATION_LENGTH:
            _LOGGER.warning("Malformed move notation %r, using null move", text)
            return cls(0, 0, 0, 0)

        from_col = ord(text[0]) - ord("a")
        from_row = BOARD_DIMENSIONS[0] - (ord(text[1]) - ord("0"))
        to_col = ord(text[2]) - ord("a")
        to_row = BOARD_DIMENSIONS[0] - (ord(text[3]) - ord("0"))

        move = cls(from_row, from_col, to_row, to_col)
        if not (move.from_square.is_within_bounds() and move.to_square.is_within_bounds()):
            _LOGGER.warning("Move notation %r points off the board, using null move", text)
            return cls(0, 0, 0, 0)
        return move

    def to_notation(self) -> str:
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}"


NULL_MOVE = Move(0, 0, 0, 0)


# --- MOVEMENT RULES ---
def raycasting_move(square: Square, board: Board, directions: list[Vector]) -> set[Square]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """
    piece = board.piece(square)
    if piece is None:
        return set()

    destinations: set[Square] = set()
    for d_row, d_col in directions:
        target_square = square
        while True:
            target_square = target_square.offset(d_row, d_col)
            if not target_square.is_within_bounds():
                break

            if not board.is_empty(target_square):
                # only the first occupied square counts, and only if it can be captured.
                if board.is_opponent(target_square, piece.color):
                    destinations.add(target_square)
                break

            destinations.add(target_square)
    return destinations


def single_step_move(square: Square, board: Board, deltas: list[Vector]) -> set[Square]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump a single step"""
    piece = board.piece(square)
    if piece is None:
        return set()

    destinations: set[Square] = set()
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if not target_square.is_within_bounds():
            continue

        if board.is_empty(target_square) or board.is_opponent(target_square, piece.color):
            destinations.add(target_square)
    return destinations


# White moves UP the board (towards row 0), black moves DOWN (towards row 7)
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
PAWN_START_ROW: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}


def candidate_pawn_moves(square: Square, board: Board) -> set[Square]:
    """
    A pawn:
    - moves by a single square forward onto an empty square.
    - can move by two from its starting row, if the single step was possible and the target is empty
    - takes diagonally (forward), only onto an opponent's piece

    NOTE: No en passant, no promotion.
    """
    piece = board.piece(square)
    if piece is None:
        return set()

    direction = PAWN_DIRECTION[piece.color]
    destinations: set[Square] = set()

    one_step = square.offset(direction, 0)
    if one_step.is_within_bounds() and board.is_empty(one_step):
        destinations.add(one_step)
        if square.row == PAWN_START_ROW[piece.color]:
            two_steps = square.offset(2 * direction, 0)
            if two_steps.is_within_bounds() and board.is_empty(two_steps):
                destinations.add(two_steps)

    for d_col in (-1, 1):
        target_square = square.offset(direction, d_col)
        if target_square.is_within_bounds() and board.is_opponent(target_square, piece.color):
            destinations.add(target_square)
    return destinations


def candidate_knight_moves(square: Square, board: Board) -> set[Square]:
    """Knights always move such that |delta_row| + |delta_col| = 3"""
    knight_deltas: list[Vector] = [
        (-2, -1),
        (-2, 1),
        (-1, -2),
        (-1, 2),
        (1, -2),
        (1, 2),
        (2, -1),
        (2, 1),
    ]
    return single_step_move(square, board, knight_deltas)


DIAGONALS: list[Vector] = [(-1, -1), (-1, 1), (1, -1), (1, 1)]
STRAIGHTS: list[Vector] = [(-1, 0), (1, 0), (0, -1), (0, 1)]


def candidate_bishop_moves(square: Square, board: Board) -> set[Square]:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> set[Square]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> set[Square]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return raycasting_move(square, board, STRAIGHTS + DIAGONALS)


def candidate_king_moves(square: Square, board: Board) -> set[Square]:
    """
    The king can move by a single square at the time. No castling.
    """
    return single_step_move(square, board, STRAIGHTS + DIAGONALS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], set[Square]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def legal_destinations(square: Square, board: Board) -> set[Square]:
    """All pseudo-legal destination squares for whatever stands on `square` (empty set for an empty square)"""
    piece = board.piece(square)
    if piece is None:
        return set()
    movement_rule: CandidateMovesFn = MOVEMENT_RULES[piece.type]
    return movement_rule(square, board)
