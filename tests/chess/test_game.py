"""Unit tests for /netchess/chess/game.py"""

import threading

import pytest

from netchess.chess.board import EMPTY_FEN, STARTING_POSITION_FEN, Board
from netchess.chess.game import (
    CANCELLED_MESSAGE,
    DISCONNECTED_MESSAGE,
    GAME_IS_OVER_MESSAGE,
    NOT_YOUR_TURN_MESSAGE,
    SELECT_OWN_PIECE_MESSAGE,
    SELECTED_MESSAGE,
    WELCOME_MESSAGE,
    GameState,
    Phase,
)
from netchess.chess.moves import NULL_MOVE, Move
from netchess.chess.pieces import Color, Piece, PieceType
from netchess.chess.square import Square

E2 = Square(6, 4)
E3 = Square(5, 4)
E4 = Square(4, 4)
E5 = Square(3, 4)


@pytest.fixture
def game() -> GameState:
    return GameState.new()


@pytest.fixture
def kings_only_game() -> GameState:
    """White king on e1, black king on e8, white queen on e2 (one step from taking the black king after Qe7)"""
    board = Board.from_fen(EMPTY_FEN)
    board.place_piece(Piece.from_fen("K"), Square.from_algebraic("e1"))
    board.place_piece(Piece.from_fen("k"), Square.from_algebraic("e8"))
    board.place_piece(Piece.from_fen("Q"), Square.from_algebraic("e2"))
    return GameState(board=board)


# -- CREATION LOGIC --
def test_new_game(game: GameState) -> None:
    assert game.board.to_fen() == STARTING_POSITION_FEN
    assert game.current_player == Color.WHITE
    assert not game.game_over
    assert game.winner is None
    assert game.selected_square is None
    assert game.legal_destinations == set()
    assert game.message == WELCOME_MESSAGE
    assert game.phase == Phase.AWAITING_SELECTION


# -- SELECTION ---
def test_opening_move_scenario(game: GameState) -> None:
    """White selects the e2 pawn, sees e3/e4 (not e5), plays e4 -> black to move, sent as e2e4"""
    assert game.select(E2, Color.WHITE) is None
    assert game.phase == Phase.PIECE_SELECTED
    assert game.selected_square == E2
    assert E3 in game.legal_destinations
    assert E4 in game.legal_destinations
    assert E5 not in game.legal_destinations
    assert game.message == SELECTED_MESSAGE

    move = game.select(E4, Color.WHITE)
    assert move == Move(6, 4, 4, 4)
    assert move.to_notation() == "e2e4"
    assert game.current_player == Color.BLACK
    assert game.board.piece(E4) == Piece(PieceType.PAWN, Color.WHITE)
    assert game.board.piece(E2) is None
    assert game.selected_square is None
    assert game.legal_destinations == set()
    assert game.message == "Black's turn."
    assert game.move_log == [move]


def test_selecting_blocked_rook_gives_no_destinations(game: GameState) -> None:
    game.select(Square(7, 0), Color.WHITE)
    assert game.selected_square == Square(7, 0)
    assert game.legal_destinations == set()


def test_selecting_empty_square(game: GameState) -> None:
    game.select(E4, Color.WHITE)
    assert game.phase == Phase.AWAITING_SELECTION
    assert game.message == SELECT_OWN_PIECE_MESSAGE


def test_selecting_opponent_piece(game: GameState) -> None:
    game.select(Square(1, 4), Color.WHITE)
    assert game.selected_square is None
    assert game.message == SELECT_OWN_PIECE_MESSAGE


def test_cancel_selection_with_illegal_destination(game: GameState) -> None:
    game.select(E2, Color.WHITE)
    assert game.select(E5, Color.WHITE) is None
    assert game.phase == Phase.AWAITING_SELECTION
    assert game.legal_destinations == set()
    assert game.message == CANCELLED_MESSAGE
    assert game.board.to_fen() == STARTING_POSITION_FEN
    assert game.current_player == Color.WHITE


def test_clicking_own_piece_again_cancels(game: GameState) -> None:
    """The selected square itself is not a destination, so it cancels rather than re-selects"""
    game.select(E2, Color.WHITE)
    game.select(E2, Color.WHITE)
    assert game.selected_square is None
    assert game.message == CANCELLED_MESSAGE


# -- TURN ENFORCEMENT ---
def test_not_your_turn(game: GameState) -> None:
    """Black clicking while white is to move: advisory message only"""
    assert game.select(Square(1, 4), Color.BLACK) is None
    assert game.message == NOT_YOUR_TURN_MESSAGE
    assert game.selected_square is None
    assert game.board.to_fen() == STARTING_POSITION_FEN
    assert game.current_player == Color.WHITE


def test_not_your_turn_keeps_existing_selection(game: GameState) -> None:
    """A remote move can hand the turn over while a selection is pending; the stale selection is not touched"""
    game.select(E2, Color.WHITE)
    game.apply_move(Move(6, 3, 4, 3))
    assert game.select(E4, Color.WHITE) is None
    assert game.message == NOT_YOUR_TURN_MESSAGE
    assert game.selected_square == E2
    assert game.board.piece(E4) is None


# -- APPLY MOVE ---
def test_remote_move_scenario(game: GameState) -> None:
    """Black's e7e5 arrives from the peer: applied without any selection, white to move again"""
    game.apply_move(Move(6, 4, 4, 4))
    game.apply_move(Move.from_notation("e7e5"))
    assert game.board.piece(Square(1, 4)) is None
    assert game.board.piece(Square(3, 4)) == Piece(PieceType.PAWN, Color.BLACK)
    assert game.current_player == Color.WHITE
    assert game.message == "White's turn."


def test_apply_move_toggles_regardless_of_source(game: GameState) -> None:
    """Even a move of the 'wrong' color flips the turn; the peer is trusted"""
    game.apply_move(Move.from_notation("e7e5"))
    assert game.current_player == Color.BLACK


def test_capturing_non_king_does_not_end_game(game: GameState) -> None:
    game.apply_move(Move.from_notation("d1d7"))
    assert not game.game_over
    assert game.winner is None


def test_capturing_king_ends_game(kings_only_game: GameState) -> None:
    game = kings_only_game
    game.select(Square.from_algebraic("e2"), Color.WHITE)
    move = game.select(Square.from_algebraic("e7"), Color.WHITE)
    assert move == Move.from_notation("e2e7")
    assert not game.game_over

    game.apply_move(Move.from_notation("e8d8"))
    game.apply_move(Move.from_notation("e7d8"))
    assert game.game_over
    assert game.winner == Color.WHITE
    assert game.message == "Game Over! white wins."
    assert game.phase == Phase.GAME_OVER


def test_black_capturing_king_wins_for_black() -> None:
    board = Board.from_fen("4k3/8/8/8/8/8/4r3/4K3")
    game = GameState(board=board, current_player=Color.BLACK)
    game.apply_move(Move.from_notation("e2e1"))
    assert game.game_over
    assert game.winner == Color.BLACK
    assert game.message == "Game Over! black wins."


def test_no_moves_accepted_after_game_over() -> None:
    game = GameState(board=Board.starting_position(), game_over=True)
    assert game.select(E2, Color.WHITE) is None
    assert game.message == GAME_IS_OVER_MESSAGE
    assert game.selected_square is None


def test_apply_move_after_king_capture_is_ignored() -> None:
    board = Board.from_fen("4k3/8/8/8/8/8/4r3/4K3")
    game = GameState(board=board, current_player=Color.BLACK)
    game.apply_move(Move.from_notation("e2e1"))
    assert game.game_over

    game.apply_move(Move.from_notation("e1e5"))

    assert game.board.to_fen() == "4k3/8/8/8/8/8/8/4r3"
    assert game.current_player == Color.WHITE
    assert game.winner == Color.BLACK
    assert len(game.move_log) == 1


def test_apply_move_after_disconnect_is_ignored(game: GameState) -> None:
    game.end_by_disconnect()
    game.apply_move(Move(6, 4, 4, 4))
    assert game.board.to_fen() == STARTING_POSITION_FEN
    assert game.current_player == Color.WHITE
    assert game.message == DISCONNECTED_MESSAGE


def test_null_move_is_a_noop_on_the_board(game: GameState) -> None:
    """Malformed remote notation becomes a8 -> a8: the board stays, the turn still flips"""
    game.apply_move(NULL_MOVE)
    assert game.board.to_fen() == STARTING_POSITION_FEN
    assert game.current_player == Color.BLACK


# -- DISCONNECT ---
def test_end_by_disconnect(game: GameState) -> None:
    game.end_by_disconnect()
    assert game.game_over
    assert game.winner is None
    assert game.message == DISCONNECTED_MESSAGE
    assert game.phase == Phase.GAME_OVER


# -- LOCKING / SNAPSHOTS ---
def test_snapshot_is_independent_of_later_moves(game: GameState) -> None:
    snapshot = game.snapshot()
    game.apply_move(Move(6, 4, 4, 4))
    assert snapshot.board.to_fen() == STARTING_POSITION_FEN
    assert snapshot.current_player == Color.WHITE


def test_apply_move_waits_for_the_lock(game: GameState) -> None:
    """A remote apply cannot run while the renderer holds the lock"""
    finished = threading.Event()

    def remote() -> None:
        game.apply_move(Move(6, 4, 4, 4))
        finished.set()

    with game.lock:
        worker = threading.Thread(target=remote)
        worker.start()
        assert not finished.wait(timeout=0.1)
        assert game.board.piece(E2) is not None

    worker.join(timeout=2)
    assert finished.is_set()
    assert game.board.piece(E4) is not None


def test_selection_state_is_not_lock_protected(game: GameState) -> None:
    """
    Selection reads/writes do not take the lock. While the lock is held elsewhere a local click still goes through,
    so highlights can briefly disagree with the board a concurrent remote move is about to change.
    """
    with game.lock:
        game.select(E2, Color.WHITE)
        assert game.selected_square == E2
        assert game.legal_destinations == {E3, E4}
