"""
Wire format between the two peers
-----

One move per line: 4 ASCII characters + newline, ex. b"e2e4\\n". No handshake, no acknowledgement.
"""

from netchess.chess.moves import Move

ENCODING = "ascii"
LINE_TERMINATOR = "\n"


def encode_move(move: Move) -> bytes:
    return f"{move.to_notation()}{LINE_TERMINATOR}".encode(ENCODING)


def decode_move(line: str) -> Move:
    """Malformed lines decode to the null move (see Move.from_notation)"""
    return Move.from_notation(line.strip())
