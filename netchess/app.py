"""
Command line entrypoint
----

    netchess host [--port 8080]          wait for an opponent, play white
    netchess join 192.168.1.20 [--port]  connect to a host, play black
    netchess                             ask interactively

Setup (prompts, connecting) happens on the plain terminal. Only afterwards curses takes over the screen,
so logging goes to a file.
"""

import argparse
import curses
import logging
import sys
from typing import Callable, Optional, Sequence

from netchess.chess.game import GameState
from netchess.chess.pieces import Color
from netchess.core.config import DEFAULT_PORT, Role, SessionConfig
from netchess.core.exceptions import InvalidConfigError, SetupError
from netchess.net.transport import Connection, open_connection
from netchess.services.session import GameSession
from netchess.ui.terminal import CursesSurface
from netchess.ui.themes import THEMES, DisplayConfig

_LOGGER = logging.getLogger(__name__)

DEFAULT_LOG_FILE = "netchess.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s"

PLAYER_BY_ROLE: dict[Role, Color] = {Role.HOST: Color.WHITE, Role.JOIN: Color.BLACK}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="netchess", description="Two-player chess over a TCP connection.")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE, help="where to write the log (default: %(default)s)")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument(
        "--theme",
        type=int,
        default=0,
        help=f"initial board theme: {', '.join(f'{i}={t.name}' for i, t in enumerate(THEMES))}",
    )

    subparsers = parser.add_subparsers(dest="role")
    host = subparsers.add_parser(Role.HOST.value, help="host a game and play white")
    host.add_argument("--bind", default="", help="address to listen on (default: this machine's LAN address)")
    host.add_argument("--port", type=int, default=DEFAULT_PORT)

    join = subparsers.add_parser(Role.JOIN.value, help="join a hosted game and play black")
    join.add_argument("host", help="address of the hosting machine")
    join.add_argument("--port", type=int, default=DEFAULT_PORT)
    return parser


def configure_logging(log_file: str, level: str) -> None:
    logging.basicConfig(filename=log_file, level=level, format=LOG_FORMAT)


def prompt_session_config(ask: Callable[[str], str] = input) -> SessionConfig:
    """The interactive (h)ost/(j)oin dialogue used when no sub-command is given"""
    print("Welcome to netchess!")
    choice = ask("Do you want to (h)ost or (j)oin a game? ").strip().lower()
    if choice == "h":
        return SessionConfig(role=Role.HOST)
    if choice == "j":
        return SessionConfig(role=Role.JOIN, host=ask("Enter host IP address: "))
    raise SetupError("Invalid choice.")


def session_config_from_args(args: argparse.Namespace) -> Optional[SessionConfig]:
    if args.role == Role.HOST:
        return SessionConfig(role=Role.HOST, host=args.bind, port=args.port)
    if args.role == Role.JOIN:
        return SessionConfig(role=Role.JOIN, host=args.host, port=args.port)
    return None


def play(stdscr: "curses.window", connection: Connection, player: Color, display: DisplayConfig) -> None:
    surface = CursesSurface(stdscr)
    session = GameSession(
        game=GameState.new(),
        connection=connection,
        player=player,
        surface=surface,
        events=surface,
        display=display,
        request_redraw=surface.request_redraw,
    )
    session.run()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file, args.log_level)

    try:
        display = DisplayConfig(theme_index=args.theme)
        config = session_config_from_args(args) or prompt_session_config()
        connection = open_connection(config)
    except (SetupError, InvalidConfigError) as exc:
        _LOGGER.error("Setup failed: %s", exc)
        print(exc, file=sys.stderr)
        return 1

    player = PLAYER_BY_ROLE[config.role]
    _LOGGER.info("Playing %s as %s", player.value, config.role.value)
    try:
        curses.wrapper(play, connection, player, display)
    finally:
        connection.close()
    return 0
