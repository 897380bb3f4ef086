"""
Stream connection between the two peers

The host binds its non-loopback IPv4 address and waits for exactly one opponent; the joiner dials it.
No timeouts and no retries: a hung peer blocks the reader forever, a failed read ends the session.
"""

import logging
import socket
from typing import Protocol

from netchess.core.config import Role, SessionConfig
from netchess.core.exceptions import ConnectionClosedError, SetupError
from netchess.net.protocol import ENCODING

_LOGGER = logging.getLogger(__name__)

# Any routable address works: connecting a UDP socket sends nothing, it only picks the outgoing interface
_PROBE_ADDRESS = ("10.255.255.255", 1)


class Connection(Protocol):
    """What the synchronizer needs from the network"""

    def write(self, data: bytes) -> None: ...
    def read_line(self) -> str: ...
    def close(self) -> None: ...


class SocketConnection:
    """Line-oriented wrapper around a connected TCP socket"""

    def __init__(self, sock: socket.socket) -> None:
        self.sock = sock
        self._reader = sock.makefile("r", encoding=ENCODING, errors="replace", newline="\n")

    def write(self, data: bytes) -> None:
        self.sock.sendall(data)

    def read_line(self) -> str:
        """Block until a full line arrives. EOF or any socket error means the peer is gone."""
        try:
            line = self._reader.readline()
        except (OSError, ValueError) as exc:
            raise ConnectionClosedError(f"Reading from peer failed: {exc}") from exc
        if not line:
            raise ConnectionClosedError("Peer closed the connection.")
        return line

    def close(self) -> None:
        self._reader.close()
        self.sock.close()


def local_ipv4() -> str:
    """Find the non-loopback IPv4 address of this host."""
    probe = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        probe.connect(_PROBE_ADDRESS)
        address = probe.getsockname()[0]
    except OSError:
        address = ""
    finally:
        probe.close()

    if address and not address.startswith("127."):
        return address

    # no default route: fall back to whatever the hostname resolves to
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError as exc:
        raise SetupError(f"Could not determine local IP address: {exc}") from exc
    for *_, sockaddr in infos:
        if not sockaddr[0].startswith("127."):
            return sockaddr[0]
    raise SetupError("Could not determine local IP address.")


def host_game(config: SessionConfig) -> SocketConnection:
    """Listen on <local ip>:<port> and accept the first opponent that connects."""
    ip = config.host or local_ipv4()
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        listener.bind((ip, config.port))
        listener.listen(1)
        print(f"Hosting on {ip}:{config.port}. Waiting for an opponent...")
        _LOGGER.info("Hosting on %s:%d", ip, config.port)
        sock, peer = listener.accept()
    except OSError as exc:
        raise SetupError(f"Failed to host game: {exc}") from exc
    finally:
        listener.close()
    _LOGGER.info("Opponent connected from %s:%d", *peer[:2])
    return SocketConnection(sock)


def join_game(config: SessionConfig) -> SocketConnection:
    """Dial the host given in the config."""
    if not config.host:
        raise SetupError("No host address given.")
    try:
        sock = socket.create_connection(config.address)
    except OSError as exc:
        raise SetupError(f"Failed to connect to host: {exc}") from exc
    _LOGGER.info("Connected to %s:%d", *config.address)
    return SocketConnection(sock)


def open_connection(config: SessionConfig) -> SocketConnection:
    if config.role == Role.HOST:
        return host_game(config)
    return join_game(config)
