"""Custom exceptions shared across layers"""


class GameError(Exception):
    """Base class for everything netchess raises on purpose."""


class ConnectionClosedError(GameError):
    """The peer closed the stream or a read failed. Recovered into game over by the synchronizer."""


class SetupError(GameError):
    """Hosting or joining a game failed before the board was ever shown."""


class InputSurfaceError(GameError):
    """The terminal reported an unrecoverable error while polling for events. Fatal."""


class InvalidConfigError(GameError):
    """Session or display settings did not pass validation."""
