"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fakes/fixtures required for testing multiple layers (no real network or terminal).
"""

import queue
from typing import Optional

import pytest

from netchess.core.exceptions import ConnectionClosedError
from netchess.ui.controller import Event, KeyEvent


class FakeConnection:
    """Mock the peer connection: lines to hand out in order, and everything written to it."""

    def __init__(self, lines: Optional[list[str]] = None, block_when_empty: bool = False) -> None:
        self.incoming: "queue.Queue[Optional[str]]" = queue.Queue()
        for line in lines or []:
            self.incoming.put(line)
        self.block_when_empty = block_when_empty
        self.written: list[bytes] = []
        self.closed = False

    def write(self, data: bytes) -> None:
        self.written.append(data)

    def read_line(self) -> str:
        if not self.block_when_empty and self.incoming.empty():
            raise ConnectionClosedError("no more lines")
        line = self.incoming.get()
        if line is None:
            raise ConnectionClosedError("closed by test")
        return line

    def hang_up(self) -> None:
        """Unblock a waiting reader with a read failure"""
        self.incoming.put(None)

    def close(self) -> None:
        self.closed = True


class RecordingSurface:
    """Mock the display surface: keeps the last frame as {(x, y): (char, fg, bg)}"""

    def __init__(self) -> None:
        self.cells: dict[tuple[int, int], tuple[str, int, int]] = {}
        self.flushes = 0

    def set_cell(self, x: int, y: int, char: str, fg: int, bg: int) -> None:
        self.cells[(x, y)] = (char, fg, bg)

    def clear(self) -> None:
        self.cells = {}

    def flush(self) -> None:
        self.flushes += 1

    def text_at_row(self, y: int) -> str:
        chars = sorted((x, cell[0]) for (x, row), cell in self.cells.items() if row == y)
        return "".join(char for _, char in chars)


class ScriptedEvents:
    """Mock the input surface: returns the scripted events, then quits"""

    def __init__(self, events: list[Event]) -> None:
        self.events = list(events)

    def next_event(self) -> Event:
        if self.events:
            return self.events.pop(0)
        return KeyEvent("q")


@pytest.fixture
def recording_surface() -> RecordingSurface:
    return RecordingSurface()
