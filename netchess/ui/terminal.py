"""curses implementation of the display surface and the input event source"""

import curses
import threading
from typing import Optional

from netchess.ui.controller import ESCAPE, ErrorEvent, Event, KeyEvent, PointerEvent, RefreshEvent
from netchess.ui.themes import DEFAULT_COLOR

# get_wch() wakes up this often to check whether the network thread asked for a redraw
POLL_INTERVAL_MS = 100
ESCAPE_DELAY_MS = 25

CLICK_MASK = curses.BUTTON1_PRESSED | curses.BUTTON1_CLICKED


class CursesSurface:
    """Cell buffer on top of a curses window. Colour pairs are allocated as (fg, bg) combinations show up."""

    def __init__(self, stdscr: "curses.window") -> None:
        self.stdscr = stdscr
        self._pairs: dict[tuple[int, int], int] = {}
        self._redraw_requested = threading.Event()
        self._setup()

    def _setup(self) -> None:
        curses.curs_set(0)
        curses.start_color()
        curses.use_default_colors()
        curses.mousemask(curses.ALL_MOUSE_EVENTS | curses.REPORT_MOUSE_POSITION)
        curses.mouseinterval(0)
        curses.set_escdelay(ESCAPE_DELAY_MS)
        self.stdscr.keypad(True)
        self.stdscr.timeout(POLL_INTERVAL_MS)

    # -- Surface ---
    def clear(self) -> None:
        self.stdscr.erase()

    def set_cell(self, x: int, y: int, char: str, fg: int, bg: int) -> None:
        try:
            self.stdscr.addstr(y, x, char, curses.color_pair(self._pair(fg, bg)))
        except curses.error:
            # writing into the bottom-right corner (or off a small terminal) always errors; nothing to draw there
            pass

    def flush(self) -> None:
        self.stdscr.refresh()

    def _pair(self, fg: int, bg: int) -> int:
        key = (self._fit(fg), self._fit(bg))
        if key not in self._pairs:
            pair_number = len(self._pairs) + 1
            if pair_number >= curses.COLOR_PAIRS:
                return 0
            curses.init_pair(pair_number, *key)
            self._pairs[key] = pair_number
        return self._pairs[key]

    @staticmethod
    def _fit(color: int) -> int:
        """256-colour indexes degrade to the default colour on smaller palettes"""
        if color == DEFAULT_COLOR or color < curses.COLORS:
            return color
        return DEFAULT_COLOR

    # -- Input ---
    def request_redraw(self) -> None:
        """Safe to call from another thread"""
        self._redraw_requested.set()

    def next_event(self) -> Event:
        """Block until the user does something (or a redraw was requested)"""
        while True:
            if self._redraw_requested.is_set():
                self._redraw_requested.clear()
                return RefreshEvent()
            try:
                code = self.stdscr.get_wch()
            except curses.error:
                # timeout: no input yet
                continue
            except KeyboardInterrupt:
                # Ctrl-C is a request to leave, same as Esc
                return KeyEvent(ESCAPE)
            except OSError as exc:
                return ErrorEvent(exc)

            event = self._translate(code)
            if event is not None:
                return event

    def _translate(self, code: "int | str") -> Optional[Event]:
        if isinstance(code, str):
            return KeyEvent(code)
        if code == curses.KEY_MOUSE:
            try:
                _, x, y, _, button_state = curses.getmouse()
            except curses.error:
                return None
            return PointerEvent(x, y, pressed=bool(button_state & CLICK_MASK))
        if code == curses.KEY_RESIZE:
            return RefreshEvent()
        if code == 27:
            return KeyEvent(ESCAPE)
        return None
