# screen.py - curses glue shared by the local program and the remote client
# - turns curses key/mouse codes into session events
# - draws a rendered frame with lazily allocated colour pairs
import curses
import sys
from typing import Dict, List, Optional, Tuple

from frame import Styled
from session import Event, KeyEvent, MouseAction, MouseEvent, ResizeEvent

KEYS = {ord('q'): "q", 27: "esc", 3: "ctrl+c"}

ALL_MOTION_ON = "\033[?1003h"
ALL_MOTION_OFF = "\033[?1003l"


def setup(stdscr, title:str="Paint") -> None:
    try: curses.curs_set(0)
    except curses.error: pass
    stdscr.keypad(True)
    curses.mouseinterval(0)
    curses.mousemask(curses.ALL_MOUSE_EVENTS | curses.REPORT_MOUSE_POSITION)
    if curses.has_colors():
        curses.start_color()
        curses.use_default_colors()
    # plain mousemask only reports drags; 1003 reports every pointer move
    sys.stdout.write(ALL_MOTION_ON + f"\033]0;{title}\007")
    sys.stdout.flush()


def teardown() -> None:
    sys.stdout.write(ALL_MOTION_OFF)
    sys.stdout.flush()


def size_event(stdscr) -> ResizeEvent:
    rows, cols = stdscr.getmaxyx()
    return ResizeEvent(cols, rows)


def mouse_events(bstate:int, x:int, y:int) -> List[MouseEvent]:
    if bstate & curses.BUTTON1_PRESSED:
        return [MouseEvent(MouseAction.PRESS, x, y)]
    if bstate & curses.BUTTON1_RELEASED:
        return [MouseEvent(MouseAction.RELEASE, x, y)]
    if bstate & curses.BUTTON1_CLICKED:
        return [MouseEvent(MouseAction.PRESS, x, y), MouseEvent(MouseAction.RELEASE, x, y)]
    if bstate & curses.REPORT_MOUSE_POSITION:
        return [MouseEvent(MouseAction.MOTION, x, y)]
    return []


def read_events(stdscr, k:int) -> List[Event]:
    """Events for one getch() result; unknown keys come through as their name."""
    if k == -1:
        return []
    if k == curses.KEY_RESIZE:
        return [size_event(stdscr)]
    if k == curses.KEY_MOUSE:
        try: _id, mx, my, _z, bstate = curses.getmouse()
        except curses.error: return []
        return mouse_events(bstate, mx, my)
    if k in KEYS:
        return [KeyEvent(KEYS[k])]
    if 0 <= k < 0x110000:
        return [KeyEvent(chr(k))]
    return []


class Colors:
    """(fg, bg) -> curses colour pair, allocated on first use."""

    def __init__(self):
        self.pairs: Dict[Tuple[Optional[int], Optional[int]], int] = {}

    def _color(self, c:Optional[int]) -> int:
        if c is None: return -1
        return c % max(1, curses.COLORS)

    def pair(self, fg:Optional[int], bg:Optional[int]) -> int:
        if fg is None and bg is None or not curses.has_colors():
            return 0
        key = (fg, bg)
        if key not in self.pairs:
            n = len(self.pairs) + 1
            if n >= curses.COLOR_PAIRS:
                return 0
            curses.init_pair(n, self._color(fg), self._color(bg))
            self.pairs[key] = n
        return self.pairs[key]

    def attr(self, cell: Styled) -> int:
        a = curses.color_pair(self.pair(cell.fg, cell.bg))
        if cell.bold: a |= curses.A_BOLD
        if cell.underline: a |= curses.A_UNDERLINE
        return a


def draw(stdscr, rows: List[List[Styled]], colors: Colors) -> None:
    stdscr.erase()
    for y, row in enumerate(rows):
        for x, cell in enumerate(row):
            # the bottom-right cell raises after a successful write
            try: stdscr.addstr(y, x, cell.char, colors.attr(cell))
            except curses.error: pass
    stdscr.refresh()
