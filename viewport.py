# viewport.py - window onto the plane
# - screen (1,1) is the first cell inside the border, so the -1 correction lives here
# - panning is relative: each move applies only the delta since the previous one
from typing import Tuple

from canvas import Coord


class Viewport:
    def __init__(self, width:int=0, height:int=0):
        self.width = width
        self.height = height
        self.offset: Coord = (0, 0)
        self.pan_anchor: Coord = (0, 0)

    def resize(self, width:int, height:int) -> None:
        self.width = max(0, int(width))
        self.height = max(0, int(height))

    def contains(self, sx:int, sy:int) -> bool:
        """True when the screen position falls on the drawable area."""
        return 1 <= sx <= self.width and 1 <= sy <= self.height

    def screen_to_plane(self, sx:int, sy:int) -> Coord:
        ox, oy = self.offset
        return sx + ox - 1, sy + oy - 1

    def plane_to_screen(self, px:int, py:int) -> Tuple[int, int]:
        ox, oy = self.offset
        return px - ox + 1, py - oy + 1

    def pan_begin(self, sx:int, sy:int) -> None:
        self.pan_anchor = (sx, sy)

    def pan_continue(self, sx:int, sy:int) -> None:
        ax, ay = self.pan_anchor
        ox, oy = self.offset
        self.offset = (ox - (sx - ax), oy - (sy - ay))
        self.pan_anchor = (sx, sy)

    def reset(self) -> None:
        self.offset = (0, 0)
        self.pan_anchor = (0, 0)
