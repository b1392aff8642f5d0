# canvas.py - the plane: sparse (x,y) -> Cell store, no edges
# - absent coordinates read back as the empty cell
# - writing the empty cell deletes the entry, so the dict only holds painted cells
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

Coord = Tuple[int, int]


@dataclass(frozen=True)
class Cell:
    """One painted position: glyph (None = blank space) plus colour indexes.

    Presentation (SGR codes, curses pairs) is derived from this in frame.py /
    screen.py, never stored here.
    """
    glyph: Optional[str] = None
    fg: Optional[int] = None
    bg: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.glyph is None and self.fg is None and self.bg is None

    @property
    def has_background(self) -> bool:
        return self.bg is not None

    @property
    def char(self) -> str:
        return self.glyph if self.glyph is not None else " "


EMPTY = Cell()


class PlaneStore:
    def __init__(self):
        self._cells: Dict[Coord, Cell] = {}

    def get(self, coord: Coord) -> Cell:
        return self._cells.get(coord, EMPTY)

    def set(self, coord: Coord, cell: Cell) -> None:
        if cell.is_empty:
            self._cells.pop(coord, None)
        else:
            self._cells[coord] = cell

    def erase(self, coord: Coord) -> None:
        self._cells.pop(coord, None)

    def clear(self) -> None:
        self._cells = {}

    def window(self, x0:int, y0:int, width:int, height:int) -> Iterator[Tuple[Coord, Cell]]:
        """Painted cells inside the rectangle, in no particular order."""
        if width * height <= len(self._cells):
            for y in range(y0, y0 + height):
                for x in range(x0, x0 + width):
                    cell = self._cells.get((x, y))
                    if cell is not None:
                        yield (x, y), cell
            return
        for (x, y), cell in list(self._cells.items()):
            if x0 <= x < x0 + width and y0 <= y < y0 + height:
                yield (x, y), cell

    def __len__(self):
        return len(self._cells)

    def __contains__(self, coord):
        return coord in self._cells
