# frame.py - render pass: session state -> matrix of styled screen cells
# - canvas box (rounded border) on top, options strip on the last row
# - the strip layout also yields the hit-boxes, so clicks line up with what is drawn
# - rows serialize to an ANSI SGR stream (export) or plain lists (websocket)
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

from canvas import Cell, Coord, PlaneStore
from compositor import paint
from tools import PALETTE_SIZE, TIPS, ToolState
from viewport import Viewport

Box = Tuple[int, int]

BORDER = {"tl": "╭", "tr": "╮", "bl": "╰", "br": "╯", "h": "─", "v": "│"}


class Styled(NamedTuple):
    char: str = " "
    fg: Optional[int] = None
    bg: Optional[int] = None
    bold: bool = False
    underline: bool = False

    @property
    def plain(self) -> bool:
        return self.fg is None and self.bg is None and not self.bold and not self.underline


def styled(cell: Cell) -> Styled:
    return Styled(cell.char, cell.fg, cell.bg)


def _text(s:str, **style) -> List[Styled]:
    return [Styled(ch, **style) for ch in s]


# ---------------------------------------------------------------------------
# Options strip
# ---------------------------------------------------------------------------

def offset_label(offset: Coord) -> str:
    return f"{offset[0]}x{offset[1]}"


def _segments(tools: ToolState, offset: Coord) -> Iterator[Tuple[Optional[str], List[Styled]]]:
    yield None, _text("⟬ colors: ")
    for color in range(PALETTE_SIZE):
        yield "colors", _text("  ", bg=color)
    yield None, _text(" ⟭ ⟬ tips: ")
    for tip in TIPS:
        if tip.is_blank:
            yield None, [Styled(" ", bg=tools.color)]
        else:
            yield None, [Styled(tip.glyph, fg=tools.color)]
        yield None, _text("  ")
    yield None, _text("⟭ ⟬ selected: ")
    yield None, [styled(paint(tools))]
    yield None, _text(" ⟭ ⟬ ")
    yield "clear", _text("clear")
    yield None, _text("    ")
    yield "erase", _text("erase", bold=tools.erase_active, underline=tools.erase_active)
    yield None, _text("    ")
    yield "move", _text("move", bold=tools.pan_active, underline=tools.pan_active)
    yield None, _text(" " + offset_label(offset) + " ⟭ ⟬ ")
    yield "save", _text("save")
    yield None, _text(" ⟭")


def layout_strip(tools: ToolState, offset: Coord) -> Tuple[List[Styled], Dict[str, Box]]:
    """Strip cells plus the inclusive column range of every named button."""
    cells: List[Styled] = []
    boxes: Dict[str, Box] = {}
    for name, run in _segments(tools, offset):
        if name is not None:
            lo, hi = len(cells), len(cells) + len(run) - 1
            if name in boxes:
                lo = boxes[name][0]
            boxes[name] = (lo, hi)
        cells.extend(run)
    return cells, boxes


def hit_test(x:int, boxes: Dict[str, Box]) -> Optional[str]:
    for name, (lo, hi) in boxes.items():
        if lo <= x <= hi:
            return name
    return None


def ramp_color(x:int, box: Box) -> int:
    """Linear remap of a ramp column onto a palette index."""
    lo, hi = box
    return (x - lo) * PALETTE_SIZE // (hi - lo + 1)


# ---------------------------------------------------------------------------
# Canvas and screen
# ---------------------------------------------------------------------------

def render_canvas(store: PlaneStore, viewport: Viewport) -> List[List[Styled]]:
    x0, y0 = viewport.screen_to_plane(1, 1)
    painted = dict(store.window(x0, y0, viewport.width, viewport.height))
    blank = Styled()
    return [[styled(painted[(x, y)]) if (x, y) in painted else blank
             for x in range(x0, x0 + viewport.width)]
            for y in range(y0, y0 + viewport.height)]


def render_frame(session) -> List[List[Styled]]:
    """Full screen for a session: bordered canvas, then the options strip."""
    width, height = session.screen
    if width <= 0 or height <= 0:
        return []
    inner = session.viewport.width
    rows = [_text(BORDER["tl"] + BORDER["h"] * inner + BORDER["tr"])]
    for line in render_canvas(session.store, session.viewport):
        rows.append([Styled(BORDER["v"])] + line + [Styled(BORDER["v"])])
    rows.append(_text(BORDER["bl"] + BORDER["h"] * inner + BORDER["br"]))
    rows = rows[:height - 1]
    strip, _ = layout_strip(session.tools, session.viewport.offset)
    rows.append(strip)
    return [row[:width] for row in rows]


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def _fg_code(color:int) -> int:
    return 30 + color if color < 8 else 90 + (color - 8)


def _bg_code(color:int) -> int:
    return 40 + color if color < 8 else 100 + (color - 8)


def sgr(cell: Styled) -> str:
    if cell.plain:
        return cell.char
    codes = []
    if cell.bold: codes.append("1")
    if cell.underline: codes.append("4")
    if cell.fg is not None: codes.append(str(_fg_code(cell.fg)))
    if cell.bg is not None: codes.append(str(_bg_code(cell.bg)))
    return f"\x1b[{';'.join(codes)}m{cell.char}\x1b[0m"


def to_ansi(rows: List[List[Styled]]) -> str:
    return "\n".join("".join(sgr(c) for c in row) for row in rows)


def to_wire(rows: List[List[Styled]]) -> list:
    return [[list(c) for c in row] for row in rows]


def from_wire(rows: list) -> List[List[Styled]]:
    return [[Styled(*c) for c in row] for row in rows]
