# compositor.py - what a stroke leaves behind on a plane cell
# - solid block over colour: repaint
# - glyph over colour: overlay, keeping the old background
# - anything over an uncoloured cell: fresh paint
from typing import Optional

from canvas import EMPTY, Cell
from tools import ToolState


def paint(tools: ToolState) -> Cell:
    """Fresh cell for the current tip and colour."""
    if tools.tip.is_blank:
        return Cell(bg=tools.color)
    return Cell(glyph=tools.tip.glyph, fg=tools.color)


def overlay(existing: Cell, tools: ToolState) -> Cell:
    return Cell(glyph=tools.tip.glyph, fg=tools.color, bg=existing.bg)


def composite(existing: Cell, tools: ToolState) -> Optional[Cell]:
    """Resulting cell, or None when the stroke must not touch the store (pan)."""
    if tools.erase_active:
        return EMPTY
    if tools.pan_active:
        return None
    if existing.has_background and tools.tip.is_blank:
        return paint(tools)
    if existing.has_background:
        return overlay(existing, tools)
    return paint(tools)
