# tools.py - brush tips, colour selection and the paint/erase/pan mode
# - Mode is a closed variant, so erase and pan can never be on together
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

PALETTE_SIZE = 15
BLANK = " "


@dataclass(frozen=True)
class Tip:
    glyph: str
    x: int  # screen column of the tip button in the options strip

    @property
    def is_blank(self) -> bool:
        return self.glyph == BLANK


TIPS: Tuple[Tip, ...] = (
    Tip("░", 51),
    Tip("▒", 54),
    Tip("▓", 57),
    Tip("■", 60),
    Tip("⬤", 63),
    Tip(BLANK, 66),
    Tip(".", 69),
    Tip("◌", 72),
)


def tip_at(x:int) -> Optional[int]:
    for i, tip in enumerate(TIPS):
        if tip.x == x:
            return i
    return None


class Mode(Enum):
    PAINT = "paint"
    ERASE = "erase"
    PAN = "pan"


class ToolState:
    def __init__(self, tip:int=0, color:int=1):
        self.tip_index = tip
        self.color = color
        self.mode = Mode.PAINT

    @property
    def tip(self) -> Tip:
        return TIPS[self.tip_index]

    @property
    def erase_active(self) -> bool:
        return self.mode is Mode.ERASE

    @property
    def pan_active(self) -> bool:
        return self.mode is Mode.PAN

    def select_color(self, color:int) -> None:
        if not 0 <= color < PALETTE_SIZE:
            raise ValueError(f"colour {color} outside 0..{PALETTE_SIZE - 1}")
        self.color = color
        self.mode = Mode.PAINT

    def select_tip(self, index:int) -> None:
        self.tip_index = index
        self.mode = Mode.PAINT

    def toggle_erase(self) -> None:
        self.mode = Mode.PAINT if self.mode is Mode.ERASE else Mode.ERASE

    def toggle_pan(self) -> None:
        self.mode = Mode.PAINT if self.mode is Mode.PAN else Mode.PAN

    def reset_mode(self) -> None:
        self.mode = Mode.PAINT
