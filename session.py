# session.py - one painting session and the event router that drives it
# - a Session owns its plane, viewport, tools and pointer state; nothing is shared
# - events are handled one at a time, each one fully before the next
# - mouse: press starts a stroke (canvas) or clicks a button (strip row)
#          motion continues the stroke, release ends it wherever it happens
import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import export
import frame
from canvas import PlaneStore
from compositor import composite
from tools import ToolState, tip_at
from viewport import Viewport

logger = logging.getLogger(__name__)

QUIT_KEYS = frozenset({"q", "esc", "ctrl+c"})
MAX_SCREEN = 1000  # per side; larger terminal sizes are clamped


class MouseAction(Enum):
    PRESS = "press"
    RELEASE = "release"
    MOTION = "motion"


@dataclass(frozen=True)
class MouseEvent:
    action: MouseAction
    x: int
    y: int


@dataclass(frozen=True)
class KeyEvent:
    key: str


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


Event = Union[MouseEvent, KeyEvent, ResizeEvent]


class Outcome(Enum):
    NONE = "none"
    QUIT = "quit"
    SAVED = "saved"
    SAVE_FAILED = "save_failed"


class Session:
    def __init__(self, export_dir:Optional[str]=None):
        self.id = uuid.uuid4().hex[:8]
        self.store = PlaneStore()
        self.viewport = Viewport()
        self.tools = ToolState()
        self.drawing = False
        self.screen = (0, 0)
        self.export_dir = export_dir

    def handle(self, event: Event) -> Outcome:
        if isinstance(event, MouseEvent):
            return self._mouse(event)
        if isinstance(event, ResizeEvent):
            self.resize(event.width, event.height)
        elif isinstance(event, KeyEvent) and event.key in QUIT_KEYS:
            return Outcome.QUIT
        return Outcome.NONE

    def resize(self, width:int, height:int) -> None:
        """Terminal size; the canvas loses two columns and three rows to border and strip."""
        width = max(0, min(int(width), MAX_SCREEN))
        height = max(0, min(int(height), MAX_SCREEN))
        self.screen = (width, height)
        self.viewport.resize(width - 2, height - 3)

    def render(self):
        return frame.render_frame(self)

    # -- pointer -------------------------------------------------------------

    def _mouse(self, ev: MouseEvent) -> Outcome:
        if ev.action is MouseAction.RELEASE:
            self.drawing = False
        elif ev.action is MouseAction.PRESS:
            if self.viewport.contains(ev.x, ev.y):
                self.drawing = True
                self._stroke(ev.x, ev.y, begin=True)
            elif ev.y == self.screen[1] - 1:
                return self._click_strip(ev.x)
        elif self.drawing:
            self._stroke(ev.x, ev.y, begin=False)
        return Outcome.NONE

    def _stroke(self, sx:int, sy:int, begin:bool) -> None:
        if self.tools.pan_active:
            if begin:
                self.viewport.pan_begin(sx, sy)
            else:
                self.viewport.pan_continue(sx, sy)
            return
        coord = self.viewport.screen_to_plane(sx, sy)
        cell = composite(self.store.get(coord), self.tools)
        if cell is not None:
            self.store.set(coord, cell)

    def _click_strip(self, x:int) -> Outcome:
        _, boxes = frame.layout_strip(self.tools, self.viewport.offset)
        button = frame.hit_test(x, boxes)
        if button == "colors":
            self.tools.select_color(frame.ramp_color(x, boxes["colors"]))
        elif button == "clear":
            self.clear()
        elif button == "erase":
            self.tools.toggle_erase()
        elif button == "move":
            self.tools.toggle_pan()
        elif button == "save":
            return self.save()
        else:
            index = tip_at(x)
            if index is not None:
                self.tools.select_tip(index)
        return Outcome.NONE

    # -- actions -------------------------------------------------------------

    def clear(self) -> None:
        self.store.clear()
        self.viewport.reset()
        self.tools.reset_mode()

    def save(self) -> Outcome:
        # content is fully rendered before export touches the filesystem
        text = frame.to_ansi(frame.render_canvas(self.store, self.viewport))
        if export.save_image(text, self.export_dir):
            return Outcome.SAVED
        logger.warning("session %s: save failed", self.id)
        return Outcome.SAVE_FAILED


def event_from_dict(msg: dict) -> Event:
    """Decode a wire message ({"type": "mouse"|"key"|"resize", ...})."""
    try:
        t = msg["type"]
        if t == "mouse":
            return MouseEvent(MouseAction(msg["action"]), int(msg["x"]), int(msg["y"]))
        if t == "key":
            return KeyEvent(str(msg["key"]))
        if t == "resize":
            return ResizeEvent(int(msg["w"]), int(msg["h"]))
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"bad event {msg!r}: {e}") from e
    raise ValueError(f"unknown event type {t!r}")


def event_to_dict(event: Event) -> dict:
    if isinstance(event, MouseEvent):
        return {"type": "mouse", "action": event.action.value, "x": event.x, "y": event.y}
    if isinstance(event, KeyEvent):
        return {"type": "key", "key": event.key}
    return {"type": "resize", "w": event.width, "h": event.height}
