"""
Tests for the event router and session aggregate.
"""
import re

import pytest

from canvas import EMPTY, Cell
from session import (
    MAX_SCREEN, KeyEvent, MouseAction, MouseEvent, Outcome, ResizeEvent, Session,
    event_from_dict, event_to_dict,
)
from tools import Mode

STRIP = 12  # last row of a 13-row terminal
ANSI = re.compile(r"\x1b\[[0-9;]*m")


def press(x, y):
    return MouseEvent(MouseAction.PRESS, x, y)


def move(x, y):
    return MouseEvent(MouseAction.MOTION, x, y)


def release(x, y):
    return MouseEvent(MouseAction.RELEASE, x, y)


@pytest.fixture
def session(tmp_path):
    s = Session(export_dir=str(tmp_path / "images"))
    s.handle(ResizeEvent(140, 13))
    return s


class TestResize:
    def test_canvas_loses_border_and_strip(self, session):
        assert session.screen == (140, 13)
        assert (session.viewport.width, session.viewport.height) == (138, 10)

    def test_oversized_terminal_is_clamped(self):
        s = Session()
        s.handle(ResizeEvent(100000, 100000))
        assert s.screen == (MAX_SCREEN, MAX_SCREEN)
        assert (s.viewport.width, s.viewport.height) == (MAX_SCREEN - 2, MAX_SCREEN - 3)
        rows = s.render()
        assert len(rows) == MAX_SCREEN
        assert all(len(r) <= MAX_SCREEN for r in rows)

    def test_negative_terminal_size(self):
        s = Session()
        s.handle(ResizeEvent(-5, -5))
        assert s.screen == (0, 0)
        assert s.render() == []


class TestDrawing:
    def test_press_paints_translated_coordinate(self, session):
        session.handle(press(5, 5))
        assert session.drawing
        assert session.store.get((4, 4)) == Cell(glyph="░", fg=1)

    def test_drag_paints_each_sample(self, session):
        session.handle(press(2, 2))
        session.handle(move(3, 2))
        session.handle(move(6, 2))
        session.handle(release(6, 2))
        painted = {x for x in range(10) if session.store.get((x, 1)) != EMPTY}
        assert painted == {1, 2, 5}

    def test_drag_continues_outside_canvas(self, session):
        session.handle(press(5, 5))
        session.handle(move(139, 11))
        assert session.store.get((138, 10)) == Cell(glyph="░", fg=1)

    def test_motion_without_press_does_nothing(self, session):
        session.handle(move(5, 5))
        assert len(session.store) == 0

    def test_release_anywhere_stops_drawing(self, session):
        session.handle(press(5, 5))
        session.handle(release(-10, 99))
        assert not session.drawing
        session.handle(move(6, 6))
        assert session.store.get((5, 5)) == EMPTY

    def test_press_on_border_ignored(self, session):
        for x, y in [(0, 0), (0, 5), (5, 11), (139, 5)]:
            session.handle(press(x, y))
        assert len(session.store) == 0
        assert not session.drawing

    def test_erase_mode(self, session):
        session.handle(press(5, 5))
        session.handle(release(5, 5))
        session.tools.toggle_erase()
        session.handle(press(5, 5))
        assert session.store.get((4, 4)) == EMPTY

    def test_overlay_then_erase(self, session):
        session.tools.select_tip(5)
        session.tools.select_color(3)
        session.handle(press(5, 5)); session.handle(release(5, 5))
        session.tools.select_tip(6)
        session.tools.select_color(11)
        session.handle(press(5, 5)); session.handle(release(5, 5))
        assert session.store.get((4, 4)) == Cell(glyph=".", fg=11, bg=3)
        session.tools.toggle_erase()
        session.handle(press(5, 5))
        assert session.store.get((4, 4)) == EMPTY


class TestPanning:
    def test_pan_drag_moves_offset_not_store(self, session):
        session.tools.toggle_pan()
        session.handle(press(5, 5))
        session.handle(move(7, 5))
        session.handle(move(8, 3))
        session.handle(release(8, 3))
        assert session.viewport.offset == (-3, 2)
        assert len(session.store) == 0

    def test_paint_pan_render_scenario(self):
        s = Session()
        s.handle(ResizeEvent(22, 13))  # 20x10 canvas
        s.tools.select_tip(5)
        s.tools.select_color(3)
        s.handle(press(5, 5)); s.handle(release(5, 5))
        assert s.store.get((4, 4)) == Cell(bg=3)

        s.tools.toggle_pan()
        s.handle(press(10, 8)); s.handle(move(12, 8)); s.handle(release(12, 8))
        assert s.viewport.offset == (-2, 0)

        # 7 + (-2) - 1 == 4
        assert s.viewport.screen_to_plane(7, 5) == (4, 4)
        frame = s.render()
        assert frame[5][7].bg == 3
        assert frame[5][6].bg is None


class TestStripClicks:
    def test_color_ramp(self, session):
        session.tools.toggle_pan()
        session.handle(press(12, STRIP))
        assert session.tools.color == 1
        assert session.tools.mode is Mode.PAINT
        session.handle(press(39, STRIP))
        assert session.tools.color == 14
        session.handle(press(10, STRIP))
        assert session.tools.color == 0

    def test_erase_and_move_toggles(self, session):
        session.handle(press(105, STRIP))
        assert session.tools.mode is Mode.ERASE
        session.handle(press(114, STRIP))
        assert session.tools.mode is Mode.PAN
        session.handle(press(114, STRIP))
        assert session.tools.mode is Mode.PAINT

    def test_tip_buttons(self, session):
        session.tools.toggle_erase()
        session.handle(press(54, STRIP))
        assert session.tools.tip_index == 1
        assert session.tools.mode is Mode.PAINT

    def test_clear(self, session):
        session.handle(press(5, 5)); session.handle(release(5, 5))
        session.tools.toggle_pan()
        session.handle(press(5, 5)); session.handle(move(9, 9)); session.handle(release(9, 9))
        session.tools.toggle_erase()
        session.handle(press(97, STRIP))
        assert len(session.store) == 0
        assert session.store.get((4, 4)) == EMPTY
        assert session.viewport.offset == (0, 0)
        assert session.tools.mode is Mode.PAINT

    def test_unmatched_click_changes_nothing(self, session):
        session.tools.toggle_erase()
        session.handle(press(45, STRIP))
        session.handle(press(52, STRIP))
        session.handle(press(135, STRIP))
        assert session.tools.mode is Mode.ERASE
        assert session.tools.tip_index == 0
        assert session.tools.color == 1

    def test_strip_click_does_not_start_stroke(self, session):
        session.handle(press(105, STRIP))
        assert not session.drawing

    def test_save_button(self, session, tmp_path):
        assert session.handle(press(126, STRIP)) is Outcome.SAVED
        assert (tmp_path / "images" / "1.txt").exists()

    def test_save_button_moves_with_offset(self, session, tmp_path):
        session.viewport.offset = (-100, 20)
        assert session.handle(press(126, STRIP)) is Outcome.NONE
        assert session.handle(press(130, STRIP)) is Outcome.SAVED

    def test_save_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        s = Session(export_dir=str(blocker))
        s.handle(ResizeEvent(140, 13))
        assert s.handle(press(126, STRIP)) is Outcome.SAVE_FAILED

    def test_saved_canvas_differs_from_empty(self, tmp_path):
        s = Session(export_dir=str(tmp_path))
        s.handle(ResizeEvent(140, 13))
        s.save()
        s.handle(press(5, 5)); s.handle(release(5, 5))
        s.save()
        empty = (tmp_path / "1.txt").read_text(encoding="utf-8")
        painted = (tmp_path / "2.txt").read_text(encoding="utf-8")
        assert ANSI.sub("", empty).strip() == ""
        assert ANSI.sub("", painted).strip() == "░"
        assert painted != empty


class TestKeys:
    @pytest.mark.parametrize("key", ["q", "esc", "ctrl+c"])
    def test_quit_keys(self, session, key):
        assert session.handle(KeyEvent(key)) is Outcome.QUIT

    def test_other_keys_ignored(self, session):
        assert session.handle(KeyEvent("x")) is Outcome.NONE


class TestIsolation:
    def test_sessions_share_nothing(self):
        a, b = Session(), Session()
        for s in (a, b):
            s.handle(ResizeEvent(40, 20))
        a.handle(press(3, 3))
        a.tools.toggle_pan()
        assert len(b.store) == 0
        assert b.tools.mode is Mode.PAINT
        assert a.id != b.id


class TestWireEvents:
    def test_decode(self):
        assert event_from_dict({"type": "mouse", "action": "press", "x": 3, "y": "4"}) == press(3, 4)
        assert event_from_dict({"type": "key", "key": "q"}) == KeyEvent("q")
        assert event_from_dict({"type": "resize", "w": 80, "h": 24}) == ResizeEvent(80, 24)

    def test_encode_decode(self):
        for ev in [release(1, 2), KeyEvent("esc"), ResizeEvent(10, 5)]:
            assert event_from_dict(event_to_dict(ev)) == ev

    @pytest.mark.parametrize("msg", [
        {},
        {"type": "wheel"},
        {"type": "mouse", "action": "hover", "x": 1, "y": 1},
        {"type": "mouse", "action": "press", "x": "a", "y": 1},
        {"type": "resize", "w": 80},
        ["not", "a", "dict"],
    ])
    def test_bad_messages_raise_value_error(self, msg):
        with pytest.raises(ValueError):
            event_from_dict(msg)
