"""Tests for scroll offset to section mapping."""

import pytest

from scrollvis.scroller import Scroller

TOPS = [0, 800, 1600, 2400, 3200]


class TestPosition:
    @pytest.mark.parametrize("offset,expected", [
        (0, (0, 0.0)),
        (400, (0, 0.5)),
        (1200, (1, 0.5)),
        (1600, (2, 0.0)),
        (-50, (0, 0.0)),
        (3300, (4, 0.0)),
    ])
    def test_offsets(self, engine, offset, expected):
        assert Scroller(engine, TOPS).position(offset) == expected

    def test_trigger_shifts_boundaries(self, engine):
        scroller = Scroller(engine, TOPS, trigger=100)
        assert scroller.position(700) == (1, 0.0)

    def test_rejects_bad_offsets(self, engine):
        with pytest.raises(ValueError):
            Scroller(engine, [])
        with pytest.raises(ValueError, match="non-decreasing"):
            Scroller(engine, [0, 800, 400])


class TestScrollTo:
    def test_activates_once_per_section_change(self, engine):
        scroller = Scroller(engine, TOPS)
        assert scroller.scroll_to(900) == (1, 0.125)
        assert list(engine.machine.history) == [0, 1]
        scroller.scroll_to(1000)
        assert list(engine.machine.history) == [0, 1]
        assert engine.last_index == 1

    def test_jump_runs_skipped_sections(self, engine):
        scroller = Scroller(engine, TOPS)
        scroller.scroll_to(0)
        scroller.scroll_to(3500)
        assert list(engine.machine.history) == [0, 1, 2, 3, 4]

    def test_scroll_hides_tooltip(self, engine):
        scroller = Scroller(engine, TOPS)
        scroller.scroll_to(900)
        engine.hover_item("A")
        engine.settle()
        assert engine.handles.tooltip.opacity > 0
        scroller.scroll_to(950)
        assert engine.handles.tooltip.opacity == 0.0
