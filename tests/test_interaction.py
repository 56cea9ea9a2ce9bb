"""Tests for hover highlighting in each layout mode."""

import pytest

from scrollvis.interaction import is_adjacent, is_ancestor
from scrollvis.models import HighlightState, HoverMode
from scrollvis.store import ItemNotFoundError


def _states(engine):
    return {item_id: h.highlight for item_id, h in engine.handles.items.items()}


class TestStructuralQueries:
    def test_adjacent_either_direction(self, family_store):
        assert is_adjacent(family_store, "A", "B")
        assert is_adjacent(family_store, "B", "A")
        assert not is_adjacent(family_store, "B", "C")

    def test_ancestor_is_symmetric(self, family_store):
        assert is_ancestor(family_store, "D", "A")
        assert is_ancestor(family_store, "A", "D")
        assert is_ancestor(family_store, "D", "B")

    def test_cousins_are_not_related(self, family_store):
        assert not is_ancestor(family_store, "B", "C")
        assert not is_ancestor(family_store, "D", "C")

    def test_ancestor_outside_hierarchy_raises(self, family_store):
        with pytest.raises(ItemNotFoundError):
            is_ancestor(family_store, "A", "E")

    def test_adjacent_unknown_id_raises_in_either_position(self, family_store):
        with pytest.raises(ItemNotFoundError):
            is_adjacent(family_store, "nope", "A")
        with pytest.raises(ItemNotFoundError):
            is_adjacent(family_store, "A", "nope")


class TestGraphHover:
    def test_focus_adjacent_and_dimmed(self, abc_engine):
        abc_engine.activate(1)
        abc_engine.settle()
        assert abc_engine.hover_item("A", (120, 80)) is True
        abc_engine.settle()

        handles = abc_engine.handles.items
        assert handles["A"].highlight == HighlightState.FOCUSED
        assert handles["A"].size == 80
        assert handles["B"].highlight == HighlightState.ADJACENT
        assert handles["B"].size == 66
        assert handles["C"].highlight == HighlightState.DIMMED
        assert handles["C"].greyed
        assert handles["C"].size == 50

        tooltip = abc_engine.handles.tooltip
        assert tooltip.text == "Artist A"
        assert tooltip.opacity == pytest.approx(0.7)
        assert (tooltip.x, tooltip.y) == (120, 80)

    def test_only_incident_edges_stay_visible(self, engine):
        engine.activate(1)
        engine.settle()
        engine.hover_item("A")
        engine.settle()
        visible = {(e.source, e.target) for e in engine.handles.edges if e.opacity > 0}
        assert visible == {("A", "B"), ("A", "C")}

    def test_legend_emphasizes_incident_categories(self, engine):
        engine.activate(1)
        engine.hover_item("B")
        assert engine.handles.legend.emphasized() == ["x", "y"]

    def test_unhover_restores_defaults(self, engine):
        engine.activate(1)
        engine.settle()
        engine.hover_item("A")
        engine.settle()
        engine.unhover_item("A")
        engine.settle()

        assert set(_states(engine).values()) == {HighlightState.NORMAL}
        assert all(h.size == 50 and not h.greyed for h in engine.handles.items.values())
        assert all(e.opacity == 1.0 for e in engine.handles.edges)
        assert engine.handles.tooltip.opacity == 0.0
        assert engine.handles.legend.emphasized() == []
        assert engine.interaction.hovered is None

    def test_unknown_item_raises(self, engine):
        engine.activate(1)
        with pytest.raises(ItemNotFoundError):
            engine.hover_item("nope")


class TestCategoryHover:
    def test_category_shows_only_its_edges(self, engine):
        engine.activate(1)
        engine.settle()
        assert engine.hover_category("y") is True
        engine.settle()

        visible = [e.type for e in engine.handles.edges if e.opacity > 0]
        assert visible == ["y"]
        assert engine.handles.items["B"].size == 66
        assert engine.handles.items["D"].highlight == HighlightState.ADJACENT
        assert engine.handles.legend.emphasized() == ["y"]

    def test_unhover_category(self, engine):
        engine.activate(1)
        engine.hover_category("y")
        engine.unhover_category()
        engine.settle()
        assert all(e.opacity == 1.0 for e in engine.handles.edges)
        assert engine.handles.items["D"].size == 50
        assert engine.handles.legend.emphasized() == []

    def test_legend_inactive_outside_graph(self, engine):
        engine.activate(2)
        assert engine.hover_category("x") is False

    def test_edge_hover_emphasizes_its_category(self, engine):
        engine.activate(1)
        assert engine.hover_edge(3) is True
        assert engine.handles.legend.emphasized() == ["z"]
        engine.unhover_edge()
        assert engine.handles.legend.emphasized() == []

    def test_unknown_edge(self, engine):
        engine.activate(1)
        with pytest.raises(ValueError, match="Edge not found"):
            engine.hover_edge(42)

    def test_negative_edge_index_rejected(self, engine):
        engine.activate(1)
        with pytest.raises(ValueError, match="Edge not found"):
            engine.hover_edge(-1)
        assert engine.handles.legend.emphasized() == []


class TestTreeHover:
    def test_ancestors_and_descendants_highlighted(self, engine):
        engine.activate(2)
        engine.settle()
        engine.hover_item("B")
        engine.settle()

        handles = engine.handles.items
        assert handles["B"].highlight == HighlightState.FOCUSED
        assert handles["B"].size == 80
        for related in ("A", "D"):
            assert handles[related].highlight == HighlightState.ADJACENT
            assert handles[related].size == 66
        assert handles["C"].greyed
        assert handles["C"].highlight == HighlightState.DIMMED

    def test_item_outside_hierarchy_has_no_handler(self, engine):
        engine.activate(2)
        assert engine.hover_item("E") is False
        assert engine.interaction.hovered is None


class TestListHover:
    def test_horizontal_list_hover(self, engine):
        engine.activate(3)
        engine.settle()
        z_before = engine.handles.items["B"].z
        engine.hover_item("B", (300, 300))
        engine.settle()

        handles = engine.handles.items
        assert handles["B"].size == 80
        assert handles["B"].z > z_before
        assert all(handles[i].greyed for i in ("A", "C", "D"))
        assert engine.handles.tooltip.text == "Artist B"
        assert engine.handles.tooltip.opacity == pytest.approx(0.7)

    def test_horizontal_unhover_returns_to_list_size(self, engine):
        engine.activate(3)
        engine.hover_item("B")
        engine.unhover_item("B")
        engine.settle()
        assert all(engine.handles.items[i].size == 24 for i in ("A", "B", "C", "D"))
        assert not any(engine.handles.items[i].greyed for i in ("A", "B", "C", "D"))

    def test_vertical_list_emphasizes_label(self, engine):
        engine.activate(4)
        engine.settle()
        engine.hover_item("D")
        engine.settle()
        assert engine.handles.items["D"].label_emphasized
        assert engine.handles.tooltip.opacity == 0.0
        engine.unhover_item("D")
        assert not engine.handles.items["D"].label_emphasized


class TestTitleMode:
    def test_no_handlers_on_title(self, engine):
        engine.activate(0)
        assert engine.interaction.mode == HoverMode.NONE
        assert engine.hover_item("A") is False

    def test_invisible_item_ignores_pointer(self, engine):
        engine.activate(1)
        engine.handles.items["A"].invisible = True
        assert engine.hover_item("A") is False


class TestSectionChangeWhileHovered:
    def test_graph_to_tree_clears_hover_styles(self, engine):
        engine.activate(1)
        engine.settle()
        engine.hover_item("A")
        engine.settle()
        engine.activate(2)
        engine.settle()

        assert engine.handles.legend.emphasized() == []
        assert set(_states(engine).values()) == {HighlightState.NORMAL}
        assert not any(h.greyed for h in engine.handles.items.values())
        assert all(engine.handles.items[i].size == 50 for i in ("A", "B", "C", "D"))
        assert engine.interaction.hovered is None

    def test_horizontal_to_vertical_clears_hover_styles(self, engine):
        engine.activate(3)
        engine.settle()
        engine.hover_item("B")
        engine.settle()
        engine.activate(4)
        engine.settle()

        handles = engine.handles.items
        assert {i: (handles[i].size, handles[i].greyed) for i in ("A", "B", "C", "D")} == {
            "A": (24, False), "B": (24, False), "C": (24, False), "D": (24, False),
        }
        assert set(_states(engine).values()) == {HighlightState.NORMAL}

    def test_vertical_to_horizontal_clears_label_emphasis(self, engine):
        engine.activate(4)
        engine.settle()
        engine.hover_item("D")
        engine.activate(3)
        engine.settle()
        assert not any(h.label_emphasized for h in engine.handles.items.values())

    def test_category_hover_cleared_on_leaving_graph(self, engine):
        engine.activate(1)
        engine.settle()
        engine.hover_category("y")
        engine.activate(2)
        engine.settle()
        assert engine.handles.legend.emphasized() == []
        assert engine.handles.items["D"].highlight == HighlightState.NORMAL
        assert engine.handles.items["D"].size == 50
