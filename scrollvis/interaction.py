"""Interaction controller: hover highlighting and tooltips per active layout.

The controller is rebound by each section's activation effect. Handlers resolve
everything through the entity store and the handle registry by item id, so the
same hover call means different things in graph, tree and list modes.
"""

import logging

from scrollvis.animator import Animator
from scrollvis.config import DurationConfig, SizeConfig
from scrollvis.handles import HandleRegistry
from scrollvis.models import HighlightState, HoverMode
from scrollvis.store import EntityStore

logger = logging.getLogger(__name__)

Pointer = tuple[float, float]


# --- Structural queries ---


def is_adjacent(store: EntityStore, a: str, b: str) -> bool:
    """True when a relationship connects ``a`` and ``b`` in either direction."""
    store.lookup(b)
    return b in store.neighbors(a)


def is_ancestor(store: EntityStore, a: str, b: str) -> bool:
    """True when either node lies on the other's root-to-self path."""
    node_a = store.node(a)
    node_b = store.node(b)
    return node_b in node_a.ancestors() or node_a in node_b.ancestors()


class InteractionController:
    """Routes hover events to the handlers of the bound mode."""

    def __init__(
        self,
        store: EntityStore,
        handles: HandleRegistry,
        animator: Animator,
        sizes: SizeConfig,
        durations: DurationConfig,
    ) -> None:
        self.store = store
        self.handles = handles
        self.animator = animator
        self.sizes = sizes
        self.durations = durations
        self.mode = HoverMode.NONE
        self.legend_enabled = False
        self.hovered: str | None = None
        self.hovered_category: str | None = None

    def bind(self, mode: HoverMode, legend: bool = False) -> None:
        """Swap the item hover handlers and toggle legend hover.

        Hover styling left over from the previous mode is cleared, and members
        not already heading to the new mode's default size are moved there.
        """
        self.hovered = None
        self.mode = mode
        self.legend_enabled = legend and mode == HoverMode.GRAPH
        self.hovered_category = None
        self._clear_hover_styles()
        logger.debug("Hover bound to %s (legend=%s)", mode.value, self.legend_enabled)

    def _clear_hover_styles(self) -> None:
        for handle in self.handles.items.values():
            self.animator.set(handle, greyed=False, highlight=HighlightState.NORMAL,
                              label_emphasized=False)
        size = self.default_size()
        for member in self.members():
            handle = self.handles.item(member)
            if self.animator.target(handle, "size") != size:
                self.animator.transition(handle, "size", size, self.durations.move)
        self.handles.legend.clear()

    def default_size(self) -> int:
        if self.mode in (HoverMode.HORIZONTAL_LIST, HoverMode.VERTICAL_LIST):
            return self.sizes.list_default
        return self.sizes.default

    def members(self) -> list[str]:
        """Item ids that carry hover handlers in the current mode."""
        if self.mode == HoverMode.NONE:
            return []
        if self.mode == HoverMode.GRAPH:
            return [item.id for item in self.store.items]
        return self.store.pre_order()

    # --- Items ---

    def hover_item(self, item_id: str, pointer: Pointer = (0.0, 0.0)) -> bool:
        """Handle pointer entering an item. Returns False when nothing is bound to it."""
        self.store.lookup(item_id)
        if item_id not in self.members() or self.handles.item(item_id).invisible:
            return False
        self.hovered = item_id

        if self.mode == HoverMode.GRAPH:
            self._hover_graph(item_id, pointer)
        elif self.mode == HoverMode.TREE:
            self._hover_tree(item_id, pointer)
        else:
            self._hover_list(item_id, pointer)
        return True

    def unhover_item(self, item_id: str | None = None) -> None:
        """Handle pointer leaving an item: restore every member's default look."""
        if self.mode == HoverMode.NONE:
            return
        hover = self.durations.hover
        size = self.default_size()

        self._hide_tooltip(hover)
        for member in self.members():
            handle = self.handles.item(member)
            self.animator.set(handle, greyed=False, highlight=HighlightState.NORMAL,
                              label_emphasized=False)
            self.animator.transition(handle, "size", size, hover)
        if self.mode == HoverMode.GRAPH:
            for edge in self.handles.edges:
                self.animator.animate(edge, hover, opacity=1.0, stroke_width=1.0)
        self.handles.legend.clear()
        self.hovered = None

    def _show_tooltip(self, item_id: str, pointer: Pointer) -> None:
        tooltip = self.handles.tooltip
        self.animator.set(tooltip, text=self.store.lookup(item_id).name,
                          x=pointer[0], y=pointer[1])
        self.animator.transition(tooltip, "opacity", self.sizes.tooltip_opacity, self.durations.hover)

    def _hide_tooltip(self, duration: float) -> None:
        self.animator.transition(self.handles.tooltip, "opacity", 0.0, duration)

    def _hover_graph(self, item_id: str, pointer: Pointer) -> None:
        hover = self.durations.hover
        touching = self.handles.edges_touching(item_id)
        for edge in self.handles.edges:
            self.animator.transition(edge, "opacity", 1.0 if edge in touching else 0.0, hover)

        self._show_tooltip(item_id, pointer)

        neighbors = self.store.neighbors(item_id)
        for member in self.members():
            handle = self.handles.item(member)
            if member == item_id:
                state, size = HighlightState.FOCUSED, self.sizes.focused
            elif member in neighbors:
                state, size = HighlightState.ADJACENT, self.sizes.adjacent
            else:
                state, size = HighlightState.DIMMED, self.sizes.default
            self.animator.set(handle, greyed=state == HighlightState.DIMMED, highlight=state)
            self.animator.transition(handle, "size", size, hover)

        self.handles.legend.emphasize(self.store.incident_types(item_id))

    def _hover_tree(self, item_id: str, pointer: Pointer) -> None:
        hover = self.durations.hover
        self._show_tooltip(item_id, pointer)
        for member in self.members():
            handle = self.handles.item(member)
            if member == item_id:
                self.animator.set(handle, greyed=False, highlight=HighlightState.FOCUSED)
                self.animator.transition(handle, "size", self.sizes.focused, hover)
            elif is_ancestor(self.store, item_id, member):
                self.animator.set(handle, greyed=False, highlight=HighlightState.ADJACENT)
                self.animator.transition(handle, "size", self.sizes.adjacent, hover)
            else:
                self.animator.set(handle, greyed=True, highlight=HighlightState.DIMMED)

    def _hover_list(self, item_id: str, pointer: Pointer) -> None:
        hover = self.durations.hover
        if self.mode == HoverMode.HORIZONTAL_LIST:
            self._show_tooltip(item_id, pointer)
        for member in self.members():
            if member != item_id:
                self.animator.set(self.handles.item(member), greyed=True,
                                  highlight=HighlightState.DIMMED)
        self.handles.raise_item(item_id)
        handle = self.handles.item(item_id)
        self.animator.set(handle, greyed=False, highlight=HighlightState.FOCUSED)
        self.animator.transition(handle, "size", self.sizes.focused, hover)
        if self.mode == HoverMode.VERTICAL_LIST:
            self.animator.set(handle, label_emphasized=True)

    # --- Legend and edges (graph mode only) ---

    def hover_category(self, category: str) -> bool:
        if not self.legend_enabled:
            return False
        self.hovered_category = category
        hover = self.durations.hover
        for edge in self.handles.edges:
            self.animator.transition(edge, "opacity", 1.0 if edge.type == category else 0.0, hover)

        members = set()
        for rel in self.store.edges_of_type(category):
            members.update((rel.source, rel.target))
        for item_id in members:
            self.animator.set(self.handles.item(item_id), size=self.sizes.adjacent,
                              highlight=HighlightState.ADJACENT)
        self.handles.legend.emphasize({category})
        return True

    def unhover_category(self) -> None:
        if not self.legend_enabled:
            return
        for edge in self.handles.edges:
            self.animator.transition(edge, "opacity", 1.0, self.durations.hover)
        for item in self.store.items:
            self.animator.set(self.handles.item(item.id), size=self.sizes.default,
                              highlight=HighlightState.NORMAL)
        self.handles.legend.clear()
        self.hovered_category = None

    def hover_edge(self, index: int) -> bool:
        if self.mode != HoverMode.GRAPH:
            return False
        if not 0 <= index < len(self.handles.edges):
            raise ValueError(f"Edge not found: {index}")
        edge = self.handles.edges[index]
        self.handles.legend.emphasize({edge.type})
        return True

    def unhover_edge(self) -> None:
        if self.mode == HoverMode.GRAPH:
            self.handles.legend.clear()
