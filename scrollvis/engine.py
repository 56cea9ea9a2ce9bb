"""Scroll visualization engine: one explicit context per rendered entity set.

The engine owns the entity store, the three layout providers, the visual handle
registry, the animator, the interaction controller and the section state
machine. Section activation effects live here because they are the only code
that touches all of them at once.

Sections:
    0 title, 1 force graph, 2 tidy tree, 3 horizontal list, 4 vertical list.

Only the graph section runs the force simulation. Every other effect stops it
before its own layout writes item positions.
"""

import logging
from typing import Any

from scrollvis.animator import Animator
from scrollvis.config import Config
from scrollvis.handles import (
    EdgeHandle,
    HandleRegistry,
    ItemHandle,
    LegendEntry,
    TextHandle,
    TreeLinkHandle,
)
from scrollvis.interaction import InteractionController, Pointer
from scrollvis.layouts.force import ForceSimulation
from scrollvis.layouts.ordinal import OrdinalLayout, Orientation
from scrollvis.layouts.scales import OrdinalColorScale
from scrollvis.layouts.tree import TreeLayout
from scrollvis.models import SECTION_ORDER, GraphDataset, HierarchyDataset, HoverMode, SectionName
from scrollvis.sections import Section, SectionStateMachine
from scrollvis.store import EntityStore

logger = logging.getLogger(__name__)


class ScrollVis:
    """Drives the five-section presentation of one entity store."""

    def __init__(self, store: EntityStore, config: Config | None = None) -> None:
        self.config = config or Config()
        self.store = store
        canvas = self.config.canvas
        self.width = canvas.width
        self.height = canvas.height

        self.colors = OrdinalColorScale(store.categories())
        self.simulation = ForceSimulation(
            store, self.config.force, self.width, self.height, seed=self.config.seed,
        )
        self.tree = TreeLayout(
            store, self.width - canvas.tree_padding, self.height - canvas.tree_padding,
        )
        self.horizontal = OrdinalLayout(store, Orientation.HORIZONTAL, self.width, self.height)
        self.vertical = OrdinalLayout(
            store, Orientation.VERTICAL, self.width, self.height, cross=canvas.vertical_list_x,
        )

        self.animator = Animator()
        self.handles = HandleRegistry()
        self._setup_handles()

        self.interaction = InteractionController(
            store, self.handles, self.animator, self.config.sizes, self.config.durations,
        )

        effects = {
            SectionName.TITLE: self.show_title,
            SectionName.GRAPH: self.show_graph,
            SectionName.TREE: self.show_tree,
            SectionName.HORIZONTAL_LIST: self.show_list,
            SectionName.VERTICAL_LIST: self.show_names,
        }
        self.machine = SectionStateMachine(
            [Section(name.value, effects[name]) for name in SECTION_ORDER],
            strict=self.config.strict,
        )

        self._graph_bound = False
        self.simulation.on("tick", self._ticked)
        self.simulation.stop()
        logger.info(
            "Engine ready: %d items, %d relationships, %d hierarchy nodes, %d categories",
            len(store), len(store.relationships), len(store.pre_order()), len(self.colors.domain),
        )

    @classmethod
    def from_datasets(
        cls,
        graph: GraphDataset,
        hierarchy: HierarchyDataset | None = None,
        config: Config | None = None,
    ) -> "ScrollVis":
        config = config or Config()
        store = EntityStore(graph, hierarchy, integrity_policy=config.integrity_policy)
        return cls(store, config)

    def _setup_handles(self) -> None:
        canvas = self.config.canvas
        h = self.handles

        h.texts["title"] = TextHandle("title", self.config.title, self.width / 2, self.height / 3)
        h.texts["subtitle"] = TextHandle(
            "subtitle", self.config.subtitle, self.width / 2, self.height / 3 + self.height / 5,
        )

        h.legend.x = self.width + canvas.legend_offset[0]
        h.legend.y = canvas.legend_offset[1]
        h.legend.entries = [LegendEntry(c, self.colors(c)) for c in self.colors.domain]

        for rel in self.store.relationships:
            h.edges.append(EdgeHandle(
                index=rel.index, source=rel.source, target=rel.target,
                type=rel.type, color=self.colors(rel.type),
            ))

        for item in self.store.items:
            h.items[item.id] = ItemHandle(
                item_id=item.id, image=item.image, name=item.name,
                size=self.config.sizes.default,
            )

        for i, link in enumerate(self.tree.links()):
            h.tree_links.append(TreeLinkHandle(
                index=i, source=link.source, target=link.target, type=link.type,
                color=self.colors(link.type),
                x1=link.source_xy[0], y1=link.source_xy[1],
                x2=link.target_xy[0], y2=link.target_xy[1],
            ))

    # --- Control surface ---

    @property
    def last_index(self) -> int:
        return self.machine.last_index

    @property
    def active_index(self) -> int:
        return self.machine.active_index

    @property
    def active_section(self) -> SectionName | None:
        if self.machine.last_index < 0:
            return None
        return SECTION_ORDER[self.machine.last_index]

    def activate(self, index: int) -> list[int]:
        """Advance or rewind to ``index``, running every passed section's effect."""
        return self.machine.activate(index)

    def update(self, index: int, progress: float) -> None:
        self.machine.update(index, progress)

    def frame(self, elapsed_ms: float) -> None:
        """One host render-loop step: a simulation tick, then animator time."""
        self.simulation.tick()
        self.animator.advance(elapsed_ms)

    def settle(self, max_ticks: int = 1000) -> int:
        """Run the simulation until it stops and finish all transitions.

        Returns the number of ticks taken.
        """
        ticks = 0
        while self.simulation.running and ticks < max_ticks:
            self.simulation.tick()
            ticks += 1
        self.animator.settle()
        return ticks

    def hover_item(self, item_id: str, pointer: Pointer = (0.0, 0.0)) -> bool:
        return self.interaction.hover_item(item_id, pointer)

    def unhover_item(self, item_id: str | None = None) -> None:
        self.interaction.unhover_item(item_id)

    def hover_category(self, category: str) -> bool:
        return self.interaction.hover_category(category)

    def unhover_category(self) -> None:
        self.interaction.unhover_category()

    def hover_edge(self, index: int) -> bool:
        return self.interaction.hover_edge(index)

    def unhover_edge(self) -> None:
        self.interaction.unhover_edge()

    # --- Simulation binding ---

    def _ticked(self, simulation: ForceSimulation) -> None:
        if not self._graph_bound:
            return
        for edge in self.handles.edges:
            source = self.store.lookup(edge.source)
            target = self.store.lookup(edge.target)
            edge.x1, edge.y1, edge.x2, edge.y2 = source.x, source.y, target.x, target.y
        for item in simulation.nodes:
            self.animator.set(self.handles.items[item.id], x=item.x, y=item.y)

    def _stop_simulation(self) -> None:
        self.simulation.stop()
        self._graph_bound = False

    # --- Activation effects ---

    def _hide_tooltip(self) -> None:
        self.animator.transition(self.handles.tooltip, "opacity", 0.0, self.config.durations.instant)

    def _hierarchy_handles(self) -> list[ItemHandle]:
        return [self.handles.items[i] for i in self.store.pre_order()]

    def show_title(self) -> None:
        """Title card; everything else hidden."""
        d = self.config.durations
        self._hide_tooltip()
        self._stop_simulation()
        self.interaction.bind(HoverMode.NONE)

        for edge in self.handles.edges:
            self.animator.transition(edge, "opacity", 0.0, d.instant)
        for handle in self.handles.items.values():
            self.animator.set(handle, invisible=True)
            self.animator.transition(handle, "opacity", 0.0, d.fade)
        self.animator.transition(self.handles.legend, "opacity", 0.0, d.instant)

        for text in self.handles.texts.values():
            self.animator.transition(text, "opacity", 1.0, d.fade)

    def show_graph(self) -> None:
        """Force graph with legend; the simulation resumes."""
        d = self.config.durations
        self._hide_tooltip()
        for text in self.handles.texts.values():
            self.animator.transition(text, "opacity", 0.0, d.fade)
        for link in self.handles.tree_links:
            self.animator.transition(link, "opacity", 0.0, d.instant)

        self.animator.set(self.handles.node_layer, offset_y=0.0)

        for edge in self.handles.edges:
            self.animator.transition(edge, "opacity", 1.0, d.fade)
        for handle in self.handles.items.values():
            self.animator.set(handle, invisible=False, greyed=False)
            self.animator.animate(handle, d.fade, opacity=1.0, size=self.config.sizes.default)
        self.interaction.bind(HoverMode.GRAPH, legend=True)

        self._graph_bound = True
        self.simulation.start()

        self.animator.transition(self.handles.legend, "opacity", 1.0, d.fade)

    def show_tree(self) -> None:
        """Tidy tree of the hierarchy; items outside it are hidden."""
        d = self.config.durations
        self._hide_tooltip()
        self._stop_simulation()

        for edge in self.handles.edges:
            self.animator.transition(edge, "opacity", 0.0, d.instant)
        self.animator.transition(self.handles.legend, "opacity", 1.0, d.fade)
        for link in self.handles.tree_links:
            self.animator.transition(link, "opacity", 1.0, d.fade)

        self.animator.set(self.handles.node_layer, offset_y=float(self.config.canvas.tree_offset_y))
        self.handles.raise_layer(self.handles.node_layer)

        coords = self.tree.apply()
        for item_id, handle in self.handles.items.items():
            if item_id not in coords:
                self.animator.transition(handle, "opacity", 0.0, d.instant)
                continue
            x, y = coords[item_id]
            self.animator.set(handle, invisible=False, greyed=False)
            self.animator.animate(handle, d.move, x=x, y=y, opacity=1.0, size=self.config.sizes.default)

        self.interaction.bind(HoverMode.TREE)

    def show_list(self) -> None:
        """Hierarchy items in pre-order along the horizontal axis."""
        d = self.config.durations
        self._hide_tooltip()
        self._stop_simulation()
        self.animator.transition(self.handles.legend, "opacity", 0.0, d.instant)
        for link in self.handles.tree_links:
            self.animator.transition(link, "opacity", 0.0, d.instant)
        self.animator.set(self.handles.node_layer, offset_y=0.0)

        coords = self.horizontal.apply()
        for handle in self._hierarchy_handles():
            x, y = coords[handle.item_id]
            self.animator.set(handle, label=None, label_opacity=0.0, label_emphasized=False,
                              greyed=False)
            self.animator.transition(handle, "size", self.config.sizes.list_default, d.move)
            self.animator.animate(handle, d.list_move, x=x, y=y, opacity=1.0)

        self.interaction.bind(HoverMode.HORIZONTAL_LIST)

    def show_names(self) -> None:
        """Same order down the vertical axis, each item labelled with its name."""
        d = self.config.durations
        self._hide_tooltip()
        self._stop_simulation()

        coords = self.vertical.apply()
        for handle in self._hierarchy_handles():
            x, y = coords[handle.item_id]
            self.animator.animate(handle, d.move, x=x, y=y, opacity=1.0)
            self.animator.set(handle, label=handle.name)
            self.animator.transition(handle, "label_opacity", 1.0, d.move)

        self.interaction.bind(HoverMode.VERTICAL_LIST)

    # --- Inspection ---

    def snapshot(self) -> dict[str, Any]:
        """Plain-data view of the visible state."""
        h = self.handles
        section = self.active_section
        return {
            "last_index": self.last_index,
            "active_index": self.active_index,
            "section": section.value if section else None,
            "hover_mode": self.interaction.mode.value,
            "hovered": self.interaction.hovered,
            "simulation": {
                "running": self.simulation.running,
                "alpha": round(self.simulation.alpha, 6),
                "ticks": self.simulation.ticks,
            },
            "time_ms": self.animator.now,
            "pending_transitions": self.animator.pending,
            "tooltip": {
                "text": h.tooltip.text, "opacity": h.tooltip.opacity,
                "x": h.tooltip.x, "y": h.tooltip.y,
            },
            "legend": {
                "opacity": h.legend.opacity,
                "emphasized": h.legend.emphasized(),
                "categories": [e.category for e in h.legend.entries],
            },
            "titles": {name: t.opacity for name, t in h.texts.items()},
            "items": [
                {
                    "id": handle.item_id,
                    "x": round(handle.x, 3),
                    "y": round(handle.y + h.node_layer.offset_y, 3),
                    "opacity": round(handle.opacity, 3),
                    "size": round(handle.size, 3),
                    "greyed": handle.greyed,
                    "invisible": handle.invisible,
                    "highlight": handle.highlight.value,
                    "label": handle.label,
                }
                for handle in h.items.values()
            ],
            "visible_edges": sum(1 for e in h.edges if e.opacity > 0),
            "visible_tree_links": sum(1 for t in h.tree_links if t.opacity > 0),
        }
