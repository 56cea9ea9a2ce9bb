"""Visual handles: the renderable state of every element, keyed by identity.

Handles are created once per engine and never recreated when the layout
changes; layouts only move and restyle them. Item handles are looked up by item
id, so event handlers never capture positional references.
"""

from dataclasses import dataclass, field

from scrollvis.models import HighlightState


@dataclass(eq=False)
class ItemHandle:
    item_id: str
    image: str = ""
    name: str = ""
    x: float = 0.0
    y: float = 0.0
    opacity: float = 0.0
    size: float = 50.0  # image is size by size, centered on (x, y)
    greyed: bool = False
    invisible: bool = False  # ignores pointer events
    z: int = 0
    label: str | None = None
    label_opacity: float = 0.0
    label_emphasized: bool = False
    highlight: HighlightState = HighlightState.NORMAL

    @property
    def key(self) -> str:
        return f"item:{self.item_id}"


@dataclass(eq=False)
class EdgeHandle:
    index: int
    source: str
    target: str
    type: str
    color: str
    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0
    opacity: float = 0.0
    stroke_width: float = 1.0

    @property
    def key(self) -> str:
        return f"edge:{self.index}"


@dataclass(eq=False)
class TreeLinkHandle:
    index: int
    source: str
    target: str
    type: str | None
    color: str
    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0
    opacity: float = 0.0

    @property
    def key(self) -> str:
        return f"tree-link:{self.index}"

    def path(self, steps: int = 16) -> list[tuple[float, float]]:
        """Vertical cubic link: leaves the parent downward, enters the child from above."""
        mid = (self.y1 + self.y2) / 2
        points = []
        for i in range(steps + 1):
            t = i / steps
            u = 1 - t
            x = u ** 3 * self.x1 + 3 * u * u * t * self.x1 + 3 * u * t * t * self.x2 + t ** 3 * self.x2
            y = u ** 3 * self.y1 + 3 * u * u * t * mid + 3 * u * t * t * mid + t ** 3 * self.y2
            points.append((x, y))
        return points


@dataclass(eq=False)
class TextHandle:
    name: str
    text: str
    x: float = 0.0
    y: float = 0.0
    opacity: float = 0.0

    @property
    def key(self) -> str:
        return f"text:{self.name}"


@dataclass
class LegendEntry:
    category: str
    color: str
    emphasized: bool = False


@dataclass(eq=False)
class LegendHandle:
    x: float = 0.0
    y: float = 0.0
    opacity: float = 0.0
    entries: list[LegendEntry] = field(default_factory=list)

    key = "legend"

    def emphasize(self, categories: set[str]) -> None:
        for entry in self.entries:
            entry.emphasized = entry.category in categories

    def clear(self) -> None:
        self.emphasize(set())

    def emphasized(self) -> list[str]:
        return [e.category for e in self.entries if e.emphasized]


@dataclass(eq=False)
class TooltipHandle:
    text: str = ""
    x: float = 0.0
    y: float = 0.0
    opacity: float = 0.0

    key = "tooltip"


@dataclass(eq=False)
class LayerHandle:
    name: str
    offset_y: float = 0.0
    z: int = 0

    @property
    def key(self) -> str:
        return f"layer:{self.name}"


class HandleRegistry:
    """All handles of one engine instance."""

    def __init__(self) -> None:
        self.items: dict[str, ItemHandle] = {}
        self.edges: list[EdgeHandle] = []
        self.tree_links: list[TreeLinkHandle] = []
        self.texts: dict[str, TextHandle] = {}
        self.legend = LegendHandle()
        self.tooltip = TooltipHandle()
        self.edge_layer = LayerHandle("links", z=1)
        self.tree_link_layer = LayerHandle("tree-links", z=2)
        self.node_layer = LayerHandle("nodes", z=3)
        self._z = 0

    def item(self, item_id: str) -> ItemHandle:
        try:
            return self.items[item_id]
        except KeyError:
            raise ValueError(f"No visual handle for item: {item_id}") from None

    def raise_item(self, item_id: str) -> None:
        """Bring one item to the front of its layer."""
        self._z += 1
        self.item(item_id).z = self._z

    def raise_layer(self, layer: LayerHandle) -> None:
        top = max(self.edge_layer.z, self.tree_link_layer.z, self.node_layer.z)
        if layer.z < top:
            layer.z = top + 1

    def edges_touching(self, item_id: str) -> list[EdgeHandle]:
        return [e for e in self.edges if e.source == item_id or e.target == item_id]
