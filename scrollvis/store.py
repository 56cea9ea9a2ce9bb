"""Entity store: canonical items plus the relationships and hierarchy built over them."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterator, Literal

from scrollvis.models import GraphDataset, HierarchyDataset, TreeRecord

logger = logging.getLogger(__name__)


class DataIntegrityError(ValueError):
    """A relationship or hierarchy record references an unknown item."""


class ItemNotFoundError(ValueError):
    """Lookup of an id that is not in the item set."""


@dataclass(eq=False)
class Item:
    """A catalog entry. Position is written by whichever layout is active."""
    id: str
    name: str
    image: str = ""
    genres: list[str] = field(default_factory=list)
    index: int = 0
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0


@dataclass(frozen=True)
class Relationship:
    source: str
    target: str
    type: str
    index: int = 0


@dataclass(eq=False)
class HierarchyNode:
    id: str
    parent: "HierarchyNode | None" = None
    children: list["HierarchyNode"] = field(default_factory=list)
    depth: int = 0
    link_type: str | None = None  # type of the parent-to-child link

    def ancestors(self) -> list["HierarchyNode"]:
        """Self first, then each parent up to the root."""
        chain = []
        node: HierarchyNode | None = self
        while node is not None:
            chain.append(node)
            node = node.parent
        return chain

    def descendants(self) -> list["HierarchyNode"]:
        """Pre-order: self, then each child subtree in order."""
        out: list[HierarchyNode] = []
        stack = [self]
        while stack:
            node = stack.pop()
            out.append(node)
            stack.extend(reversed(node.children))
        return out

    def links(self) -> Iterator[tuple["HierarchyNode", "HierarchyNode"]]:
        for node in self.descendants():
            for child in node.children:
                yield node, child


class LoadReport:
    """Records dropped during store construction."""

    def __init__(self) -> None:
        self.items: int = 0
        self.relationships: int = 0
        self.hierarchy_nodes: int = 0
        self.dropped_edges: list[tuple[str, str, str]] = []
        self.dropped_links: list[tuple[str, str, str]] = []
        self.dropped_nodes: list[str] = []
        self.duplicate_items: list[str] = []

    @property
    def total_dropped(self) -> int:
        return len(self.dropped_edges) + len(self.dropped_links) + len(self.dropped_nodes)

    def __repr__(self) -> str:
        return (
            f"LoadReport({self.items} items, {self.relationships} relationships, "
            f"{self.hierarchy_nodes} hierarchy nodes; dropped "
            f"{len(self.dropped_edges)} edges, {len(self.dropped_links)} links, "
            f"{len(self.dropped_nodes)} hierarchy nodes)"
        )


class EntityStore:
    """Identity-stable view of one entity set shared by every layout."""

    def __init__(
        self,
        graph: GraphDataset,
        hierarchy: HierarchyDataset | None = None,
        integrity_policy: Literal["drop", "raise"] = "drop",
    ) -> None:
        self.integrity_policy = integrity_policy
        self.report = LoadReport()
        self._items: dict[str, Item] = {}
        self._neighbors: dict[str, set[str]] = defaultdict(set)
        self._incident: dict[str, list[Relationship]] = defaultdict(list)
        self.relationships: list[Relationship] = []
        self._root: HierarchyNode | None = None
        self._nodes: dict[str, HierarchyNode] = {}
        self._pre_order: list[str] = []

        for rec in graph.nodes:
            if rec.id in self._items:
                self.report.duplicate_items.append(rec.id)
                logger.warning("Duplicate item id %s, keeping first", rec.id)
                continue
            self._items[rec.id] = Item(
                id=rec.id, name=rec.name, image=rec.image,
                genres=list(rec.genres), index=len(self._items),
            )
        self.report.items = len(self._items)

        for rec in graph.edges:
            missing = [i for i in (rec.source, rec.target) if i not in self._items]
            if missing:
                self._integrity_fault(
                    f"Relationship {rec.source}->{rec.target} references unknown item(s): "
                    + ", ".join(missing)
                )
                self.report.dropped_edges.append((rec.source, rec.target, rec.type))
                continue
            rel = Relationship(rec.source, rec.target, rec.type, index=len(self.relationships))
            self.relationships.append(rel)
            self._neighbors[rel.source].add(rel.target)
            self._neighbors[rel.target].add(rel.source)
            self._incident[rel.source].append(rel)
            if rel.target != rel.source:
                self._incident[rel.target].append(rel)
        self.report.relationships = len(self.relationships)

        if hierarchy is not None:
            self._build_hierarchy(hierarchy)

        logger.debug("Entity store ready: %s", self.report)

    # --- Items ---

    def lookup(self, item_id: str) -> Item:
        try:
            return self._items[item_id]
        except KeyError:
            raise ItemNotFoundError(f"Item not found: {item_id}") from None

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> list[Item]:
        return list(self._items.values())

    def neighbors(self, item_id: str) -> set[str]:
        self.lookup(item_id)
        return set(self._neighbors.get(item_id, ()))

    def incident_types(self, item_id: str) -> set[str]:
        return {r.type for r in self._incident.get(item_id, ())}

    def edges_of_type(self, category: str) -> list[Relationship]:
        return [r for r in self.relationships if r.type == category]

    def categories(self) -> list[str]:
        """Distinct relationship types in order of first appearance."""
        return list(dict.fromkeys(r.type for r in self.relationships))

    # --- Hierarchy ---

    @property
    def has_hierarchy(self) -> bool:
        return self._root is not None

    def root(self) -> HierarchyNode:
        if self._root is None:
            raise ValueError("No hierarchy loaded")
        return self._root

    def node(self, item_id: str) -> HierarchyNode:
        try:
            return self._nodes[item_id]
        except KeyError:
            raise ItemNotFoundError(f"Item not in hierarchy: {item_id}") from None

    def pre_order(self) -> list[str]:
        return list(self._pre_order)

    def _build_hierarchy(self, hierarchy: HierarchyDataset) -> None:
        if hierarchy.source.id not in self._items:
            raise DataIntegrityError(f"Hierarchy root references unknown item: {hierarchy.source.id}")

        link_types: dict[tuple[str, str], str] = {}
        for link in hierarchy.links:
            missing = [i for i in (link.source, link.target) if i not in self._items]
            if missing:
                self._integrity_fault(
                    f"Hierarchy link {link.source}->{link.target} references unknown item(s): "
                    + ", ".join(missing)
                )
                self.report.dropped_links.append((link.source, link.target, link.type))
                continue
            link_types[(link.source, link.target)] = link.type

        root = HierarchyNode(id=hierarchy.source.id)
        self._nodes[root.id] = root
        stack: list[tuple[TreeRecord, HierarchyNode]] = [(hierarchy.source, root)]
        while stack:
            record, node = stack.pop()
            for child_rec in record.children:
                if child_rec.id not in self._items or child_rec.id in self._nodes:
                    self._integrity_fault(
                        f"Hierarchy node {child_rec.id} under {node.id} is unknown or repeated"
                    )
                    self.report.dropped_nodes.append(child_rec.id)
                    continue
                child = HierarchyNode(
                    id=child_rec.id, parent=node, depth=node.depth + 1,
                    link_type=link_types.get((node.id, child_rec.id)),
                )
                node.children.append(child)
                self._nodes[child.id] = child
                stack.append((child_rec, child))

        self._root = root
        self._pre_order = [n.id for n in root.descendants()]
        self.report.hierarchy_nodes = len(self._nodes)

    def _integrity_fault(self, message: str) -> None:
        if self.integrity_policy == "raise":
            raise DataIntegrityError(message)
        logger.warning("%s (dropped)", message)
