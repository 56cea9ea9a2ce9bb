"""Pydantic models for the scroll visualization datasets."""

from enum import Enum

from pydantic import AliasChoices, BaseModel, Field


class SectionName(str, Enum):
    TITLE = "title"
    GRAPH = "graph"
    TREE = "tree"
    HORIZONTAL_LIST = "horizontal_list"
    VERTICAL_LIST = "vertical_list"


SECTION_ORDER: list[SectionName] = [
    SectionName.TITLE,
    SectionName.GRAPH,
    SectionName.TREE,
    SectionName.HORIZONTAL_LIST,
    SectionName.VERTICAL_LIST,
]


class HoverMode(str, Enum):
    NONE = "none"
    GRAPH = "graph"
    TREE = "tree"
    HORIZONTAL_LIST = "horizontal_list"
    VERTICAL_LIST = "vertical_list"


class HighlightState(str, Enum):
    NORMAL = "normal"
    FOCUSED = "focused"
    ADJACENT = "adjacent"
    DIMMED = "dimmed"


# --- Graph dataset ---


class NodeRecord(BaseModel):
    id: str
    name: str
    image: str = Field(default="", validation_alias=AliasChoices("image", "img"))
    genres: list[str] = Field(default_factory=list)


class EdgeRecord(BaseModel):
    source: str
    target: str
    type: str


class GraphDataset(BaseModel):
    """Items and the typed relationships between them."""
    nodes: list[NodeRecord] = Field(default_factory=list)
    edges: list[EdgeRecord] = Field(default_factory=list)


# --- Hierarchy dataset ---


class TreeRecord(BaseModel):
    """One node of the rooted tree literal; children nest recursively."""
    id: str
    name: str | None = None
    image: str | None = Field(default=None, validation_alias=AliasChoices("image", "img"))
    children: list["TreeRecord"] = Field(default_factory=list)


class HierarchyLinkRecord(BaseModel):
    source: str  # parent id
    target: str  # child id
    type: str


class HierarchyDataset(BaseModel):
    """Spanning tree over the graph items plus the type of each parent-to-child link."""
    source: TreeRecord
    links: list[HierarchyLinkRecord] = Field(default_factory=list)


TreeRecord.model_rebuild()
