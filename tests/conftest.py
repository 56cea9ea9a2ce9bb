"""Shared test fixtures for scrollvis tests."""

from pathlib import Path

import pytest

from scrollvis.config import Config
from scrollvis.engine import ScrollVis
from scrollvis.models import GraphDataset, HierarchyDataset
from scrollvis.store import EntityStore

DATA_DIR = Path(__file__).parent.parent / "data"


def make_graph(node_ids: list[str], edges: list[tuple[str, str, str]], genres=None) -> GraphDataset:
    genres = genres or {}
    return GraphDataset.model_validate({
        "nodes": [
            {"id": i, "name": f"Artist {i}", "img": f"img/{i}.jpg", "genres": genres.get(i, [])}
            for i in node_ids
        ],
        "edges": [{"source": s, "target": t, "type": k} for s, t, k in edges],
    })


def family_hierarchy() -> HierarchyDataset:
    """A is the root with children B and C; B has child D."""
    return HierarchyDataset.model_validate({
        "source": {
            "id": "A", "name": "Artist A",
            "children": [
                {"id": "B", "name": "Artist B", "children": [{"id": "D", "name": "Artist D"}]},
                {"id": "C", "name": "Artist C"},
            ],
        },
        "links": [
            {"source": "A", "target": "B", "type": "x"},
            {"source": "B", "target": "D", "type": "y"},
            {"source": "A", "target": "C", "type": "x"},
        ],
    })


@pytest.fixture()
def config():
    return Config()


@pytest.fixture()
def abc_store():
    """Items A, B, C with a single relationship A–B of type x."""
    return EntityStore(make_graph(["A", "B", "C"], [("A", "B", "x")]))


@pytest.fixture()
def family_store():
    """Items A-E; E has relationships but is not part of the hierarchy."""
    graph = make_graph(
        ["A", "B", "C", "D", "E"],
        [("A", "B", "x"), ("B", "D", "y"), ("A", "C", "x"), ("C", "E", "z")],
    )
    return EntityStore(graph, family_hierarchy())


@pytest.fixture()
def sample_store():
    from scrollvis.loader import load_store

    return load_store(DATA_DIR / "sample_graph.json", DATA_DIR / "sample_tree.json", Config())


@pytest.fixture()
def engine(family_store, config):
    return ScrollVis(family_store, config)


@pytest.fixture()
def abc_engine(abc_store, config):
    return ScrollVis(abc_store, config)
