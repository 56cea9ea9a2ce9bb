"""Dataset loading: reads the graph and hierarchy JSON files into an entity store."""

import logging
from pathlib import Path

from scrollvis.config import Config
from scrollvis.models import GraphDataset, HierarchyDataset
from scrollvis.store import EntityStore

logger = logging.getLogger(__name__)


def load_graph(path: Path) -> GraphDataset:
    """Parse ``{nodes: [...], edges: [...]}``. Raises FileNotFoundError or ValidationError."""
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Graph dataset not found: {path}")
    graph = GraphDataset.model_validate_json(path.read_text())
    logger.debug("Loaded graph %s: %d nodes, %d edges", path.name, len(graph.nodes), len(graph.edges))
    return graph


def load_hierarchy(path: Path) -> HierarchyDataset:
    """Parse ``{source: <tree>, links: [...]}``."""
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Hierarchy dataset not found: {path}")
    hierarchy = HierarchyDataset.model_validate_json(path.read_text())
    logger.debug("Loaded hierarchy %s: %d links", path.name, len(hierarchy.links))
    return hierarchy


def load_store(
    graph_path: Path,
    hierarchy_path: Path | None,
    config: Config,
) -> EntityStore:
    """Load both datasets and build the store under the configured integrity policy."""
    graph = load_graph(graph_path)
    hierarchy = load_hierarchy(hierarchy_path) if hierarchy_path is not None else None
    store = EntityStore(graph, hierarchy, integrity_policy=config.integrity_policy)
    if store.report.total_dropped:
        logger.warning("Dropped %d records while loading: %s", store.report.total_dropped, store.report)
    else:
        logger.info("Loaded %s", store.report)
    return store
