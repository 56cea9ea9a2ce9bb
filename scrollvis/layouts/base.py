"""Base layout provider interface."""

import abc
import logging

from scrollvis.store import EntityStore

logger = logging.getLogger(__name__)

Point = tuple[float, float]


class LayoutProvider(abc.ABC):
    """Base class for all position providers."""

    def __init__(self, store: EntityStore) -> None:
        self.store = store

    @abc.abstractmethod
    def positions(self) -> dict[str, Point]:
        """Compute coordinates for the items this layout places.

        Returns:
            Mapping of item id to (x, y) in canvas coordinates.
        """
        ...

    def apply(self) -> dict[str, Point]:
        """Compute positions and write them onto the store's items."""
        coords = self.positions()
        for item_id, (x, y) in coords.items():
            item = self.store.lookup(item_id)
            item.x, item.y = x, y
        logger.debug("%s wrote %d item positions", type(self).__name__, len(coords))
        return coords
