"""Ordinal list layout: evenly spaced points along one axis in hierarchy pre-order."""

import logging
import math
from enum import Enum

from scrollvis.layouts.base import LayoutProvider, Point
from scrollvis.store import EntityStore

logger = logging.getLogger(__name__)


class Orientation(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class PointScale:
    """Point scale over a discrete domain with outer padding.

    With padding p and n values the step is ``span / (n - 1 + 2p)``; the
    points are centered in the range. ``round_output`` floors the step and
    rounds the start so every point lands on a whole pixel.
    """

    def __init__(
        self,
        domain: list[str],
        range_: tuple[float, float] = (0.0, 1.0),
        padding: float = 0.5,
        round_output: bool = True,
    ) -> None:
        self.domain = list(domain)
        self.range = range_
        self.padding = padding
        self.round_output = round_output
        self._index = {value: i for i, value in enumerate(self.domain)}
        self._rescale()

    def _rescale(self) -> None:
        n = len(self.domain)
        start, stop = self.range
        reverse = stop < start
        if reverse:
            start, stop = stop, start
        step = (stop - start) / max(1, n - 1 + self.padding * 2)
        if self.round_output:
            step = math.floor(step)
        start += (stop - start - step * (n - 1)) * 0.5
        if self.round_output:
            start = round(start)
        values = [start + step * i for i in range(n)]
        if reverse:
            values.reverse()
        self.step = step
        self._values = values

    def __call__(self, value: str) -> float | None:
        i = self._index.get(value)
        return None if i is None else self._values[i]


class OrdinalLayout(LayoutProvider):
    """Places the hierarchy's pre-order sequence along one axis.

    Horizontal: x over ``[0, width]`` at ``y = height / 2``.
    Vertical: y over ``[0, height]`` at ``x = cross``.
    Both orientations share the same id order.
    """

    def __init__(
        self,
        store: EntityStore,
        orientation: Orientation,
        width: float,
        height: float,
        cross: float | None = None,
    ) -> None:
        super().__init__(store)
        self.orientation = orientation
        self.width = width
        self.height = height
        self.cross = cross

    def order(self) -> list[str]:
        return self.store.pre_order()

    def scale(self) -> PointScale:
        extent = self.width if self.orientation == Orientation.HORIZONTAL else self.height
        return PointScale(self.order(), (0, extent))

    def positions(self) -> dict[str, Point]:
        scale = self.scale()
        coords: dict[str, Point] = {}
        for item_id in scale.domain:
            along = scale(item_id)
            if self.orientation == Orientation.HORIZONTAL:
                cross = self.height / 2 if self.cross is None else self.cross
                coords[item_id] = (along, cross)
            else:
                cross = 0.0 if self.cross is None else self.cross
                coords[item_id] = (cross, along)
        return coords
