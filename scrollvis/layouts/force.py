"""Force-directed graph layout: an explicitly stepped velocity simulation.

The simulation never owns a timer. The host render loop calls ``tick()`` once per
frame; ``start()`` and ``stop()`` only flip the running flag. Each tick cools
``alpha`` toward ``alpha_target`` and applies, in order: many-body repulsion,
link attraction, collision, centering and the category region pulls. The
simulation stops itself once ``alpha`` drops below ``alpha_min``.
"""

import logging
import math
import random
from typing import Callable

from scrollvis.config import CategoryRegion, ForceConfig
from scrollvis.layouts.base import LayoutProvider, Point
from scrollvis.store import EntityStore, Item

logger = logging.getLogger(__name__)

_INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))

TickListener = Callable[["ForceSimulation"], None]


def category_region(genres: list[str], config: ForceConfig) -> CategoryRegion:
    """Return the first region with a tag found in any genre, else the default.

    Tags match as substrings, so ``house`` also claims ``deep house``.
    """
    for region in config.regions:
        if any(tag in genre for tag in region.tags for genre in genres):
            return region
    return config.default_region


def category_target(genres: list[str], config: ForceConfig, width: float, height: float) -> Point:
    region = category_region(genres, config)
    return region.x * width, region.y * height


class ForceSimulation(LayoutProvider):
    """Stateful force layout over every item and relationship in the store."""

    def __init__(
        self,
        store: EntityStore,
        config: ForceConfig,
        width: float,
        height: float,
        seed: int = 0,
    ) -> None:
        super().__init__(store)
        self.config = config
        self.width = width
        self.height = height
        self.alpha = 1.0
        self.running = False
        self.ticks = 0
        self._rng = random.Random(seed)
        self._listeners: dict[str, list[TickListener]] = {"tick": [], "end": []}

        self.nodes: list[Item] = store.items
        self._init_positions()

        self._links = [
            (store.lookup(r.source), store.lookup(r.target)) for r in store.relationships
        ]
        count = {n.id: 0 for n in self.nodes}
        for source, target in self._links:
            count[source.id] += 1
            count[target.id] += 1
        self._link_strength = [1 / min(count[s.id], count[t.id]) for s, t in self._links]
        self._link_bias = [count[s.id] / (count[s.id] + count[t.id]) for s, t in self._links]

        self._targets = [category_target(n.genres, config, width, height) for n in self.nodes]

    def _init_positions(self) -> None:
        """Phyllotaxis arrangement around the origin."""
        for i, node in enumerate(self.nodes):
            radius = self.config.initial_radius * math.sqrt(0.5 + i)
            angle = i * _INITIAL_ANGLE
            node.x = radius * math.cos(angle)
            node.y = radius * math.sin(angle)
            node.vx = 0.0
            node.vy = 0.0

    # --- Control ---

    def on(self, event: str, listener: TickListener | None) -> None:
        """Register a listener for ``tick`` or ``end``. ``None`` clears them."""
        if event not in self._listeners:
            raise ValueError(f"Unknown simulation event: {event}")
        if listener is None:
            self._listeners[event].clear()
        else:
            self._listeners[event].append(listener)

    @property
    def settled(self) -> bool:
        return self.alpha < self.config.alpha_min

    def start(self) -> None:
        """Resume stepping. No-op when already running."""
        if self.running:
            return
        if self.settled:
            self.alpha = self.config.reheat_alpha
        self.running = True
        logger.debug("Force simulation started (alpha=%.4f, %d nodes)", self.alpha, len(self.nodes))

    def stop(self) -> None:
        """Stop stepping. No-op when already stopped."""
        if not self.running:
            return
        self.running = False
        logger.debug("Force simulation stopped after %d ticks", self.ticks)

    def tick(self) -> bool:
        """Advance one iteration if running. Returns whether a step was taken."""
        if not self.running:
            return False

        self.step()
        for listener in list(self._listeners["tick"]):
            listener(self)

        if self.settled:
            self.running = False
            logger.debug("Force simulation settled after %d ticks", self.ticks)
            for listener in list(self._listeners["end"]):
                listener(self)
        return True

    def step(self) -> None:
        """One integration step regardless of the running flag."""
        cfg = self.config
        self.alpha += (cfg.alpha_target - self.alpha) * cfg.alpha_decay
        self.ticks += 1

        self._force_charge()
        self._force_link()
        self._force_collide()
        self._force_center()
        self._force_category()

        keep = 1 - cfg.velocity_decay
        for node in self.nodes:
            node.vx *= keep
            node.vy *= keep
            node.x += node.vx
            node.y += node.vy

    def positions(self) -> dict[str, Point]:
        return {n.id: (n.x, n.y) for n in self.nodes}

    # --- Forces ---

    def _jiggle(self) -> float:
        return (self._rng.random() - 0.5) * 1e-6

    def _force_charge(self) -> None:
        strength = self.config.charge_strength
        if strength == 0:
            return
        dmin2 = self.config.charge_distance_min ** 2
        alpha = self.alpha
        for node in self.nodes:
            for other in self.nodes:
                if other is node:
                    continue
                dx = other.x - node.x
                dy = other.y - node.y
                if dx == 0:
                    dx = self._jiggle()
                if dy == 0:
                    dy = self._jiggle()
                dist2 = dx * dx + dy * dy
                if dist2 < dmin2:
                    dist2 = math.sqrt(dmin2 * dist2)
                node.vx += dx * strength * alpha / dist2
                node.vy += dy * strength * alpha / dist2

    def _force_link(self) -> None:
        distance = self.config.link_distance
        for _ in range(self.config.link_iterations):
            for i, (source, target) in enumerate(self._links):
                dx = target.x + target.vx - source.x - source.vx or self._jiggle()
                dy = target.y + target.vy - source.y - source.vy or self._jiggle()
                length = math.sqrt(dx * dx + dy * dy)
                k = (length - distance) / length * self.alpha * self._link_strength[i]
                dx *= k
                dy *= k
                bias = self._link_bias[i]
                target.vx -= dx * bias
                target.vy -= dy * bias
                source.vx += dx * (1 - bias)
                source.vy += dy * (1 - bias)

    def _force_collide(self) -> None:
        radius = self.config.collide_radius
        strength = self.config.collide_strength
        r2 = radius * radius
        weight = r2 / (r2 + r2)
        for i, node in enumerate(self.nodes):
            xi = node.x + node.vx
            yi = node.y + node.vy
            for other in self.nodes[i + 1:]:
                dx = xi - other.x - other.vx
                dy = yi - other.y - other.vy
                dist2 = dx * dx + dy * dy
                reach = radius + radius
                if dist2 >= reach * reach:
                    continue
                if dx == 0:
                    dx = self._jiggle()
                    dist2 += dx * dx
                if dy == 0:
                    dy = self._jiggle()
                    dist2 += dy * dy
                dist = math.sqrt(dist2)
                k = (reach - dist) / dist * strength
                dx *= k
                dy *= k
                node.vx += dx * weight
                node.vy += dy * weight
                other.vx -= dx * (1 - weight)
                other.vy -= dy * (1 - weight)

    def _force_center(self) -> None:
        if not self.nodes:
            return
        n = len(self.nodes)
        sx = (sum(node.x for node in self.nodes) / n - self.width / 2) * self.config.center_strength
        sy = (sum(node.y for node in self.nodes) / n - self.height / 2) * self.config.center_strength
        for node in self.nodes:
            node.x -= sx
            node.y -= sy

    def _force_category(self) -> None:
        kx = self.config.category_x_strength * self.alpha
        ky = self.config.category_y_strength * self.alpha
        for node, (tx, ty) in zip(self.nodes, self._targets):
            node.vx += (tx - node.x) * kx
            node.vy += (ty - node.y) * ky
