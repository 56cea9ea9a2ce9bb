"""Scroll-offset plumbing: turns a pixel offset into (section, progress) calls."""

import bisect
import logging

from scrollvis.engine import ScrollVis

logger = logging.getLogger(__name__)


class Scroller:
    """Maps a reader's scroll offset onto the engine's control surface.

    ``section_tops`` are the pixel offsets where each text section starts, in
    increasing order. ``trigger`` shifts every boundary up, so a section becomes
    active a little before its top reaches the viewport edge.
    """

    def __init__(self, engine: ScrollVis, section_tops: list[float], trigger: float = 0.0) -> None:
        if not section_tops:
            raise ValueError("At least one section offset is required")
        if any(b < a for a, b in zip(section_tops, section_tops[1:])):
            raise ValueError("Section offsets must be non-decreasing")
        self.engine = engine
        self.section_tops = [top - trigger for top in section_tops]
        self.current: int | None = None

    def position(self, offset: float) -> tuple[int, float]:
        """Return the active section index and progress through it (0-1)."""
        tops = self.section_tops
        index = max(0, min(len(tops) - 1, bisect.bisect_right(tops, offset) - 1))
        start = tops[index]
        if index + 1 < len(tops):
            span = tops[index + 1] - start
        else:
            span = 0.0
        progress = (offset - start) / span if span > 0 else 0.0
        return index, min(1.0, max(0.0, progress))

    def scroll_to(self, offset: float) -> tuple[int, float]:
        """Activate the section under ``offset`` when it changes, then report progress."""
        index, progress = self.position(offset)
        if index != self.current:
            logger.debug("Scroll offset %.0f enters section %d", offset, index)
            self.engine.activate(index)
            self.current = index
        self.engine.animator.transition(self.engine.handles.tooltip, "opacity", 0.0, 0)
        self.engine.update(index, progress)
        return index, progress
