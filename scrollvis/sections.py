"""Section state machine: runs every passed-over section's activation in scroll order."""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

ActivateEffect = Callable[[], None]
UpdateEffect = Callable[[float], None]

NO_SECTION = -1
HISTORY_LIMIT = 64


class SectionIndexError(IndexError):
    """Section index outside the configured range."""


def _noop_update(progress: float) -> None:
    return None


@dataclass
class Section:
    name: str
    activate: ActivateEffect
    update: UpdateEffect = _noop_update


def scrolled_sections(last_index: int, target_index: int) -> list[int]:
    """Indices passed when moving from ``last_index`` to ``target_index``.

    Excludes the start, includes the target, ordered in scroll direction.
    """
    step = 1 if target_index >= last_index else -1
    return list(range(last_index + step, target_index + step, step))


class SectionStateMachine:
    """Index-generic sequencer of section activation effects.

    With ``strict`` set, an out-of-range index raises ``SectionIndexError``
    before any effect runs; otherwise it is logged and ignored. The last
    ``HISTORY_LIMIT`` effect indices run are kept in ``history``.
    """

    def __init__(self, sections: list[Section], strict: bool = True) -> None:
        if not sections:
            raise ValueError("At least one section is required")
        self.sections = sections
        self.strict = strict
        self.last_index = NO_SECTION
        self.active_index = 0
        self.history: deque[int] = deque(maxlen=HISTORY_LIMIT)

    def __len__(self) -> int:
        return len(self.sections)

    def _check(self, index: int) -> bool:
        if 0 <= index < len(self.sections):
            return True
        message = f"Section index out of range: {index} (have {len(self.sections)})"
        if self.strict:
            raise SectionIndexError(message)
        logger.warning("%s (ignored)", message)
        return False

    def activate(self, index: int) -> list[int]:
        """Run activation effects for every section between the last one and ``index``.

        Returns the indices whose effects ran, in the order they ran.
        """
        if not self._check(index):
            return []
        self.active_index = index
        passed = scrolled_sections(self.last_index, index)
        for i in passed:
            logger.debug("Activating section %d (%s)", i, self.sections[i].name)
            self.sections[i].activate()
            self.history.append(i)
        self.last_index = index
        return passed

    def update(self, index: int, progress: float) -> None:
        """Forward in-section scroll progress, clamped to [0, 1]."""
        if not self._check(index):
            return
        self.sections[index].update(min(1.0, max(0.0, progress)))
