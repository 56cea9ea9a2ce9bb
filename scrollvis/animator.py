"""Transition animator: timed interpolation of handle properties.

Transitions are keyed by (handle key, property). Scheduling a new transition on a
property replaces the one in flight; there is no queue. Time only moves when the
host calls ``advance``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)

Easing = Callable[[float], float]


def ease_cubic_in_out(t: float) -> float:
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


def ease_linear(t: float) -> float:
    return t


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class Transition:
    handle: Any
    prop: str
    start_value: Any
    end_value: Any
    start_time: float
    duration: float

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration

    def value_at(self, now: float, ease: Easing) -> Any:
        t = min(1.0, max(0.0, (now - self.start_time) / self.duration))
        if t >= 1.0:
            return self.end_value
        if _is_number(self.start_value) and _is_number(self.end_value):
            e = ease(t)
            return self.start_value + (self.end_value - self.start_value) * e
        return self.start_value


class Animator:
    """Owns every in-flight transition of one engine instance."""

    def __init__(self, ease: Easing = ease_cubic_in_out) -> None:
        self.ease = ease
        self.now = 0.0
        self._active: dict[tuple[str, str], Transition] = {}

    def transition(self, handle: Any, prop: str, value: Any, duration: float) -> None:
        """Animate ``handle.prop`` to ``value`` over ``duration`` ms.

        A duration of 0 writes immediately.
        """
        key = (handle.key, prop)
        if duration <= 0:
            self._active.pop(key, None)
            setattr(handle, prop, value)
            return
        self._active[key] = Transition(
            handle=handle,
            prop=prop,
            start_value=getattr(handle, prop),
            end_value=value,
            start_time=self.now,
            duration=duration,
        )

    def animate(self, handle: Any, duration: float, **props: Any) -> None:
        for prop, value in props.items():
            self.transition(handle, prop, value, duration)

    def set(self, handle: Any, **props: Any) -> None:
        """Write immediately, cancelling in-flight transitions on these properties."""
        self.animate(handle, 0, **props)

    def advance(self, elapsed_ms: float) -> int:
        """Move the clock forward. Returns the number of transitions completed."""
        if elapsed_ms < 0:
            raise ValueError(f"Cannot advance by a negative duration: {elapsed_ms}")
        self.now += elapsed_ms
        done = 0
        for key, tr in list(self._active.items()):
            setattr(tr.handle, tr.prop, tr.value_at(self.now, self.ease))
            if self.now >= tr.end_time:
                del self._active[key]
                done += 1
        return done

    def settle(self) -> None:
        """Fast-forward until nothing is in flight."""
        if not self._active:
            return
        end = max(tr.end_time for tr in self._active.values())
        self.advance(end - self.now)

    def target(self, handle: Any, prop: str) -> Any:
        """Value the property is heading to (its current value when idle)."""
        tr = self._active.get((handle.key, prop))
        return tr.end_value if tr else getattr(handle, prop)

    def is_animating(self, handle: Any, prop: str | None = None) -> bool:
        if prop is not None:
            return (handle.key, prop) in self._active
        return any(k == handle.key for k, _ in self._active)

    @property
    def pending(self) -> int:
        return len(self._active)
