"""
Recompute cadence for a flow field.

Integration and synthesis are full passes, too costly to run on every cost
edit or target change. The scheduler coalesces mutations: callers mark the
field dirty whenever they change it and call ``update`` once per frame;
a recompute runs at most once per ``min_interval`` seconds.
"""

import logging
import time
from collections.abc import Callable

from flowfield.kernels.protocol import IntegrationResult

logger = logging.getLogger(__name__)


class RecomputeScheduler:
    """Rate-limited recompute of a FlowField.

    Example:
        scheduler = RecomputeScheduler(field, min_interval=0.1)
        field.set_cost(i, COST_MAX)
        scheduler.mark_dirty()
        scheduler.update()   # once per frame
    """

    def __init__(
        self,
        field,
        min_interval: float = 0.1,
        clock: Callable[[], float] = time.monotonic,
    ):
        if min_interval < 0:
            raise ValueError(f"min_interval must be non-negative, got {min_interval}")
        self.field = field
        self.min_interval = min_interval
        self.clock = clock
        self.dirty = True
        self.last_result: IntegrationResult | None = None
        self._last_update: float | None = None

    @classmethod
    def from_config(cls, field, clock: Callable[[], float] = time.monotonic):
        """Scheduler using ``field.config.recompute.min_interval``."""
        return cls(field, field.config.recompute.min_interval, clock)

    def mark_dirty(self) -> None:
        """Record that costs or the target changed since the last recompute."""
        self.dirty = True

    def set_target(self, index: int | None) -> None:
        """Set the target and mark dirty."""
        self.field.set_target(index)
        self.dirty = True

    def set_cost(self, index: int, value: int) -> None:
        """Set a cell cost and mark dirty."""
        self.field.set_cost(index, value)
        self.dirty = True

    def update(self, now: float | None = None, force: bool = False) -> bool:
        """
        Recompute the field if necessary.

        Returns True if a recompute ran.
        """
        if now is None:
            now = self.clock()
        if not force and not self._should_update(now):
            return False

        self.last_result = self.field.recompute()
        self._last_update = now
        self.dirty = False
        logger.debug("recompute at t=%.3f: %s", now, self.last_result)
        return True

    def _should_update(self, now: float) -> bool:
        """Dirty and the interval since the last recompute has elapsed."""
        if not self.dirty:
            return False

        # First computation
        if self._last_update is None:
            return True

        return now - self._last_update >= self.min_interval
