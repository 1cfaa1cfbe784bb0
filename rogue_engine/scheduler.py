"""
Emoji Rogue Combat Engine: Virtual Clock Scheduler

Deferred work (projectile travel, enemy pacing, victory delay) is queued here
instead of on real timers. Nothing runs until the owner advances the clock,
so tests can flush time deterministically.
"""

from __future__ import annotations
import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from .errors import EngineError

logger = logging.getLogger(__name__)

MAX_IDLE_STEPS = 10_000


@dataclass(order=True)
class TimerHandle:
    due: int
    seq: int
    callback: Callable[..., Any] = field(compare=False)
    args: tuple = field(default=(), compare=False)
    cancelled: bool = field(default=False, compare=False)
    label: str = field(default="", compare=False)


class Scheduler:
    """Pending timed callbacks ordered by (due time, insertion order)."""

    def __init__(self):
        self.now = 0
        self._heap: list[TimerHandle] = []
        self._counter = itertools.count()

    @property
    def pending(self) -> int:
        return sum(1 for h in self._heap if not h.cancelled)

    @property
    def next_due(self):
        self._drop_cancelled()
        return self._heap[0].due if self._heap else None

    def call_later(self, delay_ms: int, callback: Callable[..., Any], *args, label: str = "") -> TimerHandle:
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        handle = TimerHandle(self.now + delay_ms, next(self._counter), callback, args, label=label)
        heapq.heappush(self._heap, handle)
        return handle

    def cancel(self, handle: TimerHandle) -> None:
        handle.cancelled = True

    def cancel_all(self) -> None:
        for handle in self._heap:
            handle.cancelled = True
        self._heap.clear()

    def advance(self, ms: int) -> int:
        """Move the clock forward by ms, running everything that falls due. Returns jobs run."""
        if ms < 0:
            raise ValueError("cannot move the clock backwards")
        target = self.now + ms
        ran = 0
        while True:
            self._drop_cancelled()
            if not self._heap or self._heap[0].due > target:
                break
            ran += self._run_next()
        self.now = target
        return ran

    def run_until_idle(self, max_steps: int = MAX_IDLE_STEPS) -> int:
        """Jump from due time to due time until nothing is pending."""
        ran = 0
        while True:
            self._drop_cancelled()
            if not self._heap:
                return ran
            if ran >= max_steps:
                raise EngineError(f"scheduler still busy after {max_steps} jobs")
            ran += self._run_next()

    def _run_next(self) -> int:
        handle = heapq.heappop(self._heap)
        self.now = max(self.now, handle.due)
        logger.debug("t=%d running %s", self.now, handle.label or handle.callback)
        handle.callback(*handle.args)
        return 1

    def _drop_cancelled(self) -> None:
        while self._heap and self._heap[0].cancelled:
            heapq.heappop(self._heap)
