"""Cancellable scheduled tasks for debouncing and frame coalescing.

Nothing here spawns threads. Due callbacks run when the owner calls
``run_due`` (or ``run_all`` to flush), which keeps every recompute on the
caller's thread and lets tests drive time through ``ManualClock``.
"""

from __future__ import annotations

import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class ManualClock:
    """Clock that only moves when told to (milliseconds)."""

    def __init__(self, start: float = 0.0):
        self.now = float(start)

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        if ms < 0:
            raise ValueError("Cannot move a clock backwards")
        self.now += ms
        return self.now


@dataclass(order=True)
class ScheduledTask:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    name: str = field(default="", compare=False)
    cancelled: bool = field(default=False, compare=False)


class Scheduler:
    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or monotonic_ms
        self._tasks: Dict[int, ScheduledTask] = {}
        self._seq = itertools.count()

    def now(self) -> float:
        return self.clock()

    def call_later(self, delay_ms: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        task = ScheduledTask(due=self.now() + max(float(delay_ms), 0.0), seq=next(self._seq), callback=callback, name=name)
        self._tasks[task.seq] = task
        return task

    def cancel(self, task: Optional[ScheduledTask]) -> bool:
        if task is None or task.cancelled:
            return False
        task.cancelled = True
        return self._tasks.pop(task.seq, None) is not None

    def cancel_all(self) -> int:
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancelled = True
        self._tasks.clear()
        return len(tasks)

    @property
    def pending(self) -> List[ScheduledTask]:
        return sorted(self._tasks.values())

    def run_due(self) -> int:
        """Run every task whose due time has passed, earliest first."""
        ran = 0
        while True:
            due = [task for task in self._tasks.values() if task.due <= self.now()]
            if not due:
                return ran
            self._run(min(due))
            ran += 1

    def run_all(self) -> int:
        """Run every pending task now, regardless of due time."""
        ran = 0
        while self._tasks:
            self._run(min(self._tasks.values()))
            ran += 1
        return ran

    def _run(self, task: ScheduledTask) -> None:
        self._tasks.pop(task.seq, None)
        if task.cancelled:
            return
        logger.debug("Running scheduled task %s", task.name or task.seq)
        task.callback()


class Debouncer:
    """Run ``callback`` once input has been quiet for ``wait_ms``.

    Each call replaces the pending one, so only the last call's arguments
    are used.
    """

    def __init__(self, scheduler: Scheduler, wait_ms: float, callback: Callable[..., None], name: str = "debounce"):
        self.scheduler = scheduler
        self.wait_ms = wait_ms
        self.callback = callback
        self.name = name
        self._task: Optional[ScheduledTask] = None

    def __call__(self, *args, **kwargs) -> None:
        self.scheduler.cancel(self._task)
        self._task = self.scheduler.call_later(self.wait_ms, lambda: self._fire(args, kwargs), name=self.name)

    def _fire(self, args, kwargs) -> None:
        self._task = None
        self.callback(*args, **kwargs)

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.cancelled

    def cancel(self) -> bool:
        cancelled = self.scheduler.cancel(self._task)
        self._task = None
        return cancelled


class FrameCoalescer:
    """At most one callback per frame; a newer request supersedes a pending one."""

    def __init__(self, scheduler: Scheduler, callback: Callable[[], None], frame_ms: float = 16.0, name: str = "frame"):
        self.scheduler = scheduler
        self.callback = callback
        self.frame_ms = frame_ms
        self.name = name
        self._task: Optional[ScheduledTask] = None

    def request(self) -> None:
        self.scheduler.cancel(self._task)
        self._task = self.scheduler.call_later(self._until_next_frame(), self._fire, name=self.name)

    def _until_next_frame(self) -> float:
        if self.frame_ms <= 0:
            return 0.0
        now = self.scheduler.now()
        remainder = now % self.frame_ms
        return self.frame_ms - remainder

    def _fire(self) -> None:
        self._task = None
        self.callback()

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.cancelled

    def cancel(self) -> bool:
        cancelled = self.scheduler.cancel(self._task)
        self._task = None
        return cancelled
