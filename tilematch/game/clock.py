"""Scheduled callbacks: the engine's only suspension points.

The countdown and optional cascade pacing both run on a ``Scheduler``.
``ManualScheduler`` is driven explicitly by the host (or by tests) and
``AsyncioScheduler`` plugs into a running event loop.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Callable


class TimerHandle(ABC):
    """Handle for a scheduled callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Cancel the callback if it has not run yet."""

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        """Check if the callback was cancelled."""


class Scheduler(ABC):
    """Single-threaded scheduled-callback source."""

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` after ``delay`` seconds."""


class _ManualHandle(TimerHandle):
    def __init__(self, when: float, callback: Callable[[], None]):
        self.when = when
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """Scheduler advanced explicitly with ``advance()``."""

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: list[tuple[float, int, _ManualHandle]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = _ManualHandle(self._now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    @property
    def pending(self) -> int:
        """Number of callbacks waiting to run."""
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def advance(self, seconds: float) -> int:
        """Move time forward, running every callback that falls due.

        Callbacks scheduled by callbacks run too if they fall due inside
        the window. Callbacks run in due-time order, ties in scheduling order.

        Returns:
            Number of callbacks run.
        """
        target = self._now + max(0.0, seconds)
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = when
            handle.callback()
            ran += 1
        self._now = target
        return ran

    def run_pending(self) -> int:
        """Run everything scheduled, however far in the future."""
        ran = 0
        while self._queue:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = max(self._now, when)
            handle.callback()
            ran += 1
        return ran


class _AsyncioHandle(TimerHandle):
    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return _AsyncioHandle(self.loop.call_later(delay, callback))


class CountdownTimer:
    """Repeating tick on a scheduler.

    ``stop()`` cancels the pending tick; ``start()`` on a running timer
    is a no-op.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_tick: Callable[[], None],
        interval: float = 1.0,
    ):
        self.scheduler = scheduler
        self.interval = interval
        self._on_tick = on_tick
        self._handle: TimerHandle | None = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self._handle is not None:
            return
        self._schedule()

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        self._handle = self.scheduler.call_later(self.interval, self._fire)

    def _fire(self) -> None:
        self._schedule()
        self._on_tick()
