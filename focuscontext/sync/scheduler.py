"""Timer scheduling for the coalescing pipeline.

``ManualScheduler`` keeps virtual time for deterministic tests.
``ThreadScheduler`` runs every callback on one daemon worker thread, so
pipeline runs never overlap each other.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class ScheduledCall:
    """Handle for one pending callback."""

    __slots__ = ("due", "callback", "cancelled")

    def __init__(self, due: float, callback: Callable[[], object]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Virtual-clock scheduler advanced explicitly by the caller."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._seq = itertools.count()
        self._queue: list[tuple[float, int, ScheduledCall]] = []

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], object]) -> ScheduledCall:
        call = ScheduledCall(self._now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (call.due, next(self._seq), call))
        return call

    def pending(self) -> int:
        """Number of scheduled, non-cancelled calls."""
        return sum(1 for _due, _seq, call in self._queue if not call.cancelled)

    def advance(self, seconds: float) -> int:
        """Move time forward, running calls that become due in order.

        Calls scheduled while advancing run too when they fall inside the
        window. Returns the number of callbacks run.
        """
        target = self._now + max(0.0, seconds)
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _seq, call = heapq.heappop(self._queue)
            if call.cancelled:
                continue
            self._now = max(self._now, due)
            call.callback()
            ran += 1
        self._now = target
        return ran


class ThreadScheduler:
    """Real-time scheduler backed by a single daemon worker thread."""

    def __init__(self, name: str = "focuscontext-scheduler") -> None:
        self._name = name
        self._condition = threading.Condition()
        self._seq = itertools.count()
        self._queue: list[tuple[float, int, ScheduledCall]] = []
        self._closed = False
        self._thread: threading.Thread | None = None

    def now(self) -> float:
        return time.monotonic()

    @property
    def closed(self) -> bool:
        with self._condition:
            return self._closed

    def _ensure_worker(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._worker, name=self._name, daemon=True)
        self._thread.start()

    def call_later(self, delay: float, callback: Callable[[], object]) -> ScheduledCall:
        call = ScheduledCall(self.now() + max(0.0, delay), callback)
        with self._condition:
            if self._closed:
                call.cancel()
                return call
            heapq.heappush(self._queue, (call.due, next(self._seq), call))
            self._ensure_worker()
            self._condition.notify()
        return call

    def _next_due(self) -> ScheduledCall | None:
        """Block until a call is due; ``None`` once closed."""
        with self._condition:
            while not self._closed:
                if not self._queue:
                    self._condition.wait()
                    continue
                due, _seq, call = self._queue[0]
                if call.cancelled:
                    heapq.heappop(self._queue)
                    continue
                remaining = due - self.now()
                if remaining > 0:
                    self._condition.wait(timeout=remaining)
                    continue
                heapq.heappop(self._queue)
                return call
            return None

    def _worker(self) -> None:
        while True:
            call = self._next_due()
            if call is None:
                return
            try:
                call.callback()
            except Exception:
                logger.exception("scheduled callback failed")

    def close(self, timeout: float | None = 1.0) -> None:
        """Drop pending calls and stop the worker after its current callback."""
        with self._condition:
            self._closed = True
            for _due, _seq, call in self._queue:
                call.cancel()
            self._queue.clear()
            self._condition.notify_all()
            thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)


__all__ = ["ScheduledCall", "ManualScheduler", "ThreadScheduler"]
