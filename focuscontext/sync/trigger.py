"""Event coalescing: trailing-edge debounce, periodic fallback, error barrier."""

from __future__ import annotations

import functools
import logging
import threading
from collections.abc import Callable

from .scheduler import ScheduledCall

logger = logging.getLogger(__name__)


def error_barrier(
    callback: Callable[..., object],
    *,
    log: logging.Logger | None = None,
) -> Callable[..., None]:
    """Wrap ``callback`` so exceptions are logged and never propagate."""
    target_log = log or logger

    @functools.wraps(callback)
    def guarded(*args: object, **kwargs: object) -> None:
        try:
            callback(*args, **kwargs)
        except Exception:
            target_log.exception("focus sync callback failed")

    return guarded


def _live(call: ScheduledCall) -> ScheduledCall | None:
    """Return ``call`` unless the scheduler refused it, e.g. after closing."""
    if call.cancelled:
        logger.debug("scheduler refused a call; it is closed")
        return None
    return call


class CoalescingTrigger:
    """Collapse bursts of calls into one run ``delay`` after the last call.

    There is no leading-edge run. Calls arriving while a run is scheduled
    push the run back to ``last_call + delay``. The callback runs behind
    ``error_barrier``.
    """

    def __init__(self, scheduler, callback: Callable[[], object], delay: float = 0.2) -> None:
        self._scheduler = scheduler
        self._callback = error_barrier(callback)
        self.delay = max(0.0, float(delay))
        self._lock = threading.Lock()
        self._scheduled: ScheduledCall | None = None
        self._last_call = 0.0
        self.run_count = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._scheduled is not None

    def __call__(self, *_args: object) -> None:
        """Record a call; host event payloads are ignored."""
        with self._lock:
            self._last_call = self._scheduler.now()
            if self._scheduled is not None:
                return
            self._scheduled = _live(self._scheduler.call_later(self.delay, self._fire))

    def _fire(self) -> None:
        with self._lock:
            if self._scheduled is None:
                return
            remaining = self._last_call + self.delay - self._scheduler.now()
            if remaining > 1e-9:
                self._scheduled = _live(self._scheduler.call_later(remaining, self._fire))
                return
            self._scheduled = None
            self.run_count += 1
        self._callback()

    def cancel(self) -> None:
        """Drop any pending run."""
        with self._lock:
            scheduled = self._scheduled
            self._scheduled = None
        if scheduled is not None:
            scheduled.cancel()

    def flush(self) -> bool:
        """Run a pending call now; return whether one was pending."""
        with self._lock:
            scheduled = self._scheduled
            self._scheduled = None
            if scheduled is None:
                return False
            self.run_count += 1
        scheduled.cancel()
        self._callback()
        return True


class PeriodicTimer:
    """Invoke ``callback`` every ``interval`` seconds until cancelled."""

    def __init__(self, scheduler, interval: float, callback: Callable[[], object]) -> None:
        self._scheduler = scheduler
        self.interval = max(0.001, float(interval))
        self._callback = error_barrier(callback)
        self._lock = threading.Lock()
        self._scheduled: ScheduledCall | None = None
        self._active = False

    def start(self) -> None:
        with self._lock:
            if self._active:
                return
            self._scheduled = _live(self._scheduler.call_later(self.interval, self._tick))
            self._active = self._scheduled is not None

    def _tick(self) -> None:
        with self._lock:
            if not self._active:
                return
            self._scheduled = _live(self._scheduler.call_later(self.interval, self._tick))
            self._active = self._scheduled is not None
        self._callback()

    def cancel(self) -> None:
        with self._lock:
            self._active = False
            scheduled = self._scheduled
            self._scheduled = None
        if scheduled is not None:
            scheduled.cancel()

    @property
    def active(self) -> bool:
        with self._lock:
            return self._active


__all__ = ["error_barrier", "CoalescingTrigger", "PeriodicTimer"]
