"""Wire host events and timers to the assemble/serialize/write pipeline."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..config import SyncSettings
from ..context_model.serialize import serialize_snapshot, snapshot_fingerprint
from ..host.types import SYNC_EVENTS, HostBindings
from .assembler import ResolutionCache, assemble_snapshot
from .scheduler import ThreadScheduler
from .trigger import CoalescingTrigger, PeriodicTimer, error_barrier
from .writer import SnapshotWriter

logger = logging.getLogger(__name__)


class ContextSynchronizer:
    """Keep the focus snapshot artifact in step with host state.

    Owns the resolution cache and the writer's fingerprint; nothing else reads
    or mutates them. Host events and the periodic timer feed one coalescing
    trigger whose runs call ``sync_once``.
    """

    def __init__(
        self,
        bindings: HostBindings,
        settings: SyncSettings | None = None,
        *,
        scheduler=None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.bindings = bindings
        self.settings = settings or SyncSettings()
        self._owns_scheduler = scheduler is None
        self.scheduler = scheduler if scheduler is not None else ThreadScheduler()
        self._clock = clock
        self.cache = ResolutionCache()
        self.writer = SnapshotWriter(
            bindings.storage,
            self.settings.context_path,
            temp_suffix=self.settings.temp_suffix,
        )
        self.trigger = CoalescingTrigger(self.scheduler, self.sync_once, self.settings.debounce_seconds)
        self._interval = PeriodicTimer(self.scheduler, self.settings.interval_seconds, self.trigger)
        self._unsubscribers: list[Callable[[], None]] = []
        self._started = False

    def sync_once(self) -> bool:
        """Assemble, serialize and persist one snapshot; return whether it was written."""
        result = assemble_snapshot(self.bindings, self.cache, settings=self.settings, now=self._clock)
        if result.snapshot is None:
            return False
        self.cache = result.cache
        serialized = serialize_snapshot(result.snapshot, indent=self.settings.json_indent)
        return self.writer.write(serialized, fingerprint=snapshot_fingerprint(result.snapshot))

    def start(self) -> None:
        """Subscribe to host events, arm the periodic timer and trigger once.

        The first run after ``start`` always writes, even when the content
        matches what this synchronizer wrote before a ``stop``. Raises
        ``RuntimeError`` when the scheduler this synchronizer created was
        closed by an earlier ``stop``.
        """
        if self._started:
            return
        if self._owns_scheduler and self.scheduler.closed:
            raise RuntimeError("synchronizer was stopped and its scheduler closed; pass a scheduler to restart")
        self._started = True
        self.writer.reset()
        events = self.bindings.events
        if events is not None:
            barrier = error_barrier(self.trigger, log=logger)
            for name in SYNC_EVENTS:
                self._unsubscribers.append(events.subscribe(name, barrier))
        if self.bindings.register_cleanup is not None:
            self.bindings.register_cleanup(self.stop)
        self._interval.start()
        self.trigger()
        logger.debug("focus sync started for %s", self.settings.context_path)

    def stop(self) -> None:
        """Cancel pending runs and timers and drop event subscriptions.

        A write already in progress completes.
        """
        if not self._started:
            return
        self._started = False
        self.trigger.cancel()
        self._interval.cancel()
        unsubscribers, self._unsubscribers = self._unsubscribers, []
        for unsubscribe in unsubscribers:
            try:
                unsubscribe()
            except Exception:
                logger.exception("event unsubscribe failed")
        if self._owns_scheduler:
            self.scheduler.close()
        logger.debug("focus sync stopped")

    @property
    def running(self) -> bool:
        return self._started


__all__ = ["ContextSynchronizer"]
