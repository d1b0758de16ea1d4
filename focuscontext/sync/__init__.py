"""Snapshot synchronization pipeline.

Host events/timers -> ``CoalescingTrigger`` -> ``assemble_snapshot`` ->
serialize -> ``SnapshotWriter`` (fingerprint check, atomic write).
"""

from __future__ import annotations

from .assembler import AssemblyResult, FocusTarget, ResolutionCache, assemble_snapshot, resolve_focus
from .scheduler import ManualScheduler, ScheduledCall, ThreadScheduler
from .trigger import CoalescingTrigger, PeriodicTimer, error_barrier
from .writer import RenameUnsupportedError, SnapshotWriter, write_atomic
from .synchronizer import ContextSynchronizer

__all__ = [
    "AssemblyResult",
    "FocusTarget",
    "ResolutionCache",
    "assemble_snapshot",
    "resolve_focus",
    "ManualScheduler",
    "ScheduledCall",
    "ThreadScheduler",
    "CoalescingTrigger",
    "PeriodicTimer",
    "error_barrier",
    "RenameUnsupportedError",
    "SnapshotWriter",
    "write_atomic",
    "ContextSynchronizer",
]
