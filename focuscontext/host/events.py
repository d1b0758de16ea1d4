"""Minimal named-event hub for hosts without their own dispatcher."""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from collections.abc import Callable

logger = logging.getLogger(__name__)


class EventHub:
    """Synchronous publish/subscribe keyed by event name.

    A failing listener is logged and does not stop delivery to the others.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: dict[str, list[Callable[..., object]]] = defaultdict(list)

    def subscribe(self, name: str, callback: Callable[..., object]) -> Callable[[], None]:
        """Register ``callback`` for ``name`` and return an unsubscribe function."""
        with self._lock:
            self._listeners[name].append(callback)

        def unsubscribe() -> None:
            with self._lock:
                listeners = self._listeners.get(name, [])
                if callback in listeners:
                    listeners.remove(callback)

        return unsubscribe

    def emit(self, name: str, *args: object) -> int:
        """Deliver ``args`` to every listener of ``name``; return listener count."""
        with self._lock:
            listeners = list(self._listeners.get(name, ()))
        for callback in listeners:
            try:
                callback(*args)
            except Exception:
                logger.exception("listener for %r failed", name)
        return len(listeners)

    def listener_count(self, name: str) -> int:
        with self._lock:
            return len(self._listeners.get(name, ()))


__all__ = ["EventHub"]
