"""In-memory storage adapter for hosts whose storage cannot rename."""

from __future__ import annotations

import threading

from ..context_model.paths import storage_path


class MemoryAdapter:
    """Dict-backed storage keyed by logical path.

    There is no ``rename``, so writers targeting this adapter take
    their direct-overwrite path. ``write_count`` records every write call.
    """

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self._lock = threading.Lock()
        self._files: dict[str, str] = {storage_path(k): v for k, v in (files or {}).items()}
        self.write_count = 0

    def read(self, path: str) -> str:
        with self._lock:
            try:
                return self._files[storage_path(path)]
            except KeyError:
                raise FileNotFoundError(path) from None

    def exists(self, path: str) -> bool:
        with self._lock:
            return storage_path(path) in self._files

    def write(self, path: str, data: str) -> None:
        with self._lock:
            self._files[storage_path(path)] = data
            self.write_count += 1

    def remove(self, path: str) -> None:
        with self._lock:
            try:
                del self._files[storage_path(path)]
            except KeyError:
                raise FileNotFoundError(path) from None

    def paths(self) -> list[str]:
        with self._lock:
            return sorted(self._files)


__all__ = ["MemoryAdapter"]
