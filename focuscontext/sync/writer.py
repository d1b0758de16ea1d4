"""Idempotent, crash-safe persistence of serialized snapshots."""

from __future__ import annotations

import logging

from ..context_model.serialize import content_fingerprint

logger = logging.getLogger(__name__)


class RenameUnsupportedError(RuntimeError):
    """Raised when a storage adapter offers no ``rename``."""


def _remove_if_present(storage, path: str) -> None:
    try:
        storage.remove(path)
    except FileNotFoundError:
        pass


def write_atomic(storage, path: str, serialized: str, temp_suffix: str = ".tmp") -> bool:
    """Write ``serialized`` to ``path`` through a temporary sibling and rename.

    The final path never holds partial content: it keeps its old content
    until the temp file is complete, then is briefly absent between remove
    and rename. When the adapter lacks ``rename`` or any step fails, falls
    back to a direct overwrite. Failures are logged; returns success.
    """
    temp_path = f"{path}{temp_suffix}"
    try:
        rename = getattr(storage, "rename", None)
        if not callable(rename):
            raise RenameUnsupportedError(f"{type(storage).__name__} cannot rename")
        storage.write(temp_path, serialized)
        _remove_if_present(storage, path)
        rename(temp_path, path)
        return True
    except RenameUnsupportedError as exc:
        logger.debug("atomic write unavailable, writing directly: %s", exc)
    except Exception:
        logger.exception("atomic write of %s failed, writing directly", path)

    try:
        storage.write(path, serialized)
    except Exception:
        logger.exception("direct write of %s failed", path)
        return False
    return True


class SnapshotWriter:
    """Skip writes whose content fingerprint matches the last successful one.

    ``last_fingerprint`` lives only in memory and starts empty, so the first
    write after construction always reaches storage.
    """

    def __init__(self, storage, path: str, *, temp_suffix: str = ".tmp") -> None:
        self.storage = storage
        self.path = path
        self.temp_suffix = temp_suffix
        self.last_fingerprint: str | None = None
        self.write_count = 0

    def write(self, serialized: str, *, fingerprint: str | None = None) -> bool:
        """Persist ``serialized`` unless unchanged; return whether it was written.

        ``fingerprint`` defaults to a digest of ``serialized`` itself.
        """
        if fingerprint is None:
            fingerprint = content_fingerprint(serialized)
        if fingerprint == self.last_fingerprint:
            return False
        if not write_atomic(self.storage, self.path, serialized, self.temp_suffix):
            return False
        self.last_fingerprint = fingerprint
        self.write_count += 1
        logger.debug("wrote focus snapshot to %s", self.path)
        return True

    def reset(self) -> None:
        """Forget the last fingerprint so the next write always lands."""
        self.last_fingerprint = None


__all__ = ["RenameUnsupportedError", "write_atomic", "SnapshotWriter"]
