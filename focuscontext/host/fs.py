"""Filesystem-backed hierarchy: directory listing and storage adapter.

Maps a directory on disk onto logical ``VaultEntry`` values so the
synchronization pipeline can run outside an editor host.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path

from ..context_model.paths import ROOT_PATH, is_root_path, join_logical, storage_path
from ..context_model.types import HeadingRecord, VaultEntry
from .markdown import MarkdownHeadingIndex

logger = logging.getLogger(__name__)

DEFAULT_HIDDEN_PREFIX = "."


class FileSystemAdapter:
    """Storage adapter reading and writing files below ``root``.

    ``rename`` replaces the destination atomically (``os.replace``).
    """

    def __init__(self, root: Path) -> None:
        self.root = root.resolve()

    def full_path(self, path: str) -> str:
        """Resolve a logical path to an absolute filesystem path."""
        if is_root_path(path):
            return str(self.root)
        return str(self.root / storage_path(path))

    def _target(self, path: str) -> Path:
        target = (self.root / storage_path(path)).resolve()
        if not target.is_relative_to(self.root):
            raise ValueError(f"path escapes storage root: {path!r}")
        return target

    def read(self, path: str) -> str:
        return self._target(path).read_text(encoding="utf-8")

    def exists(self, path: str) -> bool:
        return self._target(path).exists()

    def write(self, path: str, data: str) -> None:
        target = self._target(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())

    def remove(self, path: str) -> None:
        self._target(path).unlink()

    def rename(self, src: str, dst: str) -> None:
        os.replace(self._target(src), self._target(dst))


class FileSystemVault:
    """Logical view of a directory tree rooted at ``root``.

    Hidden names (leading ``.``) are skipped unless ``show_hidden`` is set.
    Listing order is folders first, then case-insensitive name.
    """

    def __init__(self, root: Path, *, show_hidden: bool = False) -> None:
        self.root = root.resolve()
        self.show_hidden = show_hidden
        self.adapter = FileSystemAdapter(self.root)
        self.root_entry = VaultEntry(path=ROOT_PATH, name="", is_folder=True, parent=None)
        self.heading_index = MarkdownHeadingIndex(self.absolute_path)

    def absolute_path(self, logical_path: str) -> Path:
        return Path(self.adapter.full_path(logical_path))

    def _visible(self, name: str) -> bool:
        return self.show_hidden or not name.startswith(DEFAULT_HIDDEN_PREFIX)

    def _scan(self, directory: Path) -> list[tuple[str, bool]]:
        """List visible ``(name, is_dir)`` children, or ``[]`` when unreadable."""
        children: list[tuple[str, bool]] = []
        try:
            with os.scandir(directory) as entries:
                for child in entries:
                    if not self._visible(child.name):
                        continue
                    try:
                        is_dir = child.is_dir(follow_symlinks=False)
                    except OSError:
                        is_dir = False
                    children.append((child.name, is_dir))
        except OSError as exc:
            logger.debug("cannot scan %s: %s", directory, exc)
            return []
        children.sort(key=lambda item: (not item[1], item[0].lower()))
        return children

    def all_entries(self) -> list[VaultEntry]:
        """Return every visible entry below the root, parents before children."""
        out: list[VaultEntry] = []
        pending: list[VaultEntry] = [self.root_entry]
        while pending:
            folder = pending.pop()
            subfolders: list[VaultEntry] = []
            for name, is_dir in self._scan(self.absolute_path(folder.path)):
                entry = VaultEntry(
                    path=join_logical(folder.path, name),
                    name=name,
                    is_folder=is_dir,
                    parent=folder,
                )
                out.append(entry)
                if is_dir:
                    subfolders.append(entry)
            pending.extend(reversed(subfolders))
        return out

    def entry_for(self, logical_path: str) -> VaultEntry | None:
        """Resolve ``logical_path`` to an entry with its full parent chain."""
        if is_root_path(logical_path):
            return self.root_entry
        segments = [part for part in logical_path.strip("/").split("/") if part]
        if any(part == ".." for part in segments):
            return None
        target = self.absolute_path("/".join(segments))
        if not target.exists():
            return None
        current = self.root_entry
        for idx, segment in enumerate(segments):
            at_leaf = idx == len(segments) - 1
            current = VaultEntry(
                path=join_logical(current.path, segment),
                name=segment,
                is_folder=target.is_dir() if at_leaf else True,
                parent=current,
            )
        return current

    def entry_for_absolute(self, path: Path) -> VaultEntry | None:
        """Resolve an absolute or cwd-relative filesystem path inside the root."""
        try:
            resolved = path.resolve()
        except OSError:
            return None
        if resolved == self.root:
            return self.root_entry
        if not resolved.is_relative_to(self.root):
            return None
        return self.entry_for(resolved.relative_to(self.root).as_posix())

    def headings_for(self, entry: VaultEntry) -> Sequence[HeadingRecord] | None:
        if entry.is_folder:
            return None
        return self.heading_index.headings_for(entry.path)


__all__ = [
    "FileSystemAdapter",
    "FileSystemVault",
]
