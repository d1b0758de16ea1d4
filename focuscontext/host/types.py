"""Host-facing contracts consumed by the synchronization pipeline."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..context_model.types import HeadingRecord, VaultEntry

EVENT_FILE_OPEN = "file-open"
EVENT_ACTIVE_LEAF_CHANGE = "active-leaf-change"
EVENT_EDITOR_CHANGE = "editor-change"
EVENT_CREATE = "create"
SYNC_EVENTS = (
    EVENT_FILE_OPEN,
    EVENT_ACTIVE_LEAF_CHANGE,
    EVENT_EDITOR_CHANGE,
    EVENT_CREATE,
)


@dataclass(frozen=True)
class CursorPosition:
    line: int
    column: int


@dataclass(frozen=True)
class EditorState:
    """What the active editor reports: its document, cursor head and selection."""

    document: VaultEntry | None
    cursor: CursorPosition | None = None
    has_selection: bool = False
    selection: str = ""


@dataclass(frozen=True)
class HostBindings:
    """Runtime host dependencies required by the snapshot pipeline.

    ``storage`` is any object with ``write(path, text)`` and ``remove(path)``;
    ``rename(src, dst)`` is optional. ``events`` needs
    ``subscribe(name, callback) -> unsubscribe``.
    """

    active_editor: Callable[[], EditorState | None]
    active_document: Callable[[], VaultEntry | None]
    explorer_selection: Callable[[], Sequence[VaultEntry]]
    all_entries: Callable[[], Sequence[VaultEntry]]
    headings_for: Callable[[VaultEntry], Sequence[HeadingRecord] | None]
    storage: object
    events: object | None = None
    register_cleanup: Callable[[Callable[[], None]], None] | None = None


__all__ = [
    "EVENT_FILE_OPEN",
    "EVENT_ACTIVE_LEAF_CHANGE",
    "EVENT_EDITOR_CHANGE",
    "EVENT_CREATE",
    "SYNC_EVENTS",
    "CursorPosition",
    "EditorState",
    "HostBindings",
]
