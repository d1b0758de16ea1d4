"""Host collaborators for the synchronization pipeline.

- ``HostBindings``: the callables through which host state is read
- ``EventHub``: named events for hosts without a dispatcher
- ``MemoryAdapter`` / ``FileSystemAdapter``: storage adapters
- ``FileSystemVault``: directory-backed hierarchy with a Markdown heading index
"""

from __future__ import annotations

from .types import (
    EVENT_ACTIVE_LEAF_CHANGE,
    EVENT_CREATE,
    EVENT_EDITOR_CHANGE,
    EVENT_FILE_OPEN,
    SYNC_EVENTS,
    CursorPosition,
    EditorState,
    HostBindings,
)
from .events import EventHub
from .memory import MemoryAdapter
from .fs import FileSystemAdapter, FileSystemVault
from .markdown import MarkdownHeadingIndex, extract_headings

__all__ = [
    "EVENT_ACTIVE_LEAF_CHANGE",
    "EVENT_CREATE",
    "EVENT_EDITOR_CHANGE",
    "EVENT_FILE_OPEN",
    "SYNC_EVENTS",
    "CursorPosition",
    "EditorState",
    "HostBindings",
    "EventHub",
    "MemoryAdapter",
    "FileSystemAdapter",
    "FileSystemVault",
    "MarkdownHeadingIndex",
    "extract_headings",
]
