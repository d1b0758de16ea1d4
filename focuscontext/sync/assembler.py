"""Assemble focus snapshots from host state with breadcrumb/tree reuse."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from ..config import SyncSettings
from ..context_model.breadcrumb import build_breadcrumb
from ..context_model.headings import resolve_heading_path
from ..context_model.serialize import format_timestamp
from ..context_model.tree import build_folder_tree
from ..context_model.types import BreadcrumbEntry, FolderTreeNode, Snapshot, VaultEntry
from ..host.fs import FileSystemAdapter
from ..host.types import CursorPosition, EditorState, HostBindings


@dataclass(frozen=True)
class ResolutionCache:
    """Breadcrumb and tree computed for the last resolved folder."""

    last_folder_path: str | None = None
    last_breadcrumb: tuple[BreadcrumbEntry, ...] = ()
    last_folder_tree: FolderTreeNode | None = None


@dataclass(frozen=True)
class FocusTarget:
    """Resolved host focus before any derived structure is computed."""

    document: VaultEntry | None
    folder: VaultEntry | None
    cursor: CursorPosition | None
    selection_text: str | None


@dataclass(frozen=True)
class AssemblyResult:
    snapshot: Snapshot | None
    cache: ResolutionCache


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def clip_selection(editor: EditorState | None, max_length: int) -> str | None:
    """Return the editor's selection clipped to ``max_length``, if non-empty."""
    if editor is None or not editor.has_selection:
        return None
    selection = editor.selection or ""
    if not selection:
        return None
    if len(selection) > max_length:
        return selection[: max(0, max_length)]
    return selection


def explorer_folder(selection) -> VaultEntry | None:
    """Pick the folder a browser selection points at.

    The first selected folder wins; otherwise the parent of the first selected
    document.
    """
    items = list(selection or ())
    for item in items:
        if item.is_folder:
            return item
    for item in items:
        if not item.is_folder:
            return item.parent
    return None


def resolve_focus(bindings: HostBindings, settings: SyncSettings) -> FocusTarget:
    """Read the active document, folder, cursor and selection from the host."""
    editor = bindings.active_editor()
    document = editor.document if editor is not None else None
    if document is None:
        document = bindings.active_document()
    cursor = editor.cursor if editor is not None else None
    if document is not None:
        folder = document.parent
    else:
        folder = explorer_folder(bindings.explorer_selection())
    return FocusTarget(
        document=document,
        folder=folder,
        cursor=cursor,
        selection_text=clip_selection(editor, settings.max_selection_length),
    )


def _absolute_path(storage, entry: VaultEntry | None) -> str | None:
    if entry is None or not isinstance(storage, FileSystemAdapter):
        return None
    return storage.full_path(entry.path)


def assemble_snapshot(
    bindings: HostBindings,
    cache: ResolutionCache,
    *,
    settings: SyncSettings,
    now: Callable[[], datetime] | None = None,
) -> AssemblyResult:
    """Build a snapshot of the current focus and the cache for the next call.

    Returns ``snapshot=None`` and the unchanged ``cache`` when neither a
    document nor a folder is active. While the resolved folder path stays the
    same, the cached breadcrumb and tree are reused as-is even if entries
    under the folder changed since.
    """
    focus = resolve_focus(bindings, settings)
    if focus.document is None and focus.folder is None:
        return AssemblyResult(snapshot=None, cache=cache)

    folder = focus.folder
    folder_path = folder.path if folder is not None else None
    if folder is None:
        breadcrumb: tuple[BreadcrumbEntry, ...] = ()
        folder_tree: FolderTreeNode | None = None
    elif folder_path == cache.last_folder_path:
        breadcrumb = cache.last_breadcrumb
        folder_tree = cache.last_folder_tree
    else:
        breadcrumb = build_breadcrumb(folder)
        folder_tree = build_folder_tree(
            folder,
            bindings.all_entries(),
            max_depth=settings.max_tree_depth,
            max_nodes=settings.max_tree_nodes,
        )

    heading_path = None
    if focus.document is not None and focus.cursor is not None:
        heading_path = resolve_heading_path(bindings.headings_for(focus.document), focus.cursor.line)

    moment = (now or _utc_now)()
    snapshot = Snapshot(
        active_document_path=focus.document.path if focus.document is not None else None,
        active_folder_path=folder_path,
        active_document_absolute_path=_absolute_path(bindings.storage, focus.document),
        active_folder_absolute_path=_absolute_path(bindings.storage, folder),
        updated_at=format_timestamp(moment),
        breadcrumb=breadcrumb,
        folder_tree=folder_tree,
        heading_path=heading_path,
        cursor_line=focus.cursor.line if focus.cursor is not None else None,
        cursor_column=focus.cursor.column if focus.cursor is not None else None,
        selection_text=focus.selection_text,
    )
    next_cache = ResolutionCache(
        last_folder_path=folder_path,
        last_breadcrumb=breadcrumb,
        last_folder_tree=folder_tree,
    )
    return AssemblyResult(snapshot=snapshot, cache=next_cache)


__all__ = [
    "ResolutionCache",
    "FocusTarget",
    "AssemblyResult",
    "clip_selection",
    "explorer_folder",
    "resolve_focus",
    "assemble_snapshot",
]
