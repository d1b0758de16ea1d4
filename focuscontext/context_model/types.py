"""Domain datatypes for focus snapshots and the hierarchy they describe."""

from __future__ import annotations

from dataclasses import dataclass

KIND_FILE = "file"
KIND_FOLDER = "folder"


@dataclass(frozen=True)
class VaultEntry:
    """One document or folder of the managed hierarchy.

    ``path`` is the logical POSIX path relative to the hierarchy root; the root
    folder itself uses ``"/"`` with an empty ``name`` and no ``parent``.
    """

    path: str
    name: str
    is_folder: bool
    parent: "VaultEntry | None" = None


@dataclass(frozen=True)
class HeadingRecord:
    """Heading reported by the metadata index, ordered by document position."""

    level: int
    title: str
    start_line: int


@dataclass(frozen=True)
class BreadcrumbEntry:
    path: str
    name: str


@dataclass(frozen=True)
class TreeLimits:
    """Depth/node budgets recorded on the root of a bounded folder tree."""

    max_depth: int
    max_nodes: int


@dataclass(frozen=True)
class FolderTreeNode:
    """Immutable node of a bounded folder tree.

    ``truncated`` is ``None`` when the node makes no claim (interior nodes whose
    subtree is complete). ``limits`` is only set on the root.
    """

    path: str
    name: str
    kind: str
    children: tuple["FolderTreeNode", ...] = ()
    truncated: bool | None = None
    limits: TreeLimits | None = None


@dataclass(frozen=True)
class Snapshot:
    """Description of the current editing focus, persisted as one JSON object."""

    active_document_path: str | None
    active_folder_path: str | None
    active_document_absolute_path: str | None
    active_folder_absolute_path: str | None
    updated_at: str
    breadcrumb: tuple[BreadcrumbEntry, ...]
    folder_tree: FolderTreeNode | None
    heading_path: tuple[str, ...] | None
    cursor_line: int | None
    cursor_column: int | None
    selection_text: str | None = None


__all__ = [
    "KIND_FILE",
    "KIND_FOLDER",
    "VaultEntry",
    "HeadingRecord",
    "BreadcrumbEntry",
    "TreeLimits",
    "FolderTreeNode",
    "Snapshot",
]
