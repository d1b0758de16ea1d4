"""Pure domain model for focus snapshots.

This package contains no host or I/O code:
- snapshot, tree, breadcrumb and heading datatypes
- logical-path helpers
- bounded folder-tree, breadcrumb and heading-path builders
- JSON serialization and content fingerprints
"""

from __future__ import annotations

from .types import (
    KIND_FILE,
    KIND_FOLDER,
    BreadcrumbEntry,
    FolderTreeNode,
    HeadingRecord,
    Snapshot,
    TreeLimits,
    VaultEntry,
)
from .paths import ROOT_PATH, is_root_path, join_logical, relative_segments, storage_path
from .breadcrumb import build_breadcrumb
from .headings import resolve_heading_path
from .tree import MAX_TREE_DEPTH, MAX_TREE_NODES, build_folder_tree, count_nodes, tree_depth
from .serialize import (
    content_fingerprint,
    format_timestamp,
    serialize_snapshot,
    snapshot_fingerprint,
    snapshot_to_dict,
    tree_to_dict,
)

__all__ = [
    "KIND_FILE",
    "KIND_FOLDER",
    "BreadcrumbEntry",
    "FolderTreeNode",
    "HeadingRecord",
    "Snapshot",
    "TreeLimits",
    "VaultEntry",
    "ROOT_PATH",
    "is_root_path",
    "join_logical",
    "relative_segments",
    "storage_path",
    "build_breadcrumb",
    "resolve_heading_path",
    "MAX_TREE_DEPTH",
    "MAX_TREE_NODES",
    "build_folder_tree",
    "count_nodes",
    "tree_depth",
    "content_fingerprint",
    "format_timestamp",
    "serialize_snapshot",
    "snapshot_fingerprint",
    "snapshot_to_dict",
    "tree_to_dict",
]
