"""Depth- and size-bounded folder tree construction.

The tree is accumulated in mutable ``_NodeBuilder`` objects and frozen into
``FolderTreeNode`` values once the flat entry listing has been consumed.
"""

from __future__ import annotations

from collections.abc import Iterable

from .paths import join_logical, relative_segments
from .types import KIND_FILE, KIND_FOLDER, FolderTreeNode, TreeLimits, VaultEntry

MAX_TREE_DEPTH = 2
MAX_TREE_NODES = 200


class _NodeBuilder:
    """Mutable accumulator for one tree node."""

    __slots__ = ("path", "name", "kind", "children", "by_name", "truncated")

    def __init__(self, path: str, name: str, kind: str) -> None:
        self.path = path
        self.name = name
        self.kind = kind
        self.children: list[_NodeBuilder] = []
        self.by_name: dict[str, _NodeBuilder] = {}
        self.truncated = False

    def child(self, name: str) -> "_NodeBuilder | None":
        return self.by_name.get(name)

    def add_child(self, name: str, kind: str) -> "_NodeBuilder":
        node = _NodeBuilder(join_logical(self.path, name), name, kind)
        self.children.append(node)
        self.by_name[name] = node
        return node

    def freeze(self, *, limits: TreeLimits | None = None) -> FolderTreeNode:
        truncated: bool | None
        if limits is not None:
            truncated = self.truncated
        else:
            truncated = True if self.truncated else None
        return FolderTreeNode(
            path=self.path,
            name=self.name,
            kind=self.kind,
            children=tuple(child.freeze() for child in self.children),
            truncated=truncated,
            limits=limits,
        )


def _deepest_existing(root: _NodeBuilder, segments: list[str]) -> _NodeBuilder:
    """Return the deepest already materialized folder along ``segments``."""
    cursor = root
    for segment in segments:
        child = cursor.child(segment)
        if child is None or child.kind != KIND_FOLDER:
            break
        cursor = child
    return cursor


def build_folder_tree(
    root: VaultEntry,
    entries: Iterable[VaultEntry],
    *,
    max_depth: int = MAX_TREE_DEPTH,
    max_nodes: int = MAX_TREE_NODES,
) -> FolderTreeNode:
    """Build a bounded tree of ``root``'s descendants from a flat listing.

    Entries may come in any order, including children before their parent
    folder. Entries more than ``max_depth + 1`` segments below ``root`` are not
    materialized; their deepest materialized ancestor and the root are marked
    truncated. Node creation stops once ``max_nodes`` nodes (root included)
    exist, and the root is marked truncated.
    """
    max_depth = max(1, int(max_depth))
    max_nodes = max(1, int(max_nodes))
    limits = TreeLimits(max_depth=max_depth, max_nodes=max_nodes)
    root_node = _NodeBuilder(root.path, root.name, KIND_FOLDER)
    nodes = 1
    budget_exhausted = nodes >= max_nodes

    for entry in entries:
        if budget_exhausted:
            break
        segments = relative_segments(root.path, entry.path)
        if segments is None:
            continue
        if len(segments) > max_depth + 1:
            root_node.truncated = True
            _deepest_existing(root_node, segments[: max_depth + 1]).truncated = True
            continue

        cursor = root_node
        last = len(segments) - 1
        for idx, segment in enumerate(segments):
            at_leaf = idx == last
            child = cursor.child(segment)
            if child is None:
                kind = (KIND_FOLDER if entry.is_folder else KIND_FILE) if at_leaf else KIND_FOLDER
                child = cursor.add_child(segment, kind)
                nodes += 1
                if nodes >= max_nodes:
                    budget_exhausted = True
                    break
            if at_leaf:
                break
            if child.kind != KIND_FOLDER:
                break
            cursor = child

    if budget_exhausted:
        root_node.truncated = True
    return root_node.freeze(limits=limits)


def count_nodes(node: FolderTreeNode) -> int:
    """Count nodes in ``node``'s subtree, ``node`` included."""
    return 1 + sum(count_nodes(child) for child in node.children)


def tree_depth(node: FolderTreeNode) -> int:
    """Return the number of levels below ``node`` (0 for a leaf)."""
    if not node.children:
        return 0
    return 1 + max(tree_depth(child) for child in node.children)


__all__ = [
    "MAX_TREE_DEPTH",
    "MAX_TREE_NODES",
    "build_folder_tree",
    "count_nodes",
    "tree_depth",
]
