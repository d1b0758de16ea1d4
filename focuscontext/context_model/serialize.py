"""JSON shape and content fingerprints for snapshots."""

from __future__ import annotations

import hashlib
import json
from datetime import datetime, timezone

from .types import BreadcrumbEntry, FolderTreeNode, Snapshot

JSON_INDENT = 2


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as ISO-8601 UTC with millisecond precision and ``Z``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def tree_to_dict(node: FolderTreeNode) -> dict[str, object]:
    """Convert a tree node to its compact JSON object form."""
    out: dict[str, object] = {
        "path": node.path,
        "name": node.name,
        "kind": node.kind,
    }
    if node.children:
        out["children"] = [tree_to_dict(child) for child in node.children]
    if node.truncated is not None:
        out["truncated"] = node.truncated
    if node.limits is not None:
        out["limits"] = {
            "maxDepth": node.limits.max_depth,
            "maxNodes": node.limits.max_nodes,
        }
    return out


def _breadcrumb_to_list(breadcrumb: tuple[BreadcrumbEntry, ...]) -> list[dict[str, str]]:
    return [{"path": entry.path, "name": entry.name} for entry in breadcrumb]


def snapshot_to_dict(snapshot: Snapshot, *, include_timestamp: bool = True) -> dict[str, object]:
    """Convert ``snapshot`` to the persisted JSON object.

    ``selectionText`` is only present for a non-empty selection. With
    ``include_timestamp=False`` the ``updatedAt`` key is omitted, which is the
    form used for fingerprints.
    """
    out: dict[str, object] = {
        "activeDocumentPath": snapshot.active_document_path,
        "activeFolderPath": snapshot.active_folder_path,
        "activeDocumentAbsolutePath": snapshot.active_document_absolute_path,
        "activeFolderAbsolutePath": snapshot.active_folder_absolute_path,
    }
    if include_timestamp:
        out["updatedAt"] = snapshot.updated_at
    out["breadcrumb"] = _breadcrumb_to_list(snapshot.breadcrumb)
    out["folderTree"] = tree_to_dict(snapshot.folder_tree) if snapshot.folder_tree is not None else None
    out["headingPath"] = list(snapshot.heading_path) if snapshot.heading_path is not None else None
    out["cursorLine"] = snapshot.cursor_line
    out["cursorColumn"] = snapshot.cursor_column
    if snapshot.selection_text:
        out["selectionText"] = snapshot.selection_text
    return out


def serialize_snapshot(snapshot: Snapshot, *, indent: int | None = JSON_INDENT) -> str:
    """Serialize ``snapshot`` as pretty-printed JSON with a trailing newline."""
    return json.dumps(snapshot_to_dict(snapshot), indent=indent, ensure_ascii=False) + "\n"


def content_fingerprint(content: str) -> str:
    """Return a stable digest of ``content``."""
    digest = hashlib.blake2b(digest_size=20)
    digest.update(content.encode("utf-8", errors="surrogatepass"))
    return digest.hexdigest()


def snapshot_fingerprint(snapshot: Snapshot) -> str:
    """Fingerprint ``snapshot`` ignoring its assembly timestamp."""
    payload = json.dumps(
        snapshot_to_dict(snapshot, include_timestamp=False),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return content_fingerprint(payload)


__all__ = [
    "JSON_INDENT",
    "format_timestamp",
    "tree_to_dict",
    "snapshot_to_dict",
    "serialize_snapshot",
    "content_fingerprint",
    "snapshot_fingerprint",
]
