"""Logical-path helpers for the managed hierarchy.

Logical paths are POSIX strings relative to the hierarchy root. The root
itself is ``"/"``; everything else has no leading or trailing slash.
"""

from __future__ import annotations

ROOT_PATH = "/"


def is_root_path(path: str) -> bool:
    """Return whether ``path`` names the hierarchy root."""
    return path in ("", ROOT_PATH)


def join_logical(parent_path: str, name: str) -> str:
    """Join one child ``name`` under ``parent_path``."""
    if is_root_path(parent_path):
        return name
    return f"{parent_path}/{name}"


def relative_segments(root_path: str, path: str) -> list[str] | None:
    """Split ``path`` into segments below ``root_path``.

    Returns ``None`` when ``path`` is not a strict descendant of ``root_path``.
    The prefix test is segment-aware, so ``notes`` does not contain
    ``notes-archive/a.md``.
    """
    if is_root_path(root_path):
        rel = path.strip("/")
    else:
        prefix = root_path.rstrip("/") + "/"
        if not path.startswith(prefix):
            return None
        rel = path[len(prefix) :].strip("/")
    if not rel:
        return None
    return [segment for segment in rel.split("/") if segment]


def storage_path(path: str) -> str:
    """Normalize a logical path for storage adapters (no leading slash)."""
    return path.lstrip("/")


__all__ = [
    "ROOT_PATH",
    "is_root_path",
    "join_logical",
    "relative_segments",
    "storage_path",
]
