"""Ancestor-chain breadcrumbs for folders."""

from __future__ import annotations

from .types import BreadcrumbEntry, VaultEntry


def build_breadcrumb(folder: VaultEntry) -> tuple[BreadcrumbEntry, ...]:
    """Return ``folder``'s ancestors from the hierarchy root down to ``folder``."""
    parts: list[BreadcrumbEntry] = []
    current: VaultEntry | None = folder
    while current is not None:
        parts.append(BreadcrumbEntry(path=current.path, name=current.name))
        current = current.parent
    parts.reverse()
    return tuple(parts)


__all__ = ["build_breadcrumb"]
