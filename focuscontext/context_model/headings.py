"""Resolve which headings enclose a cursor line."""

from __future__ import annotations

from collections.abc import Iterable

from .types import HeadingRecord


def resolve_heading_path(
    headings: Iterable[HeadingRecord] | None,
    cursor_line: int | None,
) -> tuple[str, ...] | None:
    """Return titles of headings enclosing ``cursor_line``, outermost first.

    ``headings`` must be ordered by document position. A heading closes every
    open section of the same or deeper level. Returns ``None`` when there is
    no cursor and ``()`` when no heading starts at or before the cursor.
    """
    if cursor_line is None:
        return None
    stack: list[HeadingRecord] = []
    for heading in headings or ():
        if heading.start_line > cursor_line:
            break
        while stack and stack[-1].level >= heading.level:
            stack.pop()
        stack.append(heading)
    return tuple(heading.title for heading in stack)


__all__ = ["resolve_heading_path"]
