"""Markdown heading extraction backed by the Pygments Markdown lexer.

Provides the heading index for filesystem-backed hierarchies, with a small
metadata-keyed cache so unchanged documents are not re-lexed on every tick.
"""

from __future__ import annotations

import logging
import re
import threading
from collections import OrderedDict
from collections.abc import Callable
from pathlib import Path

from ..context_model.types import HeadingRecord

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = (".md", ".markdown")
HEADING_CACHE_MAX = 512
HEADING_MAX_FILE_BYTES = 4 * 1024 * 1024

_ATX_RE = re.compile(r"^(#{1,6})(?:[ \t]+(.*?))?[ \t]*$")
_ATX_CLOSING_RE = re.compile(r"(?:^|[ \t]+)#+$")
_UNDERLINE_RE = re.compile(r"^[ \t]*(?:=+|-+)[ \t]*$")
_FRONT_MATTER_END = ("---", "...")
_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})(.*)$")
_BLOCK_START_RE = re.compile(r"^ {0,3}(?:>|#{1,6}(?:[ \t]|$)|[-*+][ \t]|\d{1,9}[.)][ \t])")

_LEXER = None
_LEXER_LOCK = threading.Lock()


def _markdown_lexer():
    """Create the shared Markdown lexer on first use."""
    global _LEXER
    with _LEXER_LOCK:
        if _LEXER is None:
            from pygments.lexers.markup import MarkdownLexer

            _LEXER = MarkdownLexer(handlecodeblocks=False)
        return _LEXER


def _blank_front_matter(lines: list[str]) -> list[str]:
    """Replace a leading YAML front-matter block with empty lines."""
    if not lines or lines[0].strip() != "---":
        return lines
    for idx in range(1, len(lines)):
        if lines[idx].strip() in _FRONT_MATTER_END:
            return [""] * (idx + 1) + lines[idx + 1 :]
    return lines


def _blank_fenced_code(lines: list[str]) -> list[str]:
    """Replace fenced code blocks, fences included, with empty lines.

    A fence closes only on a line of the same character that is at least as
    long as the opener. An unclosed fence runs to the end of the document.
    """
    out: list[str] = []
    fence: tuple[str, int] | None = None
    for line in lines:
        match = _FENCE_RE.match(line)
        if fence is None:
            if match is None:
                out.append(line)
                continue
            marker, info = match.group(1), match.group(2)
            if marker[0] == "`" and "`" in info:
                out.append(line)
                continue
            fence = (marker[0], len(marker))
            out.append("")
            continue
        out.append("")
        if match is None or match.group(2).strip():
            continue
        marker = match.group(1)
        if marker[0] == fence[0] and len(marker) >= fence[1]:
            fence = None
    return out


def _paragraph_start(lines: list[str], line: int) -> int:
    """Return the first line of the paragraph that ends at ``line``."""
    start = line
    while start > 0:
        previous = lines[start - 1]
        if not previous.strip() or _UNDERLINE_RE.match(previous) or _BLOCK_START_RE.match(previous):
            break
        start -= 1
    return start


def _atx_heading(value: str) -> tuple[int, str] | None:
    match = _ATX_RE.match(value.strip("\n"))
    if match is None:
        return None
    title = _ATX_CLOSING_RE.sub("", match.group(2) or "").strip()
    return len(match.group(1)), title


def extract_headings(text: str) -> tuple[HeadingRecord, ...]:
    """Return headings of a Markdown document in document order.

    Both ``#``-prefixed and underlined headings are recognized. An underlined
    heading spans its whole paragraph, joined with spaces, and starts on the
    paragraph's first line. Lines inside fenced code blocks (backtick or tilde,
    closed or not) and a leading front-matter block are ignored.
    ``start_line`` is zero-based.
    """
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    lines = _blank_fenced_code(_blank_front_matter(lines))
    source = "\n".join(lines)
    if not source.endswith("\n"):
        source += "\n"

    from pygments.token import Generic

    headings: list[HeadingRecord] = []
    line = 0
    scanned = 0
    for index, token_type, value in _markdown_lexer().get_tokens_unprocessed(source):
        if token_type not in (Generic.Heading, Generic.Subheading):
            continue
        line += source.count("\n", scanned, index)
        scanned = index
        if value.startswith("#"):
            parsed = _atx_heading(value)
            if parsed is None:
                continue
            level, title = parsed
        elif _UNDERLINE_RE.match(value):
            continue
        else:
            level = 1 if token_type is Generic.Heading else 2
            start = _paragraph_start(lines, line)
            title = " ".join(part.strip() for part in lines[start:line] + [value]).strip()
            if title:
                headings.append(HeadingRecord(level=level, title=title, start_line=start))
            continue
        if title:
            headings.append(HeadingRecord(level=level, title=title, start_line=line))
    return tuple(headings)


def is_markdown_path(path: str | Path) -> bool:
    return str(path).lower().endswith(MARKDOWN_SUFFIXES)


class MarkdownHeadingIndex:
    """Heading lookup for documents on disk, cached by ``(path, mtime, size)``."""

    def __init__(
        self,
        resolve_path: Callable[[str], Path],
        *,
        max_entries: int = HEADING_CACHE_MAX,
    ) -> None:
        self._resolve_path = resolve_path
        self._max_entries = max(1, max_entries)
        self._cache: OrderedDict[tuple[str, int, int], tuple[HeadingRecord, ...]] = OrderedDict()
        self._lock = threading.RLock()

    def headings_for(self, logical_path: str) -> tuple[HeadingRecord, ...] | None:
        """Return headings for ``logical_path`` or ``None`` if it cannot be read.

        Non-Markdown documents have no headings.
        """
        if not is_markdown_path(logical_path):
            return ()
        path = self._resolve_path(logical_path)
        try:
            stat = path.stat()
        except OSError:
            return None
        if stat.st_size > HEADING_MAX_FILE_BYTES:
            logger.debug("skipping headings for oversized document %s", path)
            return ()
        key = (str(path), int(stat.st_mtime_ns), int(stat.st_size))
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                self._cache.move_to_end(key)
                return cached

        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.debug("could not read %s for headings: %s", path, exc)
            return None
        headings = extract_headings(text)

        with self._lock:
            self._cache[key] = headings
            self._cache.move_to_end(key)
            while len(self._cache) > self._max_entries:
                self._cache.popitem(last=False)
        return headings


__all__ = [
    "MARKDOWN_SUFFIXES",
    "extract_headings",
    "is_markdown_path",
    "MarkdownHeadingIndex",
]
