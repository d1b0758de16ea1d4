"""Tests for snapshot assembly and breadcrumb/tree reuse."""

from __future__ import annotations

import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest import mock

from focuscontext.config import SyncSettings
from focuscontext.context_model import ROOT_PATH, HeadingRecord, VaultEntry
from focuscontext.context_model import breadcrumb as breadcrumb_module
from focuscontext.context_model import tree as tree_module
from focuscontext.host import CursorPosition, EditorState, FileSystemAdapter, HostBindings, MemoryAdapter
from focuscontext.sync.assembler import ResolutionCache, assemble_snapshot

ROOT = VaultEntry(path=ROOT_PATH, name="", is_folder=True)
NOTES = VaultEntry(path="notes", name="notes", is_folder=True, parent=ROOT)
DAILY = VaultEntry(path="notes/daily", name="daily", is_folder=True, parent=NOTES)
DOC = VaultEntry(path="notes/a.md", name="a.md", is_folder=False, parent=NOTES)
OTHER_DOC = VaultEntry(path="notes/b.md", name="b.md", is_folder=False, parent=NOTES)
DAILY_DOC = VaultEntry(path="notes/daily/today.md", name="today.md", is_folder=False, parent=DAILY)
ALL_ENTRIES = (NOTES, DOC, OTHER_DOC, DAILY, DAILY_DOC)
FIXED_NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


class FakeHost:
    """Mutable host state exposed through ``HostBindings``."""

    def __init__(self, storage=None) -> None:
        self.editor: EditorState | None = None
        self.active: VaultEntry | None = None
        self.selection: tuple[VaultEntry, ...] = ()
        self.entries = ALL_ENTRIES
        self.headings: dict[str, tuple[HeadingRecord, ...]] = {}
        self.storage = storage if storage is not None else MemoryAdapter()

    def bindings(self) -> HostBindings:
        return HostBindings(
            active_editor=lambda: self.editor,
            active_document=lambda: self.active,
            explorer_selection=lambda: self.selection,
            all_entries=lambda: self.entries,
            headings_for=lambda entry: self.headings.get(entry.path),
            storage=self.storage,
        )


def _assemble(host: FakeHost, cache: ResolutionCache | None = None, settings: SyncSettings | None = None):
    return assemble_snapshot(
        host.bindings(),
        cache or ResolutionCache(),
        settings=settings or SyncSettings(),
        now=lambda: FIXED_NOW,
    )


class AssembleSnapshotTests(unittest.TestCase):
    def test_no_document_and_no_folder_yields_no_snapshot(self) -> None:
        host = FakeHost()
        cache = ResolutionCache(last_folder_path="x")

        result = _assemble(host, cache)

        self.assertIsNone(result.snapshot)
        self.assertIs(result.cache, cache)

    def test_editor_document_with_cursor_and_headings(self) -> None:
        host = FakeHost()
        host.editor = EditorState(document=DOC, cursor=CursorPosition(line=7, column=2))
        host.headings[DOC.path] = (
            HeadingRecord(1, "A", 0),
            HeadingRecord(2, "B", 5),
            HeadingRecord(1, "C", 10),
        )

        snapshot = _assemble(host).snapshot

        self.assertIsNotNone(snapshot)
        self.assertEqual(snapshot.active_document_path, "notes/a.md")
        self.assertEqual(snapshot.active_folder_path, "notes")
        self.assertEqual([entry.path for entry in snapshot.breadcrumb], [ROOT_PATH, "notes"])
        self.assertEqual(snapshot.folder_tree.path, "notes")
        self.assertEqual(snapshot.heading_path, ("A", "B"))
        self.assertEqual((snapshot.cursor_line, snapshot.cursor_column), (7, 2))
        self.assertEqual(snapshot.updated_at, "2026-10-18T12:00:00.000Z")
        self.assertIsNone(snapshot.selection_text)
        self.assertIsNone(snapshot.active_document_absolute_path)

    def test_editor_document_wins_over_generic_active_document(self) -> None:
        host = FakeHost()
        host.editor = EditorState(document=DAILY_DOC, cursor=CursorPosition(0, 0))
        host.active = OTHER_DOC

        snapshot = _assemble(host).snapshot

        self.assertEqual(snapshot.active_document_path, DAILY_DOC.path)
        self.assertEqual(snapshot.active_folder_path, DAILY.path)

    def test_active_document_without_editor_has_no_cursor_or_headings(self) -> None:
        host = FakeHost()
        host.active = OTHER_DOC

        snapshot = _assemble(host).snapshot

        self.assertEqual(snapshot.active_document_path, OTHER_DOC.path)
        self.assertIsNone(snapshot.cursor_line)
        self.assertIsNone(snapshot.cursor_column)
        self.assertIsNone(snapshot.heading_path)

    def test_missing_heading_index_resolves_to_empty_path(self) -> None:
        host = FakeHost()
        host.editor = EditorState(document=DOC, cursor=CursorPosition(3, 0))

        self.assertEqual(_assemble(host).snapshot.heading_path, ())

    def test_explorer_selection_prefers_folder_then_document_parent(self) -> None:
        host = FakeHost()
        host.selection = (DOC, DAILY)
        snapshot = _assemble(host).snapshot
        self.assertIsNone(snapshot.active_document_path)
        self.assertEqual(snapshot.active_folder_path, DAILY.path)
        self.assertIsNone(snapshot.heading_path)

        host.selection = (DAILY_DOC,)
        self.assertEqual(_assemble(host).snapshot.active_folder_path, DAILY.path)

    def test_selection_is_clipped_to_configured_maximum(self) -> None:
        host = FakeHost()
        host.editor = EditorState(document=DOC, cursor=CursorPosition(0, 0), has_selection=True, selection="x" * 50)

        snapshot = _assemble(host, settings=SyncSettings(max_selection_length=20)).snapshot
        self.assertEqual(snapshot.selection_text, "x" * 20)

        host.editor = EditorState(document=DOC, cursor=CursorPosition(0, 0), has_selection=False, selection="ignored")
        self.assertIsNone(_assemble(host).snapshot.selection_text)

    def test_same_folder_reuses_cached_breadcrumb_and_tree(self) -> None:
        host = FakeHost()
        host.editor = EditorState(document=DOC, cursor=CursorPosition(0, 0))

        with mock.patch(
            "focuscontext.sync.assembler.build_folder_tree",
            wraps=tree_module.build_folder_tree,
        ) as build_tree, mock.patch(
            "focuscontext.sync.assembler.build_breadcrumb",
            wraps=breadcrumb_module.build_breadcrumb,
        ) as build_crumbs:
            first = _assemble(host)
            host.editor = EditorState(document=OTHER_DOC, cursor=CursorPosition(4, 1))
            host.entries = ALL_ENTRIES + (VaultEntry("notes/new.md", "new.md", False, NOTES),)
            second = _assemble(host, first.cache)

        self.assertEqual(build_tree.call_count, 1)
        self.assertEqual(build_crumbs.call_count, 1)
        self.assertEqual(second.snapshot.breadcrumb, first.snapshot.breadcrumb)
        self.assertIs(second.snapshot.folder_tree, first.snapshot.folder_tree)
        self.assertNotIn("notes/new.md", [child.path for child in second.snapshot.folder_tree.children])

    def test_folder_change_rebuilds_and_updates_cache(self) -> None:
        host = FakeHost()
        host.editor = EditorState(document=DOC, cursor=CursorPosition(0, 0))
        first = _assemble(host)

        host.editor = EditorState(document=DAILY_DOC, cursor=CursorPosition(0, 0))
        second = _assemble(host, first.cache)

        self.assertEqual(first.cache.last_folder_path, "notes")
        self.assertEqual(second.cache.last_folder_path, "notes/daily")
        self.assertEqual(second.snapshot.folder_tree.path, "notes/daily")
        self.assertEqual(second.cache.last_folder_tree, second.snapshot.folder_tree)

    def test_absolute_paths_only_for_filesystem_storage(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            host = FakeHost(storage=FileSystemAdapter(root))
            host.active = DOC

            snapshot = _assemble(host).snapshot

            self.assertEqual(snapshot.active_document_absolute_path, str(root / "notes" / "a.md"))
            self.assertEqual(snapshot.active_folder_absolute_path, str(root / "notes"))


if __name__ == "__main__":
    unittest.main()
