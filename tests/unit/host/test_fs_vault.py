"""Tests for the filesystem-backed hierarchy, storage adapter and event hub."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from focuscontext.context_model import ROOT_PATH, HeadingRecord
from focuscontext.host import EventHub, FileSystemAdapter, FileSystemVault, MemoryAdapter


def _make_tree(root: Path) -> None:
    (root / "notes" / "daily").mkdir(parents=True)
    (root / "notes" / "a.md").write_text("# A\n## B\n", encoding="utf-8")
    (root / "notes" / "daily" / "today.md").write_text("today\n", encoding="utf-8")
    (root / "Zeta.txt").write_text("z\n", encoding="utf-8")
    (root / ".hidden").mkdir()
    (root / ".hidden" / "secret.md").write_text("# secret\n", encoding="utf-8")


class FileSystemVaultTests(unittest.TestCase):
    def test_all_entries_lists_visible_entries_parents_first(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _make_tree(root)
            vault = FileSystemVault(root)

            entries = vault.all_entries()
            paths = [entry.path for entry in entries]

            self.assertEqual(paths, ["notes", "Zeta.txt", "notes/daily", "notes/a.md", "notes/daily/today.md"])
            today = entries[4]
            self.assertEqual(today.parent.path, "notes/daily")
            self.assertEqual(today.parent.parent.path, "notes")
            self.assertEqual(today.parent.parent.parent.path, ROOT_PATH)

    def test_show_hidden_includes_dot_entries(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _make_tree(root)
            vault = FileSystemVault(root, show_hidden=True)

            self.assertIn(".hidden/secret.md", [entry.path for entry in vault.all_entries()])

    def test_entry_for_resolves_parent_chain(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _make_tree(root)
            vault = FileSystemVault(root)

            entry = vault.entry_for("notes/daily/today.md")
            self.assertIsNotNone(entry)
            self.assertFalse(entry.is_folder)
            self.assertEqual(entry.parent.path, "notes/daily")
            self.assertTrue(entry.parent.is_folder)
            self.assertIs(vault.entry_for("/"), vault.root_entry)
            self.assertIsNone(vault.entry_for("missing.md"))
            self.assertIsNone(vault.entry_for("../escape"))

            by_absolute = vault.entry_for_absolute(root / "notes" / "a.md")
            self.assertEqual(by_absolute.path, "notes/a.md")
            self.assertIsNone(vault.entry_for_absolute(root.parent))

    def test_headings_for_documents(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _make_tree(root)
            vault = FileSystemVault(root)

            doc = vault.entry_for("notes/a.md")
            self.assertEqual(
                tuple(vault.headings_for(doc)),
                (HeadingRecord(1, "A", 0), HeadingRecord(2, "B", 1)),
            )
            self.assertIsNone(vault.headings_for(vault.entry_for("notes")))


class FileSystemAdapterTests(unittest.TestCase):
    def test_write_read_rename_remove(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            adapter = FileSystemAdapter(root)

            adapter.write("deep/dir/file.json.tmp", "{}\n")
            adapter.rename("deep/dir/file.json.tmp", "deep/dir/file.json")

            self.assertEqual(adapter.read("deep/dir/file.json"), "{}\n")
            self.assertFalse(adapter.exists("deep/dir/file.json.tmp"))
            adapter.remove("deep/dir/file.json")
            with self.assertRaises(FileNotFoundError):
                adapter.remove("deep/dir/file.json")

    def test_paths_outside_root_are_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            adapter = FileSystemAdapter(Path(tmp))
            with self.assertRaises(ValueError):
                adapter.write("../outside.json", "{}")

    def test_full_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            adapter = FileSystemAdapter(root)
            self.assertEqual(adapter.full_path(ROOT_PATH), str(root))
            self.assertEqual(adapter.full_path("notes/a.md"), str(root / "notes" / "a.md"))


class MemoryAdapterTests(unittest.TestCase):
    def test_remove_missing_raises_file_not_found(self) -> None:
        adapter = MemoryAdapter({"/a.json": "x"})
        self.assertEqual(adapter.read("a.json"), "x")
        adapter.remove("a.json")
        with self.assertRaises(FileNotFoundError):
            adapter.remove("a.json")
        self.assertFalse(hasattr(adapter, "rename"))


class EventHubTests(unittest.TestCase):
    def test_emit_reaches_listeners_until_unsubscribed(self) -> None:
        hub = EventHub()
        seen: list[tuple] = []
        unsubscribe = hub.subscribe("file-open", lambda *args: seen.append(args))

        self.assertEqual(hub.emit("file-open", "a.md"), 1)
        unsubscribe()
        self.assertEqual(hub.emit("file-open", "b.md"), 0)

        self.assertEqual(seen, [("a.md",)])

    def test_failing_listener_does_not_block_others(self) -> None:
        hub = EventHub()
        seen: list[int] = []

        def broken(*_args) -> None:
            raise RuntimeError("listener bug")

        hub.subscribe("create", broken)
        hub.subscribe("create", lambda *_args: seen.append(1))
        with self.assertLogs("focuscontext.host.events", level="ERROR"):
            hub.emit("create")

        self.assertEqual(seen, [1])


if __name__ == "__main__":
    unittest.main()
