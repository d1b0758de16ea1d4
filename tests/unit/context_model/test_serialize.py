"""Tests for snapshot JSON shape, timestamps and fingerprints."""

from __future__ import annotations

import json
import unittest
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from focuscontext.context_model import (
    BreadcrumbEntry,
    FolderTreeNode,
    Snapshot,
    TreeLimits,
    format_timestamp,
    serialize_snapshot,
    snapshot_fingerprint,
)


def _snapshot(**overrides) -> Snapshot:
    base = Snapshot(
        active_document_path="notes/a.md",
        active_folder_path="notes",
        active_document_absolute_path=None,
        active_folder_absolute_path=None,
        updated_at="2026-01-02T03:04:05.678Z",
        breadcrumb=(BreadcrumbEntry("/", ""), BreadcrumbEntry("notes", "notes")),
        folder_tree=FolderTreeNode(
            path="notes",
            name="notes",
            kind="folder",
            children=(FolderTreeNode(path="notes/a.md", name="a.md", kind="file"),),
            truncated=False,
            limits=TreeLimits(max_depth=2, max_nodes=200),
        ),
        heading_path=("Intro",),
        cursor_line=3,
        cursor_column=1,
    )
    return replace(base, **overrides)


class SerializeSnapshotTests(unittest.TestCase):
    def test_serialized_fields_and_order(self) -> None:
        text = serialize_snapshot(_snapshot())
        payload = json.loads(text)

        self.assertEqual(
            list(payload),
            [
                "activeDocumentPath",
                "activeFolderPath",
                "activeDocumentAbsolutePath",
                "activeFolderAbsolutePath",
                "updatedAt",
                "breadcrumb",
                "folderTree",
                "headingPath",
                "cursorLine",
                "cursorColumn",
            ],
        )
        self.assertEqual(payload["breadcrumb"][1], {"path": "notes", "name": "notes"})
        self.assertEqual(payload["folderTree"]["children"][0], {"path": "notes/a.md", "name": "a.md", "kind": "file"})
        self.assertEqual(payload["headingPath"], ["Intro"])
        self.assertTrue(text.endswith("}\n"))
        self.assertIn('\n  "activeDocumentPath"', text)

    def test_selection_text_only_present_when_non_empty(self) -> None:
        self.assertNotIn("selectionText", json.loads(serialize_snapshot(_snapshot(selection_text=""))))
        payload = json.loads(serialize_snapshot(_snapshot(selection_text="chosen")))
        self.assertEqual(payload["selectionText"], "chosen")

    def test_fingerprint_ignores_timestamp_but_tracks_content(self) -> None:
        first = _snapshot()
        later = _snapshot(updated_at="2026-01-02T03:04:09.000Z")
        moved = _snapshot(cursor_line=4)

        self.assertEqual(snapshot_fingerprint(first), snapshot_fingerprint(later))
        self.assertNotEqual(snapshot_fingerprint(first), snapshot_fingerprint(moved))


class FormatTimestampTests(unittest.TestCase):
    def test_utc_millisecond_precision_with_z_suffix(self) -> None:
        moment = datetime(2026, 10, 18, 9, 30, 15, 123456, tzinfo=timezone.utc)
        self.assertEqual(format_timestamp(moment), "2026-10-18T09:30:15.123Z")

    def test_offsets_are_converted_to_utc(self) -> None:
        moment = datetime(2026, 10, 18, 11, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        self.assertEqual(format_timestamp(moment), "2026-10-18T09:00:00.000Z")


if __name__ == "__main__":
    unittest.main()
