"""Command-line front door for focuscontext.

Resolves a directory-backed hierarchy plus an optional focused document or
folder, then writes (or prints) one focus snapshot, or keeps it in sync.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path

from .config import CONFIG_PATH, SyncSettings, load_sync_settings, save_sync_settings
from .context_model.serialize import serialize_snapshot
from .context_model.types import VaultEntry
from .host.events import EventHub
from .host.fs import FileSystemVault
from .host.types import CursorPosition, EditorState, HostBindings
from .log import configure_logging
from .sync.assembler import ResolutionCache, assemble_snapshot
from .sync.scheduler import ManualScheduler
from .sync.synchronizer import ContextSynchronizer

logger = logging.getLogger(__name__)


def _nonnegative_int(value: str) -> int:
    """argparse type for zero-based line/column values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def _resolve_entry(vault: FileSystemVault, raw: str) -> VaultEntry | None:
    """Resolve ``raw`` as a path below the root, then as a filesystem path."""
    entry = vault.entry_for(raw)
    if entry is not None:
        return entry
    return vault.entry_for_absolute(Path(raw))


def build_bindings(
    vault: FileSystemVault,
    *,
    document: VaultEntry | None,
    folder: VaultEntry | None,
    cursor: CursorPosition | None,
    selection: str,
    events: EventHub | None = None,
) -> HostBindings:
    """Expose a fixed focus over ``vault`` as host bindings."""
    editor = EditorState(
        document=document,
        cursor=cursor,
        has_selection=bool(selection),
        selection=selection,
    )
    explorer = (folder,) if folder is not None else ()
    return HostBindings(
        active_editor=lambda: editor if document is not None else None,
        active_document=lambda: document,
        explorer_selection=lambda: explorer,
        all_entries=vault.all_entries,
        headings_for=vault.headings_for,
        storage=vault.adapter,
        events=events,
    )


def _run_watch(bindings: HostBindings, settings: SyncSettings) -> None:
    synchronizer = ContextSynchronizer(bindings, settings)
    synchronizer.start()
    logger.info("keeping %s in sync; press Ctrl-C to stop", settings.context_path)
    try:
        while True:
            time.sleep(settings.interval_seconds)
    except KeyboardInterrupt:
        pass
    finally:
        synchronizer.stop()


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments and write, print, or watch the focus snapshot."""
    parser = argparse.ArgumentParser(
        description="Write a JSON snapshot of the current editing focus inside a directory."
    )
    parser.add_argument("root", help="Directory acting as the hierarchy root.")
    parser.add_argument("--file", help="Focused document (relative to root or a filesystem path).")
    parser.add_argument("--folder", help="Focused folder when no document is given.")
    parser.add_argument("--line", type=_nonnegative_int, default=None, help="Zero-based cursor line.")
    parser.add_argument("--column", type=_nonnegative_int, default=None, help="Zero-based cursor column.")
    parser.add_argument("--selection-file", help="Read the current selection text from this file.")
    parser.add_argument("--output", help="Snapshot path relative to root (default from config).")
    parser.add_argument("--config", default=None, help=f"Config file (default: {CONFIG_PATH}).")
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the effective settings, including --output, to the config file.",
    )
    parser.add_argument("--show-hidden", action="store_true", help="Include dot-files in the folder tree.")
    parser.add_argument("--print", dest="print_only", action="store_true", help="Print the snapshot instead of writing it.")
    parser.add_argument("--watch", action="store_true", help="Keep the snapshot in sync until interrupted.")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors.")
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    args = parser.parse_args(argv)

    configure_logging(quiet=args.quiet, verbose=args.verbose)

    if args.print_only and args.watch:
        raise SystemExit("Cannot combine --print with --watch.")

    root = Path(args.root)
    if not root.is_dir():
        raise SystemExit(f"Directory not found: {root}")

    config_path = Path(args.config) if args.config else None
    settings = load_sync_settings(config_path)
    if args.output:
        output = args.output.strip().strip("/")
        if not output or ".." in output.split("/"):
            raise SystemExit(f"Invalid output path: {args.output}")
        settings = replace(settings, context_path=output)
    if args.save_config:
        save_sync_settings(settings, config_path)
        logger.info("saved settings to %s", config_path or CONFIG_PATH)

    vault = FileSystemVault(root, show_hidden=args.show_hidden)
    document = None
    if args.file:
        document = _resolve_entry(vault, args.file)
        if document is None or document.is_folder:
            raise SystemExit(f"Document not found under {root}: {args.file}")
    folder = None
    if args.folder:
        folder = _resolve_entry(vault, args.folder)
        if folder is None or not folder.is_folder:
            raise SystemExit(f"Folder not found under {root}: {args.folder}")

    cursor = None
    if document is not None and (args.line is not None or args.column is not None):
        cursor = CursorPosition(line=args.line or 0, column=args.column or 0)
    selection = ""
    if args.selection_file:
        try:
            selection = Path(args.selection_file).read_text(encoding="utf-8")
        except OSError as exc:
            raise SystemExit(f"Cannot read selection file: {exc}") from exc

    if document is None and folder is None:
        folder = vault.root_entry

    bindings = build_bindings(
        vault,
        document=document,
        folder=folder,
        cursor=cursor,
        selection=selection,
        events=EventHub() if args.watch else None,
    )

    if args.watch:
        _run_watch(bindings, settings)
        return 0

    if args.print_only:
        result = assemble_snapshot(bindings, ResolutionCache(), settings=settings)
        if result.snapshot is None:
            return 1
        sys.stdout.write(serialize_snapshot(result.snapshot, indent=settings.json_indent))
        return 0

    synchronizer = ContextSynchronizer(bindings, settings, scheduler=ManualScheduler())
    if not synchronizer.sync_once():
        logger.error("could not write %s", vault.adapter.full_path(settings.context_path))
        return 1
    logger.info("wrote %s", vault.adapter.full_path(settings.context_path))
    return 0


__all__ = ["build_bindings", "main"]
