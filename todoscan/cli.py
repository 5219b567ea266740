from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from rich.console import Console

from .console import RichLogger
from .markers import DEFAULT_MARKERS, collect_markers
from .report import print_summary_table, write_json, write_report
from .scanner import Scanner
from .syntax import normalize_extension
from .tracker import CommentTracker
from .walker import DEFAULT_EXTENSIONS, DEFAULT_SKIP_DIRS, ScanError

EXTENSIONS_ENV = "TODOSCAN_EXTENSIONS"


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="todoscan",
        description=(
            "Scan source files in the given tree for TODO-like comments and print "
            "all such comments, grouped by the TODO-like label (e.g., TODO-security)."
        ),
    )
    ap.add_argument("root", help="Root of the file tree to scan.")
    ap.add_argument(
        "--ext",
        action="append",
        help=f"File extension to scan (repeatable, default: .rs or ${EXTENSIONS_ENV}).",
    )
    ap.add_argument(
        "--skip-dir",
        action="append",
        help="Directory name to skip directly below the root (repeatable, default: target).",
    )
    ap.add_argument(
        "--marker",
        action="append",
        help="Marker prefix to look for (repeatable, default: TODO, FIXME, XXX).",
    )
    ap.add_argument(
        "--keep-going",
        action="store_true",
        help="Warn about unreadable files and continue instead of aborting.",
    )
    ap.add_argument("--json", type=Path, help="Also write grouped findings to this JSON file.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Verbose debug logs")
    return ap


def _split_list(values: Iterable[str]) -> List[str]:
    items: List[str] = []
    for raw in values:
        items.extend(part.strip() for part in raw.split(",") if part.strip())
    return items


def _resolve_extensions(explicit: Optional[Sequence[str]]) -> List[str]:
    if explicit:
        raw = _split_list(explicit)
    else:
        raw = _split_list([os.environ.get(EXTENSIONS_ENV, "")])
    extensions = [ext for ext in (normalize_extension(value) for value in raw) if ext]
    return extensions or list(DEFAULT_EXTENSIONS)


def run_scan(args) -> int:
    logger = RichLogger(console=Console(stderr=True), verbose=args.verbose)

    extensions = _resolve_extensions(args.ext)
    skip_dirs = _split_list(args.skip_dir) if args.skip_dir else list(DEFAULT_SKIP_DIRS)
    markers = collect_markers(_split_list(args.marker)) if args.marker else list(DEFAULT_MARKERS)
    if not markers:
        logger.error("No valid markers to look for.")
        return 2

    logger.debug(f"Extensions: {', '.join(extensions)}")
    logger.debug(f"Markers: {', '.join(markers)}")

    tracker = CommentTracker()
    scanner = Scanner(tracker, logger, markers=markers, keep_going=args.keep_going)
    try:
        stats = scanner.scan_tree(Path(args.root), extensions=extensions, skip_dirs=skip_dirs)
    except ScanError as exc:
        logger.error(str(exc))
        return 2

    summary = tracker.summary()
    if args.verbose:
        logger.debug(
            f"Scanned {stats['files']} files, {stats['comments']} comments, "
            f"{summary['distinct_comments']} with markers, skipped {stats['files_skipped']} files"
        )
        print_summary_table(tracker.snapshot(), logger.console)

    write_report(tracker.snapshot(), sys.stdout)

    done_msg = f"{summary['total']} findings in {stats['files']} files"
    if logger.warnings:
        done_msg += f" ({logger.warnings} warnings)"
    logger.done(done_msg)

    if args.json:
        try:
            write_json(tracker.snapshot(), args.json, logger)
        except OSError as exc:
            logger.error(f"Failed to write {args.json}: {exc}")
            return 2

    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    return run_scan(args)
