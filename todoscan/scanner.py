from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Sequence

from .console import RichLogger
from .lexer import iter_comments
from .markers import DEFAULT_MARKERS, extract_kinds
from .syntax import RUST, CommentSyntax, syntax_for_path
from .tracker import CommentTracker
from .walker import DEFAULT_EXTENSIONS, DEFAULT_SKIP_DIRS, ScanError, SourceFile, iter_source_files


class Scanner:
    def __init__(
        self,
        tracker: CommentTracker,
        logger: RichLogger,
        markers: Sequence[str] = DEFAULT_MARKERS,
        keep_going: bool = False,
    ):
        self.tracker = tracker
        self.logger = logger
        self.markers = tuple(markers)
        self.keep_going = keep_going

    def scan_text(self, text: str, source: str, syntax: CommentSyntax = RUST) -> Dict[str, int]:
        stats = {
            "comments": 0,
            "marked_comments": 0,
            "findings": 0,
        }
        for comment in iter_comments(text, source, syntax):
            stats["comments"] += 1
            kinds = extract_kinds(comment, syntax, self.markers)
            if not kinds:
                continue
            stats["marked_comments"] += 1
            stats["findings"] += len(self.tracker.found_comment(comment, kinds))
        return stats

    def scan_file(self, item: SourceFile) -> Dict[str, int]:
        self.logger.info(f'reading "{item.display_name}"')
        if item.size_bytes == 0:
            self.logger.debug(f"Empty file: {item.display_name}")
            return {"comments": 0, "marked_comments": 0, "findings": 0}
        text = item.read_text()
        stats = self.scan_text(text, item.display_name, syntax_for_path(item.file_path))
        self.logger.debug(
            f"{item.display_name}: comments={stats['comments']}, findings={stats['findings']}"
        )
        return stats

    def scan_tree(
        self,
        root: Path,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS,
    ) -> Dict[str, int]:
        totals = {
            "files": 0,
            "files_skipped": 0,
            "comments": 0,
            "findings": 0,
        }
        items = iter_source_files(
            root,
            self.logger,
            extensions=extensions,
            skip_dirs=skip_dirs,
            strict=not self.keep_going,
        )
        for item in items:
            try:
                file_stats = self.scan_file(item)
            except ScanError as exc:
                if not self.keep_going:
                    raise
                self.logger.warn(f"Failed to scan {exc}")
                totals["files_skipped"] += 1
                continue
            totals["files"] += 1
            totals["comments"] += file_stats["comments"]
            totals["findings"] += file_stats["findings"]
        return totals
