from __future__ import annotations

from pathlib import Path

import pytest

from todoscan.scanner import Scanner
from todoscan.tracker import CommentTracker
from todoscan.walker import ScanError, SourceFile, iter_source_files

from conftest import LIB_RS


def test_scan_text_stats(logger):
    tracker = CommentTracker()
    stats = Scanner(tracker, logger).scan_text(
        "// TODO-security TODO-coverage\nfn a() {}\n// plain\n", "src/a.rs"
    )
    assert stats == {"comments": 2, "marked_comments": 1, "findings": 2}
    assert tracker.summary()["distinct_comments"] == 1


def test_string_literal_yields_no_findings(logger):
    tracker = CommentTracker()
    stats = Scanner(tracker, logger).scan_text('let s = "TODO fix";\n', "src/a.rs")
    assert stats["comments"] == 0
    assert dict(tracker.snapshot()) == {}


def test_scanning_twice_gives_the_same_state(logger, rust_tree):
    snapshots = []
    for _ in range(2):
        tracker = CommentTracker()
        Scanner(tracker, logger).scan_tree(rust_tree)
        snapshots.append(dict(tracker.snapshot()))
    assert snapshots[0] == snapshots[1]
    assert list(snapshots[0]) == ["TODO", "TODO-cleanup"]


def test_target_directory_is_skipped_at_root(logger, log_buffer, rust_tree):
    tracker = CommentTracker()
    stats = Scanner(tracker, logger).scan_tree(rust_tree)
    assert stats["files"] == 1
    sources = {c.source for comments in tracker.snapshot().values() for c in comments}
    assert sources == {str(rust_tree / "src" / "lib.rs")}
    log = log_buffer.getvalue()
    assert log.count("skipping") == 1
    assert 'looks like "target" directory' in log
    assert "reading" in log


def test_nested_target_directory_is_scanned(logger, tmp_path):
    nested = tmp_path / "src" / "target"
    nested.mkdir(parents=True)
    (nested / "mod.rs").write_text("// FIXME nested\n", encoding="utf-8")
    items = list(iter_source_files(tmp_path, logger))
    assert [item.relative_path for item in items] == [str(Path("src") / "target" / "mod.rs")]


def test_extension_filter(logger, tmp_path):
    (tmp_path / "a.rs").write_text("// TODO a\n", encoding="utf-8")
    (tmp_path / "b.PY").write_text("# TODO b\n", encoding="utf-8")
    (tmp_path / "c.txt").write_text("// TODO c\n", encoding="utf-8")
    items = list(iter_source_files(tmp_path, logger, extensions=[".rs", ".py"]))
    assert [item.relative_path for item in items] == ["a.rs", "b.PY"]


def test_missing_root_is_an_error(logger, tmp_path):
    with pytest.raises(ScanError):
        list(iter_source_files(tmp_path / "missing", logger))
    (tmp_path / "file.rs").write_text(LIB_RS, encoding="utf-8")
    with pytest.raises(ScanError, match="not a directory"):
        list(iter_source_files(tmp_path / "file.rs", logger))


def test_undecodable_file_aborts_by_default(logger, tmp_path):
    (tmp_path / "a.rs").write_bytes(b"// TODO\n\x80\x81 broken\n")
    (tmp_path / "b.rs").write_text("// FIXME fine\n", encoding="utf-8")
    tracker = CommentTracker()
    with pytest.raises(ScanError) as excinfo:
        Scanner(tracker, logger).scan_tree(tmp_path)
    assert excinfo.value.path == str(tmp_path / "a.rs")


def test_keep_going_skips_undecodable_file(logger, log_buffer, tmp_path):
    (tmp_path / "a.rs").write_bytes(b"// TODO\n\x80\x81 broken\n")
    (tmp_path / "b.rs").write_text("// FIXME fine\n", encoding="utf-8")
    tracker = CommentTracker()
    stats = Scanner(tracker, logger, keep_going=True).scan_tree(tmp_path)
    assert stats["files"] == 1
    assert stats["files_skipped"] == 1
    assert list(tracker.snapshot()) == ["FIXME"]
    assert "Failed to scan" in log_buffer.getvalue()


def test_source_file_decodes_bom(tmp_path):
    path = tmp_path / "bom.rs"
    path.write_bytes(b"\xef\xbb\xbf// TODO bom\n")
    item = SourceFile(display_name=str(path), size_bytes=path.stat().st_size, file_path=path)
    assert item.read_text() == "// TODO bom\n"


def test_empty_file_is_not_read(logger, log_buffer, tmp_path):
    (tmp_path / "empty.rs").write_text("", encoding="utf-8")
    tracker = CommentTracker()
    stats = Scanner(tracker, logger).scan_tree(tmp_path)
    assert stats["files"] == 1
    assert stats["comments"] == 0
    assert "Empty file" in log_buffer.getvalue()


def test_syntax_follows_file_extension(logger, tmp_path):
    (tmp_path / "app.js").write_text("const s = 'a // TODO no';\n// FIXME js\n", encoding="utf-8")
    (tmp_path / "ci.yml").write_text("name: don't  # XXX yml\n", encoding="utf-8")
    tracker = CommentTracker()
    Scanner(tracker, logger).scan_tree(tmp_path, extensions=[".js", ".yml"])
    assert list(tracker.snapshot()) == ["FIXME", "XXX"]
