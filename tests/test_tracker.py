from __future__ import annotations

import pytest

from todoscan.models import Comment, Finding
from todoscan.tracker import CommentTracker


def make_comment(line_no, text):
    return Comment("src/lib.rs", line_no, (text,))


def test_kinds_keep_first_seen_order():
    tracker = CommentTracker()
    first = make_comment(1, "// XXX one")
    second = make_comment(5, "// FIXME two")
    third = make_comment(9, "// XXX three")
    tracker.record("XXX", first)
    tracker.record("FIXME", second)
    tracker.record("XXX", third)

    snapshot = tracker.snapshot()
    assert list(snapshot) == ["XXX", "FIXME"]
    assert snapshot["XXX"] == (first, third)
    assert snapshot["FIXME"] == (second,)


def test_same_comment_is_filed_once_per_kind():
    tracker = CommentTracker()
    comment = make_comment(1, "// TODO-a TODO-a")
    assert tracker.found_comment(comment, ["TODO-a", "TODO-a"]) == [Finding("TODO-a", comment)]
    assert tracker.record("TODO-a", comment) is None
    assert tracker.total() == 1


def test_one_comment_under_several_kinds():
    tracker = CommentTracker()
    comment = make_comment(1, "// TODO-security TODO-coverage")
    findings = tracker.found_comment(comment, ["TODO-security", "TODO-coverage"])
    assert findings == [
        Finding("TODO-security", comment),
        Finding("TODO-coverage", comment),
    ]
    summary = tracker.summary()
    assert summary["total"] == 2
    assert summary["distinct_comments"] == 1
    assert summary["kinds"] == {"TODO-security": 1, "TODO-coverage": 1}


def test_snapshot_is_read_only_and_detached():
    tracker = CommentTracker()
    tracker.record("TODO", make_comment(1, "// TODO"))
    snapshot = tracker.snapshot()
    with pytest.raises(TypeError):
        snapshot["FIXME"] = ()
    tracker.record("TODO", make_comment(2, "// TODO again"))
    assert len(snapshot["TODO"]) == 1
    assert len(tracker.snapshot()["TODO"]) == 2
