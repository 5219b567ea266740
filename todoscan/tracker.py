from __future__ import annotations

import threading
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .models import Comment, Finding


class CommentTracker:
    """Groups comments by marker kind.

    Kinds keep the order in which they were first seen, and comments keep
    discovery order within a kind.  A comment is filed at most once per kind
    but may sit under several kinds at the same time.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.comments_by_kind: Dict[str, List[Comment]] = {}

    def record(self, kind: str, comment: Comment) -> Optional[Finding]:
        with self._lock:
            comments = self.comments_by_kind.setdefault(kind, [])
            if comments and comments[-1] is comment:
                return None
            comments.append(comment)
            return Finding(kind, comment)

    def found_comment(self, comment: Comment, kinds: Iterable[str]) -> List[Finding]:
        findings: List[Finding] = []
        for kind in kinds:
            finding = self.record(kind, comment)
            if finding is not None:
                findings.append(finding)
        return findings

    def snapshot(self) -> Mapping[str, Tuple[Comment, ...]]:
        with self._lock:
            return MappingProxyType({kind: tuple(comments) for kind, comments in self.comments_by_kind.items()})

    def total(self) -> int:
        with self._lock:
            return sum(len(comments) for comments in self.comments_by_kind.values())

    def summary(self) -> Dict[str, object]:
        snapshot = self.snapshot()
        distinct = {id(comment) for comments in snapshot.values() for comment in comments}
        return {
            "kinds": {kind: len(comments) for kind, comments in snapshot.items()},
            "total": self.total(),
            "distinct_comments": len(distinct),
        }
