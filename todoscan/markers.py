from __future__ import annotations

from typing import Iterable, Iterator, List, Sequence

from .models import Comment
from .syntax import RUST, CommentSyntax

DEFAULT_MARKERS = ("TODO", "FIXME", "XXX")


def iter_words(comment: Comment, syntax: CommentSyntax = RUST) -> Iterator[str]:
    for line in comment.lines:
        yield from syntax.strip_delimiters(line).split()


def collect_markers(raw_markers: Iterable[str]) -> List[str]:
    markers: List[str] = []
    seen: set[str] = set()
    for raw in raw_markers:
        value = raw.strip()
        if not value or value in seen:
            continue
        seen.add(value)
        markers.append(value)
    return markers


def extract_kinds(
    comment: Comment,
    syntax: CommentSyntax = RUST,
    markers: Sequence[str] = DEFAULT_MARKERS,
) -> List[str]:
    """Return the distinct marker kinds in `comment`, in order of first use.

    A kind is the whole whitespace-separated word that starts with a marker,
    taken verbatim: "TODO", "TODO:", "TODO-security" and "FIXME(alice)" are
    all different kinds.
    """
    prefixes = tuple(markers)
    if not prefixes:
        return []
    kinds: List[str] = []
    seen: set[str] = set()
    for word in iter_words(comment, syntax):
        if not word.startswith(prefixes):
            continue
        if word in seen:
            continue
        seen.add(word)
        kinds.append(word)
    return kinds
