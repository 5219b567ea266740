from __future__ import annotations

import json
from pathlib import Path
from typing import IO, Iterator, Mapping, Sequence

from rich.console import Console
from rich.table import Table

from .console import RichLogger
from .models import Comment

CommentsByKind = Mapping[str, Sequence[Comment]]


def kind_header(kind: str, count: int) -> str:
    return f'comments with "{kind}": {count}'


def iter_report_lines(comments_by_kind: CommentsByKind) -> Iterator[str]:
    """Yield the text report line by line, kinds in first-seen order."""
    for kind, comments in comments_by_kind.items():
        yield kind_header(kind, len(comments))
        for comment in comments:
            yield f'  found "{kind}" in file {comment.source} line line {comment.line_no}'
            for line in comment.lines:
                yield f"    {line}"
            yield ""

    total = 0
    yield "SUMMARY:"
    yield ""
    for kind, comments in comments_by_kind.items():
        yield kind_header(kind, len(comments))
        total += len(comments)
    yield f"total comments found: {total}"


def render_report(comments_by_kind: CommentsByKind) -> str:
    return "".join(line + "\n" for line in iter_report_lines(comments_by_kind))


def write_report(comments_by_kind: CommentsByKind, out: IO[str]) -> None:
    # Comment text goes out untouched; rich would expand tabs and wrap.
    out.write(render_report(comments_by_kind))
    out.flush()


def summary_table(comments_by_kind: CommentsByKind) -> Table:
    table = Table(title="Findings Summary", header_style="bold")
    table.add_column("Kind", style="cyan")
    table.add_column("Comments", justify="right")
    for kind, comments in comments_by_kind.items():
        table.add_row(kind, str(len(comments)))
    return table


def print_summary_table(comments_by_kind: CommentsByKind, console: Console) -> None:
    if not comments_by_kind:
        return
    console.print(summary_table(comments_by_kind))


def write_json(comments_by_kind: CommentsByKind, path: Path, logger: RichLogger) -> None:
    payload = {
        "kinds": [
            {
                "kind": kind,
                "count": len(comments),
                "findings": [
                    {
                        "file": comment.source,
                        "line": comment.line_no,
                        "text": comment.text,
                    }
                    for comment in comments
                ],
            }
            for kind, comments in comments_by_kind.items()
        ],
        "total": sum(len(comments) for comments in comments_by_kind.values()),
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=False)
        handle.write("\n")
    tmp_path.replace(path)
    logger.done(f"Findings written to: {path}")
