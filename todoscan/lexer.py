"""Pulls comments out of source text with a small explicit state machine.

The lexer only knows enough about a language to find comments: line
comments, block comments, and quoted literals (so that comment-like text
inside a string does not count).  Known limitations, kept on purpose:

* block comments do not nest; the first end delimiter closes the comment
* only Rust raw strings (r"...", br#"..."#) turn off escapes; other raw
  string forms (C++ R"(...)", Python r"...") lex like ordinary strings
* an unterminated block comment runs to the end of the file
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, List, Optional

from .models import Comment
from .syntax import RUST, CommentSyntax

# Longest char literal body we accept after the opening quote, e.g. '\u{10FFFF}'.
MAX_CHAR_LITERAL = 10


class LexState(Enum):
    CODE = "code"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    STRING = "string"
    CHAR = "char"


def _char_literal_end(text: str, start: int, syntax: CommentSyntax) -> int:
    """Index of the closing quote if `start` opens a char literal, else -1.

    Rust lifetimes ('a) and labels share the quote character, so the quote
    only opens a literal when it is closed again a few characters later.
    """
    quote = syntax.char_quote
    pos = start + 1
    if pos >= len(text) or text[pos] == "\n":
        return -1
    if text[pos] == syntax.escape:
        limit = min(len(text), pos + MAX_CHAR_LITERAL + 1)
        for idx in range(pos + 2, limit):
            if text[idx] == "\n":
                return -1
            if text[idx] == quote:
                return idx
        return -1
    if pos + 1 < len(text) and text[pos + 1] == quote:
        return pos + 1
    return -1


def _raw_string_hashes(text: str, quote_at: int) -> int:
    """Number of # guards if the quote at `quote_at` opens r"..." / br#"..."#, else -1."""
    pos = quote_at
    while pos > 0 and text[pos - 1] == "#":
        pos -= 1
    hashes = quote_at - pos
    if pos == 0 or text[pos - 1] != "r":
        return -1
    pos -= 1
    if pos > 0 and text[pos - 1] == "b":
        pos -= 1
    if pos > 0 and (text[pos - 1].isalnum() or text[pos - 1] == "_"):
        return -1
    return hashes


class CommentLexer:
    def __init__(self, text: str, source: str, syntax: CommentSyntax = RUST):
        self.text = text
        self.source = source
        self.syntax = syntax
        self.state = LexState.CODE
        self.line_no = 1
        self._line_has_code = False
        self._quote = ""
        self._raw_hashes = -1
        # Line comment lines waiting for a possible continuation on the next line.
        self._pending: List[str] = []
        self._pending_start = 0
        self._pending_end = 0
        self._pending_trailing = False

    def _has_body(self, lines: List[str]) -> bool:
        return any(self.syntax.strip_delimiters(line).strip() for line in lines)

    def _flush(self) -> Optional[Comment]:
        if not self._pending:
            return None
        lines, self._pending = self._pending, []
        if not self._has_body(lines):
            return None
        return Comment(self.source, self._pending_start, tuple(lines))

    def _can_continue(self) -> bool:
        return (
            bool(self._pending)
            and not self._pending_trailing
            and self._pending_end == self.line_no - 1
            and not self._line_has_code
        )

    def __iter__(self) -> Iterator[Comment]:
        text = self.text
        syntax = self.syntax
        n = len(text)
        i = 0
        mark = 0

        while i < n:
            ch = text[i]

            if self.state is LexState.CODE:
                if ch == "\n":
                    if self._pending and self._pending_end < self.line_no:
                        comment = self._flush()
                        if comment:
                            yield comment
                    self.line_no += 1
                    self._line_has_code = False
                    i += 1
                    continue
                if syntax.block_start and text.startswith(syntax.block_start, i):
                    comment = self._flush()
                    if comment:
                        yield comment
                    self.state = LexState.BLOCK_COMMENT
                    mark = i
                    self._pending_start = self.line_no
                    i += len(syntax.block_start)
                    continue
                if syntax.line_start and text.startswith(syntax.line_start, i):
                    if not self._can_continue():
                        comment = self._flush()
                        if comment:
                            yield comment
                        self._pending_start = self.line_no
                        self._pending_trailing = self._line_has_code
                    self.state = LexState.LINE_COMMENT
                    mark = i
                    i += len(syntax.line_start)
                    continue
                if ch.isspace():
                    i += 1
                    continue

                self._line_has_code = True
                if self._pending:
                    comment = self._flush()
                    if comment:
                        yield comment
                if ch in syntax.string_quotes:
                    self.state = LexState.STRING
                    self._quote = ch
                    self._raw_hashes = _raw_string_hashes(text, i) if syntax.raw_strings else -1
                elif syntax.char_quote and ch == syntax.char_quote and _char_literal_end(text, i, syntax) > 0:
                    self.state = LexState.CHAR
                i += 1

            elif self.state is LexState.LINE_COMMENT:
                end = text.find("\n", i)
                if end < 0:
                    end = n
                self._pending.append(text[mark:end].strip())
                self._pending_end = self.line_no
                self.state = LexState.CODE
                i = end

            elif self.state is LexState.BLOCK_COMMENT:
                end = text.find(syntax.block_end, i)
                if end < 0:
                    end = n
                else:
                    end += len(syntax.block_end)
                body = text[mark:end]
                lines = [line.strip() for line in body.split("\n")]
                self.line_no += body.count("\n")
                self.state = LexState.CODE
                # Code may follow the closing delimiter on the same line.
                self._line_has_code = True
                i = end
                if self._has_body(lines):
                    yield Comment(self.source, self._pending_start, tuple(lines))

            elif self.state is LexState.STRING:
                raw = self._raw_hashes >= 0
                if ch == syntax.escape and not raw:
                    if text.startswith("\n", i + 1):
                        if not syntax.multiline_strings:
                            self.state = LexState.CODE
                            i += 1
                            continue
                        self.line_no += 1
                    i += 2
                    continue
                if ch == "\n":
                    if not syntax.multiline_strings:
                        # Leave the newline to CODE so line bookkeeping stays in one place.
                        self.state = LexState.CODE
                        continue
                    self.line_no += 1
                elif ch == self._quote:
                    if raw:
                        guard = "#" * self._raw_hashes
                        if not text.startswith(guard, i + 1):
                            i += 1
                            continue
                        i += len(guard)
                    self.state = LexState.CODE
                i += 1

            elif self.state is LexState.CHAR:
                if ch == syntax.escape:
                    i += 2
                    continue
                if ch == syntax.char_quote:
                    self.state = LexState.CODE
                i += 1

        # End of input: whatever comment is still open becomes the last one.
        if self.state is LexState.BLOCK_COMMENT:
            lines = [line.strip() for line in text[mark:].split("\n")]
            if self._has_body(lines):
                yield Comment(self.source, self._pending_start, tuple(lines))
        elif self.state is LexState.LINE_COMMENT:
            self._pending.append(text[mark:].strip())
            self._pending_end = self.line_no
        comment = self._flush()
        if comment:
            yield comment


def iter_comments(text: str, source: str, syntax: CommentSyntax = RUST) -> Iterator[Comment]:
    return iter(CommentLexer(text, source, syntax))
