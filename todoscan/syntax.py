from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class CommentSyntax:
    """Lexical rules the comment lexer needs for one family of languages."""

    name: str
    line_start: Optional[str]
    block_start: Optional[str] = None
    block_end: Optional[str] = None
    string_quotes: Tuple[str, ...] = ('"',)
    char_quote: Optional[str] = None
    escape: str = "\\"
    # Rust style r"..." / br#"..."# literals where the escape character is literal.
    raw_strings: bool = False
    multiline_strings: bool = True

    @property
    def delimiter_chars(self) -> str:
        chars = "!"
        for delim in (self.line_start, self.block_start, self.block_end):
            if delim:
                chars += delim
        return "".join(sorted(set(chars)))

    def strip_delimiters(self, line: str) -> str:
        """Drop the comment punctuation around one line of comment text."""
        value = line.strip()
        if self.block_end and value.endswith(self.block_end):
            value = value[: -len(self.block_end)]
        return value.lstrip(self.delimiter_chars)


RUST = CommentSyntax(
    name="rust",
    line_start="//",
    block_start="/*",
    block_end="*/",
    string_quotes=('"',),
    char_quote="'",
    raw_strings=True,
)

C_LIKE = CommentSyntax(
    name="c_like",
    line_start="//",
    block_start="/*",
    block_end="*/",
    string_quotes=('"',),
    char_quote="'",
)

# JavaScript and friends: ' and ` quote whole strings, there are no char literals.
JS_LIKE = CommentSyntax(
    name="js_like",
    line_start="//",
    block_start="/*",
    block_end="*/",
    string_quotes=('"', "'", "`"),
)

HASH = CommentSyntax(
    name="hash",
    line_start="#",
    string_quotes=('"', "'"),
)

# Config files: apostrophes show up in bare values, and no quote outlives its line.
CONFIG = CommentSyntax(
    name="config",
    line_start="#",
    string_quotes=('"',),
    multiline_strings=False,
)

# Extensions that use C-like // and /* */ comments.
C_LIKE_EXTENSIONS = {
    ".c",
    ".h",
    ".cc",
    ".cpp",
    ".cxx",
    ".hh",
    ".hpp",
    ".go",
    ".java",
    ".cs",
    ".swift",
    ".kt",
    ".scala",
}

JS_LIKE_EXTENSIONS = {
    ".js",
    ".mjs",
    ".cjs",
    ".jsx",
    ".ts",
    ".tsx",
}

# Extensions where # starts a comment.
HASH_EXTENSIONS = {
    ".py",
    ".pyi",
    ".sh",
    ".bash",
    ".rb",
    ".pl",
}

CONFIG_EXTENSIONS = {
    ".toml",
    ".yaml",
    ".yml",
    ".cfg",
    ".ini",
}

SYNTAX_BY_EXTENSION: Dict[str, CommentSyntax] = {
    ".rs": RUST,
    **{ext: C_LIKE for ext in C_LIKE_EXTENSIONS},
    **{ext: JS_LIKE for ext in JS_LIKE_EXTENSIONS},
    **{ext: HASH for ext in HASH_EXTENSIONS},
    **{ext: CONFIG for ext in CONFIG_EXTENSIONS},
}


def normalize_extension(value: str) -> str:
    ext = value.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


def syntax_for_path(path: Path) -> CommentSyntax:
    return SYNTAX_BY_EXTENSION.get(path.suffix.lower(), C_LIKE)
