from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from todoscan.console import RichLogger

LIB_RS = """// TODO fix this
// TODO-cleanup ugly
fn f() {}
"""


@pytest.fixture(autouse=True)
def wide_terminal(monkeypatch):
    # Keep rich from wrapping long tmp paths in log lines.
    monkeypatch.setenv("COLUMNS", "400")
    monkeypatch.delenv("TODOSCAN_EXTENSIONS", raising=False)


@pytest.fixture
def log_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def logger(log_buffer: io.StringIO) -> RichLogger:
    return RichLogger(console=Console(file=log_buffer, width=400), verbose=True)


@pytest.fixture
def rust_tree(tmp_path: Path) -> Path:
    root = tmp_path / "crate"
    (root / "src").mkdir(parents=True)
    (root / "src" / "lib.rs").write_text(LIB_RS, encoding="utf-8")
    (root / "target" / "debug").mkdir(parents=True)
    (root / "target" / "debug" / "generated.rs").write_text("// TODO generated code\n", encoding="utf-8")
    (root / "README.md").write_text("TODO write docs\n", encoding="utf-8")
    return root
