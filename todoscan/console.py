from __future__ import annotations

import threading
from collections import Counter
from typing import Optional

from rich.console import Console
from rich.text import Text


class RichLogger:
    """Diagnostics for a scan, kept on stderr so stdout carries only the report.

    Messages are logged as plain text (paths and comments may contain rich
    markup characters), and every level is counted so the caller can say
    how a scan went once it is over.
    """

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console or Console(stderr=True)
        self.verbose = verbose
        self.counts: Counter[str] = Counter()
        self._lock = threading.Lock()

    def _emit(self, level: str, msg: str, style: str) -> None:
        with self._lock:
            self.counts[level] += 1
            tag = Text(level.ljust(5), style=style)
            self.console.log(tag, Text(msg))

    @property
    def warnings(self) -> int:
        return self.counts["WARN"]

    def info(self, msg: str) -> None:
        self._emit("INFO", msg, "bold green")

    def warn(self, msg: str) -> None:
        self._emit("WARN", msg, "bold yellow")

    def error(self, msg: str) -> None:
        self._emit("ERROR", msg, "bold red")

    def debug(self, msg: str) -> None:
        if not self.verbose:
            return
        self._emit("DEBUG", msg, "bold blue")

    def done(self, msg: str) -> None:
        self._emit("DONE", msg, "bold cyan")
