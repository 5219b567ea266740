from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .console import RichLogger

DEFAULT_EXTENSIONS = (".rs",)
DEFAULT_SKIP_DIRS = ("target",)


class ScanError(Exception):
    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def detect_text_encoding(sample: bytes) -> str:
    if sample.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"
    if sample.startswith(b"\xff\xfe") or sample.startswith(b"\xfe\xff"):
        return "utf-16"
    return "utf-8"


@dataclass(frozen=True)
class SourceFile:
    display_name: str
    size_bytes: int
    file_path: Path
    relative_path: Optional[str] = None

    def read_text(self) -> str:
        try:
            data = self.file_path.read_bytes()
        except OSError as exc:
            raise ScanError(self.display_name, f"read failed: {exc.strerror or exc}") from exc
        enc = detect_text_encoding(data[:4])
        try:
            return data.decode(enc)
        except UnicodeDecodeError as exc:
            raise ScanError(self.display_name, f"not valid {enc}: {exc.reason}") from exc


def check_root(root: Path) -> None:
    if not root.exists():
        raise ScanError(str(root), "no such file or directory")
    if not root.is_dir():
        raise ScanError(str(root), "not a directory")


def iter_source_files(
    root: Path,
    logger: RichLogger,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS,
    follow_symlinks: bool = False,
    strict: bool = True,
) -> Iterator[SourceFile]:
    """Yield the files below `root` whose suffix is one of `extensions`.

    Directories named in `skip_dirs` are pruned only directly below the root.
    Files and directories come out in sorted order so repeated runs agree.
    With `strict` unset, unreadable entries are logged and passed over.
    """
    check_root(root)
    wanted = {ext.lower() for ext in extensions}
    skipped = set(skip_dirs)

    def _on_error(exc: OSError) -> None:
        error = ScanError(exc.filename or str(root), f"walking tree: {exc.strerror or exc}")
        if strict:
            raise error from exc
        logger.warn(f"Skipping unreadable path: {error}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error, followlinks=follow_symlinks):
        current = Path(dirpath)
        dirnames.sort()
        if current == root:
            for name in [d for d in dirnames if d in skipped]:
                logger.info(f'skipping "{current / name}" (looks like "{name}" directory)')
                dirnames.remove(name)
        for name in sorted(filenames):
            p = current / name
            if p.suffix.lower() not in wanted:
                continue
            if (not follow_symlinks) and p.is_symlink():
                continue
            try:
                st = p.stat()
            except OSError as exc:
                if strict:
                    raise ScanError(str(p), f"stat failed: {exc.strerror or exc}") from exc
                logger.warn(f"Skipping unreadable path: {p} ({exc})")
                continue
            if not p.is_file():
                continue
            yield SourceFile(
                display_name=str(p),
                size_bytes=st.st_size,
                file_path=p,
                relative_path=str(p.relative_to(root)),
            )
