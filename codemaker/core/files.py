"""
File content access and source tree traversal.

Reads tolerate vanished or unreadable files by returning ``None``; writes
replace the whole file atomically so an interrupted job never leaves a
half-written source file behind.
"""

import logging
import os
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path

logger = logging.getLogger(__name__)


class FileAccessor:
    """Reads and writes the text content of source files."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def read(self, path: Path) -> str | None:
        """
        Read a file's text content.

        Returns:
            The content with its line endings unchanged, or None if the file
            is missing, unreadable or not text
        """
        try:
            with open(path, "r", encoding=self.encoding, newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Cannot read {path}: {e}")
            return None

    def write(self, path: Path, text: str) -> None:
        """Replace a file's content atomically."""
        path = Path(path)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding=self.encoding, newline="") as f:
                f.write(text)
            if path.exists():
                os.chmod(tmp_name, path.stat().st_mode)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def walk_files(path: Path, accept: Callable[[Path], bool]) -> Iterator[Path]:
    """
    Yield files under ``path`` accepted by ``accept``, depth first in name order.

    A file path is yielded as is when accepted. Hidden directories are skipped.
    """
    path = Path(path)
    if not path.is_dir():
        if path.is_file() and accept(path):
            yield path
        return

    for child in sorted(path.iterdir(), key=lambda p: p.name):
        if child.is_dir():
            if child.name.startswith("."):
                continue
            yield from walk_files(child, accept)
        elif child.is_file() and accept(child):
            yield child
