"""File-system collaborators that persist generated files."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Protocol

from .shared.result import IO_ERROR, Result


class Writer(Protocol):
    def write(self, path: Path, content: str) -> Result[None]:
        ...


class FileWriter:
    """Writes UTF-8 files, creating parent directories as needed."""

    def write(self, path: Path, content: str) -> Result[None]:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            return Result.failure(f"Failed to write {path}: {e}", IO_ERROR)
        return Result.success()


class MemoryWriter:
    """Collects files in memory; used for dry runs and tests."""

    __slots__ = ("files", "_lock")

    def __init__(self) -> None:
        self.files: dict[Path, str] = {}
        self._lock = threading.Lock()

    def write(self, path: Path, content: str) -> Result[None]:
        with self._lock:
            self.files[path] = content
        return Result.success()
