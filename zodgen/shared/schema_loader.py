"""OpenAPI document loading with caching support."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import SchemaError


@dataclass(frozen=True, slots=True)
class CacheKey:
    """Immutable cache key for document files."""

    path: Path
    mtime: float
    size: int

    @classmethod
    def from_path(cls, path: Path) -> CacheKey:
        """Create a cache key from a file path."""
        stat = path.stat()
        return cls(
            path=path.resolve(),
            mtime=stat.st_mtime,
            size=stat.st_size,
        )


class DocumentCache:
    """Thread-safe document cache with automatic invalidation.

    Batch tasks that target the same document share one parsed tree.
    Entries are invalidated when the file's mtime or size changes.
    Callers must treat the returned tree as read-only.
    """

    __slots__ = ("_cache", "_max_size", "_lock")

    def __init__(self, max_size: int = 32) -> None:
        self._cache: dict[Path, tuple[CacheKey, dict[str, Any]]] = {}
        self._max_size = max_size
        self._lock = threading.Lock()

    def get(self, path: Path) -> dict[str, Any]:
        """Get a document from cache, loading it if necessary.

        Raises:
            SchemaError: If the document cannot be read or parsed.
        """
        resolved = path.resolve()
        try:
            current_key = CacheKey.from_path(resolved)
        except OSError as e:
            raise SchemaError(f"Failed to read document: {e}", str(path)) from e

        with self._lock:
            cached = self._cache.get(resolved)
            if cached is not None and cached[0] == current_key:
                return cached[1]

            data = load_document(resolved)
            if len(self._cache) >= self._max_size:
                oldest = next(iter(self._cache))
                del self._cache[oldest]
            self._cache[resolved] = (current_key, data)
            return data

    def invalidate(self, path: Path | None = None) -> None:
        """Invalidate cached documents.

        Args:
            path: Specific path to invalidate, or None to clear all.
        """
        with self._lock:
            if path is None:
                self._cache.clear()
            else:
                self._cache.pop(path.resolve(), None)

    def __len__(self) -> int:
        return len(self._cache)


def load_document(path: Path) -> dict[str, Any]:
    """Load an OpenAPI document from a YAML or JSON file.

    Raises:
        SchemaError: If the file cannot be read or parsed.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaError(f"Failed to read document: {e}", str(path)) from e

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise SchemaError(f"Invalid document: {e}", str(path)) from e

    if not isinstance(data, dict):
        raise SchemaError("Document root must be a mapping", str(path))

    return data
