"""Key/value stores backing the host runtime.

JSONFileStore keeps every key in a single JSON document:

{
    "sora_video_url_map": {"abc123": "https://.../00000/src.mp4"},
    "sora_daily_check_date": "2026-10-19"
}

Writes are atomic (write to temp file, then rename) and lock() serializes
read-modify-write sequences across processes with flock on a sidecar file.
"""

import copy
import fcntl
import json
import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any

from hookbox.host.base import StoreError

logger = logging.getLogger(__name__)


class JSONFileStore:
    """File-based key/value store.

    The lock covers the whole document, not a single key. It is re-entrant
    within a process so save() can be called while lock() is held.
    """

    def __init__(self, path: Path):
        self._path = path
        self._lock_path = path.with_name(f".{path.name}.lock")
        self._thread_lock = threading.RLock()
        self._depth = 0
        self._lock_file: IO | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        with self._path.open("r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise StoreError(f"Corrupt store file {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"Store file {self._path} does not hold an object")
        return data

    def _write_document(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        temp_file = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            with temp_file.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_file.replace(self._path)
        except (OSError, TypeError, ValueError):
            if temp_file.exists():
                temp_file.unlink()
            raise

    def load(self, key: str) -> Any | None:
        return self._read_document().get(key)

    def save(self, key: str, value: Any) -> None:
        with self.lock(key):
            try:
                data = self._read_document()
            except StoreError:
                logger.warning(f"Replacing unreadable store file {self._path}")
                data = {}
            data[key] = value
            self._write_document(data)

    def delete(self, key: str) -> bool:
        with self.lock(key):
            data = self._read_document()
            if key not in data:
                return False
            del data[key]
            self._write_document(data)
            return True

    def keys(self) -> list[str]:
        return list(self._read_document())

    @contextmanager
    def lock(self, key: str = "") -> Iterator[None]:
        with self._thread_lock:
            if self._depth == 0:
                self._lock_path.parent.mkdir(parents=True, exist_ok=True)
                self._lock_file = self._lock_path.open("a+")
                fcntl.flock(self._lock_file.fileno(), fcntl.LOCK_EX)
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
                if self._depth == 0 and self._lock_file is not None:
                    fcntl.flock(self._lock_file.fileno(), fcntl.LOCK_UN)
                    self._lock_file.close()
                    self._lock_file = None


class MemoryStore:
    """In-process key/value store.

    Values are copied on the way in and out so callers never share state
    with the store, matching what a serializing backend would do.
    """

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(initial or {})
        self._lock = threading.RLock()

    def load(self, key: str) -> Any | None:
        with self._lock:
            return copy.deepcopy(self._data.get(key))

    def save(self, key: str, value: Any) -> None:
        # Reject what a JSON-backed store could not persist
        json.dumps(value)
        with self._lock:
            self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> bool:
        with self._lock:
            if key not in self._data:
                return False
            del self._data[key]
            return True

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data)

    @contextmanager
    def lock(self, key: str = "") -> Iterator[None]:
        with self._lock:
            yield
