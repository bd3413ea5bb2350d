# memory/json_store.py

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Union

from .models import MemoryItem
from .search import DEFAULT_SEARCH_LIMIT, RECENT_LIMIT, search_items
from .store import Store

logger = logging.getLogger(__name__)

# One re-entrant lock per resolved store path, shared by every
# JsonFileStore in the process that points at the same file.
_PATH_LOCKS: Dict[str, threading.RLock] = {}
_PATH_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = os.path.abspath(path)
    with _PATH_LOCKS_GUARD:
        lock = _PATH_LOCKS.get(key)
        if lock is None:
            lock = _PATH_LOCKS[key] = threading.RLock()
        return lock


class StoreError(RuntimeError):
    """Raised when the local store cannot persist a mutation."""


def empty_document() -> Dict[str, Any]:
    return {"items": []}


class JsonFileStore(Store):
    """Store implementation backed by a single JSON document on disk.

    The document has the shape `{"items": [...]}` with the newest item
    first. It is created on first access, read in full before every
    operation and rewritten in full after every mutation.

    Mutations hold a process-wide single-writer lock for the path during
    the whole load/prepend/save cycle, so overlapping saves within one
    process cannot drop each other's items. First-access creation and
    whole-document saves take the same lock.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._lock = _lock_for(self.path)

    # ------------------------------------------------------------------
    # Document access
    # ------------------------------------------------------------------

    def load(self) -> Dict[str, Any]:
        """Return the full store document.

        A missing file is created empty. Unreadable or malformed documents
        are logged and treated as empty; this never raises.
        """
        with self._lock:
            if not self.path.exists():
                if not self.save(empty_document()):
                    return empty_document()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Could not read memory store %s: %s", self.path, e)
            return empty_document()

        if not isinstance(data, dict) or not isinstance(data.get("items"), list):
            logger.warning(
                "Memory store %s has no 'items' list; treating as empty", self.path
            )
            return empty_document()
        return data

    def save(self, document: Dict[str, Any]) -> bool:
        """Serialize and replace the backing document. Returns success."""
        try:
            with self._lock:
                self._write(document)
        except StoreError:
            logger.exception("Failed to write memory store %s", self.path)
            return False
        return True

    def _write(self, document: Dict[str, Any]) -> None:
        tmp_path = None
        try:
            payload = json.dumps(document, indent=2, ensure_ascii=False)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Unique temp name per write so concurrent writers never share one.
            fd, tmp_path = tempfile.mkstemp(
                prefix=self.path.name + ".", suffix=".tmp", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
            raise StoreError(str(e)) from e

    def items(self) -> List[MemoryItem]:
        results: List[MemoryItem] = []
        for raw in self.load()["items"]:
            if isinstance(raw, dict):
                results.append(MemoryItem.from_dict(raw))
        return results

    # ------------------------------------------------------------------
    # Store interface
    # ------------------------------------------------------------------

    def append(self, item: MemoryItem) -> MemoryItem:
        with self._lock:
            document = self.load()
            document["items"].insert(0, item.to_dict())
            self._write(document)
        logger.info("Saved memory %s to local store %s", item.id, self.path)
        return item

    def list(self, limit: int = RECENT_LIMIT) -> List[MemoryItem]:
        if limit <= 0:
            return []
        return self.items()[:limit]

    def find(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> List[MemoryItem]:
        return search_items(self.items(), query, limit)
