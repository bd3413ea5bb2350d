# memory/store.py

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from .models import MemoryItem


class Store(ABC):
    """Abstract interface for the local memory backend.

    Implementations hide the concrete storage (a JSON file today) behind a
    small append/list/find interface so the save path and the read paths do
    not depend on the document layout.
    """

    @abstractmethod
    def append(self, item: MemoryItem) -> MemoryItem:
        """Persist `item` as the newest entry and return it.

        Implementations must raise if the item could not be persisted.
        """

    @abstractmethod
    def list(self, limit: int = 20) -> List[MemoryItem]:
        """Return up to `limit` items, newest first."""
        raise NotImplementedError

    @abstractmethod
    def find(self, query: str, limit: int = 50) -> List[MemoryItem]:
        """Return up to `limit` items matching `query`, newest first."""
        raise NotImplementedError
