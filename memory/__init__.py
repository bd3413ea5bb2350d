# memory/__init__.py

from .models import MemoryItem, MemoryMetadata, build_memory_item
from .store import Store
from .json_store import JsonFileStore, StoreError
from .search import search_items
from .summary import WeeklyDigest, answer_query, weekly_summary

__all__ = [
    "MemoryItem",
    "MemoryMetadata",
    "build_memory_item",
    "Store",
    "JsonFileStore",
    "StoreError",
    "search_items",
    "WeeklyDigest",
    "answer_query",
    "weekly_summary",
]
