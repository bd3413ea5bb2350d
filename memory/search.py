# memory/search.py

from __future__ import annotations

from typing import Iterable, List

from .models import MemoryItem

DEFAULT_SEARCH_LIMIT = 50
# Size of the unfiltered "recent" view and of the window used for inference.
RECENT_LIMIT = 20


def matches_text(item: MemoryItem, needle: str) -> bool:
    """Case-insensitive substring match on title + content.

    `needle` is expected to be lowercased already.
    """
    haystack = f"{item.title} {item.content}".lower()
    return needle in haystack


def matches_tag(item: MemoryItem, needle: str) -> bool:
    return any(needle in tag.lower() for tag in item.tags)


def search_items(
    items: Iterable[MemoryItem],
    text: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> List[MemoryItem]:
    """Filter `items` by substring against title/content or any tag.

    A blank query returns no results rather than everything. Non-blank
    queries match as given, surrounding spaces included. Input order is
    preserved, so a newest-first store yields newest-first results.
    """
    text = "" if text is None else str(text)
    if not text.strip() or limit <= 0:
        return []
    needle = text.lower()

    results: List[MemoryItem] = []
    for item in items:
        if matches_text(item, needle) or matches_tag(item, needle):
            results.append(item)
            if len(results) >= limit:
                break
    return results
