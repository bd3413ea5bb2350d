# memory/summary.py

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Sequence

from .models import MemoryItem
from .search import matches_text

MAX_THEMES = 3
MAX_MOODS = 3
MAX_LEARNINGS = 3
LEARNING_SNIPPET_LENGTH = 150

MAX_ANSWER_MATCHES = 8
ANSWER_SNIPPET_LENGTH = 140

DEFAULT_MOOD = "neutral"
NO_THEMES = ["No clear themes yet"]
NO_MATCHES_ANSWER = "No matching memories found."

# Plain substring markers, so "learn" also hits "learned" and "relearning".
LEARNING_MARKERS = ("learn", "realize", "understand", "lesson")

NEXT_STEPS = [
    "Pick one theme from this week and set a small, concrete goal for it.",
    "Revisit the moments that lifted your mood and plan more of them.",
    "Keep capturing short memories daily so next week's summary is richer.",
]


@dataclass
class WeeklyDigest:
    themes: List[str] = field(default_factory=list)
    mood_summary: List[str] = field(default_factory=list)
    top_learnings: List[str] = field(default_factory=list)
    next_steps: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _top(counter: Counter, n: int) -> List[tuple]:
    # Counter preserves first-seen order and sorted() is stable, so ties
    # keep that order.
    return sorted(counter.items(), key=lambda kv: kv[1], reverse=True)[:n]


def summarize_themes(items: Iterable[MemoryItem]) -> List[str]:
    counts: Counter = Counter()
    for item in items:
        for category in item.metadata.categories:
            counts[category] += 1
    if not counts:
        return list(NO_THEMES)
    return [name for name, _ in _top(counts, MAX_THEMES)]


def summarize_moods(items: Iterable[MemoryItem]) -> List[str]:
    counts: Counter = Counter()
    for item in items:
        counts[item.metadata.mood or DEFAULT_MOOD] += 1
    return [f"{mood} ({count})" for mood, count in _top(counts, MAX_MOODS)]


def is_learning(content: str) -> bool:
    lowered = (content or "").lower()
    return any(marker in lowered for marker in LEARNING_MARKERS)


def extract_learnings(items: Iterable[MemoryItem]) -> List[str]:
    learnings: List[str] = []
    for item in items:
        if is_learning(item.content):
            learnings.append(item.content[:LEARNING_SNIPPET_LENGTH])
            if len(learnings) >= MAX_LEARNINGS:
                break
    return learnings


def weekly_summary(items: Sequence[MemoryItem]) -> WeeklyDigest:
    """Build the weekly digest from the most recent items (newest first)."""
    return WeeklyDigest(
        themes=summarize_themes(items),
        mood_summary=summarize_moods(items),
        top_learnings=extract_learnings(items),
        next_steps=list(NEXT_STEPS),
    )


def answer_query(items: Iterable[MemoryItem], query: str) -> str:
    """Answer a free-text query with matching memories, one per line."""
    query = "" if query is None else str(query)
    if not query.strip():
        return NO_MATCHES_ANSWER
    needle = query.lower()

    lines: List[str] = []
    for item in items:
        if matches_text(item, needle):
            lines.append(f"- {item.title}: {item.content[:ANSWER_SNIPPET_LENGTH]}")
            if len(lines) >= MAX_ANSWER_MATCHES:
                break
    return "\n".join(lines) if lines else NO_MATCHES_ANSWER
