# memory/models.py

from __future__ import annotations

import threading
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

# Length of the title derived from content when the caller omits one.
TITLE_LENGTH = 40
DEFAULT_SOURCE = "voice"

_ID_LOCK = threading.Lock()
_last_id = 0


def new_memory_id() -> str:
    """Return a new opaque id that sorts after every id issued before it."""
    global _last_id
    with _ID_LOCK:
        candidate = time.time_ns()
        if candidate <= _last_id:
            candidate = _last_id + 1
        _last_id = candidate
    return str(candidate)


def utc_now_iso() -> str:
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [str(v) for v in value if v is not None]


def _optional_str(value: Any) -> Optional[str]:
    """Keep strings and plain scalars as text; anything else becomes None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (str, int, float)):
        text = str(value)
        return text or None
    return None


@dataclass
class MemoryMetadata:
    categories: List[str] = field(default_factory=list)
    mood: Optional[str] = None
    date: Optional[str] = field(default_factory=utc_now_iso)
    source: str = DEFAULT_SOURCE
    audio_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "MemoryMetadata":
        # Reads never invent values: a stored item without a date stays
        # without one.
        if not isinstance(data, Mapping):
            data = {}
        return cls(
            categories=_string_list(data.get("categories")),
            mood=_optional_str(data.get("mood")),
            date=_optional_str(data.get("date")),
            source=_optional_str(data.get("source")) or DEFAULT_SOURCE,
            audio_url=_optional_str(data.get("audio_url")),
        )


@dataclass
class MemoryItem:
    """A single stored memory entry.

    This is the only persisted entity. Items are created once and never
    mutated afterwards; the local store keeps them newest first.
    """

    id: str
    title: str
    content: str
    tags: List[str] = field(default_factory=list)
    metadata: MemoryMetadata = field(default_factory=MemoryMetadata)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MemoryItem":
        content = str(data.get("content") or "")
        return cls(
            id=str(data.get("id") or ""),
            title=str(data.get("title") or content[:TITLE_LENGTH]),
            content=content,
            tags=_string_list(data.get("tags")),
            metadata=MemoryMetadata.from_dict(data.get("metadata")),
        )


def build_memory_item(
    payload: Mapping[str, Any],
    *,
    now: Optional[str] = None,
) -> MemoryItem:
    """Build the canonical MemoryItem for a save request.

    Accepts the flat request shape used by the HTTP API
    (`title`, `content`, `tags`, `categories`, `mood`, `date`, `source`,
    `audio_url`) as well as the stored item shape with those metadata
    fields nested under `metadata`; flat keys win. When `content` is
    missing, a `transcript` produced by the speech-to-text step is used
    instead.
    """
    content = payload.get("content")
    if content is None:
        content = payload.get("transcript")
    content = "" if content is None else str(content)

    title = payload.get("title")
    if not title:
        title = content[:TITLE_LENGTH]

    nested = payload.get("metadata")
    if not isinstance(nested, Mapping):
        nested = {}

    def meta(name: str) -> Any:
        value = payload.get(name)
        return nested.get(name) if value is None else value

    metadata = MemoryMetadata(
        categories=_string_list(meta("categories")),
        mood=_optional_str(meta("mood")),
        date=_optional_str(meta("date")) or now or utc_now_iso(),
        source=_optional_str(meta("source")) or DEFAULT_SOURCE,
        audio_url=_optional_str(meta("audio_url")),
    )

    return MemoryItem(
        id=new_memory_id(),
        title=str(title),
        content=content,
        tags=_string_list(payload.get("tags")),
        metadata=metadata,
    )
