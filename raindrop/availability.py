# raindrop/availability.py

from __future__ import annotations

from typing import Iterable, Optional

from config.settings import PLACEHOLDER_MARKERS


def is_configured(
    base_url: Optional[str],
    api_key: Optional[str],
    markers: Iterable[str] = PLACEHOLDER_MARKERS,
) -> bool:
    """Return True if the remote provider is worth calling at all.

    Checked in order: a missing URL, a URL that still contains a
    documentation placeholder, and a missing credential all mean
    "not configured".
    """
    url = (base_url or "").strip()
    if not url:
        return False

    lowered = url.lower()
    if any(marker.lower() in lowered for marker in markers):
        return False

    if not (api_key or "").strip():
        return False

    return True
