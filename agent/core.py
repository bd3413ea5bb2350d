# agent/core.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from config.settings import Settings
from memory import MemoryItem, Store, answer_query, build_memory_item, weekly_summary
from memory.search import DEFAULT_SEARCH_LIMIT, RECENT_LIMIT
from memory.summary import WeeklyDigest
from prompts.builder import (
    DEFAULT_INFERENCE_OPTIONS,
    WEEKLY_SUMMARY_MODE,
    build_inference_prompt,
)
from raindrop import (
    RAINDROP_NOT_CONFIGURED,
    Failed,
    RaindropClient,
    RemoteResult,
    is_configured,
    raindrop_succeeded,
)

logger = logging.getLogger(__name__)

PROVIDER_RAINDROP = "raindrop"
PROVIDER_MOCK = "mock"


@dataclass
class SaveOutcome:
    """Result of a save request, whichever backend took it."""

    provider: str
    result: Any
    mock: bool = False

    def to_response(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "ok": True,
            "provider": self.provider,
            "result": self.result,
        }
        if self.mock:
            body["mock"] = True
        return body


class MemoryAgent:
    """Routes memory operations between Raindrop and the local store.

    Frontends (web UI, CLI) share this request flow. Saves prefer the
    remote provider when it is configured and fall back to the local store
    on any other outcome; local list/query/infer never touch the network;
    the remote-only search/recent/infer operations report "not configured"
    instead of calling out.
    """

    def __init__(
        self,
        settings: Settings,
        store: Store,
        client: Optional[RaindropClient] = None,
        success_predicate: Callable[[RemoteResult], bool] = raindrop_succeeded,
        recent_window: int = RECENT_LIMIT,
    ) -> None:
        self.settings = settings
        self.store = store
        self.client = client or RaindropClient(settings)
        self.success_predicate = success_predicate
        self.recent_window = recent_window

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------

    def remote_configured(self, family: str = "memory") -> bool:
        """Evaluated on every request so a changed Settings takes effect."""
        return is_configured(
            self.settings.raindrop_url,
            self.settings.api_key_for(family),
            self.settings.placeholder_markers,
        )

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save(self, payload: Mapping[str, Any]) -> SaveOutcome:
        """Save a memory, remotely if possible, otherwise locally.

        Only a failing local write escapes as an exception (`StoreError`).
        """
        item = build_memory_item(payload)
        item_dict = item.to_dict()

        if self.remote_configured("memory"):
            try:
                result = self.client.save_memory(item_dict)
            except Exception:
                logger.exception("Raindrop save raised; falling back to local store")
            else:
                if self.success_predicate(result):
                    logger.info("Saved memory %s via Raindrop", item.id)
                    return SaveOutcome(PROVIDER_RAINDROP, result.to_envelope())
                logger.warning(
                    "Raindrop save did not succeed (%s); falling back to local store",
                    result.to_envelope(),
                )
        else:
            logger.info("Raindrop not configured; saving memory %s locally", item.id)

        return self.save_local(item)

    def save_local(self, item: Union[MemoryItem, Mapping[str, Any]]) -> SaveOutcome:
        if not isinstance(item, MemoryItem):
            item = build_memory_item(item)
        self.store.append(item)
        return SaveOutcome(PROVIDER_MOCK, item.to_dict(), mock=True)

    # ------------------------------------------------------------------
    # Local read paths
    # ------------------------------------------------------------------

    def list_local(self, limit: int = RECENT_LIMIT) -> List[MemoryItem]:
        return self.store.list(limit)

    def query_local(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> List[MemoryItem]:
        return self.store.find(query, limit)

    def infer_local(
        self, mode: Optional[str], query: Optional[str] = None
    ) -> Union[WeeklyDigest, str]:
        recent = self.store.list(self.recent_window)
        if mode == WEEKLY_SUMMARY_MODE:
            return weekly_summary(recent)
        return answer_query(recent, "" if query is None else str(query))

    # ------------------------------------------------------------------
    # Remote-only paths
    # ------------------------------------------------------------------

    def search_remote(self, query: str, limit: int = RECENT_LIMIT) -> RemoteResult:
        if not self.remote_configured("query"):
            return Failed(RAINDROP_NOT_CONFIGURED, "Raindrop query service is not configured")
        return self.client.query(query, limit)

    def recent_remote(self, limit: int = RECENT_LIMIT) -> RemoteResult:
        if not self.remote_configured("memory"):
            return Failed(RAINDROP_NOT_CONFIGURED, "Raindrop memory service is not configured")
        return self.client.list_memories(limit)

    def infer_remote(
        self,
        mode: Optional[str],
        context_entries: Optional[Sequence[str]] = None,
        query: Optional[str] = None,
    ) -> RemoteResult:
        query = "" if query is None else str(query)
        if mode != WEEKLY_SUMMARY_MODE and not query.strip():
            raise ValueError("query is required unless mode is 'weekly_summary'")
        if not self.remote_configured("inference"):
            return Failed(RAINDROP_NOT_CONFIGURED, "Raindrop inference service is not configured")
        prompt = build_inference_prompt(mode, context_entries, query)
        return self.client.infer(prompt, DEFAULT_INFERENCE_OPTIONS)
