# raindrop/client.py

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import requests

from config.settings import FAMILIES, Settings
from .results import (
    NO_VALID_KEY_FOR_ENDPOINT,
    RAINDROP_CALL_FAILED,
    Failed,
    Parsed,
    Raw,
    RemoteResult,
)

logger = logging.getLogger(__name__)

SAVE_PATH = "/smartmemory/save"
LIST_PATH = "/smartmemory/list"
QUERY_PATH = "/smartsql/query"
INFER_PATH = "/smartinference/infer"


def family_for_path(path: str) -> Optional[str]:
    """Map an operation path to its service family, or None if unknown."""
    for family, conf in FAMILIES.items():
        if path.startswith(conf["prefix"]):
            return family
    return None


class RaindropClient:
    """HTTP adapter for the Raindrop memory/query/inference provider.

    Every call returns a tagged `RemoteResult`; network failures, missing
    credentials and non-JSON bodies are reported as values, never raised.
    """

    def __init__(self, settings: Settings, session: Any = None) -> None:
        self.settings = settings
        # Anything with a requests-style `request()` works; the module
        # itself is the default.
        self.http = session or requests

    @property
    def base_url(self) -> str:
        return (self.settings.raindrop_url or "").rstrip("/")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def call(
        self,
        path: str,
        method: str = "POST",
        payload: Optional[Dict[str, Any]] = None,
    ) -> RemoteResult:
        family, api_key = self._credential_for(path)
        if api_key is None:
            logger.warning("No API key available for Raindrop endpoint %s", path)
            return Failed(NO_VALID_KEY_FOR_ENDPOINT, f"No valid key for {path}")

        body: Dict[str, Any] = dict(payload or {})
        if FAMILIES[family]["identity"]:
            for name, value in self.settings.identity_fields().items():
                body.setdefault(name, value)

        url = f"{self.base_url}{path}"
        try:
            resp = self.http.request(
                method,
                url,
                json=body,
                headers=self._headers(api_key),
                timeout=self.settings.request_timeout,
            )
        except requests.RequestException as e:
            logger.error("Raindrop request to %s failed: %s", url, e)
            return Failed(RAINDROP_CALL_FAILED, str(e))

        if resp.status_code >= 400:
            logger.error(
                "Raindrop request to %s failed with status %s: %s",
                url,
                resp.status_code,
                resp.text,
            )

        try:
            return Parsed(resp.json(), resp.status_code)
        except ValueError:
            return Raw(resp.text, resp.status_code)

    def save_memory(self, item: Dict[str, Any]) -> RemoteResult:
        return self.call(SAVE_PATH, payload=item)

    def list_memories(self, limit: int = 20) -> RemoteResult:
        return self.call(LIST_PATH, payload={"limit": limit})

    def query(self, text: str, limit: int = 20) -> RemoteResult:
        return self.call(QUERY_PATH, payload={"query": text, "limit": limit})

    def infer(self, prompt: str, options: Optional[Dict[str, Any]] = None) -> RemoteResult:
        payload: Dict[str, Any] = {"prompt": prompt}
        if options:
            payload["options"] = dict(options)
        return self.call(INFER_PATH, payload=payload)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _credential_for(self, path: str) -> Tuple[Optional[str], Optional[str]]:
        family = family_for_path(path)
        if family is None:
            return None, None
        return family, self.settings.api_key_for(family)

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
