# raindrop/results.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Union

RAINDROP_NOT_CONFIGURED = "RAINDROP_NOT_CONFIGURED"
NO_VALID_KEY_FOR_ENDPOINT = "NO_VALID_KEY_FOR_ENDPOINT"
RAINDROP_CALL_FAILED = "RAINDROP_CALL_FAILED"


@dataclass
class Parsed:
    """Response body decoded as JSON."""

    data: Any
    status: int

    @property
    def http_ok(self) -> bool:
        return 200 <= self.status < 300

    def to_envelope(self) -> Dict[str, Any]:
        if isinstance(self.data, dict):
            return self.data
        return {"result": self.data}


@dataclass
class Raw:
    """Response body that was not JSON, kept as text with its status."""

    text: str
    status: int

    @property
    def http_ok(self) -> bool:
        return 200 <= self.status < 300

    def to_envelope(self) -> Dict[str, Any]:
        return {"raw": self.text, "status": self.status}


@dataclass
class Failed:
    """The call produced no HTTP response at all."""

    error: str
    message: str = ""

    http_ok = False

    def to_envelope(self) -> Dict[str, Any]:
        return {"ok": False, "error": self.error, "message": self.message}


RemoteResult = Union[Parsed, Raw, Failed]


def raindrop_succeeded(result: RemoteResult) -> bool:
    """Success predicate for Raindrop responses.

    A call counts as successful only when the body parsed as a JSON object,
    the HTTP status is 2xx, and the object either sets `ok` to exactly
    `True` or carries a non-null `result`. Raw text, failures, error
    statuses and truthy-but-unexpected bodies are all treated as failure.
    """
    if not isinstance(result, Parsed) or not result.http_ok:
        return False
    data = result.data
    if not isinstance(data, dict):
        return False
    return data.get("ok") is True or data.get("result") is not None
