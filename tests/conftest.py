"""Shared fixtures for Memory Amigo tests."""

import json
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest

from config.settings import Settings
from memory import JsonFileStore


def make_response(status: int = 200, body: Any = None, text: Optional[str] = None):
    """Build a requests.Response look-alike.

    With `text` set the body is treated as non-JSON.
    """
    resp = MagicMock()
    resp.status_code = status
    if text is not None:
        resp.text = text
        resp.json.side_effect = ValueError("not json")
    else:
        resp.text = json.dumps(body)
        resp.json.return_value = body
    return resp


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data" / "memories.json"


@pytest.fixture
def store(store_path):
    return JsonFileStore(store_path)


@pytest.fixture
def configured_settings(store_path):
    """Settings that point at a plausible, fully credentialed Raindrop."""
    return Settings(
        raindrop_url="https://mcp.raindrop.test/v1",
        api_keys={
            "memory": "mem-key",
            "query": "sql-key",
            "inference": "inf-key",
        },
        organization_id="org-1",
        user_id="user-1",
        store_path=store_path,
    )


@pytest.fixture
def unconfigured_settings(store_path):
    return Settings(raindrop_url=None, api_keys={}, store_path=store_path)


@pytest.fixture
def http():
    """Stand-in for the requests module used by RaindropClient."""
    session = MagicMock()
    session.request.return_value = make_response(200, {"ok": True, "result": {"id": "r1"}})
    return session
