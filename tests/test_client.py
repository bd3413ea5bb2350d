"""Unit tests for the Raindrop HTTP adapter and its tagged results."""

import requests

from config.settings import Settings
from raindrop import (
    NO_VALID_KEY_FOR_ENDPOINT,
    RAINDROP_CALL_FAILED,
    Failed,
    Parsed,
    RaindropClient,
    Raw,
    family_for_path,
    raindrop_succeeded,
)

from conftest import make_response


def _sent(http):
    args, kwargs = http.request.call_args
    return args, kwargs


# ============================================================================
# Routing and credentials
# ============================================================================

def test_family_for_path():
    assert family_for_path("/smartmemory/save") == "memory"
    assert family_for_path("/smartsql/query") == "query"
    assert family_for_path("/smartinference/infer") == "inference"
    assert family_for_path("/somethingelse") is None


def test_uses_per_family_bearer_key(configured_settings, http):
    client = RaindropClient(configured_settings, session=http)

    client.query("coffee", 5)

    args, kwargs = _sent(http)
    assert args == ("POST", "https://mcp.raindrop.test/v1/smartsql/query")
    assert kwargs["headers"]["Authorization"] == "Bearer sql-key"
    assert kwargs["json"]["query"] == "coffee"
    assert kwargs["json"]["limit"] == 5


def test_unknown_path_has_no_valid_key(configured_settings, http):
    client = RaindropClient(configured_settings, session=http)

    result = client.call("/unknown/op")

    assert isinstance(result, Failed)
    assert result.error == NO_VALID_KEY_FOR_ENDPOINT
    http.request.assert_not_called()


def test_missing_family_key_has_no_valid_key(configured_settings, http):
    configured_settings.api_keys["inference"] = None
    client = RaindropClient(configured_settings, session=http)

    result = client.infer("hello")

    assert isinstance(result, Failed)
    assert result.error == NO_VALID_KEY_FOR_ENDPOINT
    http.request.assert_not_called()


# ============================================================================
# Identity injection
# ============================================================================

def test_identity_injected_for_memory_family(configured_settings, http):
    client = RaindropClient(configured_settings, session=http)

    client.save_memory({"title": "t", "content": "c"})

    body = _sent(http)[1]["json"]
    assert body["organization_id"] == "org-1"
    assert body["user_id"] == "user-1"
    assert body["content"] == "c"


def test_identity_does_not_overwrite_caller_values(configured_settings, http):
    client = RaindropClient(configured_settings, session=http)

    client.call("/smartmemory/save", payload={"organization_id": "mine"})

    body = _sent(http)[1]["json"]
    assert body["organization_id"] == "mine"
    assert body["user_id"] == "user-1"


def test_identity_not_injected_for_inference(configured_settings, http):
    client = RaindropClient(configured_settings, session=http)

    client.infer("prompt", {"temperature": 0.2})

    body = _sent(http)[1]["json"]
    assert "organization_id" not in body
    assert "user_id" not in body
    assert body == {"prompt": "prompt", "options": {"temperature": 0.2}}


def test_absent_identity_values_are_skipped(store_path, http):
    settings = Settings(
        raindrop_url="https://mcp.raindrop.test",
        api_keys={"memory": "k"},
        store_path=store_path,
    )
    RaindropClient(settings, session=http).list_memories(3)

    assert _sent(http)[1]["json"] == {"limit": 3}


def test_caller_payload_is_not_mutated(configured_settings, http):
    payload = {"content": "c"}
    RaindropClient(configured_settings, session=http).save_memory(payload)
    assert payload == {"content": "c"}


# ============================================================================
# Response handling
# ============================================================================

def test_network_failure_becomes_failed_result(configured_settings, http):
    http.request.side_effect = requests.ConnectionError("connection refused")
    client = RaindropClient(configured_settings, session=http)

    result = client.save_memory({"content": "c"})

    assert isinstance(result, Failed)
    assert result.error == RAINDROP_CALL_FAILED
    assert "connection refused" in result.message
    assert result.to_envelope() == {
        "ok": False,
        "error": RAINDROP_CALL_FAILED,
        "message": "connection refused",
    }


def test_json_body_is_parsed(configured_settings, http):
    http.request.return_value = make_response(200, {"ok": True, "result": [1, 2]})

    result = RaindropClient(configured_settings, session=http).list_memories()

    assert result == Parsed({"ok": True, "result": [1, 2]}, 200)
    assert result.to_envelope() == {"ok": True, "result": [1, 2]}


def test_non_json_body_keeps_text_and_status(configured_settings, http):
    http.request.return_value = make_response(502, text="<html>Bad Gateway</html>")

    result = RaindropClient(configured_settings, session=http).list_memories()

    assert result == Raw("<html>Bad Gateway</html>", 502)
    assert result.to_envelope() == {"raw": "<html>Bad Gateway</html>", "status": 502}
    assert not result.http_ok


def test_timeout_comes_from_settings(configured_settings, http):
    configured_settings.request_timeout = 7.5
    RaindropClient(configured_settings, session=http).list_memories()
    assert _sent(http)[1]["timeout"] == 7.5


def test_no_timeout_by_default(configured_settings, http):
    RaindropClient(configured_settings, session=http).list_memories()
    assert _sent(http)[1]["timeout"] is None


# ============================================================================
# Success predicate
# ============================================================================

def test_success_requires_ok_true_or_result():
    assert raindrop_succeeded(Parsed({"ok": True}, 200))
    assert raindrop_succeeded(Parsed({"result": {"id": "x"}}, 201))
    assert not raindrop_succeeded(Parsed({"ok": "yes"}, 200))
    assert not raindrop_succeeded(Parsed({"result": None}, 200))
    assert not raindrop_succeeded(Parsed({"message": "queued"}, 200))


def test_success_rejects_errors_and_non_objects():
    assert not raindrop_succeeded(Parsed({"ok": True}, 500))
    assert not raindrop_succeeded(Parsed([1, 2, 3], 200))
    assert not raindrop_succeeded(Raw('{"ok": true}', 200))
    assert not raindrop_succeeded(Failed(RAINDROP_CALL_FAILED, "boom"))


def test_parsed_non_mapping_is_wrapped():
    assert Parsed([1], 200).to_envelope() == {"result": [1]}
