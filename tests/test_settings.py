"""Tests for configuration loading (.env files, YAML config, environment)."""

import os

import pytest

from config.settings import PLACEHOLDER_MARKERS, PROJECT_ROOT, load_settings
from env_loader import load_env


# ============================================================================
# load_settings
# ============================================================================

def test_environment_values_are_stripped(tmp_path):
    settings = load_settings(
        config_path=None,
        environ={
            "RAINDROP_MCP_URL": "  https://mcp.raindrop.test  ",
            "SMARTMEMORY_API_KEY": " mem ",
            "SMARTSQL_API_KEY": "sql",
            "SMARTINFERENCE_API_KEY": "",
            "RAINDROP_ORG_ID": "org",
            "AMIGO_STORE_PATH": str(tmp_path / "m.json"),
        },
    )

    assert settings.raindrop_url == "https://mcp.raindrop.test"
    assert settings.api_key_for("memory") == "mem"
    assert settings.api_key_for("query") == "sql"
    assert settings.api_key_for("inference") is None
    assert settings.identity_fields() == {"organization_id": "org"}
    assert settings.store_path == tmp_path / "m.json"


def test_missing_env_lists_absent_variables():
    settings = load_settings(environ={"RAINDROP_MCP_URL": "https://x.test"})

    assert settings.missing_env() == [
        "SMARTMEMORY_API_KEY",
        "SMARTSQL_API_KEY",
        "SMARTINFERENCE_API_KEY",
        "RAINDROP_ORG_ID",
    ]


def test_yaml_file_supplies_server_and_store(tmp_path):
    config = tmp_path / "amigo.yaml"
    config.write_text(
        "server:\n"
        "  host: 127.0.0.1\n"
        "  port: 8123\n"
        "store:\n"
        "  path: relative/memories.json\n"
        "raindrop:\n"
        "  timeout: 12\n"
        "  placeholder_markers: [Staging]\n",
        encoding="utf-8",
    )

    settings = load_settings(str(config), environ={})

    assert settings.host == "127.0.0.1"
    assert settings.port == 8123
    assert settings.store_path == PROJECT_ROOT / "relative" / "memories.json"
    assert settings.request_timeout == 12.0
    assert settings.placeholder_markers == ("staging",)


def test_environment_overrides_yaml(tmp_path):
    config = tmp_path / "amigo.yaml"
    config.write_text("server:\n  port: 8123\n", encoding="utf-8")

    settings = load_settings(
        environ={"AMIGO_CONFIG": str(config), "AMIGO_WEB_PORT": "9000"}
    )

    assert settings.port == 9000


def test_empty_yaml_uses_defaults(tmp_path):
    config = tmp_path / "amigo.yaml"
    config.write_text("", encoding="utf-8")

    settings = load_settings(str(config), environ={})

    assert settings.port == 5000
    assert settings.placeholder_markers == PLACEHOLDER_MARKERS
    assert settings.request_timeout is None


def test_explicit_missing_config_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(str(tmp_path / "nope.yaml"), environ={})


# ============================================================================
# load_env
# ============================================================================

@pytest.fixture
def clean_env(monkeypatch):
    for key in ("AMIGO_TEST_A", "AMIGO_TEST_B", "AMIGO_TEST_C", "AMIGO_TEST_KEEP"):
        monkeypatch.delenv(key, raising=False)
    yield monkeypatch


def test_load_env_reads_file(tmp_path, clean_env):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\n"
        "\n"
        "AMIGO_TEST_A=plain\n"
        "export AMIGO_TEST_B=\"quoted value\"\n"
        "AMIGO_TEST_C='single'\n"
        "not a pair\n",
        encoding="utf-8",
    )

    loaded = load_env(str(env_file))

    assert loaded == ["AMIGO_TEST_A", "AMIGO_TEST_B", "AMIGO_TEST_C"]
    assert os.environ["AMIGO_TEST_A"] == "plain"
    assert os.environ["AMIGO_TEST_B"] == "quoted value"
    assert os.environ["AMIGO_TEST_C"] == "single"
    for key in loaded:
        os.environ.pop(key, None)


def test_load_env_keeps_existing_values(tmp_path, clean_env):
    clean_env.setenv("AMIGO_TEST_KEEP", "from-shell")
    env_file = tmp_path / ".env"
    env_file.write_text("AMIGO_TEST_KEEP=from-file\n", encoding="utf-8")

    assert load_env(str(env_file)) == []
    assert os.environ["AMIGO_TEST_KEEP"] == "from-shell"


def test_load_env_missing_file(tmp_path):
    assert load_env(str(tmp_path / "absent.env")) == []
