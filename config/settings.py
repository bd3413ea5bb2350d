# config/settings.py

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

PROJECT_ROOT = Path(__file__).parent.parent

# Substrings that mark a URL as copied from documentation rather than
# pointing at a real deployment.
PLACEHOLDER_MARKERS: Tuple[str, ...] = (
    "example.com",
    "example.org",
    "example.net",
    "your-raindrop",
    "your-domain",
    "placeholder",
    "changeme",
)

# Logical service families of the Raindrop provider. Each family is
# selected by path prefix, authenticated with its own API key, and may
# require identity fields in the request body.
FAMILIES: Dict[str, Dict[str, Any]] = {
    "memory": {"prefix": "/smartmemory/", "key_env": "SMARTMEMORY_API_KEY", "identity": True},
    "query": {"prefix": "/smartsql/", "key_env": "SMARTSQL_API_KEY", "identity": True},
    "inference": {"prefix": "/smartinference/", "key_env": "SMARTINFERENCE_API_KEY", "identity": False},
}

REQUIRED_ENV = (
    "RAINDROP_MCP_URL",
    "SMARTMEMORY_API_KEY",
    "SMARTSQL_API_KEY",
    "SMARTINFERENCE_API_KEY",
    "RAINDROP_ORG_ID",
)

DEFAULT_STORE_PATH = "data/memories.json"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 5000


@dataclass
class Settings:
    """Resolved process configuration.

    Built once at startup by `load_settings` and passed explicitly to the
    components that need it, instead of reading the environment at call
    time.
    """

    raindrop_url: Optional[str] = None
    api_keys: Dict[str, Optional[str]] = field(default_factory=dict)
    organization_id: Optional[str] = None
    user_id: Optional[str] = None
    request_timeout: Optional[float] = None
    placeholder_markers: Tuple[str, ...] = PLACEHOLDER_MARKERS
    store_path: Path = PROJECT_ROOT / DEFAULT_STORE_PATH
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    def api_key_for(self, family: str) -> Optional[str]:
        return self.api_keys.get(family) or None

    def identity_fields(self) -> Dict[str, str]:
        fields: Dict[str, str] = {}
        if self.organization_id:
            fields["organization_id"] = self.organization_id
        if self.user_id:
            fields["user_id"] = self.user_id
        return fields

    def missing_env(self) -> List[str]:
        present = {
            "RAINDROP_MCP_URL": self.raindrop_url,
            "RAINDROP_ORG_ID": self.organization_id,
        }
        for family, conf in FAMILIES.items():
            present[conf["key_env"]] = self.api_key_for(family)
        return [name for name in REQUIRED_ENV if not present.get(name)]


def _load_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Load YAML settings from `config_path`, amigo.yaml or amigo.example.yaml.

    An explicitly requested file must exist; the default candidates are
    optional and built-in defaults apply when neither is present.
    """
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        candidates = [path]
    else:
        candidates = [
            PROJECT_ROOT / "amigo.yaml",
            PROJECT_ROOT / "amigo.example.yaml",
        ]

    for path in candidates:
        if path.exists():
            with open(path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
    return {}


def _env(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = environ.get(name)
    if value is None:
        return None
    return value.strip() or None


def load_settings(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Resolve Settings from the YAML config file and environment variables.

    Environment variables win over the file. Credentials and identity only
    ever come from the environment.
    """
    if environ is None:
        environ = os.environ
    config_path = config_path or _env(environ, "AMIGO_CONFIG")
    cfg = _load_config_file(config_path)

    server_cfg = cfg.get("server") or {}
    store_cfg = cfg.get("store") or {}
    raindrop_cfg = cfg.get("raindrop") or {}

    store_path = Path(
        _env(environ, "AMIGO_STORE_PATH")
        or store_cfg.get("path")
        or DEFAULT_STORE_PATH
    )
    if not store_path.is_absolute():
        store_path = PROJECT_ROOT / store_path

    markers = raindrop_cfg.get("placeholder_markers")
    if markers:
        placeholder_markers = tuple(str(m).lower() for m in markers)
    else:
        placeholder_markers = PLACEHOLDER_MARKERS

    timeout = raindrop_cfg.get("timeout")

    return Settings(
        raindrop_url=_env(environ, "RAINDROP_MCP_URL") or raindrop_cfg.get("url") or None,
        api_keys={
            family: _env(environ, conf["key_env"]) for family, conf in FAMILIES.items()
        },
        organization_id=_env(environ, "RAINDROP_ORG_ID"),
        user_id=_env(environ, "RAINDROP_USER_ID"),
        request_timeout=float(timeout) if timeout is not None else None,
        placeholder_markers=placeholder_markers,
        store_path=store_path,
        host=_env(environ, "AMIGO_WEB_HOST") or server_cfg.get("host") or DEFAULT_HOST,
        port=int(_env(environ, "AMIGO_WEB_PORT") or server_cfg.get("port") or DEFAULT_PORT),
    )
