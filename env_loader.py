# env_loader.py

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def load_env(path: Optional[str] = None) -> List[str]:
    """Populate os.environ from a .env-style file and return the keys set.

    - Blank lines and lines starting with '#' are skipped.
    - An optional leading `export ` is accepted.
    - Matching single or double quotes around the value are stripped.
    - Keys already present in os.environ are left alone, so real
      environment variables always win over the file.
    """
    env_path = Path(path or ".env")
    if not env_path.is_file():
        return []

    try:
        content = env_path.read_text(encoding="utf-8")
    except OSError:
        return []

    loaded: List[str] = []
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        if line.startswith("export "):
            line = line[len("export "):]
        key, value = line.split("=", 1)
        key = key.strip()
        if not key or key in os.environ:
            continue
        os.environ[key] = _unquote(value.strip())
        loaded.append(key)
    return loaded
