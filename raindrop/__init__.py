# raindrop/__init__.py

from .availability import is_configured
from .client import RaindropClient, family_for_path
from .results import (
    NO_VALID_KEY_FOR_ENDPOINT,
    RAINDROP_CALL_FAILED,
    RAINDROP_NOT_CONFIGURED,
    Failed,
    Parsed,
    Raw,
    RemoteResult,
    raindrop_succeeded,
)

__all__ = [
    "is_configured",
    "RaindropClient",
    "family_for_path",
    "NO_VALID_KEY_FOR_ENDPOINT",
    "RAINDROP_CALL_FAILED",
    "RAINDROP_NOT_CONFIGURED",
    "Failed",
    "Parsed",
    "Raw",
    "RemoteResult",
    "raindrop_succeeded",
]
