# config/__init__.py

from .settings import FAMILIES, PLACEHOLDER_MARKERS, Settings, load_settings

__all__ = ["FAMILIES", "PLACEHOLDER_MARKERS", "Settings", "load_settings"]
