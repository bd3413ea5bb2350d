# agent/__init__.py

from .core import PROVIDER_MOCK, PROVIDER_RAINDROP, MemoryAgent, SaveOutcome

__all__ = ["MemoryAgent", "SaveOutcome", "PROVIDER_MOCK", "PROVIDER_RAINDROP"]
