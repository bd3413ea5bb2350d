# prompts/__init__.py

from .builder import (
    DEFAULT_INFERENCE_OPTIONS,
    QUERY_MODE,
    WEEKLY_SUMMARY_MODE,
    build_inference_prompt,
)

__all__ = [
    "DEFAULT_INFERENCE_OPTIONS",
    "QUERY_MODE",
    "WEEKLY_SUMMARY_MODE",
    "build_inference_prompt",
]
