# prompts/builder.py

from typing import Callable, Dict, Optional, Sequence

WEEKLY_SUMMARY_MODE = "weekly_summary"
QUERY_MODE = "query"

# Sampling options sent with every remote inference request.
DEFAULT_INFERENCE_OPTIONS = {"temperature": 0.2, "maxTokens": 500}


def _join_entries(entries: Sequence[str]) -> str:
    return "\n\n".join(str(e) for e in entries)


def build_weekly_summary_prompt(entries: Sequence[str], query: Optional[str] = None) -> str:
    """
    Fixed-template prompt asking the model for a weekly summary of the
    supplied memory entries. `query` is ignored.
    """
    return f"Write a weekly summary using:\n{_join_entries(entries)}"


def build_query_prompt(entries: Sequence[str], query: Optional[str] = None) -> str:
    """
    Question-answering prompt with the memory entries as supporting context.
    """
    return (
        f"Answer the query: {query or ''}\n"
        f"Using memory:\n{_join_entries(entries)}"
    )


MODE_BUILDERS: Dict[str, Callable[[Sequence[str], Optional[str]], str]] = {
    WEEKLY_SUMMARY_MODE: build_weekly_summary_prompt,
    QUERY_MODE: build_query_prompt,
}


def build_inference_prompt(
    mode: Optional[str],
    entries: Optional[Sequence[str]] = None,
    query: Optional[str] = None,
) -> str:
    """Build the remote inference prompt for `mode`.

    Any mode other than the weekly summary is answered as a query, which
    matches how clients have always called the endpoint.
    """
    builder = MODE_BUILDERS.get(mode or QUERY_MODE, build_query_prompt)
    return builder(list(entries or []), query)
