"""Find and replace."""

from .find_replace import (
    FindReplaceSession,
    ReplaceAllResult,
    ReplaceResult,
    SearchState,
    coerce_numeric,
    find_next,
    replace_all,
    replace_at,
)

__all__ = [
    "FindReplaceSession",
    "ReplaceAllResult",
    "ReplaceResult",
    "SearchState",
    "coerce_numeric",
    "find_next",
    "replace_all",
    "replace_at",
]
