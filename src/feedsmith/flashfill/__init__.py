"""Flash fill pattern inference."""

from .engine import DELIMITERS, FlashFillEngine
from .models import FlashFillSuggestion
from .rules import CaseRule, DelimiterSplitRule, EmailRule

__all__ = [
    "DELIMITERS",
    "FlashFillEngine",
    "FlashFillSuggestion",
    "CaseRule",
    "DelimiterSplitRule",
    "EmailRule",
]
