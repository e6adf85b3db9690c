"""Derivation rules that explain a target value from a source value."""

import re
from dataclasses import dataclass
from typing import Optional, Protocol

_WHITESPACE_RE = re.compile(r"\s+")


class FillRule(Protocol):
    """A column-to-column transformation."""

    @property
    def description(self) -> str: ...

    def derive(self, source: str) -> Optional[str]: ...


@dataclass(frozen=True)
class DelimiterSplitRule:
    """Take part ``part_index`` of the source split by ``delimiter``."""

    delimiter: str
    part_index: int

    @property
    def description(self) -> str:
        return f"Extract part {self.part_index + 1} of text split by {self.delimiter!r}"

    def derive(self, source: str) -> Optional[str]:
        parts = source.split(self.delimiter)
        if self.part_index >= len(parts):
            return None
        return parts[self.part_index].strip() or None


@dataclass(frozen=True)
class EmailRule:
    """Lowercase the source, drop whitespace and append ``@domain``."""

    domain: str

    @property
    def description(self) -> str:
        return f"Build email address (@{self.domain})"

    def derive(self, source: str) -> Optional[str]:
        local = _WHITESPACE_RE.sub("", source.strip().lower())
        return f"{local}@{self.domain}" if local else None


@dataclass(frozen=True)
class CaseRule:
    upper: bool

    @property
    def description(self) -> str:
        return "Convert to uppercase" if self.upper else "Convert to lowercase"

    def derive(self, source: str) -> Optional[str]:
        return source.upper() if self.upper else source.lower()


def compact_lower(text: str) -> str:
    return _WHITESPACE_RE.sub("", text.lower())
