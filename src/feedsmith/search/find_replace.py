"""Case-insensitive find and replace over the grid."""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from ..sheets.grid import cell_text, clone_grid, get_cell
from ..sheets.models import Cell, CellPosition, CellValue, Grid

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_INTEGER_RE = re.compile(r"[+-]?\d+")


@dataclass
class ReplaceResult:
    """Result of replacing a single occurrence."""

    grid: Grid
    replaced: bool
    next_position: Optional[CellPosition] = None


@dataclass
class ReplaceAllResult:
    """Result of a bulk replace."""

    grid: Grid
    cells_changed: int


class SearchState(str, Enum):
    IDLE = "idle"
    POSITIONED = "positioned"


def coerce_numeric(text: str) -> CellValue:
    """Return ``text`` as an int or float if it reads as a number."""
    stripped = text.strip()
    if not _NUMBER_RE.fullmatch(stripped):
        return text
    if _INTEGER_RE.fullmatch(stripped):
        return int(stripped)
    return float(stripped)


def _pattern(query: str) -> re.Pattern:
    return re.compile(re.escape(query), re.IGNORECASE)


def _iter_cells(grid: Grid) -> Iterator[tuple[int, int, Cell]]:
    for r, row in enumerate(grid):
        for c, cell in enumerate(row or []):
            if cell is not None:
                yield r, c, cell


def _matches(cell: Cell, needle: str) -> bool:
    return needle in cell_text(cell.value).lower()


def find_next(
    grid: Grid, query: str, from_position: Optional[CellPosition] = None
) -> Optional[CellPosition]:
    """
    Find the next cell containing ``query`` (case-insensitive).

    Scans row-major starting just after ``from_position``. On reaching the
    end it wraps to the origin and stops at the starting cell, so a lone
    match at the start is found again and the scan never loops.

    Args:
        grid: The sheet to search
        query: Substring to look for
        from_position: Current position, or None to start at the origin

    Returns:
        The position of the next match, or None if there is none
    """
    if not query:
        return None
    needle = query.lower()
    start = (from_position.row, from_position.col) if from_position else None

    for r, c, cell in _iter_cells(grid):
        if start is not None and (r, c) <= start:
            continue
        if _matches(cell, needle):
            return CellPosition(row=r, col=c)

    if start is None:
        return None

    for r, c, cell in _iter_cells(grid):
        if (r, c) > start:
            break
        if _matches(cell, needle):
            return CellPosition(row=r, col=c)

    return None


def replace_at(
    grid: Grid, position: CellPosition, query: str, replacement: str
) -> ReplaceResult:
    """Replace the first occurrence of ``query`` in one cell, then advance."""
    text = cell_text(get_cell(grid, position.row, position.col).value)
    pattern = _pattern(query) if query else None

    if pattern is None or not pattern.search(text):
        return ReplaceResult(
            grid=grid, replaced=False, next_position=find_next(grid, query, position)
        )

    new_grid = clone_grid(grid)
    new_text = pattern.sub(lambda _m: replacement, text, count=1)
    new_grid[position.row][position.col].value = coerce_numeric(new_text)

    return ReplaceResult(
        grid=new_grid,
        replaced=True,
        next_position=find_next(new_grid, query, position),
    )


def replace_all(grid: Grid, query: str, replacement: str) -> ReplaceAllResult:
    """Replace every occurrence of ``query`` in every cell."""
    if not query:
        return ReplaceAllResult(grid=grid, cells_changed=0)

    pattern = _pattern(query)
    new_grid = clone_grid(grid)
    changed = 0

    for _r, _c, cell in _iter_cells(new_grid):
        text = cell_text(cell.value)
        if not pattern.search(text):
            continue
        cell.value = coerce_numeric(pattern.sub(lambda _m: replacement, text))
        changed += 1

    logger.info(f"Replaced '{query}' with '{replacement}' in {changed} cells")
    return ReplaceAllResult(grid=new_grid, cells_changed=changed)


class FindReplaceSession:
    """Tracks the current match position between find/replace steps."""

    def __init__(self):
        self.position: Optional[CellPosition] = None

    @property
    def state(self) -> SearchState:
        return SearchState.IDLE if self.position is None else SearchState.POSITIONED

    def reset(self):
        self.position = None

    def find_next(self, grid: Grid, query: str) -> Optional[CellPosition]:
        """Advance to the next match; resets to idle when nothing matches."""
        self.position = find_next(grid, query, self.position)
        return self.position

    def replace(self, grid: Grid, query: str, replacement: str) -> ReplaceResult:
        """Replace at the current match (finding one first if idle)."""
        if self.position is None:
            self.position = find_next(grid, query)
            if self.position is None:
                return ReplaceResult(grid=grid, replaced=False)

        result = replace_at(grid, self.position, query, replacement)
        self.position = result.next_position
        return result

    def replace_all(self, grid: Grid, query: str, replacement: str) -> ReplaceAllResult:
        self.reset()
        return replace_all(grid, query, replacement)
