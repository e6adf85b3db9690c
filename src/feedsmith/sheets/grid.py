"""Index-safe access and normalization for ragged grids.

Rows may be missing or shorter than their neighbours. Every reader goes
through :func:`get_cell`, which normalizes absence to an empty cell, and
every structural writer calls :func:`ensure_dimensions` first.
"""

import json
import logging
from typing import Any, Iterable, Optional

from ..config import settings
from .models import Cell, CellStyle, CellValue, Grid, Row

logger = logging.getLogger(__name__)


def empty_cell() -> Cell:
    """Return a fresh empty cell with an empty style."""
    return Cell(value="", style=CellStyle())


def is_empty_value(value: Any) -> bool:
    return value is None or value == ""


def cell_text(value: Any) -> str:
    """Stringify a cell value the way the spreadsheet displays it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def get_cell(grid: Grid, row: int, col: int) -> Cell:
    """Return the cell at (row, col), or an empty cell if it does not exist."""
    if row < 0 or col < 0 or row >= len(grid):
        return empty_cell()
    cells = grid[row]
    if not cells or col >= len(cells) or cells[col] is None:
        return empty_cell()
    return cells[col]


def max_width(grid: Grid) -> int:
    """Length of the widest row, 0 for an empty grid."""
    return max((len(r) for r in grid if r), default=0)


def ensure_dimensions(grid: Grid, row: int, col: int) -> Grid:
    """Grow ``grid`` in place so that (row, col) exists.

    New rows are as wide as the widest existing row (or the configured
    default width for an empty grid), and never narrower than ``col + 1``.
    """
    baseline = max_width(grid) or settings.default_column_count
    width = max(baseline, col + 1)

    while len(grid) <= row:
        grid.append([empty_cell() for _ in range(width)])

    if grid[row] is None:
        grid[row] = []
    cells = grid[row]
    while len(cells) <= col:
        cells.append(empty_cell())

    return grid


def rectangularize(grid: Grid, width: int) -> Grid:
    """Pad every row in place to at least ``width`` cells."""
    for r, cells in enumerate(grid):
        if cells is None:
            cells = grid[r] = []
        while len(cells) < width:
            cells.append(empty_cell())
    return grid


def is_empty_sheet(grid: Grid) -> bool:
    """True if no cell in the grid holds a value."""
    return not any(
        cell is not None and not cell.is_empty for row in grid if row for cell in row
    )


def clone_grid(grid: Grid) -> Grid:
    """Deep copy a grid so the copy shares no cells or styles."""
    return [[cell.model_copy(deep=True) for cell in row] if row else [] for row in grid]


def row_from_values(values: Iterable[CellValue]) -> Row:
    return [Cell(value=v, style=CellStyle()) for v in values]


def grid_from_values(rows: Iterable[Iterable[CellValue]]) -> Grid:
    """Build a grid of unstyled cells from plain value arrays."""
    return [row_from_values(r) for r in rows]


def grid_to_values(grid: Grid) -> list[list[CellValue]]:
    return [[cell.value for cell in row] if row else [] for row in grid]


def generate_empty_sheet(rows: Optional[int] = None, cols: Optional[int] = None) -> Grid:
    """Create a blank rectangular sheet."""
    rows = settings.default_row_count if rows is None else rows
    cols = settings.default_column_count if cols is None else cols
    return [[empty_cell() for _ in range(cols)] for _ in range(rows)]


def _coerce_cell(raw: Any) -> Cell:
    if isinstance(raw, Cell):
        return raw.model_copy(deep=True)
    if isinstance(raw, dict):
        return Cell.model_validate(raw)
    if raw is None:
        return empty_cell()
    return Cell(value=raw, style=CellStyle())


def grid_from_json(data: Any) -> Grid:
    """Normalize a persisted array-of-array-of-cell-objects into a grid.

    Missing rows become empty rows and missing cells become empty cells.
    """
    if not isinstance(data, list):
        raise ValueError("Grid snapshot must be a JSON array of rows")
    grid: Grid = []
    for raw_row in data:
        if not isinstance(raw_row, list):
            grid.append([])
            continue
        grid.append([_coerce_cell(raw) for raw in raw_row])
    return grid


def grid_to_json(grid: Grid) -> list[list[dict]]:
    """Serialize a grid to plain JSON-compatible data (camelCase keys)."""
    return [
        [cell.model_dump(by_alias=True, exclude_unset=True) for cell in row] if row else []
        for row in grid
    ]


def load_grid(text: str) -> Grid:
    return grid_from_json(json.loads(text))


def dump_grid(grid: Grid, indent: Optional[int] = None) -> str:
    return json.dumps(grid_to_json(grid), indent=indent, ensure_ascii=False)
