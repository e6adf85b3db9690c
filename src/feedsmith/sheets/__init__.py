"""Grid model: cells, styles and index-safe grid access."""

from .models import Cell, CellStyle, CellValue, CellPosition, CellUpdate, Grid, Row
from .grid import (
    cell_text,
    clone_grid,
    dump_grid,
    empty_cell,
    ensure_dimensions,
    generate_empty_sheet,
    get_cell,
    grid_from_json,
    grid_from_values,
    grid_to_json,
    grid_to_values,
    is_empty_sheet,
    is_empty_value,
    load_grid,
    max_width,
    rectangularize,
)

__all__ = [
    "Cell",
    "CellStyle",
    "CellValue",
    "CellPosition",
    "CellUpdate",
    "Grid",
    "Row",
    "cell_text",
    "clone_grid",
    "dump_grid",
    "empty_cell",
    "ensure_dimensions",
    "generate_empty_sheet",
    "get_cell",
    "grid_from_json",
    "grid_from_values",
    "grid_to_json",
    "grid_to_values",
    "is_empty_sheet",
    "is_empty_value",
    "load_grid",
    "max_width",
    "rectangularize",
]
