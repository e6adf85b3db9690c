"""Flatten a grid into header-keyed records and infer a schema."""

import logging
import re
from typing import Any

from ..sheets.grid import cell_text, get_cell, is_empty_value
from ..sheets.models import CellValue, Grid
from .models import ColumnType, SchemaColumn, TableSchema

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"[^a-zA-Z0-9]")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")

SCHEMA_SAMPLE_ROWS = 5


def sanitize_key(header: str) -> str:
    """Turn header text into a record key: non-alphanumerics become '_'."""
    return _KEY_RE.sub("_", header).lower()


def _headers(grid: Grid) -> list[str]:
    return [cell_text(get_cell(grid, 0, c).value).strip() for c in range(len(grid[0] or []))]


def _value_or_none(grid: Grid, row: int, col: int) -> CellValue:
    cells = grid[row] or []
    if col < len(cells) and cells[col] is not None:
        return cells[col].value
    return None


def sheet_to_records(grid: Grid) -> list[dict[str, Any]]:
    """
    Convert data rows into objects keyed by sanitized header names.

    Row 0 is the header row. Columns with an empty header are dropped and
    missing cells become None.
    """
    if len(grid) < 2:
        return []

    keyed = [(c, sanitize_key(h)) for c, h in enumerate(_headers(grid)) if h]
    return [
        {key: _value_or_none(grid, r, c) for c, key in keyed} for r in range(1, len(grid))
    ]


def detect_type(value: CellValue) -> ColumnType:
    if isinstance(value, bool):
        return "Boolean"
    if isinstance(value, (int, float)):
        return "Number"
    text = str(value)
    if _DATE_RE.match(text):
        return "Date"
    if text.startswith("http"):
        return "URL"
    return "String"


def infer_schema(grid: Grid, table_name: str = "MyTable") -> TableSchema:
    """Infer column types from the first non-empty value in the sample rows."""
    if not grid:
        return TableSchema(table_name=table_name, columns=[], record_count=0)

    sample_rows = range(1, min(len(grid), 1 + SCHEMA_SAMPLE_ROWS))
    columns = []
    for c, header in enumerate(_headers(grid)):
        if not header:
            continue

        detected: ColumnType = "Unknown"
        sample: CellValue = None
        for r in sample_rows:
            value = get_cell(grid, r, c).value
            if not is_empty_value(value):
                sample = value
                detected = detect_type(value)
                break

        columns.append(
            SchemaColumn(
                name=header,
                key=sanitize_key(header),
                type="String" if detected == "Unknown" else detected,
                sample=sample,
            )
        )

    logger.debug(f"Inferred {len(columns)} columns for table '{table_name}'")
    return TableSchema(table_name=table_name, columns=columns, record_count=len(grid) - 1)
